"""
Auth endpoints — login and current user.

Accounts are created by admins (see routers/users.py); there is no
self-registration.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from .. import models, schemas
from ..auth import authenticate, create_access_token, get_current_user
from ..database import get_db

router = APIRouter(prefix="/auth", tags=["auth"])


class LoginRequest(BaseModel):
    username: str
    password: str


def user_to_response(user: models.User) -> dict:
    """Convert User model to response dict. password_hash is never exposed."""
    return schemas.User.model_validate(user).model_dump(mode="json")


@router.post("/login")
def login(request: LoginRequest, db: Session = Depends(get_db)):
    """Authenticate with username + password. Returns a bearer token."""
    user = authenticate(db, request.username, request.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
        )
    return {
        "access_token": create_access_token(user),
        "token_type": "bearer",
        "user": user_to_response(user),
    }


@router.get("/me")
def me(current_user: models.User = Depends(get_current_user)):
    """Return the current authenticated user."""
    return user_to_response(current_user)
