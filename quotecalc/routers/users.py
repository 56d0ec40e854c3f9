from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import models, schemas
from ..auth import hash_password, require_admin
from ..database import get_db
from .auth import user_to_response

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/")
def list_users(db: Session = Depends(get_db), admin: models.User = Depends(require_admin)):
    users = db.query(models.User).order_by(models.User.username).all()
    return [user_to_response(u) for u in users]


@router.post("/")
def create_user(
    user: schemas.UserCreate,
    db: Session = Depends(get_db),
    admin: models.User = Depends(require_admin),
):
    if db.query(models.User).filter(models.User.username == user.username).first():
        raise HTTPException(status_code=409, detail="Username already exists")
    db_user = models.User(
        username=user.username,
        password_hash=hash_password(user.password),
        is_admin=user.is_admin,
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return user_to_response(db_user)


@router.put("/{user_id}")
def update_user(
    user_id: int,
    update: schemas.UserUpdate,
    db: Session = Depends(get_db),
    admin: models.User = Depends(require_admin),
):
    user = db.query(models.User).filter(models.User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    data = update.model_dump(exclude_unset=True)
    if data.get("username") and data["username"] != user.username:
        taken = db.query(models.User).filter(models.User.username == data["username"]).first()
        if taken:
            raise HTTPException(status_code=409, detail="Username already exists")
        user.username = data["username"]
    if data.get("password"):
        user.password_hash = hash_password(data["password"])
    if data.get("is_admin") is not None:
        user.is_admin = data["is_admin"]

    db.commit()
    db.refresh(user)
    return user_to_response(user)


@router.delete("/{user_id}")
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    admin: models.User = Depends(require_admin),
):
    if user_id == admin.id:
        raise HTTPException(status_code=400, detail="You cannot delete your own account")
    user = db.query(models.User).filter(models.User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    db.delete(user)
    db.commit()
    return {"ok": True}
