"""
Cart API — the current user's live quote.

GET    /api/cart                                   — lines, company name, total
POST   /api/cart/preview                           — price a line without committing it
POST   /api/cart/lines                             — commit a priced line
DELETE /api/cart/lines/{index}                     — remove a line
POST   /api/cart/lines/{index}/move-up             — swap with the line above
POST   /api/cart/lines/{index}/move-down           — swap with the line below
POST   /api/cart/lines/{index}/features            — attach a custom feature
DELETE /api/cart/lines/{index}/features/{id}       — detach a custom feature
PUT    /api/cart/company                           — set the company name
DELETE /api/cart                                   — empty the cart

Each request loads the cart from cart_sessions, applies one QuoteCart
operation and stores it back. A failed operation is never saved.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import flag_modified

from .. import catalog, models, pricing, schemas
from ..auth import get_current_user
from ..cart import QuoteCart
from ..database import get_db
from ..errors import IndexOutOfRange, MissingDimension, QuoteError

router = APIRouter(prefix="/cart", tags=["cart"])


def load_cart(db: Session, user: models.User) -> tuple:
    """Return (CartSession row, QuoteCart) for a user, creating the row on first use."""
    row = db.query(models.CartSession).filter(models.CartSession.user_id == user.id).first()
    if row is None:
        row = models.CartSession(user_id=user.id, cart_json={})
        db.add(row)
        db.flush()
    return row, QuoteCart.from_dict(row.cart_json)


def save_cart(db: Session, row: models.CartSession, cart: QuoteCart):
    # Use flag_modified for JSON columns on SQLite
    row.cart_json = cart.to_dict()
    flag_modified(row, "cart_json")
    db.commit()


def quote_error_to_http(error: QuoteError) -> HTTPException:
    """Map engine errors to HTTP status codes."""
    if isinstance(error, IndexOutOfRange):
        return HTTPException(status_code=404, detail=str(error))
    detail = {"message": str(error)}
    if isinstance(error, MissingDimension):
        detail["missing_dimensions"] = error.extra_ids
    return HTTPException(status_code=422, detail=detail)


def _get_product_or_404(db: Session, product_id: int) -> schemas.Product:
    product = catalog.get_product(db, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@router.get("")
def get_cart(db: Session = Depends(get_db), current_user: models.User = Depends(get_current_user)):
    row, cart = load_cart(db, current_user)
    db.commit()
    return cart.to_dict()


@router.post("/preview")
def preview_line(
    request: schemas.LineRequest,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    """
    Live price for the calculator form.

    Lenient: extras still missing their dimensions are priced at their flat
    price and reported in missing_dimensions; can_commit says whether
    POST /lines would accept the same input.
    """
    product = _get_product_or_404(db, request.product_id)
    result = pricing.preview_line(
        product, request.width, request.height, request.selected_extras,
        request.custom_extras, request.custom_features,
    )
    return schemas.LinePreview(**result)


@router.post("/lines")
def add_line(
    request: schemas.LineRequest,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    product = _get_product_or_404(db, request.product_id)
    row, cart = load_cart(db, current_user)
    try:
        line = pricing.build_line(
            product, request.width, request.height, request.selected_extras,
            request.custom_extras, request.custom_features,
        )
        cart.add_line(line)
    except QuoteError as e:
        db.rollback()
        raise quote_error_to_http(e)
    save_cart(db, row, cart)
    return cart.to_dict()


@router.delete("/lines/{index}")
def remove_line(index: int, db: Session = Depends(get_db),
                current_user: models.User = Depends(get_current_user)):
    row, cart = load_cart(db, current_user)
    try:
        cart.remove_line(index)
    except QuoteError as e:
        db.rollback()
        raise quote_error_to_http(e)
    save_cart(db, row, cart)
    return cart.to_dict()


@router.post("/lines/{index}/move-up")
def move_line_up(index: int, db: Session = Depends(get_db),
                 current_user: models.User = Depends(get_current_user)):
    row, cart = load_cart(db, current_user)
    cart.move_up(index)
    save_cart(db, row, cart)
    return cart.to_dict()


@router.post("/lines/{index}/move-down")
def move_line_down(index: int, db: Session = Depends(get_db),
                   current_user: models.User = Depends(get_current_user)):
    row, cart = load_cart(db, current_user)
    cart.move_down(index)
    save_cart(db, row, cart)
    return cart.to_dict()


@router.post("/lines/{index}/features")
def add_feature(
    index: int,
    feature: schemas.CustomFeatureInput,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    row, cart = load_cart(db, current_user)
    try:
        created = cart.add_feature_to_line(index, feature)
    except QuoteError as e:
        db.rollback()
        raise quote_error_to_http(e)
    save_cart(db, row, cart)
    return {"feature": created.model_dump(mode="json"), "cart": cart.to_dict()}


@router.delete("/lines/{index}/features/{feature_id}")
def remove_feature(
    index: int,
    feature_id: str,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    row, cart = load_cart(db, current_user)
    try:
        removed = cart.remove_feature_from_line(index, feature_id)
    except QuoteError as e:
        db.rollback()
        raise quote_error_to_http(e)
    save_cart(db, row, cart)
    return {"removed": removed is not None, "cart": cart.to_dict()}


@router.put("/company")
def set_company_name(
    update: schemas.CompanyNameUpdate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    row, cart = load_cart(db, current_user)
    cart.set_company_name(update.company_name)
    save_cart(db, row, cart)
    return cart.to_dict()


@router.delete("")
def clear_cart(db: Session = Depends(get_db), current_user: models.User = Depends(get_current_user)):
    row, cart = load_cart(db, current_user)
    cart.clear()
    save_cart(db, row, cart)
    return cart.to_dict()
