"""
Catalog access — read products and categories for the calculator.

The engine trusts catalog rows as given; nothing here validates prices
or flags.
"""

from typing import Optional

from sqlalchemy.orm import Session, selectinload

from . import models
from .schemas import Category, ExtraOption, Product, ProductImage


def product_to_schema(product: models.Product) -> Product:
    """ORM product → Product, with its category name, extras and images."""
    return Product(
        id=product.id,
        name=product.name,
        description=product.description or "",
        pros=product.pros,
        cons=product.cons,
        category_id=product.category_id,
        category_name=product.category.name if product.category else None,
        base_price=product.base_price or 0.0,
        price_per_square_meter=bool(product.price_per_square_meter),
        can_export=product.can_export is not False,
        extras=[ExtraOption.model_validate(extra) for extra in product.extras],
        images=[ProductImage.model_validate(image) for image in product.images],
    )


def _product_query(db: Session):
    return db.query(models.Product).options(
        selectinload(models.Product.category),
        selectinload(models.Product.extras),
        selectinload(models.Product.images),
    )


def list_products(db: Session, category_id: Optional[int] = None) -> list:
    query = _product_query(db)
    if category_id is not None:
        query = query.filter(models.Product.category_id == category_id)
    return [product_to_schema(p) for p in query.order_by(models.Product.id).all()]


def get_product(db: Session, product_id: int) -> Optional[Product]:
    product = _product_query(db).filter(models.Product.id == product_id).first()
    return product_to_schema(product) if product else None


def list_categories(db: Session) -> list:
    categories = db.query(models.Category).order_by(models.Category.name).all()
    return [Category.model_validate(c) for c in categories]


def get_category(db: Session, category_id: int) -> Optional[Category]:
    category = db.query(models.Category).filter(models.Category.id == category_id).first()
    return Category.model_validate(category) if category else None
