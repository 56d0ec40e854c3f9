"""
Catalog endpoints — categories and products with their extras and images.

Reads are public (the calculator page lists products before login);
writes are admin-only. Values are stored as given.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import catalog, models, schemas
from ..auth import require_admin
from ..database import get_db

router = APIRouter(tags=["catalog"])


# --- Categories ---

@router.get("/categories")
def list_categories(db: Session = Depends(get_db)):
    return catalog.list_categories(db)


@router.get("/categories/{category_id}")
def get_category(category_id: int, db: Session = Depends(get_db)):
    category = catalog.get_category(db, category_id)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return category


@router.post("/categories")
def create_category(
    category: schemas.CategoryCreate,
    db: Session = Depends(get_db),
    admin: models.User = Depends(require_admin),
):
    db_category = models.Category(name=category.name)
    db.add(db_category)
    db.commit()
    db.refresh(db_category)
    return schemas.Category.model_validate(db_category)


@router.put("/categories/{category_id}")
def update_category(
    category_id: int,
    category: schemas.CategoryCreate,
    db: Session = Depends(get_db),
    admin: models.User = Depends(require_admin),
):
    db_category = db.query(models.Category).filter(models.Category.id == category_id).first()
    if not db_category:
        raise HTTPException(status_code=404, detail="Category not found")
    db_category.name = category.name
    db.commit()
    db.refresh(db_category)
    return schemas.Category.model_validate(db_category)


@router.delete("/categories/{category_id}")
def delete_category(
    category_id: int,
    db: Session = Depends(get_db),
    admin: models.User = Depends(require_admin),
):
    db_category = db.query(models.Category).filter(models.Category.id == category_id).first()
    if not db_category:
        raise HTTPException(status_code=404, detail="Category not found")
    in_use = db.query(models.Product).filter(models.Product.category_id == category_id).count()
    if in_use:
        raise HTTPException(
            status_code=400,
            detail=f"Category has {in_use} products — move or delete them first",
        )
    db.delete(db_category)
    db.commit()
    return {"ok": True}


# --- Products ---

def _apply_product(db_product: models.Product, product: schemas.ProductCreate):
    """Copy fields onto the ORM row and replace extras/images wholesale."""
    for field in ("name", "description", "pros", "cons", "category_id",
                  "base_price", "price_per_square_meter", "can_export"):
        setattr(db_product, field, getattr(product, field))

    db_product.extras = [models.ExtraOption(**extra.model_dump()) for extra in product.extras]
    db_product.images = [
        models.ProductImage(image_url=image.image_url, display_order=i)
        for i, image in enumerate(product.images)
    ]


@router.get("/products")
def list_products(category_id: Optional[int] = None, db: Session = Depends(get_db)):
    return catalog.list_products(db, category_id=category_id)


@router.get("/products/{product_id}")
def get_product(product_id: int, db: Session = Depends(get_db)):
    product = catalog.get_product(db, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@router.post("/products")
def create_product(
    product: schemas.ProductCreate,
    db: Session = Depends(get_db),
    admin: models.User = Depends(require_admin),
):
    if not catalog.get_category(db, product.category_id):
        raise HTTPException(status_code=404, detail="Category not found")
    db_product = models.Product()
    _apply_product(db_product, product)
    db.add(db_product)
    db.commit()
    return catalog.get_product(db, db_product.id)


@router.put("/products/{product_id}")
def update_product(
    product_id: int,
    product: schemas.ProductCreate,
    db: Session = Depends(get_db),
    admin: models.User = Depends(require_admin),
):
    db_product = db.query(models.Product).filter(models.Product.id == product_id).first()
    if not db_product:
        raise HTTPException(status_code=404, detail="Product not found")
    if not catalog.get_category(db, product.category_id):
        raise HTTPException(status_code=404, detail="Category not found")
    _apply_product(db_product, product)
    db.commit()
    db.expire_all()
    return catalog.get_product(db, product_id)


@router.delete("/products/{product_id}")
def delete_product(
    product_id: int,
    db: Session = Depends(get_db),
    admin: models.User = Depends(require_admin),
):
    db_product = db.query(models.Product).filter(models.Product.id == product_id).first()
    if not db_product:
        raise HTTPException(status_code=404, detail="Product not found")
    db.delete(db_product)
    db.commit()
    return {"ok": True}
