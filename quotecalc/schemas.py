from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime


# --- Catalog ---

class CategoryBase(BaseModel):
    name: str

class CategoryCreate(CategoryBase):
    pass

class Category(CategoryBase):
    id: int
    class Config:
        from_attributes = True

class ExtraOptionBase(BaseModel):
    name: str
    price: float = 0.0
    price_per_square_meter: bool = False
    use_product_dimensions: bool = True

class ExtraOptionCreate(ExtraOptionBase):
    pass

class ExtraOption(ExtraOptionBase):
    id: int
    class Config:
        from_attributes = True

class ProductImageCreate(BaseModel):
    image_url: str

class ProductImage(BaseModel):
    id: int
    product_id: int
    image_url: str
    display_order: int = 0
    class Config:
        from_attributes = True

class ProductBase(BaseModel):
    name: str
    description: str = ""
    pros: Optional[str] = None
    cons: Optional[str] = None
    category_id: int
    base_price: float = 0.0
    price_per_square_meter: bool = False
    can_export: bool = True

class ProductCreate(ProductBase):
    extras: List[ExtraOptionCreate] = []
    images: List[ProductImageCreate] = []

class Product(ProductBase):
    id: int
    category_name: Optional[str] = None
    extras: List[ExtraOption] = []
    images: List[ProductImage] = []
    class Config:
        from_attributes = True

    def get_extra(self, extra_id: int) -> Optional[ExtraOption]:
        for extra in self.extras:
            if extra.id == extra_id:
                return extra
        return None


# --- Quote lines ---

class ExtraDimension(BaseModel):
    """Custom width/height (cm) entered for an extra that doesn't use the product's size."""
    extra_id: int
    width: float = 0.0
    height: float = 0.0
    square_meters: float = 0.0

class CustomFeatureInput(BaseModel):
    """A custom feature as typed by the user, before its price is resolved.

    price is a flat amount, or a rate per m² when is_price_per_square_meter is set.
    """
    name: str = Field(..., min_length=1)
    price: float = Field(..., gt=0)
    is_price_per_square_meter: bool = False
    use_product_dimensions: bool = False
    width: Optional[float] = None
    height: Optional[float] = None

class CustomFeature(BaseModel):
    """A custom feature attached to a line. price is resolved once, at creation."""
    id: str
    product_id: int
    name: str
    unit_price: float            # as entered (flat amount or rate per m²)
    price: float                 # resolved contribution to the line
    width: Optional[float] = None
    height: Optional[float] = None
    is_price_per_square_meter: bool = False
    use_product_dimensions: bool = False

class QuoteLine(BaseModel):
    """A committed, fully-priced cart line (a "selected product")."""
    product: Product
    width: float
    height: float
    square_meters: float
    selected_extras: List[int] = []
    custom_extras: List[ExtraDimension] = []
    price: float
    custom_features: List[CustomFeature] = []


# --- Cart API ---

class LineRequest(BaseModel):
    product_id: int
    width: float
    height: float
    selected_extras: List[int] = []
    custom_extras: List[ExtraDimension] = []
    custom_features: List[CustomFeatureInput] = []

class CompanyNameUpdate(BaseModel):
    company_name: str = ""

class LinePreview(BaseModel):
    price: float
    square_meters: float
    missing_dimensions: List[int] = []
    can_commit: bool


# --- Users ---

class UserCreate(BaseModel):
    username: str
    password: str
    is_admin: bool = False

class UserUpdate(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None
    is_admin: Optional[bool] = None

class User(BaseModel):
    id: int
    username: str
    is_admin: bool
    created_at: Optional[datetime] = None
    class Config:
        from_attributes = True


# --- Exports ---

class ExportData(BaseModel):
    """Persisted snapshot layout."""
    selected_products: List[QuoteLine] = []
    company_name: str = ""
    total_price: float = 0.0
    date: str = Field(..., description="ISO-8601 export timestamp")

class ExportRecord(BaseModel):
    id: int
    user_id: int
    username: Optional[str] = None
    export_data: ExportData
    created_at: Optional[datetime] = None
