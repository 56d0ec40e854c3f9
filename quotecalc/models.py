from sqlalchemy import Column, Integer, String, Float, DateTime, Text, ForeignKey, Boolean, JSON
from sqlalchemy.orm import relationship
from datetime import datetime
from .database import Base


# --- Accounts ---

class User(Base):
    """Calculator users. Admins manage the catalog and see every export."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, nullable=False)
    password_hash = Column(String, nullable=False)
    is_admin = Column(Boolean, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    cart_session = relationship("CartSession", back_populates="user", uselist=False,
                                cascade="all, delete-orphan")
    exports = relationship("ExportHistory", back_populates="user", cascade="all, delete-orphan")


# --- Catalog ---

class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)

    products = relationship("Product", back_populates="category")


class Product(Base):
    """Catalog product. base_price is per m² when price_per_square_meter is set."""
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, default="")
    pros = Column(Text, nullable=True)
    cons = Column(Text, nullable=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False)
    base_price = Column(Float, default=0.0)
    price_per_square_meter = Column(Boolean, default=False)
    can_export = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    category = relationship("Category", back_populates="products")
    extras = relationship("ExtraOption", back_populates="product", cascade="all, delete-orphan",
                          order_by="ExtraOption.id")
    images = relationship("ProductImage", back_populates="product", cascade="all, delete-orphan",
                          order_by="ProductImage.display_order")


class ExtraOption(Base):
    """Priced add-on owned by a product.

    use_product_dimensions=False means the buyer enters a separate width/height
    for this extra when selecting it.
    """
    __tablename__ = "extra_options"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    name = Column(String, nullable=False)
    price = Column(Float, default=0.0)
    price_per_square_meter = Column(Boolean, default=False)
    use_product_dimensions = Column(Boolean, default=True)

    product = relationship("Product", back_populates="extras")


class ProductImage(Base):
    __tablename__ = "product_images"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    image_url = Column(String, nullable=False)
    display_order = Column(Integer, default=0)

    product = relationship("Product", back_populates="images")


# --- Quoting ---

class CartSession(Base):
    """The live cart of one user, stored as QuoteCart.to_dict()."""
    __tablename__ = "cart_sessions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)
    cart_json = Column(JSON, default=dict)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="cart_session")


class ExportHistory(Base):
    """One row per export action. export_data is never modified after insert."""
    __tablename__ = "export_history"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    export_data = Column(JSON, nullable=False)  # {selected_products, company_name, total_price, date}
    created_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User", back_populates="exports")
