"""
Shared test fixtures — SQLite test database, test client, auth helpers, sample catalog.
"""

import os
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Set JWT_SECRET before importing app modules
os.environ["JWT_SECRET"] = "test-secret-key-for-testing-only"
os.environ["DATABASE_URL"] = "sqlite:///./test.db"

from quotecalc import models
from quotecalc.auth import hash_password
from quotecalc.database import Base, get_db
from quotecalc.main import app


TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_database():
    """Create all tables before each test, drop after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client():
    """FastAPI test client."""
    return TestClient(app)


@pytest.fixture
def db():
    """Direct database session for test setup/assertions."""
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


def _create_user(db, username, password, is_admin=False):
    user = models.User(username=username, password_hash=hash_password(password), is_admin=is_admin)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def _login(client, username, password):
    response = client.post("/api/auth/login", json={"username": username, "password": password})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def admin_headers(client, db):
    """Create an admin user and return auth headers."""
    _create_user(db, "admin", "adminpass123", is_admin=True)
    return _login(client, "admin", "adminpass123")


@pytest.fixture
def auth_headers(client, db):
    """Create a regular user and return auth headers."""
    _create_user(db, "seller", "sellerpass123")
    return _login(client, "seller", "sellerpass123")


@pytest.fixture
def other_headers(client, db):
    """A second regular user."""
    _create_user(db, "other", "otherpass123")
    return _login(client, "other", "otherpass123")


@pytest.fixture
def sample_catalog(db):
    """
    One category with three products:
    - "Awning": 50/m², one area extra (10/m², product size) and one
      custom-size extra (10/m², own size)
    - "Door": flat 100, one flat extra (25)
    - "Internal sample": flat 40, not exportable
    Returns a dict of ids.
    """
    category = models.Category(name="Shading")
    db.add(category)
    db.flush()

    awning = models.Product(
        name="Awning",
        description="Retractable awning",
        category_id=category.id,
        base_price=50.0,
        price_per_square_meter=True,
        can_export=True,
        extras=[
            models.ExtraOption(name="Motor cover", price=10.0,
                               price_per_square_meter=True, use_product_dimensions=True),
            models.ExtraOption(name="Side panel", price=10.0,
                               price_per_square_meter=True, use_product_dimensions=False),
        ],
        images=[models.ProductImage(image_url="https://img.example/awning.jpg", display_order=0)],
    )
    door = models.Product(
        name="Door",
        description="Garage door",
        category_id=category.id,
        base_price=100.0,
        price_per_square_meter=False,
        can_export=True,
        extras=[models.ExtraOption(name="Lock", price=25.0,
                                   price_per_square_meter=False, use_product_dimensions=True)],
    )
    hidden = models.Product(
        name="Internal sample",
        description="Not for customers",
        category_id=category.id,
        base_price=40.0,
        price_per_square_meter=False,
        can_export=False,
    )
    db.add_all([awning, door, hidden])
    db.commit()

    return {
        "category_id": category.id,
        "awning_id": awning.id,
        "awning_area_extra_id": awning.extras[0].id,
        "awning_custom_extra_id": awning.extras[1].id,
        "door_id": door.id,
        "door_lock_id": door.extras[0].id,
        "hidden_id": hidden.id,
    }
