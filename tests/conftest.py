"""Pytest configuration and fixtures."""

import os

# Set test environment before importing app
os.environ["ENVIRONMENT"] = "testing"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["JWT_SECRET"] = "test-secret-key-that-is-long-enough-for-hs256"
os.environ["LOG_LEVEL"] = "WARNING"

import jwt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from config.database import Base, get_db
from config.settings import settings
from main import app
from api.products.products_model import Product
from api.suppliers.suppliers_model import Supplier


@pytest.fixture
def engine():
    """In-memory SQLite database shared by every connection of one test."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture
def db(engine):
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def _encode_token(**claims) -> str:
    payload = {"id": 1, "name": "Test User", "roles": ["admin"]}
    payload.update(claims)
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.ALGORITHM)


@pytest.fixture
def make_token():
    """Signed bearer token; keyword arguments override the default claims."""
    return _encode_token


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {_encode_token()}"}


@pytest.fixture
def make_products(db):
    """Insert products named from the given list (or ``Product 01``.. for a count)."""

    def _make(names_or_count, **fields):
        if isinstance(names_or_count, int):
            names = [f"Product {i:02d}" for i in range(1, names_or_count + 1)]
        else:
            names = list(names_or_count)
        products = []
        for index, name in enumerate(names, start=1):
            values = {"sku": f"SKU-{index:04d}", "price": 10, "stock_quantity": index}
            values.update(fields)
            products.append(Product(name=name, **values))
        db.add_all(products)
        db.commit()
        return products

    return _make


@pytest.fixture
def make_suppliers(db):
    def _make(names):
        suppliers = [Supplier(name=name, email=f"{name.lower()}@example.com") for name in names]
        db.add_all(suppliers)
        db.commit()
        return suppliers

    return _make
