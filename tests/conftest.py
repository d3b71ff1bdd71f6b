"""Shared test fixtures."""

import os

os.environ.setdefault("ENV", "test")
os.environ.setdefault("JWT_SECRET", "test-secret")

from datetime import datetime, timedelta
from decimal import Decimal
from typing import Callable, Optional

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

import marketplace.models  # noqa: F401
from marketplace.config import settings
from marketplace.database import get_session
from marketplace.main import app
from marketplace.models.carrier import Carrier
from marketplace.models.category import Category
from marketplace.models.product import Product
from marketplace.models.profile import Profile
from marketplace.models.promotion import Promotion


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(engine):
    def _get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _get_session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_token() -> Callable[..., str]:
    """Sign claims the way the identity provider does."""
    def _make(claims: dict, expires_delta: Optional[timedelta] = None) -> str:
        payload = dict(claims)
        payload["exp"] = datetime.utcnow() + (expires_delta or timedelta(minutes=60))
        payload["aud"] = settings.jwt_audience
        return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)

    return _make


@pytest.fixture
def auth_headers(make_token) -> Callable[[Profile], dict]:
    def _headers(profile: Profile) -> dict:
        token = make_token({"sub": profile.id, "email": profile.email})
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def make_profile(session) -> Callable[..., Profile]:
    def _make(profile_id: str = "customer-1", role: str = "customer", **kwargs) -> Profile:
        profile = Profile(
            id=profile_id,
            email=kwargs.pop("email", f"{profile_id}@example.com"),
            full_name=kwargs.pop("full_name", profile_id.replace("-", " ").title()),
            role=role,
            **kwargs,
        )
        session.add(profile)
        session.commit()
        session.refresh(profile)
        return profile

    return _make


@pytest.fixture
def customer(make_profile) -> Profile:
    return make_profile("customer-1", "customer")


@pytest.fixture
def seller(make_profile) -> Profile:
    return make_profile("seller-1", "seller")


@pytest.fixture
def make_product(session) -> Callable[..., Product]:
    def _make(
        seller: Profile,
        name: str = "Linen Shirt",
        price: str = "29.99",
        stock: int = 20,
        category: Optional[Category] = None,
        **kwargs,
    ) -> Product:
        product = Product(
            seller_id=seller.id,
            name=name,
            price=Decimal(price),
            stock=stock,
            category_id=category.id if category else None,
            **kwargs,
        )
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    return _make


@pytest.fixture
def make_promotion(session) -> Callable[..., Promotion]:
    def _make(
        code: str = "SAVE20",
        discount_type: str = "percentage",
        discount_value: str = "20",
        min_order_amount: str = "0",
        is_active: bool = True,
    ) -> Promotion:
        promotion = Promotion(
            code=code,
            discount_type=discount_type,
            discount_value=Decimal(discount_value),
            min_order_amount=Decimal(min_order_amount),
            is_active=is_active,
        )
        session.add(promotion)
        session.commit()
        session.refresh(promotion)
        return promotion

    return _make


@pytest.fixture
def carrier(session) -> Carrier:
    carrier = Carrier(name="UPS", tracking_url_template="https://ups.example/track/{tracking_number}")
    session.add(carrier)
    session.commit()
    session.refresh(carrier)
    return carrier


@pytest.fixture
def shipping_details() -> dict:
    return {
        "shipping_address": "123 Main Street",
        "shipping_city": "New York",
        "shipping_state": "NY",
        "shipping_zip": "10001",
    }
