"""Factories for users, catalog data, carts and orders."""

from __future__ import annotations

from collections.abc import Callable
from datetime import timedelta
from typing import Any

import pytest
from sqlmodel import Session

from src.app.core.security import hash_password
from src.app.core.services.catalog.category_service import CategoryService
from src.app.core.services.catalog.product_service import ProductDetail, ProductService
from src.app.core.services.commerce import CartService, CouponService, OrderService
from src.app.core.services.commerce.order_service import OrderDetail
from src.app.entities.core._base import utc_now
from src.app.entities.core.user import User, UserRepository, UserRole
from src.app.entities.service.category import Category
from src.app.entities.service.coupon import Coupon
from src.app.entities.service.payment.entity import PaymentMethod

__all__ = [
    "PASSWORD",
    "SHIPPING_ADDRESS",
    "admin",
    "category",
    "make_coupon",
    "make_product",
    "make_user",
    "place_order",
    "product",
    "user",
]

PASSWORD = "password123"

SHIPPING_ADDRESS = {
    "address": "1 Market Street",
    "city": "Springfield",
    "postal_code": "12345",
    "country": "US",
}


@pytest.fixture
def make_user(session: Session) -> Callable[..., User]:
    def _make_user(
        email: str = "shopper@example.com",
        role: UserRole = UserRole.USER,
        name: str | None = "Shopper",
    ) -> User:
        return UserRepository(session).create(
            User(email=email, password_hash=hash_password(PASSWORD), name=name, role=role)
        )

    return _make_user


@pytest.fixture
def user(make_user: Callable[..., User]) -> User:
    return make_user()


@pytest.fixture
def admin(make_user: Callable[..., User]) -> User:
    return make_user(email="admin@example.com", role=UserRole.ADMIN, name="Admin")


@pytest.fixture
def category(session: Session) -> Category:
    return CategoryService(session).create("Shoes", "Everyday footwear")


@pytest.fixture
def make_product(session: Session, category: Category) -> Callable[..., ProductDetail]:
    def _make_product(
        name: str = "Trail Runner",
        price: float = 40.0,
        stock: int = 10,
        **fields: Any,
    ) -> ProductDetail:
        data = {
            "name": name,
            "price": price,
            "brand": "Acme",
            "category_id": category.id,
            "sizes": ["M"],
            "colors": ["red"],
            **fields,
        }
        return ProductService(session).create_product(
            data,
            variants=[{"color": "red", "size": "M", "quantity": stock}],
            inventory_quantity=stock,
        )

    return _make_product


@pytest.fixture
def product(make_product: Callable[..., ProductDetail]) -> ProductDetail:
    return make_product()


@pytest.fixture
def make_coupon(session: Session) -> Callable[..., Coupon]:
    def _make_coupon(code: str = "SAVE10", **fields: Any) -> Coupon:
        now = utc_now()
        data = {
            "code": code,
            "type": "PERCENTAGE",
            "value": 10,
            "start_date": now - timedelta(days=1),
            "end_date": now + timedelta(days=30),
            **fields,
        }
        return CouponService(session).create(data)

    return _make_coupon


@pytest.fixture
def place_order(session: Session) -> Callable[..., OrderDetail]:
    """Put ``quantity`` units of ``detail`` in the cart and check out."""

    def _place_order(
        buyer: User,
        detail: ProductDetail,
        quantity: int = 1,
        method: PaymentMethod = PaymentMethod.COD,
        coupon_code: str | None = None,
    ) -> OrderDetail:
        CartService(session).add_to_cart(
            buyer.id, detail.product.id, detail.variants[0].id, quantity
        )
        return OrderService(session).create_order(
            buyer, method, SHIPPING_ADDRESS, coupon_code=coupon_code
        )

    return _place_order
