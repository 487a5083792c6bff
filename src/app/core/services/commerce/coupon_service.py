"""Coupon administration and redemption checks."""

from typing import Any

import pydantic
from loguru import logger
from pydantic import BaseModel
from sqlmodel import Session

from src.app.core.errors import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from src.app.entities.service.coupon.entity import Coupon
from src.app.entities.service.coupon.repository import CouponRepository
from src.app.entities.service.order.entity import COUPON_HOLDING_STATUSES
from src.app.entities.service.order.repository import OrderRepository
from src.app.entities.service.product.repository import ProductRepository


class CouponValidation(BaseModel):
    """Outcome of a successful coupon check against an order total."""

    coupon: Coupon
    discount_amount: float
    final_amount: float
    savings: float

    @classmethod
    def for_total(cls, coupon: Coupon, total: float) -> "CouponValidation":
        discount = coupon.compute_discount(total)
        return cls(
            coupon=coupon,
            discount_amount=discount,
            final_amount=round(total - discount, 2),
            savings=discount,
        )


def _first_error(exc: pydantic.ValidationError) -> str:
    error = exc.errors()[0]
    location = ".".join(str(part) for part in error.get("loc", ()))
    message = str(error.get("msg", "Invalid coupon"))
    return f"{location}: {message}" if location else message


class CouponService:
    def __init__(self, db_session: Session):
        self._coupons = CouponRepository(db_session)
        self._orders = OrderRepository(db_session)
        self._products = ProductRepository(db_session)

    def create(self, data: dict[str, Any]) -> Coupon:
        try:
            coupon = Coupon(**{k: v for k, v in data.items() if k not in {"used_count", "id"}})
        except pydantic.ValidationError as exc:
            raise ValidationError(_first_error(exc)) from exc
        if self._coupons.get_by_code(coupon.code) is not None:
            raise ConflictError("Coupon code already exists")
        created = self._coupons.create(coupon)
        logger.bind(coupon_id=created.id, code=created.code).info("coupon.created")
        return created

    def update(self, coupon_id: str, changes: dict[str, Any]) -> Coupon:
        coupon = self.get(coupon_id)
        merged = coupon.model_dump()
        merged.update({k: v for k, v in changes.items() if k not in {"id", "used_count"}})
        try:
            updated = Coupon.model_validate(merged)
        except pydantic.ValidationError as exc:
            raise ValidationError(_first_error(exc)) from exc
        if updated.code != coupon.code:
            other = self._coupons.get_by_code(updated.code)
            if other is not None and other.id != coupon.id:
                raise ConflictError("Coupon code already exists")
        return self._coupons.update(updated)

    def delete(self, coupon_id: str) -> None:
        self.get(coupon_id)
        if self._orders.coupon_in_use(coupon_id, COUPON_HOLDING_STATUSES):
            raise ValidationError("Coupon is used by active orders and cannot be deleted")
        self._coupons.delete(coupon_id)
        logger.bind(coupon_id=coupon_id).info("coupon.deleted")

    def get(self, coupon_id: str) -> Coupon:
        coupon = self._coupons.get(coupon_id)
        if coupon is None:
            raise NotFoundError("Coupon not found")
        return coupon

    def list_all(self) -> list[Coupon]:
        return self._coupons.list_newest()

    def list_public(self) -> list[Coupon]:
        return self._coupons.list_public()

    def validate(
        self,
        code: str,
        user_id: str,
        total: float,
        product_ids: list[str] | None = None,
    ) -> CouponValidation:
        """Run every redemption rule, in order, for ``user_id`` and ``total``."""
        coupon = self._check_redeemable(code, total, user_id=user_id)

        if product_ids:
            products = self._products.get_many(set(product_ids)).values()
            if any(p.id in coupon.excluded_product_ids for p in products):
                raise ValidationError("Some products are not eligible for this coupon")
            if coupon.category_ids and not any(
                p.category_id in coupon.category_ids for p in products
            ):
                raise ValidationError("This coupon is not applicable to these products")
            if coupon.product_types and not any(
                p.product_type in coupon.product_types for p in products
            ):
                raise ValidationError("This coupon is not applicable to these product types")

        return CouponValidation.for_total(coupon, total)

    def apply(self, code: str, total: float) -> CouponValidation:
        """Legacy check: same rules without the per-user and product checks."""
        return CouponValidation.for_total(self._check_redeemable(code, total), total)

    def _check_redeemable(
        self, code: str, total: float, *, user_id: str | None = None
    ) -> Coupon:
        coupon = self._coupons.get_by_code(code)
        if coupon is None:
            raise NotFoundError("Coupon not found")
        if not coupon.is_active:
            raise ValidationError("This coupon is not active")
        if not coupon.has_started():
            raise ValidationError("This coupon is not yet valid")
        if coupon.is_expired():
            raise ValidationError("This coupon has expired")
        if coupon.is_exhausted:
            raise ValidationError("This coupon has reached its usage limit")
        if user_id is not None:
            if not coupon.allows_user(user_id):
                raise PermissionDeniedError("You are not authorized to use this coupon")
            if coupon.max_usage_per_user > 0:
                uses = self._orders.count_user_coupon_uses(user_id, coupon.id)
                if uses >= coupon.max_usage_per_user:
                    raise ValidationError("You have reached the usage limit for this coupon")
        if total < coupon.min_order_value:
            raise ValidationError(
                f"Minimum order value of {coupon.min_order_value:.2f} is required"
            )
        return coupon
