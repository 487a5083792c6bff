"""Coupon domain entity."""

from datetime import datetime
from enum import Enum

from pydantic import Field, field_validator, model_validator

from src.app.entities.core._base import Entity, utc_now


class CouponType(str, Enum):
    PERCENTAGE = "PERCENTAGE"
    FIXED = "FIXED"


class Coupon(Entity):
    """A discount code and the rules restricting who may use it and when."""

    code: str = Field(min_length=3, description="Unique code, stored uppercased")
    description: str | None = Field(default=None)
    type: CouponType = Field(description="PERCENTAGE or FIXED")
    value: float = Field(gt=0, description="Percent off, or fixed amount off")
    max_discount: float = Field(
        default=0.0, ge=0, description="Cap for percentage coupons; 0 means none"
    )
    start_date: datetime
    end_date: datetime
    max_usage: int | None = Field(
        default=None, ge=0, description="Total uses allowed; None or 0 means unlimited"
    )
    used_count: int = Field(default=0, ge=0)
    max_usage_per_user: int = Field(default=1, ge=0)
    min_order_value: float = Field(default=0.0, ge=0)
    is_active: bool = True
    is_public: bool = True
    allowed_user_ids: list[str] = Field(default_factory=list)
    excluded_product_ids: list[str] = Field(default_factory=list)
    category_ids: list[str] = Field(default_factory=list)
    product_types: list[str] = Field(default_factory=list)

    @field_validator("code")
    @classmethod
    def _uppercase_code(cls, value: str) -> str:
        return value.strip().upper()

    @model_validator(mode="after")
    def _check_rules(self) -> "Coupon":
        if self.type == CouponType.PERCENTAGE and self.value > 100:
            raise ValueError("Percentage coupons cannot exceed 100")
        if self.end_date <= self.start_date:
            raise ValueError("End date must be after start date")
        return self

    def has_started(self, now: datetime | None = None) -> bool:
        return self.start_date <= (now or utc_now())

    def is_expired(self, now: datetime | None = None) -> bool:
        return self.end_date < (now or utc_now())

    @property
    def is_exhausted(self) -> bool:
        return bool(self.max_usage) and self.used_count >= (self.max_usage or 0)

    def allows_user(self, user_id: str) -> bool:
        return self.is_public or user_id in self.allowed_user_ids

    def compute_discount(self, total: float) -> float:
        """Discount for an order of ``total``; never more than the total."""
        if self.type == CouponType.PERCENTAGE:
            discount = total * self.value / 100
            if self.max_discount > 0:
                discount = min(discount, self.max_discount)
        else:
            discount = self.value
        return round(min(discount, total), 2)
