"""Coupon database table model."""

from datetime import datetime

import sqlalchemy as sa
from sqlmodel import Field

from src.app.entities.core._base import EntityTable, TZDateTime
from src.app.entities.service.coupon.entity import CouponType


class CouponTable(EntityTable, table=True):
    """Database persistence model for coupons."""

    __tablename__ = "coupons"

    code: str = Field(unique=True, index=True)
    description: str | None = None
    type: CouponType
    value: float
    max_discount: float = 0.0
    start_date: datetime = Field(sa_type=TZDateTime)
    end_date: datetime = Field(sa_type=TZDateTime)
    max_usage: int | None = None
    used_count: int = 0
    max_usage_per_user: int = 1
    min_order_value: float = 0.0
    is_active: bool = True
    is_public: bool = True
    allowed_user_ids: list[str] = Field(default_factory=list, sa_type=sa.JSON)
    excluded_product_ids: list[str] = Field(default_factory=list, sa_type=sa.JSON)
    category_ids: list[str] = Field(default_factory=list, sa_type=sa.JSON)
    product_types: list[str] = Field(default_factory=list, sa_type=sa.JSON)
