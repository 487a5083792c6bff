"""Entity package: Coupon."""

from .entity import Coupon, CouponType
from .repository import CouponRepository
from .table import CouponTable

__all__ = ["Coupon", "CouponRepository", "CouponTable", "CouponType"]
