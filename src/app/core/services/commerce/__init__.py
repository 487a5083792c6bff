"""Commerce services: carts, coupons and orders."""

from .cart_service import CartService, CartSummary, pricing_rules
from .coupon_service import CouponService, CouponValidation
from .order_service import OrderDetail, OrderService, OrderTracking, generate_order_number

__all__ = [
    "CartService",
    "CartSummary",
    "CouponService",
    "CouponValidation",
    "OrderDetail",
    "OrderService",
    "OrderTracking",
    "generate_order_number",
    "pricing_rules",
]
