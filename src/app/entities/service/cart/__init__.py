"""Entity package: Cart and CartItem."""

from .entity import Cart, CartItem, CartStatus, PricingRules, ShippingMethod
from .repository import CartItemRepository, CartRepository
from .table import CartItemTable, CartTable

__all__ = [
    "Cart",
    "CartItem",
    "CartItemRepository",
    "CartItemTable",
    "CartRepository",
    "CartStatus",
    "CartTable",
    "PricingRules",
    "ShippingMethod",
]
