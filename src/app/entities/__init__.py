"""Entities module with hybrid entity-centric structure.

This module organizes entities by business concept rather than technical layer.
Each entity has its own package containing:
- entity.py: Domain model with business logic
- table.py: Database persistence model
- repository.py: Data access layer

Importing this module registers every table on ``SQLModel.metadata``.
"""

from .core.address import Address, AddressRepository, AddressTable
from .core.user import User, UserRepository, UserRole, UserTable
from .service.cart import Cart, CartItem, CartItemRepository, CartItemTable, CartRepository, CartTable
from .service.category import Category, CategoryRepository, CategoryTable
from .service.compare import CompareItem, CompareItemRepository, CompareItemTable
from .service.coupon import Coupon, CouponRepository, CouponTable
from .service.flash_sale import FlashSale, FlashSaleRepository, FlashSaleTable
from .service.notification import Notification, NotificationRepository, NotificationTable
from .service.order import Order, OrderItem, OrderItemRepository, OrderItemTable, OrderRepository, OrderTable
from .service.payment import (
    Payment,
    PaymentRepository,
    PaymentSession,
    PaymentSessionRepository,
    PaymentSessionTable,
    PaymentTable,
    Refund,
    RefundRepository,
    RefundTable,
)
from .service.product import (
    Inventory,
    InventoryRepository,
    InventoryTable,
    Product,
    ProductRepository,
    ProductTable,
    ProductVariant,
    ProductVariantRepository,
    ProductVariantTable,
)
from .service.report import (
    AnalyticalReport,
    AnalyticalReportRepository,
    AnalyticalReportTable,
    Report,
    ReportRepository,
    ReportTable,
)
from .service.review import Reply, ReplyRepository, ReplyTable, Review, ReviewRepository, ReviewTable
from .service.shipment import Shipment, ShipmentRepository, ShipmentTable
from .service.wishlist import WishlistItem, WishlistItemRepository, WishlistItemTable

__all__ = [
    "Address",
    "AddressRepository",
    "AddressTable",
    "AnalyticalReport",
    "AnalyticalReportRepository",
    "AnalyticalReportTable",
    "Cart",
    "CartItem",
    "CartItemRepository",
    "CartItemTable",
    "CartRepository",
    "CartTable",
    "Category",
    "CategoryRepository",
    "CategoryTable",
    "CompareItem",
    "CompareItemRepository",
    "CompareItemTable",
    "Coupon",
    "CouponRepository",
    "CouponTable",
    "FlashSale",
    "FlashSaleRepository",
    "FlashSaleTable",
    "Inventory",
    "InventoryRepository",
    "InventoryTable",
    "Notification",
    "NotificationRepository",
    "NotificationTable",
    "Order",
    "OrderItem",
    "OrderItemRepository",
    "OrderItemTable",
    "OrderRepository",
    "OrderTable",
    "Payment",
    "PaymentRepository",
    "PaymentSession",
    "PaymentSessionRepository",
    "PaymentSessionTable",
    "PaymentTable",
    "Product",
    "ProductRepository",
    "ProductTable",
    "ProductVariant",
    "ProductVariantRepository",
    "ProductVariantTable",
    "Refund",
    "RefundRepository",
    "RefundTable",
    "Reply",
    "ReplyRepository",
    "ReplyTable",
    "Report",
    "ReportRepository",
    "ReportTable",
    "Review",
    "ReviewRepository",
    "ReviewTable",
    "Shipment",
    "ShipmentRepository",
    "ShipmentTable",
    "User",
    "UserRepository",
    "UserRole",
    "UserTable",
    "WishlistItem",
    "WishlistItemRepository",
    "WishlistItemTable",
]
