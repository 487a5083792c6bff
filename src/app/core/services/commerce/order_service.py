"""Checkout and order lifecycle.

``create_order`` converts the active cart into an order inside the request
transaction. Stock was already reserved when lines entered the cart, so
checkout only moves the sales and inventory counters.
"""

import time
from datetime import datetime
from typing import Any

from loguru import logger
from pydantic import BaseModel
from sqlmodel import Session

from src.app.core.errors import NotFoundError, PermissionDeniedError, ValidationError
from src.app.core.models import PageParams
from src.app.core.security import random_digits
from src.app.core.services.commerce.cart_service import pricing_rules
from src.app.core.services.commerce.coupon_service import CouponService
from src.app.core.services.notification import NotificationService, templates
from src.app.entities.core.address.repository import AddressRepository
from src.app.entities.core.user.entity import User
from src.app.entities.service.cart.entity import CartStatus, PricingRules
from src.app.entities.service.cart.repository import CartItemRepository, CartRepository
from src.app.entities.service.coupon.entity import Coupon
from src.app.entities.service.coupon.repository import CouponRepository
from src.app.entities.service.order.entity import Order, OrderItem, OrderStatus
from src.app.entities.service.order.repository import OrderItemRepository, OrderRepository
from src.app.entities.service.payment.entity import PaymentMethod
from src.app.entities.service.product.repository import (
    InventoryRepository,
    ProductRepository,
    ProductVariantRepository,
)
from src.app.entities.service.shipment.entity import Shipment
from src.app.entities.service.shipment.repository import ShipmentRepository

SHIPPING_ADDRESS_KEYS = ("address", "city", "postal_code", "country")


def generate_order_number() -> str:
    return f"ORD-{int(time.time() * 1000)}-{random_digits(3)}"


def normalize_shipping_address(raw: dict[str, Any]) -> dict[str, str]:
    """Reduce an address payload to ``{address, city, postal_code, country}``."""
    street = raw.get("address") or raw.get("address_line_one") or raw.get("street")
    postal_code = raw.get("postal_code") or raw.get("zip_code") or raw.get("postalCode")
    normalized = {
        "address": street,
        "city": raw.get("city"),
        "postal_code": postal_code,
        "country": raw.get("country"),
    }
    missing = [key for key in SHIPPING_ADDRESS_KEYS if not normalized[key]]
    if missing:
        raise ValidationError(f"Shipping address is missing: {', '.join(missing)}")
    return {key: str(value) for key, value in normalized.items()}


class OrderDetail(BaseModel):
    order: Order
    items: list[OrderItem]


class OrderTracking(BaseModel):
    order_number: str
    status: OrderStatus
    payment_status: str
    is_delivered: bool
    delivered_at: datetime | None = None
    shipments: list[Shipment]


class OrderService:
    def __init__(self, db_session: Session, rules: PricingRules | None = None):
        self._rules = rules or pricing_rules()
        self._orders = OrderRepository(db_session)
        self._order_items = OrderItemRepository(db_session)
        self._carts = CartRepository(db_session)
        self._cart_items = CartItemRepository(db_session)
        self._addresses = AddressRepository(db_session)
        self._coupons = CouponRepository(db_session)
        self._products = ProductRepository(db_session)
        self._variants = ProductVariantRepository(db_session)
        self._inventory = InventoryRepository(db_session)
        self._shipments = ShipmentRepository(db_session)
        self._coupon_service = CouponService(db_session)
        self._notifications = NotificationService(db_session)

    def create_order(
        self,
        user: User,
        payment_method: PaymentMethod,
        shipping_address: dict[str, Any] | None = None,
        coupon_code: str | None = None,
        notes: str | None = None,
    ) -> OrderDetail:
        cart = self._carts.get_active_for_user(user.id)
        if cart is None or cart.status != CartStatus.ACTIVE:
            raise ValidationError("Cart is empty")
        lines = self._cart_items.list_for_cart(cart.id)
        if not lines:
            raise ValidationError("Cart is empty")

        address = self._resolve_shipping_address(user.id, shipping_address or cart.shipping_address)
        subtotal = round(sum(line.price * line.quantity for line in lines), 2)

        coupon: Coupon | None = None
        discount = 0.0
        if not coupon_code and cart.coupon_id:
            cart_coupon = self._coupons.get(cart.coupon_id)
            coupon_code = cart_coupon.code if cart_coupon else None
        if coupon_code:
            validation = self._coupon_service.validate(
                coupon_code, user.id, subtotal, [line.product_id for line in lines]
            )
            coupon = validation.coupon
            discount = validation.discount_amount

        tax = self._rules.tax_for(subtotal)
        shipping = self._rules.shipping_for(subtotal)
        order = self._orders.create(
            Order(
                order_number=generate_order_number(),
                user_id=user.id,
                payment_method=payment_method,
                shipping_address=address,
                items_price=subtotal,
                tax_price=tax,
                shipping_price=shipping,
                discount_amount=discount,
                total_price=self._rules.total_for(subtotal, discount),
                coupon_id=coupon.id if coupon else None,
                notes=notes or cart.notes,
            )
        )

        items: list[OrderItem] = []
        for line in lines:
            taken = -self._inventory.adjust(line.product_id, -line.quantity)
            items.append(
                self._order_items.create(
                    OrderItem(
                        order_id=order.id,
                        product_id=line.product_id,
                        variant_id=line.variant_id,
                        name=line.name,
                        image=line.image,
                        color=line.color,
                        size=line.size,
                        quantity=line.quantity,
                        price=line.price,
                        total_price=round(line.price * line.quantity, 2),
                        inventory_taken=taken,
                    )
                )
            )
            product = self._products.get(line.product_id)
            if product is not None:
                product.record_sale(line.quantity)
                self._products.update(product)

        if coupon is not None:
            self._coupons.increment_usage(coupon.id)

        self._cart_items.delete_for_cart(cart.id)
        cart.status = CartStatus.CONVERTED
        self._carts.update(cart)

        self._notifications.notify_order(order, templates.order_confirmed(order))
        logger.bind(
            order_id=order.id,
            order_number=order.order_number,
            user_id=user.id,
            total=order.total_price,
        ).info("order.created")
        return OrderDetail(order=order, items=items)

    def list_orders(
        self, user: User, params: PageParams, status: OrderStatus | None = None
    ) -> tuple[list[Order], int]:
        return self._orders.list_page(
            offset=params.offset,
            limit=params.limit,
            user_id=None if user.is_admin else user.id,
            status=status,
        )

    def get_order(self, user: User, order_id: str) -> OrderDetail:
        order = self.get_accessible_order(user, order_id)
        return OrderDetail(order=order, items=self._order_items.list_for_order(order.id))

    def get_accessible_order(self, user: User, order_id: str) -> Order:
        order = self._orders.get(order_id)
        if order is None:
            raise NotFoundError("Order not found")
        if order.user_id != user.id and not user.is_admin:
            raise PermissionDeniedError("You do not have access to this order")
        return order

    def update_status(self, order_id: str, status: OrderStatus) -> Order:
        order = self._orders.get(order_id)
        if order is None:
            raise NotFoundError("Order not found")
        if status == OrderStatus.DELIVERED:
            order.mark_delivered()
        else:
            order.status = status
        order = self._orders.update(order)
        self._notifications.notify_order(order, templates.order_status_changed(order))
        logger.bind(order_id=order_id, status=status.value).info("order.status_changed")
        return order

    def cancel_order(self, user: User, order_id: str, reason: str | None = None) -> Order:
        order = self.get_accessible_order(user, order_id)
        if not order.can_cancel:
            raise ValidationError(f"Order cannot be cancelled in status {order.status.value}")

        for item in self._order_items.list_for_order(order.id):
            variant = self._variants.get(item.variant_id) if item.variant_id else None
            if variant is None:
                variant = self._variants.find_by_attributes(item.product_id, item.color, item.size)
            if variant is not None:
                self._variants.adjust_stock(variant.id, item.quantity)
            if item.inventory_taken:
                self._inventory.adjust(item.product_id, item.inventory_taken)
            product = self._products.get(item.product_id)
            if product is not None:
                product.revert_sale(item.quantity)
                self._products.update(product)

        order.cancel(reason)
        order = self._orders.update(order)
        logger.bind(order_id=order_id, reason=reason).info("order.cancelled")
        return order

    def track_order(self, order_number: str) -> OrderTracking:
        order = self._orders.get_by_number(order_number)
        if order is None:
            raise NotFoundError("Order not found")
        return OrderTracking(
            order_number=order.order_number,
            status=order.status,
            payment_status=order.payment_status.value,
            is_delivered=order.is_delivered,
            delivered_at=order.delivered_at,
            shipments=self._shipments.list_for_order(order.id),
        )

    def _resolve_shipping_address(
        self, user_id: str, shipping_address: dict[str, Any] | None
    ) -> dict[str, str]:
        if shipping_address:
            return normalize_shipping_address(shipping_address)
        default = self._addresses.get_default(user_id)
        if default is None:
            raise ValidationError("Shipping address is required")
        return default.as_shipping_address()
