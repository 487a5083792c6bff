"""Titles and messages for system generated notifications."""

from dataclasses import dataclass, field
from typing import Any

from src.app.entities.service.notification.entity import NotificationType
from src.app.entities.service.order.entity import Order, OrderStatus


@dataclass(frozen=True)
class NotificationTemplate:
    type: NotificationType
    title: str
    message: str
    details: dict[str, Any] = field(default_factory=dict)


def order_confirmed(order: Order) -> NotificationTemplate:
    return NotificationTemplate(
        NotificationType.ORDER,
        "Order confirmed",
        f"Your order {order.order_number} has been placed. Total: {order.total_price:.2f}.",
        {"order_number": order.order_number, "total": order.total_price},
    )


def order_shipped(order: Order, tracking_number: str | None = None) -> NotificationTemplate:
    message = f"Your order {order.order_number} is on its way."
    if tracking_number:
        message = f"{message} Tracking number: {tracking_number}."
    return NotificationTemplate(
        NotificationType.ORDER,
        "Order shipped",
        message,
        {"order_number": order.order_number, "tracking_number": tracking_number},
    )


def order_delivered(order: Order) -> NotificationTemplate:
    return NotificationTemplate(
        NotificationType.ORDER,
        "Order delivered",
        f"Your order {order.order_number} has been delivered.",
        {"order_number": order.order_number},
    )


def order_status_changed(order: Order) -> NotificationTemplate:
    if order.status == OrderStatus.SHIPPED:
        return order_shipped(order)
    if order.status == OrderStatus.DELIVERED:
        return order_delivered(order)
    status = order.status.value.lower()
    return NotificationTemplate(
        NotificationType.ORDER,
        "Order status updated",
        f"Your order {order.order_number} is now {status}.",
        {"order_number": order.order_number, "status": order.status.value},
    )


def payment_success(order: Order, amount: float) -> NotificationTemplate:
    return NotificationTemplate(
        NotificationType.PAYMENT,
        "Payment received",
        f"We received your payment of {amount:.2f} for order {order.order_number}.",
        {"order_number": order.order_number, "amount": amount},
    )


def payment_failed(order: Order) -> NotificationTemplate:
    return NotificationTemplate(
        NotificationType.PAYMENT,
        "Payment failed",
        f"The payment for order {order.order_number} could not be completed.",
        {"order_number": order.order_number},
    )


def refund_approved(order: Order, amount: float) -> NotificationTemplate:
    return NotificationTemplate(
        NotificationType.REFUND,
        "Refund approved",
        f"A refund of {amount:.2f} for order {order.order_number} has been issued.",
        {"order_number": order.order_number, "amount": amount},
    )


def refund_rejected(order: Order, reason: str | None = None) -> NotificationTemplate:
    message = f"The refund request for order {order.order_number} was rejected."
    if reason:
        message = f"{message} Reason: {reason}"
    return NotificationTemplate(
        NotificationType.REFUND,
        "Refund rejected",
        message,
        {"order_number": order.order_number, "reason": reason},
    )


def shipment_update(order: Order, status: str, tracking_number: str) -> NotificationTemplate:
    return NotificationTemplate(
        NotificationType.SHIPMENT,
        "Shipment update",
        f"Shipment {tracking_number} for order {order.order_number} is now {status.lower()}.",
        {"order_number": order.order_number, "tracking_number": tracking_number, "status": status},
    )
