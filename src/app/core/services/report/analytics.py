"""Aggregate queries behind each analytical report type.

Every builder takes the request session and a date range and returns a plain
JSON-serializable dict that is stored on the ``AnalyticalReport`` row.
"""

from collections import defaultdict
from collections.abc import Callable
from datetime import datetime
from typing import Any

from pydantic import BaseModel
from sqlmodel import Session

from src.app.entities.core.user.repository import UserRepository
from src.app.entities.service.cart.entity import CartStatus
from src.app.entities.service.cart.repository import CartRepository
from src.app.entities.service.order.entity import Order, OrderStatus
from src.app.entities.service.order.repository import OrderItemRepository, OrderRepository
from src.app.entities.service.payment.entity import PaymentStatus
from src.app.entities.service.payment.repository import PaymentRepository, RefundRepository
from src.app.entities.service.product.repository import InventoryRepository, ProductRepository
from src.app.entities.service.report.entity import AnalyticalReportType
from src.app.entities.service.review.repository import ReviewRepository
from src.app.runtime.context import get_config

TOP_N = 10


class ReportFilters(BaseModel):
    """Date range accepted by every report type; open ends are unbounded."""

    start_date: datetime | None = None
    end_date: datetime | None = None


def _ratio(part: float, whole: float) -> float:
    return round(part / whole, 4) if whole else 0.0


def _revenue(orders: list[Order]) -> float:
    return round(sum(order.total_price for order in orders), 2)


def sales_report(db: Session, filters: ReportFilters) -> dict[str, Any]:
    orders = OrderRepository(db).list_between(filters.start_date, filters.end_date)
    items = OrderItemRepository(db).for_orders([order.id for order in orders])
    revenue = _revenue(orders)

    products: dict[str, dict[str, Any]] = {}
    for item in items:
        entry = products.setdefault(
            item.product_id,
            {"product_id": item.product_id, "name": item.name, "quantity": 0, "revenue": 0.0},
        )
        entry["quantity"] += item.quantity
        entry["revenue"] = round(entry["revenue"] + item.total_price, 2)

    by_method: dict[str, dict[str, Any]] = defaultdict(lambda: {"orders": 0, "revenue": 0.0})
    by_date: dict[str, dict[str, Any]] = defaultdict(lambda: {"orders": 0, "revenue": 0.0})
    for order in orders:
        for bucket in (by_method[order.payment_method.value], by_date[order.created_at.date().isoformat()]):
            bucket["orders"] += 1
            bucket["revenue"] = round(bucket["revenue"] + order.total_price, 2)

    return {
        "total_orders": len(orders),
        "total_revenue": revenue,
        "average_order_value": round(revenue / len(orders), 2) if orders else 0.0,
        "top_products": sorted(products.values(), key=lambda p: p["quantity"], reverse=True)[:TOP_N],
        "sales_by_payment_method": dict(by_method),
        "sales_by_date": dict(sorted(by_date.items())),
    }


def inventory_report(db: Session, filters: ReportFilters) -> dict[str, Any]:
    threshold = get_config().commerce.low_stock_threshold
    products = ProductRepository(db)
    stock = {record.product_id: record.quantity for record in InventoryRepository(db).list_all()}

    catalog = products.list_all()
    value = sum(product.price * stock.get(product.id, 0) for product in catalog)
    return {
        "total_products": len(catalog),
        "low_stock_count": sum(1 for qty in stock.values() if 0 < qty <= threshold),
        "out_of_stock_count": sum(1 for product in catalog if stock.get(product.id, 0) == 0),
        "inventory_value": round(value, 2),
        "top_sellers": [
            {"product_id": p.id, "name": p.name, "sold": p.sold, "stock": stock.get(p.id, 0)}
            for p in products.top_sellers(TOP_N)
        ],
    }


def user_activity_report(db: Session, filters: ReportFilters) -> dict[str, Any]:
    users = UserRepository(db)
    top = OrderRepository(db).top_customers(TOP_N)
    for entry in top:
        user = users.get(entry["user_id"])
        entry["email"] = user.email if user else None
        entry["name"] = user.name if user else None
    return {
        "total_users": users.count(),
        "new_users": users.count_created_between(filters.start_date, filters.end_date),
        "users_by_role": users.count_by_role(),
        "top_customers": top,
    }


def financial_report(db: Session, filters: ReportFilters) -> dict[str, Any]:
    orders = [
        order
        for order in OrderRepository(db).list_between(filters.start_date, filters.end_date)
        if order.payment_status in (PaymentStatus.COMPLETED, PaymentStatus.REFUNDED)
    ]
    revenue = _revenue(orders)
    refunds = RefundRepository(db).total_refunded(filters.start_date, filters.end_date)

    by_month: dict[str, float] = defaultdict(float)
    for order in orders:
        month = order.created_at.strftime("%Y-%m")
        by_month[month] = round(by_month[month] + order.total_price, 2)

    return {
        "total_revenue": revenue,
        "total_refunds": refunds,
        "net_revenue": round(revenue - refunds, 2),
        "tax_collected": round(sum(order.tax_price for order in orders), 2),
        "discounts_given": round(sum(order.discount_amount for order in orders), 2),
        "revenue_by_month": dict(sorted(by_month.items())),
        "payment_method_stats": {
            method: {"count": count, "amount": amount}
            for method, (count, amount) in PaymentRepository(db).totals_by_method().items()
        },
    }


def performance_report(db: Session, filters: ReportFilters) -> dict[str, Any]:
    distribution = ReviewRepository(db).rating_distribution()
    review_count = sum(distribution.values())
    weighted = sum(rate * total for rate, total in distribution.items())

    by_status = OrderRepository(db).count_by_status()
    total_orders = sum(by_status.values())
    return {
        "average_rating": round(weighted / review_count, 2) if review_count else 0.0,
        "total_reviews": review_count,
        "rating_distribution": {str(rate): distribution.get(rate, 0) for rate in range(1, 6)},
        "orders_by_status": by_status,
        "cancellation_rate": _ratio(by_status.get(OrderStatus.CANCELLED.value, 0), total_orders),
        "delivery_rate": _ratio(by_status.get(OrderStatus.DELIVERED.value, 0), total_orders),
    }


def customer_behavior_report(db: Session, filters: ReportFilters) -> dict[str, Any]:
    carts = CartRepository(db)
    cart_counts = {status.value: carts.count_by_status(status) for status in CartStatus}
    total_carts = sum(cart_counts.values())

    order_repo = OrderRepository(db)
    orders = order_repo.list_between(filters.start_date, filters.end_date)
    items = OrderItemRepository(db).for_orders([order.id for order in orders])
    per_user = order_repo.orders_per_user()
    repeat = sum(1 for total in per_user.values() if total > 1)

    return {
        "carts_by_status": cart_counts,
        "cart_abandonment_rate": _ratio(
            total_carts - cart_counts[CartStatus.CONVERTED.value], total_carts
        ),
        "average_items_per_order": (
            round(sum(item.quantity for item in items) / len(orders), 2) if orders else 0.0
        ),
        "customers_with_orders": len(per_user),
        "repeat_customer_rate": _ratio(repeat, len(per_user)),
    }


REPORT_BUILDERS: dict[AnalyticalReportType, Callable[[Session, ReportFilters], dict[str, Any]]] = {
    AnalyticalReportType.SALES: sales_report,
    AnalyticalReportType.INVENTORY: inventory_report,
    AnalyticalReportType.USER_ACTIVITY: user_activity_report,
    AnalyticalReportType.FINANCIAL: financial_report,
    AnalyticalReportType.PERFORMANCE: performance_report,
    AnalyticalReportType.CUSTOMER_BEHAVIOR: customer_behavior_report,
}
