"""Order and order item repositories."""

from datetime import datetime
from typing import Any

from sqlalchemy import delete
from sqlmodel import col, func, select

from src.app.entities.core._base import Repository
from src.app.entities.service.order.entity import Order, OrderItem, OrderStatus
from src.app.entities.service.order.table import OrderItemTable, OrderTable
from src.app.entities.service.payment.entity import PaymentStatus


class OrderRepository(Repository[Order, OrderTable]):
    """Data-access layer for orders."""

    entity_cls = Order
    table_cls = OrderTable

    def get_by_number(self, order_number: str) -> Order | None:
        statement = select(OrderTable).where(OrderTable.order_number == order_number)
        row = self._session.exec(statement).first()
        return self._to_entity(row) if row is not None else None

    def list_page(
        self,
        *,
        offset: int,
        limit: int,
        user_id: str | None = None,
        status: OrderStatus | None = None,
    ) -> tuple[list[Order], int]:
        conditions = []
        if user_id is not None:
            conditions.append(OrderTable.user_id == user_id)
        if status is not None:
            conditions.append(OrderTable.status == status)
        statement = (
            select(OrderTable)
            .where(*conditions)
            .order_by(col(OrderTable.created_at).desc())
            .offset(offset)
            .limit(limit)
        )
        rows = self._session.exec(statement).all()
        return self._to_entities(rows), self.count(*conditions)

    def count_user_coupon_uses(self, user_id: str, coupon_id: str) -> int:
        return self.count(
            OrderTable.user_id == user_id,
            OrderTable.coupon_id == coupon_id,
            OrderTable.status != OrderStatus.CANCELLED,
        )

    def coupon_in_use(self, coupon_id: str, statuses: tuple[OrderStatus, ...]) -> bool:
        return (
            self.count(OrderTable.coupon_id == coupon_id, col(OrderTable.status).in_(statuses))
            > 0
        )

    def list_between(
        self,
        start: datetime | None = None,
        end: datetime | None = None,
        *,
        exclude_cancelled: bool = True,
    ) -> list[Order]:
        conditions = []
        if start is not None:
            conditions.append(OrderTable.created_at >= start)
        if end is not None:
            conditions.append(OrderTable.created_at <= end)
        if exclude_cancelled:
            conditions.append(OrderTable.status != OrderStatus.CANCELLED)
        statement = select(OrderTable).where(*conditions).order_by(col(OrderTable.created_at))
        return self._to_entities(self._session.exec(statement).all())

    def paid_revenue(self) -> float:
        statement = select(func.coalesce(func.sum(OrderTable.total_price), 0.0)).where(
            OrderTable.payment_status == PaymentStatus.COMPLETED
        )
        return round(float(self._session.exec(statement).one()), 2)

    def count_by_status(self) -> dict[str, int]:
        statement = select(OrderTable.status, func.count()).group_by(OrderTable.status)
        return {
            getattr(status, "value", status): int(total)
            for status, total in self._session.exec(statement).all()
        }

    def orders_per_user(self) -> dict[str, int]:
        statement = (
            select(OrderTable.user_id, func.count())
            .where(OrderTable.status != OrderStatus.CANCELLED)
            .group_by(OrderTable.user_id)
        )
        return {user_id: int(total) for user_id, total in self._session.exec(statement).all()}

    def top_customers(self, limit: int = 10) -> list[dict[str, Any]]:
        spent = func.sum(OrderTable.total_price)
        statement = (
            select(OrderTable.user_id, func.count(), spent)
            .where(OrderTable.status != OrderStatus.CANCELLED)
            .group_by(OrderTable.user_id)
            .order_by(spent.desc())
            .limit(limit)
        )
        return [
            {"user_id": user_id, "orders": int(orders), "total_spent": round(float(total), 2)}
            for user_id, orders, total in self._session.exec(statement).all()
        ]


class OrderItemRepository(Repository[OrderItem, OrderItemTable]):
    """Data-access layer for order lines."""

    entity_cls = OrderItem
    table_cls = OrderItemTable

    def list_for_order(self, order_id: str) -> list[OrderItem]:
        statement = (
            select(OrderItemTable)
            .where(OrderItemTable.order_id == order_id)
            .order_by(col(OrderItemTable.created_at))
        )
        return self._to_entities(self._session.exec(statement).all())

    def for_orders(self, order_ids: list[str]) -> list[OrderItem]:
        if not order_ids:
            return []
        statement = select(OrderItemTable).where(col(OrderItemTable.order_id).in_(order_ids))
        return self._to_entities(self._session.exec(statement).all())

    def delete_for_order(self, order_id: str) -> None:
        self._session.exec(  # type: ignore[call-overload]
            delete(OrderItemTable).where(OrderItemTable.order_id == order_id)
        )
