"""Payment, payment session and refund repositories."""

from sqlmodel import col, func, select

from src.app.entities.core._base import Repository
from src.app.entities.service.payment.entity import (
    Payment,
    PaymentSession,
    PaymentStatus,
    Refund,
)
from src.app.entities.service.payment.table import (
    PaymentSessionTable,
    PaymentTable,
    RefundTable,
)


class PaymentSessionRepository(Repository[PaymentSession, PaymentSessionTable]):
    """Data-access layer for payment sessions."""

    entity_cls = PaymentSession
    table_cls = PaymentSessionTable

    def get_for_order(self, order_id: str) -> PaymentSession | None:
        statement = select(PaymentSessionTable).where(
            PaymentSessionTable.order_id == order_id
        )
        row = self._session.exec(statement).first()
        return self._to_entity(row) if row is not None else None

    def get_by_session_id(self, session_id: str) -> PaymentSession | None:
        statement = select(PaymentSessionTable).where(
            PaymentSessionTable.session_id == session_id
        )
        row = self._session.exec(statement).first()
        return self._to_entity(row) if row is not None else None

    def get_by_provider_order_id(self, provider_order_id: str) -> PaymentSession | None:
        statement = select(PaymentSessionTable).where(
            PaymentSessionTable.provider_order_id == provider_order_id
        )
        row = self._session.exec(statement).first()
        return self._to_entity(row) if row is not None else None

    def upsert(self, session: PaymentSession) -> PaymentSession:
        """Replace the order's session in place, keeping its id."""
        existing = self.get_for_order(session.order_id)
        if existing is None:
            return self.create(session)
        return self.update(session.model_copy(update={"id": existing.id}))


class PaymentRepository(Repository[Payment, PaymentTable]):
    """Data-access layer for payments."""

    entity_cls = Payment
    table_cls = PaymentTable

    def list_for_order(self, order_id: str) -> list[Payment]:
        statement = (
            select(PaymentTable)
            .where(PaymentTable.order_id == order_id)
            .order_by(col(PaymentTable.created_at).desc())
        )
        return self._to_entities(self._session.exec(statement).all())

    def get_by_transaction_id(self, transaction_id: str) -> Payment | None:
        statement = select(PaymentTable).where(PaymentTable.transaction_id == transaction_id)
        row = self._session.exec(statement).first()
        return self._to_entity(row) if row is not None else None

    def totals_by_method(self) -> dict[str, tuple[int, float]]:
        statement = (
            select(PaymentTable.method, func.count(), func.coalesce(func.sum(PaymentTable.amount), 0))
            .where(col(PaymentTable.status).in_([PaymentStatus.COMPLETED, PaymentStatus.REFUNDED]))
            .group_by(PaymentTable.method)
        )
        return {
            getattr(method, "value", str(method)): (int(count), round(float(total), 2))
            for method, count, total in self._session.exec(statement).all()
        }


class RefundRepository(Repository[Refund, RefundTable]):
    """Data-access layer for refunds."""

    entity_cls = Refund
    table_cls = RefundTable

    def list_for_payment(self, payment_id: str) -> list[Refund]:
        statement = select(RefundTable).where(RefundTable.payment_id == payment_id)
        return self._to_entities(self._session.exec(statement).all())

    def total_refunded(self, start=None, end=None) -> float:
        statement = select(func.coalesce(func.sum(RefundTable.amount), 0))
        if start is not None:
            statement = statement.where(RefundTable.created_at >= start)
        if end is not None:
            statement = statement.where(RefundTable.created_at <= end)
        return round(float(self._session.exec(statement).one()), 2)
