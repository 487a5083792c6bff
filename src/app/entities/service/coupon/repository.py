"""Coupon repository."""

from datetime import datetime

from sqlmodel import col, or_, select

from src.app.entities.core._base import Repository, utc_now
from src.app.entities.service.coupon.entity import Coupon
from src.app.entities.service.coupon.table import CouponTable


class CouponRepository(Repository[Coupon, CouponTable]):
    """Data-access layer for coupons."""

    entity_cls = Coupon
    table_cls = CouponTable

    def get_by_code(self, code: str) -> Coupon | None:
        statement = select(CouponTable).where(CouponTable.code == code.strip().upper())
        row = self._session.exec(statement).first()
        return self._to_entity(row) if row is not None else None

    def list_newest(self) -> list[Coupon]:
        statement = select(CouponTable).order_by(col(CouponTable.created_at).desc())
        return self._to_entities(self._session.exec(statement).all())

    def list_public(self, now: datetime | None = None) -> list[Coupon]:
        now = now or utc_now()
        statement = (
            select(CouponTable)
            .where(
                CouponTable.is_active == True,  # noqa: E712
                CouponTable.is_public == True,  # noqa: E712
                CouponTable.start_date <= now,
                CouponTable.end_date >= now,
                or_(
                    col(CouponTable.max_usage).is_(None),
                    CouponTable.max_usage == 0,
                    col(CouponTable.max_usage) > col(CouponTable.used_count),
                ),
            )
            .order_by(col(CouponTable.end_date))
        )
        return self._to_entities(self._session.exec(statement).all())

    def increment_usage(self, coupon_id: str) -> Coupon | None:
        row = self._get_row(coupon_id, for_update=True)
        if row is None:
            return None
        row.used_count += 1
        self._session.add(row)
        self._session.flush()
        return self._to_entity(row)
