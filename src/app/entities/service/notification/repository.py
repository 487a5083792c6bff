"""Notification repository."""

from datetime import datetime

from sqlalchemy import delete, update
from sqlmodel import col, func, select

from src.app.entities.core._base import Repository, utc_now
from src.app.entities.service.notification.entity import Notification, NotificationType
from src.app.entities.service.notification.table import NotificationTable


class NotificationRepository(Repository[Notification, NotificationTable]):
    """Data-access layer for notifications."""

    entity_cls = Notification
    table_cls = NotificationTable

    @staticmethod
    def _visible_to(user_id: str) -> list:
        return [
            NotificationTable.user_id == user_id,
            NotificationTable.is_deleted == False,  # noqa: E712
        ]

    def list_page(
        self,
        *,
        offset: int,
        limit: int,
        user_id: str | None = None,
        type: NotificationType | None = None,
        is_read: bool | None = None,
    ) -> tuple[list[Notification], int]:
        conditions = self._visible_to(user_id) if user_id is not None else []
        if type is not None:
            conditions.append(NotificationTable.type == type)
        if is_read is not None:
            conditions.append(NotificationTable.is_read == is_read)
        statement = (
            select(NotificationTable)
            .where(*conditions)
            .order_by(col(NotificationTable.created_at).desc())
            .offset(offset)
            .limit(limit)
        )
        rows = self._session.exec(statement).all()
        return self._to_entities(rows), self.count(*conditions)

    def get_for_user(self, notification_id: str, user_id: str) -> Notification | None:
        statement = select(NotificationTable).where(
            NotificationTable.id == notification_id, *self._visible_to(user_id)
        )
        row = self._session.exec(statement).first()
        return self._to_entity(row) if row is not None else None

    def mark_all_read(self, user_id: str) -> int:
        statement = (
            update(NotificationTable)
            .where(*self._visible_to(user_id), NotificationTable.is_read == False)  # noqa: E712
            .values(is_read=True, read_at=utc_now(), updated_at=utc_now())
        )
        result = self._session.exec(statement)  # type: ignore[call-overload]
        return int(result.rowcount or 0)

    def soft_delete_all(self, user_id: str) -> int:
        statement = (
            update(NotificationTable)
            .where(*self._visible_to(user_id))
            .values(is_deleted=True, deleted_at=utc_now(), updated_at=utc_now())
        )
        result = self._session.exec(statement)  # type: ignore[call-overload]
        return int(result.rowcount or 0)

    def count_by_type(self, user_id: str) -> dict[str, int]:
        statement = (
            select(NotificationTable.type, func.count())
            .where(*self._visible_to(user_id))
            .group_by(NotificationTable.type)
        )
        return {
            getattr(kind, "value", kind): int(total)
            for kind, total in self._session.exec(statement).all()
        }

    def count_unread(self, user_id: str) -> int:
        return self.count(*self._visible_to(user_id), NotificationTable.is_read == False)  # noqa: E712

    def count_visible(self, user_id: str) -> int:
        return self.count(*self._visible_to(user_id))

    def purge_deleted_before(self, cutoff: datetime) -> int:
        """Hard-delete notifications soft-deleted before ``cutoff``."""
        statement = delete(NotificationTable).where(
            NotificationTable.is_deleted == True,  # noqa: E712
            col(NotificationTable.deleted_at) < cutoff,
        )
        result = self._session.exec(statement)  # type: ignore[call-overload]
        return int(result.rowcount or 0)
