"""In-app notifications: user inbox operations, admin broadcast and cleanup."""

from datetime import timedelta
from typing import Any

from loguru import logger
from sqlmodel import Session

from src.app.core.errors import NotFoundError, ValidationError
from src.app.core.models import PageParams
from src.app.core.services.notification.templates import NotificationTemplate
from src.app.entities.core._base import utc_now
from src.app.entities.core.user.repository import UserRepository
from src.app.entities.service.notification.entity import Notification, NotificationType
from src.app.entities.service.notification.repository import NotificationRepository
from src.app.entities.service.order.entity import Order
from src.app.runtime.context import get_config


class NotificationService:
    def __init__(self, db_session: Session):
        self._notifications = NotificationRepository(db_session)
        self._users = UserRepository(db_session)

    def create(
        self,
        user_id: str,
        title: str,
        message: str,
        type: NotificationType = NotificationType.SYSTEM,
        *,
        sender_id: str | None = None,
        related_id: str | None = None,
        related_type: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> Notification:
        notification = self._notifications.create(
            Notification(
                user_id=user_id,
                sender_id=sender_id,
                title=title,
                message=message,
                type=type,
                related_id=related_id,
                related_type=related_type,
                details=details or {},
            )
        )
        logger.bind(
            notification_id=notification.id, user_id=user_id, type=type.value
        ).debug("notification.created")
        return notification

    def create_for_user(self, user_id: str, data: dict[str, Any], sender_id: str) -> Notification:
        """Admin-authored notification; the recipient must exist."""
        if self._users.get(user_id) is None:
            raise NotFoundError("User not found")
        return self.create(user_id, sender_id=sender_id, **data)

    def bulk_create(
        self, user_ids: list[str], data: dict[str, Any], sender_id: str
    ) -> list[Notification]:
        if not user_ids:
            raise ValidationError("At least one user id is required")
        recipients = [uid for uid in dict.fromkeys(user_ids) if self._users.get(uid) is not None]
        created = [self.create(uid, sender_id=sender_id, **data) for uid in recipients]
        logger.bind(count=len(created), sender_id=sender_id).info("notification.bulk_created")
        return created

    def notify_order(self, order: Order, template: NotificationTemplate) -> Notification:
        return self.create(
            order.user_id,
            template.title,
            template.message,
            template.type,
            related_id=order.id,
            related_type="order",
            details=template.details,
        )

    def list_for_user(
        self,
        user_id: str,
        params: PageParams,
        type: NotificationType | None = None,
        is_read: bool | None = None,
    ) -> tuple[list[Notification], int]:
        return self._notifications.list_page(
            offset=params.offset,
            limit=params.limit,
            user_id=user_id,
            type=type,
            is_read=is_read,
        )

    def list_all(
        self, params: PageParams, type: NotificationType | None = None
    ) -> tuple[list[Notification], int]:
        return self._notifications.list_page(offset=params.offset, limit=params.limit, type=type)

    def get(self, user_id: str, notification_id: str) -> Notification:
        notification = self._notifications.get_for_user(notification_id, user_id)
        if notification is None:
            raise NotFoundError("Notification not found")
        return notification

    def mark_read(self, user_id: str, notification_id: str) -> Notification:
        notification = self.get(user_id, notification_id)
        notification.mark_read()
        return self._notifications.update(notification)

    def mark_all_read(self, user_id: str) -> int:
        return self._notifications.mark_all_read(user_id)

    def delete(self, user_id: str, notification_id: str) -> None:
        notification = self.get(user_id, notification_id)
        notification.soft_delete()
        self._notifications.update(notification)

    def delete_all(self, user_id: str) -> int:
        return self._notifications.soft_delete_all(user_id)

    def stats(self, user_id: str) -> dict[str, Any]:
        total = self._notifications.count_visible(user_id)
        unread = self._notifications.count_unread(user_id)
        return {
            "total": total,
            "unread": unread,
            "read": total - unread,
            "by_type": self._notifications.count_by_type(user_id),
        }

    def cleanup(self, days: int | None = None) -> int:
        """Hard-delete notifications soft-deleted more than ``days`` ago."""
        retention = days if days is not None else get_config().notifications.retention_days
        if retention < 0:
            raise ValidationError("Days must be zero or greater")
        purged = self._notifications.purge_deleted_before(utc_now() - timedelta(days=retention))
        logger.bind(purged=purged, days=retention).info("notification.cleanup")
        return purged
