"""Notification database table model."""

from datetime import datetime
from typing import Any

import sqlalchemy as sa
from sqlmodel import Field

from src.app.entities.core._base import EntityTable, TZDateTime
from src.app.entities.service.notification.entity import NotificationType


class NotificationTable(EntityTable, table=True):
    """Database persistence model for notifications."""

    __tablename__ = "notifications"

    user_id: str = Field(foreign_key="users.id", index=True)
    sender_id: str | None = None
    title: str
    message: str
    type: NotificationType = Field(default=NotificationType.SYSTEM, index=True)
    is_read: bool = False
    read_at: datetime | None = Field(default=None, sa_type=TZDateTime)
    is_deleted: bool = Field(default=False, index=True)
    deleted_at: datetime | None = Field(default=None, sa_type=TZDateTime)
    related_id: str | None = None
    related_type: str | None = None
    details: dict[str, Any] = Field(default_factory=dict, sa_type=sa.JSON)
