"""Notification domain entity."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import Field

from src.app.entities.core._base import Entity, utc_now


class NotificationType(str, Enum):
    ORDER = "ORDER"
    PAYMENT = "PAYMENT"
    SHIPMENT = "SHIPMENT"
    REFUND = "REFUND"
    PROMOTION = "PROMOTION"
    SYSTEM = "SYSTEM"


class Notification(Entity):
    """An in-app message addressed to one user."""

    user_id: str = Field(description="Recipient")
    sender_id: str | None = Field(default=None, description="Admin who sent it, if any")
    title: str = Field(min_length=1)
    message: str = Field(min_length=1)
    type: NotificationType = Field(default=NotificationType.SYSTEM)
    is_read: bool = False
    read_at: datetime | None = None
    is_deleted: bool = False
    deleted_at: datetime | None = None
    related_id: str | None = Field(default=None, description="Id of the related record")
    related_type: str | None = Field(default=None, description="Kind of the related record")
    details: dict[str, Any] = Field(default_factory=dict)

    def mark_read(self) -> None:
        if not self.is_read:
            self.is_read = True
            self.read_at = utc_now()

    def soft_delete(self) -> None:
        self.is_deleted = True
        self.deleted_at = utc_now()
