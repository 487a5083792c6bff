"""Notification services."""

from . import templates
from .notification_service import NotificationService

__all__ = ["NotificationService", "templates"]
