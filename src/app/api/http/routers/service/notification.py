"""Notification API router."""

from typing import Any

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from sqlmodel import Session

from src.app.api.http.deps import get_current_user, get_db_session, require_admin
from src.app.api.http.schemas import ApiResponse, ok, paginated
from src.app.core.models import PageParams
from src.app.core.services.notification import NotificationService
from src.app.entities.core.user import User
from src.app.entities.service.notification import Notification, NotificationType

router = APIRouter(prefix="/notifications", tags=["notifications"])


class NotificationContent(BaseModel):
    title: str = Field(min_length=1)
    message: str = Field(min_length=1)
    type: NotificationType = NotificationType.SYSTEM
    related_id: str | None = None
    related_type: str | None = None
    details: dict[str, Any] = Field(default_factory=dict)


class NotificationCreate(NotificationContent):
    user_id: str


class BulkNotificationCreate(NotificationContent):
    user_ids: list[str] = Field(min_length=1)


class CountResult(BaseModel):
    count: int


@router.get("", response_model=ApiResponse[list[Notification]])
def list_notifications(
    page: int = Query(1),
    limit: int = Query(10),
    type: NotificationType | None = None,
    is_read: bool | None = None,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
) -> ApiResponse[list[Notification]]:
    params = PageParams.of(page, limit)
    items, total = NotificationService(session).list_for_user(user.id, params, type, is_read)
    return paginated(items, total, params)


@router.get("/stats", response_model=ApiResponse[dict[str, Any]])
def notification_stats(
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
) -> ApiResponse[dict[str, Any]]:
    return ok(NotificationService(session).stats(user.id))


@router.get("/admin", response_model=ApiResponse[list[Notification]])
def list_all_notifications(
    page: int = Query(1),
    limit: int = Query(10),
    type: NotificationType | None = None,
    _: User = Depends(require_admin),
    session: Session = Depends(get_db_session),
) -> ApiResponse[list[Notification]]:
    params = PageParams.of(page, limit)
    items, total = NotificationService(session).list_all(params, type)
    return paginated(items, total, params)


@router.post("", status_code=201, response_model=ApiResponse[Notification])
def create_notification(
    payload: NotificationCreate,
    admin: User = Depends(require_admin),
    session: Session = Depends(get_db_session),
) -> ApiResponse[Notification]:
    notification = NotificationService(session).create_for_user(
        payload.user_id, payload.model_dump(exclude={"user_id"}), sender_id=admin.id
    )
    session.commit()
    return ok(notification, "Notification created")


@router.post("/bulk", status_code=201, response_model=ApiResponse[CountResult])
def bulk_create_notifications(
    payload: BulkNotificationCreate,
    admin: User = Depends(require_admin),
    session: Session = Depends(get_db_session),
) -> ApiResponse[CountResult]:
    created = NotificationService(session).bulk_create(
        payload.user_ids, payload.model_dump(exclude={"user_ids"}), sender_id=admin.id
    )
    session.commit()
    return ok(CountResult(count=len(created)), "Notifications created")


@router.post("/cleanup", response_model=ApiResponse[CountResult])
def cleanup_notifications(
    days: int | None = Query(None, ge=0),
    _: User = Depends(require_admin),
    session: Session = Depends(get_db_session),
) -> ApiResponse[CountResult]:
    purged = NotificationService(session).cleanup(days)
    session.commit()
    return ok(CountResult(count=purged), "Old notifications removed")


@router.patch("/read-all", response_model=ApiResponse[CountResult])
def mark_all_read(
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
) -> ApiResponse[CountResult]:
    updated = NotificationService(session).mark_all_read(user.id)
    session.commit()
    return ok(CountResult(count=updated), "All notifications marked as read")


@router.delete("", response_model=ApiResponse[CountResult])
def delete_all_notifications(
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
) -> ApiResponse[CountResult]:
    deleted = NotificationService(session).delete_all(user.id)
    session.commit()
    return ok(CountResult(count=deleted), "All notifications deleted")


@router.get("/{notification_id}", response_model=ApiResponse[Notification])
def get_notification(
    notification_id: str,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
) -> ApiResponse[Notification]:
    return ok(NotificationService(session).get(user.id, notification_id))


@router.patch("/{notification_id}/read", response_model=ApiResponse[Notification])
def mark_read(
    notification_id: str,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
) -> ApiResponse[Notification]:
    notification = NotificationService(session).mark_read(user.id, notification_id)
    session.commit()
    return ok(notification, "Notification marked as read")


@router.delete("/{notification_id}", response_model=ApiResponse[None])
def delete_notification(
    notification_id: str,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
) -> ApiResponse[None]:
    NotificationService(session).delete(user.id, notification_id)
    session.commit()
    return ok(message="Notification deleted")
