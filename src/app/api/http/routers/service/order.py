"""Order API router."""

from typing import Any

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from pydantic import BaseModel
from sqlmodel import Session

from src.app.api.http.deps import (
    get_current_user,
    get_db_session,
    get_email_client,
    require_admin,
)
from src.app.api.http.schemas import ApiResponse, ok, paginated
from src.app.core.models import PageParams
from src.app.core.services.commerce import OrderDetail, OrderService, OrderTracking
from src.app.core.services.email import EmailClient, send_order_confirmation
from src.app.entities.core.user import User
from src.app.entities.service.order import Order
from src.app.entities.service.order.entity import OrderStatus
from src.app.entities.service.payment.entity import PaymentMethod

router = APIRouter(prefix="/orders", tags=["orders"])


class OrderCreate(BaseModel):
    payment_method: PaymentMethod
    shipping_address: dict[str, Any] | None = None
    coupon_code: str | None = None
    notes: str | None = None


class StatusUpdate(BaseModel):
    status: OrderStatus


class CancelRequest(BaseModel):
    reason: str | None = None


@router.post("", status_code=201, response_model=ApiResponse[OrderDetail])
def create_order(
    payload: OrderCreate,
    background_tasks: BackgroundTasks,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
    email_client: EmailClient = Depends(get_email_client),
) -> ApiResponse[OrderDetail]:
    detail = OrderService(session).create_order(
        user,
        payload.payment_method,
        shipping_address=payload.shipping_address,
        coupon_code=payload.coupon_code,
        notes=payload.notes,
    )
    session.commit()
    background_tasks.add_task(
        send_order_confirmation, email_client, user.email, detail.order, detail.items
    )
    return ok(detail, "Order created successfully")


@router.get("", response_model=ApiResponse[list[Order]])
def list_orders(
    page: int = Query(1),
    limit: int = Query(10),
    status: OrderStatus | None = None,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
) -> ApiResponse[list[Order]]:
    params = PageParams.of(page, limit)
    orders, total = OrderService(session).list_orders(user, params, status)
    return paginated(orders, total, params)


@router.get("/track/{order_number}", response_model=ApiResponse[OrderTracking])
def track_order(
    order_number: str, session: Session = Depends(get_db_session)
) -> ApiResponse[OrderTracking]:
    return ok(OrderService(session).track_order(order_number))


@router.get("/{order_id}", response_model=ApiResponse[OrderDetail])
def get_order(
    order_id: str,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
) -> ApiResponse[OrderDetail]:
    return ok(OrderService(session).get_order(user, order_id))


@router.patch("/{order_id}/status", response_model=ApiResponse[Order])
def update_status(
    order_id: str,
    payload: StatusUpdate,
    _: User = Depends(require_admin),
    session: Session = Depends(get_db_session),
) -> ApiResponse[Order]:
    order = OrderService(session).update_status(order_id, payload.status)
    session.commit()
    return ok(order, "Order status updated")


@router.post("/{order_id}/cancel", response_model=ApiResponse[Order])
def cancel_order(
    order_id: str,
    payload: CancelRequest | None = None,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
) -> ApiResponse[Order]:
    reason = payload.reason if payload else None
    order = OrderService(session).cancel_order(user, order_id, reason)
    session.commit()
    return ok(order, "Order cancelled")
