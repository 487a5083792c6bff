"""Payment API router: PayPal, Stripe, Google Pay, COD, refunds and webhooks."""

from typing import Any

from fastapi import APIRouter, Depends, Header, Request
from pydantic import BaseModel, Field
from sqlmodel import Session

from src.app.api.http.deps import (
    get_current_user,
    get_db_session,
    get_payment_service,
    require_admin,
)
from src.app.api.http.middleware.limiter import (
    payment_rate_limit,
    sensitive_payment_rate_limit,
)
from src.app.api.http.schemas import ApiResponse, ok
from src.app.core.services.payments import PaymentService
from src.app.entities.core.user import User
from src.app.entities.service.payment import PaymentSession, Refund

router = APIRouter(prefix="/payments", tags=["payments"])


class PayPalOrderRequest(BaseModel):
    order_id: str
    currency: str = "USD"
    return_url: str | None = None
    cancel_url: str | None = None


class PayPalCaptureRequest(BaseModel):
    paypal_order_id: str


class StripeIntentRequest(BaseModel):
    order_id: str
    currency: str = "USD"


class StripeConfirmRequest(BaseModel):
    payment_intent_id: str
    payment_method: str | None = None


class GooglePayRequest(BaseModel):
    order_id: str
    payment_data: dict[str, Any]
    currency: str = "USD"


class OrderRef(BaseModel):
    order_id: str


class RefundRequest(BaseModel):
    payment_id: str
    amount: float | None = Field(default=None, gt=0)
    reason: str | None = None


class WebhookAck(BaseModel):
    received: bool = True
    event_type: str


@router.post(
    "/paypal/orders",
    status_code=201,
    response_model=ApiResponse[PaymentSession],
    dependencies=[Depends(payment_rate_limit)],
)
async def create_paypal_order(
    payload: PayPalOrderRequest,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
    payments: PaymentService = Depends(get_payment_service),
) -> ApiResponse[PaymentSession]:
    result = await payments.create_paypal_order(
        user, payload.order_id, payload.currency, payload.return_url, payload.cancel_url
    )
    session.commit()
    return ok(result, "PayPal order created")


@router.post(
    "/paypal/capture",
    response_model=ApiResponse[PaymentSession],
    dependencies=[Depends(sensitive_payment_rate_limit)],
)
async def capture_paypal_order(
    payload: PayPalCaptureRequest,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
    payments: PaymentService = Depends(get_payment_service),
) -> ApiResponse[PaymentSession]:
    result = await payments.capture_paypal_order(user, payload.paypal_order_id)
    session.commit()
    return ok(result, "PayPal payment processed")


@router.post(
    "/stripe/intents",
    status_code=201,
    response_model=ApiResponse[PaymentSession],
    dependencies=[Depends(payment_rate_limit)],
)
async def create_stripe_intent(
    payload: StripeIntentRequest,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
    payments: PaymentService = Depends(get_payment_service),
) -> ApiResponse[PaymentSession]:
    result = await payments.create_stripe_intent(user, payload.order_id, payload.currency)
    session.commit()
    return ok(result, "Payment intent created")


@router.post(
    "/stripe/confirm",
    response_model=ApiResponse[PaymentSession],
    dependencies=[Depends(sensitive_payment_rate_limit)],
)
async def confirm_stripe_payment(
    payload: StripeConfirmRequest,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
    payments: PaymentService = Depends(get_payment_service),
) -> ApiResponse[PaymentSession]:
    result = await payments.confirm_stripe_payment(
        user, payload.payment_intent_id, payload.payment_method
    )
    session.commit()
    return ok(result, "Payment confirmed")


@router.post(
    "/google-pay",
    response_model=ApiResponse[PaymentSession],
    dependencies=[Depends(payment_rate_limit)],
)
async def process_google_pay(
    payload: GooglePayRequest,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
    payments: PaymentService = Depends(get_payment_service),
) -> ApiResponse[PaymentSession]:
    result = await payments.process_google_pay(
        user, payload.order_id, payload.payment_data, payload.currency
    )
    session.commit()
    return ok(result, "Google Pay payment processed")


@router.post(
    "/cod",
    response_model=ApiResponse[PaymentSession],
    dependencies=[Depends(payment_rate_limit)],
)
def process_cod(
    payload: OrderRef,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
    payments: PaymentService = Depends(get_payment_service),
) -> ApiResponse[PaymentSession]:
    result = payments.process_cod(user, payload.order_id)
    session.commit()
    return ok(result, "Cash on delivery selected")


@router.post(
    "/cod/{order_id}/confirm",
    response_model=ApiResponse[PaymentSession],
    dependencies=[Depends(sensitive_payment_rate_limit)],
)
def confirm_cod(
    order_id: str,
    _: User = Depends(require_admin),
    session: Session = Depends(get_db_session),
    payments: PaymentService = Depends(get_payment_service),
) -> ApiResponse[PaymentSession]:
    result = payments.confirm_cod(order_id)
    session.commit()
    return ok(result, "Cash on delivery payment confirmed")


@router.get(
    "/sessions/{order_id}",
    response_model=ApiResponse[PaymentSession],
    dependencies=[Depends(payment_rate_limit)],
)
def get_session(
    order_id: str,
    user: User = Depends(get_current_user),
    payments: PaymentService = Depends(get_payment_service),
) -> ApiResponse[PaymentSession]:
    return ok(payments.get_session(user, order_id))


@router.post(
    "/sessions/{order_id}/cancel",
    response_model=ApiResponse[PaymentSession],
    dependencies=[Depends(sensitive_payment_rate_limit)],
)
async def cancel_session(
    order_id: str,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_db_session),
    payments: PaymentService = Depends(get_payment_service),
) -> ApiResponse[PaymentSession]:
    result = await payments.cancel_session(user, order_id)
    session.commit()
    return ok(result, "Payment session cancelled")


@router.post(
    "/refunds",
    status_code=201,
    response_model=ApiResponse[Refund],
    dependencies=[Depends(sensitive_payment_rate_limit)],
)
async def refund_payment(
    payload: RefundRequest,
    admin: User = Depends(require_admin),
    session: Session = Depends(get_db_session),
    payments: PaymentService = Depends(get_payment_service),
) -> ApiResponse[Refund]:
    refund = await payments.refund(admin, payload.payment_id, payload.amount, payload.reason)
    session.commit()
    return ok(refund, "Refund processed")


@router.post("/webhooks/stripe", response_model=WebhookAck)
async def stripe_webhook(
    request: Request,
    stripe_signature: str | None = Header(default=None, alias="Stripe-Signature"),
    session: Session = Depends(get_db_session),
    payments: PaymentService = Depends(get_payment_service),
) -> WebhookAck:
    event_type = payments.handle_stripe_webhook(await request.body(), stripe_signature)
    session.commit()
    return WebhookAck(event_type=event_type)


@router.post("/webhooks/paypal", response_model=WebhookAck)
async def paypal_webhook(
    request: Request,
    session: Session = Depends(get_db_session),
    payments: PaymentService = Depends(get_payment_service),
) -> WebhookAck:
    event = await request.json()
    event_type = await payments.handle_paypal_webhook(dict(request.headers), event)
    session.commit()
    return WebhookAck(event_type=event_type)
