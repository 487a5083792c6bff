"""Transactional email over a JSON HTTP API.

Emails are sent from FastAPI background tasks, so delivery failures are logged
instead of raised.
"""

import uuid

import httpx
from loguru import logger
from pydantic import BaseModel

from src.app.entities.service.order.entity import Order, OrderItem
from src.app.runtime.config.config_data import EmailConfig
from src.app.runtime.context import get_config


class EmailMessage(BaseModel):
    to: str
    subject: str
    text: str


class EmailClient:
    def __init__(
        self,
        config: EmailConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._config = config or get_config().email
        self._transport = transport

    @property
    def is_configured(self) -> bool:
        return bool(self._config.api_url and self._config.api_key)

    async def send(self, message: EmailMessage, idempotency_key: str | None = None) -> bool:
        """Send ``message``; returns False when skipped or rejected."""
        if not self.is_configured:
            logger.bind(to=message.to, subject=message.subject).warning(
                "email.skipped_not_configured"
            )
            return False

        headers = {
            "Authorization": f"Bearer {self._config.api_key}",
            "Idempotency-Key": idempotency_key or str(uuid.uuid4()),
        }
        payload = {
            "from": self._config.from_address,
            "to": [message.to],
            "subject": message.subject,
            "text": message.text,
        }
        try:
            async with httpx.AsyncClient(
                timeout=self._config.timeout, transport=self._transport
            ) as client:
                response = await client.post(self._config.api_url, json=payload, headers=headers)  # type: ignore[arg-type]
                response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.bind(to=message.to, subject=message.subject, error=str(exc)).error(
                "email.send_failed"
            )
            return False

        logger.bind(to=message.to, subject=message.subject).info("email.sent")
        return True


def order_confirmation_email(to: str, order: Order, items: list[OrderItem]) -> EmailMessage:
    lines = [f"Thank you for your order {order.order_number}.", ""]
    lines += [f"- {item.name} x{item.quantity}: {item.total_price:.2f}" for item in items]
    lines += [
        "",
        f"Items: {order.items_price:.2f}",
        f"Shipping: {order.shipping_price:.2f}",
        f"Tax: {order.tax_price:.2f}",
    ]
    if order.discount_amount:
        lines.append(f"Discount: -{order.discount_amount:.2f}")
    lines.append(f"Total: {order.total_price:.2f}")
    return EmailMessage(
        to=to,
        subject=f"Order confirmation {order.order_number}",
        text="\n".join(lines),
    )


async def send_order_confirmation(
    client: EmailClient, to: str, order: Order, items: list[OrderItem]
) -> bool:
    message = order_confirmation_email(to, order, items)
    return await client.send(message, idempotency_key=f"order-confirmation-{order.id}")
