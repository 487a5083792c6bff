"""Stripe PaymentIntents REST client (form-encoded, Bearer secret key)."""

from typing import Any

import httpx

from src.app.core.errors import PaymentGatewayError
from src.app.core.services.payments.gateway import send
from src.app.runtime.config.config_data import StripeConfig
from src.app.runtime.context import get_config

PROVIDER = "Stripe"


def _flatten_metadata(metadata: dict[str, str] | None) -> dict[str, str]:
    return {f"metadata[{key}]": str(value) for key, value in (metadata or {}).items()}


class StripeClient:
    def __init__(
        self,
        config: StripeConfig | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        cfg = get_config()
        self._config = config or cfg.payments.stripe
        self._timeout = timeout or cfg.payments.http_timeout
        self._transport = transport

    @property
    def is_configured(self) -> bool:
        return bool(self._config.secret_key)

    async def _call(
        self, method: str, path: str, data: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        if not self.is_configured:
            raise PaymentGatewayError("Stripe is not configured")
        headers = {"Authorization": f"Bearer {self._config.secret_key}"}
        async with httpx.AsyncClient(
            base_url=self._config.base_url, timeout=self._timeout, transport=self._transport
        ) as client:
            return await send(PROVIDER, client, method, path, data=data, headers=headers)

    async def create_payment_intent(
        self,
        amount: int,
        currency: str,
        metadata: dict[str, str] | None = None,
        payment_method: str | None = None,
        confirm: bool = False,
    ) -> dict[str, Any]:
        """Create a PaymentIntent for ``amount`` minor units."""
        data: dict[str, Any] = {"amount": amount, "currency": currency.lower()}
        data.update(_flatten_metadata(metadata))
        if payment_method:
            data["payment_method"] = payment_method
            data["payment_method_types[]"] = "card"
        else:
            data["automatic_payment_methods[enabled]"] = "true"
        if confirm:
            data["confirm"] = "true"
        return await self._call("POST", "/v1/payment_intents", data)

    async def confirm_payment_intent(
        self, intent_id: str, payment_method: str | None = None
    ) -> dict[str, Any]:
        data = {"payment_method": payment_method} if payment_method else {}
        return await self._call("POST", f"/v1/payment_intents/{intent_id}/confirm", data)

    async def retrieve_payment_intent(self, intent_id: str) -> dict[str, Any]:
        return await self._call("GET", f"/v1/payment_intents/{intent_id}")

    async def cancel_payment_intent(self, intent_id: str) -> dict[str, Any]:
        return await self._call("POST", f"/v1/payment_intents/{intent_id}/cancel", {})

    async def create_refund(
        self, payment_intent_id: str, amount: int, reason: str | None = None
    ) -> dict[str, Any]:
        data: dict[str, Any] = {"payment_intent": payment_intent_id, "amount": amount}
        if reason:
            data["metadata[reason]"] = reason
        return await self._call("POST", "/v1/refunds", data)
