"""PayPal Orders v2 REST client."""

from typing import Any

import httpx
from cachetools import TTLCache
from loguru import logger

from src.app.core.errors import PaymentGatewayError
from src.app.core.services.payments.gateway import format_amount, send
from src.app.runtime.config.config_data import PayPalConfig
from src.app.runtime.context import get_config

PROVIDER = "PayPal"

_token_cache: TTLCache[str, str] | None = None


def _get_token_cache(ttl: int) -> TTLCache[str, str]:
    global _token_cache
    if _token_cache is None:
        _token_cache = TTLCache(maxsize=8, ttl=ttl)
    return _token_cache


def clear_token_cache() -> None:
    if _token_cache is not None:
        _token_cache.clear()


class PayPalClient:
    def __init__(
        self,
        config: PayPalConfig | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        cfg = get_config()
        self._config = config or cfg.payments.paypal
        self._timeout = timeout or cfg.payments.http_timeout
        self._transport = transport

    @property
    def is_configured(self) -> bool:
        return bool(self._config.client_id and self._config.client_secret)

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._config.base_url,
            timeout=self._timeout,
            transport=self._transport,
        )

    async def _access_token(self) -> str:
        if not self.is_configured:
            raise PaymentGatewayError("PayPal is not configured")

        cache = _get_token_cache(self._config.token_cache_ttl_seconds)
        cache_key = f"{self._config.base_url}:{self._config.client_id}"
        token = cache.get(cache_key)
        if token:
            return token

        async with self._client() as client:
            body = await send(
                PROVIDER,
                client,
                "POST",
                "/v1/oauth2/token",
                data={"grant_type": "client_credentials"},
                auth=(self._config.client_id or "", self._config.client_secret or ""),
                headers={"Accept": "application/json"},
            )
        token = body.get("access_token")
        if not token:
            raise PaymentGatewayError("PayPal did not return an access token")
        cache[cache_key] = token
        logger.debug("Fetched new PayPal access token")
        return token

    async def _call(self, method: str, path: str, json: dict[str, Any] | None = None) -> dict[str, Any]:
        token = await self._access_token()
        headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
            "Prefer": "return=representation",
        }
        async with self._client() as client:
            return await send(PROVIDER, client, method, path, json=json, headers=headers)

    async def create_order(
        self,
        amount: float,
        currency: str,
        reference_id: str,
        return_url: str | None = None,
        cancel_url: str | None = None,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "intent": "CAPTURE",
            "purchase_units": [
                {
                    "reference_id": reference_id,
                    "amount": {
                        "currency_code": currency,
                        "value": format_amount(amount, currency),
                    },
                }
            ],
        }
        if return_url or cancel_url:
            payload["application_context"] = {
                "return_url": return_url,
                "cancel_url": cancel_url,
                "user_action": "PAY_NOW",
            }
        return await self._call("POST", "/v2/checkout/orders", payload)

    async def capture_order(self, provider_order_id: str) -> dict[str, Any]:
        return await self._call("POST", f"/v2/checkout/orders/{provider_order_id}/capture", {})

    async def refund_capture(self, capture_id: str, amount: float, currency: str) -> dict[str, Any]:
        payload = {"amount": {"currency_code": currency, "value": format_amount(amount, currency)}}
        return await self._call("POST", f"/v2/payments/captures/{capture_id}/refund", payload)

    async def verify_webhook_signature(self, headers: dict[str, str], event: dict[str, Any]) -> bool:
        """Ask PayPal to verify a webhook delivery; False when no webhook id is configured."""
        if not self._config.webhook_id:
            logger.warning("paypal.webhook_id_missing")
            return False
        lowered = {k.lower(): v for k, v in headers.items()}
        payload = {
            "auth_algo": lowered.get("paypal-auth-algo"),
            "cert_url": lowered.get("paypal-cert-url"),
            "transmission_id": lowered.get("paypal-transmission-id"),
            "transmission_sig": lowered.get("paypal-transmission-sig"),
            "transmission_time": lowered.get("paypal-transmission-time"),
            "webhook_id": self._config.webhook_id,
            "webhook_event": event,
        }
        body = await self._call("POST", "/v1/notifications/verify-webhook-signature", payload)
        return body.get("verification_status") == "SUCCESS"


def approval_link(paypal_order: dict[str, Any]) -> str | None:
    for link in paypal_order.get("links", []):
        if link.get("rel") in {"approve", "payer-action"}:
            return link.get("href")
    return None


def capture_id(capture_result: dict[str, Any]) -> str | None:
    for unit in capture_result.get("purchase_units", []):
        captures = (unit.get("payments") or {}).get("captures") or []
        if captures:
            return captures[0].get("id")
    return None
