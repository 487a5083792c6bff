"""Shared helpers for the payment gateway REST clients."""

from typing import Any

import httpx
from loguru import logger

from src.app.core.errors import PaymentGatewayError

# Currencies whose smallest unit is the whole unit.
ZERO_DECIMAL_CURRENCIES = frozenset({"JPY", "KRW", "VND", "CLP"})


def to_minor_units(amount: float, currency: str) -> int:
    """Convert ``amount`` to the integer unit gateways expect (cents for USD)."""
    if currency.upper() in ZERO_DECIMAL_CURRENCIES:
        return int(round(amount))
    return int(round(amount * 100))


def format_amount(amount: float, currency: str) -> str:
    if currency.upper() in ZERO_DECIMAL_CURRENCIES:
        return str(int(round(amount)))
    return f"{amount:.2f}"


def raise_for_gateway(provider: str, response: httpx.Response) -> dict[str, Any]:
    """Return the JSON body of a successful response or raise ``PaymentGatewayError``."""
    if response.is_success:
        return response.json() if response.content else {}

    try:
        body = response.json()
    except ValueError:
        body = {"raw": response.text[:200]}
    message = None
    if isinstance(body, dict):
        error = body.get("error")
        message = body.get("message") or (
            error.get("message") if isinstance(error, dict) else error
        )
    logger.bind(provider=provider, status=response.status_code).warning(
        "payment.gateway_error"
    )
    raise PaymentGatewayError(
        f"{provider} request failed: {message or response.status_code}",
        details={"provider": provider, "status": response.status_code},
    )


async def send(
    provider: str,
    client: httpx.AsyncClient,
    method: str,
    url: str,
    **kwargs: Any,
) -> dict[str, Any]:
    try:
        response = await client.request(method, url, **kwargs)
    except httpx.HTTPError as exc:
        logger.bind(provider=provider, error=str(exc)).warning("payment.gateway_unreachable")
        raise PaymentGatewayError(f"{provider} is unreachable") from exc
    return raise_for_gateway(provider, response)
