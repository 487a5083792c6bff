"""Password hashing, opaque token and webhook signature helpers."""

import hashlib
import hmac
import secrets
import time

from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, password_hash: str) -> bool:
    return pwd_context.verify(plain_password, password_hash)


def generate_refresh_token() -> str:
    """Generate an opaque refresh token (256 bits of entropy)."""
    return secrets.token_urlsafe(32)


def random_digits(length: int) -> str:
    return "".join(secrets.choice("0123456789") for _ in range(length))


def compute_stripe_signature(payload: bytes, secret: str, timestamp: int) -> str:
    """Compute the ``v1`` signature Stripe sends for a webhook payload."""
    signed_payload = f"{timestamp}.".encode() + payload
    return hmac.new(secret.encode("utf-8"), signed_payload, hashlib.sha256).hexdigest()


def verify_stripe_signature(
    payload: bytes,
    signature_header: str,
    secret: str,
    tolerance_seconds: int = 300,
    now: int | None = None,
) -> bool:
    """Validate a ``Stripe-Signature`` header (``t=<ts>,v1=<sig>[,v1=...]``).

    Args:
        payload: Raw request body exactly as received
        signature_header: Value of the Stripe-Signature header
        secret: Endpoint signing secret
        tolerance_seconds: Maximum accepted age of the signed timestamp
        now: Current unix time (injectable for tests)

    Returns:
        True when one of the ``v1`` signatures matches and the timestamp is fresh
    """
    timestamp: int | None = None
    signatures: list[str] = []
    for part in signature_header.split(","):
        key, _, value = part.strip().partition("=")
        if key == "t" and value.isdigit():
            timestamp = int(value)
        elif key == "v1":
            signatures.append(value)

    if timestamp is None or not signatures:
        return False

    current = int(time.time()) if now is None else now
    if abs(current - timestamp) > tolerance_seconds:
        return False

    expected = compute_stripe_signature(payload, secret, timestamp)
    return any(hmac.compare_digest(expected, candidate) for candidate in signatures)
