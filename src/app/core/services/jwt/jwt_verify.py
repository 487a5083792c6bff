"""JWT verification service."""

import time
from typing import Any

from authlib.jose import JoseError, jwt
from loguru import logger
from pydantic import BaseModel

from src.app.core.errors import ApiError, AuthenticationError
from src.app.runtime.context import get_config

INVALID_TOKEN_MESSAGE = "Invalid or expired access token"


class AccessTokenClaims(BaseModel):
    """Claims carried by a verified access token."""

    sub: str
    email: str
    role: str
    exp: int
    iat: int
    jti: str | None = None


class JwtVerificationService:
    def verify_jwt(self, token: str, *, key: str | None = None) -> AccessTokenClaims:
        """Verify an access token signed by this API.

        Raises:
            AuthenticationError: If the signature, issuer, audience or lifetime is invalid
        """
        cfg = get_config()
        secret = key or cfg.jwt.secret
        if not secret:
            raise ApiError("JWT signing secret not configured")

        claims_options = {
            "iss": {"essential": True, "values": [cfg.jwt.gen_issuer]},
            "aud": {"essential": True, "values": cfg.jwt.audiences},
            "sub": {"essential": True},
            "exp": {"essential": True},
        }
        try:
            claims = jwt.decode(token, secret, claims_options=claims_options)
            claims.validate(leeway=cfg.jwt.clock_skew)
        except (JoseError, ValueError) as exc:
            logger.debug("JWT rejected: {}", exc)
            raise AuthenticationError(INVALID_TOKEN_MESSAGE) from exc

        if claims.header.get("alg") not in cfg.jwt.allowed_algorithms:
            raise AuthenticationError(INVALID_TOKEN_MESSAGE)

        now = int(time.time())
        if int(claims.get("iat", 0)) > now + cfg.jwt.clock_skew:
            raise AuthenticationError(INVALID_TOKEN_MESSAGE)

        payload: dict[str, Any] = dict(claims)
        try:
            return AccessTokenClaims.model_validate(payload)
        except ValueError as exc:
            raise AuthenticationError(INVALID_TOKEN_MESSAGE) from exc
