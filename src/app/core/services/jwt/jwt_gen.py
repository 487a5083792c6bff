import time
from typing import Any

from authlib.common.security import generate_token
from authlib.jose import JoseError, jwt
from loguru import logger

from src.app.core.errors import ApiError
from src.app.runtime.config.config_data import ConfigData
from src.app.runtime.context import get_config

RESERVED_CLAIMS = frozenset({"iss", "sub", "aud", "exp", "iat", "nbf", "jti"})


class JwtGeneratorService:
    """Service for generating JWT access tokens."""

    def generate_jwt(
        self,
        subject: str,
        claims: dict[str, Any] | None = None,
        expires_in_seconds: int | None = None,
        issuer: str | None = None,
        audience: str | list[str] | None = None,
        algorithm: str = "HS256",
        include_jti: bool = True,
        secret: str | None = None,
    ) -> str:
        """Generate a signed JWT token using authlib.

        Args:
            subject: Subject (sub) claim - the user ID
            claims: Additional claims to include in the token
            expires_in_seconds: Token lifetime (defaults to the configured access TTL)
            issuer: Issuer (iss) claim (defaults to config issuer)
            audience: Audience (aud) claim (defaults to config audiences)
            algorithm: Signing algorithm (default: HS256)
            include_jti: Whether to include a unique JWT ID claim
            secret: Optional signing secret. If None, the config secret is used.

        Returns:
            Signed JWT token string

        Raises:
            ApiError: If the signing configuration is missing or invalid
        """
        config: ConfigData = get_config()

        secret = secret or config.jwt.secret
        if not secret:
            raise ApiError("JWT signing secret not configured")

        if algorithm not in config.jwt.allowed_algorithms:
            logger.debug(
                "Attempted to use disallowed algorithm: {}, only {} are allowed",
                algorithm,
                config.jwt.allowed_algorithms,
            )
            raise ApiError(f"Algorithm {algorithm} not allowed")

        now = int(time.time())
        ttl = expires_in_seconds or config.jwt.access_token_ttl_seconds
        payload: dict[str, Any] = {
            "iss": issuer or config.jwt.gen_issuer,
            "sub": subject,
            "aud": audience or config.jwt.audiences,
            "exp": now + ttl,
            "iat": now,
            "nbf": now,
        }
        if include_jti:
            payload["jti"] = generate_token(16)

        if claims:
            payload.update({k: v for k, v in claims.items() if k not in RESERVED_CLAIMS})

        try:
            token = jwt.encode({"alg": algorithm, "typ": "JWT"}, payload, secret)
        except JoseError as e:
            raise ApiError(f"JWT encoding failed: {e}") from e

        return token.decode() if isinstance(token, bytes) else token

    def generate_access_token(
        self,
        user_id: str,
        email: str,
        role: str,
        expires_in_seconds: int | None = None,
        **extra_claims: Any,
    ) -> str:
        """Generate the access token carried by the ``accessToken`` cookie.

        Example:
            token = generate_access_token(
                user_id="c1d0...",
                email="user@example.com",
                role="USER",
            )
        """
        claims = {"email": email, "role": role}
        claims.update(extra_claims)
        return self.generate_jwt(
            subject=user_id, claims=claims, expires_in_seconds=expires_in_seconds
        )
