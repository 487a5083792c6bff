"""Pydantic models for parsing the config.yaml configuration file.

This module contains Pydantic models that correspond to the structure of config.yaml.
These models handle validation and type conversion of the YAML configuration data.
"""

from __future__ import annotations

import os
from typing import Literal

from loguru import logger
from pydantic import BaseModel, Field, computed_field


class CORSConfig(BaseModel):
    """CORS configuration for the application."""

    origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:3001"]
    )
    allow_credentials: bool = True
    allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
    )
    allow_headers: list[str] = Field(default=["*"])


class RateLimiterConfig(BaseModel):
    """Rate limiter configuration model."""

    requests: int = Field(
        default=100, description="Number of requests allowed per window"
    )
    window_ms: int = Field(default=60000, description="Time window in milliseconds")
    enabled: bool = Field(default=True, description="Enable rate limiting")
    per_endpoint: bool = Field(
        default=True, description="Apply rate limiting per endpoint"
    )
    per_method: bool = Field(
        default=True, description="Apply rate limiting per HTTP method"
    )


class JWTConfig(BaseModel):
    """JWT issuing and validation configuration."""

    secret: str | None = Field(
        default=None, description="HMAC secret used to sign access tokens"
    )
    allowed_algorithms: list[str] = Field(
        default_factory=lambda: ["HS256"],
        description="JWT algorithms allowed for token generation and validation",
    )
    gen_issuer: str = Field(
        default="storefront-api", description="Issuer name to use when generating tokens"
    )
    audiences: list[str] = Field(
        default_factory=lambda: ["storefront"],
        description="JWT audiences that this API accepts",
    )
    access_token_ttl_seconds: int = Field(
        default=3600, description="Access token lifetime in seconds"
    )
    refresh_token_ttl_seconds: int = Field(
        default=7 * 24 * 3600, description="Refresh token cookie lifetime in seconds"
    )
    clock_skew: int = Field(default=60, description="Clock skew tolerance in seconds")


class LoggingConfig(BaseModel):
    """Logging configuration model."""

    level: str = Field(default="INFO", description="Logging level")
    format: Literal["json", "plain"] = Field(default="json", description="Log format")
    file: str | None = Field(default="logs/app.log", description="Log file path")
    max_size_mb: int = Field(default=10, description="Maximum log file size in MB")
    backup_count: int = Field(
        default=5, description="Number of backup log files to keep"
    )


class DatabaseConfig(BaseModel):
    """Database configuration model."""

    url: str = Field(
        default="sqlite:///./storefront.db",
        description="Database connection URL",
    )
    pool_size: int = Field(default=20, description="Connection pool size")
    max_overflow: int = Field(default=10, description="Maximum pool overflow")
    pool_timeout: int = Field(default=30, description="Pool timeout in seconds")
    pool_recycle: int = Field(default=1800, description="Pool recycle time in seconds")
    echo: bool = Field(default=False, description="Echo SQL statements")
    password_env_var: str | None = Field(
        default=None,
        description="Environment variable name containing database password",
    )
    password_file: str | None = Field(
        default=None,
        description="Path to file containing database password",
    )

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    @computed_field
    @property
    def password(self) -> str | None:
        """Resolve the database password.

        A mounted secrets file wins over an environment variable; when neither
        is configured the password embedded in the URL (if any) is used.
        """
        if self.password_file:
            try:
                with open(self.password_file) as f:
                    return f.read().strip()
            except OSError as e:
                raise ValueError("Failed to read database password from file.") from e
        if self.password_env_var:
            password = os.getenv(self.password_env_var)
            if not password:
                raise ValueError(f"Environment variable {self.password_env_var} not set")
            return password
        return None

    @computed_field
    @property
    def connection_string(self) -> str:
        """Construct the database connection string with the resolved password."""
        from sqlalchemy.engine import make_url

        base_url = make_url(self.url)
        resolved_password = self.password
        if resolved_password is None or self.is_sqlite:
            return self.url

        if base_url.password and base_url.password != resolved_password:
            logger.warning(
                "Database password in URL differs from the configured secret; using the secret."
            )
        return base_url.set(password=resolved_password).render_as_string(
            hide_password=False
        )


class AppConfig(BaseModel):
    """Application configuration model."""

    environment: Literal["development", "production", "test"] = Field(
        default="development", description="Application environment"
    )
    name: str = Field(default="Storefront API", description="Application name")
    host: str = Field(default="localhost", description="Application host")
    port: int = Field(default=8000, description="Application port")
    api_prefix: str = Field(default="/api", description="Prefix for all API routers")
    cors: CORSConfig = Field(
        default_factory=CORSConfig, description="CORS configuration"
    )

    @property
    def base_url(self) -> str:
        """Construct the base URL from host and port."""
        scheme = "https" if self.environment == "production" else "http"
        return f"{scheme}://{self.host}:{self.port}"


class SecurityConfig(BaseModel):
    """Security configuration for authentication cookies."""

    secure_cookies: bool = Field(
        default=True, description="Force secure cookies in production"
    )
    cookie_samesite: Literal["lax", "strict", "none"] = Field(
        default="lax", description="SameSite cookie attribute"
    )
    access_cookie_name: str = Field(
        default="accessToken", description="Cookie carrying the access JWT"
    )
    refresh_cookie_name: str = Field(
        default="refreshToken", description="Cookie carrying the refresh token"
    )
    password_min_length: int = Field(
        default=6, description="Minimum accepted password length"
    )


class CommerceConfig(BaseModel):
    """Pricing rules shared by carts and orders."""

    currency: str = Field(default="USD", description="Default store currency")
    tax_rate: float = Field(default=0.10, description="Tax rate applied to subtotals")
    free_shipping_threshold: float = Field(
        default=100.0, description="Subtotal above which shipping is free"
    )
    shipping_fee: float = Field(default=10.0, description="Flat shipping fee")
    low_stock_threshold: int = Field(
        default=10, description="Inventory level reported as low stock"
    )
    max_compare_products: int = Field(
        default=3, description="Maximum number of products in a compare list"
    )


class PayPalConfig(BaseModel):
    """PayPal REST API configuration."""

    client_id: str | None = Field(default=None, description="PayPal client ID")
    client_secret: str | None = Field(default=None, description="PayPal client secret")
    base_url: str = Field(
        default="https://api-m.sandbox.paypal.com", description="PayPal API base URL"
    )
    webhook_id: str | None = Field(
        default=None, description="Webhook ID used to verify PayPal events"
    )
    token_cache_ttl_seconds: int = Field(
        default=3000, description="How long to reuse an OAuth access token"
    )


class StripeConfig(BaseModel):
    """Stripe REST API configuration."""

    secret_key: str | None = Field(default=None, description="Stripe secret key")
    base_url: str = Field(
        default="https://api.stripe.com", description="Stripe API base URL"
    )
    webhook_secret: str | None = Field(
        default=None, description="Signing secret for Stripe webhooks"
    )
    webhook_tolerance_seconds: int = Field(
        default=300, description="Maximum accepted webhook timestamp age"
    )


class PaymentsConfig(BaseModel):
    """Payment gateway configuration."""

    http_timeout: float = Field(default=15.0, description="Gateway HTTP timeout")
    session_ttl_hours: int = Field(
        default=24, description="Lifetime of an online payment session"
    )
    cod_session_ttl_days: int = Field(
        default=30, description="Lifetime of a cash-on-delivery payment session"
    )
    supported_currencies: list[str] = Field(
        default_factory=lambda: ["USD", "EUR", "GBP", "CAD", "AUD", "JPY"],
        description="Currencies accepted by the gateways",
    )
    paypal: PayPalConfig = Field(default_factory=PayPalConfig)
    stripe: StripeConfig = Field(default_factory=StripeConfig)


class EmailConfig(BaseModel):
    """Transactional email provider configuration."""

    api_url: str | None = Field(default=None, description="Provider send endpoint")
    api_key: str | None = Field(default=None, description="Provider API key")
    from_address: str = Field(
        default="no-reply@storefront.local", description="Sender address"
    )
    timeout: float = Field(default=10.0, description="HTTP timeout in seconds")


class ReportsConfig(BaseModel):
    """Report retention and cleanup schedule."""

    cleanup_enabled: bool = Field(
        default=True, description="Run the periodic expired-report cleanup"
    )
    cleanup_interval_seconds: int = Field(
        default=24 * 3600, description="Seconds between cleanup runs"
    )
    default_expiry_days: int = Field(
        default=30, description="Default lifetime of an analytical report"
    )


class NotificationsConfig(BaseModel):
    """Notification retention configuration."""

    retention_days: int = Field(
        default=30, description="Days before soft-deleted notifications are purged"
    )


class ConfigData(BaseModel):
    """Root configuration model that matches the config.yaml structure."""

    rate_limiter: RateLimiterConfig = Field(
        default_factory=RateLimiterConfig, description="Rate limiter configuration"
    )
    jwt: JWTConfig = Field(
        default_factory=JWTConfig, description="JWT configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    database: DatabaseConfig = Field(
        default_factory=DatabaseConfig, description="Database configuration"
    )
    app: AppConfig = Field(
        default_factory=AppConfig, description="Application configuration"
    )
    security: SecurityConfig = Field(
        default_factory=SecurityConfig, description="Security configuration"
    )
    commerce: CommerceConfig = Field(
        default_factory=CommerceConfig, description="Pricing configuration"
    )
    payments: PaymentsConfig = Field(
        default_factory=PaymentsConfig, description="Payment gateway configuration"
    )
    email: EmailConfig = Field(
        default_factory=EmailConfig, description="Email provider configuration"
    )
    reports: ReportsConfig = Field(
        default_factory=ReportsConfig, description="Report cleanup configuration"
    )
    notifications: NotificationsConfig = Field(
        default_factory=NotificationsConfig, description="Notification configuration"
    )
