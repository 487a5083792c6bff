from dataclasses import dataclass

from src.app.core.services import (
    DbSessionService,
    JwtGeneratorService,
    JwtVerificationService,
)
from src.app.core.services.email import EmailClient
from src.app.core.services.payments import PayPalClient, StripeClient


@dataclass
class ApplicationDependencies:
    database_service: DbSessionService
    jwt_generation_service: JwtGeneratorService
    jwt_verify_service: JwtVerificationService
    paypal_client: PayPalClient
    stripe_client: StripeClient
    email_client: EmailClient
