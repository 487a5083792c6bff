from .email_client import EmailClient, EmailMessage, order_confirmation_email, send_order_confirmation

__all__ = ["EmailClient", "EmailMessage", "order_confirmation_email", "send_order_confirmation"]
