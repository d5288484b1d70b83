"""
WhatsApp Module
===============
WhatsApp Business Cloud API client used as the OTP transport.
"""

from .config import WhatsAppConfig, GRAPH_API_URL
from .exceptions import WhatsAppError, WhatsAppNotConfiguredError, WhatsAppAPIError
from .models import (
    TransactionType,
    SecurityAlertType,
    CardType,
    SendMessageResponse,
    InboundMessage,
    DeliveryStatus,
    WebhookSummary,
)
from .client import WhatsAppService

__all__ = [
    # Config
    "WhatsAppConfig",
    "GRAPH_API_URL",
    # Exceptions
    "WhatsAppError",
    "WhatsAppNotConfiguredError",
    "WhatsAppAPIError",
    # Models
    "TransactionType",
    "SecurityAlertType",
    "CardType",
    "SendMessageResponse",
    "InboundMessage",
    "DeliveryStatus",
    "WebhookSummary",
    # Client
    "WhatsAppService",
]
