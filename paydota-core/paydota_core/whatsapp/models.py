"""
WhatsApp Models
===============
Data models and enums for the WhatsApp Business Cloud API.
"""

from typing import List, Optional
from enum import Enum
from dataclasses import dataclass, field
from pydantic import BaseModel


class TransactionType(str, Enum):
    DEPOSIT = "deposit"
    WITHDRAW = "withdraw"
    TRANSFER = "transfer"
    PAYMENT = "payment"


class SecurityAlertType(str, Enum):
    LOGIN = "login"
    PASSWORD_CHANGE = "password_change"
    SUSPICIOUS_ACTIVITY = "suspicious_activity"


class CardType(str, Enum):
    VIRTUAL = "virtual"
    PHYSICAL = "physical"


class ContactInfo(BaseModel):
    input: str
    wa_id: str


class MessageId(BaseModel):
    id: str


class SendMessageResponse(BaseModel):
    """Graph API response to POST /{phone_number_id}/messages."""
    messaging_product: str = "whatsapp"
    contacts: List[ContactInfo] = []
    messages: List[MessageId] = []

    @property
    def message_id(self) -> Optional[str]:
        return self.messages[0].id if self.messages else None


@dataclass
class InboundMessage:
    """A user message received through the webhook."""
    sender: str
    type: str
    timestamp: Optional[str] = None


@dataclass
class DeliveryStatus:
    """A delivery status update received through the webhook."""
    message_id: str
    status: str
    timestamp: Optional[str] = None


@dataclass
class WebhookSummary:
    """Parsed contents of a webhook notification."""
    messages: List[InboundMessage] = field(default_factory=list)
    statuses: List[DeliveryStatus] = field(default_factory=list)
