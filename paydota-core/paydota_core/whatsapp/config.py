"""
WhatsApp Configuration
======================
Credentials for the WhatsApp Business Cloud API.
"""

import os
from dataclasses import dataclass

GRAPH_API_URL = "https://graph.facebook.com/v18.0"


@dataclass
class WhatsAppConfig:
    """Configuration for the WhatsApp Business API."""
    phone_number_id: str = ""
    access_token: str = ""
    verify_token: str = ""
    business_account_id: str = ""
    base_url: str = GRAPH_API_URL
    timeout: float = 30.0

    @classmethod
    def from_env(cls) -> "WhatsAppConfig":
        return cls(
            phone_number_id=os.environ.get("WHATSAPP_PHONE_NUMBER_ID", ""),
            access_token=os.environ.get("WHATSAPP_ACCESS_TOKEN", ""),
            verify_token=os.environ.get("WHATSAPP_VERIFY_TOKEN", ""),
            business_account_id=os.environ.get("WHATSAPP_BUSINESS_ACCOUNT_ID", ""),
            base_url=os.environ.get("WHATSAPP_API_URL", GRAPH_API_URL),
        )

    @property
    def is_complete(self) -> bool:
        return bool(self.phone_number_id and self.access_token and self.verify_token)
