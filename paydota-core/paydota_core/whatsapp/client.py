"""
WhatsApp Business Client
========================
Sends PayDota notifications through the WhatsApp Business Cloud API.
"""

import httpx
from typing import Any, Dict, Optional
import structlog

from paydota_core.messaging import format_whatsapp_number
from paydota_core.otp.models import Language
from paydota_core.otp.transport import OTPTransport

from . import templates
from .config import WhatsAppConfig
from .exceptions import WhatsAppAPIError, WhatsAppNotConfiguredError
from .models import (
    CardType,
    DeliveryStatus,
    InboundMessage,
    SecurityAlertType,
    SendMessageResponse,
    TransactionType,
    WebhookSummary,
)

logger = structlog.get_logger(__name__)


class WhatsAppService(OTPTransport):
    """
    WhatsApp Business API client.

    Features:
    - Text messages (OTP, transaction, security and card notifications)
    - Webhook subscription verification
    - Inbound message and delivery status parsing
    """

    name = "whatsapp"

    def __init__(
        self,
        config: Optional[WhatsAppConfig] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Args:
            config: API credentials, read from the environment when omitted
            http_client: Pre-built client, mainly for tests
        """
        self.config = config or WhatsAppConfig.from_env()
        self._client = http_client
        self._owns_client = http_client is None

    async def initialize(self) -> None:
        """Create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.config.timeout)
            self._owns_client = True
        logger.info("WhatsApp client initialized", configured=self.is_configured())

    async def close(self) -> None:
        """Close the HTTP client if this service created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
        logger.info("WhatsApp client closed")

    async def __aenter__(self) -> "WhatsAppService":
        await self.initialize()
        return self

    async def __aexit__(self, *exc) -> None:
        await self.close()

    def is_configured(self) -> bool:
        return self.config.is_complete

    @property
    def messages_url(self) -> str:
        return f"{self.config.base_url}/{self.config.phone_number_id}/messages"

    async def send_text_message(self, to: str, message: str) -> SendMessageResponse:
        """
        Send a plain text message.

        Args:
            to: Recipient phone number, any common format
            message: Message body

        Returns:
            Parsed Graph API response

        Raises:
            WhatsAppNotConfiguredError: Credentials are missing
            WhatsAppAPIError: The API rejected the message or was unreachable
        """
        if not self.is_configured():
            raise WhatsAppNotConfiguredError()

        payload = {
            "messaging_product": "whatsapp",
            "to": format_whatsapp_number(to),
            "type": "text",
            "text": {"body": message},
        }
        return await self._send_message(payload)

    async def send_otp(
        self,
        to: str,
        code: str,
        language: Language = Language.AR,
    ) -> SendMessageResponse:
        """Send a verification code."""
        return await self.send_text_message(to, templates.otp_message(code, language))

    async def send_transaction_notification(
        self,
        to: str,
        transaction_type: TransactionType,
        amount: str,
        currency: str = "USD",
        language: Language = Language.AR,
    ) -> SendMessageResponse:
        """Confirm a deposit, withdrawal, transfer or payment."""
        body = templates.transaction_message(transaction_type, amount, currency, language)
        return await self.send_text_message(to, body)

    async def send_security_alert(
        self,
        to: str,
        alert_type: SecurityAlertType,
        language: Language = Language.AR,
    ) -> SendMessageResponse:
        """Warn about a login, password change or suspicious activity."""
        return await self.send_text_message(to, templates.security_alert_message(alert_type, language))

    async def send_card_notification(
        self,
        to: str,
        card_type: CardType,
        card_last4: str,
        language: Language = Language.AR,
    ) -> SendMessageResponse:
        """Announce a newly created card."""
        return await self.send_text_message(to, templates.card_message(card_type, card_last4, language))

    def verify_webhook(self, mode: str, token: str, challenge: str) -> Optional[str]:
        """
        Answer the webhook subscription handshake.

        Returns:
            The challenge when mode and token match, None otherwise
        """
        if mode == "subscribe" and self.config.verify_token and token == self.config.verify_token:
            logger.info("WhatsApp webhook verified")
            return challenge
        logger.warning("WhatsApp webhook verification rejected", mode=mode)
        return None

    def handle_webhook(self, payload: Dict[str, Any]) -> WebhookSummary:
        """
        Parse a webhook notification and log its messages and statuses.

        Malformed payloads are logged and produce an empty summary.
        """
        summary = WebhookSummary()
        if not isinstance(payload, dict) or payload.get("object") != "whatsapp_business_account":
            return summary

        try:
            for entry in payload.get("entry") or []:
                for change in entry.get("changes") or []:
                    value = change.get("value") or {}

                    for message in value.get("messages") or []:
                        inbound = InboundMessage(
                            sender=message.get("from", ""),
                            type=message.get("type", ""),
                            timestamp=message.get("timestamp"),
                        )
                        summary.messages.append(inbound)
                        logger.info(
                            "Received WhatsApp message",
                            sender=inbound.sender,
                            type=inbound.type,
                            timestamp=inbound.timestamp,
                        )

                    for status in value.get("statuses") or []:
                        update = DeliveryStatus(
                            message_id=status.get("id", ""),
                            status=status.get("status", ""),
                            timestamp=status.get("timestamp"),
                        )
                        summary.statuses.append(update)
                        logger.info(
                            "WhatsApp message status",
                            message_id=update.message_id,
                            status=update.status,
                            timestamp=update.timestamp,
                        )
        except (AttributeError, TypeError) as e:
            logger.error("Error handling WhatsApp webhook", error=str(e))
            return WebhookSummary()

        return summary

    async def health_check(self) -> bool:
        """True when credentials are present and the client is ready."""
        return self.is_configured() and self._client is not None

    async def _send_message(self, payload: Dict[str, Any]) -> SendMessageResponse:
        if self._client is None:
            raise RuntimeError("WhatsApp client not initialized")

        try:
            response = await self._client.post(
                self.messages_url,
                json=payload,
                headers={
                    "Authorization": f"Bearer {self.config.access_token}",
                    "Content-Type": "application/json",
                },
            )
        except httpx.HTTPError as e:
            logger.error("WhatsApp request failed", error=str(e))
            raise WhatsAppAPIError(f"WhatsApp request failed: {e}") from e

        if not response.is_success:
            logger.error(
                "WhatsApp API error",
                status_code=response.status_code,
                body=response.text,
            )
            raise WhatsAppAPIError(
                f"WhatsApp API Error: {response.status_code} - {response.text}",
                status_code=response.status_code,
                details=response.text,
            )

        result = SendMessageResponse.model_validate(response.json())
        logger.info("WhatsApp message sent", message_id=result.message_id)
        return result
