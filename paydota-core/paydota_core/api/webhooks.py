"""
WhatsApp Webhook Routes
=======================
Subscription handshake and notification intake for the Cloud API.
"""

from typing import Any, Dict
from fastapi import APIRouter, Query, Request
from fastapi.responses import PlainTextResponse
import structlog

from paydota_core.whatsapp.client import WhatsAppService

logger = structlog.get_logger(__name__)


def create_whatsapp_webhook_router(whatsapp: WhatsAppService, path: str = "/webhooks/whatsapp") -> APIRouter:
    router = APIRouter(tags=["Webhooks"])

    @router.get(path)
    async def verify_subscription(
        mode: str = Query("", alias="hub.mode"),
        token: str = Query("", alias="hub.verify_token"),
        challenge: str = Query("", alias="hub.challenge"),
    ) -> PlainTextResponse:
        answer = whatsapp.verify_webhook(mode, token, challenge)
        if answer is None:
            return PlainTextResponse("Forbidden", status_code=403)
        return PlainTextResponse(answer)

    @router.post(path)
    async def receive_notification(request: Request) -> Dict[str, Any]:
        try:
            payload = await request.json()
        except ValueError:
            logger.warning("WhatsApp webhook body is not JSON")
            payload = {}
        summary = whatsapp.handle_webhook(payload)
        return {
            "status": "received",
            "messages": len(summary.messages),
            "statuses": len(summary.statuses),
        }

    return router
