"""
PayDota HTTP Surface
====================
FastAPI routers exposing the OTP engine and WhatsApp webhooks.
"""

from .otp import create_otp_router
from .webhooks import create_whatsapp_webhook_router
from .health import create_health_router, HealthStatus, ComponentHealth, HealthResponse
from .app import create_app

__all__ = [
    "create_otp_router",
    "create_whatsapp_webhook_router",
    "create_health_router",
    "HealthStatus",
    "ComponentHealth",
    "HealthResponse",
    "create_app",
]
