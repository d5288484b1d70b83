"""
Application Factory
===================
Wires the OTP engine, WhatsApp transport and routers into a FastAPI app.
"""

from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Response

from paydota_core.config import Settings
from paydota_core.log_config import setup_logging
from paydota_core.otp.models import OTPConfig
from paydota_core.otp.service import OTPService
from paydota_core.whatsapp.client import WhatsAppService

from .health import create_health_router
from .otp import create_otp_router
from .webhooks import create_whatsapp_webhook_router


def create_app(
    settings: Optional[Settings] = None,
    whatsapp: Optional[WhatsAppService] = None,
    otp_service: Optional[OTPService] = None,
    configure_logging: bool = True,
) -> FastAPI:
    """
    Build the OTP API.

    The lifespan opens the WhatsApp client and starts the OTP sweep on
    startup, and reverses both on shutdown.
    """
    settings = settings or Settings.from_env()
    if configure_logging:
        setup_logging(
            settings.service_name,
            settings.log_level,
            settings.log_json,
            environment=settings.environment,
        )

    whatsapp = whatsapp or WhatsAppService()
    otp_service = otp_service or OTPService(
        transport=whatsapp,
        config=OTPConfig(dev_mode=settings.otp_dev_mode),
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await whatsapp.initialize()
        otp_service.start()
        try:
            yield
        finally:
            await otp_service.stop()
            await whatsapp.close()

    app = FastAPI(title=settings.service_name, version=settings.version, lifespan=lifespan)
    app.state.settings = settings
    app.state.otp_service = otp_service
    app.state.whatsapp = whatsapp

    app.include_router(create_otp_router(otp_service))
    app.include_router(create_whatsapp_webhook_router(whatsapp))
    app.include_router(create_health_router(
        settings.service_name,
        version=settings.version,
        otp_service=otp_service,
        whatsapp=whatsapp,
    ))

    @app.get("/metrics", include_in_schema=False)
    async def metrics() -> Response:
        return Response(
            content=otp_service.metrics.export(),
            media_type=otp_service.metrics.content_type,
        )

    return app
