"""
Health Check Routes
===================
Liveness, readiness and component status for the OTP service.
"""

import time
from typing import Dict, Optional
from enum import Enum
from fastapi import APIRouter, Response
from pydantic import BaseModel
import structlog

from paydota_core.otp.service import OTPService
from paydota_core.whatsapp.client import WhatsAppService

logger = structlog.get_logger(__name__)


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


class ComponentHealth(BaseModel):
    status: str
    detail: Optional[Dict[str, int]] = None


class HealthResponse(BaseModel):
    status: HealthStatus
    service: str
    version: str
    components: Dict[str, ComponentHealth]
    timestamp: float


def check_otp(otp_service: OTPService) -> ComponentHealth:
    stats = otp_service.get_stats()
    return ComponentHealth(
        status="running" if otp_service.sweeper_running else "stopped",
        detail={"active": stats.total_active},
    )


async def check_whatsapp(whatsapp: WhatsAppService) -> ComponentHealth:
    if not whatsapp.is_configured():
        return ComponentHealth(status="unconfigured")
    if not await whatsapp.health_check():
        return ComponentHealth(status="not_initialized")
    return ComponentHealth(status="configured")


def create_health_router(
    service_name: str,
    version: str = "0.1.0",
    otp_service: Optional[OTPService] = None,
    whatsapp: Optional[WhatsAppService] = None,
) -> APIRouter:
    """
    Create a health check router.

    Args:
        service_name: Name of the service (e.g., "paydota-api")
        version: Service version
        otp_service: OTP engine to report on (optional)
        whatsapp: WhatsApp transport to report on (optional)

    Returns:
        FastAPI router with /health, /health/live, and /health/ready endpoints
    """
    router = APIRouter(tags=["Health"])

    @router.get("/health", response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        """Component statuses; a missing transport or stopped sweep degrades."""
        components: Dict[str, ComponentHealth] = {}
        overall_status = HealthStatus.HEALTHY

        if otp_service is not None:
            components["otp"] = check_otp(otp_service)
            if components["otp"].status != "running":
                overall_status = HealthStatus.DEGRADED

        if whatsapp is not None:
            components["whatsapp"] = await check_whatsapp(whatsapp)
            if components["whatsapp"].status != "configured":
                overall_status = HealthStatus.DEGRADED

        return HealthResponse(
            status=overall_status,
            service=service_name,
            version=version,
            components=components,
            timestamp=time.time(),
        )

    @router.get("/health/live")
    async def liveness_probe():
        """Kubernetes liveness probe - always returns 200 if service is running."""
        return {"status": "alive"}

    @router.get("/health/ready")
    async def readiness_probe():
        """Ready once the OTP sweep is running."""
        if otp_service is not None and not otp_service.sweeper_running:
            return Response(
                content='{"status": "not_ready", "reason": "otp_sweeper_stopped"}',
                status_code=503,
                media_type="application/json",
            )
        return {"status": "ready"}

    return router
