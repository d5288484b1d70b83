"""
OTP Routes
==========
HTTP adapter over OTPService; results map 1:1 to JSON bodies.
"""

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from paydota_core.otp.models import OTPPurpose
from paydota_core.otp.service import OTPService

from .schemas import OTPKeyRequest, SendOTPRequest, VerifyOTPRequest


def create_otp_router(service: OTPService, prefix: str = "/otp") -> APIRouter:
    """
    Create the OTP router.

    Args:
        service: The OTP engine to expose
        prefix: Mount prefix

    Returns:
        FastAPI router with send, verify, status, cancel and stats endpoints
    """
    router = APIRouter(prefix=prefix, tags=["OTP"])

    @router.post("/send")
    async def send_otp(body: SendOTPRequest) -> JSONResponse:
        result = await service.send_otp(
            body.phone,
            body.purpose,
            email=body.email,
            language=body.language,
        )
        return JSONResponse(status_code=200 if result.success else 502, content=result.to_dict())

    @router.post("/verify")
    async def verify_otp(body: VerifyOTPRequest) -> JSONResponse:
        result = service.verify_otp(body.phone, body.code, body.purpose)
        return JSONResponse(status_code=200 if result.success else 400, content=result.to_dict())

    @router.get("/status")
    async def otp_status(phone: str = Query(min_length=1), purpose: OTPPurpose = Query()):
        active = service.has_active_otp(phone, purpose)
        expires_at = service.get_otp_expiry_time(phone, purpose) if active else None
        return {
            "active": active,
            "expiresAt": expires_at.isoformat() if expires_at else None,
        }

    @router.post("/cancel")
    async def cancel_otp(body: OTPKeyRequest):
        return {"cancelled": service.cancel_otp(body.phone, body.purpose)}

    @router.get("/stats")
    async def otp_stats():
        return service.get_stats().to_dict()

    return router
