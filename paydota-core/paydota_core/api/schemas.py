"""
API Schemas
===========
Request bodies for the OTP endpoints.
"""

from typing import Optional
from pydantic import BaseModel, Field

from paydota_core.otp.models import Language, OTPPurpose


class OTPKeyRequest(BaseModel):
    phone: str = Field(min_length=1)
    purpose: OTPPurpose


class SendOTPRequest(OTPKeyRequest):
    email: Optional[str] = None
    language: Language = Language.AR


class VerifyOTPRequest(OTPKeyRequest):
    code: str = Field(min_length=1)
