"""
OTP Issuance and Verification
=============================
In-memory one-time codes with expiry, attempt limits and single use.
"""

from .models import (
    OTPPurpose,
    Language,
    OTPFailure,
    OTPConfig,
    OTPRecord,
    SendOTPResult,
    VerifyOTPResult,
    OTPStats,
)
from .codes import generate_otp, codes_match
from .store import OTPStore
from .transport import OTPTransport
from .sweeper import OTPSweeper
from .service import OTPService

__all__ = [
    # Models
    "OTPPurpose",
    "Language",
    "OTPFailure",
    "OTPConfig",
    "OTPRecord",
    "SendOTPResult",
    "VerifyOTPResult",
    "OTPStats",
    # Codes
    "generate_otp",
    "codes_match",
    # Engine
    "OTPStore",
    "OTPTransport",
    "OTPSweeper",
    "OTPService",
]
