"""
OTP Models
==========
Data models and enums for OTP issuance and verification.
"""

from datetime import datetime
from typing import Any, Dict, Optional
from dataclasses import dataclass, field
from enum import Enum


class OTPPurpose(str, Enum):
    """Flows an OTP can be scoped to."""
    LOGIN = "login"
    REGISTRATION = "registration"
    PASSWORD_RESET = "password_reset"
    PHONE_VERIFICATION = "phone_verification"
    TRANSACTION = "transaction"


class Language(str, Enum):
    """Supported message locales."""
    AR = "ar"
    EN = "en"


class OTPFailure(str, Enum):
    """Why a send or verify call did not succeed."""
    NOT_FOUND = "not_found"
    EXPIRED = "expired"
    ALREADY_USED = "already_used"
    ATTEMPTS_EXHAUSTED = "attempts_exhausted"
    CODE_MISMATCH = "code_mismatch"
    DELIVERY_FAILURE = "delivery_failure"
    INVALID_REQUEST = "invalid_request"


@dataclass(frozen=True)
class OTPConfig:
    """Fixed OTP parameters."""
    length: int = 6
    expiry_seconds: int = 300  # 5 minutes
    max_attempts: int = 3
    cleanup_interval_seconds: int = 60
    # Insecure: echoes the code back when no transport is configured
    dev_mode: bool = False


@dataclass
class OTPRecord:
    """A stored one-time code for a (phone, purpose) pair."""
    code: str
    phone: str
    purpose: OTPPurpose
    expires_at: datetime
    max_attempts: int
    created_at: datetime
    email: Optional[str] = None
    attempts: int = 0
    is_used: bool = False

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at

    @property
    def attempts_exhausted(self) -> bool:
        return self.attempts >= self.max_attempts

    def is_active(self, now: datetime) -> bool:
        return not self.is_used and not self.is_expired(now) and not self.attempts_exhausted


@dataclass
class SendOTPResult:
    """Outcome of a send call."""
    success: bool
    message: str
    expires_in: int
    reason: Optional[OTPFailure] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "message": self.message,
            "expiresIn": self.expires_in,
        }


@dataclass
class VerifyOTPResult:
    """Outcome of a verify call."""
    success: bool
    message: str
    attempts_left: Optional[int] = None
    reason: Optional[OTPFailure] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"success": self.success, "message": self.message}
        if self.attempts_left is not None:
            data["attemptsLeft"] = self.attempts_left
        return data


@dataclass
class OTPStats:
    """Aggregate over active records."""
    total_active: int = 0
    by_purpose: Dict[str, int] = field(default_factory=dict)
    oldest_otp: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalActive": self.total_active,
            "byPurpose": dict(self.by_purpose),
            "oldestOTP": self.oldest_otp.isoformat() if self.oldest_otp else None,
        }
