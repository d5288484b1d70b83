"""
PayDota Core Library
====================
OTP issuance and verification with WhatsApp delivery.
"""

__version__ = "0.1.0"

# OTP
from paydota_core.otp import (
    OTPPurpose,
    Language,
    OTPFailure,
    OTPConfig,
    OTPRecord,
    SendOTPResult,
    VerifyOTPResult,
    OTPStats,
    OTPStore,
    OTPTransport,
    OTPService,
    generate_otp,
)

# WhatsApp
from paydota_core.whatsapp import (
    WhatsAppConfig,
    WhatsAppService,
    WhatsAppError,
    WhatsAppAPIError,
    WhatsAppNotConfiguredError,
)

# Messaging
from paydota_core.messaging import format_whatsapp_number

# Metrics
from paydota_core.metrics import OTPMetrics, MetricNames

# Config & Logging
from paydota_core.config import Settings
from paydota_core.log_config import setup_logging

__all__ = [
    # OTP
    "OTPPurpose",
    "Language",
    "OTPFailure",
    "OTPConfig",
    "OTPRecord",
    "SendOTPResult",
    "VerifyOTPResult",
    "OTPStats",
    "OTPStore",
    "OTPTransport",
    "OTPService",
    "generate_otp",
    # WhatsApp
    "WhatsAppConfig",
    "WhatsAppService",
    "WhatsAppError",
    "WhatsAppAPIError",
    "WhatsAppNotConfiguredError",
    # Messaging
    "format_whatsapp_number",
    # Metrics
    "OTPMetrics",
    "MetricNames",
    # Config & Logging
    "Settings",
    "setup_logging",
]
