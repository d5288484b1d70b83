"""
OTP Messages
============
User-facing texts returned by the OTP service.
"""

from typing import Dict

from .models import Language

SEND_MESSAGES: Dict[str, Dict[Language, str]] = {
    "sent": {
        Language.AR: "تم إرسال رمز التحقق عبر WhatsApp",
        Language.EN: "OTP sent via WhatsApp",
    },
    "generated": {
        Language.AR: "تم إنشاء رمز التحقق",
        Language.EN: "OTP generated",
    },
    "development": {
        Language.AR: "رمز التحقق (تطوير): {code}",
        Language.EN: "OTP (Development): {code}",
    },
    "error": {
        Language.AR: "خطأ في إرسال رمز التحقق",
        Language.EN: "Error sending OTP",
    },
    "invalid_request": {
        Language.AR: "طلب رمز التحقق غير صالح",
        Language.EN: "Invalid OTP request",
    },
}

# Verification responses are English only
NOT_FOUND = "OTP not found or expired"
EXPIRED = "OTP has expired"
ALREADY_USED = "OTP has already been used"
ATTEMPTS_EXCEEDED = "Maximum attempts exceeded"
INVALID_CODE = "Invalid OTP"
INVALID_CODE_EXHAUSTED = "Invalid OTP. Maximum attempts exceeded."
VERIFIED = "OTP verified successfully"


def send_message(name: str, language: Language, **params: str) -> str:
    """Look up a send message in the requested language."""
    return SEND_MESSAGES[name][Language(language)].format(**params)
