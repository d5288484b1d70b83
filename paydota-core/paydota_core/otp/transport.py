"""
OTP Transport
=============
Contract for channels that deliver codes to users.
"""

from abc import ABC, abstractmethod
from typing import Any

from .models import Language


class OTPTransport(ABC):
    """
    Abstract delivery channel for OTP codes.

    Implementations raise on delivery failure; the OTP service converts
    any exception into a failed send result.
    """

    name: str = "base"

    @abstractmethod
    def is_configured(self) -> bool:
        """True when credentials are present and sends can be attempted."""

    @abstractmethod
    async def send_otp(self, phone: str, code: str, language: Language = Language.AR) -> Any:
        """
        Deliver a code.

        Args:
            phone: Destination phone number
            code: The OTP code
            language: Message locale

        Returns:
            Provider-specific delivery result
        """
