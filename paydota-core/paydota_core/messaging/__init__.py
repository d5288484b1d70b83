"""
Messaging Utilities
===================
Helpers shared by outbound messaging channels.
"""

from .phone_utils import format_whatsapp_number, DEFAULT_COUNTRY_CODE, KNOWN_COUNTRY_CODES

__all__ = [
    "format_whatsapp_number",
    "DEFAULT_COUNTRY_CODE",
    "KNOWN_COUNTRY_CODES",
]
