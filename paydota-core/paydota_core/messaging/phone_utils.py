"""
Phone Utilities
===============
Phone number formatting for WhatsApp destinations.
"""

import re

DEFAULT_COUNTRY_CODE = "212"  # Morocco
KNOWN_COUNTRY_CODES = ("212", "966", "971")


def format_whatsapp_number(phone: str, default_country: str = DEFAULT_COUNTRY_CODE) -> str:
    """
    Format a phone number for the WhatsApp Cloud API.

    Rules:
    - Strip spaces, dashes, parentheses and '+'
    - Keep numbers that already start with a known country code
    - Otherwise prefix the default country code, dropping one leading '0'

    Args:
        phone: Raw phone number
        default_country: Country code used when none is present

    Returns:
        Digits-only international number
    """
    formatted = re.sub(r'[\s\-()+]', '', phone)

    if formatted.startswith(KNOWN_COUNTRY_CODES):
        return formatted

    if formatted.startswith('0'):
        formatted = formatted[1:]
    return default_country + formatted
