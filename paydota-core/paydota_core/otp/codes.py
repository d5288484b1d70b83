"""
OTP Code Utilities
==================
Generation and comparison of numeric one-time codes.
"""

import hmac
import secrets


def generate_otp(length: int = 6) -> str:
    """
    Generate a numeric OTP without a leading zero.

    The value is drawn uniformly from [10**(length-1), 10**length - 1],
    so a 6-digit code is always in [100000, 999999].

    Args:
        length: Number of digits

    Returns:
        OTP string
    """
    low = 10 ** (length - 1)
    high = 10 ** length - 1
    return str(low + secrets.randbelow(high - low + 1))


def codes_match(submitted: str, stored: str) -> bool:
    """Exact string comparison in constant time."""
    return hmac.compare_digest(submitted.encode(), stored.encode())
