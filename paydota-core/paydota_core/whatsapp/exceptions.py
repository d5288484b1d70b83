from typing import Any, Optional


class WhatsAppError(Exception):
    """Base exception for WhatsApp Business API errors."""
    def __init__(self, message: str, status_code: Optional[int] = None, details: Any = None):
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(message)


class WhatsAppNotConfiguredError(WhatsAppError):
    """Raised when sending without phone number id, access token or verify token."""
    def __init__(self):
        super().__init__(
            "WhatsApp API is not configured. Please provide the required environment variables."
        )


class WhatsAppAPIError(WhatsAppError):
    """Raised when the Graph API rejects a request or cannot be reached."""
    pass
