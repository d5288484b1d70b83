"""
Service Configuration
=====================
Environment-driven settings for PayDota services.
"""

import os
from dataclasses import dataclass

TRUTHY = {"1", "true", "yes", "on"}


def env_flag(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in TRUTHY


@dataclass
class Settings:
    """Runtime settings for the OTP service."""
    service_name: str = "paydota-core"
    version: str = "0.1.0"
    environment: str = "production"
    log_level: str = "INFO"
    log_json: bool = True
    # Insecure: return codes in send responses when no transport is configured
    otp_dev_mode: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            service_name=os.environ.get("SERVICE_NAME", "paydota-core"),
            environment=os.environ.get("ENVIRONMENT", "production"),
            log_level=os.environ.get("LOG_LEVEL", "INFO"),
            log_json=env_flag("LOG_JSON", default=True),
            otp_dev_mode=env_flag("PAYDOTA_OTP_DEV_MODE"),
        )
