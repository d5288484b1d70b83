"""
Shared fixtures for paydota-core tests.
"""

from datetime import datetime, timedelta, timezone
from typing import List, Tuple

import pytest

from paydota_core.otp import Language, OTPTransport


class FakeClock:
    """Mutable clock injected into OTPService."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class RecordingTransport(OTPTransport):
    """Transport that records deliveries instead of sending them."""

    name = "recording"

    def __init__(self, configured: bool = True):
        self.configured = configured
        self.sent: List[Tuple[str, str, Language]] = []

    def is_configured(self) -> bool:
        return self.configured

    async def send_otp(self, phone, code, language=Language.AR):
        self.sent.append((phone, code, language))
        return {"id": f"msg-{len(self.sent)}"}


class FailingTransport(OTPTransport):
    """Transport whose sends always raise."""

    name = "failing"

    def is_configured(self) -> bool:
        return True

    async def send_otp(self, phone, code, language=Language.AR):
        raise ConnectionError("transport unreachable")


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def otp_service(clock, transport):
    from paydota_core.otp import OTPService

    return OTPService(transport=transport, clock=clock)


@pytest.fixture
def failing_transport():
    return FailingTransport()


@pytest.fixture
def unconfigured_transport():
    return RecordingTransport(configured=False)
