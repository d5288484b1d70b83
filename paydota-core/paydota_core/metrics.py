"""
Prometheus Metrics
===================
OTP counters and gauges on a dedicated registry.
"""

from typing import Optional

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Gauge,
    generate_latest,
    CONTENT_TYPE_LATEST,
)
import structlog

logger = structlog.get_logger(__name__)


class MetricNames:
    OTP_SENT = "paydota_otp_sent"
    OTP_VERIFICATIONS = "paydota_otp_verifications"
    OTP_CLEANUP_REMOVED = "paydota_otp_cleanup_removed"
    OTP_ACTIVE = "paydota_otp_active"


class OTPMetrics:
    """
    OTP metric collectors.

    Each instance owns its registry so several services (or tests) can
    coexist in one process.
    """

    content_type = CONTENT_TYPE_LATEST

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry or CollectorRegistry()

        self.sent = Counter(
            name=MetricNames.OTP_SENT,
            documentation="OTP send requests by purpose and outcome",
            labelnames=["purpose", "outcome"],
            registry=self.registry,
        )
        self.verifications = Counter(
            name=MetricNames.OTP_VERIFICATIONS,
            documentation="OTP verification attempts by purpose and outcome",
            labelnames=["purpose", "outcome"],
            registry=self.registry,
        )
        self.cleanup_removed = Counter(
            name=MetricNames.OTP_CLEANUP_REMOVED,
            documentation="Records removed by the periodic sweep",
            registry=self.registry,
        )
        self.active = Gauge(
            name=MetricNames.OTP_ACTIVE,
            documentation="Active OTP records at last stats refresh",
            registry=self.registry,
        )

    def record_send(self, purpose: str, outcome: str) -> None:
        self.sent.labels(purpose=purpose, outcome=outcome).inc()

    def record_verification(self, purpose: str, outcome: str) -> None:
        self.verifications.labels(purpose=purpose, outcome=outcome).inc()

    def record_cleanup(self, removed: int) -> None:
        if removed:
            self.cleanup_removed.inc(removed)

    def set_active(self, count: int) -> None:
        self.active.set(count)

    def value(self, name: str, labels: Optional[dict] = None) -> float:
        """Current sample value, 0 if never recorded."""
        return self.registry.get_sample_value(name, labels or {}) or 0.0

    def export(self) -> bytes:
        """Prometheus text exposition."""
        return generate_latest(self.registry)
