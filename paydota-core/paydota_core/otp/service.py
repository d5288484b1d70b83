"""
OTP Service
===========
Issues, delivers and verifies one-time codes keyed by (phone, purpose).
"""

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Union
import structlog

from paydota_core.metrics import OTPMetrics

from . import messages
from .codes import codes_match, generate_otp
from .models import (
    Language,
    OTPConfig,
    OTPFailure,
    OTPPurpose,
    OTPRecord,
    OTPStats,
    SendOTPResult,
    VerifyOTPResult,
)
from .store import OTPStore
from .sweeper import OTPSweeper
from .transport import OTPTransport

logger = structlog.get_logger(__name__)

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _parse_purpose(purpose: Union[str, OTPPurpose]) -> Optional[OTPPurpose]:
    try:
        return OTPPurpose(purpose)
    except ValueError:
        return None


def _parse_language(language: Union[str, Language]) -> Optional[Language]:
    try:
        return Language(language)
    except ValueError:
        return None


class OTPService:
    """
    In-memory OTP engine.

    Every public operation reports failures through its return value.
    Records live only in the injected store; start() launches the periodic
    sweep and stop() cancels it.
    """

    def __init__(
        self,
        store: Optional[OTPStore] = None,
        transport: Optional[OTPTransport] = None,
        config: Optional[OTPConfig] = None,
        metrics: Optional[OTPMetrics] = None,
        clock: Optional[Clock] = None,
    ):
        self.store = store if store is not None else OTPStore()
        self.transport = transport
        self.config = config or OTPConfig()
        self.metrics = metrics or OTPMetrics()
        self._clock = clock or utcnow
        self._sweeper = OTPSweeper(
            self.cleanup_expired,
            interval_seconds=self.config.cleanup_interval_seconds,
        )

    # Lifecycle

    def start(self) -> None:
        """Start the background sweep on the running event loop."""
        self._sweeper.start()

    async def stop(self) -> None:
        await self._sweeper.stop()

    @property
    def sweeper_running(self) -> bool:
        return self._sweeper.running

    async def __aenter__(self) -> "OTPService":
        self.start()
        return self

    async def __aexit__(self, *exc) -> None:
        await self.stop()

    # Operations

    async def send_otp(
        self,
        phone: str,
        purpose: Union[str, OTPPurpose],
        email: Optional[str] = None,
        language: Union[str, Language] = Language.AR,
    ) -> SendOTPResult:
        """
        Create a code for (phone, purpose) and hand it to the transport.

        Any existing record for the same key is replaced. The record is
        stored before delivery is attempted.

        Args:
            phone: Destination phone number
            purpose: OTP flow
            email: Optional secondary contact kept on the record
            language: Locale for the delivered text and the returned message

        Returns:
            SendOTPResult with expires_in in seconds (0 on failure)
        """
        lang = _parse_language(language)
        otp_purpose = _parse_purpose(purpose)
        if not phone or otp_purpose is None or lang is None:
            logger.warning("Rejected OTP send request", purpose=str(purpose), language=str(language))
            return SendOTPResult(
                success=False,
                message=messages.send_message("invalid_request", lang or Language.EN),
                expires_in=0,
                reason=OTPFailure.INVALID_REQUEST,
            )

        try:
            now = self._clock()
            code = generate_otp(self.config.length)
            record = OTPRecord(
                code=code,
                phone=phone,
                email=email,
                purpose=otp_purpose,
                expires_at=now + timedelta(seconds=self.config.expiry_seconds),
                attempts=0,
                max_attempts=self.config.max_attempts,
                is_used=False,
                created_at=now,
            )
            self.store.put(record)

            if self.transport is not None and self.transport.is_configured():
                await self.transport.send_otp(phone, code, lang)
                logger.info(
                    "OTP sent",
                    transport=self.transport.name,
                    phone=phone,
                    purpose=otp_purpose.value,
                )
                self.metrics.record_send(otp_purpose.value, "sent")
                return SendOTPResult(
                    success=True,
                    message=messages.send_message("sent", lang),
                    expires_in=self.config.expiry_seconds,
                )

            if self.config.dev_mode:
                logger.debug(
                    "OTP generated without transport",
                    phone=phone,
                    purpose=otp_purpose.value,
                    code=code,
                    expires_in=self.config.expiry_seconds,
                )
                message = messages.send_message("development", lang, code=code)
            else:
                logger.warning("OTP transport not configured", phone=phone, purpose=otp_purpose.value)
                message = messages.send_message("generated", lang)
            self.metrics.record_send(otp_purpose.value, "undelivered")
            return SendOTPResult(
                success=True,
                message=message,
                expires_in=self.config.expiry_seconds,
            )
        except Exception as e:
            logger.error(
                "Error sending OTP",
                phone=phone,
                purpose=otp_purpose.value,
                error=str(e),
            )
            self.metrics.record_send(otp_purpose.value, "failed")
            return SendOTPResult(
                success=False,
                message=messages.send_message("error", lang),
                expires_in=0,
                reason=OTPFailure.DELIVERY_FAILURE,
            )

    def verify_otp(
        self,
        phone: str,
        code: str,
        purpose: Union[str, OTPPurpose],
    ) -> VerifyOTPResult:
        """
        Check a submitted code against the stored record.

        Terminal records (missing, expired, used, exhausted) are rejected
        without consuming an attempt. Otherwise the attempt counter is
        incremented before the code is compared.

        Args:
            phone: Phone number the code was sent to
            code: Submitted code
            purpose: OTP flow

        Returns:
            VerifyOTPResult, with attempts_left on a recoverable mismatch
        """
        otp_purpose = _parse_purpose(purpose)
        if otp_purpose is None:
            return VerifyOTPResult(
                success=False,
                message=messages.send_message("invalid_request", Language.EN),
                reason=OTPFailure.INVALID_REQUEST,
            )

        record = self.store.get(phone, otp_purpose)
        if record is None:
            return self._reject(otp_purpose, messages.NOT_FOUND, OTPFailure.NOT_FOUND)

        if record.is_expired(self._clock()):
            self.store.delete(phone, otp_purpose)
            return self._reject(otp_purpose, messages.EXPIRED, OTPFailure.EXPIRED)

        if record.is_used:
            return self._reject(otp_purpose, messages.ALREADY_USED, OTPFailure.ALREADY_USED)

        if record.attempts_exhausted:
            self.store.delete(phone, otp_purpose)
            return self._reject(otp_purpose, messages.ATTEMPTS_EXCEEDED, OTPFailure.ATTEMPTS_EXHAUSTED)

        record.attempts += 1
        self.store.put(record)

        if not codes_match(str(code), record.code):
            attempts_left = record.max_attempts - record.attempts
            if attempts_left <= 0:
                self.store.delete(phone, otp_purpose)
                logger.warning("OTP attempts exhausted", phone=phone, purpose=otp_purpose.value)
                return self._reject(
                    otp_purpose,
                    messages.INVALID_CODE_EXHAUSTED,
                    OTPFailure.ATTEMPTS_EXHAUSTED,
                )

            logger.warning(
                "Invalid OTP attempt",
                phone=phone,
                purpose=otp_purpose.value,
                remaining=attempts_left,
            )
            return self._reject(
                otp_purpose,
                messages.INVALID_CODE,
                OTPFailure.CODE_MISMATCH,
                attempts_left=attempts_left,
            )

        record.is_used = True
        self.store.put(record)

        logger.info("OTP verified successfully", phone=phone, purpose=otp_purpose.value)
        self.metrics.record_verification(otp_purpose.value, "verified")
        return VerifyOTPResult(success=True, message=messages.VERIFIED)

    def has_active_otp(self, phone: str, purpose: Union[str, OTPPurpose]) -> bool:
        """True if an unused, unexpired, non-exhausted record exists."""
        otp_purpose = _parse_purpose(purpose)
        if otp_purpose is None:
            return False

        record = self.store.get(phone, otp_purpose)
        if record is None or record.is_used:
            return False
        if record.is_expired(self._clock()) or record.attempts_exhausted:
            self.store.delete(phone, otp_purpose)
            return False
        return True

    def get_otp_expiry_time(
        self,
        phone: str,
        purpose: Union[str, OTPPurpose],
    ) -> Optional[datetime]:
        """Expiry of the unused, unexpired record for the key, else None."""
        otp_purpose = _parse_purpose(purpose)
        if otp_purpose is None:
            return None

        record = self.store.get(phone, otp_purpose)
        if record is None or record.is_used or record.is_expired(self._clock()):
            return None
        return record.expires_at

    def cancel_otp(self, phone: str, purpose: Union[str, OTPPurpose]) -> bool:
        """Drop any record for the key. Returns True if one was removed."""
        otp_purpose = _parse_purpose(purpose)
        if otp_purpose is None:
            return False

        removed = self.store.delete(phone, otp_purpose)
        if removed:
            logger.info("OTP cancelled", phone=phone, purpose=otp_purpose.value)
        return removed

    def cleanup_expired(self) -> int:
        """Remove expired and used records. Returns the number removed."""
        now = self._clock()
        removed = 0

        for key, record in self.store.snapshot():
            if record.is_expired(now) or record.is_used:
                self.store.discard(key)
                removed += 1

        if removed:
            logger.info("Cleaned up expired OTP records", removed=removed)
        self.metrics.record_cleanup(removed)
        return removed

    def get_stats(self) -> OTPStats:
        """Counts of active records, by purpose, with the oldest creation time."""
        now = self._clock()
        stats = OTPStats()

        for record in self.store:
            if not record.is_active(now):
                continue
            stats.total_active += 1
            purpose = record.purpose.value
            stats.by_purpose[purpose] = stats.by_purpose.get(purpose, 0) + 1
            if stats.oldest_otp is None or record.created_at < stats.oldest_otp:
                stats.oldest_otp = record.created_at

        self.metrics.set_active(stats.total_active)
        return stats

    def _reject(
        self,
        purpose: OTPPurpose,
        message: str,
        reason: OTPFailure,
        attempts_left: Optional[int] = None,
    ) -> VerifyOTPResult:
        self.metrics.record_verification(purpose.value, reason.value)
        return VerifyOTPResult(
            success=False,
            message=message,
            attempts_left=attempts_left,
            reason=reason,
        )
