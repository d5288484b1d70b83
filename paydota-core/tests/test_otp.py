"""
Unit Tests for the OTP Engine
=============================
Issuance, verification, lifecycle and statistics.
"""

import asyncio
from datetime import timedelta

import pytest


PHONE = "212600000000"


class TestOTPCodes:
    """Tests for code generation and comparison."""

    def test_generate_otp_is_six_digits(self):
        """Codes are always six digits with no leading zero."""
        from paydota_core.otp import generate_otp

        for _ in range(200):
            code = generate_otp()
            assert len(code) == 6
            assert code.isdigit()
            assert 100000 <= int(code) <= 999999

    def test_codes_match(self):
        """Comparison is exact string equality."""
        from paydota_core.otp import codes_match

        assert codes_match("123456", "123456") is True
        assert codes_match("123456", "123457") is False
        assert codes_match("0123456", "123456") is False


class TestOTPSend:
    """Tests for send_otp."""

    @pytest.mark.asyncio
    async def test_send_delivers_through_transport(self, otp_service, transport):
        """Configured transport receives the code and language."""
        result = await otp_service.send_otp(PHONE, "login", language="en")

        assert result.success is True
        assert result.message == "OTP sent via WhatsApp"
        assert result.expires_in == 300
        assert len(transport.sent) == 1

        phone, code, language = transport.sent[0]
        assert phone == PHONE
        assert code == otp_service.store.get(PHONE, "login").code
        assert language == "en"

    @pytest.mark.asyncio
    async def test_send_arabic_message_by_default(self, otp_service):
        """Default language is Arabic."""
        result = await otp_service.send_otp(PHONE, "registration")

        assert result.success is True
        assert result.message == "تم إرسال رمز التحقق عبر WhatsApp"

    @pytest.mark.asyncio
    async def test_send_creates_fresh_record(self, otp_service, clock):
        """New record starts unused with zero attempts and a 5 minute expiry."""
        await otp_service.send_otp(PHONE, "transaction", email="user@example.com", language="en")

        record = otp_service.store.get(PHONE, "transaction")
        assert record.attempts == 0
        assert record.max_attempts == 3
        assert record.is_used is False
        assert record.email == "user@example.com"
        assert record.created_at == clock.now
        assert record.expires_at == clock.now + timedelta(minutes=5)

    @pytest.mark.asyncio
    async def test_resend_replaces_previous_code(self, otp_service, transport, monkeypatch):
        """Only one record per key; the first code stops verifying."""
        codes = iter(["111111", "222222"])
        monkeypatch.setattr("paydota_core.otp.service.generate_otp", lambda length: next(codes))

        await otp_service.send_otp(PHONE, "login", language="en")
        await otp_service.send_otp(PHONE, "login", language="en")

        assert [sent[1] for sent in transport.sent] == ["111111", "222222"]
        assert len(otp_service.store) == 1

        result = otp_service.verify_otp(PHONE, "111111", "login")
        assert result.success is False
        assert result.attempts_left == 2

        result = otp_service.verify_otp(PHONE, "222222", "login")
        assert result.success is True

    @pytest.mark.asyncio
    async def test_purposes_are_independent(self, otp_service, transport):
        """The same phone can hold one record per purpose."""
        await otp_service.send_otp(PHONE, "login")
        await otp_service.send_otp(PHONE, "password_reset")

        assert len(otp_service.store) == 2
        assert otp_service.cancel_otp(PHONE, "login") is True
        assert otp_service.has_active_otp(PHONE, "password_reset") is True

    @pytest.mark.asyncio
    async def test_unconfigured_transport_hides_code(self, clock, unconfigured_transport):
        """Without dev mode the code never appears in the response."""
        from paydota_core.otp import OTPService

        service = OTPService(transport=unconfigured_transport, clock=clock)
        result = await service.send_otp(PHONE, "login", language="en")

        code = service.store.get(PHONE, "login").code
        assert result.success is True
        assert result.expires_in == 300
        assert result.message == "OTP generated"
        assert code not in result.message
        assert unconfigured_transport.sent == []

    @pytest.mark.asyncio
    async def test_unconfigured_transport_keeps_code_out_of_logs(self, clock, unconfigured_transport):
        """Without dev mode the code is not logged at any level."""
        from structlog.testing import capture_logs
        from paydota_core.otp import OTPService

        service = OTPService(transport=unconfigured_transport, clock=clock)
        with capture_logs() as logs:
            await service.send_otp(PHONE, "login", language="en")

        code = service.store.get(PHONE, "login").code
        assert [entry["event"] for entry in logs] == ["OTP transport not configured"]
        assert all("code" not in entry for entry in logs)
        assert all(code not in entry.values() for entry in logs)

    @pytest.mark.asyncio
    async def test_dev_mode_logs_code_at_debug(self, clock):
        from structlog.testing import capture_logs
        from paydota_core.otp import OTPConfig, OTPService

        service = OTPService(config=OTPConfig(dev_mode=True), clock=clock)
        with capture_logs() as logs:
            await service.send_otp(PHONE, "login", language="en")

        code = service.store.get(PHONE, "login").code
        assert logs[0]["log_level"] == "debug"
        assert logs[0]["code"] == code

    @pytest.mark.asyncio
    async def test_dev_mode_returns_code(self, clock):
        """Dev mode echoes the code when no transport is available."""
        from paydota_core.otp import OTPConfig, OTPService

        service = OTPService(config=OTPConfig(dev_mode=True), clock=clock)
        result = await service.send_otp(PHONE, "login", language="en")

        code = service.store.get(PHONE, "login").code
        assert result.success is True
        assert result.message == f"OTP (Development): {code}"

        result = await service.send_otp(PHONE, "login", language="ar")
        code = service.store.get(PHONE, "login").code
        assert result.message == f"رمز التحقق (تطوير): {code}"

    @pytest.mark.asyncio
    async def test_transport_failure_is_reported(self, clock, failing_transport):
        """A raising transport yields a failed result and keeps the record."""
        from paydota_core.otp import OTPFailure, OTPService

        service = OTPService(transport=failing_transport, clock=clock)
        result = await service.send_otp(PHONE, "login", language="en")

        assert result.success is False
        assert result.message == "Error sending OTP"
        assert result.expires_in == 0
        assert result.reason == OTPFailure.DELIVERY_FAILURE
        assert service.store.get(PHONE, "login") is not None
        assert service.has_active_otp(PHONE, "login") is True

    @pytest.mark.asyncio
    async def test_invalid_requests_are_rejected(self, otp_service):
        """Empty phone, unknown purpose or unknown language are not stored."""
        from paydota_core.otp import OTPFailure

        for phone, purpose, language in [
            ("", "login", "en"),
            (PHONE, "signup", "en"),
            (PHONE, "login", "fr"),
        ]:
            result = await otp_service.send_otp(phone, purpose, language=language)
            assert result.success is False
            assert result.expires_in == 0
            assert result.reason == OTPFailure.INVALID_REQUEST

        assert len(otp_service.store) == 0

    @pytest.mark.asyncio
    async def test_to_dict_uses_wire_names(self, otp_service):
        """Result serializes with camelCase keys."""
        result = await otp_service.send_otp(PHONE, "login", language="en")

        assert result.to_dict() == {
            "success": True,
            "message": "OTP sent via WhatsApp",
            "expiresIn": 300,
        }


class TestOTPVerify:
    """Tests for verify_otp."""

    @pytest.mark.asyncio
    async def test_end_to_end_scenario(self, clock):
        """Wrong code, then correct code, then replay."""
        from paydota_core.otp import OTPService

        service = OTPService(clock=clock)
        sent = await service.send_otp(PHONE, "login", None, "en")
        assert sent.expires_in == 300

        result = service.verify_otp(PHONE, "000000", "login")
        assert result.to_dict() == {"success": False, "message": "Invalid OTP", "attemptsLeft": 2}

        code = service.store.get(PHONE, "login").code
        result = service.verify_otp(PHONE, code, "login")
        assert result.to_dict() == {"success": True, "message": "OTP verified successfully"}

        result = service.verify_otp(PHONE, code, "login")
        assert result.to_dict() == {"success": False, "message": "OTP has already been used"}

    def test_missing_record(self, otp_service):
        """Unknown key is reported as not found."""
        from paydota_core.otp import OTPFailure

        result = otp_service.verify_otp(PHONE, "123456", "login")

        assert result.success is False
        assert result.message == "OTP not found or expired"
        assert result.reason == OTPFailure.NOT_FOUND
        assert result.attempts_left is None

    @pytest.mark.asyncio
    async def test_expired_record_is_removed(self, otp_service, clock):
        """Correct code one millisecond after expiry is rejected and purged."""
        from paydota_core.otp import OTPFailure

        await otp_service.send_otp(PHONE, "login")
        record = otp_service.store.get(PHONE, "login")

        clock.now = record.expires_at + timedelta(milliseconds=1)
        result = otp_service.verify_otp(PHONE, record.code, "login")

        assert result.success is False
        assert result.message == "OTP has expired"
        assert result.reason == OTPFailure.EXPIRED
        assert otp_service.store.get(PHONE, "login") is None

    @pytest.mark.asyncio
    async def test_code_valid_at_exact_expiry(self, otp_service, clock):
        """now == expires_at is still inside the window."""
        await otp_service.send_otp(PHONE, "login")
        record = otp_service.store.get(PHONE, "login")

        clock.now = record.expires_at
        assert otp_service.verify_otp(PHONE, record.code, "login").success is True

    @pytest.mark.asyncio
    async def test_attempt_ceiling(self, otp_service):
        """Three wrong codes count down 2, 1, then purge; the fourth is not found."""
        from paydota_core.otp import OTPFailure

        await otp_service.send_otp(PHONE, "login")

        first = otp_service.verify_otp(PHONE, "000000", "login")
        assert first.attempts_left == 2
        assert first.reason == OTPFailure.CODE_MISMATCH

        second = otp_service.verify_otp(PHONE, "000000", "login")
        assert second.attempts_left == 1

        third = otp_service.verify_otp(PHONE, "000000", "login")
        assert third.success is False
        assert third.message == "Invalid OTP. Maximum attempts exceeded."
        assert third.attempts_left is None
        assert third.reason == OTPFailure.ATTEMPTS_EXHAUSTED
        assert otp_service.store.get(PHONE, "login") is None

        fourth = otp_service.verify_otp(PHONE, "000000", "login")
        assert fourth.message == "OTP not found or expired"

    @pytest.mark.asyncio
    async def test_correct_code_after_failures(self, otp_service):
        """A match on the last allowed attempt still succeeds."""
        await otp_service.send_otp(PHONE, "login")
        code = otp_service.store.get(PHONE, "login").code

        otp_service.verify_otp(PHONE, "000000", "login")
        otp_service.verify_otp(PHONE, "000000", "login")
        result = otp_service.verify_otp(PHONE, code, "login")

        assert result.success is True
        assert otp_service.store.get(PHONE, "login").attempts == 3

    @pytest.mark.asyncio
    async def test_attempts_increment_before_compare(self, otp_service):
        """Every reachable verification consumes an attempt, matching or not."""
        await otp_service.send_otp(PHONE, "login")
        record = otp_service.store.get(PHONE, "login")

        otp_service.verify_otp(PHONE, "000000", "login")
        assert record.attempts == 1

        otp_service.verify_otp(PHONE, record.code, "login")
        assert record.attempts == 2
        assert record.is_used is True

    @pytest.mark.asyncio
    async def test_used_record_does_not_consume_attempts(self, otp_service):
        """Terminal records are rejected without touching the counter."""
        await otp_service.send_otp(PHONE, "login")
        record = otp_service.store.get(PHONE, "login")
        otp_service.verify_otp(PHONE, record.code, "login")

        for _ in range(5):
            result = otp_service.verify_otp(PHONE, record.code, "login")
            assert result.message == "OTP has already been used"

        assert record.attempts == 1
        assert otp_service.store.get(PHONE, "login") is record

    @pytest.mark.asyncio
    async def test_exhausted_record_is_purged(self, otp_service):
        """A record left at the ceiling is deleted on the next check."""
        from paydota_core.otp import OTPFailure

        await otp_service.send_otp(PHONE, "login")
        otp_service.store.get(PHONE, "login").attempts = 3

        result = otp_service.verify_otp(PHONE, "000000", "login")

        assert result.message == "Maximum attempts exceeded"
        assert result.reason == OTPFailure.ATTEMPTS_EXHAUSTED
        assert otp_service.store.get(PHONE, "login") is None

    @pytest.mark.asyncio
    async def test_wrong_purpose_not_found(self, otp_service):
        """Codes are scoped to their purpose."""
        await otp_service.send_otp(PHONE, "login")
        code = otp_service.store.get(PHONE, "login").code

        result = otp_service.verify_otp(PHONE, code, "transaction")

        assert result.message == "OTP not found or expired"
        assert otp_service.store.get(PHONE, "login").attempts == 0

    def test_unknown_purpose(self, otp_service):
        """Unknown purposes are rejected as invalid requests."""
        from paydota_core.otp import OTPFailure

        result = otp_service.verify_otp(PHONE, "123456", "signup")

        assert result.success is False
        assert result.reason == OTPFailure.INVALID_REQUEST


class TestOTPQueries:
    """Tests for has_active_otp, get_otp_expiry_time and cancel_otp."""

    @pytest.mark.asyncio
    async def test_has_active_otp(self, otp_service):
        assert otp_service.has_active_otp(PHONE, "login") is False

        await otp_service.send_otp(PHONE, "login")
        assert otp_service.has_active_otp(PHONE, "login") is True

    @pytest.mark.asyncio
    async def test_has_active_otp_purges_expired(self, otp_service, clock):
        await otp_service.send_otp(PHONE, "login")
        clock.advance(minutes=5, seconds=1)

        assert otp_service.has_active_otp(PHONE, "login") is False
        assert otp_service.store.get(PHONE, "login") is None

    @pytest.mark.asyncio
    async def test_has_active_otp_purges_exhausted(self, otp_service):
        await otp_service.send_otp(PHONE, "login")
        otp_service.store.get(PHONE, "login").attempts = 3

        assert otp_service.has_active_otp(PHONE, "login") is False
        assert otp_service.store.get(PHONE, "login") is None

    @pytest.mark.asyncio
    async def test_has_active_otp_keeps_used(self, otp_service):
        """Used records report inactive but are left for the sweep."""
        await otp_service.send_otp(PHONE, "login")
        code = otp_service.store.get(PHONE, "login").code
        otp_service.verify_otp(PHONE, code, "login")

        assert otp_service.has_active_otp(PHONE, "login") is False
        assert otp_service.store.get(PHONE, "login") is not None

    @pytest.mark.asyncio
    async def test_expiry_time(self, otp_service, clock):
        assert otp_service.get_otp_expiry_time(PHONE, "login") is None

        await otp_service.send_otp(PHONE, "login")
        assert otp_service.get_otp_expiry_time(PHONE, "login") == clock.now + timedelta(minutes=5)

    @pytest.mark.asyncio
    async def test_expiry_time_none_when_expired_without_mutation(self, otp_service, clock):
        await otp_service.send_otp(PHONE, "login")
        clock.advance(minutes=6)

        assert otp_service.get_otp_expiry_time(PHONE, "login") is None
        assert otp_service.store.get(PHONE, "login") is not None

    @pytest.mark.asyncio
    async def test_expiry_time_none_when_used(self, otp_service):
        await otp_service.send_otp(PHONE, "login")
        code = otp_service.store.get(PHONE, "login").code
        otp_service.verify_otp(PHONE, code, "login")

        assert otp_service.get_otp_expiry_time(PHONE, "login") is None

    def test_cancel_missing_key(self, otp_service):
        """Cancelling nothing returns False without error."""
        assert otp_service.cancel_otp(PHONE, "login") is False

    @pytest.mark.asyncio
    async def test_cancel_existing_key(self, otp_service):
        await otp_service.send_otp(PHONE, "login")
        code = otp_service.store.get(PHONE, "login").code

        assert otp_service.cancel_otp(PHONE, "login") is True
        assert otp_service.cancel_otp(PHONE, "login") is False

        result = otp_service.verify_otp(PHONE, code, "login")
        assert result.message == "OTP not found or expired"


class TestOTPCleanup:
    """Tests for the periodic sweep and statistics."""

    @pytest.mark.asyncio
    async def test_cleanup_removes_used_and_expired(self, otp_service, clock):
        """Used and expired records go; an active record survives."""
        await otp_service.send_otp("212600000001", "login")
        used_code = otp_service.store.get("212600000001", "login").code
        otp_service.verify_otp("212600000001", used_code, "login")

        await otp_service.send_otp("212600000002", "login")
        clock.advance(minutes=4)
        await otp_service.send_otp("212600000003", "login")
        clock.advance(minutes=2)

        removed = otp_service.cleanup_expired()

        assert removed == 2
        assert otp_service.store.get("212600000001", "login") is None
        assert otp_service.store.get("212600000002", "login") is None
        assert otp_service.has_active_otp("212600000001", "login") is False
        assert otp_service.has_active_otp("212600000002", "login") is False
        assert otp_service.has_active_otp("212600000003", "login") is True

        stats = otp_service.get_stats()
        assert stats.total_active == 1

    @pytest.mark.asyncio
    async def test_cleanup_ignores_attempt_count(self, otp_service):
        """The sweep only looks at expiry and use."""
        await otp_service.send_otp(PHONE, "login")
        otp_service.store.get(PHONE, "login").attempts = 3

        assert otp_service.cleanup_expired() == 0
        assert otp_service.store.get(PHONE, "login") is not None

    @pytest.mark.asyncio
    async def test_cleanup_records_metric(self, otp_service, clock):
        await otp_service.send_otp(PHONE, "login")
        clock.advance(minutes=10)
        otp_service.cleanup_expired()

        assert otp_service.metrics.value("paydota_otp_cleanup_removed_total") == 1

    @pytest.mark.asyncio
    async def test_stats(self, otp_service, clock):
        """Only active records are counted."""
        first_created = clock.now
        await otp_service.send_otp("212600000001", "login")
        clock.advance(seconds=30)
        await otp_service.send_otp("212600000002", "login")
        await otp_service.send_otp("212600000002", "transaction")
        await otp_service.send_otp("212600000003", "registration")
        otp_service.store.get("212600000003", "registration").attempts = 3

        stats = otp_service.get_stats()

        assert stats.total_active == 3
        assert stats.by_purpose == {"login": 2, "transaction": 1}
        assert stats.oldest_otp == first_created
        assert stats.to_dict()["oldestOTP"] == first_created.isoformat()
        assert otp_service.metrics.value("paydota_otp_active") == 3

    def test_stats_empty(self, otp_service):
        stats = otp_service.get_stats()

        assert stats.to_dict() == {"totalActive": 0, "byPurpose": {}, "oldestOTP": None}


class TestOTPSweeper:
    """Tests for the background sweep lifecycle."""

    @pytest.mark.asyncio
    async def test_sweeper_runs_until_stopped(self):
        from paydota_core.otp import OTPSweeper

        calls = []
        sweeper = OTPSweeper(lambda: calls.append(1) or 0, interval_seconds=0.01)

        sweeper.start()
        assert sweeper.running is True
        await asyncio.sleep(0.05)
        await sweeper.stop()

        assert sweeper.running is False
        assert len(calls) >= 1

        count = len(calls)
        await asyncio.sleep(0.03)
        assert len(calls) == count

    @pytest.mark.asyncio
    async def test_sweeper_survives_cleanup_errors(self):
        from paydota_core.otp import OTPSweeper

        calls = []

        def flaky():
            calls.append(1)
            raise RuntimeError("boom")

        sweeper = OTPSweeper(flaky, interval_seconds=0.01)
        sweeper.start()
        await asyncio.sleep(0.05)

        assert sweeper.running is True
        await sweeper.stop()
        assert len(calls) >= 2

    @pytest.mark.asyncio
    async def test_stop_without_start(self):
        from paydota_core.otp import OTPSweeper

        sweeper = OTPSweeper(lambda: 0)
        await sweeper.stop()
        assert sweeper.running is False

    @pytest.mark.asyncio
    async def test_service_context_manager_sweeps(self, clock):
        """The service purges expired records on its own once started."""
        from paydota_core.otp import OTPConfig, OTPService

        service = OTPService(config=OTPConfig(cleanup_interval_seconds=0.01), clock=clock)
        await service.send_otp(PHONE, "login")
        clock.advance(minutes=10)

        async with service:
            assert service.sweeper_running is True
            await asyncio.sleep(0.05)

        assert service.sweeper_running is False
        assert len(service.store) == 0

    @pytest.mark.asyncio
    async def test_isolated_instances(self, clock):
        """Separate services do not share state."""
        from paydota_core.otp import OTPService

        first = OTPService(clock=clock)
        second = OTPService(clock=clock)
        await first.send_otp(PHONE, "login")

        assert first.has_active_otp(PHONE, "login") is True
        assert second.has_active_otp(PHONE, "login") is False
