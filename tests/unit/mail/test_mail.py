"""Tests for reset mail delivery."""

import smtplib
import time

import pytest
from structlog.testing import capture_logs

from doorman.core.modules.mail import sender
from doorman.core.modules.mail import service as mail_service
from doorman.errors import DeliveryError


class TestSendEmail:
    def test_dev_mode_logs_and_succeeds(self, config):
        assert config.smtp_host is None
        assert sender.send_email(config, "a@x.com", "Subject", "Body") == (True, None)

    def test_smtp_failure_is_reported(self, config, monkeypatch):
        config.smtp_host = "smtp.example.com"

        def refuse(*args, **kwargs):
            raise smtplib.SMTPConnectError(421, b"Service not available")

        monkeypatch.setattr(sender.smtplib, "SMTP", refuse)

        success, error = sender.send_email(config, "a@x.com", "Subject", "Body")

        assert success is False
        assert "Service not available" in error

    def test_smtp_failure_logged_without_traceback(self, config, monkeypatch):
        config.smtp_host = "smtp.example.com"

        def refuse(*args, **kwargs):
            raise ConnectionRefusedError("connection refused")

        monkeypatch.setattr(sender.smtplib, "SMTP", refuse)

        with capture_logs() as logs:
            sender.send_email(config, "a@x.com", "Subject", "Body")

        failures = [entry for entry in logs if entry["event"] == "email_send_failed"]
        assert len(failures) == 1
        assert "exc_info" not in failures[0]
        assert failures[0]["error"] == "connection refused"

    def test_build_message_headers(self):
        message = sender.build_message("no-reply@localhost", "a@x.com", "Hello", "Body text")
        assert message["From"] == "no-reply@localhost"
        assert message["To"] == "a@x.com"
        assert message["Subject"] == "Hello"
        assert message.get_content().strip() == "Body text"


class TestMailService:
    async def test_reset_mail_contains_link(self, core, outbox):
        await core.services.mail.send_password_reset("a@x.com", "http://testserver/reset-password.html?token=abc")

        assert len(outbox) == 1
        assert outbox[0].to == "a@x.com"
        assert "http://testserver/reset-password.html?token=abc" in outbox[0].body

    async def test_failed_send_raises(self, core, monkeypatch):
        monkeypatch.setattr(mail_service, "send_email", lambda *args: (False, "mailbox unavailable"))

        with pytest.raises(DeliveryError, match="mailbox unavailable"):
            await core.services.mail.send("a@x.com", "Subject", "Body")

    async def test_slow_send_times_out(self, core, config, monkeypatch):
        def hang(*args):
            time.sleep(config.mail_timeout + 0.5)
            return True, None

        monkeypatch.setattr(mail_service, "send_email", hang)

        with pytest.raises(DeliveryError, match="timed out"):
            await core.services.mail.send("a@x.com", "Subject", "Body")
