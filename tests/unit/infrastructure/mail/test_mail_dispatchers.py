"""Unit tests for mail template rendering and dispatchers."""

import logging
import smtplib
from datetime import UTC, datetime
from unittest.mock import MagicMock, patch

import pytest

from tranquilo_auth.domain.exceptions import DeliveryFailedError
from tranquilo_auth.infrastructure.mail import (
    LoggingMailDispatcher,
    SmtpMailDispatcher,
    render_template,
)

TOKEN = "0123456789abcdef0123456789abcdef01234567"
CONTEXT = {"token": TOKEN, "expires_at": datetime(2024, 5, 1, 13, 0, tzinfo=UTC)}


class TestRenderTemplate:
    """Test template lookup and substitution."""

    def test_forgot_password_template_carries_token(self):
        subject, text, html = render_template("auth/forgot_password", CONTEXT)

        assert subject
        assert TOKEN in text
        assert TOKEN in html

    def test_unknown_template(self):
        with pytest.raises(DeliveryFailedError):
            render_template("auth/unknown", CONTEXT)

    def test_missing_variable(self):
        with pytest.raises(DeliveryFailedError) as exc_info:
            render_template("auth/forgot_password", {})

        assert "token" in exc_info.value.reason


class TestSmtpMailDispatcher:
    """Test delivery through an SMTP relay."""

    @pytest.fixture
    def dispatcher(self):
        return SmtpMailDispatcher(
            host="smtp.example.com",
            port=2525,
            username="mailer",
            password="mail-password",
            from_address="noreply@example.com",
        )

    @pytest.mark.asyncio
    async def test_sends_message(self, dispatcher):
        with patch("tranquilo_auth.infrastructure.mail.dispatchers.smtplib.SMTP") as smtp_class:
            server = MagicMock()
            smtp_class.return_value.__enter__.return_value = server

            await dispatcher.send("maria@example.com", "auth/forgot_password", CONTEXT)

        smtp_class.assert_called_once_with("smtp.example.com", 2525, timeout=15.0)
        server.starttls.assert_called_once()
        server.login.assert_called_once_with("mailer", "mail-password")
        message = server.send_message.call_args.args[0]
        assert message["To"] == "maria@example.com"
        assert message["From"] == "noreply@example.com"
        assert TOKEN in message.as_string()

    @pytest.mark.asyncio
    async def test_skips_login_without_credentials(self):
        dispatcher = SmtpMailDispatcher(host="localhost", port=25, starttls=False)

        with patch("tranquilo_auth.infrastructure.mail.dispatchers.smtplib.SMTP") as smtp_class:
            server = MagicMock()
            smtp_class.return_value.__enter__.return_value = server

            await dispatcher.send("maria@example.com", "auth/forgot_password", CONTEXT)

        server.starttls.assert_not_called()
        server.login.assert_not_called()
        server.send_message.assert_called_once()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [
            smtplib.SMTPAuthenticationError(535, b"bad credentials"),
            ConnectionRefusedError("refused"),
            TimeoutError("timed out"),
        ],
    )
    async def test_transport_failures_become_delivery_failed(self, dispatcher, error):
        with patch("tranquilo_auth.infrastructure.mail.dispatchers.smtplib.SMTP") as smtp_class:
            smtp_class.side_effect = error

            with pytest.raises(DeliveryFailedError) as exc_info:
                await dispatcher.send("maria@example.com", "auth/forgot_password", CONTEXT)

        assert exc_info.value.reason == type(error).__name__


class TestLoggingMailDispatcher:
    """Test the development dispatcher."""

    @pytest.mark.asyncio
    async def test_logs_without_token(self, caplog):
        dispatcher = LoggingMailDispatcher()

        with caplog.at_level(logging.WARNING):
            await dispatcher.send("maria@example.com", "auth/forgot_password", CONTEXT)

        assert "not delivered" in caplog.text
        assert vars(dispatcher) == {}
        assert caplog.records
        assert all(TOKEN not in record.getMessage() for record in caplog.records)

    @pytest.mark.asyncio
    async def test_unknown_template_fails(self):
        with pytest.raises(DeliveryFailedError):
            await LoggingMailDispatcher().send("a@b.c", "auth/unknown", {})
