"""
Mail dispatchers.

Deliver templated messages such as the password recovery email. The SMTP
dispatcher sends through a configured relay; the logging dispatcher is used
in development when no relay is configured and never writes the message
body (which carries the reset token) to the log.
"""

import asyncio
import logging
import smtplib
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from string import Template
from typing import Any

from tranquilo_auth.domain.exceptions import DeliveryFailedError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MailTemplate:
    """Subject and bodies of a message, with $placeholders."""

    subject: str
    text: str
    html: str

    def render(self, context: dict[str, Any]) -> tuple[str, str, str]:
        return (
            Template(self.subject).substitute(context),
            Template(self.text).substitute(context),
            Template(self.html).substitute(context),
        )


TEMPLATES: dict[str, MailTemplate] = {
    "auth/forgot_password": MailTemplate(
        subject="Account access recovery",
        text=(
            "You asked to reset your password.\n\n"
            "Use this token to choose a new password: $token\n\n"
            "The token expires in one hour. If you did not ask for this, ignore this email."
        ),
        html=(
            "<html><body>"
            "<p>You asked to reset your password.</p>"
            "<p>Use this token to choose a new password: <strong>$token</strong></p>"
            "<p>The token expires in one hour. If you did not ask for this, ignore this email.</p>"
            "</body></html>"
        ),
    ),
}


def render_template(template_id: str, context: dict[str, Any]) -> tuple[str, str, str]:
    """Render a registered template into (subject, text, html)."""
    template = TEMPLATES.get(template_id)
    if template is None:
        raise DeliveryFailedError(reason=f"Unknown mail template {template_id}")
    try:
        return template.render(context)
    except KeyError as e:
        raise DeliveryFailedError(reason=f"Missing template variable {e}") from e


class SmtpMailDispatcher:
    """Sends templated email through an SMTP relay."""

    def __init__(
        self,
        host: str,
        port: int = 587,
        username: str | None = None,
        password: str | None = None,
        from_address: str = "tranquilopay@gmail.com",
        starttls: bool = True,
        timeout: float = 15.0,
    ) -> None:
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.from_address = from_address
        self.starttls = starttls
        self.timeout = timeout

    async def send(self, to: str, template_id: str, context: dict[str, Any]) -> None:
        """Render and send a message; failures raise DeliveryFailedError."""
        subject, text_body, html_body = render_template(template_id, context)

        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self.from_address
        msg["To"] = to
        msg.attach(MIMEText(text_body, "plain"))
        msg.attach(MIMEText(html_body, "html"))

        try:
            # Send email in thread pool to avoid blocking
            loop = asyncio.get_running_loop()
            await loop.run_in_executor(None, self._send_sync, msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send {template_id} email: {type(e).__name__}: {e}")
            raise DeliveryFailedError(reason=type(e).__name__) from e

        logger.info(f"Sent {template_id} email", extra={"template_id": template_id})

    def _send_sync(self, msg: MIMEMultipart) -> None:
        """Synchronous email sending (called in thread pool)."""
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
            if self.starttls:
                server.starttls()
            if self.username and self.password:
                server.login(self.username, self.password)
            server.send_message(msg)


class LoggingMailDispatcher:
    """
    Development dispatcher: renders the message and logs that it was not
    delivered. Keeps no state; production configuration requires SMTP.
    """

    async def send(self, to: str, template_id: str, context: dict[str, Any]) -> None:
        subject, _, _ = render_template(template_id, context)
        logger.warning(
            f"No SMTP relay configured; '{subject}' email not delivered",
            extra={"template_id": template_id},
        )
