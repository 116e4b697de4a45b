"""Out-of-band message delivery."""

from .dispatchers import (
    TEMPLATES,
    LoggingMailDispatcher,
    MailTemplate,
    SmtpMailDispatcher,
    render_template,
)

__all__ = [
    "TEMPLATES",
    "MailTemplate",
    "LoggingMailDispatcher",
    "SmtpMailDispatcher",
    "render_template",
]
