"""Plain-text email delivery over SMTP."""

import smtplib
import ssl
from email.message import EmailMessage

import structlog

from doorman.config import Config
from doorman.utils import redact_email

logger = structlog.get_logger(__name__)


def build_message(sender: str, to_email: str, subject: str, body: str) -> EmailMessage:
    message = EmailMessage()
    message["Subject"] = subject
    message["From"] = sender
    message["To"] = to_email
    message.set_content(body)
    return message


def send_email(config: Config, to_email: str, subject: str, body: str) -> tuple[bool, str | None]:
    """Send a text email using the SMTP settings in config.

    Blocking; callers on the event loop run it in a worker thread.

    Returns:
        Tuple of (success: bool, error_message: str | None)
        - (True, None) on success, or when no SMTP host is configured
        - (False, error_message) on failure
    """
    if not config.smtp_host:
        # Dev mode: nothing is sent, the message shows up in the log instead
        logger.info("email_dev_mode", to=redact_email(to_email), subject=subject, body=body)
        return True, None

    message = build_message(config.mail_from, to_email, subject, body)
    context = ssl.create_default_context()
    try:
        if config.smtp_use_tls:
            with smtplib.SMTP(config.smtp_host, config.smtp_port, timeout=config.mail_timeout) as server:
                server.starttls(context=context)
                if config.smtp_username and config.smtp_password:
                    server.login(config.smtp_username, config.smtp_password)
                server.send_message(message)
        else:
            with smtplib.SMTP_SSL(
                config.smtp_host, config.smtp_port, context=context, timeout=config.mail_timeout
            ) as server:
                if config.smtp_username and config.smtp_password:
                    server.login(config.smtp_username, config.smtp_password)
                server.send_message(message)
    except (smtplib.SMTPException, ssl.SSLError, OSError) as e:
        error_msg = str(e)
        logger.error("email_send_failed", to=redact_email(to_email), host=config.smtp_host, error=error_msg)
        return False, error_msg
    else:
        logger.debug("email_sent", to=redact_email(to_email), subject=subject)
        return True, None
