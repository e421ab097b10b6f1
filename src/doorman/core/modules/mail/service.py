import asyncio

import structlog

from doorman.core.core import Service
from doorman.core.modules.mail.sender import send_email
from doorman.errors import DeliveryError
from doorman.utils import redact_email

logger = structlog.get_logger(__name__)

RESET_SUBJECT = "Reset your password"

RESET_BODY = """We received a request to reset your password.

Open the link below to choose a new password:

{link}

If you didn't request this, you can safely ignore this email.
"""


class MailService(Service):
    """Sends account emails without holding a request longer than mail_timeout."""

    async def send(self, to_email: str, subject: str, body: str) -> None:
        """Deliver an email, raising DeliveryError on failure or timeout."""
        timeout = self.config.mail_timeout
        try:
            success, error = await asyncio.wait_for(
                asyncio.to_thread(send_email, self.config, to_email, subject, body), timeout=timeout
            )
        except TimeoutError as e:
            logger.warning("email_timeout", to=redact_email(to_email), timeout=timeout)
            raise DeliveryError(f"Sending to {redact_email(to_email)} timed out after {timeout}s") from e

        if not success:
            raise DeliveryError(f"Sending to {redact_email(to_email)} failed: {error}")

    async def send_password_reset(self, to_email: str, link: str) -> None:
        await self.send(to_email, RESET_SUBJECT, RESET_BODY.format(link=link))
