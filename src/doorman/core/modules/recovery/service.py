import asyncio
import secrets
from datetime import timedelta
from typing import Any
from urllib.parse import urlencode

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from doorman.core.core import Service
from doorman.core.modules.user.passwords import hash_password
from doorman.core.modules.user.validators import validate_password
from doorman.errors import DeliveryError, IdentityNotFoundError, InvalidInputError, TokenInvalidError
from doorman.utils import now, redact_email

logger = structlog.get_logger(__name__)

# 32 random bytes, hex encoded
RESET_TOKEN_BYTES = 32


def generate_reset_token() -> str:
    return secrets.token_hex(RESET_TOKEN_BYTES)


class RecoveryService(Service):
    """Two-step password reset: mail a single-use link, then accept a new password for it.

    A user holds at most one reset token. Requesting again overwrites it, so
    only the newest link works. Confirming clears the token in the same update
    that changes the password, so a token can be spent once.
    """

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._pending_sends: set[asyncio.Task[None]] = set()

    async def on_stop(self) -> None:
        await self.wait_for_pending_mail()

    async def wait_for_pending_mail(self) -> None:
        """Wait until reset mails sent in the background are delivered or have failed."""
        await asyncio.gather(*self._pending_sends, return_exceptions=True)

    def build_reset_link(self, token: str) -> str:
        return f"{self.config.base_url.rstrip('/')}/reset-password.html?{urlencode({'token': token})}"

    async def request_reset(self, email: str) -> None:
        """Issue a fresh reset token for the account with this email and mail the link.

        Raises:
            InvalidInputError: If email is empty
            IdentityNotFoundError: If no account uses the email and reveal_unknown_email is set
            StorageError: If the token could not be saved
            DeliveryError: If the mail could not be sent; the saved token stays valid.
                Only raised with reveal_unknown_email set, otherwise the mail is sent in
                the background so known and unknown addresses answer equally fast.
        """
        if not email.strip():
            raise InvalidInputError("Email is required")

        token = generate_reset_token()
        expires_at = now() + timedelta(seconds=self.config.reset_token_ttl)
        found = await self.core.services.user.set_reset_token(email, token, expires_at)
        if not found:
            logger.info("password_reset_unknown_email", email=redact_email(email))
            if self.config.reveal_unknown_email:
                raise IdentityNotFoundError
            return

        logger.info("password_reset_requested", email=redact_email(email), token_prefix=token[:8])
        link = self.build_reset_link(token)
        if self.config.reveal_unknown_email:
            await self.core.services.mail.send_password_reset(email, link)
            logger.info("reset_mail_sent", email=redact_email(email))
            return

        task = asyncio.create_task(self._send_in_background(email, link))
        self._pending_sends.add(task)
        task.add_done_callback(self._pending_sends.discard)

    async def _send_in_background(self, email: str, link: str) -> None:
        try:
            await self.core.services.mail.send_password_reset(email, link)
        except DeliveryError as e:
            logger.error("reset_mail_failed", email=redact_email(email), error=str(e))
        else:
            logger.info("reset_mail_sent", email=redact_email(email))

    async def confirm_reset(self, token: str | None, new_password: str | None) -> None:
        """Replace the password of the user holding this token and spend the token.

        Raises:
            InvalidInputError: If token or new password is missing
            WeakCredentialError: If the new password is too short
            TokenInvalidError: If the token is unknown, already used, replaced or expired
            StorageError: If the update failed
        """
        if not token or not new_password:
            raise InvalidInputError("Token and new password are required")
        validate_password(new_password, self.config.min_password_length)

        password_hash = await hash_password(new_password, self.config.bcrypt_rounds)
        user = await self.core.services.user.consume_reset_token(token, password_hash)
        if user is None:
            logger.info("password_reset_invalid_token", token_prefix=token[:8])
            raise TokenInvalidError

        logger.info("password_reset_completed", username=user.username)
