from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

import structlog
from pydantic import BaseModel, Field
from pymongo.asynchronous.database import AsyncDatabase

from doorman.config import Config
from doorman.core.core import Core
from doorman.core.modules.session.models import AuthToken
from doorman.errors import ServerError, StorageError

logger = structlog.get_logger(__name__)


class LoginResult(BaseModel):
    """Outcome of a successful login."""

    username: str
    auth_token: AuthToken


class SessionStatus(BaseModel):
    """Whether the caller's session token resolves to a live session."""

    logged_in: bool = Field(..., serialization_alias="loggedIn")
    username: str | None = None


class App:
    """Facade for all account operations, delegating to Core services."""

    def __init__(self, config: Config, database: AsyncDatabase[dict[str, Any]] | None = None) -> None:
        self._core = Core(config, database)

    @property
    def config(self) -> Config:
        return self._core.config

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    async def register(self, username: str, email: str, password: str) -> None:
        """Create an account. No session is started."""
        try:
            await self._core.services.user.create_user(username, email, password)
        except StorageError as e:
            raise ServerError(str(e)) from e

    async def login(self, username: str, password: str) -> LoginResult:
        """Authenticate user and create session."""
        try:
            user = await self._core.services.user.authenticate(username, password)
            auth_token = await self._core.services.session.create_session(user.username)
        except StorageError as e:
            raise ServerError(str(e)) from e
        return LoginResult(username=user.username, auth_token=auth_token)

    async def get_status(self, auth_token: AuthToken | None) -> SessionStatus:
        """Report the session behind a token; a missing, dead or unreadable session is simply logged out."""
        if auth_token is None:
            return SessionStatus(logged_in=False)
        try:
            session = await self._core.services.session.get_session(auth_token)
        except StorageError as e:
            logger.error("session_status_failed", error=str(e))
            return SessionStatus(logged_in=False)
        if session is None:
            return SessionStatus(logged_in=False)
        return SessionStatus(logged_in=True, username=session.username)

    async def logout(self, auth_token: AuthToken | None) -> None:
        """Invalidate session, if there is one. Never fails, so the cookie is always cleared."""
        if auth_token is None:
            return
        try:
            await self._core.services.session.invalidate_session(auth_token)
        except StorageError as e:
            logger.error("session_invalidate_failed", error=str(e))

    async def request_password_reset(self, email: str) -> None:
        """Mail a password reset link to the account registered with this email.

        Storage and delivery failures keep their own codes on this route.
        """
        await self._core.services.recovery.request_reset(email)

    async def confirm_password_reset(self, token: str | None, new_password: str | None) -> None:
        """Set a new password using a token from a reset link."""
        try:
            await self._core.services.recovery.confirm_reset(token, new_password)
        except StorageError as e:
            raise ServerError(str(e)) from e
