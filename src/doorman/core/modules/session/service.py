import secrets
from datetime import timedelta
from typing import Any

import structlog
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import OperationFailure, PyMongoError

from doorman.core.core import Service
from doorman.core.modules.session.models import AuthToken, Session
from doorman.errors import StorageError
from doorman.utils import now

logger = structlog.get_logger(__name__)


class SessionService(Service):
    """Service for managing login sessions."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("sessions")

    async def on_start(self) -> None:
        """Create indexes on startup."""
        await self._collection.create_index([("auth_token", 1)], unique=True)
        try:
            await self._collection.create_index(
                [("created_at", 1)], name="created_at_ttl", expireAfterSeconds=self.config.session_max_age
            )
        except OperationFailure:
            # Index exists with a different expiry after session_max_age was changed
            await self._collection.drop_index("created_at_ttl")
            await self._collection.create_index(
                [("created_at", 1)], name="created_at_ttl", expireAfterSeconds=self.config.session_max_age
            )

    async def create_session(self, username: str) -> AuthToken:
        auth_token = AuthToken(secrets.token_urlsafe(32))
        new_session = Session(auth_token=auth_token, username=username)
        try:
            await self._collection.insert_one(new_session.to_mongo())
        except PyMongoError as e:
            raise StorageError(f"Session insert failed: {e}") from e
        logger.info("session_created", username=username)
        return auth_token

    async def get_session(self, auth_token: AuthToken) -> Session | None:
        """Return the live session for a token, or None if it is unknown or too old.

        The TTL monitor only runs periodically, so age is checked here as well.
        """
        try:
            session = Session.from_mongo(await self._collection.find_one({"auth_token": auth_token}))
        except PyMongoError as e:
            raise StorageError(f"Session lookup failed: {e}") from e
        if session is None:
            return None
        if session.created_at + timedelta(seconds=self.config.session_max_age) <= now():
            return None
        return session

    async def invalidate_session(self, auth_token: AuthToken) -> None:
        """Remove a session. Unknown tokens are ignored."""
        try:
            await self._collection.delete_one({"auth_token": auth_token})
        except PyMongoError as e:
            raise StorageError(f"Session delete failed: {e}") from e
