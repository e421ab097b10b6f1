import secrets
from datetime import datetime
from typing import Any

import structlog
from pymongo import ReturnDocument
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import DuplicateKeyError, PyMongoError

from doorman.core.core import Service
from doorman.core.modules.user.models import User
from doorman.core.modules.user.passwords import check_password, hash_password
from doorman.core.modules.user.validators import validate_email, validate_password, validate_username
from doorman.errors import AuthenticationError, IdentityTakenError, StorageError
from doorman.utils import now, redact_email

logger = structlog.get_logger(__name__)


class UserService(Service):
    """Credential store: user records, password hashes and reset tokens."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("users")
        # Checked against for unknown usernames so both login failures cost one bcrypt check; set in on_start
        self._dummy_hash = ""

    async def get_user_by_username(self, username: str) -> User | None:
        try:
            document = await self._collection.find_one({"username": username})
        except PyMongoError as e:
            raise StorageError(f"User lookup failed: {e}") from e
        return User.from_mongo(document)

    async def has_username(self, username: str) -> bool:
        return await self.get_user_by_username(username) is not None

    async def create_user(self, username: str, email: str, password: str) -> User:
        """Validate and store a new user with a bcrypt-hashed password."""
        validate_password(password, self.config.min_password_length)
        validate_username(username, self.config.reserved_username_words)
        validate_email(email)

        if await self.has_username(username):
            raise IdentityTakenError

        password_hash = await hash_password(password, self.config.bcrypt_rounds)
        user = User(username=username, email=email, password_hash=password_hash)
        try:
            await self._collection.insert_one(user.to_mongo())
        except DuplicateKeyError as e:
            # Lost a race against a concurrent registration of the same name
            raise IdentityTakenError from e
        except PyMongoError as e:
            raise StorageError(f"User insert failed: {e}") from e

        logger.info("user_registered", username=username, email=redact_email(email))
        return user

    async def authenticate(self, username: str, password: str) -> User:
        """Return the user if the password matches, otherwise raise AuthenticationError."""
        user = await self.get_user_by_username(username)
        if user is None:
            await check_password(password, self._dummy_hash)
            logger.info("login_failed", username=username)
            raise AuthenticationError

        if not await check_password(password, user.password_hash):
            logger.info("login_failed", username=username)
            raise AuthenticationError

        return user

    async def set_reset_token(self, email: str, token: str, expires_at: datetime) -> bool:
        """Store a reset token on the user with this email, replacing any earlier one.

        Returns False if no user has this email.
        """
        try:
            result = await self._collection.update_one(
                {"email": email},
                {"$set": {"reset_token": token, "reset_token_expires_at": expires_at}},
            )
        except PyMongoError as e:
            raise StorageError(f"Reset token update failed: {e}") from e
        return result.matched_count > 0

    async def consume_reset_token(self, token: str, password_hash: str) -> User | None:
        """Set a new password hash and clear the token in one conditional update.

        Returns the updated user, or None when no unexpired record holds the token.
        """
        try:
            document = await self._collection.find_one_and_update(
                {"reset_token": token, "reset_token_expires_at": {"$gt": now()}},
                {"$set": {"password_hash": password_hash, "reset_token": None, "reset_token_expires_at": None}},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            raise StorageError(f"Password reset update failed: {e}") from e
        return User.from_mongo(document)

    async def on_start(self) -> None:
        await self._collection.create_index([("username", 1)], unique=True)
        await self._collection.create_index([("email", 1)])
        await self._collection.create_index([("reset_token", 1)])
        self._dummy_hash = await hash_password(secrets.token_urlsafe(16), self.config.bcrypt_rounds)
        logger.debug("user_service_started")
