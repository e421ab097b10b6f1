from datetime import datetime

from doorman.core.db import MongoModel


class User(MongoModel):
    """User domain model with credentials.

    Indexed on username - unique, email, reset_token.
    """

    username: str
    email: str
    password_hash: str  # bcrypt hash
    reset_token: str | None = None
    reset_token_expires_at: datetime | None = None
