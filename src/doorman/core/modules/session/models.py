"""Session management models."""

from datetime import datetime
from typing import NewType

from pydantic import Field

from doorman.core.db import MongoModel
from doorman.utils import now

AuthToken = NewType("AuthToken", str)


class Session(MongoModel):
    """Authenticated login session.

    Indexed on auth_token - unique, created_at (TTL session_max_age).
    """

    auth_token: str
    username: str
    created_at: datetime = Field(default_factory=now)
