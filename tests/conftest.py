"""Shared pytest fixtures."""

import re
from collections.abc import AsyncGenerator
from dataclasses import dataclass

import pytest
from fakes import FakeDatabase

from doorman.config import Config
from doorman.core.core import Core
from doorman.core.modules.mail import service as mail_service

RESET_LINK_RE = re.compile(r"/reset-password\.html\?token=([0-9a-f]{64})")


@dataclass
class SentMail:
    to: str
    subject: str
    body: str

    @property
    def reset_token(self) -> str:
        match = RESET_LINK_RE.search(self.body)
        assert match is not None, f"No reset link in mail body: {self.body!r}"
        return match.group(1)


@pytest.fixture
def config():
    """Config with a cheap bcrypt cost and a short mail timeout."""
    return Config(
        database_url="mongodb://localhost:27017/doorman_test",
        host="127.0.0.1",
        port=8000,
        debug=True,
        base_url="http://testserver",
        bcrypt_rounds=4,
        mail_timeout=0.5,
    )


@pytest.fixture
def database():
    return FakeDatabase()


@pytest.fixture
def outbox(monkeypatch):
    """Capture outgoing mail instead of talking to an SMTP server."""
    sent: list[SentMail] = []

    def fake_send_email(config, to_email, subject, body):
        sent.append(SentMail(to=to_email, subject=subject, body=body))
        return True, None

    monkeypatch.setattr(mail_service, "send_email", fake_send_email)
    return sent


@pytest.fixture
async def core(config, database, outbox) -> AsyncGenerator[Core]:
    """Started core backed by the in-memory database."""
    core = Core(config, database)
    async with core.lifespan():
        yield core
