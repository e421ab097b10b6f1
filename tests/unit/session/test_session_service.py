"""Tests for SessionService."""

from datetime import timedelta

import pytest

from doorman.core.modules.session.models import AuthToken
from doorman.utils import now


@pytest.fixture
def sessions(core):
    return core.services.session


@pytest.fixture
def collection(database):
    return database.get_collection("sessions")


async def test_create_and_resolve(sessions):
    token = await sessions.create_session("alice")

    session = await sessions.get_session(token)

    assert session is not None
    assert session.username == "alice"
    assert len(token) >= 32


async def test_tokens_are_unique(sessions):
    first = await sessions.create_session("alice")
    second = await sessions.create_session("alice")
    assert first != second


async def test_unknown_token(sessions):
    assert await sessions.get_session(AuthToken("nope")) is None


async def test_session_older_than_max_age(sessions, collection, config):
    token = await sessions.create_session("alice")
    collection.documents[0]["created_at"] = now() - timedelta(seconds=config.session_max_age + 1)

    assert await sessions.get_session(token) is None


async def test_invalidate_is_idempotent(sessions, collection):
    token = await sessions.create_session("alice")

    await sessions.invalidate_session(token)
    await sessions.invalidate_session(token)

    assert await sessions.get_session(token) is None
    assert collection.documents == []


async def test_ttl_index_follows_max_age(core, collection, config):
    assert collection.indexes["created_at_ttl"]["expireAfterSeconds"] == config.session_max_age
    assert collection.indexes["auth_token_1"]["unique"] is True
