"""bcrypt helpers, run off the event loop since hashing is deliberately slow."""

import asyncio

import bcrypt

from doorman.core.modules.user.validators import MAX_PASSWORD_BYTES


def _hash(password: str, rounds: int) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def _check(password: str, password_hash: str) -> bool:
    encoded = password.encode("utf-8")
    if len(encoded) > MAX_PASSWORD_BYTES:
        return False
    return bcrypt.checkpw(encoded, password_hash.encode("utf-8"))


async def hash_password(password: str, rounds: int) -> str:
    return await asyncio.to_thread(_hash, password, rounds)


async def check_password(password: str, password_hash: str) -> bool:
    return await asyncio.to_thread(_check, password, password_hash)
