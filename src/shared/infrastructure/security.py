"""
Password Hashing
================

bcrypt helpers for employee credentials. Plain-text passwords never reach
the database or the API responses.
"""

import bcrypt
from starlette.concurrency import run_in_threadpool

from src.config import settings


def _hash(password: str, rounds: int) -> str:
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


async def hash_password(password: str) -> str:
    """
    Hash a password with a fresh salt at the configured cost.

    bcrypt is CPU bound, so the work runs in the threadpool instead of the
    event loop.
    """
    return await run_in_threadpool(_hash, password, settings.bcrypt_rounds)
