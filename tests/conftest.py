"""
Test bootstrap.

Every test gets a fresh in-memory SQLite database. The environment is set
before anything under src is imported so the cached settings pick it up.
"""

import os
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ENVIRONMENT"] = "test"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["AUTO_CREATE_TABLES"] = "false"

from src.infrastructure.database import (  # noqa: E402
    init_database, close_database, create_tables, get_session_context
)
from src.infrastructure.database.seed import load_seed_file, seed_database  # noqa: E402
from src.main import app  # noqa: E402

SEED_FILE = Path(__file__).resolve().parents[1] / "seed_data.yaml"


@pytest.fixture
async def database():
    init_database()
    await create_tables()
    yield
    await close_database()


@pytest.fixture
async def client(database):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def seeded_client(client):
    """Client over the sample dataset (2 companies, 4 departments, 5 employees, 5 projects)."""
    async with get_session_context() as session:
        await seed_database(session, load_seed_file(SEED_FILE))
    yield client
