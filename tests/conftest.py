"""Shared fixtures.

Unit tests need nothing. Integration tests use the `database` fixture,
which needs DATABASE_URL, e.g.:
    export DATABASE_URL="postgresql+asyncpg://reachbase:<password>@localhost:5432/reachbase_test"
and are skipped when it is not set.
"""
import os
import uuid
from datetime import datetime, timezone

import pytest
import pytest_asyncio
from sqlalchemy import text

from db.connection import Database
from db.models import Base, Template


@pytest_asyncio.fixture
async def database():
    if not os.environ.get("DATABASE_URL"):
        pytest.skip("DATABASE_URL not set; skipping integration test")
    db = Database.from_env()
    async with db.engine.begin() as conn:
        await conn.execute(text("CREATE SCHEMA IF NOT EXISTS crm"))
        await conn.run_sync(Base.metadata.create_all)
    yield db
    await db.dispose()


@pytest.fixture
def workspace_id() -> uuid.UUID:
    """A fresh workspace per test keeps integration tests isolated."""
    return uuid.uuid4()


@pytest.fixture
def user_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture
def make_template():
    """Build a detached Template row as the database would return it."""

    def _make(**overrides) -> Template:
        now = datetime.now(timezone.utc)
        values = {
            "id": uuid.uuid4(),
            "workspace_id": uuid.uuid4(),
            "name": "Intro",
            "subject_line": "Hi",
            "body_html": "<p>Hi</p>",
            "tags": [],
            "language": "en",
            "status": "draft",
            "access_level": "personal",
            "version": 1,
            "created_by": uuid.uuid4(),
            "created_at": now,
            "updated_at": now,
            "use_count": 0,
            "custom_fields": {},
            "is_public": False,
        }
        values.update(overrides)
        return Template(**values)

    return _make
