"""Common test fixtures for the PlumeNote service."""

from datetime import datetime
from typing import Optional

import pytest

from plumenote_service.infrastructure.database.client import DatabaseClient
from plumenote_service.infrastructure.database.models import (NoteModel, UserModel,
                                                             WorkspaceModel, new_id)

NOW = datetime(2026, 1, 16, 12, 0, 0)


@pytest.fixture
def anyio_backend():
    """Restrict anyio tests to asyncio only (trio is not installed)."""
    return "asyncio"


@pytest.fixture
async def db_client(tmp_path):
    """Database client backed by a temporary SQLite file."""
    client = DatabaseClient(f"sqlite+aiosqlite:///{tmp_path / 'plumenote_test.db'}")
    await client.initialize()
    yield client
    await client.close()


@pytest.fixture
async def users(db_client):
    """Three users: alice, bob and carol."""
    created = {}
    for name in ("alice", "bob", "carol"):
        created[name] = await db_client.create_user(
            UserModel(id=new_id(), name=name.title(), email=f"{name}@example.com",
                      image=f"https://cdn.example.com/{name}.png")
        )
    return created


@pytest.fixture
async def workspace(db_client, users):
    """Workspace owned by alice."""
    return await db_client.create_workspace(
        WorkspaceModel(id=new_id(), name="Infra", owner_id=users["alice"].id)
    )


async def make_note(
    db_client: DatabaseClient,
    created_by_id: str,
    created_at: datetime = NOW,
    updated_at: Optional[datetime] = None,
    **fields,
) -> NoteModel:
    """Insert a note with explicit timestamps."""
    note = NoteModel(
        id=new_id(),
        title=fields.pop("title", "Untitled"),
        created_by_id=created_by_id,
        created_at=created_at,
        updated_at=updated_at or created_at,
        **fields,
    )
    return await db_client.create_note(note)


@pytest.fixture
def note_factory(db_client):
    """Create notes with explicit timestamps: ``await note_factory(user_id, created_at=...)``."""
    async def factory(created_by_id: str, created_at: datetime = NOW,
                      updated_at: Optional[datetime] = None, **fields) -> NoteModel:
        return await make_note(db_client, created_by_id, created_at, updated_at, **fields)
    return factory
