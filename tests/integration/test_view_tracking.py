"""Integration tests for note view tracking and deduplication."""

import asyncio
from datetime import datetime, timedelta

import pytest
from sqlalchemy import event, func, select

from plumenote_service.core.exceptions import NoteNotFoundError
from plumenote_service.core.recent_manager import RecentNotesManager
from plumenote_service.core.view_manager import ViewManager
from plumenote_service.infrastructure.database.client import DatabaseClient
from plumenote_service.infrastructure.database.models import NoteViewModel, UserModel, new_id

T = datetime(2026, 1, 16, 12, 0, 0)


@pytest.fixture
def view_manager(db_client):
    return ViewManager(db_client)


@pytest.mark.integration
@pytest.mark.anyio
class TestRecordView:
    """Counting and deduplication of note views."""

    async def test_first_view_is_counted(self, view_manager, users, note_factory):
        note = await note_factory(users["alice"].id)

        result = await view_manager.record_view(users["alice"].id, note.id, now=T)

        assert result.counted is True
        assert result.view_count == 1

    async def test_dedup_window_scenario(self, view_manager, users, note_factory):
        """View at T counts, T+30min is deduplicated, T+90min counts again."""
        note = await note_factory(users["alice"].id)
        user_id = users["alice"].id

        first = await view_manager.record_view(user_id, note.id, now=T)
        second = await view_manager.record_view(user_id, note.id, now=T + timedelta(minutes=30))
        third = await view_manager.record_view(user_id, note.id, now=T + timedelta(minutes=90))

        assert (first.counted, first.view_count) == (True, 1)
        assert (second.counted, second.view_count) == (False, 1)
        assert (third.counted, third.view_count) == (True, 2)

    async def test_view_exactly_one_hour_later_is_counted(self, view_manager, users, note_factory):
        note = await note_factory(users["alice"].id)

        await view_manager.record_view(users["alice"].id, note.id, now=T)
        result = await view_manager.record_view(users["alice"].id, note.id, now=T + timedelta(hours=1))

        assert result.counted is True
        assert result.view_count == 2

    async def test_deduplicated_view_still_refreshes_viewed_at(self, view_manager, db_client, users, note_factory):
        """The window is measured from the latest visit, counted or not."""
        note = await note_factory(users["alice"].id)
        user_id = users["alice"].id

        await view_manager.record_view(user_id, note.id, now=T)
        await view_manager.record_view(user_id, note.id, now=T + timedelta(minutes=30))
        result = await view_manager.record_view(user_id, note.id, now=T + timedelta(minutes=80))

        assert result.counted is False
        assert result.view_count == 1

        recent = await RecentNotesManager(db_client).get_recent(user_id)
        assert recent.recently_viewed[0].viewed_at == T + timedelta(minutes=80)

    async def test_views_by_different_users_count_separately(self, view_manager, users, workspace, db_client, note_factory):
        await db_client.add_workspace_member(workspace.id, users["bob"].id)
        note = await note_factory(users["alice"].id, workspace_id=workspace.id)

        alice = await view_manager.record_view(users["alice"].id, note.id, now=T)
        bob = await view_manager.record_view(users["bob"].id, note.id, now=T + timedelta(minutes=1))

        assert alice.counted and bob.counted
        assert bob.view_count == 2

    async def test_counted_view_sets_last_viewed_at(self, view_manager, db_client, users, note_factory):
        note = await note_factory(users["alice"].id)

        await view_manager.record_view(users["alice"].id, note.id, now=T)
        await view_manager.record_view(users["alice"].id, note.id, now=T + timedelta(minutes=10))

        stored = await db_client.get_accessible_note(note.id, users["alice"].id)
        assert stored.last_viewed_at == T
        assert stored.view_count == 1

    async def test_view_count_never_decreases(self, view_manager, users, note_factory):
        note = await note_factory(users["alice"].id)
        offsets = [0, 5, 61, 62, 200, 201, 400]

        counts = []
        for minutes in offsets:
            result = await view_manager.record_view(users["alice"].id, note.id, now=T + timedelta(minutes=minutes))
            counts.append(result.view_count)

        assert counts == sorted(counts)
        assert counts[-1] == 3

    async def test_missing_note_raises_and_leaves_no_view_row(self, view_manager, db_client, users):
        missing_id = new_id()

        with pytest.raises(NoteNotFoundError):
            await view_manager.record_view(users["alice"].id, missing_id, now=T)

        async with db_client.async_session() as session:
            count = (await session.execute(
                select(func.count(NoteViewModel.id)).where(NoteViewModel.note_id == missing_id)
            )).scalar_one()
        assert count == 0

    async def test_one_row_per_user_and_note(self, view_manager, db_client, users, note_factory):
        note = await note_factory(users["alice"].id)

        for minutes in (0, 10, 120):
            await view_manager.record_view(users["alice"].id, note.id, now=T + timedelta(minutes=minutes))

        async with db_client.async_session() as session:
            count = (await session.execute(
                select(func.count(NoteViewModel.id)).where(NoteViewModel.note_id == note.id)
            )).scalar_one()
        assert count == 1


@pytest.mark.integration
@pytest.mark.anyio
class TestGetViewCount:

    async def test_returns_current_count(self, view_manager, users, note_factory):
        note = await note_factory(users["alice"].id)
        await view_manager.record_view(users["alice"].id, note.id, now=T)

        assert await view_manager.get_view_count(note.id) == 1

    async def test_unknown_note_returns_none(self, view_manager):
        assert await view_manager.get_view_count(new_id()) is None


@pytest.fixture
async def fk_db_client(tmp_path):
    """SQLite client that enforces foreign keys, as PostgreSQL does."""
    client = DatabaseClient(f"sqlite+aiosqlite:///{tmp_path / 'plumenote_fk.db'}")

    @event.listens_for(client.engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    await client.initialize()
    yield client
    await client.close()


@pytest.mark.integration
@pytest.mark.anyio
class TestConcurrentViews:

    async def test_simultaneous_first_views_count_once(self, view_manager, users, note_factory):
        note = await note_factory(users["alice"].id)

        results = await asyncio.gather(*(
            view_manager.record_view(users["alice"].id, note.id, now=T) for _ in range(8)
        ))

        assert sum(result.counted for result in results) == 1
        assert max(result.view_count for result in results) == 1
        assert await view_manager.get_view_count(note.id) == 1

    async def test_missing_note_with_enforced_foreign_keys(self, fk_db_client):
        user = await fk_db_client.create_user(UserModel(id=new_id(), name="Dana", email="dana@example.com"))
        missing_id = new_id()

        with pytest.raises(NoteNotFoundError):
            await ViewManager(fk_db_client).record_view(user.id, missing_id, now=T)

        async with fk_db_client.async_session() as session:
            count = (await session.execute(
                select(func.count(NoteViewModel.id)).where(NoteViewModel.note_id == missing_id)
            )).scalar_one()
        assert count == 0
