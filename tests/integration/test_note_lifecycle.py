"""Integration tests for note creation, access checks, edits and soft deletes."""

from datetime import datetime, timedelta

import pytest

from plumenote_service.core.exceptions import WorkspaceNotFoundError
from plumenote_service.core.note_manager import NoteManager
from plumenote_service.core.view_manager import ViewManager
from plumenote_service.infrastructure.database.models import new_id
from plumenote_service.models.note import NoteCreate, NoteUpdate

T = datetime(2026, 1, 16, 12, 0, 0)


@pytest.fixture
def note_manager(db_client):
    return NoteManager(db_client)


@pytest.mark.integration
@pytest.mark.anyio
class TestNoteManager:

    async def test_create_sets_identical_timestamps(self, note_manager, users):
        note = await note_manager.create_note(users["alice"].id, NoteCreate(title="DNS"), now=T)

        assert note.created_at == note.updated_at == T
        assert note.view_count == 0
        assert note.title == "DNS"

    async def test_default_title(self, note_manager, users):
        note = await note_manager.create_note(users["alice"].id, NoteCreate())

        assert note.title == "Sans titre"

    async def test_create_in_foreign_workspace_is_rejected(self, note_manager, users, workspace):
        with pytest.raises(WorkspaceNotFoundError):
            await note_manager.create_note(users["bob"].id, NoteCreate(workspace_id=workspace.id))

    async def test_member_can_create_in_workspace(self, note_manager, db_client, users, workspace):
        await db_client.add_workspace_member(workspace.id, users["bob"].id)

        note = await note_manager.create_note(users["bob"].id, NoteCreate(workspace_id=workspace.id))

        assert note.workspace_id == workspace.id

    async def test_personal_notes_are_private(self, note_manager, users):
        note = await note_manager.create_note(users["alice"].id, NoteCreate())

        assert await note_manager.get_note(note.id, users["alice"].id) is not None
        assert await note_manager.get_note(note.id, users["bob"].id) is None

    async def test_workspace_notes_visible_to_owner_and_members(self, note_manager, db_client, users, workspace):
        await db_client.add_workspace_member(workspace.id, users["bob"].id)
        note = await note_manager.create_note(users["bob"].id, NoteCreate(workspace_id=workspace.id))

        assert await note_manager.get_note(note.id, users["alice"].id) is not None
        assert await note_manager.get_note(note.id, users["bob"].id) is not None
        assert await note_manager.get_note(note.id, users["carol"].id) is None

    async def test_update_stamps_modifier_and_keeps_views(self, note_manager, db_client, users, workspace):
        await db_client.add_workspace_member(workspace.id, users["bob"].id)
        note = await note_manager.create_note(users["alice"].id, NoteCreate(workspace_id=workspace.id), now=T)
        await ViewManager(db_client).record_view(users["alice"].id, note.id, now=T)

        updated = await note_manager.update_note(
            note.id, users["bob"].id, NoteUpdate(title="Renamed"), now=T + timedelta(hours=2)
        )

        assert updated.title == "Renamed"
        assert updated.last_modified_by_id == users["bob"].id
        assert updated.updated_at == T + timedelta(hours=2)
        assert updated.created_at == T
        assert updated.view_count == 1

    async def test_update_inaccessible_note(self, note_manager, users):
        note = await note_manager.create_note(users["alice"].id, NoteCreate())

        assert await note_manager.update_note(note.id, users["bob"].id, NoteUpdate(title="x")) is None

    async def test_soft_delete_hides_note(self, note_manager, users):
        note = await note_manager.create_note(users["alice"].id, NoteCreate())

        assert await note_manager.delete_note(note.id, users["alice"].id) is True
        assert await note_manager.get_note(note.id, users["alice"].id) is None
        assert await note_manager.delete_note(note.id, users["alice"].id) is False

    async def test_delete_unknown_note(self, note_manager, users):
        assert await note_manager.delete_note(new_id(), users["alice"].id) is False
