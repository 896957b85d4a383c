"""Note management business logic."""

import logging
from datetime import datetime
from typing import Optional
from ..infrastructure.database.client import DatabaseClient
from ..infrastructure.database.models import NoteModel, new_id, utcnow
from ..models.note import Note, NoteCreate, NoteUpdate
from .exceptions import WorkspaceNotFoundError

logger = logging.getLogger(__name__)


class NoteManager:
    """Business logic for note lifecycle operations."""

    def __init__(self, db_client: DatabaseClient):
        """Initialize note manager.

        Args:
            db_client: Database client for note storage
        """
        self.db = db_client

    async def create_note(self, user_id: str, note_data: NoteCreate, now: Optional[datetime] = None) -> Note:
        """Create a new note.

        Args:
            user_id: User ID from gateway headers
            note_data: Note creation data
            now: Creation time (defaults to current UTC time)

        Returns:
            Created note

        Raises:
            WorkspaceNotFoundError: if a workspace is given and the user cannot access it
        """
        if note_data.workspace_id is not None:
            workspace = await self.db.get_accessible_workspace(note_data.workspace_id, user_id)
            if not workspace:
                raise WorkspaceNotFoundError(note_data.workspace_id)

        # created_at and updated_at must be identical so that an untouched
        # note is never reported as modified
        timestamp = now or utcnow()
        db_note = NoteModel(
            id=new_id(),
            title=note_data.title,
            content=note_data.content,
            created_by_id=user_id,
            folder_id=note_data.folder_id,
            workspace_id=note_data.workspace_id,
            view_count=0,
            created_at=timestamp,
            updated_at=timestamp,
        )

        created_note = await self.db.create_note(db_note)

        logger.info(f"Created note {created_note.id} for user {user_id}")

        return Note.model_validate(created_note)

    async def get_note(self, note_id: str, user_id: str) -> Optional[Note]:
        """Get a note the user may access.

        Returns:
            Note if found and accessible, None otherwise
        """
        db_note = await self.db.get_accessible_note(note_id, user_id)
        if not db_note:
            return None

        return Note.model_validate(db_note)

    async def update_note(
        self, note_id: str, user_id: str, updates: NoteUpdate, now: Optional[datetime] = None
    ) -> Optional[Note]:
        """Edit a note, recording the user as its last modifier.

        View counters are never touched by edits.
        """
        update_dict = updates.model_dump(exclude_none=True)

        updated_note = await self.db.update_note(note_id, user_id, now or utcnow(), **update_dict)
        if not updated_note:
            return None

        logger.info(f"Updated note {note_id}")

        return Note.model_validate(updated_note)

    async def delete_note(self, note_id: str, user_id: str, now: Optional[datetime] = None) -> bool:
        """Soft-delete a note.

        Returns:
            True if deleted, False if not found
        """
        deleted = await self.db.soft_delete_note(note_id, user_id, now or utcnow())

        if deleted:
            logger.info(f"Soft-deleted note {note_id}")

        return deleted
