"""Domain exceptions raised by managers and the database client."""


class PlumeNoteError(Exception):
    """Base class for PlumeNote service errors."""


class NoteNotFoundError(PlumeNoteError):
    """Note is missing, soft-deleted, or not accessible to the caller."""

    def __init__(self, note_id: str):
        super().__init__(f"Note not found: {note_id}")
        self.note_id = note_id


class WorkspaceNotFoundError(PlumeNoteError):
    """Workspace is missing or the caller is neither owner nor member."""

    def __init__(self, workspace_id: str):
        super().__init__(f"Workspace not found: {workspace_id}")
        self.workspace_id = workspace_id
