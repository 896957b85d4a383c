"""Note endpoints: lifecycle, view tracking and recency lists."""

import logging
from typing import Optional
from fastapi import APIRouter, HTTPException, Depends, Query
from ...models.note import (
    NoteCreate,
    NoteUpdate,
    NoteResponse,
    ViewTrackingResult,
    ViewCountResponse,
    RecentNotes,
)
from ...core.exceptions import NoteNotFoundError, WorkspaceNotFoundError
from ...core.note_manager import NoteManager
from ...core.view_manager import ViewManager
from ...core.recent_manager import RecentNotesManager
from ...api.dependencies import get_user_id, validate_note_id

router = APIRouter(prefix="/api/v1/notes", tags=["notes"])
logger = logging.getLogger(__name__)

# These will be set by main.py after creating the app
note_manager: NoteManager = None
view_manager: ViewManager = None
recent_manager: RecentNotesManager = None


def set_managers(note_mgr: NoteManager, view_mgr: ViewManager = None,
                 recent_mgr: RecentNotesManager = None):
    """Set the manager instances (called from main.py)."""
    globals()['note_manager'] = note_mgr
    if view_mgr:
        globals()['view_manager'] = view_mgr
    if recent_mgr:
        globals()['recent_manager'] = recent_mgr


@router.post(
    "",
    response_model=NoteResponse,
    status_code=201,
    summary="Create Note",
    description="""
Create a new note, either personal or inside a workspace.

**Workflow**:
1. Validate note data (title, content)
2. If `workspace_id` is given, verify the user owns or belongs to the workspace
3. Store the note with identical `created_at` / `updated_at`
4. Return the created note

**Request Example**:
```json
{
  "title": "Runbook: rotate TLS certificates",
  "content": "<p>Steps...</p>",
  "workspace_id": "cjld2cjxh0000qzrmn831i7rn"
}
```

**Authorization**: Required (X-User-ID header)
    """,
    responses={
        201: {"description": "Note created successfully"},
        401: {"description": "Missing authentication"},
        404: {"description": "Workspace not found or access denied"},
        422: {"description": "Invalid note data"},
        500: {"description": "Internal server error during note creation"}
    }
)
async def create_note(note_data: NoteCreate, user_id: str = Depends(get_user_id)):
    """Create a new note."""
    try:
        note = await note_manager.create_note(user_id, note_data)
        return NoteResponse.from_note(note)
    except WorkspaceNotFoundError:
        raise HTTPException(status_code=404, detail="Workspace not found")
    except Exception as e:
        logger.error(f"Failed to create note: {e}")
        raise HTTPException(status_code=500, detail="An error occurred while creating the note")


@router.get(
    "/recent",
    response_model=RecentNotes,
    summary="Recent Notes",
    description="""
Retrieve the notes the user viewed most recently and the notes they own that
were modified most recently.

**Query Parameters**:
- `limit`: Notes per list (default: 5, max: 20). Invalid values fall back to the default.

**Response Example**:
```json
{
  "recently_viewed": [
    {"id": "c...", "title": "On-call guide", "folder_id": null,
     "updated_at": "2026-01-16T10:00:00", "viewed_at": "2026-01-16T11:59:00"}
  ],
  "recently_modified": [
    {"id": "c...", "title": "DNS notes", "folder_id": "c...", "updated_at": "2026-01-15T09:00:00"}
  ]
}
```

Soft-deleted notes never appear in either list.

**Authorization**: Required (X-User-ID header)
    """,
    responses={
        200: {"description": "Recent notes retrieved successfully"},
        401: {"description": "Missing authentication"},
        500: {"description": "Internal server error"}
    }
)
async def get_recent_notes(
    user_id: str = Depends(get_user_id),
    limit: Optional[str] = Query(None),
):
    """Get recently viewed and recently modified notes."""
    try:
        return await recent_manager.get_recent(user_id, limit)
    except Exception as e:
        logger.error(f"Failed to fetch recent notes: {e}")
        raise HTTPException(status_code=500, detail="An error occurred while fetching recent notes")


@router.get("/{note_id}", response_model=NoteResponse, summary="Get Note")
async def get_note(user_id: str = Depends(get_user_id), note_id: str = Depends(validate_note_id)):
    """Get note by ID."""
    try:
        note = await note_manager.get_note(note_id, user_id)
        if not note:
            raise HTTPException(status_code=404, detail="Note not found")
        return NoteResponse.from_note(note)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to get note {note_id}: {e}")
        raise HTTPException(status_code=500, detail="An error occurred while fetching the note")


@router.patch("/{note_id}", response_model=NoteResponse, summary="Update Note")
async def update_note(
    updates: NoteUpdate,
    user_id: str = Depends(get_user_id),
    note_id: str = Depends(validate_note_id),
):
    """Edit a note and record the editor as last modifier."""
    try:
        note = await note_manager.update_note(note_id, user_id, updates)
        if not note:
            raise HTTPException(status_code=404, detail="Note not found")
        return NoteResponse.from_note(note)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to update note {note_id}: {e}")
        raise HTTPException(status_code=500, detail="An error occurred while updating the note")


@router.delete("/{note_id}", status_code=204, summary="Delete Note")
async def delete_note(user_id: str = Depends(get_user_id), note_id: str = Depends(validate_note_id)):
    """Soft-delete a note."""
    try:
        deleted = await note_manager.delete_note(note_id, user_id)
    except Exception as e:
        logger.error(f"Failed to delete note {note_id}: {e}")
        raise HTTPException(status_code=500, detail="An error occurred while deleting the note")

    if not deleted:
        raise HTTPException(status_code=404, detail="Note not found")


@router.post(
    "/{note_id}/view",
    response_model=ViewTrackingResult,
    summary="Track Note View",
    description="""
Record that the authenticated user viewed this note.

**Workflow**:
1. Validate the note ID format
2. Verify the note exists, is not deleted and is accessible (personal note,
   owned workspace, or workspace membership)
3. Upsert the user's view record; the view counts when it is the first one
   or the previous one is at least one hour old
4. Return whether the view was counted and the current view count

**Response Example**:
```json
{"counted": true, "view_count": 42}
```

Clients should treat this call as best-effort telemetry and never block on it.

**Authorization**: Required (X-User-ID header)
    """,
    responses={
        200: {"description": "View tracked (counted or deduplicated)"},
        400: {"description": "Invalid note ID format"},
        401: {"description": "Missing authentication"},
        404: {"description": "Note not found or access denied"},
        500: {"description": "Internal server error"}
    }
)
async def track_note_view(user_id: str = Depends(get_user_id), note_id: str = Depends(validate_note_id)):
    """Track a note view with deduplication."""
    try:
        note = await note_manager.get_note(note_id, user_id)
        if not note:
            raise HTTPException(status_code=404, detail="Note not found")

        return await view_manager.record_view(user_id, note_id)

    except HTTPException:
        raise
    except NoteNotFoundError:
        raise HTTPException(status_code=404, detail="Note not found")
    except Exception as e:
        logger.error(f"Error tracking note view: {e}")
        raise HTTPException(status_code=500, detail="An error occurred while tracking note view")


@router.get("/{note_id}/views", response_model=ViewCountResponse, summary="Get Note View Count")
async def get_note_view_count(user_id: str = Depends(get_user_id), note_id: str = Depends(validate_note_id)):
    """Get the current view count without recording a view."""
    try:
        note = await note_manager.get_note(note_id, user_id)
        if not note:
            raise HTTPException(status_code=404, detail="Note not found")

        view_count = await view_manager.get_view_count(note_id)
        if view_count is None:
            raise HTTPException(status_code=404, detail="Note not found")
        return ViewCountResponse(note_id=note_id, view_count=view_count)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to get view count of note {note_id}: {e}")
        raise HTTPException(status_code=500, detail="An error occurred while fetching the view count")
