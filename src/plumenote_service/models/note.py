"""Note data models."""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class NoteCreate(BaseModel):
    """Model for creating a new note."""
    title: str = Field(default="Sans titre", min_length=1, max_length=500)
    content: Optional[str] = None
    folder_id: Optional[str] = None
    workspace_id: Optional[str] = None


class NoteUpdate(BaseModel):
    """Model for editing a note."""
    title: Optional[str] = Field(None, min_length=1, max_length=500)
    content: Optional[str] = None
    folder_id: Optional[str] = None


class Note(BaseModel):
    """Full note model with database fields."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    content: Optional[str] = None
    created_by_id: str
    last_modified_by_id: Optional[str] = None
    folder_id: Optional[str] = None
    workspace_id: Optional[str] = None
    view_count: int = 0
    last_viewed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class NoteResponse(BaseModel):
    """API response model for a single note."""
    id: str
    title: str
    content: Optional[str]
    created_by_id: str
    last_modified_by_id: Optional[str]
    folder_id: Optional[str]
    workspace_id: Optional[str]
    view_count: int
    created_at: str
    updated_at: str

    @classmethod
    def from_note(cls, note: Note):
        """Convert Note to NoteResponse."""
        return cls(
            id=note.id,
            title=note.title,
            content=note.content,
            created_by_id=note.created_by_id,
            last_modified_by_id=note.last_modified_by_id,
            folder_id=note.folder_id,
            workspace_id=note.workspace_id,
            view_count=note.view_count,
            created_at=note.created_at.isoformat(),
            updated_at=note.updated_at.isoformat(),
        )


class ViewTrackingResult(BaseModel):
    """Outcome of recording a note view."""
    counted: bool = Field(..., description="False when the view was deduplicated")
    view_count: int = Field(..., ge=0)


class ViewCountResponse(BaseModel):
    note_id: str
    view_count: int


class RecentNote(BaseModel):
    """Entry of the recently modified list."""
    id: str
    title: str
    folder_id: Optional[str] = None
    updated_at: datetime


class RecentlyViewedNote(RecentNote):
    """Entry of the recently viewed list."""
    viewed_at: datetime


class RecentNotes(BaseModel):
    recently_viewed: List[RecentlyViewedNote] = Field(default_factory=list)
    recently_modified: List[RecentNote] = Field(default_factory=list)
