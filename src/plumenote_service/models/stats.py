"""Admin statistics models."""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class StatsScope(BaseModel):
    """Which notes an aggregation covers: every note, or a single workspace."""
    model_config = ConfigDict(frozen=True)

    workspace_id: Optional[str] = None

    @classmethod
    def all(cls) -> "StatsScope":
        return cls()

    @classmethod
    def for_workspace(cls, workspace_id: str) -> "StatsScope":
        return cls(workspace_id=workspace_id)

    @property
    def is_all(self) -> bool:
        return self.workspace_id is None


class DailyActivity(BaseModel):
    """Notes created and modified on one calendar day."""
    date: str = Field(..., description="ISO date YYYY-MM-DD")
    created: int = 0
    modified: int = 0


class TopNote(BaseModel):
    id: str
    title: str
    view_count: int
    workspace_name: Optional[str] = None


class TopContributor(BaseModel):
    id: str
    name: Optional[str] = None
    image: Optional[str] = None
    notes_created: int = 0
    notes_modified: int = 0


class AdminStats(BaseModel):
    """Complete admin dashboard statistics."""
    total_notes: int
    notes_this_week: int
    active_users: int
    daily_activity: List[DailyActivity] = Field(default_factory=list)
    top_notes: List[TopNote] = Field(default_factory=list)
    top_contributors: List[TopContributor] = Field(default_factory=list)
