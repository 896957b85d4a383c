"""Data models for PlumeNote Service."""

from .note import (
    Note,
    NoteCreate,
    NoteUpdate,
    NoteResponse,
    ViewTrackingResult,
    ViewCountResponse,
    RecentNote,
    RecentlyViewedNote,
    RecentNotes,
)
from .stats import StatsScope, DailyActivity, TopNote, TopContributor, AdminStats
from .requests import HealthResponse, ProblemDetail

__all__ = [
    "Note",
    "NoteCreate",
    "NoteUpdate",
    "NoteResponse",
    "ViewTrackingResult",
    "ViewCountResponse",
    "RecentNote",
    "RecentlyViewedNote",
    "RecentNotes",
    "StatsScope",
    "DailyActivity",
    "TopNote",
    "TopContributor",
    "AdminStats",
    "HealthResponse",
    "ProblemDetail",
]
