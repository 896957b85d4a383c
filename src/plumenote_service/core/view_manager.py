"""Note view tracking with per-user deduplication."""

import logging
from datetime import datetime, timedelta
from typing import Optional
from ..infrastructure.database.client import DatabaseClient
from ..infrastructure.database.models import utcnow
from ..models.note import ViewTrackingResult

logger = logging.getLogger(__name__)

DEFAULT_DEDUP_WINDOW = timedelta(hours=1)


class ViewManager:
    """Records note views and maintains per-note view counters.

    A view is counted when the user has never viewed the note, or when their
    previous view is at least ``dedup_window`` old. Every view, counted or
    not, refreshes the user's ``viewed_at`` so that recency lists reflect any
    visit while view counts only reflect counted ones.
    """

    def __init__(self, db_client: DatabaseClient, dedup_window: timedelta = DEFAULT_DEDUP_WINDOW):
        self.db = db_client
        self.dedup_window = dedup_window

    async def record_view(self, user_id: str, note_id: str, now: Optional[datetime] = None) -> ViewTrackingResult:
        """Track a view of a note the caller has already checked access to.

        Args:
            user_id: Viewing user
            note_id: Viewed note
            now: View time (defaults to current UTC time)

        Returns:
            Whether the view was counted and the note's view count afterwards

        Raises:
            NoteNotFoundError: if the note disappeared before the write
        """
        counted, view_count = await self.db.upsert_note_view(
            user_id, note_id, now or utcnow(), self.dedup_window
        )

        logger.info(f"Tracked view of note {note_id} by user {user_id}: counted={counted}, view_count={view_count}")

        return ViewTrackingResult(counted=counted, view_count=view_count)

    async def get_view_count(self, note_id: str) -> Optional[int]:
        """Current view count of a note, or None if it does not exist."""
        return await self.db.get_note_view_count(note_id)
