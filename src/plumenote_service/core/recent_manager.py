"""Recently viewed and recently modified note lists."""

import logging
import re
from typing import Optional, Union
from ..infrastructure.database.client import DatabaseClient
from ..models.note import RecentNote, RecentlyViewedNote, RecentNotes

logger = logging.getLogger(__name__)

DEFAULT_RECENT_LIMIT = 5
MAX_RECENT_LIMIT = 20

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def parse_limit(
    raw: Optional[Union[str, int]],
    default: int = DEFAULT_RECENT_LIMIT,
    maximum: int = MAX_RECENT_LIMIT,
) -> int:
    """Parse a list size from a query parameter.

    Missing, non-numeric and zero values fall back to ``default``; anything
    else is clamped to ``[1, maximum]``. Strings are read up to the first
    non-digit, so ``"7abc"`` yields 7.
    """
    if raw is None or isinstance(raw, bool):
        return default

    if isinstance(raw, int):
        value = raw
    else:
        match = _LEADING_INT.match(raw)
        value = int(match.group(1)) if match else 0

    if not value:
        value = default

    return min(max(1, value), maximum)


class RecentNotesManager:
    """Builds per-user recency lists."""

    def __init__(
        self,
        db_client: DatabaseClient,
        default_limit: int = DEFAULT_RECENT_LIMIT,
        max_limit: int = MAX_RECENT_LIMIT,
    ):
        self.db = db_client
        self.default_limit = default_limit
        self.max_limit = max_limit

    async def get_recent(self, user_id: str, limit: Optional[Union[str, int]] = None) -> RecentNotes:
        """Get the user's recently viewed and recently modified notes.

        Args:
            user_id: User whose lists are built
            limit: Requested size of each list, raw from the query string

        Returns:
            Both lists; a note may appear in each of them once
        """
        size = parse_limit(limit, self.default_limit, self.max_limit)

        viewed_rows = await self.db.list_recent_views(user_id, size)
        modified_rows = await self.db.list_recently_modified(user_id, size)

        recent = RecentNotes(
            recently_viewed=[
                RecentlyViewedNote(
                    id=row.id,
                    title=row.title,
                    folder_id=row.folder_id,
                    updated_at=row.updated_at,
                    viewed_at=row.viewed_at,
                )
                for row in viewed_rows
            ],
            recently_modified=[
                RecentNote(id=row.id, title=row.title, folder_id=row.folder_id, updated_at=row.updated_at)
                for row in modified_rows
            ],
        )

        logger.debug(
            f"Recent notes for user {user_id}: {len(recent.recently_viewed)} viewed, "
            f"{len(recent.recently_modified)} modified"
        )
        return recent
