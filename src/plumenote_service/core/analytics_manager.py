"""Admin dashboard statistics over notes and note views."""

import asyncio
import logging
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Dict, Iterable, List, Optional, Tuple
from zoneinfo import ZoneInfo
from ..infrastructure.database.client import DatabaseClient
from ..infrastructure.database.models import utcnow
from ..models.stats import AdminStats, DailyActivity, StatsScope, TopContributor, TopNote

logger = logging.getLogger(__name__)


def _local_date(timestamp: datetime, tz: tzinfo) -> date:
    """Calendar day of a stored (naive UTC) timestamp in the given timezone."""
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    return timestamp.astimezone(tz).date()


def bucket_daily_activity(
    timestamps: Iterable[Tuple[datetime, datetime]],
    today: date,
    days: int = 30,
    tz: tzinfo = timezone.utc,
) -> List[DailyActivity]:
    """Aggregate (created_at, updated_at) pairs into a gapless daily series.

    The series covers ``[today - (days - 1), today]`` oldest first. A note
    counts as modified only when ``updated_at`` differs from ``created_at``;
    timestamps outside the window are ignored.
    """
    activity: Dict[str, DailyActivity] = {}
    for offset in range(days - 1, -1, -1):
        day = (today - timedelta(days=offset)).isoformat()
        activity[day] = DailyActivity(date=day, created=0, modified=0)

    for created_at, updated_at in timestamps:
        bucket = activity.get(_local_date(created_at, tz).isoformat())
        if bucket is not None:
            bucket.created += 1

        if updated_at != created_at:
            bucket = activity.get(_local_date(updated_at, tz).isoformat())
            if bucket is not None:
                bucket.modified += 1

    return list(activity.values())


class AnalyticsManager:
    """Manager for admin statistics: activity series and leaderboards."""

    def __init__(
        self,
        db_client: DatabaseClient,
        activity_window_days: int = 30,
        active_users_window_days: int = 7,
        top_notes_limit: int = 10,
        top_contributors_limit: int = 5,
        timezone_name: str = "UTC",
    ):
        self.db = db_client
        self.activity_window_days = activity_window_days
        self.active_users_window_days = active_users_window_days
        self.top_notes_limit = top_notes_limit
        self.top_contributors_limit = top_contributors_limit
        self.tz = ZoneInfo(timezone_name)

    async def get_admin_stats(self, scope: Optional[StatsScope] = None, now: Optional[datetime] = None) -> AdminStats:
        """Get the complete admin dashboard statistics.

        Sub-queries run concurrently on separate sessions, so the counts may
        come from slightly different snapshots.
        """
        scope = scope or StatsScope.all()
        now = now or utcnow()
        week_ago = now - timedelta(days=self.active_users_window_days)

        (
            total_notes,
            notes_this_week,
            active_users,
            daily_activity,
            top_notes,
            top_contributors,
        ) = await asyncio.gather(
            self.db.count_notes(scope),
            self.db.count_notes(scope, created_since=week_ago),
            self.db.count_active_users(week_ago, scope),
            self.get_daily_activity(scope, now),
            self.get_top_notes(self.top_notes_limit, scope),
            self.get_top_contributors(self.top_contributors_limit, scope),
        )

        logger.info(f"Computed admin stats for scope {scope.workspace_id or 'all'}")

        return AdminStats(
            total_notes=total_notes,
            notes_this_week=notes_this_week,
            active_users=active_users,
            daily_activity=daily_activity,
            top_notes=top_notes,
            top_contributors=top_contributors,
        )

    async def get_daily_activity(self, scope: Optional[StatsScope] = None, now: Optional[datetime] = None) -> List[DailyActivity]:
        """Notes created and modified per day over the activity window."""
        scope = scope or StatsScope.all()
        today = _local_date(now or utcnow(), self.tz)
        first_day = today - timedelta(days=self.activity_window_days - 1)

        # Midnight of the first local day, back in storage convention
        since = (
            datetime.combine(first_day, time.min, tzinfo=self.tz)
            .astimezone(timezone.utc)
            .replace(tzinfo=None)
        )

        timestamps = await self.db.list_activity_timestamps(since, scope)
        return bucket_daily_activity(timestamps, today, self.activity_window_days, self.tz)

    async def get_top_notes(self, limit: Optional[int] = None, scope: Optional[StatsScope] = None) -> List[TopNote]:
        """Most viewed non-deleted notes, ties broken by note ID."""
        rows = await self.db.list_top_viewed_notes(limit or self.top_notes_limit, scope or StatsScope.all())
        return [
            TopNote(id=row.id, title=row.title, view_count=row.view_count, workspace_name=row.workspace_name)
            for row in rows
        ]

    async def get_top_contributors(
        self, limit: Optional[int] = None, scope: Optional[StatsScope] = None
    ) -> List[TopContributor]:
        """Users ranked by notes created plus notes they last modified."""
        scope = scope or StatsScope.all()
        limit = limit or self.top_contributors_limit

        created_counts = await self.db.count_notes_by_creator(scope)
        modified_counts = await self.db.count_notes_by_last_modifier(scope)

        user_stats: Dict[str, Dict[str, int]] = {}
        for user_id, count in created_counts.items():
            user_stats.setdefault(user_id, {"created": 0, "modified": 0})["created"] = count
        for user_id, count in modified_counts.items():
            user_stats.setdefault(user_id, {"created": 0, "modified": 0})["modified"] = count

        ranked = sorted(
            user_stats.items(),
            key=lambda item: (-(item[1]["created"] + item[1]["modified"]), item[0]),
        )[:limit]

        users = await self.db.get_users([user_id for user_id, _ in ranked])
        user_map = {user.id: user for user in users}

        contributors = []
        for user_id, stats in ranked:
            user = user_map.get(user_id)
            contributors.append(TopContributor(
                id=user_id,
                name=user.name if user else None,
                image=user.image if user else None,
                notes_created=stats["created"],
                notes_modified=stats["modified"],
            ))
        return contributors
