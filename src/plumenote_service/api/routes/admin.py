"""Admin statistics endpoints."""

import logging
from typing import Optional
from fastapi import APIRouter, HTTPException, Depends, Query

from ...models.stats import AdminStats, StatsScope
from ...core.analytics_manager import AnalyticsManager
from ...api.dependencies import is_cuid, require_admin

router = APIRouter(prefix="/api/v1/admin", tags=["admin"])
logger = logging.getLogger(__name__)

# Global instance - will be set by main.py
analytics_manager: AnalyticsManager = None


def set_managers(analytics_mgr: AnalyticsManager):
    """Set manager instances (called from main.py)."""
    globals()['analytics_manager'] = analytics_mgr


@router.get(
    "/stats",
    response_model=AdminStats,
    summary="Admin Dashboard Statistics",
    description="""
Aggregated statistics for the admin dashboard.

**Query Parameters**:
- `workspace_id` (optional): Restrict every statistic to one workspace

**Returns**:
- `total_notes`: non-deleted notes
- `notes_this_week`: notes created in the last 7 days
- `active_users`: users who viewed a note in the last 7 days
- `daily_activity`: 30 consecutive days of `{date, created, modified}`, oldest first
- `top_notes`: 10 most viewed notes
- `top_contributors`: 5 users with the most notes created + last modified

**Authorization**: Required (X-User-ID header, ADMIN in X-User-Roles)
    """,
    responses={
        200: {"description": "Statistics retrieved successfully"},
        400: {"description": "Invalid workspace ID format"},
        401: {"description": "Missing authentication"},
        403: {"description": "Admin role required"},
        500: {"description": "Internal server error"}
    }
)
async def get_admin_stats(
    user_id: str = Depends(require_admin),
    workspace_id: Optional[str] = Query(None),
):
    """Get admin dashboard statistics."""
    if workspace_id:
        if not is_cuid(workspace_id):
            raise HTTPException(status_code=400, detail="Invalid workspace ID format")
        scope = StatsScope.for_workspace(workspace_id)
    else:
        scope = StatsScope.all()

    logger.info(f"Admin stats requested by {user_id} for scope {workspace_id or 'all'}")

    try:
        return await analytics_manager.get_admin_stats(scope)
    except Exception as e:
        logger.error(f"Error fetching admin statistics: {e}")
        raise HTTPException(status_code=500, detail="An error occurred while fetching statistics")
