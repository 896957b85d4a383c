"""Database client for notes, workspaces and view tracking."""

import asyncio
import logging
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Sequence, Tuple
from sqlalchemy import and_, distinct, func, or_, select, text, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.engine import Row
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from ...core.exceptions import NoteNotFoundError
from ...models.stats import StatsScope
from .models import (Base, FolderModel, NoteModel, NoteViewModel, UserModel,
                     WorkspaceMemberModel, WorkspaceModel)

logger = logging.getLogger(__name__)


def _note_access_clause(user_id: str):
    """Personal notes of the user, or notes in a workspace the user owns or joined."""
    return or_(
        and_(NoteModel.created_by_id == user_id, NoteModel.workspace_id.is_(None)),
        NoteModel.workspace_id.in_(
            select(WorkspaceModel.id).where(WorkspaceModel.owner_id == user_id)
        ),
        NoteModel.workspace_id.in_(
            select(WorkspaceMemberModel.workspace_id).where(WorkspaceMemberModel.user_id == user_id)
        ),
    )


def _scoped(query, scope: StatsScope):
    """Restrict a notes query to the scope's workspace, if any."""
    if scope.is_all:
        return query
    return query.where(NoteModel.workspace_id == scope.workspace_id)


class DatabaseClient:
    """Async database client for PlumeNote metadata."""

    def __init__(self, database_url: str, connect_retries: int = 5, retry_delay: float = 0.5):
        """Initialize database client.

        Args:
            database_url: SQLAlchemy database URL (e.g., sqlite+aiosqlite:///./plumenote.db)
            connect_retries: Attempts made by verify_connection before giving up
            retry_delay: Base delay in seconds, grows linearly per attempt
        """
        self.engine = create_async_engine(database_url, echo=False)
        self.async_session = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False
        )
        self.connect_retries = connect_retries
        self.retry_delay = retry_delay

    async def verify_connection(self):
        """Verify database connection, retrying while the database comes up."""
        for attempt in range(self.connect_retries):
            try:
                async with self.engine.begin() as conn:
                    await conn.execute(text("SELECT 1"))
                logger.info("Database connection verified")
                return
            except OSError as e:
                if attempt == self.connect_retries - 1:
                    raise
                logger.warning(f"Database not reachable (attempt {attempt + 1}): {e}")
                await asyncio.sleep(self.retry_delay * (attempt + 1))

    async def initialize(self):
        """Create database tables."""
        await self.verify_connection()

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database initialized successfully")

    async def close(self):
        """Close database connections."""
        await self.engine.dispose()

    # ------------------------------------------------------------------
    # Users, workspaces, folders
    # ------------------------------------------------------------------

    async def create_user(self, user: UserModel) -> UserModel:
        async with self.async_session() as session:
            session.add(user)
            await session.commit()
            await session.refresh(user)
            return user

    async def get_users(self, user_ids: Sequence[str]) -> List[UserModel]:
        """Fetch users by ID (order not guaranteed)."""
        if not user_ids:
            return []
        async with self.async_session() as session:
            result = await session.execute(
                select(UserModel).where(UserModel.id.in_(list(user_ids)))
            )
            return list(result.scalars().all())

    async def create_workspace(self, workspace: WorkspaceModel) -> WorkspaceModel:
        async with self.async_session() as session:
            session.add(workspace)
            await session.commit()
            await session.refresh(workspace)
            return workspace

    async def add_workspace_member(self, workspace_id: str, user_id: str, role: str = "EDITOR") -> WorkspaceMemberModel:
        async with self.async_session() as session:
            member = WorkspaceMemberModel(workspace_id=workspace_id, user_id=user_id, role=role)
            session.add(member)
            await session.commit()
            await session.refresh(member)
            return member

    async def get_accessible_workspace(self, workspace_id: str, user_id: str) -> Optional[WorkspaceModel]:
        """Get workspace by ID if the user owns it or is a member."""
        async with self.async_session() as session:
            result = await session.execute(
                select(WorkspaceModel).where(
                    WorkspaceModel.id == workspace_id,
                    or_(
                        WorkspaceModel.owner_id == user_id,
                        WorkspaceModel.id.in_(
                            select(WorkspaceMemberModel.workspace_id).where(
                                WorkspaceMemberModel.user_id == user_id
                            )
                        ),
                    ),
                )
            )
            return result.scalar_one_or_none()

    async def create_folder(self, folder: FolderModel) -> FolderModel:
        async with self.async_session() as session:
            session.add(folder)
            await session.commit()
            await session.refresh(folder)
            return folder

    # ------------------------------------------------------------------
    # Notes
    # ------------------------------------------------------------------

    async def create_note(self, note: NoteModel) -> NoteModel:
        """Create a new note."""
        async with self.async_session() as session:
            session.add(note)
            await session.commit()
            await session.refresh(note)
            return note

    async def get_accessible_note(self, note_id: str, user_id: str) -> Optional[NoteModel]:
        """Get a non-deleted note by ID (with access check)."""
        async with self.async_session() as session:
            result = await session.execute(
                select(NoteModel).where(
                    NoteModel.id == note_id,
                    NoteModel.deleted_at.is_(None),
                    _note_access_clause(user_id),
                )
            )
            return result.scalar_one_or_none()

    async def update_note(self, note_id: str, user_id: str, now: datetime, **updates) -> Optional[NoteModel]:
        """Apply an edit to an accessible note and stamp the modifier."""
        async with self.async_session() as session:
            result = await session.execute(
                select(NoteModel).where(
                    NoteModel.id == note_id,
                    NoteModel.deleted_at.is_(None),
                    _note_access_clause(user_id),
                )
            )
            note = result.scalar_one_or_none()

            if not note:
                return None

            for key, value in updates.items():
                if hasattr(note, key) and value is not None:
                    setattr(note, key, value)
            note.updated_at = now
            note.last_modified_by_id = user_id

            await session.commit()
            await session.refresh(note)
            return note

    async def soft_delete_note(self, note_id: str, user_id: str, now: datetime) -> bool:
        """Mark an accessible note as deleted."""
        async with self.async_session() as session:
            result = await session.execute(
                update(NoteModel)
                .where(
                    NoteModel.id == note_id,
                    NoteModel.deleted_at.is_(None),
                    _note_access_clause(user_id),
                )
                .values(deleted_at=now)
                .execution_options(synchronize_session=False)
            )
            await session.commit()
            return result.rowcount > 0

    async def get_note_view_count(self, note_id: str) -> Optional[int]:
        async with self.async_session() as session:
            result = await session.execute(
                select(NoteModel.view_count).where(NoteModel.id == note_id)
            )
            return result.scalar_one_or_none()

    # ------------------------------------------------------------------
    # View tracking
    # ------------------------------------------------------------------

    def _insert(self, model):
        if self.engine.dialect.name == "postgresql":
            return pg_insert(model)
        return sqlite_insert(model)

    async def upsert_note_view(
        self, user_id: str, note_id: str, now: datetime, dedup_window: timedelta
    ) -> Tuple[bool, int]:
        """Record a view and increment the note counter when it counts.

        The ON CONFLICT clause evaluates the previous viewed_at and bumps it
        to ``now`` in the same statement, so two concurrent requests for one
        (user, note) pair serialize on the unique constraint and at most one
        of them observes an expired window.

        Returns:
            Tuple of (counted, view_count after the update)

        Raises:
            NoteNotFoundError: if the note row no longer exists, whether the
                counter update finds nothing or a foreign key rejects the view row
        """
        cutoff = now - dedup_window
        stmt = self._insert(NoteViewModel).values(
            user_id=user_id, note_id=note_id, viewed_at=now, last_view_counted=True
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[NoteViewModel.user_id, NoteViewModel.note_id],
            set_={
                "last_view_counted": NoteViewModel.viewed_at <= cutoff,
                "viewed_at": stmt.excluded.viewed_at,
            },
        ).returning(NoteViewModel.last_view_counted)

        async with self.async_session() as session:
            try:
                async with session.begin():
                    counted = bool((await session.execute(stmt)).scalar_one())

                    if counted:
                        result = await session.execute(
                            update(NoteModel)
                            .where(NoteModel.id == note_id)
                            .values(view_count=NoteModel.view_count + 1, last_viewed_at=now)
                            .returning(NoteModel.view_count)
                            .execution_options(synchronize_session=False)
                        )
                    else:
                        result = await session.execute(
                            select(NoteModel.view_count).where(NoteModel.id == note_id)
                        )
                    view_count = result.scalar_one_or_none()

                    if view_count is None:
                        raise NoteNotFoundError(note_id)
            except IntegrityError as e:
                # Foreign keys enforced: the view row cannot reference a missing note
                raise NoteNotFoundError(note_id) from e

        return counted, view_count

    async def list_recent_views(self, user_id: str, limit: int) -> List[Row]:
        """Most recent views of the user, restricted to non-deleted notes."""
        async with self.async_session() as session:
            result = await session.execute(
                select(
                    NoteModel.id,
                    NoteModel.title,
                    NoteModel.folder_id,
                    NoteModel.updated_at,
                    NoteViewModel.viewed_at,
                )
                .join(NoteModel, NoteModel.id == NoteViewModel.note_id)
                .where(NoteViewModel.user_id == user_id, NoteModel.deleted_at.is_(None))
                .order_by(NoteViewModel.viewed_at.desc(), NoteModel.id)
                .limit(limit)
            )
            return list(result.all())

    async def list_recently_modified(self, user_id: str, limit: int) -> List[Row]:
        """Non-deleted notes created by the user, newest edit first."""
        async with self.async_session() as session:
            result = await session.execute(
                select(NoteModel.id, NoteModel.title, NoteModel.folder_id, NoteModel.updated_at)
                .where(NoteModel.created_by_id == user_id, NoteModel.deleted_at.is_(None))
                .order_by(NoteModel.updated_at.desc(), NoteModel.id)
                .limit(limit)
            )
            return list(result.all())

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------

    async def count_notes(self, scope: StatsScope, created_since: Optional[datetime] = None) -> int:
        """Count non-deleted notes, optionally only those created since a date."""
        async with self.async_session() as session:
            query = select(func.count(NoteModel.id)).where(NoteModel.deleted_at.is_(None))
            if created_since is not None:
                query = query.where(NoteModel.created_at >= created_since)
            result = await session.execute(_scoped(query, scope))
            return result.scalar_one()

    async def count_active_users(self, since: datetime, scope: StatsScope) -> int:
        """Count distinct users who viewed a note since the given time."""
        async with self.async_session() as session:
            query = select(func.count(distinct(NoteViewModel.user_id))).where(
                NoteViewModel.viewed_at >= since
            )
            if not scope.is_all:
                query = query.join(NoteModel, NoteModel.id == NoteViewModel.note_id).where(
                    NoteModel.workspace_id == scope.workspace_id
                )
            result = await session.execute(query)
            return result.scalar_one()

    async def list_activity_timestamps(self, since: datetime, scope: StatsScope) -> List[Tuple[datetime, datetime]]:
        """(created_at, updated_at) of non-deleted notes touched since a date."""
        async with self.async_session() as session:
            query = select(NoteModel.created_at, NoteModel.updated_at).where(
                NoteModel.deleted_at.is_(None),
                or_(NoteModel.created_at >= since, NoteModel.updated_at >= since),
            )
            result = await session.execute(_scoped(query, scope))
            return [(row.created_at, row.updated_at) for row in result.all()]

    async def list_top_viewed_notes(self, limit: int, scope: StatsScope) -> List[Row]:
        async with self.async_session() as session:
            query = (
                select(
                    NoteModel.id,
                    NoteModel.title,
                    NoteModel.view_count,
                    WorkspaceModel.name.label("workspace_name"),
                )
                .outerjoin(WorkspaceModel, WorkspaceModel.id == NoteModel.workspace_id)
                .where(NoteModel.deleted_at.is_(None), NoteModel.view_count > 0)
            )
            query = _scoped(query, scope).order_by(NoteModel.view_count.desc(), NoteModel.id).limit(limit)
            result = await session.execute(query)
            return list(result.all())

    async def count_notes_by_creator(self, scope: StatsScope) -> Dict[str, int]:
        async with self.async_session() as session:
            query = (
                select(NoteModel.created_by_id, func.count(NoteModel.id))
                .where(NoteModel.deleted_at.is_(None))
                .group_by(NoteModel.created_by_id)
            )
            result = await session.execute(_scoped(query, scope))
            return {user_id: count for user_id, count in result.all()}

    async def count_notes_by_last_modifier(self, scope: StatsScope) -> Dict[str, int]:
        async with self.async_session() as session:
            query = (
                select(NoteModel.last_modified_by_id, func.count(NoteModel.id))
                .where(NoteModel.deleted_at.is_(None), NoteModel.last_modified_by_id.is_not(None))
                .group_by(NoteModel.last_modified_by_id)
            )
            result = await session.execute(_scoped(query, scope))
            return {user_id: count for user_id, count in result.all()}
