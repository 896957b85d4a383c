"""SQLAlchemy ORM models for notes, workspaces and view tracking."""

from datetime import datetime, timezone
from uuid import uuid4
from sqlalchemy import (Boolean, Column, DateTime, ForeignKey, Integer, String,
                        Text, UniqueConstraint, true)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


def utcnow() -> datetime:
    """Current time as a naive UTC datetime (the storage convention)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def new_id() -> str:
    """Generate a CUID-shaped identifier ("c" + 24 lowercase alphanumerics)."""
    return "c" + uuid4().hex[:24]


class UserModel(Base):
    """Display metadata for a user authenticated by the gateway."""
    __tablename__ = "users"

    id = Column(String(25), primary_key=True, default=new_id)
    name = Column(String(255), nullable=True)
    email = Column(String(255), nullable=False, unique=True)
    image = Column(String(1024), nullable=True)
    role = Column(String(20), nullable=False, default="EDITOR")
    created_at = Column(DateTime, nullable=False, default=utcnow)

    def __repr__(self):
        return f"<UserModel(id={self.id}, email={self.email})>"


class WorkspaceModel(Base):
    """Shared container for notes."""
    __tablename__ = "workspaces"

    id = Column(String(25), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False)
    owner_id = Column(String(25), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    members = relationship("WorkspaceMemberModel", back_populates="workspace", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<WorkspaceModel(id={self.id}, name={self.name})>"


class WorkspaceMemberModel(Base):
    __tablename__ = "workspace_members"

    id = Column(Integer, primary_key=True, autoincrement=True)
    workspace_id = Column(String(25), ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(25), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    role = Column(String(20), nullable=False, default="EDITOR")

    workspace = relationship("WorkspaceModel", back_populates="members")

    __table_args__ = (
        UniqueConstraint("workspace_id", "user_id", name="uq_workspace_member"),
    )


class FolderModel(Base):
    __tablename__ = "folders"

    id = Column(String(25), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False)
    workspace_id = Column(String(25), ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=True, index=True)
    created_by_id = Column(String(25), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)


class NoteModel(Base):
    """A note. Soft-deleted notes keep their row with deleted_at set."""
    __tablename__ = "notes"

    id = Column(String(25), primary_key=True, default=new_id)
    title = Column(String(500), nullable=False, default="Sans titre")
    content = Column(Text, nullable=True)
    created_by_id = Column(String(25), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    last_modified_by_id = Column(String(25), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    folder_id = Column(String(25), ForeignKey("folders.id", ondelete="SET NULL"), nullable=True, index=True)
    workspace_id = Column(String(25), ForeignKey("workspaces.id", ondelete="SET NULL"), nullable=True, index=True)
    view_count = Column(Integer, nullable=False, default=0, server_default="0")
    last_viewed_at = Column(DateTime, nullable=True)
    deleted_at = Column(DateTime, nullable=True, index=True)
    created_at = Column(DateTime, nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime, nullable=False, default=utcnow, index=True)

    workspace = relationship("WorkspaceModel")

    def __repr__(self):
        return f"<NoteModel(id={self.id}, title={self.title})>"


class NoteViewModel(Base):
    """Most recent view of a note by a user (one row per pair)."""
    __tablename__ = "note_views"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(25), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    note_id = Column(String(25), ForeignKey("notes.id", ondelete="CASCADE"), nullable=False, index=True)
    viewed_at = Column(DateTime, nullable=False, default=utcnow, index=True)
    # Outcome of the latest upsert; lets one statement report whether it counted
    last_view_counted = Column(Boolean, nullable=False, default=True, server_default=true())

    note = relationship("NoteModel")

    __table_args__ = (
        UniqueConstraint("user_id", "note_id", name="uq_note_view_user_note"),
    )

    def __repr__(self):
        return f"<NoteViewModel(user_id={self.user_id}, note_id={self.note_id}, viewed_at={self.viewed_at})>"
