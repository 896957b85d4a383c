"""Initial schema: users, workspaces, folders, notes and note views

Revision ID: 001_initial
Revises:
Create Date: 2026-01-18 00:00:00.000000
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create note and view tracking tables."""
    op.create_table(
        'users',
        sa.Column('id', sa.String(length=25), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('image', sa.String(length=1024), nullable=True),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email')
    )

    op.create_table(
        'workspaces',
        sa.Column('id', sa.String(length=25), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('owner_id', sa.String(length=25), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_workspaces_owner_id'), 'workspaces', ['owner_id'], unique=False)

    op.create_table(
        'workspace_members',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('workspace_id', sa.String(length=25), nullable=False),
        sa.Column('user_id', sa.String(length=25), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.ForeignKeyConstraint(['workspace_id'], ['workspaces.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('workspace_id', 'user_id', name='uq_workspace_member')
    )
    op.create_index(op.f('ix_workspace_members_workspace_id'), 'workspace_members', ['workspace_id'], unique=False)
    op.create_index(op.f('ix_workspace_members_user_id'), 'workspace_members', ['user_id'], unique=False)

    op.create_table(
        'folders',
        sa.Column('id', sa.String(length=25), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('workspace_id', sa.String(length=25), nullable=True),
        sa.Column('created_by_id', sa.String(length=25), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['workspace_id'], ['workspaces.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['created_by_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_folders_workspace_id'), 'folders', ['workspace_id'], unique=False)

    op.create_table(
        'notes',
        sa.Column('id', sa.String(length=25), nullable=False),
        sa.Column('title', sa.String(length=500), nullable=False),
        sa.Column('content', sa.Text(), nullable=True),
        sa.Column('created_by_id', sa.String(length=25), nullable=False),
        sa.Column('last_modified_by_id', sa.String(length=25), nullable=True),
        sa.Column('folder_id', sa.String(length=25), nullable=True),
        sa.Column('workspace_id', sa.String(length=25), nullable=True),
        sa.Column('view_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('last_viewed_at', sa.DateTime(), nullable=True),
        sa.Column('deleted_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['created_by_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['last_modified_by_id'], ['users.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['folder_id'], ['folders.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['workspace_id'], ['workspaces.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_notes_created_by_id'), 'notes', ['created_by_id'], unique=False)
    op.create_index(op.f('ix_notes_last_modified_by_id'), 'notes', ['last_modified_by_id'], unique=False)
    op.create_index(op.f('ix_notes_folder_id'), 'notes', ['folder_id'], unique=False)
    op.create_index(op.f('ix_notes_workspace_id'), 'notes', ['workspace_id'], unique=False)
    op.create_index(op.f('ix_notes_deleted_at'), 'notes', ['deleted_at'], unique=False)
    op.create_index(op.f('ix_notes_created_at'), 'notes', ['created_at'], unique=False)
    op.create_index(op.f('ix_notes_updated_at'), 'notes', ['updated_at'], unique=False)

    op.create_table(
        'note_views',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.String(length=25), nullable=False),
        sa.Column('note_id', sa.String(length=25), nullable=False),
        sa.Column('viewed_at', sa.DateTime(), nullable=False),
        sa.Column('last_view_counted', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['note_id'], ['notes.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'note_id', name='uq_note_view_user_note')
    )
    op.create_index(op.f('ix_note_views_user_id'), 'note_views', ['user_id'], unique=False)
    op.create_index(op.f('ix_note_views_note_id'), 'note_views', ['note_id'], unique=False)
    op.create_index(op.f('ix_note_views_viewed_at'), 'note_views', ['viewed_at'], unique=False)


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table('note_views')
    op.drop_table('notes')
    op.drop_table('folders')
    op.drop_table('workspace_members')
    op.drop_table('workspaces')
    op.drop_table('users')
