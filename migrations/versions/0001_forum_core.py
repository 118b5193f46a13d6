"""forum core tables

Revision ID: 0001_forum_core
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "0001_forum_core"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create users, boards, threads, posts and the vote ledger."""
    op.create_table(
        "forum_user",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("display_name", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "forum_board",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("slug", sa.Text(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("slug"),
    )
    op.create_table(
        "forum_thread",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("board_id", sa.Integer(), nullable=False),
        sa.Column("author_id", sa.String(length=64), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("last_post_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("is_pinned", sa.Boolean(), nullable=False),
        sa.Column("is_locked", sa.Boolean(), nullable=False),
        sa.Column(
            "status",
            sa.Enum("OPEN", "LOCKED", "ARCHIVED", name="threadstatus", native_enum=False, length=16),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["board_id"], ["forum_board.id"]),
        sa.ForeignKeyConstraint(["author_id"], ["forum_user.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_forum_thread_status_created_at", "forum_thread", ["status", "created_at"])
    op.create_index("ix_forum_thread_board_id", "forum_thread", ["board_id"])

    op.create_table(
        "forum_post",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("thread_id", sa.Integer(), nullable=False),
        sa.Column("author_id", sa.String(length=64), nullable=False),
        sa.Column("body", sa.Text(), nullable=False),
        sa.Column("parent_post_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("is_deleted", sa.Boolean(), nullable=False),
        sa.Column("deleted_reason", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(["thread_id"], ["forum_thread.id"]),
        sa.ForeignKeyConstraint(["author_id"], ["forum_user.id"]),
        sa.ForeignKeyConstraint(["parent_post_id"], ["forum_post.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_forum_post_thread_created_at", "forum_post", ["thread_id", "created_at"])
    op.create_index("ix_forum_post_parent_post_id", "forum_post", ["parent_post_id"])

    op.create_table(
        "forum_vote",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column(
            "target_type",
            sa.Enum("THREAD", "POST", name="targettype", native_enum=False, length=16),
            nullable=False,
        ),
        sa.Column("target_id", sa.Integer(), nullable=False),
        sa.Column("value", sa.SmallInteger(), nullable=False),
        sa.CheckConstraint("value IN (1, -1)", name="ck_forum_vote_value"),
        sa.ForeignKeyConstraint(["user_id"], ["forum_user.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "target_type", "target_id", name="uq_forum_vote_user_target"),
    )
    op.create_index("ix_forum_vote_target", "forum_vote", ["target_type", "target_id"])


def downgrade() -> None:
    """Drop the forum core tables."""
    op.drop_index("ix_forum_vote_target", table_name="forum_vote")
    op.drop_table("forum_vote")
    op.drop_index("ix_forum_post_parent_post_id", table_name="forum_post")
    op.drop_index("ix_forum_post_thread_created_at", table_name="forum_post")
    op.drop_table("forum_post")
    op.drop_index("ix_forum_thread_board_id", table_name="forum_thread")
    op.drop_index("ix_forum_thread_status_created_at", table_name="forum_thread")
    op.drop_table("forum_thread")
    op.drop_table("forum_board")
    op.drop_table("forum_user")
