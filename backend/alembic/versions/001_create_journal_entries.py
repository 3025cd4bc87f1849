"""Create journal_entries table

Revision ID: 001
Revises: None
Create Date: 2026-01-20 08:41:21.000000+00:00

What:  Creates the `journal_entries` table and its per-owner listing index.
How:   UUID primary key, TIMESTAMP WITH TIME ZONE columns. Server defaults
       cover rows inserted outside the application; the app always sets
       id and both timestamps itself.

Rollback: downgrade() drops the table (all entries are lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "journal_entries",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
        ),
        sa.Column(
            "user_id",
            sa.String(255),
            nullable=False,
            comment="Owner of the entry, taken from the authenticated session",
        ),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column(
            "content",
            sa.Text(),
            nullable=False,
            comment="Free text for notes; JSON array of {text, completed} for checklists",
        ),
        sa.Column("mood", sa.String(32), nullable=True),
        sa.Column(
            "type",
            sa.String(32),
            nullable=False,
            server_default=sa.text("'note'"),
            comment="Entry kind: note or checklist",
        ),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("type IN ('note', 'checklist')", name="ck_journal_entries_type"),
        sa.CheckConstraint("updated_at >= created_at", name="ck_journal_entries_updated_after_created"),
    )

    op.create_index(
        "idx_journal_entries_user_created",
        "journal_entries",
        ["user_id", sa.text("created_at DESC"), sa.text("id DESC")],
    )


def downgrade() -> None:
    op.drop_index("idx_journal_entries_user_created", table_name="journal_entries")
    op.drop_table("journal_entries")
