"""
Mood Journal Backend — JournalEntry SQLAlchemy Model
======================================================

What:  ORM model representing the `journal_entries` table.
How:   Inherits from the shared DeclarativeBase; Alembic mirrors it in
       migration 001.
Who:   Used by EntryService for all CRUD operations.

Table Design:
    - id: UUID generated in Python, so the value is known right after flush
    - user_id: owner identity copied from the session, never from the body
    - content: free text for notes, JSON array of checklist items otherwise
    - mood / type: short enumerated strings, validated in the service layer
    - created_at / updated_at: UTC; updated_at is refreshed by every update

Index on (user_id, created_at DESC, id DESC) serves the only list query:
"this user's entries, newest first".
"""

import enum
import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import CheckConstraint, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from moodjournal.database import Base, UTCDateTime, utcnow


class EntryType(str, enum.Enum):
    NOTE = "note"
    CHECKLIST = "checklist"


class Mood(str, enum.Enum):
    HAPPY = "happy"
    SAD = "sad"
    NEUTRAL = "neutral"
    EXCITED = "excited"
    ANXIOUS = "anxious"


ENTRY_TYPES = frozenset(t.value for t in EntryType)
MOODS = frozenset(m.value for m in Mood)


class JournalEntry(Base):
    """
    A single journal record, either a freeform note or a checklist.

    Lifecycle:
        1. Created by an authenticated user (created_at == updated_at)
        2. Updated by partial merge; updated_at always refreshed
        3. Deleted permanently (no soft delete)
    """

    __tablename__ = "journal_entries"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    user_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Owner of the entry, taken from the authenticated session",
    )

    title: Mapped[str] = mapped_column(Text, nullable=False)

    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Free text for notes; JSON array of {text, completed} for checklists",
    )

    mood: Mapped[Optional[str]] = mapped_column(String(32), nullable=True, default=None)

    type: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=EntryType.NOTE.value,
        comment="Entry kind: note or checklist",
    )

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
        default=utcnow,
    )

    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
        default=utcnow,
    )

    __table_args__ = (
        Index(
            "idx_journal_entries_user_created",
            "user_id",
            created_at.desc(),
            id.desc(),
        ),
        CheckConstraint("type IN ('note', 'checklist')", name="ck_journal_entries_type"),
        CheckConstraint("updated_at >= created_at", name="ck_journal_entries_updated_after_created"),
    )

    def __repr__(self) -> str:
        return (
            f"<JournalEntry(id={self.id}, user_id='{self.user_id}', "
            f"type='{self.type}', created_at='{self.created_at}')>"
        )
