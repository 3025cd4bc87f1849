"""
Mood Journal Backend — Entry Service (Entry Store + business rules)
=====================================================================

What:  All reads and writes of journal entries, scoped to one owner.
How:   Every query filters on both the entry id and the caller's user id.
       Business validation happens here, after the ownership lookup, so
       a patch aimed at someone else's entry is a 404 regardless of its
       content.
Who:   Called by the entry route handlers with the request's DB session
       and the authenticated user id.

Request pipeline (per endpoint):
    authenticate (route dependency)
      → locate by (id, user_id)        get / update / delete
      → validate                       create / update
      → read or mutate
      → respond                        200, or 201 for create

Error Handling:
    ValidationError / NotFoundError propagate unchanged. Any other exception
    from the database is logged with the operation context and re-raised as
    DatabaseError (500). Nothing is retried here.
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from moodjournal import database
from moodjournal.exceptions import DatabaseError, JournalError, NotFoundError, ValidationError
from moodjournal.models.entry import ENTRY_TYPES, MOODS, EntryType, JournalEntry
from moodjournal.schemas.entry import EntryCreate, EntryPatch, EntryResponse
from moodjournal.services.checklist import parse_checklist

logger = logging.getLogger(__name__)


# ── Validation helpers ────────────────────────────────────────────────────

def _require_text(value: Optional[str], field: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(f"{field.capitalize()} is required and cannot be empty", field=field)
    return value


def _check_type(value: Optional[str]) -> str:
    if value not in ENTRY_TYPES:
        raise ValidationError('Type must be "note" or "checklist"', field="type")
    return value


def _check_mood(value: Optional[str]) -> Optional[str]:
    # An empty string from the app means "no mood selected".
    if value is None or value == "":
        return None
    if value not in MOODS:
        raise ValidationError(
            f"Mood must be one of: {', '.join(sorted(MOODS))}",
            field="mood",
        )
    return value


def _parse_id(entry_id: str) -> Optional[uuid.UUID]:
    try:
        return uuid.UUID(str(entry_id))
    except (TypeError, ValueError, AttributeError):
        return None


class EntryService:
    """
    Business logic for journal entries.

    Responsibilities:
        - list_entries(): owner's entries, newest first, deterministic ties
        - get_entry(): single entry, 404 for missing or foreign ids
        - create_entry(): validated insert, owner taken from the session
        - update_entry(): sparse merge of supplied fields, updated_at bumped
        - delete_entry(): hard delete
    """

    async def _locate(self, db: AsyncSession, user_id: str, entry_id: str, operation: str) -> JournalEntry:
        """Fetch the entry matching id AND owner, or raise NotFoundError."""
        parsed = _parse_id(entry_id)
        if parsed is None:
            logger.info("Journal entry id %r is malformed (user=%s, op=%s)", entry_id, user_id, operation)
            raise NotFoundError(resource="journal entry", resource_id=str(entry_id))

        result = await db.execute(
            select(JournalEntry).where(
                JournalEntry.id == parsed,
                JournalEntry.user_id == user_id,
            )
        )
        entry = result.scalar_one_or_none()
        if entry is None:
            logger.info("Journal entry not found (user=%s, entry=%s, op=%s)", user_id, entry_id, operation)
            raise NotFoundError(resource="journal entry", resource_id=str(entry_id))
        return entry

    async def list_entries(self, db: AsyncSession, user_id: str) -> List[EntryResponse]:
        """
        All entries owned by `user_id`, ordered by created_at DESC.

        Entries sharing a timestamp are ordered by id DESC so repeated calls
        always return the same order.
        """
        logger.info("Fetching journal entries (user=%s)", user_id)
        try:
            result = await db.execute(
                select(JournalEntry)
                .where(JournalEntry.user_id == user_id)
                .order_by(desc(JournalEntry.created_at), desc(JournalEntry.id))
            )
            entries = list(result.scalars().all())
        except Exception as e:
            logger.error("Failed to fetch journal entries (user=%s): %s", user_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve journal entries. Please try again.",
                context={"user_id": user_id, "operation": "list", "error_type": type(e).__name__},
            )

        logger.info("Journal entries fetched (user=%s, count=%d)", user_id, len(entries))
        return [EntryResponse.model_validate(entry) for entry in entries]

    async def get_entry(self, db: AsyncSession, user_id: str, entry_id: str) -> EntryResponse:
        logger.info("Fetching journal entry (user=%s, entry=%s)", user_id, entry_id)
        try:
            entry = await self._locate(db, user_id, entry_id, "get")
        except JournalError:
            raise
        except Exception as e:
            logger.error(
                "Failed to fetch journal entry (user=%s, entry=%s): %s",
                user_id, entry_id, str(e), exc_info=True,
            )
            raise DatabaseError(
                message="Could not retrieve the journal entry. Please try again.",
                context={"user_id": user_id, "entry_id": str(entry_id), "operation": "get"},
            )
        return EntryResponse.model_validate(entry)

    async def create_entry(self, db: AsyncSession, user_id: str, data: EntryCreate) -> EntryResponse:
        """
        Validate and insert a new entry owned by `user_id`.

        Rules:
            - title and content are required and non-blank
            - type defaults to "note" and must be note/checklist
            - mood is optional and must be a known mood
            - checklist content must decode as checklist items
        """
        logger.info("Creating journal entry (user=%s)", user_id)

        if data.title is None or data.content is None:
            raise ValidationError("Title and content are required")
        title = _require_text(data.title, "title")
        content = _require_text(data.content, "content")
        entry_type = _check_type(data.type if data.type is not None else EntryType.NOTE.value)
        mood = _check_mood(data.mood)
        if entry_type == EntryType.CHECKLIST.value:
            parse_checklist(content)

        now = database.utcnow()
        entry = JournalEntry(
            id=uuid.uuid4(),
            user_id=user_id,
            title=title,
            content=content,
            mood=mood,
            type=entry_type,
            created_at=now,
            updated_at=now,
        )
        try:
            db.add(entry)
            await db.flush()
        except Exception as e:
            logger.error("Failed to create journal entry (user=%s): %s", user_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not save the journal entry. Please try again.",
                context={"user_id": user_id, "operation": "create", "error_type": type(e).__name__},
            )

        logger.info("Journal entry created (user=%s, entry=%s, type=%s)", user_id, entry.id, entry_type)
        return EntryResponse.model_validate(entry)

    async def update_entry(
        self,
        db: AsyncSession,
        user_id: str,
        entry_id: str,
        patch: EntryPatch,
    ) -> EntryResponse:
        """
        Apply a partial update.

        Only fields present in `patch` change. An explicit `mood: null`
        clears the mood; `updated_at` is refreshed even for an empty patch.
        """
        logger.info(
            "Updating journal entry (user=%s, entry=%s, fields=%s)",
            user_id, entry_id, sorted(patch.model_fields_set),
        )
        try:
            entry = await self._locate(db, user_id, entry_id, "update")
        except JournalError:
            raise
        except Exception as e:
            logger.error(
                "Failed to load journal entry for update (user=%s, entry=%s): %s",
                user_id, entry_id, str(e), exc_info=True,
            )
            raise DatabaseError(
                message="Could not update the journal entry. Please try again.",
                context={"user_id": user_id, "entry_id": str(entry_id), "operation": "update"},
            )

        changes = {}
        if patch.is_set("type"):
            changes["type"] = _check_type(patch.type)
        if patch.is_set("title"):
            changes["title"] = _require_text(patch.title, "title")
        if patch.is_set("content"):
            changes["content"] = _require_text(patch.content, "content")
        if patch.is_set("mood"):
            changes["mood"] = _check_mood(patch.mood)

        merged_type = changes.get("type", entry.type)
        if merged_type == EntryType.CHECKLIST.value and ("type" in changes or "content" in changes):
            parse_checklist(changes.get("content", entry.content))

        for field, value in changes.items():
            setattr(entry, field, value)
        entry.updated_at = max(database.utcnow(), entry.created_at)

        try:
            await db.flush()
        except Exception as e:
            logger.error(
                "Failed to update journal entry (user=%s, entry=%s): %s",
                user_id, entry_id, str(e), exc_info=True,
            )
            raise DatabaseError(
                message="Could not update the journal entry. Please try again.",
                context={"user_id": user_id, "entry_id": str(entry_id), "operation": "update"},
            )

        logger.info("Journal entry updated (user=%s, entry=%s)", user_id, entry_id)
        return EntryResponse.model_validate(entry)

    async def delete_entry(self, db: AsyncSession, user_id: str, entry_id: str) -> None:
        logger.info("Deleting journal entry (user=%s, entry=%s)", user_id, entry_id)
        try:
            entry = await self._locate(db, user_id, entry_id, "delete")
            await db.delete(entry)
            await db.flush()
        except JournalError:
            raise
        except Exception as e:
            logger.error(
                "Failed to delete journal entry (user=%s, entry=%s): %s",
                user_id, entry_id, str(e), exc_info=True,
            )
            raise DatabaseError(
                message="Could not delete the journal entry. Please try again.",
                context={"user_id": user_id, "entry_id": str(entry_id), "operation": "delete"},
            )
        logger.info("Journal entry deleted (user=%s, entry=%s)", user_id, entry_id)


entry_service = EntryService()
