"""
Mood Journal — Checklist Content Codec
========================================

What:  Encodes and decodes checklist entries stored in the `content` column.
How:   A checklist is a JSON array of `{"text": str, "completed": bool}`
       objects; order is significant and preserved.
Who:   EntryService validates checklist content with `parse_checklist`;
       the client builds and toggles checklists with the other helpers.

Nothing here touches the database, so the client can import it freely.
"""

import json
from typing import Iterable, List, Tuple

from pydantic import BaseModel, ConfigDict, StrictBool, StrictStr
from pydantic import ValidationError as PydanticValidationError

from moodjournal.exceptions import ValidationError


class ChecklistItem(BaseModel):
    """One checklist line. New items start unchecked."""

    text: StrictStr
    completed: StrictBool = False

    model_config = ConfigDict(extra="ignore")


class _StoredItem(ChecklistItem):
    # Stored content always carries both keys.
    completed: StrictBool


def _decode_item(raw) -> ChecklistItem:
    stored = _StoredItem.model_validate(raw)
    return ChecklistItem(text=stored.text, completed=stored.completed)


def parse_checklist(content: str) -> List[ChecklistItem]:
    """
    Decode checklist content.

    Raises:
        ValidationError: content is not a JSON array of checklist items
    """
    try:
        raw = json.loads(content)
    except (TypeError, ValueError, RecursionError):
        raise ValidationError(
            "Checklist content must be a JSON array of items",
            field="content",
        )

    if not isinstance(raw, list):
        raise ValidationError(
            "Checklist content must be a JSON array of items",
            field="content",
        )

    items = []
    for index, item in enumerate(raw):
        try:
            items.append(_decode_item(item))
        except PydanticValidationError:
            raise ValidationError(
                f"Checklist item {index} must have a string 'text' and a boolean 'completed'",
                field="content",
                context={"index": index},
            )
    return items


def dump_checklist(items: Iterable[ChecklistItem]) -> str:
    return json.dumps(
        [item.model_dump() for item in items],
        separators=(",", ":"),
        ensure_ascii=False,
    )


def clean_items(items: Iterable[ChecklistItem]) -> List[ChecklistItem]:
    """Drops items whose text is blank, the rule the app applies before saving."""
    return [item for item in items if item.text.strip()]


def toggle_item(content: str, index: int) -> str:
    """Returns new checklist content with item `index` flipped."""
    items = parse_checklist(content)
    if index < 0 or index >= len(items):
        raise IndexError(f"Checklist has no item {index}")
    item = items[index]
    items[index] = item.model_copy(update={"completed": not item.completed})
    return dump_checklist(items)


def progress(items: Iterable[ChecklistItem]) -> Tuple[int, int]:
    items = list(items)
    return sum(1 for item in items if item.completed), len(items)


def progress_label(items: Iterable[ChecklistItem]) -> str:
    done, total = progress(items)
    return f"{done}/{total} completed"
