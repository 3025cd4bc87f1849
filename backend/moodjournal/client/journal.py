"""
Mood Journal Client — Journal API
===================================

Typed operations over the five entry endpoints, for screens and scripts.

Every method goes straight to the server through the authenticated
wrapper; nothing is cached. After a write, callers re-fetch the list
instead of patching a local copy.

The save rules the app enforces before sending are applied here too:
a title is required, notes need content, and checklists need at least one
non-blank item (blank items are dropped).
"""

import logging
from typing import Iterable, List, Optional

from moodjournal.client.http import ApiClient
from moodjournal.exceptions import ValidationError
from moodjournal.schemas.entry import EntryResponse
from moodjournal.services.checklist import ChecklistItem, clean_items, dump_checklist, toggle_item

logger = logging.getLogger(__name__)

ENTRIES_PATH = "/api/journal/entries"


class JournalClient:
    def __init__(self, api: ApiClient):
        self.api = api

    async def list_entries(self) -> List[EntryResponse]:
        data = await self.api.authenticated_get(ENTRIES_PATH)
        return [EntryResponse.model_validate(item) for item in data]

    async def get_entry(self, entry_id: str) -> EntryResponse:
        data = await self.api.authenticated_get(f"{ENTRIES_PATH}/{entry_id}")
        return EntryResponse.model_validate(data)

    async def create_entry(
        self,
        title: str,
        content: str,
        mood: Optional[str] = None,
        entry_type: str = "note",
    ) -> EntryResponse:
        if not title.strip():
            raise ValidationError("Please enter a title", field="title")
        if entry_type == "note" and not content.strip():
            raise ValidationError("Please enter some content", field="content")

        body = {"title": title.strip(), "content": content, "type": entry_type}
        if entry_type == "note":
            body["content"] = content.strip()
        if mood is not None:
            body["mood"] = mood

        data = await self.api.authenticated_post(ENTRIES_PATH, body)
        entry = EntryResponse.model_validate(data)
        logger.info("Entry created: %s", entry.id)
        return entry

    async def create_checklist(
        self,
        title: str,
        items: Iterable[ChecklistItem],
        mood: Optional[str] = None,
    ) -> EntryResponse:
        kept = clean_items(items)
        if not kept:
            raise ValidationError("Please add at least one checklist item", field="content")
        return await self.create_entry(title, dump_checklist(kept), mood=mood, entry_type="checklist")

    async def update_entry(self, entry_id: str, **fields) -> EntryResponse:
        """
        Send only the given fields.

        Accepts title, content, mood and entry_type; `mood=None` clears the
        mood on the server.
        """
        body = {}
        for name, value in fields.items():
            key = "type" if name == "entry_type" else name
            if key not in {"title", "content", "mood", "type"}:
                raise TypeError(f"update_entry() got an unexpected field '{name}'")
            body[key] = value
        if "title" in body and body["title"] is not None:
            body["title"] = body["title"].strip()

        data = await self.api.authenticated_put(f"{ENTRIES_PATH}/{entry_id}", body)
        return EntryResponse.model_validate(data)

    async def delete_entry(self, entry_id: str) -> bool:
        data = await self.api.authenticated_delete(f"{ENTRIES_PATH}/{entry_id}")
        return bool(data and data.get("success"))

    async def toggle_checklist_item(self, entry: EntryResponse, index: int) -> EntryResponse:
        """Flip one item's `completed` flag by re-sending the whole content."""
        if entry.type != "checklist":
            raise ValidationError("Only checklist entries have items", field="type")
        return await self.update_entry(str(entry.id), content=toggle_item(entry.content, index))
