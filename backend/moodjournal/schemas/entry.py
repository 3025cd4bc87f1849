"""
Mood Journal Backend — Pydantic Request/Response Schemas
==========================================================

What:  Pydantic models defining the API contract between the mobile client
       and the backend.
How:   FastAPI parses request bodies into these models and serializes
       responses from them. The client reuses the response models to parse
       what the server returns.

Wire format is camelCase (`userId`, `createdAt`, `updatedAt`) to match what
the mobile app reads; Python code uses snake_case attribute names.

Request models deliberately keep every field optional and loosely typed
(str rather than enums): business rules live in EntryService so that every
rule violation produces the same `{"error": ...}` 400 response. Unknown
fields, including any attempt to send `userId`/`ownerId`, are ignored.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class EntryCreate(BaseModel):
    """Body of POST /api/journal/entries."""

    title: Optional[str] = None
    content: Optional[str] = None
    mood: Optional[str] = None
    type: Optional[str] = Field(default=None, description="note (default) or checklist")

    model_config = ConfigDict(extra="ignore")


class EntryPatch(BaseModel):
    """
    Body of PUT /api/journal/entries/{id}: any subset of the editable fields.

    Pydantic records which fields were present in the request body
    (`model_fields_set`), so a field that was left out is distinguishable
    from one that was sent as `null`:

        {}                 → nothing changes except updatedAt
        {"mood": null}     → mood is cleared
        {"mood": "happy"}  → mood is set
    """

    title: Optional[str] = None
    content: Optional[str] = None
    mood: Optional[str] = None
    type: Optional[str] = None

    model_config = ConfigDict(extra="ignore")

    def is_set(self, name: str) -> bool:
        return name in self.model_fields_set


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class EntryResponse(BaseModel):
    """Full representation of a journal entry as returned by every endpoint."""

    id: uuid.UUID
    user_id: str = Field(description="Identity of the owner")
    title: str
    content: str
    mood: Optional[str] = None
    type: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class DeleteResponse(BaseModel):
    success: bool = True


class ErrorResponse(BaseModel):
    """Uniform error body for every failing request."""

    error: str = Field(description="Human-readable error description")


class HealthResponse(BaseModel):
    status: str = Field(description="healthy, degraded or unhealthy")
    version: str
    database: str = Field(description="connected or disconnected")
    auth: str = Field(description="configured or not configured")
    uptime_seconds: float
