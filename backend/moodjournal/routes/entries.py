"""
Mood Journal Backend — Journal Entry Route Handlers
=====================================================

What:  The five entry endpoints under /api/journal.
How:   Each handler authenticates through `require_session`, delegates to
       EntryService, and returns the result with the right status code.
       Errors are raised as exceptions and rendered by the global handlers
       in main.py as `{"error": message}`.

Endpoints:
    GET    /api/journal/entries          list (newest first)       200
    GET    /api/journal/entries/{id}     single entry              200 / 404
    POST   /api/journal/entries          create                    201 / 400
    PUT    /api/journal/entries/{id}     partial update            200 / 400 / 404
    DELETE /api/journal/entries/{id}     hard delete               200 / 404
    (all: 401 without a valid bearer token)

Responses are never cached: entries are private and change on every write.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from moodjournal.auth.session import Session, require_session
from moodjournal.database import get_db_session
from moodjournal.schemas.entry import (
    DeleteResponse,
    EntryCreate,
    EntryPatch,
    EntryResponse,
    ErrorResponse,
)
from moodjournal.services.entry_service import entry_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/journal", tags=["Journal"])

_AUTH_ERROR = {401: {"description": "Missing or invalid session", "model": ErrorResponse}}
_NOT_FOUND = {404: {"description": "Entry not found", "model": ErrorResponse}}
_BAD_REQUEST = {400: {"description": "Invalid input", "model": ErrorResponse}}


def _no_store(response: Response) -> None:
    response.headers["Cache-Control"] = "no-store"


@router.get(
    "/entries",
    response_model=List[EntryResponse],
    responses=_AUTH_ERROR,
    summary="List the caller's journal entries",
)
async def list_entries(
    response: Response,
    session: Session = Depends(require_session),
    db: AsyncSession = Depends(get_db_session),
) -> List[EntryResponse]:
    _no_store(response)
    return await entry_service.list_entries(db=db, user_id=session.user_id)


@router.get(
    "/entries/{entry_id}",
    response_model=EntryResponse,
    responses={**_AUTH_ERROR, **_NOT_FOUND},
    summary="Get a single journal entry",
)
async def get_entry(
    entry_id: str,
    response: Response,
    session: Session = Depends(require_session),
    db: AsyncSession = Depends(get_db_session),
) -> EntryResponse:
    """
    Entries owned by another user return 404, exactly as missing ones do.
    Malformed ids are also reported as 404.
    """
    _no_store(response)
    return await entry_service.get_entry(db=db, user_id=session.user_id, entry_id=entry_id)


@router.post(
    "/entries",
    response_model=EntryResponse,
    status_code=status.HTTP_201_CREATED,
    responses={**_AUTH_ERROR, **_BAD_REQUEST},
    summary="Create a journal entry",
)
async def create_entry(
    body: EntryCreate,
    session: Session = Depends(require_session),
    db: AsyncSession = Depends(get_db_session),
) -> EntryResponse:
    return await entry_service.create_entry(db=db, user_id=session.user_id, data=body)


@router.put(
    "/entries/{entry_id}",
    response_model=EntryResponse,
    responses={**_AUTH_ERROR, **_BAD_REQUEST, **_NOT_FOUND},
    summary="Partially update a journal entry",
)
async def update_entry(
    entry_id: str,
    body: EntryPatch,
    session: Session = Depends(require_session),
    db: AsyncSession = Depends(get_db_session),
) -> EntryResponse:
    return await entry_service.update_entry(
        db=db,
        user_id=session.user_id,
        entry_id=entry_id,
        patch=body,
    )


@router.delete(
    "/entries/{entry_id}",
    response_model=DeleteResponse,
    responses={**_AUTH_ERROR, **_NOT_FOUND},
    summary="Delete a journal entry permanently",
)
async def delete_entry(
    entry_id: str,
    session: Session = Depends(require_session),
    db: AsyncSession = Depends(get_db_session),
) -> DeleteResponse:
    await entry_service.delete_entry(db=db, user_id=session.user_id, entry_id=entry_id)
    return DeleteResponse(success=True)
