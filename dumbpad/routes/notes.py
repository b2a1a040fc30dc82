"""
DumbPad Backend — Note Content Route Handlers
===============================================

What:  GET /api/notes/{id} (read) and POST /api/notes/{id} (save).
How:   Direct NoteStore access; the registry is not consulted, so reading an
       unknown id returns empty content rather than 404.
Auth:  Gated by PinGateMiddleware.
"""

import logging

from fastapi import APIRouter, Depends, Response

from dumbpad.dependencies import get_note_store
from dumbpad.schemas.notepad import NoteContentResponse, SaveNoteRequest, SuccessResponse
from dumbpad.services.note_store import NoteStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Notes"])


@router.get(
    "/notes/{notepad_id}",
    response_model=NoteContentResponse,
    summary="Read a notepad's content",
)
async def read_note(
    notepad_id: str,
    response: Response,
    store: NoteStore = Depends(get_note_store),
) -> NoteContentResponse:
    content = await store.read(notepad_id)

    # Content changes on every save; never serve it from a cache
    response.headers["Cache-Control"] = "no-store"

    return NoteContentResponse(content=content)


@router.post(
    "/notes/{notepad_id}",
    response_model=SuccessResponse,
    summary="Replace a notepad's content",
)
async def save_note(
    notepad_id: str,
    body: SaveNoteRequest,
    store: NoteStore = Depends(get_note_store),
) -> SuccessResponse:
    await store.write(notepad_id, body.content)
    return SuccessResponse(success=True)
