"""
DumbPad Backend — Notepad Route Handlers
==========================================

What:  List, create, rename and delete notepads.
How:   Thin handlers over NotepadRegistry. NotFoundError → 404 and
       InvalidOperationError → 400 are rendered by the global handlers.
Auth:  Gated by PinGateMiddleware (X-Pin header on every request).
"""

import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends

from dumbpad.dependencies import get_registry
from dumbpad.schemas.notepad import (
    CreateNotepadRequest,
    DeleteNotepadResponse,
    ErrorResponse,
    Notepad,
    Registry,
    RenameNotepadRequest,
)
from dumbpad.services.registry import NotepadRegistry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Notepads"])


@router.get(
    "/notepads",
    response_model=Registry,
    summary="List all notepads in creation order",
)
async def list_notepads(
    registry: NotepadRegistry = Depends(get_registry),
) -> Registry:
    return await registry.list()


@router.post(
    "/notepads",
    response_model=Notepad,
    summary="Create a notepad",
    description="Creates a notepad with an empty note. The body is optional.",
)
async def create_notepad(
    body: Optional[CreateNotepadRequest] = Body(default=None),
    registry: NotepadRegistry = Depends(get_registry),
) -> Notepad:
    name = body.name if body else None
    return await registry.create(name)


@router.put(
    "/notepads/{notepad_id}",
    response_model=Notepad,
    responses={404: {"description": "Notepad not found", "model": ErrorResponse}},
    summary="Rename a notepad",
)
async def rename_notepad(
    notepad_id: str,
    body: RenameNotepadRequest,
    registry: NotepadRegistry = Depends(get_registry),
) -> Notepad:
    return await registry.rename(notepad_id, body.name)


@router.delete(
    "/notepads/{notepad_id}",
    response_model=DeleteNotepadResponse,
    responses={
        400: {"description": "The default notepad cannot be deleted", "model": ErrorResponse},
        404: {"description": "Notepad not found", "model": ErrorResponse},
    },
    summary="Delete a notepad and its note",
)
async def delete_notepad(
    notepad_id: str,
    registry: NotepadRegistry = Depends(get_registry),
) -> DeleteNotepadResponse:
    await registry.delete(notepad_id)
    return DeleteNotepadResponse()
