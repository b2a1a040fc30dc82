"""
DumbPad Backend — Notepad Registry
====================================

What:  The authoritative ordered list of notepads, persisted as notepads.json.
How:   Every operation loads the whole file, validates it through the
       `Registry` schema, applies its change and writes the whole file back
       through FileService (atomic replace). An asyncio.Lock serializes the
       read-modify-write sequences inside the process.
Who:   Called by the /api/notepads route handlers.

Self-healing:
    A missing file, invalid JSON, a missing/non-list "notepads" key or a
    malformed entry all count as structural corruption. The registry is then
    rewritten as a single default entry and the request proceeds normally.

Delete ordering:
    1. Remove the entry and persist notepads.json (committed)
    2. Remove "<id>.txt" best-effort; failure is logged, never surfaced
"""

import asyncio
import json
import logging
import time
from typing import Callable, Optional

from pydantic import ValidationError as SchemaError

from dumbpad.exceptions import DumbPadError, InvalidOperationError, NotFoundError
from dumbpad.schemas.notepad import DEFAULT_NOTEPAD_ID, Notepad, Registry
from dumbpad.services.file_service import FileService
from dumbpad.services.note_store import NoteStore

logger = logging.getLogger(__name__)

REGISTRY_FILENAME = "notepads.json"


def _millisecond_clock() -> int:
    return int(time.time() * 1000)


class NotepadRegistry:
    """
    Notepad metadata store with uniqueness and default-entry protection.

    Args:
        files:  FileService rooted at the data directory
        notes:  NoteStore used to provision and remove note bodies
        clock:  Source of millisecond timestamps for new ids (tests inject one)
    """

    def __init__(
        self,
        files: FileService,
        notes: NoteStore,
        clock: Callable[[], int] = _millisecond_clock,
    ):
        self.files = files
        self.notes = notes
        self._clock = clock
        self._lock = asyncio.Lock()

    # ── Persistence ───────────────────────────────────────────────────────

    async def _load(self) -> Registry:
        # Undecodable bytes become U+FFFD and then fail JSON or schema checks
        raw = await self.files.read_text(REGISTRY_FILENAME, errors="replace")
        if raw is None:
            logger.info("Creating new %s", REGISTRY_FILENAME)
            return await self._repair()

        try:
            return Registry.model_validate(json.loads(raw))
        except (json.JSONDecodeError, SchemaError) as e:
            logger.error("Invalid %s, recreating: %s", REGISTRY_FILENAME, e)
            return await self._repair()

    async def _save(self, registry: Registry) -> None:
        await self.files.write_text(
            REGISTRY_FILENAME,
            json.dumps(registry.model_dump(), indent=2),
        )

    async def _repair(self) -> Registry:
        registry = Registry.initial()
        await self._save(registry)
        return registry

    def _new_id(self, registry: Registry) -> str:
        existing = {n.id for n in registry.notepads}
        candidate = self._clock()
        while str(candidate) in existing:
            candidate += 1
        return str(candidate)

    # ── Operations ────────────────────────────────────────────────────────

    async def initialize(self) -> Registry:
        """
        Prepare the data directory at startup.

        Creates the directory, repairs notepads.json if needed and makes sure
        the default notepad has a content file.
        """
        await self.files.ensure_root()
        async with self._lock:
            registry = await self._load()
            if not await self.notes.exists(DEFAULT_NOTEPAD_ID):
                await self.notes.write(DEFAULT_NOTEPAD_ID, "")
        logger.info(
            "Registry ready: %d notepad(s) in %s",
            len(registry.notepads),
            self.files.storage_root,
        )
        return registry

    async def list(self) -> Registry:
        """Return the current registry, self-healing a missing or corrupt file."""
        async with self._lock:
            return await self._load()

    async def create(self, name: Optional[str] = None) -> Notepad:
        """
        Append a new notepad and provision its empty content file.

        The id is the current time in milliseconds, bumped until it does not
        collide with an existing id. The default name is "Notepad N" where N
        is the registry size after the append.
        """
        async with self._lock:
            registry = await self._load()
            notepad = Notepad(
                id=self._new_id(registry),
                name=name or f"Notepad {len(registry.notepads) + 1}",
            )
            registry.notepads.append(notepad)
            await self._save(registry)
            await self.notes.write(notepad.id, "")

        logger.info("Created notepad %s (%s)", notepad.id, notepad.name)
        return notepad

    async def rename(self, notepad_id: str, name: str) -> Notepad:
        async with self._lock:
            registry = await self._load()
            notepad = registry.find(notepad_id)
            if notepad is None:
                raise NotFoundError(resource="notepad", resource_id=notepad_id)
            notepad.name = name
            await self._save(registry)

        logger.info("Renamed notepad %s to %s", notepad_id, name)
        return notepad

    async def delete(self, notepad_id: str) -> None:
        """
        Remove a notepad and, best-effort, its content.

        Raises:
            InvalidOperationError: notepad_id is "default"
            NotFoundError: notepad_id is not in the registry
        """
        if notepad_id == DEFAULT_NOTEPAD_ID:
            logger.warning("Attempted to delete default notepad")
            raise InvalidOperationError(message="Cannot delete default notepad")

        async with self._lock:
            registry = await self._load()
            notepad = registry.find(notepad_id)
            if notepad is None:
                raise NotFoundError(resource="notepad", resource_id=notepad_id)
            registry.notepads.remove(notepad)
            await self._save(registry)

        logger.info("Removed notepad %s (%s)", notepad_id, notepad.name)

        # Registry is committed; content removal must not undo or fail the delete
        try:
            await self.notes.delete(notepad_id)
        except DumbPadError as e:
            logger.warning("Could not remove content for notepad %s: %s", notepad_id, e.message)
