"""
DumbPad Backend — Note Store
==============================

What:  Per-notepad text content, one "<id>.txt" file per notepad id.
How:   Thin layer over FileService. A missing file reads as the empty string;
       writes replace the whole file atomically.

The store is keyed independently of the registry: writing to an id that is
not in notepads.json is allowed. Normal flows keep the two in sync
(NotepadRegistry.create provisions an empty file, delete removes it).
"""

import logging

from dumbpad.services.file_service import FileService

logger = logging.getLogger(__name__)

NOTE_SUFFIX = ".txt"


class NoteStore:
    """Reads and writes note bodies by notepad id."""

    def __init__(self, files: FileService):
        self.files = files

    @staticmethod
    def filename(notepad_id: str) -> str:
        return f"{notepad_id}{NOTE_SUFFIX}"

    async def read(self, notepad_id: str) -> str:
        """Return stored content, or "" if nothing was ever written for this id."""
        content = await self.files.read_text(self.filename(notepad_id))
        return content if content is not None else ""

    async def write(self, notepad_id: str, content: str) -> None:
        """Replace the stored content wholesale, creating the file if absent."""
        await self.files.write_text(self.filename(notepad_id), content)
        logger.info("Saved note %s (%d chars)", notepad_id, len(content))

    async def exists(self, notepad_id: str) -> bool:
        return await self.files.exists(self.filename(notepad_id))

    async def delete(self, notepad_id: str) -> bool:
        """Best-effort removal; never raises for I/O failures."""
        return await self.files.remove(self.filename(notepad_id))
