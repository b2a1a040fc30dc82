"""
DumbPad Backend — File Storage Service
========================================

What:  The only component that touches the data directory on disk.
How:   Resolves file names against the data root (rejecting anything that
       would land outside it), reads and writes UTF-8 text with aiofiles, and
       replaces files atomically so readers never observe a half-written file.
Who:   Used by NotepadRegistry (notepads.json) and NoteStore (<id>.txt).

Write protocol:
    1. Write the new content to a sibling temp file "<name>.<uuid>.tmp"
    2. os.replace() the temp file over the target (atomic on POSIX and NTFS)
    3. If the replace never happened (OS error, unencodable text, cancellation),
       remove the temp file; OS errors surface as StorageError, unencodable
       text as ValidationError

Newlines are written and read with newline="" so note content round-trips
byte-for-byte, including "\\r\\n" sequences.
"""

import logging
import uuid
from pathlib import Path
from typing import Optional

import aiofiles
import aiofiles.os

from dumbpad.exceptions import StorageError, ValidationError

logger = logging.getLogger(__name__)


class FileService:
    """
    Text file access rooted at a single data directory.

    Directory Structure:
        data/
        ├── notepads.json
        ├── default.txt
        └── 1718031234567.txt
    """

    def __init__(self, storage_root: str):
        self.storage_root = Path(storage_root).resolve()
        logger.debug("FileService initialized with storage_root=%s", self.storage_root)

    async def ensure_root(self) -> None:
        """Create the data directory (and parents) if missing."""
        try:
            await aiofiles.os.makedirs(self.storage_root, exist_ok=True)
        except OSError as e:
            logger.error("Failed to create data directory %s: %s", self.storage_root, e)
            raise StorageError(
                context={"path": str(self.storage_root), "os_error": str(e)},
            ) from e

    def resolve(self, name: str) -> Path:
        """
        Map a file name onto an absolute path inside the data directory.

        Raises:
            ValidationError if the name is empty, contains a path separator or
            NUL byte, or would resolve outside the storage root.
        """
        if not name or "\x00" in name or "/" in name or "\\" in name or name in {".", ".."}:
            raise ValidationError(message="Invalid notepad ID", field="id")

        path = (self.storage_root / name).resolve()
        if path.parent != self.storage_root:
            raise ValidationError(message="Invalid notepad ID", field="id")
        return path

    async def exists(self, name: str) -> bool:
        return await aiofiles.os.path.exists(self.resolve(name))

    async def read_text(self, name: str, errors: str = "strict") -> Optional[str]:
        """
        Read a whole file as text.

        Args:
            errors: codec error handler; "replace" turns undecodable bytes
                    into U+FFFD instead of failing the read.

        Returns:
            File content, or None if the file does not exist.

        Raises:
            StorageError for any other OS-level failure.
        """
        path = self.resolve(name)
        try:
            async with aiofiles.open(path, "r", encoding="utf-8", errors=errors, newline="") as f:
                return await f.read()
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            logger.error("Failed to read %s: %s", path, e)
            raise StorageError(context={"path": str(path), "os_error": str(e)}) from e

    async def write_text(self, name: str, content: str) -> None:
        """
        Atomically replace a file's content.

        The rename happens only after the temp file is fully written and
        closed, so the call returning means the new content is in place.
        """
        path = self.resolve(name)
        tmp_path = path.with_name(f"{path.name}.{uuid.uuid4().hex}.tmp")
        replaced = False
        try:
            async with aiofiles.open(tmp_path, "w", encoding="utf-8", newline="") as f:
                await f.write(content)
            await aiofiles.os.replace(tmp_path, path)
            replaced = True
        except UnicodeEncodeError as e:
            # Lone surrogates survive JSON decoding but have no UTF-8 form
            logger.warning("Rejected unencodable content for %s: %s", path.name, e.reason)
            raise ValidationError(
                message="Content is not valid Unicode text", field="content"
            ) from e
        except OSError as e:
            logger.error("Failed to write %s: %s", path, e)
            raise StorageError(context={"path": str(path), "os_error": str(e)}) from e
        finally:
            if not replaced:
                await self._discard(tmp_path)

        logger.debug("Wrote %s (%d chars)", path.name, len(content))

    async def remove(self, name: str) -> bool:
        """
        Best-effort delete.

        Returns:
            True if a file was removed, False if it was missing or removal failed.
            Failures are logged, never raised.
        """
        path = self.resolve(name)
        try:
            await aiofiles.os.remove(path)
        except FileNotFoundError:
            logger.debug("Cleanup: file already gone: %s", path.name)
            return False
        except OSError as e:
            logger.warning("Failed to remove file %s: %s", path, e)
            return False

        logger.info("Removed file: %s", path.name)
        return True

    async def _discard(self, path: Path) -> None:
        try:
            await aiofiles.os.remove(path)
        except OSError as e:
            logger.debug("Temp file %s not removed: %s", path.name, e)
