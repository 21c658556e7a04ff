"""
Journeo Backend — Media Blob Storage
======================================

What:  Stores, reads and deletes the bytes of uploaded guide media in a
       directory keyed by generated file names.
How:   Every stored file gets a UUID name plus the sanitized extension of the
       uploaded name; writes and deletes go through aiofiles so the event loop
       never blocks on disk I/O.
Who:   MediaService (upload, download, delete), GuideService (delete cascade),
       health route (writability probe).

Security Model:
    1. Generated names: no client input reaches the file system except the
       extension, which is reduced to [A-Za-z0-9.] characters.
    2. Containment: every key is resolved against the storage root and
       rejected with InvalidArgumentError if it resolves anywhere else.
    3. Size limit: uploads are bounded by MAX_FILE_SIZE before touching disk.

Directory Structure:
    uploads/
    ├── 0b7e1c8e-6f0e-4c1b-9d1f-2a3b4c5d6e7f.jpg
    └── 5d2a9e44-1111-4a0c-8c3e-9f8e7d6c5b4a.mp4
"""

import logging
import re
import uuid
from pathlib import Path
from typing import Optional

import aiofiles
import aiofiles.os

from journeo.config import settings
from journeo.exceptions import (
    FileStorageError,
    InvalidArgumentError,
    JourneoError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_UNSAFE_EXTENSION_CHARS = re.compile(r"[^a-zA-Z0-9.]")


def sanitize_extension(original_filename: Optional[str]) -> str:
    """
    Extension of `original_filename` reduced to safe characters, dot included.

    >>> sanitize_extension("photo de vacances.JPG")
    '.JPG'
    >>> sanitize_extension("../../etc/passwd")
    ''
    """
    if not original_filename:
        return ""
    name = original_filename.replace("\\", "/").rsplit("/", 1)[-1]
    if "." not in name:
        return ""
    raw = name[name.rindex("."):]
    return _UNSAFE_EXTENSION_CHARS.sub("", raw)[:16]


class MediaStorage:
    """
    Directory-backed blob store for guide media.

    Keys are flat file names directly under the storage root; nothing is
    ever written outside it.
    """

    def __init__(self, storage_root: Optional[str] = None):
        """
        Args:
            storage_root: Override the default storage path (used in tests).
                          If None, uses settings.storage_root.
        """
        self.storage_root = Path(storage_root or settings.storage_root).resolve()
        self.storage_root.mkdir(parents=True, exist_ok=True)
        logger.info("MediaStorage initialized with storage_root=%s", self.storage_root)

    def resolve(self, stored_filename: str) -> Path:
        """
        Absolute path of a storage key.

        Raises:
            InvalidArgumentError: the key is empty or resolves outside the root
                                  ("../secret", "/etc/passwd", "sub/dir").
        """
        if not stored_filename or stored_filename in {".", ".."}:
            raise InvalidArgumentError(
                message=f"Invalid file path: {stored_filename!r}",
                context={"file_name": stored_filename},
            )
        path = (self.storage_root / stored_filename).resolve()
        if path.parent != self.storage_root:
            raise InvalidArgumentError(
                message=f"Invalid file path: {stored_filename}",
                context={"file_name": stored_filename},
            )
        return path

    def validate_size(self, size: int) -> None:
        """Reject empty uploads and uploads above MAX_FILE_SIZE."""
        if size == 0:
            raise ValidationError(message="uploaded file is empty", field="file")
        if size > settings.max_file_size:
            max_mb = settings.max_file_size / (1024 * 1024)
            raise ValidationError(
                message=f"file size ({size / (1024 * 1024):.1f}MB) exceeds maximum of {max_mb:.0f}MB",
                field="file",
                context={"max_size": settings.max_file_size, "actual_size": size},
            )

    async def store(self, content: bytes, original_filename: Optional[str]) -> str:
        """
        Write `content` under a fresh key and return the key.

        Raises:
            ValidationError:  empty or oversize content
            FileStorageError: the directory cannot be written
        """
        self.validate_size(len(content))

        stored_filename = f"{uuid.uuid4()}{sanitize_extension(original_filename)}"
        path = self.resolve(stored_filename)

        try:
            async with aiofiles.open(path, "wb") as f:
                await f.write(content)
        except OSError as e:
            logger.error("Failed to store media at %s: %s", path, str(e))
            raise FileStorageError(
                message="Failed to save uploaded file. Please try again.",
                context={"path": str(path), "os_error": str(e)},
            ) from e

        logger.info("Media stored: %s (%d bytes)", stored_filename, len(content))
        return stored_filename

    async def load(self, stored_filename: str) -> Path:
        """
        Path of an existing stored file, ready to be streamed.

        Raises:
            InvalidArgumentError: path-escaping key
            NotFoundError:        no such file
        """
        path = self.resolve(stored_filename)
        if not await aiofiles.os.path.isfile(path):
            raise NotFoundError("file", stored_filename)
        return path

    async def delete(self, stored_filename: str) -> bool:
        """
        Remove a stored file.

        Returns False when the file was already gone.

        Raises:
            InvalidArgumentError: path-escaping key
            FileStorageError:     the file exists but cannot be removed
        """
        path = self.resolve(stored_filename)
        try:
            await aiofiles.os.remove(path)
        except FileNotFoundError:
            logger.debug("Delete: file already gone: %s", stored_filename)
            return False
        except OSError as e:
            raise FileStorageError(
                message="Failed to delete stored file",
                context={"path": str(path), "os_error": str(e)},
            ) from e
        logger.info("Media file deleted: %s", stored_filename)
        return True

    async def discard(self, stored_filename: str) -> None:
        """
        Best-effort delete for cleanup after the metadata row is gone.

        Failures are logged, never raised: the database is the source of truth
        and a leftover file is harmless.
        """
        try:
            await self.delete(stored_filename)
        except JourneoError as e:
            logger.warning(
                "Failed to clean up media file %s: %s | Context: %s",
                stored_filename,
                e.message,
                e.context,
            )

    async def is_writable(self) -> bool:
        """Probe used by the health check: write and remove a marker file."""
        probe = self.storage_root / f".health-{uuid.uuid4().hex}"
        try:
            async with aiofiles.open(probe, "wb") as f:
                await f.write(b"ok")
            await aiofiles.os.remove(probe)
            return True
        except OSError as e:
            logger.warning("Storage directory not writable: %s", str(e))
            return False


# ── Singleton Instance ────────────────────────────────────────────────────
media_storage = MediaStorage()
