"""
Journeo Backend — Guide Media Service
=======================================

What:  Upload, list, delete and download of the images and videos attached
       to a guide.
How:   Bytes go to MediaStorage under a generated key; this service keeps the
       metadata rows in `guide_media` and builds download URLs.
Who:   routes/media.py.

Upload flow:
    guide exists → size check → bytes stored → row inserted
    If the insert fails the stored file is discarded again.

Delete order:
    The row is deleted first; the file is removed afterwards, best-effort.
    A file that cannot be removed is logged and left behind, the delete
    still succeeds.
"""

import logging
from pathlib import Path
from typing import List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from journeo.database import flush_or_raise
from journeo.exceptions import JourneoError, NotFoundError
from journeo.models.enums import MediaType
from journeo.models.media import GuideMedia
from journeo.schemas.media import MediaResponse
from journeo.services.access import CurrentUser, get_guide_or_404, get_visible_guide
from journeo.services.media_storage import media_storage

logger = logging.getLogger(__name__)

FILES_PATH = "/media/files"


def detect_media_type(content_type: Optional[str]) -> MediaType:
    """`video/*` is VIDEO; anything else, including no content type, is IMAGE."""
    if content_type and content_type.lower().startswith("video/"):
        return MediaType.VIDEO
    return MediaType.IMAGE


def file_url(base_url: str, stored_filename: str) -> str:
    return f"{base_url.rstrip('/')}{FILES_PATH}/{stored_filename}"


def to_media_response(media: GuideMedia, base_url: str) -> MediaResponse:
    return MediaResponse(
        id=media.id,
        guide_id=media.guide_id,
        stored_filename=media.stored_filename,
        original_filename=media.original_filename,
        type=media.type,
        content_type=media.content_type,
        size=media.size,
        uploaded_at=media.uploaded_at,
        url=file_url(base_url, media.stored_filename),
    )


class MediaService:
    async def upload(
        self,
        db: AsyncSession,
        guide_id: int,
        content: bytes,
        original_filename: Optional[str],
        content_type: Optional[str],
        base_url: str,
    ) -> MediaResponse:
        """
        Store an uploaded file and record it against a guide.

        Raises:
            NotFoundError:    guide absent
            ValidationError:  empty or oversize file
            FileStorageError: the bytes could not be written
        """
        await get_guide_or_404(db, guide_id)

        stored_filename = await media_storage.store(content, original_filename)
        media = GuideMedia(
            guide_id=guide_id,
            stored_filename=stored_filename,
            original_filename=original_filename or stored_filename,
            type=detect_media_type(content_type),
            content_type=content_type,
            size=len(content),
        )
        db.add(media)
        try:
            await flush_or_raise(db)
        except JourneoError:
            await media_storage.discard(stored_filename)
            raise

        logger.info(
            "Media %d uploaded to guide %d: %s (%s, %d bytes)",
            media.id, guide_id, stored_filename, media.type.value, media.size,
        )
        return to_media_response(media, base_url)

    async def list_media(
        self,
        db: AsyncSession,
        guide_id: int,
        principal: CurrentUser,
        base_url: str,
    ) -> List[MediaResponse]:
        """Media of a visible guide, newest upload first."""
        await get_visible_guide(db, guide_id, principal)
        result = await db.execute(
            select(GuideMedia)
            .where(GuideMedia.guide_id == guide_id)
            .order_by(GuideMedia.uploaded_at.desc(), GuideMedia.id.desc())
        )
        return [to_media_response(m, base_url) for m in result.scalars().all()]

    async def delete_media(self, db: AsyncSession, guide_id: int, media_id: int) -> None:
        await get_guide_or_404(db, guide_id)

        media = await db.get(GuideMedia, media_id)
        if media is None or media.guide_id != guide_id:
            raise NotFoundError("media", media_id)

        stored_filename = media.stored_filename
        await db.delete(media)
        await flush_or_raise(db)
        logger.info("Media %d deleted from guide %d", media_id, guide_id)

        await media_storage.discard(stored_filename)

    async def load_file(
        self, db: AsyncSession, stored_filename: str, principal: CurrentUser
    ) -> Tuple[Path, GuideMedia]:
        """
        Resolve a download: the file path plus its metadata row.

        The owning guide's visibility rule applies to the file as well.

        Raises:
            InvalidArgumentError: path-escaping name
            NotFoundError:        no such media row or file
            AccessDeniedError:    a USER not assigned to the owning guide
        """
        media_storage.resolve(stored_filename)

        result = await db.execute(
            select(GuideMedia).where(GuideMedia.stored_filename == stored_filename)
        )
        media = result.scalar_one_or_none()
        if media is None:
            raise NotFoundError("file", stored_filename)

        await get_visible_guide(db, media.guide_id, principal)
        path = await media_storage.load(stored_filename)
        return path, media


media_service = MediaService()
