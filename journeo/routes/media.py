"""
Journeo Backend — Media Route Handlers
========================================

Route Inventory:
    POST   /guides/{guideId}/media             multipart upload (field "file")  ADMIN, 201
    GET    /guides/{guideId}/media             newest first
    DELETE /guides/{guideId}/media/{mediaId}   row first, file best-effort      ADMIN
    GET    /media/files/{fileName}             stream the stored bytes

Download URLs are absolute: request base URL + API prefix + /media/files/{name}.
"""

from typing import List

from fastapi import APIRouter, Depends, File, Request, Response, UploadFile, status
from fastapi.responses import FileResponse
from sqlalchemy.ext.asyncio import AsyncSession

from journeo.config import settings
from journeo.database import get_db_session
from journeo.routes.deps import EntityId, get_current_user, require_admin
from journeo.schemas.common import ErrorResponse
from journeo.schemas.media import MediaResponse
from journeo.services.access import CurrentUser
from journeo.services.media_service import media_service

router = APIRouter(tags=["Media"])

COMMON_RESPONSES = {
    401: {"description": "Missing or invalid token", "model": ErrorResponse},
    403: {"description": "ADMIN role required or guide not assigned", "model": ErrorResponse},
    404: {"description": "Guide, media or file not found", "model": ErrorResponse},
}


def _base_url(request: Request) -> str:
    return str(request.base_url).rstrip("/") + settings.api_prefix


@router.post(
    "/guides/{guide_id}/media",
    response_model=MediaResponse,
    status_code=status.HTTP_201_CREATED,
    responses={**COMMON_RESPONSES, 400: {"description": "Empty or oversize file", "model": ErrorResponse}},
    summary="Upload an image or video for a guide",
)
async def upload_media(
    guide_id: EntityId,
    request: Request,
    file: UploadFile = File(..., description="Image or video file"),
    _: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
) -> MediaResponse:
    # One byte past the limit is enough to detect an oversize upload
    content = await file.read(settings.max_file_size + 1)
    return await media_service.upload(
        db,
        guide_id,
        content=content,
        original_filename=file.filename,
        content_type=file.content_type,
        base_url=_base_url(request),
    )


@router.get(
    "/guides/{guide_id}/media",
    response_model=List[MediaResponse],
    responses=COMMON_RESPONSES,
    summary="List a guide's media, newest first",
)
async def list_media(
    guide_id: EntityId,
    request: Request,
    principal: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> List[MediaResponse]:
    return await media_service.list_media(db, guide_id, principal, _base_url(request))


@router.delete(
    "/guides/{guide_id}/media/{media_id}",
    responses=COMMON_RESPONSES,
    summary="Delete a media item",
)
async def delete_media(
    guide_id: EntityId,
    media_id: EntityId,
    _: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await media_service.delete_media(db, guide_id, media_id)
    return Response(status_code=status.HTTP_200_OK)


@router.get(
    "/media/files/{file_name}",
    response_class=FileResponse,
    responses={**COMMON_RESPONSES, 400: {"description": "Invalid file name", "model": ErrorResponse}},
    summary="Download a stored media file",
)
async def serve_file(
    file_name: str,
    principal: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> FileResponse:
    path, media = await media_service.load_file(db, file_name, principal)
    return FileResponse(
        path=str(path),
        media_type=media.content_type or "application/octet-stream",
        filename=media.original_filename,
        content_disposition_type="inline",
        headers={"Cache-Control": "private, max-age=3600"},
    )
