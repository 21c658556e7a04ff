"""
Journeo Backend — Comment Route Handlers
==========================================

Route Inventory:
    POST   /guides/{guideId}/comments               comment a visible guide (201)
    GET    /guides/{guideId}/comments               newest first
    DELETE /guides/{guideId}/comments/{commentId}   author or ADMIN
"""

from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from journeo.database import get_db_session
from journeo.routes.deps import EntityId, get_current_user
from journeo.schemas.comment import CommentRequest, CommentResponse
from journeo.schemas.common import ErrorResponse
from journeo.services.access import CurrentUser
from journeo.services.comment_service import comment_service

router = APIRouter(prefix="/guides/{guide_id}/comments", tags=["Comments"])

COMMON_RESPONSES = {
    401: {"description": "Missing or invalid token", "model": ErrorResponse},
    403: {"description": "Guide not assigned, or not the comment's author", "model": ErrorResponse},
    404: {"description": "Guide or comment not found", "model": ErrorResponse},
}


@router.post(
    "",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
    responses={**COMMON_RESPONSES, 400: {"description": "Blank content or rating out of range", "model": ErrorResponse}},
    summary="Comment on a guide",
)
async def add_comment(
    guide_id: EntityId,
    body: CommentRequest,
    principal: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> CommentResponse:
    return await comment_service.add_comment(db, guide_id, body.content, body.rating, principal)


@router.get(
    "",
    response_model=List[CommentResponse],
    responses=COMMON_RESPONSES,
    summary="List a guide's comments, newest first",
)
async def list_comments(
    guide_id: EntityId,
    principal: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> List[CommentResponse]:
    return await comment_service.list_comments(db, guide_id, principal)


@router.delete(
    "/{comment_id}",
    responses=COMMON_RESPONSES,
    summary="Delete a comment (its author or an ADMIN)",
)
async def delete_comment(
    guide_id: EntityId,
    comment_id: EntityId,
    principal: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await comment_service.delete_comment(db, guide_id, comment_id, principal)
    return Response(status_code=status.HTTP_200_OK)
