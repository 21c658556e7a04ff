"""
Journeo Backend — Guide Route Handlers
========================================

What:  /guides endpoints: visibility-filtered reads for everyone logged in,
       mutations and membership for ADMIN.

Route Inventory:
    GET    /guides                           list (optionally paginated)
    POST   /guides                           create              ADMIN
    GET    /guides/{id}                      detail (404 then 403)
    PUT    /guides/{id}                      full update         ADMIN
    DELETE /guides/{id}                      delete + cascade    ADMIN
    POST   /guides/{guideId}/users/{userId}  assign user         ADMIN
    DELETE /guides/{guideId}/users/{userId}  unassign user       ADMIN

Pagination:
    Without page/size the full visible list is returned as a JSON array.
    With either of them the response is a GuidePage object and the
    X-Total-Count header carries the size of the visible set.
"""

from typing import List, Optional, Union

from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from journeo.database import get_db_session
from journeo.routes.deps import EntityId, get_current_user, require_admin
from journeo.schemas.common import ErrorResponse
from journeo.schemas.guide import GuidePage, GuideRequest, GuideResponse
from journeo.services.access import CurrentUser
from journeo.services.guide_service import DEFAULT_PAGE_SIZE, MAX_PAGE, MAX_PAGE_SIZE, guide_service

router = APIRouter(prefix="/guides", tags=["Guides"])

AUTH_RESPONSES = {401: {"description": "Missing or invalid token", "model": ErrorResponse}}
ADMIN_RESPONSES = {
    **AUTH_RESPONSES,
    403: {"description": "ADMIN role required", "model": ErrorResponse},
}
NOT_FOUND = {404: {"description": "Guide (or user) not found", "model": ErrorResponse}}


@router.get(
    "",
    response_model=Union[GuidePage, List[GuideResponse]],
    responses={**AUTH_RESPONSES, 400: {"description": "Invalid sortBy", "model": ErrorResponse}},
    summary="List the guides visible to the caller",
    description=(
        "ADMIN sees every guide, USER only the guides they are assigned to. "
        "Pass page (0-based) and/or size for a paginated GuidePage; sortBy takes "
        "a field name optionally followed by ',asc' or ',desc'."
    ),
)
async def list_guides(
    response: Response,
    page: Optional[int] = Query(
        default=None, ge=0, le=MAX_PAGE, description="Page index, 0-based"
    ),
    size: Optional[int] = Query(
        default=None, ge=1, le=MAX_PAGE_SIZE, description=f"Page size (max {MAX_PAGE_SIZE})"
    ),
    sort_by: Optional[str] = Query(
        default=None,
        alias="sortBy",
        description="id, title, numberOfDays, mobility, season, targetAudience, createdAt, updatedAt",
    ),
    principal: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> Union[GuidePage, List[GuideResponse]]:
    if page is None and size is None:
        return await guide_service.list_guides(db, principal, sort_by)

    result = await guide_service.list_guides_page(
        db,
        principal,
        page=page or 0,
        size=size or DEFAULT_PAGE_SIZE,
        sort_by=sort_by,
    )
    response.headers["X-Total-Count"] = str(result.total_count)
    return result


@router.post(
    "",
    response_model=GuideResponse,
    status_code=status.HTTP_201_CREATED,
    responses={**ADMIN_RESPONSES, 400: {"description": "Invalid input", "model": ErrorResponse}},
    summary="Create a guide",
)
async def create_guide(
    body: GuideRequest,
    request: Request,
    response: Response,
    _: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
) -> GuideResponse:
    guide = await guide_service.create_guide(db, body)
    response.headers["Location"] = str(request.url_for("get_guide", guide_id=guide.id))
    return guide


@router.get(
    "/{guide_id}",
    response_model=GuideResponse,
    responses={
        **AUTH_RESPONSES,
        **NOT_FOUND,
        403: {"description": "Not assigned to this guide", "model": ErrorResponse},
    },
    summary="Get a guide with its activities, users and average rating",
)
async def get_guide(
    guide_id: EntityId,
    principal: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> GuideResponse:
    return await guide_service.get_guide(db, guide_id, principal)


@router.put(
    "/{guide_id}",
    response_model=GuideResponse,
    responses={**ADMIN_RESPONSES, **NOT_FOUND, 400: {"model": ErrorResponse}},
    summary="Overwrite a guide",
)
async def update_guide(
    guide_id: EntityId,
    body: GuideRequest,
    _: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
) -> GuideResponse:
    return await guide_service.update_guide(db, guide_id, body)


@router.delete(
    "/{guide_id}",
    responses={**ADMIN_RESPONSES, **NOT_FOUND},
    summary="Delete a guide with its activities, comments, media and assignments",
)
async def delete_guide(
    guide_id: EntityId,
    _: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await guide_service.delete_guide(db, guide_id)
    return Response(status_code=status.HTTP_200_OK)


@router.post(
    "/{guide_id}/users/{user_id}",
    response_model=GuideResponse,
    responses={**ADMIN_RESPONSES, **NOT_FOUND},
    summary="Assign a user to a guide",
)
async def add_user_to_guide(
    guide_id: EntityId,
    user_id: EntityId,
    _: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
) -> GuideResponse:
    return await guide_service.add_user(db, guide_id, user_id)


@router.delete(
    "/{guide_id}/users/{user_id}",
    response_model=GuideResponse,
    responses={**ADMIN_RESPONSES, **NOT_FOUND},
    summary="Unassign a user from a guide",
)
async def remove_user_from_guide(
    guide_id: EntityId,
    user_id: EntityId,
    _: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
) -> GuideResponse:
    return await guide_service.remove_user(db, guide_id, user_id)
