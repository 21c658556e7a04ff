"""
Journeo Backend — Activity Route Handlers
===========================================

Route Inventory:
    GET    /activities/guide/{guideId}      activities of a visible guide
    GET    /activities/guide/{guideId}/map  GPS-only projection
    POST   /activities/guide/{guideId}      add activity      ADMIN
    PUT    /activities/{activityId}         overwrite         ADMIN
    DELETE /activities/{activityId}         delete            ADMIN
"""

from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from journeo.database import get_db_session
from journeo.routes.deps import EntityId, get_current_user, require_admin
from journeo.schemas.activity import ActivityMapPoint, ActivityRequest, ActivityResponse
from journeo.schemas.common import ErrorResponse
from journeo.services.access import CurrentUser
from journeo.services.activity_service import activity_service

router = APIRouter(prefix="/activities", tags=["Activities"])

COMMON_RESPONSES = {
    401: {"description": "Missing or invalid token", "model": ErrorResponse},
    403: {"description": "ADMIN role required or guide not assigned", "model": ErrorResponse},
    404: {"description": "Guide or activity not found", "model": ErrorResponse},
}


@router.get(
    "/guide/{guide_id}",
    response_model=List[ActivityResponse],
    responses=COMMON_RESPONSES,
    summary="List a guide's activities by day and order",
)
async def list_activities(
    guide_id: EntityId,
    principal: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> List[ActivityResponse]:
    return await activity_service.list_activities(db, guide_id, principal)


@router.get(
    "/guide/{guide_id}/map",
    response_model=List[ActivityMapPoint],
    responses=COMMON_RESPONSES,
    summary="Map projection of a guide's activities",
)
async def activity_map(
    guide_id: EntityId,
    principal: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> List[ActivityMapPoint]:
    return await activity_service.map_points(db, guide_id, principal)


@router.post(
    "/guide/{guide_id}",
    response_model=ActivityResponse,
    responses={**COMMON_RESPONSES, 400: {"description": "Invalid input", "model": ErrorResponse}},
    summary="Add an activity to a guide",
)
async def add_activity(
    guide_id: EntityId,
    body: ActivityRequest,
    _: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
) -> ActivityResponse:
    return await activity_service.add_activity(db, guide_id, body)


@router.put(
    "/{activity_id}",
    response_model=ActivityResponse,
    responses={**COMMON_RESPONSES, 400: {"description": "Invalid input", "model": ErrorResponse}},
    summary="Overwrite an activity",
)
async def update_activity(
    activity_id: EntityId,
    body: ActivityRequest,
    _: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
) -> ActivityResponse:
    return await activity_service.update_activity(db, activity_id, body)


@router.delete(
    "/{activity_id}",
    responses=COMMON_RESPONSES,
    summary="Delete an activity",
)
async def delete_activity(
    activity_id: EntityId,
    _: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await activity_service.delete_activity(db, activity_id)
    return Response(status_code=status.HTTP_200_OK)
