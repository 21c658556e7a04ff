"""
Journeo Backend — User Route Handlers
=======================================

What:  /users endpoints: public registration and ping, everything else ADMIN-only.

Route Inventory:
    GET    /users/ping           "pong", no auth
    POST   /users                register (public; ADMIN role needs an ADMIN caller)
    GET    /users                list            ADMIN
    GET    /users/{id}           detail          ADMIN
    PUT    /users/{id}           partial update  ADMIN
    DELETE /users/{id}           delete          ADMIN
    PATCH  /users/{id}/role      change role     ADMIN
    GET    /users/{id}/guides    assigned guides ADMIN
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import PlainTextResponse
from sqlalchemy.ext.asyncio import AsyncSession

from journeo.database import get_db_session
from journeo.routes.deps import EntityId, get_optional_user, require_admin
from journeo.schemas.common import ErrorResponse
from journeo.schemas.guide import GuideResponse
from journeo.schemas.user import (
    RoleChangeRequest,
    UserCreateRequest,
    UserResponse,
    UserUpdateRequest,
)
from journeo.services.access import CurrentUser
from journeo.services.user_service import user_service

router = APIRouter(prefix="/users", tags=["Users"])

ADMIN_RESPONSES = {
    401: {"description": "Missing or invalid token", "model": ErrorResponse},
    403: {"description": "ADMIN role required", "model": ErrorResponse},
}
NOT_FOUND = {404: {"description": "User not found", "model": ErrorResponse}}


@router.get("/ping", response_class=PlainTextResponse, summary="Liveness ping")
async def ping() -> str:
    return "pong"


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Missing email/password or invalid role", "model": ErrorResponse},
        403: {"description": "ADMIN role requested by a non-admin", "model": ErrorResponse},
        409: {"description": "Email already registered", "model": ErrorResponse},
    },
    summary="Register a user",
)
async def create_user(
    body: UserCreateRequest,
    request: Request,
    response: Response,
    caller: Optional[CurrentUser] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    user = await user_service.create_user(db, body, caller)
    response.headers["Location"] = str(request.url_for("get_user", user_id=user.id))
    return UserResponse.model_validate(user)


@router.get(
    "",
    response_model=List[UserResponse],
    responses=ADMIN_RESPONSES,
    summary="List all users",
)
async def list_users(
    _: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
) -> List[UserResponse]:
    return [UserResponse.model_validate(u) for u in await user_service.list_users(db)]


@router.get(
    "/{user_id}",
    response_model=UserResponse,
    responses={**ADMIN_RESPONSES, **NOT_FOUND},
    summary="Get a user",
)
async def get_user(
    user_id: EntityId,
    _: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    return UserResponse.model_validate(await user_service.get_user(db, user_id))


@router.put(
    "/{user_id}",
    response_model=UserResponse,
    responses={**ADMIN_RESPONSES, **NOT_FOUND, 409: {"model": ErrorResponse}},
    summary="Update a user (partial: blank fields are kept)",
)
async def update_user(
    user_id: EntityId,
    body: UserUpdateRequest,
    _: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    return UserResponse.model_validate(await user_service.update_user(db, user_id, body))


@router.delete(
    "/{user_id}",
    responses={**ADMIN_RESPONSES, **NOT_FOUND},
    summary="Delete a user, their guide assignments and their comments",
)
async def delete_user(
    user_id: EntityId,
    _: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await user_service.delete_user(db, user_id)
    return Response(status_code=status.HTTP_200_OK)


@router.patch(
    "/{user_id}/role",
    response_model=UserResponse,
    responses={**ADMIN_RESPONSES, **NOT_FOUND, 400: {"model": ErrorResponse}},
    summary="Change a user's role",
)
async def change_role(
    user_id: EntityId,
    body: RoleChangeRequest,
    _: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    return UserResponse.model_validate(await user_service.change_role(db, user_id, body.role))


@router.get(
    "/{user_id}/guides",
    response_model=List[GuideResponse],
    responses={**ADMIN_RESPONSES, **NOT_FOUND},
    summary="Guides assigned to a user",
)
async def user_guides(
    user_id: EntityId,
    _: CurrentUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
) -> List[GuideResponse]:
    return await user_service.guides_of(db, user_id)
