"""
Journeo Backend — Login Route
===============================

POST /auth/login exchanges credentials for a bearer token. Attempts are
throttled per client IP by LoginRateLimitMiddleware.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from journeo.database import get_db_session
from journeo.schemas.auth import LoginRequest, LoginResponse
from journeo.schemas.common import ErrorResponse
from journeo.services.auth_service import auth_service

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        400: {"description": "Blank email or password", "model": ErrorResponse},
        401: {"description": "Invalid email or password", "model": ErrorResponse},
        429: {"description": "Too many login attempts", "model": ErrorResponse},
    },
    summary="Log in and obtain a bearer token",
)
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
) -> LoginResponse:
    return await auth_service.login(db, body.email, body.password)
