"""
Journeo Backend — Authentication Dependencies
===============================================

What:  FastAPI dependencies that turn the `Authorization: Bearer <jwt>` header
       into a CurrentUser, and the ADMIN role gate.
How:   The token's subject (email) is looked up on every request, so a
       deleted account or a changed role takes effect immediately rather than
       when the token expires.

Outcomes:
    no header / bad token / unknown account → 401 Unauthorized
    authenticated but not ADMIN on an admin route → 403 Forbidden
"""

from typing import Annotated, Optional

from fastapi import Depends, Path
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from journeo.database import MAX_BIGINT, get_db_session
from journeo.exceptions import UnauthenticatedError
from journeo.models.user import User
from journeo.security import decode_access_token
from journeo.services.access import CurrentUser, ensure_admin

# auto_error=False: a missing header must be a 401 in the uniform error body
bearer_scheme = HTTPBearer(auto_error=False)

# Path id of any entity; out-of-range values are 400 before reaching the driver
EntityId = Annotated[int, Path(ge=1, le=MAX_BIGINT)]


async def _resolve(db: AsyncSession, token: str) -> CurrentUser:
    claims = decode_access_token(token)
    result = await db.execute(select(User).where(User.email == claims["sub"]))
    user = result.scalar_one_or_none()
    if user is None:
        raise UnauthenticatedError(message="Account no longer exists")
    return CurrentUser.from_user(user)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db_session),
) -> CurrentUser:
    if credentials is None or not credentials.credentials:
        raise UnauthenticatedError()
    return await _resolve(db, credentials.credentials)


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db_session),
) -> Optional[CurrentUser]:
    """Identity when a token is sent, None for anonymous calls; a bad token is still 401."""
    if credentials is None or not credentials.credentials:
        return None
    return await _resolve(db, credentials.credentials)


async def require_admin(
    principal: CurrentUser = Depends(get_current_user),
) -> CurrentUser:
    ensure_admin(principal)
    return principal
