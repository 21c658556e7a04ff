"""
Journeo Backend — Authentication Service
==========================================

What:  Exchanges an email/password pair for a signed access token.
Who:   POST /auth/login.

Enumeration resistance:
    An unknown email and a wrong password raise the same InvalidCredentialsError,
    and an unknown email is still checked against a dummy bcrypt hash so both
    paths cost one bcrypt verification.
"""

import logging
from functools import lru_cache

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from journeo.exceptions import InvalidCredentialsError
from journeo.models.user import User
from journeo.schemas.auth import LoginResponse
from journeo.security import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return hash_password("journeo-timing-equalizer")


class AuthService:
    async def authenticate(self, db: AsyncSession, email: str, password: str) -> User:
        """
        Return the user owning these credentials.

        Raises:
            InvalidCredentialsError: unknown email or wrong password
        """
        result = await db.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()

        if user is None:
            verify_password(password, _dummy_hash())
            logger.info("Login failed: unknown account")
            raise InvalidCredentialsError()

        if not verify_password(password, user.password_hash):
            logger.info("Login failed for user %d: wrong password", user.id)
            raise InvalidCredentialsError(context={"user_id": user.id})

        return user

    async def login(self, db: AsyncSession, email: str, password: str) -> LoginResponse:
        user = await self.authenticate(db, email, password)
        token = create_access_token(user.email, user.role.value)
        logger.info("User %d logged in (role=%s)", user.id, user.role.value)
        return LoginResponse(
            token=token,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            role=user.role,
        )


auth_service = AuthService()
