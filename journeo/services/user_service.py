"""
Journeo Backend — User Service
================================

What:  User registration, partial update, role change, delete and the
       guides-of-user lookup.
Who:   routes/users.py, seed script.

Policies:
    - Registration is public. Role defaults to USER; asking for ADMIN requires
      an authenticated ADMIN caller (AccessDeniedError otherwise).
    - Email is unique: pre-checked for a readable 409, and a concurrent
      duplicate that slips past the check is caught at flush as ConflictError.
    - Update is partial: only fields that are present and non-blank change.
      A new password is re-hashed.
    - Delete removes the user's guide assignments and the comments they wrote.
"""

import logging
from typing import List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from journeo.database import flush_or_raise
from journeo.exceptions import AccessDeniedError, ConflictError, NotFoundError
from journeo.models.enums import Role, parse_choice
from journeo.models.guide import guide_users
from journeo.models.user import User
from journeo.schemas.guide import GuideResponse
from journeo.schemas.user import UserCreateRequest, UserUpdateRequest
from journeo.security import hash_password
from journeo.services.access import CurrentUser
from journeo.services.comment_service import comment_service
from journeo.services.guide_service import guide_service

logger = logging.getLogger(__name__)


class UserService:
    async def get_user(self, db: AsyncSession, user_id: int) -> User:
        user = await db.get(User, user_id)
        if user is None:
            raise NotFoundError("user", user_id)
        return user

    async def find_by_email(self, db: AsyncSession, email: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def list_users(self, db: AsyncSession) -> List[User]:
        result = await db.execute(select(User).order_by(User.id))
        return list(result.scalars().all())

    async def _ensure_email_free(
        self, db: AsyncSession, email: str, exclude_id: Optional[int] = None
    ) -> None:
        query = select(func.count()).select_from(User).where(User.email == email)
        if exclude_id is not None:
            query = query.where(User.id != exclude_id)
        if await db.scalar(query):
            raise ConflictError(
                message=f"Email already registered: {email}",
                context={"email": email},
            )

    async def create_user(
        self,
        db: AsyncSession,
        request: UserCreateRequest,
        caller: Optional[CurrentUser] = None,
    ) -> User:
        """
        Register a new account.

        Raises:
            InvalidArgumentError: role outside {USER, ADMIN}
            AccessDeniedError:    ADMIN requested by a non-admin caller
            ConflictError:        email already registered
        """
        role = parse_choice(Role, request.role, "role") if request.role else Role.USER
        if role == Role.ADMIN and (caller is None or not caller.is_admin):
            raise AccessDeniedError(
                message="Access denied: only an ADMIN can create ADMIN accounts",
                context={"caller_id": caller.id if caller else None},
            )

        await self._ensure_email_free(db, request.email)

        user = User(
            email=request.email,
            password_hash=hash_password(request.password),
            role=role,
            first_name=request.first_name,
            last_name=request.last_name,
        )
        db.add(user)
        await flush_or_raise(db, conflict_message=f"Email already registered: {request.email}")

        logger.info("User %d created (role=%s)", user.id, role.value)
        return user

    async def update_user(
        self, db: AsyncSession, user_id: int, request: UserUpdateRequest
    ) -> User:
        user = await self.get_user(db, user_id)

        if request.email is not None and request.email != user.email:
            await self._ensure_email_free(db, request.email, exclude_id=user.id)
            user.email = request.email
        if request.password is not None:
            user.password_hash = hash_password(request.password)
        if request.role is not None:
            user.role = parse_choice(Role, request.role, "role")
        if request.first_name is not None:
            user.first_name = request.first_name
        if request.last_name is not None:
            user.last_name = request.last_name

        await flush_or_raise(db, conflict_message=f"Email already registered: {user.email}")
        logger.info("User %d updated", user.id)
        return user

    async def change_role(self, db: AsyncSession, user_id: int, role: str) -> User:
        user = await self.get_user(db, user_id)
        new_role = parse_choice(Role, role, "role")
        if user.role != new_role:
            logger.info("User %d role changed: %s -> %s", user.id, user.role.value, new_role.value)
            user.role = new_role
            await flush_or_raise(db)
        return user

    async def delete_user(self, db: AsyncSession, user_id: int) -> None:
        user = await self.get_user(db, user_id)

        comments_deleted = await comment_service.delete_by_author(db, user.id)
        await db.execute(delete(guide_users).where(guide_users.c.user_id == user.id))
        await db.delete(user)
        await flush_or_raise(db)

        logger.info("User %d deleted (%d comments removed)", user_id, comments_deleted)

    async def guides_of(self, db: AsyncSession, user_id: int) -> List[GuideResponse]:
        user = await self.get_user(db, user_id)
        return await guide_service.list_guides_of_user(db, user.id)


user_service = UserService()
