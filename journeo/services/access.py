"""
Journeo Backend — Access Policy
=================================

What:  The request-scoped identity and the three authorization gates.
How:   Route dependencies build a CurrentUser from the bearer token and pass
       it explicitly into every service call that needs it; nothing here
       reads ambient state.

Gates:
    Role gate       management operations require ADMIN          → 403
    Ownership gate  a USER reads only guides they are assigned to → 403
    Comment gate    a comment is deleted by its author or an ADMIN → 403

Precedence:
    Existence is always checked before ownership. Callers load the guide
    first (NotFoundError → 404) and only then ask `ensure_can_view_guide`,
    so a missing guide is 404 for every role.
"""

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from journeo.exceptions import AccessDeniedError, NotFoundError
from journeo.models.comment import Comment
from journeo.models.enums import Role
from journeo.models.guide import Guide
from journeo.models.user import User


@dataclass(frozen=True)
class CurrentUser:
    id: int
    email: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @classmethod
    def from_user(cls, user: User) -> "CurrentUser":
        return cls(id=user.id, email=user.email, role=user.role)


def ensure_admin(principal: CurrentUser) -> None:
    if not principal.is_admin:
        raise AccessDeniedError(
            message="Access denied: ADMIN role required",
            context={"user_id": principal.id},
        )


def can_view_guide(principal: CurrentUser, guide: Guide) -> bool:
    return principal.is_admin or guide.has_member(principal.id)


def ensure_can_view_guide(principal: CurrentUser, guide: Guide) -> None:
    if not can_view_guide(principal, guide):
        raise AccessDeniedError(
            message="Access denied: you are not assigned to this guide",
            context={"user_id": principal.id, "guide_id": guide.id},
        )


async def get_guide_or_404(db: AsyncSession, guide_id: int) -> Guide:
    guide = await db.get(Guide, guide_id)
    if guide is None:
        raise NotFoundError("guide", guide_id)
    return guide


async def get_visible_guide(db: AsyncSession, guide_id: int, principal: CurrentUser) -> Guide:
    """Load a guide for reading: 404 if it does not exist, then 403 if not assigned."""
    guide = await get_guide_or_404(db, guide_id)
    ensure_can_view_guide(principal, guide)
    return guide


def ensure_can_delete_comment(principal: CurrentUser, comment: Comment) -> None:
    if principal.is_admin or comment.author_id == principal.id:
        return
    raise AccessDeniedError(
        message="Access denied: you can only delete your own comments",
        context={"user_id": principal.id, "comment_id": comment.id},
    )
