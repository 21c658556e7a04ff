"""
Journeo Backend — Comment Service
===================================

What:  Adds, lists and deletes guide comments and computes average ratings.
Who:   routes/comments.py; GuideService for the averageRating enrichment.

Ordering:
    Comments are listed newest first (created_at DESC) with the id as
    tie-breaker, so comments created within the same clock tick still come
    back in a stable order.

Average rating:
    Computed by the database (AVG over the guide's ratings) on every read,
    never stored. NULL (no comments) maps to None. PostgreSQL returns
    NUMERIC for AVG over integers, hence the explicit float().
"""

import logging
from typing import Dict, Iterable, List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from journeo.database import flush_or_raise
from journeo.exceptions import NotFoundError, ValidationError
from journeo.models.comment import Comment
from journeo.models.user import User
from journeo.schemas.comment import CommentResponse
from journeo.services.access import (
    CurrentUser,
    ensure_can_delete_comment,
    get_guide_or_404,
    get_visible_guide,
)

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


def to_comment_response(comment: Comment) -> CommentResponse:
    return CommentResponse(
        id=comment.id,
        content=comment.content,
        rating=comment.rating,
        author_id=comment.author_id,
        author_email=comment.author.email,
        guide_id=comment.guide_id,
        created_at=comment.created_at,
    )


class CommentService:
    async def add_comment(
        self,
        db: AsyncSession,
        guide_id: int,
        content: str,
        rating: int,
        principal: CurrentUser,
    ) -> CommentResponse:
        """
        Attach a comment from `principal` to a guide they can see.

        Raises:
            NotFoundError:     guide absent, or the author's account no longer exists
            AccessDeniedError: a USER commenting on a guide they are not assigned to
            ValidationError:   rating outside [1, 5] or blank content
        """
        # Also bounded by CommentRequest; seed scripts and tests call this directly
        if not isinstance(rating, int) or not MIN_RATING <= rating <= MAX_RATING:
            raise ValidationError(
                message=f"must be between {MIN_RATING} and {MAX_RATING}",
                field="rating",
            )
        if not content or not content.strip():
            raise ValidationError(message="must not be blank", field="content")

        await get_visible_guide(db, guide_id, principal)

        author = await db.get(User, principal.id)
        if author is None:
            raise NotFoundError("user", principal.id)

        comment = Comment(
            content=content.strip(),
            rating=rating,
            guide_id=guide_id,
            author_id=author.id,
            author=author,
        )
        db.add(comment)
        await flush_or_raise(db)

        logger.info(
            "Comment %d added to guide %d by user %d (rating=%d)",
            comment.id, guide_id, author.id, rating,
        )
        return to_comment_response(comment)

    async def list_comments(
        self, db: AsyncSession, guide_id: int, principal: CurrentUser
    ) -> List[CommentResponse]:
        await get_visible_guide(db, guide_id, principal)
        result = await db.execute(
            select(Comment)
            .where(Comment.guide_id == guide_id)
            .order_by(Comment.created_at.desc(), Comment.id.desc())
        )
        return [to_comment_response(c) for c in result.scalars().all()]

    async def delete_comment(
        self,
        db: AsyncSession,
        guide_id: int,
        comment_id: int,
        principal: CurrentUser,
    ) -> None:
        """
        Delete a comment as its author or as an ADMIN.

        Raises:
            NotFoundError:     guide absent, comment absent, or comment belongs
                               to another guide
            AccessDeniedError: requester is neither the author nor an ADMIN
        """
        await get_guide_or_404(db, guide_id)

        comment = await db.get(Comment, comment_id)
        if comment is None or comment.guide_id != guide_id:
            raise NotFoundError("comment", comment_id)

        ensure_can_delete_comment(principal, comment)

        await db.delete(comment)
        await flush_or_raise(db)
        logger.info("Comment %d deleted from guide %d by user %d", comment_id, guide_id, principal.id)

    async def average_rating(self, db: AsyncSession, guide_id: int) -> Optional[float]:
        result = await db.execute(
            select(func.avg(Comment.rating)).where(Comment.guide_id == guide_id)
        )
        value = result.scalar_one_or_none()
        return float(value) if value is not None else None

    async def average_ratings(
        self, db: AsyncSession, guide_ids: Iterable[int]
    ) -> Dict[int, float]:
        """
        Average rating per guide for a batch of guides, in one grouped query.

        Guides without comments are simply absent from the returned dict.
        """
        ids = list(guide_ids)
        if not ids:
            return {}
        result = await db.execute(
            select(Comment.guide_id, func.avg(Comment.rating))
            .where(Comment.guide_id.in_(ids))
            .group_by(Comment.guide_id)
        )
        return {guide_id: float(avg) for guide_id, avg in result.all() if avg is not None}

    async def delete_for_guide(self, db: AsyncSession, guide_id: int) -> int:
        result = await db.execute(delete(Comment).where(Comment.guide_id == guide_id))
        return result.rowcount or 0

    async def delete_by_author(self, db: AsyncSession, author_id: int) -> int:
        result = await db.execute(delete(Comment).where(Comment.author_id == author_id))
        return result.rowcount or 0


comment_service = CommentService()
