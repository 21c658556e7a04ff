"""
Journeo Backend — Comment Model
=================================

What:  ORM model for the `comments` table: a rated review of a guide by a user.
Who:   CommentService (add, list, delete, average rating), GuideService
       (average rating enrichment and delete cascade), UserService (delete cascade).

Comments are immutable after creation; the only mutation is delete.
The rating range is enforced three times: request schema, service and a
CHECK constraint, so no path can store a rating outside [1, 5].
"""

from datetime import datetime, timezone
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from journeo.database import Base

if TYPE_CHECKING:
    from journeo.models.user import User


class Comment(Base):
    __tablename__ = "comments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    rating: Mapped[int] = mapped_column(Integer, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    guide_id: Mapped[int] = mapped_column(
        ForeignKey("guides.id", ondelete="CASCADE"),
        nullable=False,
    )
    author_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    # Eager: every comment response carries the author's email
    author: Mapped["User"] = relationship(lazy="selectin")

    __table_args__ = (
        CheckConstraint("rating BETWEEN 1 AND 5", name="ck_comments_rating_range"),
        Index("idx_comments_guide_created", "guide_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Comment(id={self.id}, guide_id={self.guide_id}, rating={self.rating})>"
