"""
Journeo Backend — Guide Model and Guide↔User Join Table
=========================================================

What:  ORM model for the `guides` table plus the `guide_users` association
       table that records which users may view which guide.
Who:   GuideService (CRUD, membership), access policy (ownership gate).

Relationships:
    Guide 1──N Activity     cascade delete (ORM delete-orphan + FK ON DELETE CASCADE)
    Guide N──M User         via guide_users; both directions kept in sync by back_populates
    Guide 1──N Comment      deleted explicitly by GuideService.delete_guide (+ FK cascade)
    Guide 1──N GuideMedia   deleted explicitly by GuideService.delete_guide (+ FK cascade)

    Comments and media are not mapped as collections on Guide: they are read
    through their own ordered queries, and loading them with every guide
    would only be discarded.
"""

from datetime import datetime, timezone
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import (
    Column,
    DateTime,
    Enum as SAEnum,
    ForeignKey,
    Integer,
    String,
    Table,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from journeo.database import Base
from journeo.models.enums import Mobility, Season, TargetAudience

if TYPE_CHECKING:
    from journeo.models.activity import Activity
    from journeo.models.user import User


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


guide_users = Table(
    "guide_users",
    Base.metadata,
    Column("guide_id", ForeignKey("guides.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)


class Guide(Base):
    """
    A multi-day itinerary composed of ordered activities.

    Lifecycle:
        Created by an ADMIN with no activities and no assigned users.
        Updated by full overwrite of its scalar fields; id never changes.
        Hard-deleted together with everything it owns.
    """

    __tablename__ = "guides"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    number_of_days: Mapped[int] = mapped_column(Integer, nullable=False)

    mobility: Mapped[Mobility] = mapped_column(
        SAEnum(Mobility, native_enum=False, length=20), nullable=False
    )
    season: Mapped[Season] = mapped_column(
        SAEnum(Season, native_enum=False, length=20), nullable=False
    )
    target_audience: Mapped[TargetAudience] = mapped_column(
        SAEnum(TargetAudience, native_enum=False, length=20), nullable=False
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    activities: Mapped[List["Activity"]] = relationship(
        back_populates="guide",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
        order_by="Activity.id",
    )

    users: Mapped[List["User"]] = relationship(
        secondary=guide_users,
        back_populates="guides",
        lazy="selectin",
        order_by="User.id",
    )

    def has_member(self, user_id: int) -> bool:
        return any(user.id == user_id for user in self.users)

    def __repr__(self) -> str:
        return f"<Guide(id={self.id}, title='{self.title}')>"
