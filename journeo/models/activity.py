"""
Journeo Backend — Activity Model
==================================

What:  ORM model for the `activities` table: one visit inside a guide,
       scheduled on a day (day_number) at a position in that day (order_in_day).
Who:   ActivityService (CRUD, map projection), GuideService (embedded in guide responses).

Ordering:
    Display order is (day_number, order_in_day) ascending with the id as the
    final tie-breaker, so two activities sharing a slot keep insertion order.
    Nothing enforces uniqueness of a slot; ordering is display-only.
"""

from typing import TYPE_CHECKING, Optional, Tuple

from sqlalchemy import Enum as SAEnum, Float, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from journeo.database import Base
from journeo.models.enums import ActivityType

if TYPE_CHECKING:
    from journeo.models.guide import Guide


class Activity(Base):
    __tablename__ = "activities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    guide_id: Mapped[int] = mapped_column(
        ForeignKey("guides.id", ondelete="CASCADE"),
        nullable=False,
    )

    # ── Description ───────────────────────────────────────────────────────
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    type: Mapped[ActivityType] = mapped_column(
        SAEnum(ActivityType, native_enum=False, length=20),
        nullable=False,
    )

    # ── Practical details ─────────────────────────────────────────────────
    address: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    website: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    # Free-form wall-clock label ("09:30"), not a timestamp
    start_time: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # ── Schedule ──────────────────────────────────────────────────────────
    day_number: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    order_in_day: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    # ── Geolocation (map projection) ──────────────────────────────────────
    latitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    longitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    guide: Mapped["Guide"] = relationship(back_populates="activities")

    __table_args__ = (
        Index("idx_activities_guide_schedule", "guide_id", "day_number", "order_in_day"),
    )

    @property
    def schedule_key(self) -> Tuple[int, int, int]:
        return (self.day_number, self.order_in_day, self.id)

    def __repr__(self) -> str:
        return (
            f"<Activity(id={self.id}, guide_id={self.guide_id}, "
            f"day={self.day_number}, order={self.order_in_day})>"
        )
