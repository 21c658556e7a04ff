"""
Journeo Backend — Guide Media Model
=====================================

What:  ORM model for the `guide_media` table: metadata of an image or video
       attached to a guide.
How:   The bytes live in the media storage directory under `stored_filename`
       (a generated UUID name); this row only records where to find them and
       what they were called on upload.
Who:   MediaService (upload, list, delete, download), GuideService (delete cascade).
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import BigInteger, DateTime, Enum as SAEnum, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from journeo.database import Base
from journeo.models.enums import MediaType


class GuideMedia(Base):
    __tablename__ = "guide_media"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    stored_filename: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        comment="Generated storage key: UUID plus sanitized extension",
    )
    original_filename: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[MediaType] = mapped_column(
        SAEnum(MediaType, native_enum=False, length=10),
        nullable=False,
    )
    content_type: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    size: Mapped[int] = mapped_column(BigInteger, nullable=False)

    uploaded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    guide_id: Mapped[int] = mapped_column(
        ForeignKey("guides.id", ondelete="CASCADE"),
        nullable=False,
    )

    __table_args__ = (
        Index("idx_guide_media_guide_uploaded", "guide_id", "uploaded_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<GuideMedia(id={self.id}, guide_id={self.guide_id}, "
            f"stored_filename='{self.stored_filename}')>"
        )
