"""Comment request/response models for /guides/{guideId}/comments."""

from datetime import datetime

from pydantic import Field, field_validator

from journeo.schemas.common import CamelModel, strip_required


class CommentRequest(CamelModel):
    content: str = Field(examples=["Très bien organisé, les lieux sont magnifiques."])
    rating: int = Field(ge=1, le=5, description="Rating from 1 to 5", examples=[5])

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, v: str) -> str:
        return strip_required(v)


class CommentResponse(CamelModel):
    id: int
    content: str
    rating: int
    author_id: int
    author_email: str
    guide_id: int
    created_at: datetime
