"""Media metadata response for /guides/{guideId}/media."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from journeo.models.enums import MediaType
from journeo.schemas.common import CamelModel


class MediaResponse(CamelModel):
    id: int
    guide_id: int
    stored_filename: str = Field(description="Storage key used by /media/files/{fileName}")
    original_filename: str
    type: MediaType
    content_type: Optional[str] = None
    size: int = Field(description="Size in bytes")
    uploaded_at: datetime
    url: str = Field(description="Absolute download URL")
