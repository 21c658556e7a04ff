"""
Journeo Backend — Activity Schemas
====================================

What:  Request/response models for /activities and the GPS-only map projection.
"""

from typing import Optional

from pydantic import Field, field_validator

from journeo.models.enums import ActivityType
from journeo.schemas.common import CamelModel, strip_optional, strip_required


class ActivityRequest(CamelModel):
    """
    Full description of an activity.

    Used for both creation and update: an update overwrites every field with
    the values sent (no partial update), so omitted optional fields are cleared.
    """
    title: str = Field(max_length=255, examples=["Musée d'Orsay"])
    description: Optional[str] = None
    type: str = Field(description="MUSEE, CHATEAU, ACTIVITE, PARC or GROTTE", examples=["MUSEE"])
    address: Optional[str] = Field(default=None, max_length=500)
    phone: Optional[str] = Field(default=None, max_length=50)
    website: Optional[str] = Field(default=None, max_length=500)
    start_time: Optional[str] = Field(default=None, max_length=20, examples=["09:30"])
    duration_minutes: int = Field(default=0, ge=0, description="Planned duration in minutes")
    order_in_day: int = Field(default=1, ge=1, description="Position within the day")
    day_number: int = Field(default=1, ge=1, description="Day of the guide (1-based)")
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        return strip_required(v)

    @field_validator("description", "address", "phone", "website", "start_time")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        return strip_optional(v)


class ActivityResponse(CamelModel):
    id: int
    guide_id: int
    title: str
    description: Optional[str] = None
    type: ActivityType
    address: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    start_time: Optional[str] = None
    duration_minutes: int
    order_in_day: int
    day_number: int
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class ActivityMapPoint(CamelModel):
    """Read-only geographic view of an activity for map rendering."""
    id: int
    title: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    day_number: int
    order_in_day: int
