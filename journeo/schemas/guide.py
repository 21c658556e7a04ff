"""
Journeo Backend — Guide Schemas
=================================

What:  Request model for creating/updating a guide, the enriched guide
       response and the page wrapper returned by paginated listing.

Guide response enrichment:
    - activities: sorted by (dayNumber, orderInDay), ties in insertion order
    - users:      the users assigned to the guide
    - averageRating: mean comment rating, null when the guide has no comments
"""

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from journeo.models.enums import Mobility, Season, TargetAudience
from journeo.schemas.activity import ActivityResponse
from journeo.schemas.common import CamelModel, strip_optional, strip_required
from journeo.schemas.user import UserResponse


class GuideRequest(CamelModel):
    """
    Full description of a guide; an update overwrites every field.

    The three vocabularies are plain strings here. GuideService resolves them
    case-insensitively (English aliases accepted) and answers 400 Bad Request
    for anything outside the closed sets.
    """
    title: str = Field(max_length=255, examples=["Paris en famille"])
    description: Optional[str] = Field(default=None, max_length=1000)
    number_of_days: int = Field(gt=0, description="Length of the itinerary in days", examples=[3])
    mobility: str = Field(description="VOITURE, VELO, A_PIED or MOTO", examples=["A_PIED"])
    season: str = Field(description="ETE, PRINTEMPS, AUTOMNE or HIVER", examples=["ETE"])
    target_audience: str = Field(
        description="FAMILLE, SEUL, EN_GROUPE or ENTRE_AMIS",
        examples=["FAMILLE"],
    )

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        return strip_required(v)

    @field_validator("description")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        return strip_optional(v)


class GuideResponse(CamelModel):
    id: int
    title: str
    description: Optional[str] = None
    number_of_days: int
    mobility: Mobility
    season: Season
    target_audience: TargetAudience
    created_at: datetime
    updated_at: datetime
    activities: List[ActivityResponse] = Field(default_factory=list)
    users: List[UserResponse] = Field(default_factory=list)
    average_rating: Optional[float] = Field(
        default=None,
        description="Mean comment rating; null when the guide has no comments",
    )


class GuidePage(CamelModel):
    """
    One page of the guides the caller may see.

    totalCount counts the caller's visible set, not every guide in the system.
    """
    items: List[GuideResponse]
    total_count: int
    page: int
    size: int
    total_pages: int
