"""ORM models; importing this package registers every table on Base.metadata."""

from journeo.models.enums import (
    ActivityType,
    MediaType,
    Mobility,
    Role,
    Season,
    TargetAudience,
    parse_choice,
)
from journeo.models.guide import Guide, guide_users
from journeo.models.user import User
from journeo.models.activity import Activity
from journeo.models.comment import Comment
from journeo.models.media import GuideMedia

__all__ = [
    "Activity",
    "ActivityType",
    "Comment",
    "Guide",
    "GuideMedia",
    "MediaType",
    "Mobility",
    "Role",
    "Season",
    "TargetAudience",
    "User",
    "guide_users",
    "parse_choice",
]
