"""
Journeo Backend — Guide Service
=================================

What:  Guide CRUD, Guide↔User membership and the filtered, optionally
       paginated guide listing.
How:   Guides are loaded with their activities and users (selectin); every
       response is enriched with the average comment rating computed on read.
Who:   routes/guides.py, routes/users.py (guides of a user), seed script.

Visibility:
    ADMIN sees every guide. A USER sees only the guides whose user set
    contains them; listing filters in SQL, so pagination counts and pages
    the visible set, never the full table.

Delete cascade (one transaction):
    comments → media rows → activities (ORM cascade) → guide_users rows → guide,
    then the media files are removed best-effort once the rows are gone.
"""

import logging
import math
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from journeo.database import MAX_BIGINT, flush_or_raise
from journeo.exceptions import InvalidArgumentError, NotFoundError
from journeo.models.enums import Mobility, Season, TargetAudience, parse_choice
from journeo.models.guide import Guide, guide_users
from journeo.models.media import GuideMedia
from journeo.models.user import User
from journeo.schemas.activity import ActivityResponse
from journeo.schemas.guide import GuidePage, GuideRequest, GuideResponse
from journeo.schemas.user import UserResponse
from journeo.services.access import CurrentUser, get_guide_or_404, get_visible_guide
from journeo.services.comment_service import comment_service
from journeo.services.media_storage import media_storage

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
# page * size must stay a valid OFFSET
MAX_PAGE = MAX_BIGINT // MAX_PAGE_SIZE

# Accepted sortBy values (camelCase and snake_case) → column
SORTABLE_FIELDS: Dict[str, ColumnElement] = {
    "id": Guide.id,
    "title": Guide.title,
    "numberOfDays": Guide.number_of_days,
    "number_of_days": Guide.number_of_days,
    "mobility": Guide.mobility,
    "season": Guide.season,
    "targetAudience": Guide.target_audience,
    "target_audience": Guide.target_audience,
    "createdAt": Guide.created_at,
    "created_at": Guide.created_at,
    "updatedAt": Guide.updated_at,
    "updated_at": Guide.updated_at,
}


def parse_sort(sort_by: Optional[str]) -> Tuple[ColumnElement, bool]:
    """
    Resolve "field" or "field,asc|desc" to (column, descending).

    Raises:
        InvalidArgumentError: unknown field or direction
    """
    if not sort_by or not sort_by.strip():
        return Guide.id, False

    field, _, direction = sort_by.strip().partition(",")
    field = field.strip()
    direction = direction.strip().lower() or "asc"

    column = SORTABLE_FIELDS.get(field)
    if column is None:
        allowed = ", ".join(k for k in SORTABLE_FIELDS if "_" not in k)
        raise InvalidArgumentError(
            message=f"Invalid sortBy field '{field}'. Allowed values: {allowed}",
            context={"sort_by": sort_by},
        )
    if direction not in {"asc", "desc"}:
        raise InvalidArgumentError(
            message=f"Invalid sort direction '{direction}'. Use asc or desc",
            context={"sort_by": sort_by},
        )
    return column, direction == "desc"


def to_guide_response(guide: Guide, average_rating: Optional[float]) -> GuideResponse:
    activities = sorted(guide.activities, key=lambda a: a.schedule_key)
    return GuideResponse(
        id=guide.id,
        title=guide.title,
        description=guide.description,
        number_of_days=guide.number_of_days,
        mobility=guide.mobility,
        season=guide.season,
        target_audience=guide.target_audience,
        created_at=guide.created_at,
        updated_at=guide.updated_at,
        activities=[ActivityResponse.model_validate(a) for a in activities],
        users=[UserResponse.model_validate(u) for u in guide.users],
        average_rating=average_rating,
    )


def _apply(guide: Guide, request: GuideRequest) -> None:
    """Overwrite every mutable field; enum values are resolved before any assignment."""
    mobility = parse_choice(Mobility, request.mobility, "mobility")
    season = parse_choice(Season, request.season, "season")
    target_audience = parse_choice(TargetAudience, request.target_audience, "targetAudience")

    guide.title = request.title
    guide.description = request.description
    guide.number_of_days = request.number_of_days
    guide.mobility = mobility
    guide.season = season
    guide.target_audience = target_audience


class GuideService:
    """
    Business logic layer for guides.

    Responsibilities:
        - create/update/delete (ADMIN-gated by the routes)
        - add_user/remove_user: membership on both sides of the many-to-many
        - get_guide/list_guides: visibility-filtered reads
        - enrich: attach averageRating to responses
    """

    async def enrich(self, db: AsyncSession, guide: Guide) -> GuideResponse:
        return to_guide_response(guide, await comment_service.average_rating(db, guide.id))

    async def enrich_many(self, db: AsyncSession, guides: List[Guide]) -> List[GuideResponse]:
        ratings = await comment_service.average_ratings(db, (g.id for g in guides))
        return [to_guide_response(g, ratings.get(g.id)) for g in guides]

    async def create_guide(self, db: AsyncSession, request: GuideRequest) -> GuideResponse:
        # Collections set explicitly: an unloaded collection on a fresh row
        # would otherwise be lazy-loaded when the response is built
        guide = Guide(activities=[], users=[])
        _apply(guide, request)
        db.add(guide)
        await flush_or_raise(db)

        logger.info("Guide %d created: %s", guide.id, guide.title)
        return to_guide_response(guide, None)

    async def update_guide(
        self, db: AsyncSession, guide_id: int, request: GuideRequest
    ) -> GuideResponse:
        guide = await get_guide_or_404(db, guide_id)
        _apply(guide, request)
        guide.updated_at = datetime.now(timezone.utc)
        await flush_or_raise(db)

        logger.info("Guide %d updated", guide.id)
        return await self.enrich(db, guide)

    async def delete_guide(self, db: AsyncSession, guide_id: int) -> None:
        guide = await get_guide_or_404(db, guide_id)

        media_result = await db.execute(
            select(GuideMedia.stored_filename).where(GuideMedia.guide_id == guide_id)
        )
        stored_files = list(media_result.scalars().all())

        comments_deleted = await comment_service.delete_for_guide(db, guide_id)
        await db.execute(delete(GuideMedia).where(GuideMedia.guide_id == guide_id))
        await db.delete(guide)
        await flush_or_raise(db)

        logger.info(
            "Guide %d deleted (%d activities, %d comments, %d media)",
            guide_id, len(guide.activities), comments_deleted, len(stored_files),
        )

        for stored_filename in stored_files:
            await media_storage.discard(stored_filename)

    async def get_guide(
        self, db: AsyncSession, guide_id: int, principal: CurrentUser
    ) -> GuideResponse:
        guide = await get_visible_guide(db, guide_id, principal)
        return await self.enrich(db, guide)

    async def _membership_pair(
        self, db: AsyncSession, guide_id: int, user_id: int
    ) -> Tuple[Guide, User]:
        guide = await get_guide_or_404(db, guide_id)
        user = await db.get(User, user_id)
        if user is None:
            raise NotFoundError("user", user_id)
        return guide, user

    async def add_user(self, db: AsyncSession, guide_id: int, user_id: int) -> GuideResponse:
        """Assign a user to a guide; assigning an existing member is a no-op."""
        guide, user = await self._membership_pair(db, guide_id, user_id)
        if not guide.has_member(user.id):
            # back_populates keeps user.guides in step within this session
            guide.users.append(user)
            await flush_or_raise(db)
            logger.info("User %d added to guide %d", user.id, guide.id)
        return await self.enrich(db, guide)

    async def remove_user(self, db: AsyncSession, guide_id: int, user_id: int) -> GuideResponse:
        """Unassign a user from a guide; removing a non-member is a no-op."""
        guide, user = await self._membership_pair(db, guide_id, user_id)
        if guide.has_member(user.id):
            guide.users.remove(user)
            await flush_or_raise(db)
            logger.info("User %d removed from guide %d", user.id, guide.id)
        return await self.enrich(db, guide)

    async def list_guides(
        self,
        db: AsyncSession,
        principal: CurrentUser,
        sort_by: Optional[str] = None,
    ) -> List[GuideResponse]:
        """Every guide the caller may see, unpaginated."""
        column, descending = parse_sort(sort_by)
        query = self._visible_query(principal).order_by(*self._ordering(column, descending))
        result = await db.execute(query)
        return await self.enrich_many(db, list(result.scalars().all()))

    async def list_guides_page(
        self,
        db: AsyncSession,
        principal: CurrentUser,
        page: int = 0,
        size: int = DEFAULT_PAGE_SIZE,
        sort_by: Optional[str] = None,
    ) -> GuidePage:
        """
        One page (0-based) of the guides the caller may see.

        The order is total (id as final tie-breaker) so consecutive pages
        neither repeat nor skip guides.
        """
        column, descending = parse_sort(sort_by)
        visible = self._visible_query(principal)

        total_count = await db.scalar(
            select(func.count()).select_from(visible.order_by(None).subquery())
        ) or 0

        result = await db.execute(
            visible.order_by(*self._ordering(column, descending))
            .offset(page * size)
            .limit(size)
        )
        items = await self.enrich_many(db, list(result.scalars().all()))

        return GuidePage(
            items=items,
            total_count=total_count,
            page=page,
            size=size,
            total_pages=math.ceil(total_count / size) if size else 0,
        )

    async def list_guides_of_user(self, db: AsyncSession, user_id: int) -> List[GuideResponse]:
        result = await db.execute(
            select(Guide)
            .join(guide_users, guide_users.c.guide_id == Guide.id)
            .where(guide_users.c.user_id == user_id)
            .order_by(Guide.id)
        )
        return await self.enrich_many(db, list(result.scalars().all()))

    @staticmethod
    def _visible_query(principal: CurrentUser):
        query = select(Guide)
        if not principal.is_admin:
            query = query.where(Guide.users.any(User.id == principal.id))
        return query

    @staticmethod
    def _ordering(column: ColumnElement, descending: bool) -> List[ColumnElement]:
        primary = column.desc() if descending else column.asc()
        if column is Guide.id:
            return [primary]
        return [primary, Guide.id.asc()]


guide_service = GuideService()
