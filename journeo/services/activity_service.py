"""
Journeo Backend — Activity Service
====================================

What:  Adds, updates, deletes and lists the activities of a guide, plus the
       GPS-only map projection.
Who:   routes/activities.py.

Updates are full overwrites: every field of the request replaces the stored
value, optional fields sent as null are cleared.
"""

import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from journeo.database import flush_or_raise
from journeo.exceptions import NotFoundError
from journeo.models.activity import Activity
from journeo.models.enums import ActivityType, parse_choice
from journeo.schemas.activity import ActivityMapPoint, ActivityRequest, ActivityResponse
from journeo.services.access import CurrentUser, get_guide_or_404, get_visible_guide

logger = logging.getLogger(__name__)

SCHEDULE_ORDER = (Activity.day_number, Activity.order_in_day, Activity.id)


def _apply(activity: Activity, request: ActivityRequest) -> None:
    activity.title = request.title
    activity.description = request.description
    activity.type = parse_choice(ActivityType, request.type, "type")
    activity.address = request.address
    activity.phone = request.phone
    activity.website = request.website
    activity.start_time = request.start_time
    activity.duration_minutes = request.duration_minutes
    activity.order_in_day = request.order_in_day
    activity.day_number = request.day_number
    activity.latitude = request.latitude
    activity.longitude = request.longitude


class ActivityService:
    async def add_activity(
        self, db: AsyncSession, guide_id: int, request: ActivityRequest
    ) -> ActivityResponse:
        guide = await get_guide_or_404(db, guide_id)

        activity = Activity(guide_id=guide.id)
        _apply(activity, request)
        guide.activities.append(activity)
        await flush_or_raise(db)

        logger.info(
            "Activity %d added to guide %d (day %d, order %d)",
            activity.id, guide.id, activity.day_number, activity.order_in_day,
        )
        return ActivityResponse.model_validate(activity)

    async def get_activity(self, db: AsyncSession, activity_id: int) -> Activity:
        activity = await db.get(Activity, activity_id)
        if activity is None:
            raise NotFoundError("activity", activity_id)
        return activity

    async def update_activity(
        self, db: AsyncSession, activity_id: int, request: ActivityRequest
    ) -> ActivityResponse:
        activity = await self.get_activity(db, activity_id)
        _apply(activity, request)
        await flush_or_raise(db)
        logger.info("Activity %d updated", activity.id)
        return ActivityResponse.model_validate(activity)

    async def delete_activity(self, db: AsyncSession, activity_id: int) -> None:
        activity = await self.get_activity(db, activity_id)
        await db.delete(activity)
        await flush_or_raise(db)
        logger.info("Activity %d deleted from guide %d", activity_id, activity.guide_id)

    async def _scheduled(self, db: AsyncSession, guide_id: int) -> List[Activity]:
        result = await db.execute(
            select(Activity).where(Activity.guide_id == guide_id).order_by(*SCHEDULE_ORDER)
        )
        return list(result.scalars().all())

    async def list_activities(
        self, db: AsyncSession, guide_id: int, principal: CurrentUser
    ) -> List[ActivityResponse]:
        """Activities of a visible guide sorted by (day, order), ties in insertion order."""
        await get_visible_guide(db, guide_id, principal)
        return [ActivityResponse.model_validate(a) for a in await self._scheduled(db, guide_id)]

    async def map_points(
        self, db: AsyncSession, guide_id: int, principal: CurrentUser
    ) -> List[ActivityMapPoint]:
        await get_visible_guide(db, guide_id, principal)
        return [ActivityMapPoint.model_validate(a) for a in await self._scheduled(db, guide_id)]


activity_service = ActivityService()
