"""
Journeo Backend — Guide Service Unit Tests
============================================

What:  Tests for GuideService business logic against a real (in-memory)
       database: visibility, pagination, sorting, membership, enrichment
       and the delete cascade.

What we test:
    ✅ parse_sort accepts field[,asc|desc] and rejects anything else
    ✅ Existence is checked before ownership (404 before 403)
    ✅ USER listings contain exactly the assigned guides; ADMIN sees all
    ✅ Pages neither repeat nor skip guides; totals count the visible set
    ✅ Membership changes are idempotent
    ✅ averageRating is the mean of the ratings, None without comments
    ✅ Deleting a guide removes its activities, comments and assignments
"""

import pytest
from sqlalchemy import func, select

from journeo.exceptions import AccessDeniedError, InvalidArgumentError, NotFoundError
from journeo.models import Activity, Comment, Guide, Role, User, guide_users
from journeo.schemas.activity import ActivityRequest
from journeo.schemas.guide import GuideRequest
from journeo.services.access import CurrentUser
from journeo.services.activity_service import activity_service
from journeo.services.comment_service import comment_service
from journeo.services.guide_service import parse_sort, guide_service


def guide_request(**overrides) -> GuideRequest:
    data = {
        "title": "Loire à vélo",
        "number_of_days": 3,
        "mobility": "VELO",
        "season": "PRINTEMPS",
        "target_audience": "ENTRE_AMIS",
    }
    data.update(overrides)
    return GuideRequest(**data)


async def add_user(db, email: str, role: Role = Role.USER) -> CurrentUser:
    user = User(email=email, password_hash="x", role=role)
    db.add(user)
    await db.flush()
    return CurrentUser.from_user(user)


class TestParseSort:
    def test_default_is_id_ascending(self):
        assert parse_sort(None) == (Guide.id, False)
        assert parse_sort("  ") == (Guide.id, False)

    def test_field_and_direction(self):
        assert parse_sort("title,desc") == (Guide.title, True)
        assert parse_sort("numberOfDays") == (Guide.number_of_days, False)
        assert parse_sort("created_at, ASC") == (Guide.created_at, False)

    def test_unknown_field(self):
        with pytest.raises(InvalidArgumentError, match="sortBy"):
            parse_sort("password")

    def test_unknown_direction(self):
        with pytest.raises(InvalidArgumentError, match="direction"):
            parse_sort("title,sideways")


class TestGuideAccess:
    @pytest.mark.asyncio
    async def test_admin_reads_any_guide(self, db_session):
        admin = await add_user(db_session, "admin@x.io", Role.ADMIN)
        created = await guide_service.create_guide(db_session, guide_request())

        fetched = await guide_service.get_guide(db_session, created.id, admin)
        assert fetched.title == "Loire à vélo"
        assert fetched.activities == []
        assert fetched.users == []
        assert fetched.average_rating is None

    @pytest.mark.asyncio
    async def test_unassigned_user_is_denied(self, db_session):
        user = await add_user(db_session, "u@x.io")
        created = await guide_service.create_guide(db_session, guide_request())

        with pytest.raises(AccessDeniedError):
            await guide_service.get_guide(db_session, created.id, user)

    @pytest.mark.asyncio
    async def test_missing_guide_is_not_found_for_every_role(self, db_session):
        user = await add_user(db_session, "u@x.io")
        admin = await add_user(db_session, "a@x.io", Role.ADMIN)

        for principal in (user, admin):
            with pytest.raises(NotFoundError):
                await guide_service.get_guide(db_session, 999, principal)

    @pytest.mark.asyncio
    async def test_invalid_enum_leaves_guide_untouched(self, db_session):
        created = await guide_service.create_guide(db_session, guide_request())

        with pytest.raises(InvalidArgumentError):
            await guide_service.update_guide(
                db_session, created.id, guide_request(title="Changed", season="MONSOON")
            )
        guide = await db_session.get(Guide, created.id)
        assert guide.title == "Loire à vélo"


class TestGuideListing:
    @pytest.mark.asyncio
    async def test_user_sees_exactly_assigned_guides(self, db_session):
        admin = await add_user(db_session, "a@x.io", Role.ADMIN)
        user = await add_user(db_session, "u@x.io")
        ids = [
            (await guide_service.create_guide(db_session, guide_request(title=f"G{i}"))).id
            for i in range(3)
        ]
        await guide_service.add_user(db_session, ids[0], user.id)
        await guide_service.add_user(db_session, ids[2], user.id)

        visible = await guide_service.list_guides(db_session, user)
        assert [g.id for g in visible] == [ids[0], ids[2]]
        assert len(await guide_service.list_guides(db_session, admin)) == 3

    @pytest.mark.asyncio
    async def test_pages_cover_the_visible_set_once(self, db_session):
        admin = await add_user(db_session, "a@x.io", Role.ADMIN)
        for days in (3, 1, 2, 1, 5):
            await guide_service.create_guide(db_session, guide_request(number_of_days=days))

        seen = []
        for page in range(3):
            result = await guide_service.list_guides_page(
                db_session, admin, page=page, size=2, sort_by="numberOfDays"
            )
            assert result.total_count == 5
            assert result.total_pages == 3
            seen.extend(result.items)

        assert len({g.id for g in seen}) == 5
        assert [g.number_of_days for g in seen] == [1, 1, 2, 3, 5]

    @pytest.mark.asyncio
    async def test_page_past_the_end_is_empty(self, db_session):
        admin = await add_user(db_session, "a@x.io", Role.ADMIN)
        await guide_service.create_guide(db_session, guide_request())

        result = await guide_service.list_guides_page(db_session, admin, page=4, size=10)
        assert result.items == []
        assert result.total_count == 1

    @pytest.mark.asyncio
    async def test_page_totals_count_visible_guides_only(self, db_session):
        user = await add_user(db_session, "u@x.io")
        first = await guide_service.create_guide(db_session, guide_request())
        await guide_service.create_guide(db_session, guide_request())
        await guide_service.add_user(db_session, first.id, user.id)

        result = await guide_service.list_guides_page(db_session, user, page=0, size=20)
        assert result.total_count == 1
        assert [g.id for g in result.items] == [first.id]


class TestMembership:
    @pytest.mark.asyncio
    async def test_add_and_remove_are_idempotent(self, db_session):
        user = await add_user(db_session, "u@x.io")
        created = await guide_service.create_guide(db_session, guide_request())

        await guide_service.add_user(db_session, created.id, user.id)
        twice = await guide_service.add_user(db_session, created.id, user.id)
        assert [u.id for u in twice.users] == [user.id]

        await guide_service.remove_user(db_session, created.id, user.id)
        again = await guide_service.remove_user(db_session, created.id, user.id)
        assert again.users == []

    @pytest.mark.asyncio
    async def test_unknown_user_is_not_found(self, db_session):
        created = await guide_service.create_guide(db_session, guide_request())
        with pytest.raises(NotFoundError, match="User"):
            await guide_service.add_user(db_session, created.id, 404)

    @pytest.mark.asyncio
    async def test_guides_of_user(self, db_session):
        user = await add_user(db_session, "u@x.io")
        created = await guide_service.create_guide(db_session, guide_request())
        await guide_service.create_guide(db_session, guide_request())
        await guide_service.add_user(db_session, created.id, user.id)

        guides = await guide_service.list_guides_of_user(db_session, user.id)
        assert [g.id for g in guides] == [created.id]


class TestEnrichmentAndDelete:
    @pytest.mark.asyncio
    async def test_average_rating(self, db_session):
        admin = await add_user(db_session, "a@x.io", Role.ADMIN)
        created = await guide_service.create_guide(db_session, guide_request())

        await comment_service.add_comment(db_session, created.id, "Super", 4, admin)
        await comment_service.add_comment(db_session, created.id, "Parfait", 5, admin)

        fetched = await guide_service.get_guide(db_session, created.id, admin)
        assert fetched.average_rating == pytest.approx(4.5)

    @pytest.mark.asyncio
    async def test_activities_sorted_by_day_then_order(self, db_session):
        admin = await add_user(db_session, "a@x.io", Role.ADMIN)
        created = await guide_service.create_guide(db_session, guide_request())
        for title, day, order in [("C", 2, 1), ("B", 1, 2), ("A", 1, 1)]:
            await activity_service.add_activity(
                db_session,
                created.id,
                ActivityRequest(title=title, type="PARC", day_number=day, order_in_day=order),
            )

        fetched = await guide_service.get_guide(db_session, created.id, admin)
        assert [a.title for a in fetched.activities] == ["A", "B", "C"]

    @pytest.mark.asyncio
    async def test_delete_cascades(self, db_session):
        admin = await add_user(db_session, "a@x.io", Role.ADMIN)
        user = await add_user(db_session, "u@x.io")
        created = await guide_service.create_guide(db_session, guide_request())
        await guide_service.add_user(db_session, created.id, user.id)
        await activity_service.add_activity(
            db_session, created.id, ActivityRequest(title="Grotte", type="GROTTE")
        )
        await comment_service.add_comment(db_session, created.id, "Bien", 3, admin)

        await guide_service.delete_guide(db_session, created.id)

        assert await db_session.get(Guide, created.id) is None
        for model in (Activity, Comment):
            count = await db_session.scalar(select(func.count()).select_from(model))
            assert count == 0
        links = await db_session.scalar(select(func.count()).select_from(guide_users))
        assert links == 0
        assert await db_session.get(User, user.id) is not None

    @pytest.mark.asyncio
    async def test_delete_missing_guide(self, db_session):
        with pytest.raises(NotFoundError):
            await guide_service.delete_guide(db_session, 12345)
