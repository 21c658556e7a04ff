"""
Journeo Backend — Activity Endpoint Tests
===========================================

What:  /activities endpoints: schedule-ordered listing, map projection,
       ADMIN-only add/overwrite/delete.

What we test:
    ✅ Listing sorted by (dayNumber, orderInDay), ties in insertion order
    ✅ Map points carry only id, title, coordinates and schedule position
    ✅ Update is a full overwrite (omitted optional fields are cleared)
    ✅ Unknown type 400, out-of-range coordinates 400, missing guide 404
    ✅ Visibility gate applies to listing and map
"""

import pytest


class TestActivityListing:
    @pytest.mark.asyncio
    async def test_sorted_by_day_then_order(self, test_client, admin_headers, make_guide, activity_payload):
        guide = await make_guide()
        gid = guide["id"]
        for title, day, order in [("D2-1", 2, 1), ("D1-2", 1, 2), ("D1-1", 1, 1), ("D1-2bis", 1, 2)]:
            created = await test_client.post(
                f"/activities/guide/{gid}",
                json=activity_payload(title=title, dayNumber=day, orderInDay=order),
                headers=admin_headers,
            )
            assert created.status_code == 200

        response = await test_client.get(f"/activities/guide/{gid}", headers=admin_headers)
        assert [a["title"] for a in response.json()] == ["D1-1", "D1-2", "D1-2bis", "D2-1"]

        embedded = (await test_client.get(f"/guides/{gid}", headers=admin_headers)).json()
        assert [a["title"] for a in embedded["activities"]] == ["D1-1", "D1-2", "D1-2bis", "D2-1"]

    @pytest.mark.asyncio
    async def test_map_points(self, test_client, admin_headers, make_guide, activity_payload):
        guide = await make_guide()
        await test_client.post(
            f"/activities/guide/{guide['id']}",
            json=activity_payload(latitude=45.5, longitude=-1.25, dayNumber=2, orderInDay=3),
            headers=admin_headers,
        )

        response = await test_client.get(f"/activities/guide/{guide['id']}/map", headers=admin_headers)
        assert response.status_code == 200
        (point,) = response.json()
        assert set(point) == {"id", "title", "latitude", "longitude", "dayNumber", "orderInDay"}
        assert (point["latitude"], point["longitude"]) == (45.5, -1.25)
        assert (point["dayNumber"], point["orderInDay"]) == (2, 3)

    @pytest.mark.asyncio
    async def test_visibility(self, test_client, alice, alice_headers, bob_headers, make_guide):
        guide = await make_guide(members=[alice])
        gid = guide["id"]

        assert (await test_client.get(f"/activities/guide/{gid}", headers=alice_headers)).status_code == 200
        assert (await test_client.get(f"/activities/guide/{gid}", headers=bob_headers)).status_code == 403
        assert (await test_client.get(f"/activities/guide/{gid}/map", headers=bob_headers)).status_code == 403
        assert (await test_client.get("/activities/guide/999", headers=bob_headers)).status_code == 404
        assert (await test_client.get(f"/activities/guide/{gid}")).status_code == 401


class TestActivityMutations:
    @pytest.mark.asyncio
    async def test_add_returns_activity(self, test_client, admin_headers, make_guide, activity_payload):
        guide = await make_guide()
        response = await test_client.post(
            f"/activities/guide/{guide['id']}",
            json=activity_payload(type="castle", phone="+33 1 23 45 67 89"),
            headers=admin_headers,
        )
        assert response.status_code == 200
        body = response.json()
        assert body["guideId"] == guide["id"]
        assert body["type"] == "CHATEAU"
        assert body["phone"] == "+33 1 23 45 67 89"
        assert body["durationMinutes"] == 90

    @pytest.mark.asyncio
    async def test_defaults(self, test_client, admin_headers, make_guide):
        guide = await make_guide()
        response = await test_client.post(
            f"/activities/guide/{guide['id']}",
            json={"title": "Balade", "type": "ACTIVITE"},
            headers=admin_headers,
        )
        body = response.json()
        assert (body["dayNumber"], body["orderInDay"], body["durationMinutes"]) == (1, 1, 0)
        assert body["latitude"] is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "overrides",
        [
            {"type": "ZOO"},
            {"title": ""},
            {"latitude": 91},
            {"longitude": -180.5},
            {"dayNumber": 0},
            {"orderInDay": 0},
            {"durationMinutes": -1},
        ],
    )
    async def test_invalid_input(self, test_client, admin_headers, make_guide, activity_payload, overrides):
        guide = await make_guide()
        response = await test_client.post(
            f"/activities/guide/{guide['id']}",
            json=activity_payload(**overrides),
            headers=admin_headers,
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_add_to_missing_guide(self, test_client, admin_headers, activity_payload):
        response = await test_client.post(
            "/activities/guide/999", json=activity_payload(), headers=admin_headers
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_update_is_full_overwrite(self, test_client, admin_headers, make_guide, activity_payload):
        guide = await make_guide()
        created = (
            await test_client.post(
                f"/activities/guide/{guide['id']}",
                json=activity_payload(website="https://www.musee-orsay.fr"),
                headers=admin_headers,
            )
        ).json()

        response = await test_client.put(
            f"/activities/{created['id']}",
            json={"title": "Orangerie", "type": "MUSEE", "dayNumber": 2},
            headers=admin_headers,
        )
        assert response.status_code == 200
        body = response.json()
        assert body["id"] == created["id"]
        assert body["title"] == "Orangerie"
        assert body["dayNumber"] == 2
        assert body["website"] is None
        assert body["latitude"] is None

    @pytest.mark.asyncio
    async def test_delete(self, test_client, admin_headers, make_guide, activity_payload):
        guide = await make_guide()
        created = (
            await test_client.post(
                f"/activities/guide/{guide['id']}", json=activity_payload(), headers=admin_headers
            )
        ).json()

        response = await test_client.delete(f"/activities/{created['id']}", headers=admin_headers)
        assert response.status_code == 200
        assert (await test_client.get(f"/activities/guide/{guide['id']}", headers=admin_headers)).json() == []
        assert (await test_client.delete(f"/activities/{created['id']}", headers=admin_headers)).status_code == 404

    @pytest.mark.asyncio
    async def test_mutations_need_admin(self, test_client, alice, alice_headers, make_guide, activity_payload):
        guide = await make_guide(members=[alice])
        assert (
            await test_client.post(
                f"/activities/guide/{guide['id']}", json=activity_payload(), headers=alice_headers
            )
        ).status_code == 403
        assert (await test_client.put("/activities/1", json=activity_payload(), headers=alice_headers)).status_code == 403
        assert (await test_client.delete("/activities/1", headers=alice_headers)).status_code == 403
