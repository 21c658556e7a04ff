"""
Journeo Backend — Application-Level Tests
===========================================

What:  Behaviour owned by the app factory rather than one resource:
       health check, error body shape for framework errors (including
       out-of-range ids and pages), request ids.
"""

import pytest

from journeo import __version__
from journeo.seed import seed_demo_data
from journeo.services.guide_service import MAX_PAGE, MAX_PAGE_SIZE


class TestHealth:
    @pytest.mark.asyncio
    async def test_healthy(self, test_client):
        response = await test_client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
        assert body["storage"] == "writable"
        assert body["version"] == __version__

    @pytest.mark.asyncio
    async def test_storage_failure_is_unhealthy(self, test_client, monkeypatch):
        from journeo.services.media_storage import media_storage

        async def not_writable():
            return False

        monkeypatch.setattr(media_storage, "is_writable", not_writable)
        response = await test_client.get("/health")
        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"


class TestErrorShape:
    @pytest.mark.asyncio
    async def test_unknown_route(self, test_client):
        response = await test_client.get("/nowhere")
        assert response.status_code == 404
        assert response.json() == {
            "status": 404,
            "error": "Not Found",
            "message": "Not Found",
            "path": "/nowhere",
        }

    @pytest.mark.asyncio
    async def test_wrong_method(self, test_client):
        response = await test_client.patch("/users/ping")
        assert response.status_code == 405
        assert response.json()["error"] == "Method Not Allowed"

    @pytest.mark.asyncio
    async def test_non_numeric_id(self, test_client, admin_headers):
        response = await test_client.get("/guides/abc", headers=admin_headers)
        assert response.status_code == 400
        assert response.json()["message"].startswith("guide_id:")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "method, path",
        [
            ("GET", "/guides/99999999999999999999"),
            ("GET", "/guides/9223372036854775808"),
            ("DELETE", "/guides/99999999999999999999"),
            ("GET", "/activities/guide/99999999999999999999"),
            ("DELETE", "/guides/1/comments/99999999999999999999"),
            ("GET", "/users/99999999999999999999"),
        ],
    )
    async def test_id_beyond_bigint(self, test_client, admin_headers, method, path):
        response = await test_client.request(method, path, headers=admin_headers)
        assert response.status_code == 400
        assert response.json()["error"] == "Validation Failed"

    @pytest.mark.asyncio
    async def test_largest_id_is_not_found(self, test_client, admin_headers):
        response = await test_client.get("/guides/9223372036854775807", headers=admin_headers)
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_page_beyond_offset_range(self, test_client, admin_headers):
        response = await test_client.get(
            "/guides", params={"page": 999999999999999999, "size": 100}, headers=admin_headers
        )
        assert response.status_code == 400
        assert response.json()["message"].startswith("page:")

    @pytest.mark.asyncio
    async def test_last_page_is_empty(self, test_client, admin_headers):
        response = await test_client.get(
            "/guides", params={"page": MAX_PAGE, "size": MAX_PAGE_SIZE}, headers=admin_headers
        )
        assert response.status_code == 200
        assert response.json()["items"] == []

    @pytest.mark.asyncio
    async def test_malformed_json(self, test_client, admin_headers):
        response = await test_client.post(
            "/guides",
            content=b"{not json",
            headers={**admin_headers, "Content-Type": "application/json"},
        )
        assert response.status_code == 400


class TestRequestId:
    @pytest.mark.asyncio
    async def test_generated(self, test_client):
        response = await test_client.get("/users/ping")
        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_echoed(self, test_client):
        response = await test_client.get("/users/ping", headers={"X-Request-ID": "trace-123"})
        assert response.headers["X-Request-ID"] == "trace-123"


class TestSeed:
    @pytest.mark.asyncio
    async def test_seed_is_idempotent(self, test_client, db_session):
        assert await seed_demo_data(db_session) is True
        await db_session.commit()
        assert await seed_demo_data(db_session) is False

        login = await test_client.post(
            "/auth/login", json={"email": "user1@hws.com", "password": "user123"}
        )
        token = login.json()["token"]
        guides = await test_client.get("/guides", headers={"Authorization": f"Bearer {token}"})
        assert len(guides.json()) == 2
