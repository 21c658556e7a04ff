"""
Journeo Backend — User Endpoint Tests
=======================================

What:  /users endpoints: public registration, ADMIN-only management.

What we test:
    ✅ /users/ping needs no token
    ✅ Registration: 201 + Location, default role USER, password never returned
    ✅ Duplicate email 409; ADMIN role needs an ADMIN caller
    ✅ USER callers get 403 on every management endpoint
    ✅ Partial update keeps blank fields; role change; invalid role 400
    ✅ Deleting a user removes their comments and guide assignments
"""

import pytest


class TestRegistration:
    @pytest.mark.asyncio
    async def test_ping(self, test_client):
        response = await test_client.get("/users/ping")
        assert response.status_code == 200
        assert response.text == "pong"

    @pytest.mark.asyncio
    async def test_register(self, test_client, db_engine):
        response = await test_client.post(
            "/users",
            json={"email": "new@example.com", "password": "pw123456", "firstName": "Nina"},
        )
        assert response.status_code == 201
        body = response.json()
        assert body["email"] == "new@example.com"
        assert body["role"] == "USER"
        assert body["firstName"] == "Nina"
        assert "password" not in body and "passwordHash" not in body
        assert response.headers["Location"].endswith(f"/users/{body['id']}")

        login = await test_client.post(
            "/auth/login", json={"email": "new@example.com", "password": "pw123456"}
        )
        assert login.status_code == 200

    @pytest.mark.asyncio
    async def test_duplicate_email(self, test_client, alice):
        response = await test_client.post(
            "/users", json={"email": alice.email, "password": "whatever1"}
        )
        assert response.status_code == 409
        assert response.json()["error"] == "Conflict"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {"email": "x@example.com"},
            {"password": "pw"},
            {"email": "  ", "password": "pw"},
        ],
    )
    async def test_missing_fields(self, test_client, db_engine, payload):
        response = await test_client.post("/users", json=payload)
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_anonymous_cannot_create_admin(self, test_client, db_engine):
        response = await test_client.post(
            "/users", json={"email": "boss@example.com", "password": "pw", "role": "ADMIN"}
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_user_cannot_create_admin(self, test_client, alice_headers):
        response = await test_client.post(
            "/users",
            json={"email": "boss@example.com", "password": "pw", "role": "ADMIN"},
            headers=alice_headers,
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_admin_creates_admin(self, test_client, admin_headers):
        response = await test_client.post(
            "/users",
            json={"email": "boss@example.com", "password": "pw", "role": "admin"},
            headers=admin_headers,
        )
        assert response.status_code == 201
        assert response.json()["role"] == "ADMIN"

    @pytest.mark.asyncio
    async def test_invalid_role(self, test_client, admin_headers):
        response = await test_client.post(
            "/users",
            json={"email": "x@example.com", "password": "pw", "role": "ROOT"},
            headers=admin_headers,
        )
        assert response.status_code == 400


class TestAdministration:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "method, path",
        [
            ("GET", "/users"),
            ("GET", "/users/1"),
            ("PUT", "/users/1"),
            ("DELETE", "/users/1"),
            ("PATCH", "/users/1/role"),
            ("GET", "/users/1/guides"),
        ],
    )
    async def test_user_role_is_forbidden(self, test_client, alice_headers, method, path):
        kwargs = {"json": {"role": "USER"}} if method in {"PUT", "PATCH"} else {}
        response = await test_client.request(method, path, headers=alice_headers, **kwargs)
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_list_and_get(self, test_client, admin_headers, alice):
        listing = await test_client.get("/users", headers=admin_headers)
        assert listing.status_code == 200
        assert {u["email"] for u in listing.json()} == {"admin@hws.com", alice.email}

        detail = await test_client.get(f"/users/{alice.id}", headers=admin_headers)
        assert detail.json()["lastName"] == "Martin"

        missing = await test_client.get("/users/9999", headers=admin_headers)
        assert missing.status_code == 404
        assert missing.json()["message"] == "User not found with id: 9999"

    @pytest.mark.asyncio
    async def test_partial_update(self, test_client, admin_headers, alice):
        response = await test_client.put(
            f"/users/{alice.id}",
            json={"firstName": "Alicia", "lastName": "  ", "password": ""},
            headers=admin_headers,
        )
        assert response.status_code == 200
        body = response.json()
        assert body["firstName"] == "Alicia"
        assert body["lastName"] == "Martin"
        assert body["email"] == alice.email

        # Blank password kept the old one
        login = await test_client.post(
            "/auth/login", json={"email": alice.email, "password": "alice-pw"}
        )
        assert login.status_code == 200

    @pytest.mark.asyncio
    async def test_update_password(self, test_client, admin_headers, alice):
        await test_client.put(
            f"/users/{alice.id}", json={"password": "fresh-pw"}, headers=admin_headers
        )
        login = await test_client.post(
            "/auth/login", json={"email": alice.email, "password": "fresh-pw"}
        )
        assert login.status_code == 200

    @pytest.mark.asyncio
    async def test_update_to_taken_email(self, test_client, admin_headers, alice, bob):
        response = await test_client.put(
            f"/users/{alice.id}", json={"email": bob.email}, headers=admin_headers
        )
        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_change_role(self, test_client, admin_headers, alice):
        response = await test_client.patch(
            f"/users/{alice.id}/role", json={"role": "ADMIN"}, headers=admin_headers
        )
        assert response.status_code == 200
        assert response.json()["role"] == "ADMIN"

        invalid = await test_client.patch(
            f"/users/{alice.id}/role", json={"role": "OWNER"}, headers=admin_headers
        )
        assert invalid.status_code == 400

    @pytest.mark.asyncio
    async def test_guides_of_user(self, test_client, admin_headers, alice, make_guide):
        assigned = await make_guide(title="Loire", members=[alice])
        await make_guide(title="Alpes")

        response = await test_client.get(f"/users/{alice.id}/guides", headers=admin_headers)
        assert response.status_code == 200
        assert [g["id"] for g in response.json()] == [assigned["id"]]

    @pytest.mark.asyncio
    async def test_delete_user_cascades(
        self, test_client, admin_headers, alice, alice_headers, bob, bob_headers, make_guide
    ):
        guide = await make_guide(members=[alice, bob])
        gid = guide["id"]
        await test_client.post(
            f"/guides/{gid}/comments", json={"content": "Top", "rating": 5}, headers=alice_headers
        )
        await test_client.post(
            f"/guides/{gid}/comments", json={"content": "Bof", "rating": 2}, headers=bob_headers
        )

        response = await test_client.delete(f"/users/{alice.id}", headers=admin_headers)
        assert response.status_code == 200
        assert response.content == b""

        after = (await test_client.get(f"/guides/{gid}", headers=admin_headers)).json()
        assert [u["id"] for u in after["users"]] == [bob.id]
        assert after["averageRating"] == 2.0

        comments = await test_client.get(f"/guides/{gid}/comments", headers=admin_headers)
        assert [c["authorEmail"] for c in comments.json()] == [bob.email]

        gone = await test_client.get(f"/users/{alice.id}", headers=admin_headers)
        assert gone.status_code == 404
