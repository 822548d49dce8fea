"""
Roster Backend — Students API Tests
=====================================

What:  HTTP-level tests for the /students endpoints and the reset route.
How:   httpx.AsyncClient over ASGITransport against a fresh app per test
       (see conftest.py), so no real server and no shared state.
"""

import logging

import pytest
from httpx import ASGITransport, AsyncClient

from app.config import Settings
from app.main import create_app
from app.services.student_registry import StudentRegistry


class TestStudentsCrud:
    """The create → read → update → delete walkthrough from the exercise."""

    @pytest.mark.asyncio
    async def test_full_lifecycle(self, test_client, sample_student):
        created = await test_client.post("/students", json=sample_student)
        assert created.status_code == 201
        assert created.json() == {"id": 1, "name": "Ana", "group": "G1"}
        assert created.headers["Location"] == "/students/1"

        listed = await test_client.get("/students")
        assert listed.status_code == 200
        assert listed.json() == [{"id": 1, "name": "Ana", "group": "G1"}]
        assert listed.headers["X-Total-Count"] == "1"

        single = await test_client.get("/students/1")
        assert single.status_code == 200
        assert single.json() == created.json()

        updated = await test_client.put("/students/1", json={"name": "Ana María", "group": "G2"})
        assert updated.status_code == 200
        assert updated.json() == {"id": 1, "name": "Ana María", "group": "G2"}

        deleted = await test_client.delete("/students/1")
        assert deleted.status_code == 204
        assert deleted.content == b""

        missing = await test_client.get("/students/1")
        assert missing.status_code == 404
        assert missing.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_list_starts_empty(self, test_client):
        response = await test_client.get("/students")

        assert response.status_code == 200
        assert response.json() == []
        assert response.headers["X-Total-Count"] == "0"

    @pytest.mark.asyncio
    async def test_list_returns_records_in_creation_order(self, test_client):
        for name in ("Carla", "Ana", "Bruno"):
            await test_client.post("/students", json={"name": name, "group": "G1"})

        response = await test_client.get("/students")

        assert [s["name"] for s in response.json()] == ["Carla", "Ana", "Bruno"]
        assert [s["id"] for s in response.json()] == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_create_trims_name(self, test_client):
        response = await test_client.post("/students", json={"name": "  Ana ", "group": "G1"})

        assert response.status_code == 201
        assert response.json()["name"] == "Ana"


class TestStudentsValidation:
    """Invalid payloads are 400 and never change state."""

    @pytest.mark.asyncio
    async def test_create_blank_name_is_rejected(self, test_client, registry):
        response = await test_client.post("/students", json={"name": "", "group": "G1"})

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert body["message"] == "Invalid student payload"
        assert body["details"]["fields"] == ["name"]
        assert len(registry) == 0
        assert registry.next_id == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {"group": "G1"},
            {"name": "Ana"},
            {"name": 7, "group": "G1"},
            {"name": "Ana", "group": False},
            [{"name": "Ana", "group": "G1"}],
            "Ana",
            None,
        ],
    )
    async def test_create_rejects_bad_shapes(self, test_client, registry, payload):
        response = await test_client.post("/students", json=payload)

        assert response.status_code == 400
        assert len(registry) == 0

    @pytest.mark.asyncio
    async def test_create_without_body_is_rejected(self, test_client):
        response = await test_client.post("/students")

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_create_malformed_json_is_rejected(self, test_client, registry):
        response = await test_client.post(
            "/students",
            content=b'{"name": "Ana", ',
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"
        assert len(registry) == 0

    @pytest.mark.asyncio
    async def test_update_invalid_payload_is_rejected(self, test_client, sample_student):
        await test_client.post("/students", json=sample_student)

        response = await test_client.put("/students/1", json={"name": "   ", "group": "G2"})

        assert response.status_code == 400
        assert (await test_client.get("/students/1")).json() == {"id": 1, "name": "Ana", "group": "G1"}


class TestStudentsNotFound:
    """Unknown ids are 404 on every verb."""

    @pytest.mark.asyncio
    async def test_get_unknown(self, test_client):
        response = await test_client.get("/students/99")

        assert response.status_code == 404
        assert response.json()["message"] == "student with ID '99' was not found"

    @pytest.mark.asyncio
    async def test_update_unknown_does_not_create(self, test_client, registry):
        response = await test_client.put("/students/99", json={"name": "Ana", "group": "G1"})

        assert response.status_code == 404
        assert len(registry) == 0
        assert registry.next_id == 1

    @pytest.mark.asyncio
    async def test_update_unknown_with_bad_payload_is_404(self, test_client):
        response = await test_client.put("/students/99", json={"name": "", "group": "G1"})

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_unknown(self, test_client):
        response = await test_client.delete("/students/99")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_twice(self, test_client, sample_student):
        await test_client.post("/students", json=sample_student)

        assert (await test_client.delete("/students/1")).status_code == 204
        assert (await test_client.delete("/students/1")).status_code == 404

    @pytest.mark.asyncio
    @pytest.mark.parametrize("bad_id", ["abc", "1.5"])
    async def test_non_integer_id_is_404(self, test_client, bad_id):
        response = await test_client.get(f"/students/{bad_id}")

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_deleted_id_is_not_reissued(self, test_client, sample_student):
        await test_client.post("/students", json=sample_student)
        await test_client.delete("/students/1")

        response = await test_client.post("/students", json={"name": "Bea", "group": "G1"})

        assert response.json()["id"] == 2


class TestFrameworkErrors:
    """Errors raised by routing and body decoding use the same error body."""

    @pytest.mark.asyncio
    async def test_non_utf8_body_is_validation_error(self, test_client, registry):
        response = await test_client.post(
            "/students",
            content=b'{"name":"\xff","group":"G"}',
            headers={"Content-Type": "application/json", "X-Request-ID": "bad-bytes"},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert body["request_id"] == "bad-bytes"
        assert len(registry) == 0

    @pytest.mark.asyncio
    async def test_wrong_verb_is_405_with_error_body(self, test_client):
        response = await test_client.patch("/students/1", json={"name": "Ana", "group": "G1"})

        assert response.status_code == 405
        body = response.json()
        assert body["error"] == "method_not_allowed"
        assert "request_id" in body
        assert "PUT" in response.headers["Allow"]

    @pytest.mark.asyncio
    async def test_unknown_route_is_not_found_body(self, test_client):
        response = await test_client.get("/nope")

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"
        assert "detail" not in response.json()


class TestResetRoute:
    """DELETE /__test__/reset and per-app isolation."""

    @pytest.mark.asyncio
    async def test_reset_empties_roster_and_restarts_ids(self, test_client, sample_student):
        await test_client.post("/students", json=sample_student)
        await test_client.post("/students", json=sample_student)

        response = await test_client.delete("/__test__/reset")

        assert response.status_code == 204
        assert (await test_client.get("/students")).json() == []
        created = await test_client.post("/students", json=sample_student)
        assert created.json()["id"] == 1

    @pytest.mark.asyncio
    async def test_reset_route_absent_when_disabled(self):
        app = create_app(
            app_settings=Settings(expose_test_routes=False, rate_limit_enabled=False),
        )
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.delete("/__test__/reset")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_apps_do_not_share_state(self, test_client, sample_student, test_settings):
        await test_client.post("/students", json=sample_student)

        other = create_app(registry=StudentRegistry(), app_settings=test_settings)
        transport = ASGITransport(app=other)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/students")

        assert response.json() == []

    @pytest.mark.asyncio
    async def test_reset_is_logged(self, test_client, sample_student, caplog):
        await test_client.post("/students", json=sample_student)

        with caplog.at_level(logging.INFO, logger="app.routes.testing"):
            await test_client.delete("/__test__/reset")

        assert any("1 students dropped" in r.getMessage() for r in caplog.records)
