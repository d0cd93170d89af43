"""
Route tests: the FastAPI app driven through httpx with the identity
dependency overridden to a fixed owner.
"""

import httpx
import pytest
from bson import ObjectId

from placement_tracker.core.monitoring import monitoring
from placement_tracker.core.security import CurrentOwner, create_access_token, get_current_owner
from placement_tracker.main import app


@pytest.fixture
async def client(db, owner_id):
    app.dependency_overrides[get_current_owner] = lambda: CurrentOwner(owner_id=owner_id)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
async def anonymous_client(db):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


class TestCatalog:

    async def test_health(self, client):
        response = await client.get("/")

        assert response.status_code == 200
        assert "X-Response-Time" in response.headers

    async def test_list_drives_with_search(self, client, drive, single_stage_drive):
        response = await client.get("/api/drives", params={"search": "acme"})

        body = response.json()
        assert response.status_code == 200
        assert body["total"] == 1
        assert body["drives"][0]["company"] == "Acme Corp"

    async def test_list_roles(self, client, role):
        response = await client.get("/api/roles")

        assert response.status_code == 200
        assert response.json()["roles"][0]["title"] == "Frontend Developer"

    async def test_response_times_are_keyed_by_route(self, client):
        for _ in range(5):
            await client.get(f"/api/drives/{ObjectId()}")

        keys = [key for key in monitoring.get_metrics() if key.startswith("response_time_")]
        assert keys == ["response_time_/api/drives/{drive_id}"]
        assert len(monitoring.get_metrics()[keys[0]]) == 5

    async def test_get_missing_role(self, client):
        response = await client.get(f"/api/roles/{ObjectId()}")

        assert response.status_code == 404
        assert response.json()["error"]["details"] == "Job role not found"


class TestApplicationRoutes:

    async def test_apply_and_progress(self, client, drive):
        response = await client.post(f"/api/drives/{drive.id}/apply")
        application_id = response.json()["id"]

        assert response.status_code == 201
        assert response.json()["current_stage"] == "Online Test"

        response = await client.put(
            f"/api/applications/{application_id}/status",
            json={"status": "interview", "process_stage_index": 2},
        )
        assert response.status_code == 200
        assert response.json()["next_step"] == "Process Complete"

        response = await client.get(f"/api/applications/status/{application_id}")
        assert response.json()["application"]["progress"] == 100
        assert response.json()["drive"]["id"] == str(drive.id)

    async def test_apply_with_resume(self, client, role):
        response = await client.post(
            f"/api/roles/{role.id}/apply",
            json={"resume": "https://cdn.example.com/cv.pdf", "cover_letter": "Hello"},
        )

        assert response.status_code == 201
        assert response.json()["resume"] == "https://cdn.example.com/cv.pdf"
        assert response.json()["cover_letter"] == "Hello"

    async def test_duplicate_apply_is_409(self, client, role):
        await client.post(f"/api/roles/{role.id}/apply")

        response = await client.post(f"/api/roles/{role.id}/apply")

        error = response.json()["error"]
        assert response.status_code == 409
        assert error["code"] == "RES_1302"
        assert error["details"] == "Already applied for this role"
        assert "timestamp" in error

    async def test_bookmark_status_codes(self, client, role, drive):
        created = await client.post("/api/applications/bookmark", json={"role_id": str(role.id)})
        await client.post(f"/api/drives/{drive.id}/apply")
        converted = await client.post("/api/applications/bookmark", json={"drive_id": str(drive.id)})

        assert created.status_code == 201
        assert converted.status_code == 200
        assert converted.json()["status"] == "bookmarked"

    async def test_bookmark_requires_exactly_one_target(self, client, role, drive):
        neither = await client.post("/api/applications/bookmark", json={})
        both = await client.post(
            "/api/applications/bookmark",
            json={"role_id": str(role.id), "drive_id": str(drive.id)},
        )

        assert neither.status_code == 400
        assert both.status_code == 400
        assert neither.json()["error"]["code"] == "VAL_1204"

    async def test_withdraw_twice(self, client, drive):
        application_id = (await client.post(f"/api/drives/{drive.id}/apply")).json()["id"]

        first = await client.post(f"/api/applications/{application_id}/withdraw")
        second = await client.post(f"/api/applications/{application_id}/withdraw")

        assert first.status_code == 200
        assert first.json()["application"]["status"] == "withdrawn"
        assert second.status_code == 409

    async def test_timeline(self, client, role):
        application_id = (await client.post(f"/api/roles/{role.id}/apply")).json()["id"]

        response = await client.get(f"/api/applications/{application_id}/timeline")

        assert response.status_code == 200
        assert [entry["stage"] for entry in response.json()] == ["Applied"]

    async def test_list_stats_and_check(self, client, drive, role):
        await client.post(f"/api/drives/{drive.id}/apply")
        await client.post("/api/applications/bookmark", json={"role_id": str(role.id)})

        listing = await client.get("/api/applications", params={"status": "bookmarked"})
        stats = await client.get("/api/applications/stats")
        check = await client.get(f"/api/applications/check/drive/{drive.id}")
        drives = await client.get("/api/applications/drives")

        assert listing.json()["total"] == 1
        assert listing.json()["applications"][0]["type"] == "role"
        assert stats.json()["total"] == 2
        assert stats.json()["applied"] == 1
        assert check.json()["has_applied"] is True
        assert len(drives.json()["applications"]) == 1

    async def test_invalid_check_kind(self, client):
        response = await client.get(f"/api/applications/check/company/{ObjectId()}")

        assert response.status_code == 400

    async def test_delete(self, client, drive):
        application_id = (await client.post(f"/api/drives/{drive.id}/apply")).json()["id"]

        deleted = await client.delete(f"/api/applications/{application_id}")
        missing = await client.get(f"/api/applications/{application_id}")

        assert deleted.status_code == 200
        assert missing.status_code == 404

    async def test_invalid_application_id(self, client):
        response = await client.get("/api/applications/not-an-id")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VAL_1202"


class TestAuthentication:

    async def test_missing_token(self, anonymous_client):
        response = await anonymous_client.get("/api/applications")

        assert response.status_code in (401, 403)

    async def test_bad_token(self, anonymous_client):
        response = await anonymous_client.get(
            "/api/applications", headers={"Authorization": "Bearer garbage"}
        )

        assert response.status_code == 401

    async def test_valid_token(self, anonymous_client, owner_id, drive):
        token = create_access_token({"sub": owner_id})
        headers = {"Authorization": f"Bearer {token}"}

        await anonymous_client.post(f"/api/drives/{drive.id}/apply", headers=headers)
        response = await anonymous_client.get("/api/applications", headers=headers)

        assert response.status_code == 200
        assert response.json()["total"] == 1

    async def test_token_without_object_id_subject(self, anonymous_client):
        token = create_access_token({"sub": "someone@example.com"})

        response = await anonymous_client.get(
            "/api/applications", headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 401
