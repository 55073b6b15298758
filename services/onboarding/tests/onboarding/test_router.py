import pytest

from shared.constants import Role

STEP1 = {"full_name": "Ada Nurse", "email_address": "ada@example.com"}
STEP2 = {
    "license_number": "RN-1234",
    "license_expiration_date": "2030-01-31",
    "license_document": {
        "file_name": "license-1234.pdf",
        "original_name": "license.pdf",
        "file_url": "https://uploads.example.com/license-1234.pdf",
        "file_type": "application/pdf",
        "file_size": 20480,
    },
}
STEP3 = {"certification_name": "BLS", "skills": ["triage"], "graduation_date": "2019-06-01"}


@pytest.mark.asyncio
async def test_health(async_client) -> None:
    resp = await async_client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "service": "onboarding"}


@pytest.mark.asyncio
async def test_status_requires_token(async_client) -> None:
    resp = await async_client.get("/api/v1/nurse-profile/status")
    assert resp.status_code == 401
    body = resp.json()
    assert body["error"]["message"] == "Not authenticated"
    assert resp.headers["X-Request-ID"] == body["request_id"]


@pytest.mark.asyncio
async def test_status_rejects_non_nurse(async_client, make_user, auth_headers) -> None:
    admin = await make_user(role=Role.ADMIN)
    resp = await async_client.get("/api/v1/nurse-profile/status", headers=auth_headers(admin))
    assert resp.status_code == 403
    assert resp.json()["error"]["code"] == "not_nurse"


@pytest.mark.asyncio
async def test_status_of_new_nurse(async_client, make_user, auth_headers) -> None:
    nurse = await make_user()
    resp = await async_client.get("/api/v1/nurse-profile/status", headers=auth_headers(nurse))
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "not_started"
    assert body["next_step"] == 1
    assert body["completion_percentage"] == 0
    assert body["submitted_at"] is None


@pytest.mark.asyncio
async def test_out_of_order_step_is_409_naming_missing_step(
    async_client, make_user, auth_headers
) -> None:
    nurse = await make_user()
    resp = await async_client.post(
        "/api/v1/nurse-profile/step3", json=STEP3, headers=auth_headers(nurse)
    )
    assert resp.status_code == 409
    error = resp.json()["error"]
    assert error["code"] == "sequence_violation"
    assert error["missing_step"] == 1
    assert "Step 1" in error["message"]


@pytest.mark.asyncio
async def test_step_payload_is_validated(async_client, make_user, auth_headers) -> None:
    nurse = await make_user()
    resp = await async_client.post(
        "/api/v1/nurse-profile/step1",
        json={"full_name": "Ada Nurse", "email_address": "not-an-email"},
        headers=auth_headers(nurse),
    )
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_full_onboarding_flow(async_client, make_user, auth_headers) -> None:
    nurse = await make_user()
    headers = auth_headers(nurse)

    resp = await async_client.post("/api/v1/nurse-profile/step1", json=STEP1, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["profile"]["status"] == "step_1_completed"

    resp = await async_client.get("/api/v1/nurse-profile/can-access/2", headers=headers)
    assert resp.json() == {"step": 2, "can_access": True}

    resp = await async_client.post("/api/v1/nurse-profile/step2", json=STEP2, headers=headers)
    assert resp.status_code == 200

    resp = await async_client.get("/api/v1/nurse-profile/step/2", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["data"]["license_document"]["file_name"] == "license-1234.pdf"

    resp = await async_client.post("/api/v1/nurse-profile/step3", json=STEP3, headers=headers)
    assert resp.status_code == 200
    profile = resp.json()["profile"]
    assert profile["status"] == "step_3_completed"
    assert profile["next_step"] == 4

    resp = await async_client.get("/api/v1/nurse-profile-status/access", headers=headers)
    assert resp.json()["next_required_action"] == "submit_profile"

    resp = await async_client.post("/api/v1/nurse-profile/submit", headers=headers)
    assert resp.status_code == 201
    assert resp.json()["status"] == "pending"

    resp = await async_client.get("/api/v1/nurse-profile/status", headers=headers)
    assert resp.json()["status"] == "submitted"

    resp = await async_client.get("/api/v1/nurse-profile-status/access", headers=headers)
    decision = resp.json()
    assert decision["can_access_platform"] is False
    assert decision["can_access_profile"] is True
    assert decision["redirect_to"] == "/verification-pending"
    assert decision["next_required_action"] == "wait_for_approval"

    resp = await async_client.post("/api/v1/nurse-profile/submit", headers=headers)
    assert resp.status_code == 409
    assert resp.json()["error"]["code"] == "duplicate_submission"


@pytest.mark.asyncio
async def test_step_data_not_reachable_yet(async_client, make_user, auth_headers) -> None:
    nurse = await make_user()
    resp = await async_client.get("/api/v1/nurse-profile/step/3", headers=auth_headers(nurse))
    assert resp.status_code == 403
    assert resp.json()["error"]["code"] == "step_not_accessible"


@pytest.mark.asyncio
async def test_submit_incomplete_profile(async_client, make_user, auth_headers) -> None:
    nurse = await make_user()
    headers = auth_headers(nurse)
    await async_client.post("/api/v1/nurse-profile/step1", json=STEP1, headers=headers)
    resp = await async_client.post("/api/v1/nurse-profile/submit", headers=headers)
    assert resp.status_code == 409
    error = resp.json()["error"]
    assert error["code"] == "incomplete_profile"
    assert error["missing_steps"] == [2, 3]
