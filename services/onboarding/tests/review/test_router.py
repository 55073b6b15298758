import pytest

from shared.constants import Role

STEPS = {
    "step1": {"full_name": "Ada Nurse", "email_address": "ada@example.com"},
    "step2": {"license_number": "RN-1234", "license_expiration_date": "2030-01-31"},
    "step3": {},
}


async def _submit(client, headers) -> str:
    for path, payload in STEPS.items():
        resp = await client.post(f"/api/v1/nurse-profile/{path}", json=payload, headers=headers)
        assert resp.status_code == 200
    resp = await client.post("/api/v1/nurse-profile/submit", headers=headers)
    assert resp.status_code == 201
    return resp.json()["submission_id"]


@pytest.mark.asyncio
async def test_queue_requires_admin(async_client, make_user, auth_headers) -> None:
    nurse = await make_user()
    resp = await async_client.get("/api/v1/admin/profile-submissions", headers=auth_headers(nurse))
    assert resp.status_code == 403
    assert resp.json()["error"]["code"] == "admin_required"


@pytest.mark.asyncio
async def test_admin_approves_nurse(async_client, make_user, auth_headers) -> None:
    admin = await make_user(role=Role.ADMIN)
    nurse = await make_user()
    nurse_headers = auth_headers(nurse)
    admin_headers = auth_headers(admin)
    submission_id = await _submit(async_client, nurse_headers)

    resp = await async_client.get("/api/v1/admin/profile-submissions", headers=admin_headers)
    assert resp.status_code == 200
    queue = resp.json()
    assert queue["total"] == 1
    assert queue["has_more"] is False
    assert queue["items"][0]["id"] == submission_id
    assert queue["items"][0]["user_email"] == nurse.email

    resp = await async_client.post(
        f"/api/v1/admin/profile-submissions/{submission_id}/start-review", headers=admin_headers
    )
    assert resp.status_code == 200
    assert resp.json()["status"] == "under_review"

    resp = await async_client.patch(
        f"/api/v1/admin/profile-submissions/{submission_id}/review",
        json={"action": "APPROVE", "notes": "Verified with the state board"},
        headers=admin_headers,
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "approved"
    assert [a["action"] for a in body["actions"]] == ["started_review", "approved"]

    resp = await async_client.get("/api/v1/nurse-profile-status/access", headers=nurse_headers)
    decision = resp.json()
    assert decision["can_access_platform"] is True
    assert decision["redirect_to"] is None


@pytest.mark.asyncio
async def test_reject_requires_reason(async_client, make_user, auth_headers) -> None:
    admin = await make_user(role=Role.ADMIN)
    nurse = await make_user()
    submission_id = await _submit(async_client, auth_headers(nurse))

    resp = await async_client.patch(
        f"/api/v1/admin/profile-submissions/{submission_id}/review",
        json={"action": "REJECT"},
        headers=auth_headers(admin),
    )
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_review_of_settled_submission_is_409(async_client, make_user, auth_headers) -> None:
    admin = await make_user(role=Role.ADMIN)
    nurse = await make_user()
    admin_headers = auth_headers(admin)
    submission_id = await _submit(async_client, auth_headers(nurse))
    url = f"/api/v1/admin/profile-submissions/{submission_id}/review"

    resp = await async_client.patch(
        url, json={"action": "REJECT", "reason": "Expired license"}, headers=admin_headers
    )
    assert resp.status_code == 200

    resp = await async_client.patch(url, json={"action": "APPROVE"}, headers=admin_headers)
    assert resp.status_code == 409
    error = resp.json()["error"]
    assert error["code"] == "submission_not_reviewable"
    assert error["status"] == "rejected"


@pytest.mark.asyncio
async def test_unknown_submission_is_404(async_client, make_user, auth_headers) -> None:
    admin = await make_user(role=Role.ADMIN)
    resp = await async_client.get(
        "/api/v1/admin/profile-submissions/00000000-0000-0000-0000-000000000000",
        headers=auth_headers(admin),
    )
    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "submission_not_found"
