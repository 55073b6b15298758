import pytest
import pytest_asyncio
from fastapi import APIRouter, Depends, FastAPI
from httpx import ASGITransport, AsyncClient
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.access.constants import Capability
from app.access.dependencies import require_access
from app.accounts.constants import AccountStatus
from app.database import get_db
from shared.constants import Role
from shared.database.postgres import session_scope
from shared.middleware.error_handler import http_exception_envelope_handler
from shared.middleware.request_id import request_id_middleware
from shared.models.user import CurrentUser


@pytest.fixture
def protected_app(session_factory) -> FastAPI:
    """A downstream service guarding its own routes with require_access."""
    app = FastAPI()
    app.add_exception_handler(StarletteHTTPException, http_exception_envelope_handler)
    app.middleware("http")(request_id_middleware)

    router = APIRouter(prefix="/api/v1")

    @router.get("/requests")
    async def list_requests(
        current_user: CurrentUser = Depends(require_access(Capability.REQUESTS)),
    ) -> dict:
        return {"caller": str(current_user.id)}

    @router.get("/nurse-profile/documents", dependencies=[Depends(require_access(Capability.PLATFORM))])
    async def onboarding_documents() -> dict:
        return {"ok": True}

    app.include_router(router)

    async def _get_db():
        async with session_scope(session_factory) as session:
            yield session

    app.dependency_overrides[get_db] = _get_db
    return app


@pytest_asyncio.fixture
async def protected_client(protected_app):
    transport = ASGITransport(app=protected_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.mark.asyncio
async def test_unfinished_nurse_gets_403_with_redirect(
    protected_client, make_user, auth_headers
) -> None:
    nurse = await make_user()
    resp = await protected_client.get("/api/v1/requests", headers=auth_headers(nurse))
    assert resp.status_code == 403
    error = resp.json()["error"]
    assert error["code"] == "nurse_access_denied"
    assert error["message"] == "Profile setup required"
    assert error["redirect_to"] == "/nurse-profile-complete"
    assert error["next_required_action"] == "complete_step_1"
    assert error["current_step"] == 1
    assert error["capability"] == "requests"


@pytest.mark.asyncio
async def test_verified_nurse_passes(protected_client, make_user, auth_headers) -> None:
    nurse = await make_user(account_status=AccountStatus.VERIFIED)
    resp = await protected_client.get("/api/v1/requests", headers=auth_headers(nurse))
    assert resp.status_code == 200
    assert resp.json() == {"caller": str(nurse.id)}


@pytest.mark.asyncio
async def test_rejected_nurse_is_sent_to_account_rejected(
    protected_client, make_user, auth_headers
) -> None:
    nurse = await make_user(account_status=AccountStatus.REJECTED)
    resp = await protected_client.get("/api/v1/requests", headers=auth_headers(nurse))
    assert resp.status_code == 403
    assert resp.json()["error"]["redirect_to"] == "/account-rejected"


@pytest.mark.asyncio
async def test_patient_is_not_gated(protected_client, make_user, auth_headers) -> None:
    patient = await make_user(role=Role.PATIENT)
    resp = await protected_client.get("/api/v1/requests", headers=auth_headers(patient))
    assert resp.status_code == 200


@pytest.mark.asyncio
async def test_onboarding_paths_stay_reachable(protected_client, make_user, auth_headers) -> None:
    nurse = await make_user()
    resp = await protected_client.get("/api/v1/nurse-profile/documents", headers=auth_headers(nurse))
    assert resp.status_code == 200


@pytest.mark.asyncio
async def test_status_endpoints(async_client, make_user, auth_headers) -> None:
    nurse = await make_user()
    headers = auth_headers(nurse)

    resp = await async_client.get("/api/v1/nurse-profile-status/can-access/profile", headers=headers)
    assert resp.json() == {"capability": "profile", "can_access": True}

    resp = await async_client.get("/api/v1/nurse-profile-status/can-access/platform", headers=headers)
    assert resp.json() == {"capability": "platform", "can_access": False}

    resp = await async_client.get("/api/v1/nurse-profile-status/summary", headers=headers)
    summary = resp.json()
    assert summary["next_step"] == 1
    assert summary["completion_percentage"] == 0
    assert summary["next_required_action"] == "complete_step_1"


@pytest.mark.asyncio
async def test_unknown_capability_is_422(async_client, make_user, auth_headers) -> None:
    nurse = await make_user()
    resp = await async_client.get(
        "/api/v1/nurse-profile-status/can-access/billing", headers=auth_headers(nurse)
    )
    assert resp.status_code == 422
