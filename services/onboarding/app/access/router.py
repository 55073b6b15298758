"""Access status router — /api/v1/nurse-profile-status endpoints.

Read-only views of the access decision for the current nurse, used by the
frontend to decide where to route. Zero business logic — delegates to controller.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.access import controller
from app.access.constants import Capability
from app.access.schemas import AccessDecision, AccessSummaryResponse, FeatureAccessResponse
from app.auth.dependencies import require_nurse
from app.database import get_db
from shared.models.user import CurrentUser

router = APIRouter(prefix="/nurse-profile-status", tags=["Access"])

_403 = {"description": "Caller is not a nurse"}
_503 = {"description": "Account store unavailable"}


@router.get(
    "/access",
    response_model=AccessDecision,
    summary="Current access decision",
    description=(
        "Full capability set for the authenticated nurse, with the redirect "
        "target and next required action when access is restricted."
    ),
    responses={403: _403, 503: _503},
)
async def get_access(
    current_user: CurrentUser = Depends(require_nurse),
    db: AsyncSession = Depends(get_db),
) -> AccessDecision:
    return await controller.get_access_decision(current_user.id, db)


@router.get(
    "/can-access/{capability}",
    response_model=FeatureAccessResponse,
    summary="Check one capability",
    responses={403: _403, 503: _503},
)
async def can_access(
    capability: Capability,
    current_user: CurrentUser = Depends(require_nurse),
    db: AsyncSession = Depends(get_db),
) -> FeatureAccessResponse:
    return await controller.can_access_feature(current_user.id, capability, db)


@router.get(
    "/summary",
    response_model=AccessSummaryResponse,
    summary="Onboarding summary",
    description="Progress, next step and a user-facing status message.",
    responses={403: _403, 503: _503},
)
async def get_summary(
    current_user: CurrentUser = Depends(require_nurse),
    db: AsyncSession = Depends(get_db),
) -> AccessSummaryResponse:
    return await controller.get_access_summary(current_user.id, db)
