"""Access controller — orchestration layer between router and service."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.access import service
from app.access.constants import Capability
from app.access.schemas import AccessDecision, AccessSummaryResponse, FeatureAccessResponse
from app.exceptions import http_error_for
from app.onboarding.exceptions import OnboardingError


async def get_access_decision(user_id: UUID, db: AsyncSession) -> AccessDecision:
    try:
        return await service.get_access_decision(db, user_id)
    except OnboardingError as exc:
        raise http_error_for(exc) from exc


async def can_access_feature(
    user_id: UUID, capability: Capability, db: AsyncSession
) -> FeatureAccessResponse:
    try:
        allowed = await service.can_access_feature(db, user_id, capability)
    except OnboardingError as exc:
        raise http_error_for(exc) from exc
    return FeatureAccessResponse(capability=capability, can_access=allowed)


async def get_access_summary(user_id: UUID, db: AsyncSession) -> AccessSummaryResponse:
    try:
        return await service.get_access_summary(db, user_id)
    except OnboardingError as exc:
        raise http_error_for(exc) from exc
