"""Onboarding controller — orchestration layer between router and service."""

from uuid import UUID

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import http_error_for
from app.onboarding import service
from app.onboarding.exceptions import OnboardingError
from app.onboarding.models import NurseProfile
from app.onboarding.schemas import (
    ProfileCompletionStatusView,
    StepAccessResponse,
    StepDataResponse,
    StepSavedResponse,
    SubmitResponse,
)

_STEP_MESSAGES = {
    1: "Basic information saved.",
    2: "Verification documents saved.",
    3: "Professional profile saved. You can now submit it for review.",
}


def _status_view(profile: NurseProfile) -> ProfileCompletionStatusView:
    return ProfileCompletionStatusView(
        status=profile.completion_status,
        step1_completed=profile.step1_completed,
        step2_completed=profile.step2_completed,
        step3_completed=profile.step3_completed,
        step1_completed_at=profile.step1_completed_at,
        step2_completed_at=profile.step2_completed_at,
        step3_completed_at=profile.step3_completed_at,
        submitted_at=profile.submitted_at,
        next_step=service.next_step(profile),
        completion_percentage=service.completion_percentage(profile),
    )


async def get_status(user_id: UUID, db: AsyncSession) -> ProfileCompletionStatusView:
    try:
        profile = await service.get_status(db, user_id)
    except OnboardingError as exc:
        raise http_error_for(exc) from exc
    return _status_view(profile)


async def save_step(
    user_id: UUID, step: int, payload: BaseModel, db: AsyncSession
) -> StepSavedResponse:
    try:
        profile = await service.save_step(db, user_id, step, payload)
    except OnboardingError as exc:
        raise http_error_for(exc) from exc
    return StepSavedResponse(step=step, message=_STEP_MESSAGES[step], profile=_status_view(profile))


async def submit(user_id: UUID, db: AsyncSession) -> SubmitResponse:
    try:
        submission = await service.submit(db, user_id)
    except OnboardingError as exc:
        raise http_error_for(exc) from exc
    return SubmitResponse(
        submission_id=submission.id,
        status=submission.status,
        submitted_at=submission.submitted_at,
        message="Profile submitted for review. You'll be notified once an admin has reviewed it.",
    )


async def can_access_step(user_id: UUID, step: int, db: AsyncSession) -> StepAccessResponse:
    try:
        allowed = await service.can_access_step(db, user_id, step)
    except OnboardingError as exc:
        raise http_error_for(exc) from exc
    return StepAccessResponse(step=step, can_access=allowed)


async def get_step_data(user_id: UUID, step: int, db: AsyncSession) -> StepDataResponse:
    try:
        data = await service.get_step_data(db, user_id, step)
    except OnboardingError as exc:
        raise http_error_for(exc) from exc
    return StepDataResponse(step=step, data=data)
