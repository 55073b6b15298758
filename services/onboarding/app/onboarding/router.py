"""Onboarding router — /api/v1/nurse-profile endpoints.

The three-step completion flow and submission for admin review.
Zero business logic — delegates entirely to controller.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import require_nurse
from app.database import get_db
from app.onboarding import controller
from app.onboarding.schemas import (
    ProfileCompletionStatusView,
    Step1BasicInfo,
    Step2Verification,
    Step3CompleteProfile,
    StepAccessResponse,
    StepDataResponse,
    StepSavedResponse,
    SubmitResponse,
)
from shared.models.user import CurrentUser

router = APIRouter(prefix="/nurse-profile", tags=["Nurse Profile"])

_403 = {"description": "Caller is not a nurse, or the step is not reachable yet"}
_409 = {"description": "Step out of sequence, profile incomplete, or already submitted"}
_422 = {"description": "Validation error"}
_503 = {"description": "Profile store unavailable"}


@router.get(
    "/status",
    response_model=ProfileCompletionStatusView,
    summary="Profile completion status",
    description="Creates an empty profile on first call.",
    responses={403: _403, 503: _503},
)
async def get_status(
    current_user: CurrentUser = Depends(require_nurse),
    db: AsyncSession = Depends(get_db),
) -> ProfileCompletionStatusView:
    return await controller.get_status(current_user.id, db)


@router.get(
    "/step/{step}",
    response_model=StepDataResponse,
    summary="Saved data for one step",
    responses={403: _403, 422: _422, 503: _503},
)
async def get_step_data(
    step: int,
    current_user: CurrentUser = Depends(require_nurse),
    db: AsyncSession = Depends(get_db),
) -> StepDataResponse:
    return await controller.get_step_data(current_user.id, step, db)


@router.post(
    "/step1",
    response_model=StepSavedResponse,
    summary="Save step 1 — basic information",
    responses={403: _403, 422: _422, 503: _503},
)
async def save_step1(
    body: Step1BasicInfo,
    current_user: CurrentUser = Depends(require_nurse),
    db: AsyncSession = Depends(get_db),
) -> StepSavedResponse:
    return await controller.save_step(current_user.id, 1, body, db)


@router.post(
    "/step2",
    response_model=StepSavedResponse,
    summary="Save step 2 — verification documents",
    description="Requires step 1. Returns 409 with the missing step otherwise.",
    responses={403: _403, 409: _409, 422: _422, 503: _503},
)
async def save_step2(
    body: Step2Verification,
    current_user: CurrentUser = Depends(require_nurse),
    db: AsyncSession = Depends(get_db),
) -> StepSavedResponse:
    return await controller.save_step(current_user.id, 2, body, db)


@router.post(
    "/step3",
    response_model=StepSavedResponse,
    summary="Save step 3 — professional profile",
    description="Requires steps 1 and 2. Returns 409 with the missing step otherwise.",
    responses={403: _403, 409: _409, 422: _422, 503: _503},
)
async def save_step3(
    body: Step3CompleteProfile,
    current_user: CurrentUser = Depends(require_nurse),
    db: AsyncSession = Depends(get_db),
) -> StepSavedResponse:
    return await controller.save_step(current_user.id, 3, body, db)


@router.post(
    "/submit",
    response_model=SubmitResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit the profile for review",
    description=(
        "Requires all three steps. At most one submission per nurse can be "
        "pending or under review; a second submit returns 409."
    ),
    responses={403: _403, 409: _409, 503: _503},
)
async def submit(
    current_user: CurrentUser = Depends(require_nurse),
    db: AsyncSession = Depends(get_db),
) -> SubmitResponse:
    return await controller.submit(current_user.id, db)


@router.get(
    "/can-access/{step}",
    response_model=StepAccessResponse,
    summary="Whether a step can be opened",
    responses={403: _403, 503: _503},
)
async def can_access_step(
    step: int,
    current_user: CurrentUser = Depends(require_nurse),
    db: AsyncSession = Depends(get_db),
) -> StepAccessResponse:
    return await controller.can_access_step(current_user.id, step, db)
