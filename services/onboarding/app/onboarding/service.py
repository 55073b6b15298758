"""
Onboarding domain — pure business logic (zero FastAPI imports).

Completion workflow:
  not_started → step_1_completed → step_2_completed → step_3_completed
              → submitted   submit()

  save_step(1)   always allowed
  save_step(2)   requires step 1
  save_step(3)   requires steps 1 and 2
  submit()       requires all three; creates exactly one Submission

Re-saving an earlier step never moves completion_status backwards, and a
step's completed_at keeps the time of its first save.
"""
from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from app.accounts import service as accounts
from app.accounts.service import AccountSnapshot
from app.onboarding import store
from app.onboarding.constants import STEPS, ProfileCompletionStatus
from app.onboarding.exceptions import (
    AccountNotFoundError,
    IncompleteProfileError,
    InvalidStepError,
    NotNurseError,
    ProfileAlreadyApprovedError,
    SequenceViolation,
    StepNotAccessibleError,
)
from app.onboarding.models import NurseProfile, ProfileSubmission
from shared.constants import Role

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _check_step(step: int) -> None:
    if step not in STEPS:
        raise InvalidStepError(step)


def completed_steps(profile: NurseProfile | None) -> list[int]:
    if profile is None:
        return []
    flags = (profile.step1_completed, profile.step2_completed, profile.step3_completed)
    return [step for step, done in zip(STEPS, flags) if done]


def missing_steps(profile: NurseProfile | None, up_to: int = STEPS[-1]) -> list[int]:
    done = completed_steps(profile)
    return [step for step in STEPS if step <= up_to and step not in done]


def next_step(profile: NurseProfile | None) -> int:
    """First step still to do; 4 means every step is done and the profile can be submitted."""
    missing = missing_steps(profile)
    return missing[0] if missing else len(STEPS) + 1


def completion_percentage(profile: NurseProfile | None) -> int:
    return round(len(completed_steps(profile)) / len(STEPS) * 100)


async def _require_nurse(session: AsyncSession, user_id: uuid.UUID) -> AccountSnapshot:
    account = await accounts.get_account_status(session, user_id)
    if account is None:
        raise AccountNotFoundError(user_id)
    if account.role != Role.NURSE.value:
        raise NotNurseError(user_id, account.role)
    return account


async def get_status(session: AsyncSession, user_id: uuid.UUID) -> NurseProfile:
    """Load the nurse's profile, creating it (not_started) on first access."""
    await _require_nurse(session, user_id)
    return await store.ensure_profile(session, user_id)


async def save_step(
    session: AsyncSession,
    user_id: uuid.UUID,
    step: int,
    payload: BaseModel | dict[str, Any],
) -> NurseProfile:
    """Record one step's payload.

    The prerequisite check is part of the UPDATE itself (see store.apply_step), so
    a step 2 save racing a step 1 save can never persist step 2 alone.
    """
    _check_step(step)
    await _require_nurse(session, user_id)
    await store.ensure_profile(session, user_id)

    data = payload.model_dump(mode="json") if isinstance(payload, BaseModel) else dict(payload)
    if not await store.apply_step(session, user_id, step, data, _now()):
        profile = await store.find_profile(session, user_id)
        missing = missing_steps(profile, up_to=step - 1)
        raise SequenceViolation(step, missing[0] if missing else step - 1)

    profile = await store.get_profile(session, user_id)
    logger.info(
        "Nurse %s saved onboarding step %s (status=%s)",
        user_id,
        step,
        profile.completion_status,
    )
    return profile


async def submit(session: AsyncSession, user_id: uuid.UUID) -> ProfileSubmission:
    """Hand a completed profile to the admin review queue.

    Uniqueness of the active submission is enforced by the database index, not
    by a prior lookup: of two concurrent calls, exactly one INSERT survives and
    the other raises DuplicateSubmissionError.
    """
    await _require_nurse(session, user_id)
    profile = await store.find_profile(session, user_id)
    missing = missing_steps(profile)
    if profile is None or missing:
        raise IncompleteProfileError(missing)
    if profile.completion_status == ProfileCompletionStatus.APPROVED.value:
        raise ProfileAlreadyApprovedError(user_id)

    now = _now()
    profile_id = profile.id
    submission = await store.create_submission(session, user_id, profile_id, now)
    if not await store.mark_submitted(session, profile_id, now):
        raise IncompleteProfileError(missing_steps(await store.find_profile(session, user_id)))

    logger.info(
        "Nurse %s submitted profile %s for review (submission %s)",
        user_id,
        profile_id,
        submission.id,
    )
    return submission


async def can_access_step(session: AsyncSession, user_id: uuid.UUID, step: int) -> bool:
    """Whether the nurse may open the given step. Read-only; never creates a profile."""
    await _require_nurse(session, user_id)
    if step not in STEPS:
        return False
    if step == 1:
        return True
    profile = await store.find_profile(session, user_id)
    return not missing_steps(profile, up_to=step - 1)


async def get_step_data(
    session: AsyncSession, user_id: uuid.UUID, step: int
) -> dict[str, Any]:
    _check_step(step)
    if not await can_access_step(session, user_id, step):
        raise StepNotAccessibleError(step)
    profile = await store.find_profile(session, user_id)
    if profile is None:
        return {}
    return getattr(profile, f"step{step}_data") or {}
