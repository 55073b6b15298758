"""
Onboarding domain — profile and submission persistence.

Every write that has a precondition carries it in its own WHERE clause, so the
check and the write are a single statement at the database:

  ensure_profile()         INSERT … ON CONFLICT (user_id) DO NOTHING
  apply_step()             UPDATE … WHERE <prerequisite steps completed>
  mark_submitted()         UPDATE … WHERE <all steps completed>
  create_submission()      INSERT guarded by uq_profile_submissions_active_user
  transition_submission()  UPDATE … WHERE status IN <expected statuses>

Transaction contract: like the other service modules these functions only
execute/flush; get_db commits at request end.
"""
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.database import store_errors
from app.onboarding.constants import (
    ACTIVE_SUBMISSION_STATUSES,
    STEP_COMPLETED_STATUS,
    STEP_PROGRESSION,
    AdminAction,
    ProfileCompletionStatus,
    SubmissionStatus,
)
from app.onboarding.exceptions import DuplicateSubmissionError
from app.onboarding.models import NurseProfile, ProfileSubmission, SubmissionActionLog

_STEP_COLUMNS = {
    1: (NurseProfile.step1_completed, NurseProfile.step1_completed_at, NurseProfile.step1_data),
    2: (NurseProfile.step2_completed, NurseProfile.step2_completed_at, NurseProfile.step2_data),
    3: (NurseProfile.step3_completed, NurseProfile.step3_completed_at, NurseProfile.step3_data),
}

_ACTIVE = [s.value for s in ACTIVE_SUBMISSION_STATUSES]


def _prerequisites(step: int) -> list[sa.ColumnElement[bool]]:
    return [_STEP_COLUMNS[s][0].is_(True) for s in range(1, step)]


def _all_steps_completed() -> list[sa.ColumnElement[bool]]:
    return [cols[0].is_(True) for cols in _STEP_COLUMNS.values()]


def _insert(session: AsyncSession):
    if session.get_bind().dialect.name == "postgresql":
        return pg_insert
    return sqlite_insert


# ── Profiles ──────────────────────────────────────────────────────────────────

def _profile_query(user_id: uuid.UUID) -> sa.Select[tuple[NurseProfile]]:
    # populate_existing: earlier Core UPDATEs in this session bypass the identity map
    return (
        sa.select(NurseProfile)
        .where(NurseProfile.user_id == user_id)
        .execution_options(populate_existing=True)
    )


async def find_profile(session: AsyncSession, user_id: uuid.UUID) -> NurseProfile | None:
    with store_errors("find_profile"):
        result = await session.execute(_profile_query(user_id))
    return result.scalar_one_or_none()


async def get_profile(session: AsyncSession, user_id: uuid.UUID) -> NurseProfile:
    """Load a profile known to exist; raises NoResultFound otherwise."""
    with store_errors("get_profile"):
        result = await session.execute(_profile_query(user_id))
    return result.scalar_one()


async def ensure_profile(session: AsyncSession, user_id: uuid.UUID) -> NurseProfile:
    """Return the user's profile, creating a not_started one on first touch.

    Two concurrent first touches both run the INSERT; the loser's row is dropped
    by ON CONFLICT and both read back the same profile.
    """
    insert = _insert(session)
    with store_errors("ensure_profile"):
        await session.execute(
            insert(NurseProfile)
            .values(
                id=uuid.uuid4(),
                user_id=user_id,
                completion_status=ProfileCompletionStatus.NOT_STARTED.value,
                step1_completed=False,
                step2_completed=False,
                step3_completed=False,
            )
            .on_conflict_do_nothing(index_elements=["user_id"])
        )
    return await get_profile(session, user_id)


async def apply_step(
    session: AsyncSession,
    user_id: uuid.UUID,
    step: int,
    payload: dict[str, Any],
    now: datetime,
) -> bool:
    """Write one step's payload if its prerequisite steps are complete.

    Returns False (and writes nothing) when a prerequisite is missing.
    completed_at is kept from the first save; completion_status only advances.
    """
    completed_col, completed_at_col, data_col = _STEP_COLUMNS[step]
    target = STEP_COMPLETED_STATUS[step]
    earlier = [s.value for s in STEP_PROGRESSION[: STEP_PROGRESSION.index(target)]]

    stmt = (
        sa.update(NurseProfile)
        .where(NurseProfile.user_id == user_id, *_prerequisites(step))
        .values(
            {
                data_col: payload,
                completed_col: True,
                completed_at_col: sa.func.coalesce(completed_at_col, now),
                NurseProfile.completion_status: sa.case(
                    (NurseProfile.completion_status.in_(earlier), target.value),
                    else_=NurseProfile.completion_status,
                ),
            }
        )
        .execution_options(synchronize_session=False)
    )
    with store_errors("apply_step"):
        result = await session.execute(stmt)
    return result.rowcount == 1


async def mark_submitted(session: AsyncSession, profile_id: uuid.UUID, now: datetime) -> bool:
    with store_errors("mark_submitted"):
        result = await session.execute(
            sa.update(NurseProfile)
            .where(NurseProfile.id == profile_id, *_all_steps_completed())
            .values(
                completion_status=ProfileCompletionStatus.SUBMITTED.value,
                submitted_at=now,
            )
            .execution_options(synchronize_session=False)
        )
    return result.rowcount == 1


async def set_completion_status(
    session: AsyncSession, profile_id: uuid.UUID, status: ProfileCompletionStatus
) -> None:
    """Overwrite completion_status. Only the review flow calls this."""
    with store_errors("set_completion_status"):
        await session.execute(
            sa.update(NurseProfile)
            .where(NurseProfile.id == profile_id)
            .values(completion_status=status.value)
            .execution_options(synchronize_session=False)
        )


# ── Submissions ───────────────────────────────────────────────────────────────

async def find_active_submission(
    session: AsyncSession, user_id: uuid.UUID
) -> ProfileSubmission | None:
    with store_errors("find_active_submission"):
        result = await session.execute(
            sa.select(ProfileSubmission).where(
                ProfileSubmission.user_id == user_id,
                ProfileSubmission.status.in_(_ACTIVE),
            )
        )
    return result.scalar_one_or_none()


async def get_submission(
    session: AsyncSession, submission_id: uuid.UUID
) -> ProfileSubmission | None:
    with store_errors("get_submission"):
        result = await session.execute(
            sa.select(ProfileSubmission)
            .options(selectinload(ProfileSubmission.user))
            .where(ProfileSubmission.id == submission_id)
            .execution_options(populate_existing=True)
        )
    return result.scalar_one_or_none()


async def list_submissions(
    session: AsyncSession,
    statuses: list[str],
    page: int,
    size: int,
) -> tuple[list[ProfileSubmission], int]:
    """Return (submissions, total) in the given statuses, oldest first."""
    with store_errors("list_submissions"):
        total_r = await session.execute(
            sa.select(sa.func.count())
            .select_from(ProfileSubmission)
            .where(ProfileSubmission.status.in_(statuses))
        )
        rows_r = await session.execute(
            sa.select(ProfileSubmission)
            .options(selectinload(ProfileSubmission.user))
            .where(ProfileSubmission.status.in_(statuses))
            .order_by(ProfileSubmission.submitted_at.asc())
            .limit(size)
            .offset((page - 1) * size)
        )
    return list(rows_r.scalars()), total_r.scalar_one()


async def create_submission(
    session: AsyncSession,
    user_id: uuid.UUID,
    profile_id: uuid.UUID,
    now: datetime,
) -> ProfileSubmission:
    """Insert a PENDING submission.

    Raises DuplicateSubmissionError when the partial unique index rejects it,
    i.e. another submission for this user is still pending or under review.
    """
    submission = ProfileSubmission(
        user_id=user_id,
        nurse_profile_id=profile_id,
        status=SubmissionStatus.PENDING.value,
        submitted_at=now,
    )
    session.add(submission)
    try:
        with store_errors("create_submission"):
            await session.flush()
    except IntegrityError:
        await session.rollback()
        raise DuplicateSubmissionError(user_id)
    return submission


async def append_action_log(
    session: AsyncSession,
    submission: ProfileSubmission,
    admin_id: uuid.UUID,
    action: AdminAction,
    notes: str | None = None,
    reason: str | None = None,
) -> SubmissionActionLog:
    entry = SubmissionActionLog(
        submission_id=submission.id,
        admin_id=admin_id,
        action=action.value,
        notes=notes,
        reason=reason,
    )
    submission.actions.append(entry)
    with store_errors("append_action_log"):
        await session.flush()
    return entry


async def transition_submission(
    session: AsyncSession,
    submission_id: uuid.UUID,
    from_statuses: tuple[SubmissionStatus, ...],
    to_status: SubmissionStatus,
    **values: Any,
) -> bool:
    """Move a submission to ``to_status`` only if it is currently in ``from_statuses``.

    Returns False when another reviewer got there first.
    """
    with store_errors("transition_submission"):
        result = await session.execute(
            sa.update(ProfileSubmission)
            .where(
                ProfileSubmission.id == submission_id,
                ProfileSubmission.status.in_([s.value for s in from_statuses]),
            )
            .values(status=to_status.value, **values)
            .execution_options(synchronize_session=False)
        )
    return result.rowcount == 1
