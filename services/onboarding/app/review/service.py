"""
Review domain — admin review of submitted nurse profiles (zero FastAPI imports).

Submission state machine enforced here:
  PENDING                → UNDER_REVIEW       start_review()
  PENDING | UNDER_REVIEW → APPROVED           decide(APPROVE)
  PENDING | UNDER_REVIEW → REJECTED           decide(REJECT)
  PENDING | UNDER_REVIEW → REQUIRES_CHANGES   decide(REQUEST_CHANGES)

Each outcome is mirrored onto the nurse profile and, where it applies, the
account, inside the caller's transaction:

  APPROVE            profile approved,          account verified
  REJECT             profile rejected,          account unchanged (nurse may resubmit)
  REJECT + close     profile rejected,          account rejected
  REQUEST_CHANGES    profile step_3_completed,  account unchanged

Every action appends a row to the submission's action log.

Transaction contract: these functions only flush() — get_db commits at request end.
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from app.accounts import service as accounts
from app.accounts.constants import AccountStatus
from app.onboarding import store
from app.onboarding.constants import (
    ACTIVE_SUBMISSION_STATUSES,
    AdminAction,
    ProfileCompletionStatus,
    SubmissionStatus,
)
from app.onboarding.exceptions import SubmissionNotFoundError, SubmissionNotReviewableError
from app.onboarding.models import ProfileSubmission
from app.review.constants import ReviewDecision

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReviewOutcome:
    submission_status: SubmissionStatus
    profile_status: ProfileCompletionStatus
    account_status: AccountStatus | None
    action: AdminAction


REVIEW_TRANSITIONS: dict[ReviewDecision, ReviewOutcome] = {
    ReviewDecision.APPROVE: ReviewOutcome(
        SubmissionStatus.APPROVED,
        ProfileCompletionStatus.APPROVED,
        AccountStatus.VERIFIED,
        AdminAction.APPROVED,
    ),
    ReviewDecision.REJECT: ReviewOutcome(
        SubmissionStatus.REJECTED,
        ProfileCompletionStatus.REJECTED,
        None,
        AdminAction.REJECTED,
    ),
    ReviewDecision.REQUEST_CHANGES: ReviewOutcome(
        SubmissionStatus.REQUIRES_CHANGES,
        ProfileCompletionStatus.STEP_3_COMPLETED,
        None,
        AdminAction.REQUESTED_CHANGES,
    ),
}


async def _get_or_404(session: AsyncSession, submission_id: uuid.UUID) -> ProfileSubmission:
    submission = await store.get_submission(session, submission_id)
    if submission is None:
        raise SubmissionNotFoundError(submission_id)
    return submission


async def get_queue(
    session: AsyncSession,
    statuses: list[SubmissionStatus] | None,
    page: int,
    size: int,
) -> tuple[list[ProfileSubmission], int]:
    """Return (submissions, total), oldest first. Defaults to the active statuses."""
    wanted = statuses or list(ACTIVE_SUBMISSION_STATUSES)
    return await store.list_submissions(session, [s.value for s in wanted], page, size)


async def get_submission(session: AsyncSession, submission_id: uuid.UUID) -> ProfileSubmission:
    return await _get_or_404(session, submission_id)


async def start_review(
    session: AsyncSession, submission_id: uuid.UUID, admin_id: uuid.UUID
) -> ProfileSubmission:
    submission = await _get_or_404(session, submission_id)
    moved = await store.transition_submission(
        session,
        submission_id,
        (SubmissionStatus.PENDING,),
        SubmissionStatus.UNDER_REVIEW,
        reviewed_by=admin_id,
    )
    if not moved:
        raise SubmissionNotReviewableError(submission_id, submission.status)

    submission = await _get_or_404(session, submission_id)
    await store.append_action_log(session, submission, admin_id, AdminAction.STARTED_REVIEW)
    logger.info("Admin %s started review of submission %s", admin_id, submission_id)
    return submission


async def decide(
    session: AsyncSession,
    submission_id: uuid.UUID,
    admin_id: uuid.UUID,
    decision: ReviewDecision,
    notes: str | None = None,
    reason: str | None = None,
    close_account: bool = False,
) -> ProfileSubmission:
    """Settle an active submission and mirror the outcome onto profile and account."""
    submission = await _get_or_404(session, submission_id)
    outcome = REVIEW_TRANSITIONS[decision]

    moved = await store.transition_submission(
        session,
        submission_id,
        ACTIVE_SUBMISSION_STATUSES,
        outcome.submission_status,
        reviewed_at=datetime.now(timezone.utc),
        reviewed_by=admin_id,
        admin_notes=notes,
        rejection_reason=reason,
    )
    if not moved:
        raise SubmissionNotReviewableError(submission_id, submission.status)

    await store.set_completion_status(session, submission.nurse_profile_id, outcome.profile_status)
    account_status = outcome.account_status
    if decision is ReviewDecision.REJECT and close_account:
        account_status = AccountStatus.REJECTED
    if account_status is not None:
        await accounts.set_account_status(session, submission.user_id, account_status)

    submission = await _get_or_404(session, submission_id)
    await store.append_action_log(
        session, submission, admin_id, outcome.action, notes=notes, reason=reason
    )
    logger.info(
        "Admin %s settled submission %s as %s (account=%s)",
        admin_id,
        submission_id,
        outcome.submission_status.value,
        account_status.value if account_status else "unchanged",
    )
    return submission


async def add_note(
    session: AsyncSession, submission_id: uuid.UUID, admin_id: uuid.UUID, notes: str
) -> ProfileSubmission:
    submission = await _get_or_404(session, submission_id)
    await store.append_action_log(session, submission, admin_id, AdminAction.ADDED_NOTE, notes=notes)
    return submission
