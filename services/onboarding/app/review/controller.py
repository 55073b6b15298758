"""Review controller — orchestration layer between admin router and service."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import http_error_for
from app.onboarding.constants import SubmissionStatus
from app.onboarding.exceptions import OnboardingError
from app.review import service
from app.review.schemas import (
    NoteRequest,
    QueueItem,
    QueueResponse,
    ReviewRequest,
    SubmissionResponse,
)


async def get_queue(
    db: AsyncSession, statuses: list[SubmissionStatus] | None, page: int, size: int
) -> QueueResponse:
    try:
        submissions, total = await service.get_queue(db, statuses, page, size)
    except OnboardingError as exc:
        raise http_error_for(exc) from exc
    items = [
        QueueItem(
            id=s.id,
            user_id=s.user_id,
            user_name=s.user.full_name,
            user_email=s.user.email,
            status=s.status,
            priority=s.priority,
            submitted_at=s.submitted_at,
        )
        for s in submissions
    ]
    return QueueResponse(items=items, total=total, page=page, size=size)


async def get_submission(db: AsyncSession, submission_id: UUID) -> SubmissionResponse:
    try:
        submission = await service.get_submission(db, submission_id)
    except OnboardingError as exc:
        raise http_error_for(exc) from exc
    return SubmissionResponse.model_validate(submission)


async def start_review(db: AsyncSession, submission_id: UUID, admin_id: UUID) -> SubmissionResponse:
    try:
        submission = await service.start_review(db, submission_id, admin_id)
    except OnboardingError as exc:
        raise http_error_for(exc) from exc
    return SubmissionResponse.model_validate(submission)


async def review(
    db: AsyncSession, submission_id: UUID, admin_id: UUID, body: ReviewRequest
) -> SubmissionResponse:
    try:
        submission = await service.decide(
            db,
            submission_id,
            admin_id,
            body.action,
            notes=body.notes,
            reason=body.reason,
            close_account=body.close_account,
        )
    except OnboardingError as exc:
        raise http_error_for(exc) from exc
    return SubmissionResponse.model_validate(submission)


async def add_note(
    db: AsyncSession, submission_id: UUID, admin_id: UUID, body: NoteRequest
) -> SubmissionResponse:
    try:
        submission = await service.add_note(db, submission_id, admin_id, body.notes)
    except OnboardingError as exc:
        raise http_error_for(exc) from exc
    return SubmissionResponse.model_validate(submission)
