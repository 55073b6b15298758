"""
Review domain — admin-facing routes.

Routes:
  GET   /api/v1/admin/profile-submissions                      Queue (oldest first)
  GET   /api/v1/admin/profile-submissions/{id}                 One submission + action log
  POST  /api/v1/admin/profile-submissions/{id}/start-review    PENDING → UNDER_REVIEW
  PATCH /api/v1/admin/profile-submissions/{id}/review          Approve, reject or request changes
  POST  /api/v1/admin/profile-submissions/{id}/notes           Append an internal note

Requires: ADMIN role.
"""
from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import require_admin
from app.database import get_db
from app.onboarding.constants import SubmissionStatus
from app.review import controller as ctrl
from app.review.schemas import NoteRequest, QueueResponse, ReviewRequest, SubmissionResponse
from shared.models.user import CurrentUser

router = APIRouter(prefix="/admin/profile-submissions", tags=["admin-profile-review"])

_404 = {"description": "Submission not found"}
_409 = {"description": "Submission already settled"}


@router.get(
    "",
    response_model=QueueResponse,
    summary="[Admin] List profile submissions (oldest first)",
    description="Defaults to submissions that are pending or under review.",
)
async def get_queue(
    status_filter: list[SubmissionStatus] | None = Query(None, alias="status"),
    page: int = Query(1, ge=1, description="Page number"),
    size: int = Query(20, ge=1, le=100, description="Items per page"),
    admin: CurrentUser = Depends(require_admin),
    session: AsyncSession = Depends(get_db),
) -> QueueResponse:
    return await ctrl.get_queue(session, status_filter, page, size)


@router.get(
    "/{submission_id}",
    response_model=SubmissionResponse,
    summary="[Admin] Get a submission with its action log",
    responses={404: _404},
)
async def get_submission(
    submission_id: uuid.UUID,
    admin: CurrentUser = Depends(require_admin),
    session: AsyncSession = Depends(get_db),
) -> SubmissionResponse:
    return await ctrl.get_submission(session, submission_id)


@router.post(
    "/{submission_id}/start-review",
    response_model=SubmissionResponse,
    summary="[Admin] Claim a pending submission for review",
    responses={404: _404, 409: _409},
)
async def start_review(
    submission_id: uuid.UUID,
    admin: CurrentUser = Depends(require_admin),
    session: AsyncSession = Depends(get_db),
) -> SubmissionResponse:
    return await ctrl.start_review(session, submission_id, admin.id)


@router.patch(
    "/{submission_id}/review",
    response_model=SubmissionResponse,
    summary="[Admin] Approve, reject or request changes",
    description=(
        "action=APPROVE: profile approved, account verified, full platform access. "
        "action=REJECT: profile rejected, nurse may resubmit unless close_account is set. "
        "action=REQUEST_CHANGES: profile reopened for editing at step 3."
    ),
    responses={404: _404, 409: _409},
)
async def review(
    submission_id: uuid.UUID,
    body: ReviewRequest,
    admin: CurrentUser = Depends(require_admin),
    session: AsyncSession = Depends(get_db),
) -> SubmissionResponse:
    return await ctrl.review(session, submission_id, admin.id, body)


@router.post(
    "/{submission_id}/notes",
    response_model=SubmissionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="[Admin] Add an internal note",
    responses={404: _404},
)
async def add_note(
    submission_id: uuid.UUID,
    body: NoteRequest,
    admin: CurrentUser = Depends(require_admin),
    session: AsyncSession = Depends(get_db),
) -> SubmissionResponse:
    return await ctrl.add_note(session, submission_id, admin.id, body)
