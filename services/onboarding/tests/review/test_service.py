import uuid

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.access import service as access
from app.accounts import service as accounts
from app.onboarding import service as onboarding
from app.onboarding import store
from app.onboarding.exceptions import (
    ProfileAlreadyApprovedError,
    SubmissionNotFoundError,
    SubmissionNotReviewableError,
)
from app.review import service
from app.review.constants import ReviewDecision
from shared.constants import Role

STEPS = {
    1: {"full_name": "Ada Nurse", "email_address": "ada@example.com"},
    2: {"license_number": "RN-1234", "license_expiration_date": "2030-01-31"},
    3: {"skills": ["triage"]},
}


async def _submitted_nurse(db: AsyncSession, make_user):
    nurse = await make_user()
    for step, payload in STEPS.items():
        await onboarding.save_step(db, nurse.id, step, payload)
    submission = await onboarding.submit(db, nurse.id)
    await db.commit()
    return nurse, submission


@pytest.mark.asyncio
async def test_approval_grants_full_access(db_session, make_user) -> None:
    admin = await make_user(role=Role.ADMIN)
    nurse, submission = await _submitted_nurse(db_session, make_user)

    settled = await service.decide(
        db_session, submission.id, admin.id, ReviewDecision.APPROVE, notes="Looks good"
    )
    await db_session.commit()

    assert settled.status == "approved"
    assert settled.reviewed_by == admin.id
    assert settled.reviewed_at is not None
    assert [a.action for a in settled.actions] == ["approved"]

    account = await accounts.get_account_status(db_session, nurse.id)
    assert account.account_status == "verified"
    profile = await store.find_profile(db_session, nurse.id)
    assert profile.completion_status == "approved"

    decision = await access.get_access_decision(db_session, nurse.id)
    assert decision.can_access_platform is True
    assert decision.can_create_requests is True
    assert decision.redirect_to is None


@pytest.mark.asyncio
async def test_approved_profile_cannot_be_resubmitted(db_session, make_user) -> None:
    admin = await make_user(role=Role.ADMIN)
    nurse, submission = await _submitted_nurse(db_session, make_user)
    await service.decide(db_session, submission.id, admin.id, ReviewDecision.APPROVE)
    await db_session.commit()

    with pytest.raises(ProfileAlreadyApprovedError):
        await onboarding.submit(db_session, nurse.id)


@pytest.mark.asyncio
async def test_rejection_allows_resubmission(db_session, make_user) -> None:
    admin = await make_user(role=Role.ADMIN)
    nurse, submission = await _submitted_nurse(db_session, make_user)

    settled = await service.decide(
        db_session, submission.id, admin.id, ReviewDecision.REJECT, reason="License expired"
    )
    await db_session.commit()
    assert settled.status == "rejected"
    assert settled.rejection_reason == "License expired"

    account = await accounts.get_account_status(db_session, nurse.id)
    assert account.account_status == "pending"
    decision = await access.get_access_decision(db_session, nurse.id)
    assert decision.redirect_to == "/profile-rejected"
    assert decision.next_required_action == "resubmit_profile"

    again = await onboarding.submit(db_session, nurse.id)
    await db_session.commit()
    assert again.id != submission.id
    assert again.status == "pending"


@pytest.mark.asyncio
async def test_rejection_can_close_account(db_session, make_user) -> None:
    admin = await make_user(role=Role.ADMIN)
    nurse, submission = await _submitted_nurse(db_session, make_user)

    await service.decide(
        db_session,
        submission.id,
        admin.id,
        ReviewDecision.REJECT,
        reason="Fraudulent documents",
        close_account=True,
    )
    await db_session.commit()

    decision = await access.get_access_decision(db_session, nurse.id)
    assert decision.can_access_platform is False
    assert decision.redirect_to == "/account-rejected"


@pytest.mark.asyncio
async def test_request_changes_reopens_profile(db_session, make_user) -> None:
    admin = await make_user(role=Role.ADMIN)
    nurse, submission = await _submitted_nurse(db_session, make_user)

    settled = await service.decide(
        db_session,
        submission.id,
        admin.id,
        ReviewDecision.REQUEST_CHANGES,
        reason="Upload a clearer license scan",
    )
    await db_session.commit()
    assert settled.status == "requires_changes"

    profile = await store.find_profile(db_session, nurse.id)
    assert profile.completion_status == "step_3_completed"
    assert profile.step3_completed is True

    decision = await access.get_access_decision(db_session, nurse.id)
    assert decision.next_required_action == "submit_profile"


@pytest.mark.asyncio
async def test_start_review_then_decide(db_session, make_user) -> None:
    admin = await make_user(role=Role.ADMIN)
    nurse, submission = await _submitted_nurse(db_session, make_user)

    claimed = await service.start_review(db_session, submission.id, admin.id)
    await db_session.commit()
    assert claimed.status == "under_review"

    # Still an active submission: the nurse keeps waiting.
    decision = await access.get_access_decision(db_session, nurse.id)
    assert decision.next_required_action == "wait_for_approval"

    with pytest.raises(SubmissionNotReviewableError):
        await service.start_review(db_session, submission.id, admin.id)

    settled = await service.decide(db_session, submission.id, admin.id, ReviewDecision.APPROVE)
    await db_session.commit()
    assert [a.action for a in settled.actions] == ["started_review", "approved"]


@pytest.mark.asyncio
async def test_settled_submission_cannot_be_decided_again(db_session, make_user) -> None:
    admin = await make_user(role=Role.ADMIN)
    _, submission = await _submitted_nurse(db_session, make_user)
    await service.decide(db_session, submission.id, admin.id, ReviewDecision.REJECT, reason="No")
    await db_session.commit()

    with pytest.raises(SubmissionNotReviewableError) as exc_info:
        await service.decide(db_session, submission.id, admin.id, ReviewDecision.APPROVE)
    assert exc_info.value.status == "rejected"


@pytest.mark.asyncio
async def test_unknown_submission(db_session, make_user) -> None:
    admin = await make_user(role=Role.ADMIN)
    with pytest.raises(SubmissionNotFoundError):
        await service.decide(db_session, uuid.uuid4(), admin.id, ReviewDecision.APPROVE)


@pytest.mark.asyncio
async def test_queue_lists_active_submissions_oldest_first(db_session, make_user) -> None:
    admin = await make_user(role=Role.ADMIN)
    _, first = await _submitted_nurse(db_session, make_user)
    _, second = await _submitted_nurse(db_session, make_user)
    _, settled = await _submitted_nurse(db_session, make_user)
    await service.decide(db_session, settled.id, admin.id, ReviewDecision.APPROVE)
    await db_session.commit()

    items, total = await service.get_queue(db_session, None, page=1, size=10)
    assert total == 2
    assert [s.id for s in items] == [first.id, second.id]


@pytest.mark.asyncio
async def test_add_note_appends_to_log(db_session, make_user) -> None:
    admin = await make_user(role=Role.ADMIN)
    _, submission = await _submitted_nurse(db_session, make_user)

    noted = await service.add_note(db_session, submission.id, admin.id, "Called the hospital")
    await db_session.commit()
    assert noted.status == "pending"
    assert noted.actions[-1].action == "added_note"
    assert noted.actions[-1].notes == "Called the hospital"
