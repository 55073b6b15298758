"""
Onboarding service — HTTP exceptions.

All exceptions use preset status codes and a ``{"code", "message"}`` detail so
that callers never need to specify these at the call site.  The shared
http_exception_envelope_handler wraps them in the standard error envelope.

Controllers translate domain errors (app.onboarding.exceptions) into these via
``http_error_for``.
"""
from __future__ import annotations

from typing import Any

from fastapi import HTTPException, status

from app.onboarding.exceptions import (
    AccountNotFoundError,
    DuplicateSubmissionError,
    IncompleteProfileError,
    InvalidStepError,
    NotNurseError,
    OnboardingError,
    ProfileAlreadyApprovedError,
    SequenceViolation,
    StepNotAccessibleError,
    StoreUnavailableError,
    SubmissionNotFoundError,
    SubmissionNotReviewableError,
)


def _detail(code: str, message: str, **extra: Any) -> dict[str, Any]:
    return {"code": code, "message": message, **extra}


# ── Account state ─────────────────────────────────────────────────────────────

class AccountNotFound(HTTPException):
    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=_detail("account_not_found", "Account not found."),
        )


class NotANurse(HTTPException):
    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=_detail("not_nurse", "Only nurse accounts can complete a nurse profile."),
        )


# ── Profile completion ────────────────────────────────────────────────────────

class InvalidStep(HTTPException):
    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=_detail("invalid_step", "Step number must be between 1 and 3."),
        )


class StepOutOfSequence(HTTPException):
    def __init__(self, step: int, missing_step: int) -> None:
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=_detail(
                "sequence_violation",
                f"Step {missing_step} must be completed before step {step}.",
                step=step,
                missing_step=missing_step,
            ),
        )


class StepNotAccessible(HTTPException):
    def __init__(self, step: int) -> None:
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=_detail(
                "step_not_accessible",
                "Previous steps must be completed first.",
                step=step,
            ),
        )


class ProfileIncomplete(HTTPException):
    def __init__(self, missing_steps: list[int]) -> None:
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=_detail(
                "incomplete_profile",
                "All steps must be completed before submission.",
                missing_steps=missing_steps,
            ),
        )


class ProfileAlreadySubmitted(HTTPException):
    """Idempotent from the client's point of view: the profile is already in review."""

    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=_detail(
                "duplicate_submission",
                "Your profile has already been submitted and is awaiting review.",
            ),
        )


class ProfileAlreadyApproved(HTTPException):
    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=_detail(
                "profile_already_approved",
                "Your profile is already approved. Contact support to update credentials.",
            ),
        )


# ── Review ────────────────────────────────────────────────────────────────────

class SubmissionNotFound(HTTPException):
    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=_detail("submission_not_found", "Profile submission not found."),
        )


class SubmissionNotReviewable(HTTPException):
    """Admin tried to act on a submission that has already been settled."""

    def __init__(self, current_status: str) -> None:
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=_detail(
                "submission_not_reviewable",
                "This submission is no longer pending and cannot be reviewed.",
                status=current_status,
            ),
        )


# ── Infrastructure ────────────────────────────────────────────────────────────

class StoreUnavailable(HTTPException):
    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=_detail(
                "store_unavailable",
                "The service is temporarily unavailable. Please try again shortly.",
            ),
            headers={"Retry-After": "5"},
        )


# ── Access enforcement ────────────────────────────────────────────────────────

class NurseAccessDenied(HTTPException):
    """403 carrying the redirect metadata of an access Deny."""

    def __init__(self, metadata: dict[str, Any]) -> None:
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=_detail(
                "nurse_access_denied",
                metadata.get("reason") or "Profile completion required",
                **{k: v for k, v in metadata.items() if k != "reason"},
            ),
        )


def http_error_for(exc: OnboardingError) -> HTTPException:
    """Map a domain error to the HTTPException the API returns for it."""
    if isinstance(exc, AccountNotFoundError):
        return AccountNotFound()
    if isinstance(exc, NotNurseError):
        return NotANurse()
    if isinstance(exc, InvalidStepError):
        return InvalidStep()
    if isinstance(exc, SequenceViolation):
        return StepOutOfSequence(exc.step, exc.missing_step)
    if isinstance(exc, StepNotAccessibleError):
        return StepNotAccessible(exc.step)
    if isinstance(exc, IncompleteProfileError):
        return ProfileIncomplete(exc.missing_steps)
    if isinstance(exc, DuplicateSubmissionError):
        return ProfileAlreadySubmitted()
    if isinstance(exc, ProfileAlreadyApprovedError):
        return ProfileAlreadyApproved()
    if isinstance(exc, SubmissionNotFoundError):
        return SubmissionNotFound()
    if isinstance(exc, SubmissionNotReviewableError):
        return SubmissionNotReviewable(exc.status)
    if isinstance(exc, StoreUnavailableError):
        return StoreUnavailable()
    raise TypeError(f"No HTTP mapping for {type(exc).__name__}") from exc
