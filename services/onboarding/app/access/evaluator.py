"""
Access evaluator — maps (account status, completion status, active submission)
to an AccessDecision.

Pure and deterministic: no I/O, no clock, no caching.  Rules, first match wins:

  1. account verified                  → full access
  2. account rejected                  → no access, /account-rejected
  3. account pending, by completion status (see _PENDING_BRANCHES)
  4. anything unrecognised             → no access, back to onboarding

can_access_profile is true in every branch so the onboarding UI stays reachable.
"""
from __future__ import annotations

import enum
import logging
from typing import Any, TypeVar

from app.access.constants import (
    ACCOUNT_REJECTED_PATH,
    PROFILE_COMPLETE_PATH,
    PROFILE_REJECTED_PATH,
    VERIFICATION_PENDING_PATH,
    NextAction,
)
from app.access.schemas import AccessDecision
from app.accounts.constants import AccountStatus
from app.onboarding.constants import ProfileCompletionStatus
from app.onboarding.exceptions import UnknownStateError

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=enum.Enum)

_FULL_ACCESS: dict[str, Any] = {
    "can_access_platform": True,
    "can_access_dashboard": True,
    "can_view_requests": True,
    "can_create_requests": True,
    "next_required_action": NextAction.NONE.value,
}

_PENDING_BRANCHES: dict[ProfileCompletionStatus, dict[str, Any]] = {
    ProfileCompletionStatus.NOT_STARTED: {
        "redirect_to": PROFILE_COMPLETE_PATH,
        "reason": "Profile setup required",
        "current_step": 1,
        "next_required_action": NextAction.COMPLETE_STEP_1.value,
    },
    ProfileCompletionStatus.STEP_1_COMPLETED: {
        "redirect_to": PROFILE_COMPLETE_PATH,
        "reason": "Profile setup incomplete",
        "current_step": 2,
        "next_required_action": NextAction.COMPLETE_STEP_2.value,
    },
    ProfileCompletionStatus.STEP_2_COMPLETED: {
        "redirect_to": PROFILE_COMPLETE_PATH,
        "reason": "Profile setup incomplete",
        "current_step": 3,
        "next_required_action": NextAction.COMPLETE_STEP_3.value,
    },
    ProfileCompletionStatus.STEP_3_COMPLETED: {
        "redirect_to": PROFILE_COMPLETE_PATH,
        "reason": "Profile ready for submission",
        "current_step": 3,
        "next_required_action": NextAction.SUBMIT_PROFILE.value,
    },
    # Mirrors account verification; covers the window before the account row is updated.
    ProfileCompletionStatus.APPROVED: _FULL_ACCESS,
    ProfileCompletionStatus.REJECTED: {
        "redirect_to": PROFILE_REJECTED_PATH,
        "reason": "Profile was rejected",
        "next_required_action": NextAction.RESUBMIT_PROFILE.value,
    },
}

_SUBMITTED_UNDER_REVIEW: dict[str, Any] = {
    "redirect_to": VERIFICATION_PENDING_PATH,
    "reason": "Profile under admin review",
    "next_required_action": NextAction.WAIT_FOR_APPROVAL.value,
}

# Submission already settled but the account status has not caught up.
_SUBMITTED_NOT_ACTIVE: dict[str, Any] = {
    "redirect_to": VERIFICATION_PENDING_PATH,
    "reason": "Verification status unclear",
    "next_required_action": NextAction.CONTACT_SUPPORT.value,
}

_ACCOUNT_REJECTED: dict[str, Any] = {
    "redirect_to": ACCOUNT_REJECTED_PATH,
    "reason": "Account has been rejected",
    "next_required_action": NextAction.CONTACT_SUPPORT.value,
}

_FAIL_CLOSED: dict[str, Any] = {
    "redirect_to": PROFILE_COMPLETE_PATH,
    "reason": "Unknown profile status",
    "current_step": 1,
    "next_required_action": NextAction.COMPLETE_PROFILE.value,
}


def _parse(enum_cls: type[E], value: object) -> E | None:
    try:
        return enum_cls(value)
    except ValueError:
        return None


def _status_text(value: object) -> str:
    if isinstance(value, enum.Enum):
        return str(value.value)
    return "" if value is None else str(value)


def evaluate_access(
    account_status: AccountStatus | str | None,
    completion_status: ProfileCompletionStatus | str | None,
    has_active_submission: bool,
) -> AccessDecision:
    account = _parse(AccountStatus, account_status)
    completion = _parse(ProfileCompletionStatus, completion_status)
    reported_status = _status_text(completion_status) or ProfileCompletionStatus.NOT_STARTED.value

    if account is AccountStatus.VERIFIED:
        branch = _FULL_ACCESS
    elif account is AccountStatus.REJECTED:
        branch = _ACCOUNT_REJECTED
    elif account is AccountStatus.PENDING and completion is ProfileCompletionStatus.SUBMITTED:
        branch = _SUBMITTED_UNDER_REVIEW if has_active_submission else _SUBMITTED_NOT_ACTIVE
    elif account is AccountStatus.PENDING and completion in _PENDING_BRANCHES:
        branch = _PENDING_BRANCHES[completion]
    else:
        logger.warning("%s; denying access", UnknownStateError(account_status, completion_status))
        branch = _FAIL_CLOSED

    return AccessDecision(profile_completion_status=reported_status, **branch)
