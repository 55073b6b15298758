"""
Access domain — loads the state behind an access decision (zero FastAPI imports).

Nothing here is cached: every call reads the account, the profile and the
active submission afresh, so an approval takes effect on the next request.
"""
from __future__ import annotations

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from app.access.constants import STATUS_MESSAGES, Capability, NextAction
from app.access.evaluator import evaluate_access
from app.access.schemas import AccessDecision, AccessState, AccessSummaryResponse
from app.accounts import service as accounts
from app.accounts.service import AccountSnapshot
from app.onboarding import service as onboarding
from app.onboarding import store
from app.onboarding.constants import ProfileCompletionStatus
from app.onboarding.exceptions import AccountNotFoundError, NotNurseError
from shared.constants import Role


async def load_access_state(session: AsyncSession, user_id: uuid.UUID) -> AccessState | None:
    """Gather account, profile and submission state; None if the account does not exist.

    A nurse with no profile row yet is reported as not_started without creating one.
    """
    account = await accounts.get_account_status(session, user_id)
    if account is None:
        return None
    return await _state_for(session, account)


async def _state_for(session: AsyncSession, account: AccountSnapshot) -> AccessState:
    profile = await store.find_profile(session, account.user_id)
    active = await store.find_active_submission(session, account.user_id)
    return AccessState(
        account_status=account.account_status,
        completion_status=(
            profile.completion_status if profile else ProfileCompletionStatus.NOT_STARTED.value
        ),
        has_active_submission=active is not None,
    )


async def get_access_decision(session: AsyncSession, user_id: uuid.UUID) -> AccessDecision:
    account = await accounts.get_account_status(session, user_id)
    if account is None:
        raise AccountNotFoundError(user_id)
    if account.role != Role.NURSE.value:
        raise NotNurseError(user_id, account.role)
    state = await _state_for(session, account)
    return evaluate_access(state.account_status, state.completion_status, state.has_active_submission)


async def can_access_feature(
    session: AsyncSession, user_id: uuid.UUID, capability: Capability
) -> bool:
    decision = await get_access_decision(session, user_id)
    return decision.grants(capability)


async def get_access_summary(session: AsyncSession, user_id: uuid.UUID) -> AccessSummaryResponse:
    decision = await get_access_decision(session, user_id)
    profile = await store.find_profile(session, user_id)
    action = decision.next_required_action
    try:
        message = STATUS_MESSAGES[NextAction(action)]
    except ValueError:
        message = STATUS_MESSAGES[NextAction.COMPLETE_PROFILE]
    return AccessSummaryResponse(
        profile_completion_status=decision.profile_completion_status,
        next_step=onboarding.next_step(profile),
        completion_percentage=onboarding.completion_percentage(profile),
        next_required_action=action,
        message=message,
    )
