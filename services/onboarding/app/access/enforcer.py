"""
Access enforcer — applies an AccessDecision to one request.

authorize() short-circuits, in order:
  - callers who are not nurses
  - paths on the bypass allow-list (auth, onboarding, basic profile view)
  - the profile capability, which every decision grants

Anything else loads the nurse's current state, evaluates it and returns Allow
or Deny.  A store outage produces a Deny: the enforcer never fails open.
"""
from __future__ import annotations

import fnmatch
import logging
import uuid
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass

from app.access.constants import PROFILE_COMPLETE_PATH, Capability, NextAction
from app.access.evaluator import evaluate_access
from app.access.schemas import AccessState, Allow, AuthorizationResult, Deny
from app.onboarding.exceptions import StoreUnavailableError
from shared.models.user import CurrentUser

logger = logging.getLogger(__name__)

StateLoader = Callable[[uuid.UUID], Awaitable[AccessState | None]]


@dataclass(frozen=True)
class BypassRule:
    """A path glob that skips evaluation, optionally only for some capabilities."""

    pattern: str
    capabilities: frozenset[Capability] | None = None

    def matches(self, capability: Capability, path: str) -> bool:
        if self.capabilities is not None and capability not in self.capabilities:
            return False
        return fnmatch.fnmatchcase(path, self.pattern)


def default_bypass_rules(api_prefix: str = "/api/v1") -> tuple[BypassRule, ...]:
    return (
        BypassRule(f"{api_prefix}/auth/*"),
        BypassRule(f"{api_prefix}/nurse-profile"),
        BypassRule(f"{api_prefix}/nurse-profile/*"),
        BypassRule(f"{api_prefix}/nurse-profile-status/*"),
        BypassRule(f"{api_prefix}/profile"),
        BypassRule(f"{api_prefix}/users/profile"),
        BypassRule(f"{api_prefix}/users/me"),
        # Status widgets on the dashboard landing page poll this while onboarding.
        BypassRule(f"{api_prefix}/dashboard/overview", frozenset({Capability.DASHBOARD})),
    )


class AccessEnforcer:
    def __init__(
        self,
        load_state: StateLoader,
        bypass_rules: Iterable[BypassRule] | None = None,
    ) -> None:
        self._load_state = load_state
        self._bypass_rules = tuple(default_bypass_rules() if bypass_rules is None else bypass_rules)

    @property
    def bypass_rules(self) -> tuple[BypassRule, ...]:
        return self._bypass_rules

    def is_bypassed(self, capability: Capability, path: str | None) -> bool:
        if path is None:
            return False
        return any(rule.matches(capability, path) for rule in self._bypass_rules)

    async def authorize(
        self,
        caller: CurrentUser,
        capability: Capability,
        path: str | None = None,
    ) -> AuthorizationResult:
        if not caller.is_nurse:
            return Allow(capability=capability, bypass="not_nurse")
        if self.is_bypassed(capability, path):
            return Allow(capability=capability, bypass="allow_listed")
        if capability is Capability.PROFILE:
            return Allow(capability=capability, bypass="profile")

        try:
            state = await self._load_state(caller.id)
        except StoreUnavailableError:
            logger.exception(
                "Access state unavailable for nurse %s; denying %s", caller.id, capability.value
            )
            return Deny(
                capability=capability,
                reason="Access status could not be determined",
                redirect_to=PROFILE_COMPLETE_PATH,
                next_required_action=NextAction.RETRY_LATER.value,
            )
        if state is None:
            logger.warning(
                "Nurse %s has a token but no account record; denying %s",
                caller.id,
                capability.value,
            )
            return Deny(
                capability=capability,
                reason="Account not found",
                redirect_to=PROFILE_COMPLETE_PATH,
                next_required_action=NextAction.CONTACT_SUPPORT.value,
            )

        decision = evaluate_access(
            state.account_status, state.completion_status, state.has_active_submission
        )
        if decision.grants(capability):
            return Allow(capability=capability, decision=decision)
        return Deny(
            capability=capability,
            reason=decision.reason or "Profile completion required",
            redirect_to=decision.redirect_to or PROFILE_COMPLETE_PATH,
            next_required_action=decision.next_required_action or NextAction.COMPLETE_PROFILE.value,
            current_step=decision.current_step,
        )
