"""
Access domain — Pydantic V2 models.

AccessDecision, Allow and Deny are plain structured data so the same objects
serve the enforcer, the status endpoints and any non-HTTP caller.
"""
from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict

from app.access.constants import Capability


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class AccessState(_Frozen):
    """Everything the evaluator needs, gathered once per request."""

    account_status: str
    completion_status: str
    has_active_submission: bool


class AccessDecision(_Frozen):
    can_access_platform: bool = False
    can_access_dashboard: bool = False
    can_view_requests: bool = False
    can_create_requests: bool = False
    can_access_profile: bool = True
    profile_completion_status: str
    redirect_to: str | None = None
    reason: str | None = None
    current_step: int | None = None
    next_required_action: str | None = None

    def grants(self, capability: Capability) -> bool:
        flags = {
            Capability.PLATFORM: self.can_access_platform,
            Capability.DASHBOARD: self.can_access_dashboard,
            Capability.REQUESTS: self.can_view_requests,
            Capability.CREATE_REQUEST: self.can_create_requests,
            Capability.PROFILE: self.can_access_profile,
        }
        return flags[capability]


class Allow(_Frozen):
    allowed: Literal[True] = True
    capability: Capability
    # Set when evaluation was skipped: "not_nurse", "allow_listed", "profile"
    bypass: str | None = None
    decision: AccessDecision | None = None


class Deny(_Frozen):
    allowed: Literal[False] = False
    capability: Capability
    reason: str
    redirect_to: str
    next_required_action: str
    current_step: int | None = None

    def metadata(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude={"allowed"})


AuthorizationResult = Allow | Deny


# ── Responses ─────────────────────────────────────────────────────────────────

class FeatureAccessResponse(BaseModel):
    capability: Capability
    can_access: bool


class AccessSummaryResponse(BaseModel):
    profile_completion_status: str
    next_step: int
    completion_percentage: int
    next_required_action: str | None
    message: str
