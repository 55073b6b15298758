"""
Access domain — FastAPI dependencies that put the enforcer in front of handlers.

Usage on any protected route or router:

    @router.get("/requests", dependencies=[Depends(require_access(Capability.REQUESTS))])

or, to receive the caller:

    current_user: CurrentUser = Depends(require_access(Capability.CREATE_REQUEST))
"""
from __future__ import annotations

from functools import partial

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.access import service as access
from app.access.constants import Capability
from app.access.enforcer import AccessEnforcer, BypassRule, default_bypass_rules
from app.access.schemas import Deny
from app.auth.dependencies import get_current_user
from app.config import Settings, get_settings
from app.database import get_db
from app.exceptions import NurseAccessDenied
from shared.models.user import CurrentUser


def get_enforcer(
    session: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> AccessEnforcer:
    rules = default_bypass_rules(settings.api_prefix) + tuple(
        BypassRule(pattern) for pattern in settings.access_bypass_paths_list
    )
    return AccessEnforcer(partial(access.load_access_state, session), bypass_rules=rules)


def require_access(capability: Capability):
    """Dependency factory: 403 with redirect metadata unless the caller may use ``capability``."""

    async def _require_access(
        request: Request,
        current_user: CurrentUser = Depends(get_current_user),
        enforcer: AccessEnforcer = Depends(get_enforcer),
    ) -> CurrentUser:
        result = await enforcer.authorize(current_user, capability, request.url.path)
        if isinstance(result, Deny):
            raise NurseAccessDenied(result.metadata())
        return current_user

    return _require_access
