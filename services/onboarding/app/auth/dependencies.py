"""
Onboarding service — auth-specific FastAPI dependencies.

These wrap the shared auth dependencies and add role guards.  The caller
identity is always passed on explicitly; nothing is stashed on the request.
"""
from __future__ import annotations

from fastapi import Depends, HTTPException, status

from shared.auth.dependencies import get_current_user_required
from shared.models.user import CurrentUser

# Alias the shared dependency so routes import from here, not from shared directly.
get_current_user = get_current_user_required


def require_admin(
    current_user: CurrentUser = Depends(get_current_user),
) -> CurrentUser:
    """Raise 403 unless the authenticated user holds the ADMIN role."""
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={"code": "admin_required", "message": "Administrator access required."},
        )
    return current_user


def require_nurse(
    current_user: CurrentUser = Depends(get_current_user),
) -> CurrentUser:
    """Raise 403 unless the token belongs to a nurse."""
    if not current_user.is_nurse:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "code": "not_nurse",
                "message": "Only nurse accounts can complete a nurse profile.",
            },
        )
    return current_user
