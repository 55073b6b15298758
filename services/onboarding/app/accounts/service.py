"""
Account collaborator — the narrow slice of the identity service this service needs.

  get_account_status()   role + verification status of one account
  set_account_status()   written only by the admin-review flow
"""
from __future__ import annotations

import uuid

import sqlalchemy as sa
from pydantic import BaseModel, ConfigDict
from sqlalchemy.ext.asyncio import AsyncSession

from app.accounts.constants import AccountStatus
from app.accounts.models import User
from app.database import store_errors


class AccountSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_id: uuid.UUID
    role: str
    account_status: str


async def get_account_status(
    session: AsyncSession, user_id: uuid.UUID
) -> AccountSnapshot | None:
    with store_errors("get_account_status"):
        result = await session.execute(
            sa.select(User.role, User.account_status).where(User.id == user_id)
        )
    row = result.one_or_none()
    if row is None:
        return None
    return AccountSnapshot(user_id=user_id, role=row.role, account_status=row.account_status)


async def set_account_status(
    session: AsyncSession, user_id: uuid.UUID, status: AccountStatus
) -> None:
    with store_errors("set_account_status"):
        await session.execute(
            sa.update(User)
            .where(User.id == user_id)
            .values(account_status=status.value)
            .execution_options(synchronize_session=False)
        )
