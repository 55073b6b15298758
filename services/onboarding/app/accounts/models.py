"""
Onboarding service — ORM view of platform accounts.

Tables read by this module:
  - users   Account identity, role and verification status

The users table belongs to the identity service; this service only reads role
and account_status and writes account_status when an admin review settles.
"""
from __future__ import annotations

import uuid
from datetime import datetime, timezone

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from shared.database.postgres import Base

from app.accounts.constants import AccountStatus


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(sa.Uuid, primary_key=True, default=uuid.uuid4)
    email: Mapped[str] = mapped_column(
        sa.String(255), unique=True, nullable=False, index=True
    )
    full_name: Mapped[str] = mapped_column(sa.String(150), nullable=False)
    # shared.constants.Role value: patient / nurse / admin
    role: Mapped[str] = mapped_column(sa.String(20), nullable=False, index=True)
    account_status: Mapped[str] = mapped_column(
        sa.String(20),
        nullable=False,
        default=AccountStatus.PENDING.value,
        server_default=sa.text("'pending'"),
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=func.now(),
    )
