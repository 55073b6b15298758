#!/usr/bin/env python3
"""
Create a demo nurse and a reviewing admin in the onboarding database, and print
a short-lived access token for each so the API can be exercised from /docs.

Reads from .env:
    ONBOARDING_DATABASE_URL   — target database (required)
    SEED_NURSE_EMAIL          — nurse email (optional, defaults to nurse@example.com)
    SEED_ADMIN_EMAIL          — admin email (optional, defaults to admin@example.com)
    JWT_SECRET / JWT_ISSUER / JWT_AUDIENCE — token signing (see shared.auth.config)

Usage:
    cd <repo root>
    python -m scripts.seed_nurse
"""
from __future__ import annotations

import asyncio
import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

# Add backend root to path so imports resolve
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "services" / "onboarding"))
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "shared"))

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent.parent / ".env")

from jose import jwt
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import async_sessionmaker

from app.accounts.constants import AccountStatus
from app.accounts.models import User
from shared.auth.config import AuthSettings
from shared.constants import Role
from shared.database.postgres import get_async_engine

TOKEN_TTL = timedelta(hours=12)


def _token(user: User, settings: AuthSettings) -> str:
    now = datetime.now(timezone.utc)
    claims = {
        "sub": str(user.id),
        "email": user.email,
        "role": user.role,
        "iss": settings.issuer,
        "aud": settings.audience,
        "iat": now,
        "exp": now + TOKEN_TTL,
    }
    return jwt.encode(claims, settings.secret, algorithm=settings.algorithm)


async def _get_or_create(session, email: str, full_name: str, role: Role, status: AccountStatus) -> User:
    result = await session.execute(select(User).where(func.lower(User.email) == email.lower()))
    user = result.scalar_one_or_none()
    if user is not None:
        print(f"User {email} already exists (id={user.id}, status={user.account_status}).")
        return user
    user = User(email=email, full_name=full_name, role=role.value, account_status=status.value)
    session.add(user)
    await session.flush()
    print(f"Created {role.value} {email} (id={user.id})")
    return user


async def main() -> None:
    db_url = os.getenv("ONBOARDING_DATABASE_URL")
    if not db_url:
        print("Error: ONBOARDING_DATABASE_URL must be set in .env")
        sys.exit(1)
    nurse_email = os.getenv("SEED_NURSE_EMAIL", "nurse@example.com")
    admin_email = os.getenv("SEED_ADMIN_EMAIL", "admin@example.com")

    engine = get_async_engine(db_url)
    session_factory = async_sessionmaker(engine, expire_on_commit=False)
    async with session_factory() as session:
        nurse = await _get_or_create(
            session, nurse_email, "Demo Nurse", Role.NURSE, AccountStatus.PENDING
        )
        admin = await _get_or_create(
            session, admin_email, "Demo Reviewer", Role.ADMIN, AccountStatus.VERIFIED
        )
        await session.commit()

    settings = AuthSettings()
    print(f"\nNurse token:\n  {_token(nurse, settings)}")
    print(f"\nAdmin token:\n  {_token(admin, settings)}")

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
