"""
Onboarding service — SQLAlchemy ORM models for the onboarding domain.

Tables owned by this module:
  - nurse_profiles           One row per nurse: step payloads + completion flags
  - profile_submissions      Admin review requests, one per submission attempt
  - submission_action_logs   Append-only history of admin actions on a submission
"""
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from shared.database.postgres import Base

from app.accounts.models import User
from app.onboarding.constants import (
    ACTIVE_SUBMISSION_STATUSES,
    ProfileCompletionStatus,
    SubmissionPriority,
    SubmissionStatus,
)

_ACTIVE_SUBMISSION_PREDICATE = "status IN ({})".format(
    ", ".join(f"'{s.value}'" for s in ACTIVE_SUBMISSION_STATUSES)
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class NurseProfile(Base):
    """
    Onboarding progress of a single nurse.

    Invariants (maintained by app.onboarding.store):
      step3_completed → step2_completed → step1_completed
      stepN_completed_at is written once, on the first transition to true
      completion_status only moves forward through the step statuses; the
      review flow is the only writer that moves it back.

    completion_status is plain text rather than a database ENUM so that a row
    written by a newer schema still loads and falls through to the access
    evaluator's fail-closed branch.
    """

    __tablename__ = "nurse_profiles"

    id: Mapped[uuid.UUID] = mapped_column(sa.Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        sa.Uuid,
        sa.ForeignKey("users.id", ondelete="CASCADE", name="fk_nurse_profiles_user_id"),
        nullable=False,
        unique=True,
    )
    completion_status: Mapped[str] = mapped_column(
        sa.String(32),
        nullable=False,
        default=ProfileCompletionStatus.NOT_STARTED.value,
        server_default=sa.text("'not_started'"),
        index=True,
    )

    # ── Step 1: basic information ─────────────────────────────────────────────
    step1_completed: Mapped[bool] = mapped_column(
        sa.Boolean, nullable=False, default=False, server_default=sa.false()
    )
    step1_completed_at: Mapped[datetime | None] = mapped_column(
        sa.DateTime(timezone=True), nullable=True
    )
    step1_data: Mapped[dict[str, Any] | None] = mapped_column(sa.JSON, nullable=True)

    # ── Step 2: verification documents ────────────────────────────────────────
    step2_completed: Mapped[bool] = mapped_column(
        sa.Boolean, nullable=False, default=False, server_default=sa.false()
    )
    step2_completed_at: Mapped[datetime | None] = mapped_column(
        sa.DateTime(timezone=True), nullable=True
    )
    step2_data: Mapped[dict[str, Any] | None] = mapped_column(sa.JSON, nullable=True)

    # ── Step 3: professional profile ──────────────────────────────────────────
    step3_completed: Mapped[bool] = mapped_column(
        sa.Boolean, nullable=False, default=False, server_default=sa.false()
    )
    step3_completed_at: Mapped[datetime | None] = mapped_column(
        sa.DateTime(timezone=True), nullable=True
    )
    step3_data: Mapped[dict[str, Any] | None] = mapped_column(sa.JSON, nullable=True)

    submitted_at: Mapped[datetime | None] = mapped_column(
        sa.DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=func.now(),
    )


class ProfileSubmission(Base):
    """
    A completed profile handed to the admin team for review.

    State machine (see app.review.service):
      PENDING       →  UNDER_REVIEW      (admin opens it)
      PENDING/UNDER_REVIEW → APPROVED | REJECTED | REQUIRES_CHANGES

    The partial unique index allows any number of settled submissions per user
    but only one in PENDING/UNDER_REVIEW, so concurrent submits cannot both land.
    """

    __tablename__ = "profile_submissions"
    __table_args__ = (
        sa.Index(
            "uq_profile_submissions_active_user",
            "user_id",
            unique=True,
            postgresql_where=sa.text(_ACTIVE_SUBMISSION_PREDICATE),
            sqlite_where=sa.text(_ACTIVE_SUBMISSION_PREDICATE),
        ),
        sa.Index("ix_profile_submissions_status_submitted_at", "status", "submitted_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(sa.Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        sa.Uuid,
        sa.ForeignKey("users.id", ondelete="CASCADE", name="fk_profile_submissions_user_id"),
        nullable=False,
    )
    nurse_profile_id: Mapped[uuid.UUID] = mapped_column(
        sa.Uuid,
        sa.ForeignKey(
            "nurse_profiles.id",
            ondelete="CASCADE",
            name="fk_profile_submissions_nurse_profile_id",
        ),
        nullable=False,
    )
    status: Mapped[str] = mapped_column(
        sa.String(20),
        nullable=False,
        default=SubmissionStatus.PENDING.value,
        server_default=sa.text("'pending'"),
    )
    priority: Mapped[str] = mapped_column(
        sa.String(10),
        nullable=False,
        default=SubmissionPriority.NORMAL.value,
        server_default=sa.text("'normal'"),
    )
    submitted_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False, default=_utcnow
    )
    reviewed_at: Mapped[datetime | None] = mapped_column(
        sa.DateTime(timezone=True), nullable=True
    )
    # SET NULL keeps the submission if the reviewing admin is deleted
    reviewed_by: Mapped[uuid.UUID | None] = mapped_column(
        sa.Uuid,
        sa.ForeignKey("users.id", ondelete="SET NULL", name="fk_profile_submissions_reviewed_by"),
        nullable=True,
    )
    admin_notes: Mapped[str | None] = mapped_column(sa.Text(), nullable=True)
    rejection_reason: Mapped[str | None] = mapped_column(sa.Text(), nullable=True)

    # ── Relationships ─────────────────────────────────────────────────────────
    # Explicit foreign_keys required because two FKs point to users.id.
    user: Mapped[User] = relationship("User", foreign_keys=[user_id])
    actions: Mapped[list[SubmissionActionLog]] = relationship(
        "SubmissionActionLog",
        order_by="SubmissionActionLog.occurred_at",
        lazy="selectin",
        cascade="all, delete-orphan",
    )


class SubmissionActionLog(Base):
    """One admin action on a submission. Rows are only ever inserted."""

    __tablename__ = "submission_action_logs"

    id: Mapped[uuid.UUID] = mapped_column(sa.Uuid, primary_key=True, default=uuid.uuid4)
    submission_id: Mapped[uuid.UUID] = mapped_column(
        sa.Uuid,
        sa.ForeignKey(
            "profile_submissions.id",
            ondelete="CASCADE",
            name="fk_submission_action_logs_submission_id",
        ),
        nullable=False,
        index=True,
    )
    admin_id: Mapped[uuid.UUID | None] = mapped_column(
        sa.Uuid,
        sa.ForeignKey("users.id", ondelete="SET NULL", name="fk_submission_action_logs_admin_id"),
        nullable=True,
    )
    action: Mapped[str] = mapped_column(sa.String(32), nullable=False)
    notes: Mapped[str | None] = mapped_column(sa.Text(), nullable=True)
    reason: Mapped[str | None] = mapped_column(sa.Text(), nullable=True)
    occurred_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=func.now(),
    )
