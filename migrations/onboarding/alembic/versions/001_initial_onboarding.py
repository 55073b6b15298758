"""Onboarding schema: users, nurse_profiles, profile_submissions, submission_action_logs

Revision ID: 001
Revises:
Create Date: 2026-10-18

Tables created:
  - users                    Account role + verification status (mirrors identity)
  - nurse_profiles           Step payloads and completion flags, one row per nurse
  - profile_submissions      Admin review requests
  - submission_action_logs   Append-only admin action history

Status columns are VARCHAR, not ENUM types, so unrecognised values load and are
handled by the access evaluator.

uq_profile_submissions_active_user is a partial unique index: a user may have
any number of settled submissions but only one pending or under review.

Downgrade: drops all tables in reverse dependency order.
"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_ACTIVE_SUBMISSION = "status IN ('pending', 'under_review')"


# ─────────────────────────────────────────────────────────────────────────────
#  UPGRADE
# ─────────────────────────────────────────────────────────────────────────────

def upgrade() -> None:
    # ── 1. users ──────────────────────────────────────────────────────────────
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("full_name", sa.String(150), nullable=False),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("account_status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_role", "users", ["role"])
    op.create_index("ix_users_account_status", "users", ["account_status"])

    # ── 2. nurse_profiles ─────────────────────────────────────────────────────
    op.create_table(
        "nurse_profiles",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "user_id",
            sa.Uuid(),
            sa.ForeignKey("users.id", ondelete="CASCADE", name="fk_nurse_profiles_user_id"),
            nullable=False,
            unique=True,
        ),
        sa.Column(
            "completion_status", sa.String(32), nullable=False, server_default="not_started"
        ),
        sa.Column("step1_completed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("step1_completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("step1_data", sa.JSON(), nullable=True),
        sa.Column("step2_completed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("step2_completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("step2_data", sa.JSON(), nullable=True),
        sa.Column("step3_completed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("step3_completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("step3_data", sa.JSON(), nullable=True),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index(
        "ix_nurse_profiles_completion_status", "nurse_profiles", ["completion_status"]
    )

    # ── 3. profile_submissions ────────────────────────────────────────────────
    op.create_table(
        "profile_submissions",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "user_id",
            sa.Uuid(),
            sa.ForeignKey("users.id", ondelete="CASCADE", name="fk_profile_submissions_user_id"),
            nullable=False,
        ),
        sa.Column(
            "nurse_profile_id",
            sa.Uuid(),
            sa.ForeignKey(
                "nurse_profiles.id",
                ondelete="CASCADE",
                name="fk_profile_submissions_nurse_profile_id",
            ),
            nullable=False,
        ),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("priority", sa.String(10), nullable=False, server_default="normal"),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "reviewed_by",
            sa.Uuid(),
            sa.ForeignKey(
                "users.id", ondelete="SET NULL", name="fk_profile_submissions_reviewed_by"
            ),
            nullable=True,
        ),
        sa.Column("admin_notes", sa.Text(), nullable=True),
        sa.Column("rejection_reason", sa.Text(), nullable=True),
    )
    op.create_index(
        "uq_profile_submissions_active_user",
        "profile_submissions",
        ["user_id"],
        unique=True,
        postgresql_where=sa.text(_ACTIVE_SUBMISSION),
        sqlite_where=sa.text(_ACTIVE_SUBMISSION),
    )
    op.create_index(
        "ix_profile_submissions_status_submitted_at",
        "profile_submissions",
        ["status", "submitted_at"],
    )

    # ── 4. submission_action_logs ─────────────────────────────────────────────
    op.create_table(
        "submission_action_logs",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "submission_id",
            sa.Uuid(),
            sa.ForeignKey(
                "profile_submissions.id",
                ondelete="CASCADE",
                name="fk_submission_action_logs_submission_id",
            ),
            nullable=False,
        ),
        sa.Column(
            "admin_id",
            sa.Uuid(),
            sa.ForeignKey(
                "users.id", ondelete="SET NULL", name="fk_submission_action_logs_admin_id"
            ),
            nullable=True,
        ),
        sa.Column("action", sa.String(32), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column(
            "occurred_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index(
        "ix_submission_action_logs_submission_id", "submission_action_logs", ["submission_id"]
    )


# ─────────────────────────────────────────────────────────────────────────────
#  DOWNGRADE
# ─────────────────────────────────────────────────────────────────────────────

def downgrade() -> None:
    # Drop tables in reverse FK dependency order
    op.drop_table("submission_action_logs")
    op.drop_table("profile_submissions")
    op.drop_table("nurse_profiles")
    op.drop_table("users")
