"""
Review domain — Pydantic V2 request/response schemas.
"""
from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.review.constants import ReviewDecision
from shared.models.pagination import PaginatedResponse


class _Base(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)


# ── Requests ──────────────────────────────────────────────────────────────────

class ReviewRequest(_Base):
    action: ReviewDecision
    notes: str | None = Field(None, max_length=2000, description="Internal notes for other admins.")
    reason: str | None = Field(
        None,
        max_length=1000,
        description="Shown to the nurse. Required when action is REJECT or REQUEST_CHANGES.",
    )
    close_account: bool = Field(
        False,
        description="REJECT only: also reject the account, so the nurse cannot resubmit.",
    )

    @model_validator(mode="after")
    def reason_required_unless_approving(self) -> "ReviewRequest":
        if self.action is not ReviewDecision.APPROVE and not (self.reason or "").strip():
            raise ValueError(
                f"A reason is required when action is {self.action.value}. "
                "Tell the nurse what needs to change."
            )
        if self.close_account and self.action is not ReviewDecision.REJECT:
            raise ValueError("close_account can only be set when action is REJECT.")
        return self


class NoteRequest(_Base):
    notes: str = Field(..., min_length=1, max_length=2000)


# ── Responses ─────────────────────────────────────────────────────────────────

class ActionLogEntry(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    action: str
    admin_id: uuid.UUID | None
    notes: str | None
    reason: str | None
    occurred_at: datetime


class SubmissionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    nurse_profile_id: uuid.UUID
    status: str
    priority: str
    submitted_at: datetime
    reviewed_at: datetime | None
    reviewed_by: uuid.UUID | None
    admin_notes: str | None
    rejection_reason: str | None
    actions: list[ActionLogEntry]


class QueueItem(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    user_name: str
    user_email: str
    status: str
    priority: str
    submitted_at: datetime


QueueResponse = PaginatedResponse[QueueItem]
