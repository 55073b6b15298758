"""
Onboarding domain — Pydantic V2 request/response schemas.

Step payloads are validated here and stored as JSON on the profile.  Uploaded
documents are referenced by descriptor only; the files themselves live with
the upload service.
"""
from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class _Base(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)


class DocumentDescriptor(_Base):
    file_name: str = Field(..., min_length=1, max_length=255)
    original_name: str = Field(..., min_length=1, max_length=255)
    file_url: str = Field(..., min_length=1, max_length=2048)
    file_type: str = Field(..., max_length=100)
    file_size: int = Field(..., ge=0)
    document_type: str | None = Field(None, max_length=50)


# ── Requests ──────────────────────────────────────────────────────────────────

class Step1BasicInfo(_Base):
    full_name: str = Field(..., min_length=2, max_length=150)
    email_address: EmailStr


class Step2Verification(_Base):
    license_number: str = Field(..., min_length=1, max_length=100)
    license_expiration_date: date
    license_document: DocumentDescriptor | None = None
    background_check_document: DocumentDescriptor | None = None
    resume_document: DocumentDescriptor | None = None


class Step3CompleteProfile(_Base):
    """Everything here is optional; an empty body still completes step 3."""

    certification_name: str | None = Field(None, max_length=200)
    issuing_organization: str | None = Field(None, max_length=200)
    certification_license_number: str | None = Field(None, max_length=100)
    certification_expiration_date: date | None = None
    skills: list[str] = Field(default_factory=list, max_length=50)
    work_experience: str | None = Field(None, max_length=5000)
    institution_name: str | None = Field(None, max_length=200)
    degree: str | None = Field(None, max_length=200)
    graduation_date: date | None = None
    additional_documents: list[DocumentDescriptor] = Field(default_factory=list, max_length=20)


STEP_SCHEMAS: dict[int, type[_Base]] = {
    1: Step1BasicInfo,
    2: Step2Verification,
    3: Step3CompleteProfile,
}


# ── Responses ─────────────────────────────────────────────────────────────────

class ProfileCompletionStatusView(BaseModel):
    status: str
    step1_completed: bool
    step2_completed: bool
    step3_completed: bool
    step1_completed_at: datetime | None = None
    step2_completed_at: datetime | None = None
    step3_completed_at: datetime | None = None
    submitted_at: datetime | None = None
    next_step: int
    """4 once every step is done."""
    completion_percentage: int


class StepSavedResponse(BaseModel):
    step: int
    message: str
    profile: ProfileCompletionStatusView


class SubmitResponse(BaseModel):
    submission_id: uuid.UUID
    status: str
    submitted_at: datetime
    message: str


class StepAccessResponse(BaseModel):
    step: int
    can_access: bool


class StepDataResponse(BaseModel):
    step: int
    data: dict[str, Any]
