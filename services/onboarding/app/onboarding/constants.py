import enum

# ── Onboarding steps ──────────────────────────────────────────────────────────
#   1  Basic information
#   2  Verification documents (license + uploaded descriptors)
#   3  Professional profile (certifications, skills, education)
STEPS: tuple[int, ...] = (1, 2, 3)


# ── Profile completion lifecycle ──────────────────────────────────────────────
class ProfileCompletionStatus(str, enum.Enum):
    NOT_STARTED = "not_started"
    STEP_1_COMPLETED = "step_1_completed"
    STEP_2_COMPLETED = "step_2_completed"
    STEP_3_COMPLETED = "step_3_completed"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"


# Order in which a step save may advance completion_status.  Statuses outside
# this tuple (submitted, approved, rejected, or anything unrecognised) are never
# touched by a step save.
STEP_PROGRESSION: tuple[ProfileCompletionStatus, ...] = (
    ProfileCompletionStatus.NOT_STARTED,
    ProfileCompletionStatus.STEP_1_COMPLETED,
    ProfileCompletionStatus.STEP_2_COMPLETED,
    ProfileCompletionStatus.STEP_3_COMPLETED,
)

STEP_COMPLETED_STATUS: dict[int, ProfileCompletionStatus] = {
    1: ProfileCompletionStatus.STEP_1_COMPLETED,
    2: ProfileCompletionStatus.STEP_2_COMPLETED,
    3: ProfileCompletionStatus.STEP_3_COMPLETED,
}


# ── Submission review lifecycle ───────────────────────────────────────────────
class SubmissionStatus(str, enum.Enum):
    PENDING = "pending"
    UNDER_REVIEW = "under_review"
    APPROVED = "approved"
    REJECTED = "rejected"
    REQUIRES_CHANGES = "requires_changes"


# At most one submission per user may sit in one of these at a time
# (partial unique index uq_profile_submissions_active_user).
ACTIVE_SUBMISSION_STATUSES: tuple[SubmissionStatus, ...] = (
    SubmissionStatus.PENDING,
    SubmissionStatus.UNDER_REVIEW,
)


class SubmissionPriority(str, enum.Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"


# ── Admin action log entries ──────────────────────────────────────────────────
class AdminAction(str, enum.Enum):
    STARTED_REVIEW = "started_review"
    APPROVED = "approved"
    REJECTED = "rejected"
    REQUESTED_CHANGES = "requested_changes"
    ADDED_NOTE = "added_note"
