import enum

# ── Frontend routes a denied nurse is sent to ─────────────────────────────────
PROFILE_COMPLETE_PATH = "/nurse-profile-complete"
VERIFICATION_PENDING_PATH = "/verification-pending"
PROFILE_REJECTED_PATH = "/profile-rejected"
ACCOUNT_REJECTED_PATH = "/account-rejected"


class Capability(str, enum.Enum):
    PLATFORM = "platform"
    DASHBOARD = "dashboard"
    REQUESTS = "requests"
    CREATE_REQUEST = "create_request"
    PROFILE = "profile"


class NextAction(str, enum.Enum):
    NONE = "none"
    COMPLETE_STEP_1 = "complete_step_1"
    COMPLETE_STEP_2 = "complete_step_2"
    COMPLETE_STEP_3 = "complete_step_3"
    SUBMIT_PROFILE = "submit_profile"
    WAIT_FOR_APPROVAL = "wait_for_approval"
    CONTACT_SUPPORT = "contact_support"
    RESUBMIT_PROFILE = "resubmit_profile"
    COMPLETE_PROFILE = "complete_profile"
    RETRY_LATER = "retry_later"


STATUS_MESSAGES: dict[NextAction, str] = {
    NextAction.NONE: "Welcome! You have full access to the platform.",
    NextAction.COMPLETE_STEP_1: "Please complete your basic information to continue.",
    NextAction.COMPLETE_STEP_2: "Please upload your verification documents to continue.",
    NextAction.COMPLETE_STEP_3: "Please complete your professional profile to continue.",
    NextAction.SUBMIT_PROFILE: "Your profile is ready! Please submit it for admin review.",
    NextAction.WAIT_FOR_APPROVAL: "Your profile is under review. You'll be notified once approved.",
    NextAction.CONTACT_SUPPORT: "Please contact support for assistance with your account.",
    NextAction.RESUBMIT_PROFILE: "Please update and resubmit your profile for review.",
    NextAction.COMPLETE_PROFILE: "Please complete your profile setup to access the platform.",
    NextAction.RETRY_LATER: "We could not check your account status. Please try again shortly.",
}
