# Domain exceptions raised by the onboarding, access and review service layers.
# The controller layer converts them to HTTPException (see app.exceptions).

import uuid


class OnboardingError(Exception):
    """Base class for expected business outcomes that end a request early."""


class AccountNotFoundError(OnboardingError):
    def __init__(self, user_id: uuid.UUID) -> None:
        self.user_id = user_id
        super().__init__(f"Account {user_id} not found")


class NotNurseError(OnboardingError):
    def __init__(self, user_id: uuid.UUID, role: str) -> None:
        self.user_id = user_id
        self.role = role
        super().__init__(f"User {user_id} is not a nurse (role: {role})")


class InvalidStepError(OnboardingError):
    def __init__(self, step: int) -> None:
        self.step = step
        super().__init__(f"Step {step} does not exist; steps are numbered 1 to 3")


class SequenceViolation(OnboardingError):
    """A step was saved before one of its prerequisite steps."""

    def __init__(self, step: int, missing_step: int) -> None:
        self.step = step
        self.missing_step = missing_step
        super().__init__(f"Step {missing_step} must be completed before step {step}")


class StepNotAccessibleError(OnboardingError):
    def __init__(self, step: int) -> None:
        self.step = step
        super().__init__(f"Previous steps must be completed before step {step} can be viewed")


class IncompleteProfileError(OnboardingError):
    def __init__(self, missing_steps: list[int]) -> None:
        self.missing_steps = missing_steps
        steps = ", ".join(str(s) for s in missing_steps)
        super().__init__(f"All steps must be completed before submission (missing: {steps})")


class DuplicateSubmissionError(OnboardingError):
    """A submission for this user is already pending or under review."""

    def __init__(self, user_id: uuid.UUID) -> None:
        self.user_id = user_id
        super().__init__(f"User {user_id} already has a submission awaiting review")


class ProfileAlreadyApprovedError(OnboardingError):
    def __init__(self, user_id: uuid.UUID) -> None:
        self.user_id = user_id
        super().__init__(f"Profile of user {user_id} is already approved")


class SubmissionNotFoundError(OnboardingError):
    def __init__(self, submission_id: uuid.UUID) -> None:
        self.submission_id = submission_id
        super().__init__(f"Submission {submission_id} not found")


class SubmissionNotReviewableError(OnboardingError):
    def __init__(self, submission_id: uuid.UUID, status: str) -> None:
        self.submission_id = submission_id
        self.status = status
        super().__init__(f"Submission {submission_id} is {status} and cannot be reviewed")


class StoreUnavailableError(OnboardingError):
    """Persistence could not be reached. The only error worth retrying."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"Store unavailable during {operation}")


class UnknownStateError(OnboardingError):
    """Account/completion status pair outside every known branch. Logged, never raised."""

    def __init__(self, account_status: object, completion_status: object) -> None:
        self.account_status = account_status
        self.completion_status = completion_status
        super().__init__(
            f"Unrecognised access state: account_status={account_status!r}, "
            f"completion_status={completion_status!r}"
        )
