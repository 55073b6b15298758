import enum


# ── Account verification state (owned by the identity service) ───────────────
class AccountStatus(str, enum.Enum):
    PENDING = "pending"      # Registered, not yet approved by an admin
    VERIFIED = "verified"    # Admin approved the nurse's profile submission
    REJECTED = "rejected"    # Account closed by an admin (terminal)
