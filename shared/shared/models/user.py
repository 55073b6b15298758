from uuid import UUID

from pydantic import BaseModel, ConfigDict

from shared.constants import Role


class CurrentUser(BaseModel):
    """Caller identity taken from a verified JWT; passed explicitly to every service call."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: UUID
    email: str
    role: Role

    @property
    def is_nurse(self) -> bool:
        return self.role == Role.NURSE

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
