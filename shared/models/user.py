from uuid import UUID

from pydantic import BaseModel, ConfigDict

from shared.constants import Role


class CurrentUser(BaseModel):
    """User context decoded from the session token."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: UUID
    email: str
    role: Role
    # seconds since epoch; compared against the account's password_changed_at
    issued_at: int | None = None
