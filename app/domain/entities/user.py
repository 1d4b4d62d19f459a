"""User entity model."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from app.domain.value_objects import UserRole


class User(BaseModel):
    """Signed-in API user, stored JSON-serialized under ``auth_user``."""

    model_config = ConfigDict(extra="ignore", use_enum_values=True)

    id: int = Field(..., description="API user ID")
    name: str = Field("", description="Display name")
    email: str = Field("", description="Login email")
    phone: str | None = Field(None, description="Phone number")
    role: str = Field(UserRole.USER.value, description="user, admin or superadmin")

    @property
    def is_staff(self) -> bool:
        return UserRole.is_staff(self.role)

    @property
    def display_name(self) -> str:
        return self.name or self.email or f"User {self.id}"
