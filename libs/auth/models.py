from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

SYSTEM_ACTOR = "system"


class AuthUser(BaseModel):
    """
    Caller identity read from a bearer token.
    """

    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="sub")
    email: Optional[EmailStr] = None
    role: str = "authenticated"

    @property
    def actor(self) -> str:
        """Value recorded in created_by/updated_by."""
        return self.email or self.user_id


def actor_for(user: Optional[AuthUser]) -> str:
    return user.actor if user else SYSTEM_ACTOR
