"""Entity: Identity."""

from pydantic import Field

from src.muslimhunt.entities._base import Entity


class Identity(Entity):
    """Maps an external identity (magic-link email or OAuth subject) to a profile."""

    provider: str = Field(description="'email' or an OAuth provider name")
    subject: str = Field(description="Email address or provider subject")
    profile_id: str = Field(description="Linked profile")
