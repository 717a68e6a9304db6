"""Profile database table model."""

from sqlmodel import Field

from src.muslimhunt.entities._base import EntityTable


class ProfileTable(EntityTable, table=True):
    """Database persistence model for profiles."""

    __tablename__ = "profiles"

    username: str = Field(index=True)
    email: str | None = Field(default=None, unique=True, index=True)
    avatar_url: str | None = None
    bio: str | None = None
    headline: str | None = None
    twitter_url: str | None = None
    website_url: str | None = None
    is_admin: bool = False
    followers_count: int = 0
    following_count: int = 0
