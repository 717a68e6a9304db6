"""Entity: Profile."""

from pydantic import Field

from src.muslimhunt.entities._base import Entity

DEFAULT_BIO = "Product Maker & Community Contributor"
DEFAULT_HEADLINE = "Halal Tech Explorer"

# Never shown to other members or published on the change feed.
PRIVATE_FIELDS = frozenset({"email"})


def default_avatar_url(user_id: str) -> str:
    return f"https://i.pravatar.cc/150?u={user_id}"


class Profile(Entity):
    """A community member."""

    username: str = Field(description="Display name")
    email: str | None = Field(default=None, description="Sign-in email address")
    avatar_url: str | None = Field(default=None)
    bio: str | None = Field(default=None)
    headline: str | None = Field(default=None)
    twitter_url: str | None = Field(default=None)
    website_url: str | None = Field(default=None)
    is_admin: bool = Field(default=False, description="Moderation privileges")
    followers_count: int = Field(default=0, ge=0)
    following_count: int = Field(default=0, ge=0)

    def public_row(self) -> dict:
        return self.model_dump(mode="json", exclude=set(PRIVATE_FIELDS))


class ProfileView(Profile):
    """Profile as shown on the profile page."""

    email: None = Field(default=None, exclude=True)
    products_count: int = 0
    points: int = 0
    is_following: bool = False
    is_placeholder: bool = False

    @classmethod
    def from_profile(cls, profile: Profile, **extra) -> "ProfileView":
        data = profile.model_dump(exclude=set(PRIVATE_FIELDS))
        data["avatar_url"] = profile.avatar_url or default_avatar_url(profile.id)
        data["bio"] = profile.bio or DEFAULT_BIO
        data["headline"] = profile.headline or DEFAULT_HEADLINE
        data.update(extra)
        return cls(**data)


def placeholder_profile(user_id: str) -> ProfileView:
    """Stand-in shown when a member has no stored profile."""
    return ProfileView(
        id=user_id,
        username="Community Member",
        avatar_url=default_avatar_url(user_id),
        bio="Part of the growing Muslim Hunt ecosystem.",
        headline="User",
        is_placeholder=True,
    )
