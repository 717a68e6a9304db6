"""Profile provisioning for signed-in users and the profile page view."""

from dataclasses import dataclass
from typing import Any

from loguru import logger
from sqlmodel import Session

from src.muslimhunt.entities.core.identity import Identity, IdentityRepository
from src.muslimhunt.entities.core.profile import (
    Profile,
    ProfileRepository,
    ProfileView,
    default_avatar_url,
    placeholder_profile,
)
from src.muslimhunt.entities.service.follow import FollowRepository
from src.muslimhunt.entities.service.product import ProductRepository
from src.muslimhunt.runtime.context import get_config

POINTS_PER_PRODUCT = 10


@dataclass(frozen=True)
class AuthUser:
    """The signed-in user as the client sees it."""

    id: str
    email: str
    username: str
    avatar_url: str
    is_admin: bool = False


def display_name(email: str | None, metadata: dict[str, Any] | None) -> str:
    """``full_name`` or ``name`` from the provider, else the email local part."""
    metadata = metadata or {}
    name = metadata.get("full_name") or metadata.get("name")
    if name:
        return name
    if email and email.split("@")[0]:
        return email.split("@")[0]
    return "Member"


def avatar_for(user_id: str, metadata: dict[str, Any] | None) -> str:
    metadata = metadata or {}
    return metadata.get("avatar_url") or metadata.get("picture") or default_avatar_url(user_id)


def auth_user_from_profile(profile: Profile) -> AuthUser:
    return AuthUser(
        id=profile.id,
        email=profile.email or "",
        username=profile.username or display_name(profile.email, None),
        avatar_url=profile.avatar_url or default_avatar_url(profile.id),
        is_admin=profile.is_admin,
    )


class ProfileService:
    def __init__(self, db_session: Session):
        self._profiles = ProfileRepository(db_session)
        self._identities = IdentityRepository(db_session)
        self._follows = FollowRepository(db_session)
        self._products = ProductRepository(db_session)

    def provision(
        self,
        provider: str,
        subject: str,
        email: str | None,
        metadata: dict[str, Any] | None = None,
        email_verified: bool = False,
    ) -> Profile:
        """Find or create the profile behind an external identity.

        A verified email links the identity to the profile already holding
        that email. An unverified email is not stored at all, so it can
        neither claim an existing profile nor an admin grant. Verified emails
        listed in ``app.admin_emails`` become admins.
        """
        identity = self._identities.get_by_provider_subject(provider, subject)
        if identity is not None:
            profile = self._profiles.get(identity.profile_id)
            if profile is not None:
                return self._apply_admin_list(profile)

        if not email_verified:
            if email:
                logger.info("Ignoring unverified email from {}", provider)
            email = None
        profile = self._profiles.get_by_email(email) if email else None
        if profile is None:
            profile = Profile(username="Member", email=email)
            profile = profile.model_copy(
                update={
                    "username": display_name(email, metadata),
                    "avatar_url": avatar_for(profile.id, metadata),
                }
            )
            profile = self._profiles.create(profile)
            logger.info("Provisioned profile {} via {}", profile.id, provider)

        self._identities.create(
            Identity(provider=provider, subject=subject, profile_id=profile.id)
        )
        return self._apply_admin_list(profile)

    def _apply_admin_list(self, profile: Profile) -> Profile:
        admin_emails = {e.lower() for e in get_config().app.admin_emails}
        if profile.email and profile.email.lower() in admin_emails and not profile.is_admin:
            return self._profiles.set_admin(profile.id, True)
        return profile

    def get(self, profile_id: str) -> Profile | None:
        return self._profiles.get(profile_id)

    def view(self, profile_id: str, viewer_id: str | None = None) -> ProfileView:
        """Profile page data; members without a stored profile get a placeholder."""
        profile = self._profiles.get(profile_id)
        products_count = self._products.count_by_user(profile_id)
        is_following = bool(
            viewer_id
            and viewer_id != profile_id
            and self._follows.is_following(viewer_id, profile_id)
        )
        extra = {
            "products_count": products_count,
            "points": products_count * POINTS_PER_PRODUCT,
            "is_following": is_following,
        }
        if profile is None:
            return placeholder_profile(profile_id).model_copy(update=extra)
        return ProfileView.from_profile(profile, **extra)

    def update(self, profile_id: str, changes: dict[str, Any]) -> Profile:
        """Upsert the editable profile fields for ``profile_id``."""
        existing = self._profiles.get(profile_id)
        if existing is None:
            base = Profile(id=profile_id, username=changes.get("username") or "Member")
        else:
            base = existing
        return self._profiles.upsert(base.model_copy(update=changes))
