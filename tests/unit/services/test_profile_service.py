"""Tests for profile provisioning and the profile page view."""

import pytest

from src.muslimhunt.core.services.follow_service import FollowService
from src.muslimhunt.core.services.profile_service import (
    POINTS_PER_PRODUCT,
    ProfileService,
    auth_user_from_profile,
    display_name,
)
from src.muslimhunt.entities.core.profile import DEFAULT_BIO, default_avatar_url
from src.muslimhunt.runtime.config.config_data import AppConfig, ConfigData
from src.muslimhunt.runtime.context import with_context
from tests.factories import make_product, make_profile


class TestDisplayName:
    def test_prefers_provider_names(self):
        assert display_name("a@b.com", {"full_name": "Aisha Khan"}) == "Aisha Khan"
        assert display_name("a@b.com", {"name": "Aisha"}) == "Aisha"

    def test_falls_back_to_email_local_part(self):
        assert display_name("fatima@example.com", None) == "fatima"

    def test_last_resort(self):
        assert display_name(None, {}) == "Member"


class TestProvision:
    def test_creates_profile_once_per_identity(self, db_session):
        service = ProfileService(db_session)

        first = service.provision("email", "omar@example.com", "Omar@Example.com", email_verified=True)
        second = service.provision("email", "omar@example.com", "omar@example.com", email_verified=True)

        assert first.id == second.id
        assert first.username == "Omar"
        assert first.email == "omar@example.com"
        assert first.avatar_url == default_avatar_url(first.id)

    def test_links_new_provider_by_email(self, db_session):
        service = ProfileService(db_session)
        by_email = service.provision("email", "omar@example.com", "omar@example.com", email_verified=True)

        by_google = service.provision(
            "google",
            "google-sub-1",
            "omar@example.com",
            {"picture": "https://img/o.png"},
            email_verified=True,
        )

        assert by_google.id == by_email.id

    def test_unverified_email_gets_its_own_profile(self, db_session):
        service = ProfileService(db_session)
        owner = service.provision("email", "omar@example.com", "omar@example.com", email_verified=True)

        other = service.provision("example", "sub-9", "omar@example.com", {"name": "Someone"})

        assert other.id != owner.id
        assert other.email is None
        assert other.username == "Someone"

    def test_unverified_admin_email_is_not_promoted(self, db_session):
        with with_context(ConfigData(app=AppConfig(admin_emails=["boss@example.com"]))):
            profile = ProfileService(db_session).provision("example", "sub-1", "boss@example.com")

        assert profile.is_admin is False

    def test_admin_emails_are_promoted(self, db_session):
        override = ConfigData(app=AppConfig(admin_emails=["boss@example.com"]))
        with with_context(override):
            profile = ProfileService(db_session).provision(
                "email", "boss@example.com", "boss@example.com", email_verified=True
            )

        assert profile.is_admin is True
        assert auth_user_from_profile(profile).is_admin is True


class TestView:
    def test_placeholder_for_unknown_member(self, db_session):
        view = ProfileService(db_session).view("ghost")

        assert view.is_placeholder is True
        assert view.username == "Community Member"

    def test_points_and_following(self, db_session):
        member = make_profile(db_session)
        viewer = make_profile(db_session, username="Viewer", email="viewer@example.com")
        make_product(db_session, user_id=member.id)
        make_product(db_session, name="Pending", user_id=member.id, is_approved=False)
        FollowService(db_session).toggle(viewer.id, member.id)

        view = ProfileService(db_session).view(member.id, viewer_id=viewer.id)

        assert view.products_count == 1
        assert view.points == POINTS_PER_PRODUCT
        assert view.is_following is True
        assert view.bio == DEFAULT_BIO
        assert view.followers_count == 1


def test_update_creates_missing_profile(db_session):
    updated = ProfileService(db_session).update("fresh-id", {"username": "Hamza", "bio": "Builder"})

    assert updated.id == "fresh-id"
    assert updated.username == "Hamza"
    assert updated.bio == "Builder"


class TestFollowService:
    def test_toggle_keeps_counters_in_step(self, db_session):
        a = make_profile(db_session, username="A", email="a@example.com")
        b = make_profile(db_session, username="B", email="b@example.com")
        service = FollowService(db_session)

        followed = service.toggle(a.id, b.id)
        unfollowed = service.toggle(a.id, b.id)

        assert (followed.following, followed.followers_count) == (True, 1)
        assert (unfollowed.following, unfollowed.followers_count) == (False, 0)

    def test_cannot_follow_self(self, db_session):
        a = make_profile(db_session)
        with pytest.raises(ValueError):
            FollowService(db_session).toggle(a.id, a.id)
