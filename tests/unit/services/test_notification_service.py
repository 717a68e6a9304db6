import asyncio

import pytest

from src.muslimhunt.core.services.notification_service import NotificationService
from src.muslimhunt.core.services.realtime import ChangeHub
from src.muslimhunt.entities.service.notification import NotificationType
from tests.factories import make_notification, make_profile


class TestNotificationService:
    def test_notify_without_user_is_a_no_op(self, db_session):
        service = NotificationService(db_session)
        assert service.notify(None, NotificationType.COMMENT, "hi") is None

    def test_mark_read_rejects_foreign_notification(self, db_session):
        owner = make_profile(db_session, email="owner@example.com")
        other = make_profile(db_session, username="Other", email="other@example.com")
        notification = make_notification(db_session, owner)

        with pytest.raises(ValueError):
            NotificationService(db_session).mark_read(other.id, notification.id)

    def test_mark_all_read(self, db_session):
        owner = make_profile(db_session)
        make_notification(db_session, owner)
        make_notification(db_session, owner, is_read=True)
        make_notification(db_session, owner)
        service = NotificationService(db_session)

        assert service.unread_count(owner.id) == 2
        assert service.mark_all_read(owner.id) == 2
        assert service.unread_count(owner.id) == 0

    @pytest.mark.asyncio
    async def test_changes_are_published(self, db_session):
        owner = make_profile(db_session)
        hub = ChangeHub()
        subscription = hub.subscribe("notifications")
        service = NotificationService(db_session, hub)

        created = service.notify(owner.id, NotificationType.STREAK, "7 day streak")
        service.mark_read(owner.id, created.id)

        inserted = await asyncio.wait_for(subscription.get(), timeout=1)
        updated = await asyncio.wait_for(subscription.get(), timeout=1)
        assert inserted.type == "INSERT"
        assert inserted.new["user_id"] == owner.id
        assert updated.old["is_read"] is False
        assert updated.new["is_read"] is True
