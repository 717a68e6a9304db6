"""Tests for the approval queue."""

import pytest

from src.muslimhunt.core.services.moderation_service import (
    DEFAULT_PRODUCT_REJECTION,
    DEFAULT_THREAD_REJECTION,
    ModerationService,
)
from src.muslimhunt.entities.service.comment import CommentRepository
from src.muslimhunt.entities.service.forum import ThreadRepository
from src.muslimhunt.entities.service.notification import (
    NotificationRepository,
    NotificationType,
)
from src.muslimhunt.entities.service.product import ProductRepository
from tests.factories import (
    make_comment,
    make_forum_category,
    make_product,
    make_profile,
    make_thread,
)


@pytest.fixture
def maker(db_session):
    return make_profile(db_session, username="Yusuf", email="yusuf@example.com")


class TestPending:
    def test_lists_unapproved_items(self, db_session, maker):
        make_product(db_session, name="Live", is_approved=True)
        waiting = make_product(db_session, name="Waiting", is_approved=False, user_id=maker.id)
        category = make_forum_category(db_session, name="Islamic Finance", slug="islamic-finance")
        thread = make_thread(db_session, category, maker, is_approved=False)

        queue = ModerationService(db_session).pending()

        assert [p.id for p in queue.products] == [waiting.id]
        assert [t.thread.id for t in queue.threads] == [thread.id]
        assert queue.threads[0].author.username == "Yusuf"
        assert queue.threads[0].category.name == "Islamic Finance"

    @pytest.mark.parametrize("query, hits", [("yusuf", 1), ("FINANCE", 1), ("gateways", 1), ("zzz", 0)])
    def test_query_filters_threads(self, db_session, maker, query, hits):
        category = make_forum_category(db_session, name="Islamic Finance", slug="islamic-finance")
        make_thread(db_session, category, maker, is_approved=False)

        queue = ModerationService(db_session).pending(query)

        assert len(queue.threads) == hits


class TestProducts:
    def test_approve_notifies_owner(self, db_session, maker):
        product = make_product(db_session, is_approved=False, user_id=maker.id)

        approved = ModerationService(db_session).approve_product(product.id)

        assert approved.is_approved is True
        [notification] = NotificationRepository(db_session).list_for_user(maker.id)
        assert notification.type == NotificationType.APPROVAL
        assert notification.message == 'Your product "QuranFlow" has been approved and is now live!'

    def test_reject_deletes_product_and_comments(self, db_session, maker):
        product = make_product(db_session, is_approved=False, user_id=maker.id)
        make_comment(db_session, product, maker)

        ModerationService(db_session).reject_product(product.id, "  ")

        assert ProductRepository(db_session).get(product.id) is None
        assert CommentRepository(db_session).list_for_product(product.id) == []
        [notification] = NotificationRepository(db_session).list_for_user(maker.id)
        assert notification.type == NotificationType.REJECTION
        assert notification.message.endswith(f"Reason: {DEFAULT_PRODUCT_REJECTION}")

    def test_missing_product(self, db_session):
        with pytest.raises(ValueError):
            ModerationService(db_session).approve_product("missing")


class TestThreads:
    def test_approve(self, db_session, maker):
        thread = make_thread(db_session, make_forum_category(db_session), maker, is_approved=False)

        ModerationService(db_session).approve_thread(thread.id)

        assert ThreadRepository(db_session).get(thread.id).is_approved is True
        [notification] = NotificationRepository(db_session).list_for_user(maker.id)
        assert notification.type == NotificationType.THREAD_APPROVED

    def test_reject_with_reason(self, db_session, maker):
        thread = make_thread(db_session, make_forum_category(db_session), maker, is_approved=False)

        ModerationService(db_session).reject_thread(thread.id, "Off topic")

        assert ThreadRepository(db_session).get(thread.id) is None
        [notification] = NotificationRepository(db_session).list_for_user(maker.id)
        assert notification.type == NotificationType.THREAD_REJECTED
        assert notification.message.endswith("Reason: Off topic")
        assert DEFAULT_THREAD_REJECTION not in notification.message
