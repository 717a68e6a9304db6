"""Tests for the in-process change feed."""

import asyncio

import pytest

from src.muslimhunt.core.services.realtime import (
    AUTH_CHANNEL,
    ChangeEvent,
    ChangeHub,
    RowFilter,
    apply_notification_change,
    publish_auth_event,
)


class TestRowFilter:
    def test_parse(self):
        assert RowFilter.parse("product_id=eq.abc") == RowFilter(column="product_id", value="abc")

    def test_blank_means_no_filter(self):
        assert RowFilter.parse(None) is None
        assert RowFilter.parse("") is None

    @pytest.mark.parametrize("expression", ["product_id", "product_id=gt.4", "=eq.4", "id=eq"])
    def test_rejects_unsupported(self, expression):
        with pytest.raises(ValueError):
            RowFilter.parse(expression)

    def test_matches_old_row_for_deletes(self):
        row_filter = RowFilter(column="user_id", value="u1")
        assert row_filter.matches(ChangeEvent("notifications", "DELETE", old={"user_id": "u1"}))
        assert not row_filter.matches(ChangeEvent("notifications", "INSERT", new={"user_id": "u2"}))


class TestChangeHub:
    @pytest.mark.asyncio
    async def test_delivers_to_matching_subscribers_only(self):
        hub = ChangeHub()
        everything = hub.subscribe("comments")
        filtered = hub.subscribe("comments", RowFilter(column="product_id", value="p1"))
        other_table = hub.subscribe("threads")

        delivered = hub.publish_change("comments", "INSERT", new={"id": "c1", "product_id": "p2"})

        assert delivered == 1
        event = await asyncio.wait_for(everything.get(), timeout=1)
        assert event.new["id"] == "c1"
        assert filtered.queue.empty()
        assert other_table.queue.empty()

    @pytest.mark.asyncio
    async def test_unsubscribe_stops_delivery(self):
        hub = ChangeHub()
        subscription = hub.subscribe("products")
        assert hub.subscriber_count == 1

        hub.unsubscribe(subscription)

        assert hub.subscriber_count == 0
        assert hub.publish_change("products", "INSERT", new={"id": "p"}) == 0

    @pytest.mark.asyncio
    async def test_publish_from_worker_thread(self):
        hub = ChangeHub()
        subscription = hub.subscribe("products")

        await asyncio.to_thread(hub.publish_change, "products", "UPDATE", {"id": "p1"})

        event = await asyncio.wait_for(subscription.get(), timeout=1)
        assert event.to_message() == {
            "table": "products",
            "eventType": "UPDATE",
            "new": {"id": "p1"},
            "old": None,
        }

    @pytest.mark.asyncio
    async def test_auth_events_are_scoped_to_the_user(self):
        hub = ChangeHub()
        mine = hub.subscribe(AUTH_CHANNEL, RowFilter(column="user_id", value="u1"))

        publish_auth_event(hub, "SIGNED_OUT", "u2")
        publish_auth_event(hub, "USER_UPDATED", "u1", {"id": "u1"})

        event = await asyncio.wait_for(mine.get(), timeout=1)
        assert event.new["event"] == "USER_UPDATED"
        assert mine.queue.empty()


class TestApplyNotificationChange:
    def test_insert_unread_increments(self):
        event = ChangeEvent("notifications", "INSERT", new={"is_read": False})
        assert apply_notification_change(2, event) == 3

    def test_insert_read_is_ignored(self):
        event = ChangeEvent("notifications", "INSERT", new={"is_read": True})
        assert apply_notification_change(2, event) == 2

    def test_marking_read_decrements(self):
        event = ChangeEvent(
            "notifications", "UPDATE", new={"is_read": True}, old={"is_read": False}
        )
        assert apply_notification_change(1, event) == 0
        assert apply_notification_change(0, event) == 0

    def test_marking_unread_increments(self):
        event = ChangeEvent(
            "notifications", "UPDATE", new={"is_read": False}, old={"is_read": True}
        )
        assert apply_notification_change(0, event) == 1

    def test_update_without_read_change(self):
        event = ChangeEvent("notifications", "UPDATE", new={"message": "x"}, old={"message": "y"})
        assert apply_notification_change(4, event) == 4

    def test_deleting_unread_decrements(self):
        event = ChangeEvent("notifications", "DELETE", old={"is_read": False})
        assert apply_notification_change(4, event) == 3
