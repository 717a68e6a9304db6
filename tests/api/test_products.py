"""HTTP tests for the product directory."""

from datetime import UTC, datetime, timedelta

import pytest

from src.muslimhunt.entities.service.notification import NotificationRepository
from src.muslimhunt.entities.service.notification.table import NotificationTable
from src.muslimhunt.entities.service.product import ProductRepository
from tests.factories import make_comment, make_product, make_profile


@pytest.fixture
def maker(db_session):
    return make_profile(db_session, username="Maker", email="maker@example.com")


@pytest.fixture
def member(db_session):
    return make_profile(db_session, username="Bilal", email="bilal@example.com")


class TestFeed:
    def test_groups_and_orders_launches(self, client, db_session):
        now = datetime.now(UTC)
        make_product(db_session, name="Quiet", upvotes_count=1, created_at=now)
        make_product(db_session, name="Loud", upvotes_count=10, created_at=now)
        make_product(db_session, name="Older", created_at=now - timedelta(days=3))
        make_product(db_session, name="Ancient", created_at=now - timedelta(days=60))
        make_product(db_session, name="Hidden", is_approved=False, created_at=now)

        response = client.get("/products/feed")

        assert response.status_code == 200
        feed = response.json()
        assert [p["name"] for p in feed["today"]] == ["Loud", "Quiet"]
        assert [p["name"] for p in feed["last_week"]] == ["Older"]
        names = {p["name"] for bucket in feed.values() for p in bucket}
        assert "Ancient" not in names
        assert "Hidden" not in names

    def test_marks_upvoted_products(self, client, db_session, member, login):
        product = make_product(db_session)
        login(member)
        client.post(f"/products/{product.id}/vote")

        [item] = client.get("/products/feed").json()["today"]

        assert item["has_upvoted"] is True
        assert item["upvotes_count"] == 1


class TestSearch:
    def test_highlights_matches(self, client, db_session):
        make_product(db_session, name="QuranFlow")
        make_product(db_session, name="ZakatStream", category="Finance")

        results = client.get("/products", params={"q": "quran"}).json()

        assert [r["name"] for r in results] == ["QuranFlow"]
        assert "<mark" in results[0]["highlighted_name"]

    def test_blank_query_lists_all_approved(self, client, db_session):
        make_product(db_session, name="A")
        make_product(db_session, name="B", is_approved=False)

        assert [r["name"] for r in client.get("/products").json()] == ["A"]


class TestArchive:
    def test_daily_archive(self, client, db_session):
        make_product(db_session, name="Launched", created_at=datetime(2023, 5, 10, 9, tzinfo=UTC))
        make_product(db_session, name="NextDay", created_at=datetime(2023, 5, 11, 9, tzinfo=UTC))

        page = client.get("/products/archive", params={"date": "2023-05-10"}).json()

        assert page["mode"] == "daily"
        assert [p["name"] for p in page["products"]] == ["Launched"]

    def test_monthly_archive(self, client, db_session):
        make_product(db_session, name="Early", created_at=datetime(2023, 5, 1, tzinfo=UTC))
        make_product(db_session, name="Late", created_at=datetime(2023, 5, 31, 22, tzinfo=UTC))

        page = client.get("/products/archive", params={"date": "2023-05-15", "mode": "monthly"}).json()

        assert {p["name"] for p in page["products"]} == {"Early", "Late"}

    def test_invalid_mode(self, client):
        assert client.get("/products/archive", params={"mode": "hourly"}).status_code == 422

    def test_years(self, client):
        years = client.get("/products/archive/years").json()
        assert years[0] == datetime.now(UTC).year
        assert years[-1] == 2020


class TestDetail:
    def test_by_slug_with_comment_tree(self, client, db_session, member):
        product = make_product(db_session, name="Salah Sync")
        parent = make_comment(db_session, product, member, text="Love it")
        make_comment(db_session, product, member, text="Agreed", parent_id=parent.id)

        response = client.get("/products/slug/salah-sync")

        assert response.status_code == 200
        detail = response.json()
        assert detail["product"]["id"] == product.id
        assert detail["product"]["comments_count"] == 2
        [root] = detail["comments"]
        assert root["comment"]["text"] == "Love it"
        assert root["replies"][0]["comment"]["text"] == "Agreed"

    def test_unknown_slug(self, client):
        assert client.get("/products/slug/nothing-here").status_code == 404

    def test_unapproved_product_only_visible_to_owner(self, client, db_session, maker, member, login):
        product = make_product(db_session, is_approved=False, user_id=maker.id)

        assert client.get(f"/products/{product.id}").status_code == 404
        login(member)
        assert client.get(f"/products/{product.id}").status_code == 404
        login(maker)
        assert client.get(f"/products/{product.id}").status_code == 200


class TestSubmit:
    payload = {
        "name": "HalalHabit",
        "tagline": "Build good habits",
        "category": "Productivity",
        "halal_status": "Shariah-Compliant",
    }

    def test_requires_session(self, client):
        assert client.post("/products", json=self.payload).status_code == 401

    def test_submission_waits_for_approval(self, client, member, login):
        login(member)

        response = client.post("/products", json=self.payload)

        assert response.status_code == 201
        created = response.json()
        assert created["is_approved"] is False
        assert created["user_id"] == member.id
        assert created["slug"] == "halalhabit"
        assert [p["id"] for p in client.get("/products/mine").json()] == [created["id"]]
        assert client.get("/products").json() == []

    def test_launch_date_sets_created_at(self, client, member, login):
        login(member)
        payload = {**self.payload, "launch_date": "2024-01-02T10:00:00Z"}

        created = client.post("/products", json=payload).json()

        assert created["created_at"].startswith("2024-01-02T10:00:00")

    def test_rejects_unknown_halal_status(self, client, member, login):
        login(member)
        payload = {**self.payload, "halal_status": "Probably fine"}
        assert client.post("/products", json=payload).status_code == 422


class TestVoting:
    def test_toggle(self, client, db_session, maker, member, login):
        product = make_product(db_session, user_id=maker.id)
        login(member)

        first = client.post(f"/products/{product.id}/vote").json()
        second = client.post(f"/products/{product.id}/vote").json()

        assert first == {"voted": True, "upvotes_count": 1, "key": f"{member.id}_{product.id}"}
        assert second["voted"] is False
        assert second["upvotes_count"] == 0
        db_session.expire_all()
        assert ProductRepository(db_session).get(product.id).upvotes_count == 0
        assert len(NotificationRepository(db_session).list_for_user(maker.id)) == 1

    def test_notification_failure_does_not_fail_the_vote(
        self, client, db_session, maker, member, login, monkeypatch
    ):
        def failing_insert(repo, notification):
            repo._session.add(
                NotificationTable(user_id=notification.user_id, type=notification.type, message=None)
            )
            repo._session.flush()

        product = make_product(db_session, user_id=maker.id)
        monkeypatch.setattr(NotificationRepository, "create", failing_insert)
        login(member)

        response = client.post(f"/products/{product.id}/vote")

        assert response.status_code == 200
        assert response.json()["upvotes_count"] == 1
        db_session.expire_all()
        assert ProductRepository(db_session).get(product.id).upvotes_count == 1

    def test_unknown_product(self, client, member, login):
        login(member)
        assert client.post("/products/missing/vote").status_code == 404


class TestComments:
    def test_comment_notifies_maker(self, client, db_session, maker, member, login):
        product = make_product(db_session, user_id=maker.id)
        login(member)

        response = client.post(f"/products/{product.id}/comments", json={"text": "Mashallah"})

        assert response.status_code == 201
        assert response.json()["is_maker"] is False
        [notification] = NotificationRepository(db_session).list_for_user(maker.id)
        assert notification.message == "Bilal commented on QuranFlow"

    def test_maker_reply_is_flagged(self, client, db_session, maker, member, login):
        product = make_product(db_session, user_id=maker.id)
        question = make_comment(db_session, product, member, text="Is there Android?")
        login(maker)

        reply = client.post(
            f"/products/{product.id}/comments",
            json={"text": "Coming soon", "parent_id": question.id},
        ).json()

        assert reply["is_maker"] is True
        assert reply["parent_id"] == question.id
        tree = client.get(f"/products/{product.id}/comments").json()
        assert tree[0]["replies"][0]["comment"]["id"] == reply["id"]

    def test_reply_to_comment_on_other_product(self, client, db_session, member, login):
        product = make_product(db_session)
        other = make_product(db_session, name="Other")
        foreign = make_comment(db_session, other, member)
        login(member)

        response = client.post(
            f"/products/{product.id}/comments",
            json={"text": "Hi", "parent_id": foreign.id},
        )

        assert response.status_code == 400

    def test_empty_comment(self, client, db_session, member, login):
        product = make_product(db_session)
        login(member)
        assert client.post(f"/products/{product.id}/comments", json={"text": ""}).status_code == 422

    def test_comment_vote(self, client, db_session, member, login):
        product = make_product(db_session)
        comment = make_comment(db_session, product, member)
        login(member)

        response = client.post(f"/comments/{comment.id}/vote")

        assert response.json()["upvotes_count"] == 1
        detail = client.get(f"/products/{product.id}").json()
        assert detail["upvoted_comment_ids"] == [comment.id]


class TestPendingProduct:
    @pytest.fixture
    def pending(self, db_session, maker):
        return make_product(db_session, name="Draft", user_id=maker.id, is_approved=False)

    def test_comments_hidden_from_visitors(self, client, pending):
        assert client.get(f"/products/{pending.id}/comments").status_code == 404

    def test_members_cannot_vote_or_comment(self, client, db_session, maker, member, pending, login):
        login(member)

        assert client.post(f"/products/{pending.id}/vote").status_code == 404
        assert client.post(f"/products/{pending.id}/comments", json={"text": "Hi"}).status_code == 404
        db_session.expire_all()
        assert ProductRepository(db_session).get(pending.id).upvotes_count == 0
        assert NotificationRepository(db_session).list_for_user(maker.id) == []

    def test_comment_votes_hidden_too(self, client, db_session, maker, member, pending, login):
        comment = make_comment(db_session, pending, maker)
        login(member)

        assert client.post(f"/comments/{comment.id}/vote").status_code == 404

    def test_owner_keeps_access(self, client, maker, pending, login):
        login(maker)

        assert client.get(f"/products/{pending.id}/comments").status_code == 200
        assert client.post(f"/products/{pending.id}/comments", json={"text": "Note"}).status_code == 201
        assert client.post(f"/products/{pending.id}/vote").json()["voted"] is True
