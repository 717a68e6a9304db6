from datetime import UTC, datetime, timedelta

import pytest

from tests.factories import make_profile, make_story, make_story_category


@pytest.fixture
def category(db_session):
    return make_story_category(db_session)


class TestStories:
    def test_list_published_newest_first(self, client, db_session, category):
        now = datetime.now(UTC)
        make_story(db_session, category, title="Old", slug="old", published_at=now - timedelta(days=3))
        make_story(db_session, category, title="New", slug="new", published_at=now)
        make_story(db_session, category, title="Draft", slug="draft", is_published=False)

        stories = client.get("/stories").json()

        assert [s["slug"] for s in stories] == ["new", "old"]
        assert stories[0]["date_label"] == "Today"
        assert stories[1]["date_label"] == "3 days ago"
        assert stories[0]["category"]["slug"] == "maker-stories"

    def test_filter_by_category(self, client, db_session, category):
        other = make_story_category(db_session, name="Community", slug="community")
        make_story(db_session, category)
        make_story(db_session, other, title="Meetup", slug="meetup")

        assert [s["slug"] for s in client.get("/stories", params={"category": "community"}).json()] == ["meetup"]
        assert client.get("/stories", params={"category": "unknown"}).json() == []

    def test_categories(self, client, db_session, category):
        make_story_category(db_session, name="Retired", slug="retired", is_active=False)
        assert [c["slug"] for c in client.get("/stories/categories").json()] == ["maker-stories"]

    def test_opening_counts_views(self, client, db_session, category):
        story = make_story(db_session, category)

        client.get(f"/stories/{story.slug}")
        second = client.get(f"/stories/{story.slug}").json()

        assert second["views_count"] == 2

    def test_draft_is_not_found(self, client, db_session, category):
        make_story(db_session, category, slug="draft", is_published=False)
        assert client.get("/stories/draft").status_code == 404


class TestStoryComments:
    def test_comment_and_reply(self, client, db_session, category, login):
        story = make_story(db_session, category)
        login(make_profile(db_session))

        first = client.post(f"/stories/{story.slug}/comments", json={"text": "Inspiring"})
        reply = client.post(
            f"/stories/{story.slug}/comments",
            json={"text": "Truly", "parent_id": first.json()["id"]},
        )

        assert first.status_code == 201
        assert reply.status_code == 201
        tree = client.get(f"/stories/{story.slug}/comments").json()
        assert tree[0]["comment"]["text"] == "Inspiring"
        assert tree[0]["replies"][0]["comment"]["text"] == "Truly"
        assert client.get(f"/stories/{story.slug}").json()["comments_count"] == 2

    def test_requires_session(self, client, db_session, category):
        story = make_story(db_session, category)
        assert client.post(f"/stories/{story.slug}/comments", json={"text": "x"}).status_code == 401
