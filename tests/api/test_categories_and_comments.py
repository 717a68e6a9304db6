from datetime import UTC, datetime, timedelta

from src.muslimhunt.entities.service.forum import ThreadComment, ThreadCommentRepository
from src.muslimhunt.entities.service.story import StoryComment, StoryCommentRepository
from tests.factories import (
    make_comment,
    make_forum_category,
    make_product,
    make_profile,
    make_story,
    make_story_category,
    make_thread,
)


class TestCategories:
    def test_counts_sorted_by_size_then_name(self, client, db_session):
        make_product(db_session, name="A", category="Finance")
        make_product(db_session, name="B", category="Finance")
        make_product(db_session, name="C", category="Education")
        make_product(db_session, name="D", category="Arabic Learning")
        make_product(db_session, name="E", category="Hidden", is_approved=False)

        categories = client.get("/categories").json()

        assert categories == [
            {"name": "Finance", "slug": "finance", "count": 2},
            {"name": "Arabic Learning", "slug": "arabic-learning", "count": 1},
            {"name": "Education", "slug": "education", "count": 1},
        ]

    def test_category_page(self, client, db_session):
        make_product(db_session, name="Low", category="Arabic Learning", upvotes_count=1)
        make_product(db_session, name="High", category="Arabic Learning", upvotes_count=7)

        page = client.get("/categories/arabic-learning").json()

        assert page["category"]["name"] == "Arabic Learning"
        assert [p["name"] for p in page["products"]] == ["High", "Low"]

    def test_unknown_category(self, client):
        assert client.get("/categories/nothing").status_code == 404


class TestRecentComments:
    def test_merges_all_sources_newest_first(self, client, db_session):
        author = make_profile(db_session, username="Sumayyah", email="s@example.com")
        now = datetime.now(UTC)
        product = make_product(db_session)
        make_comment(db_session, product, author, text="product note", created_at=now - timedelta(hours=2))

        thread = make_thread(db_session, make_forum_category(db_session), author)
        ThreadCommentRepository(db_session).create(
            ThreadComment(
                thread_id=thread.id,
                author_id=author.id,
                body="forum note",
                created_at=now - timedelta(minutes=5),
            )
        )
        story = make_story(db_session, make_story_category(db_session))
        StoryCommentRepository(db_session).create(
            StoryComment(
                story_id=story.id,
                username="Guest",
                text="story note",
                created_at=now - timedelta(hours=1),
            )
        )
        db_session.commit()

        recent = client.get("/comments/recent").json()

        assert [(c["source"], c["text"]) for c in recent] == [
            ("thread", "forum note"),
            ("story", "story note"),
            ("product", "product note"),
        ]
        assert recent[0]["username"] == "Sumayyah"
        assert recent[0]["time_ago"] == "5m ago"

    def test_pending_content_is_left_out(self, client, db_session):
        author = make_profile(db_session)
        make_comment(db_session, make_product(db_session, is_approved=False), author, text="hidden")
        make_comment(db_session, make_product(db_session, name="Live"), author, text="shown")

        assert [c["text"] for c in client.get("/comments/recent").json()] == ["shown"]

    def test_limit(self, client, db_session):
        author = make_profile(db_session)
        product = make_product(db_session)
        for index in range(3):
            make_comment(db_session, product, author, text=f"note {index}")

        assert len(client.get("/comments/recent", params={"limit": 2}).json()) == 2

    def test_unknown_comment_vote(self, client, db_session, login):
        login(make_profile(db_session))
        assert client.post("/comments/missing/vote").status_code == 404
