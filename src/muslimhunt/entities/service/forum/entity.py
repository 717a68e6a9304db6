"""Entities: ForumCategory, Thread, ThreadComment."""

from pydantic import Field

from src.muslimhunt.entities._base import Entity


class ForumCategory(Entity):
    name: str
    slug: str
    description: str | None = None
    display_order: int = 0


class Thread(Entity):
    """A forum discussion. New threads wait for moderation."""

    title: str = Field(min_length=3, max_length=200)
    slug: str
    body: str = Field(min_length=1)
    category_id: str
    author_id: str
    is_approved: bool = False
    upvotes: int = Field(default=0, ge=0)
    comments_count: int = Field(default=0, ge=0)


class ThreadComment(Entity):
    thread_id: str
    author_id: str
    body: str = Field(min_length=1, max_length=5000)
    parent_id: str | None = None
