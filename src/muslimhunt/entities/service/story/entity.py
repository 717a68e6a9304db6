"""Entities: StoryCategory, Story, StoryComment."""

from datetime import UTC, datetime

from pydantic import Field

from src.muslimhunt.entities._base import Entity


class StoryCategory(Entity):
    name: str
    slug: str
    description: str | None = None
    display_order: int = 0
    is_active: bool = True


class Story(Entity):
    """Editorial article about makers and launches."""

    title: str
    slug: str
    subtitle: str | None = None
    content: str
    excerpt: str | None = None
    cover_image_url: str | None = None
    author_id: str | None = None
    author_name: str
    author_avatar_url: str | None = None
    category_id: str
    views_count: int = Field(default=0, ge=0)
    comments_count: int = Field(default=0, ge=0)
    likes_count: int = Field(default=0, ge=0)
    reading_time: int | None = None
    is_featured: bool = False
    is_published: bool = False
    published_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class StoryComment(Entity):
    story_id: str
    user_id: str | None = None
    username: str
    avatar_url: str | None = None
    text: str = Field(min_length=1, max_length=5000)
    parent_id: str | None = None
    likes_count: int = Field(default=0, ge=0)
