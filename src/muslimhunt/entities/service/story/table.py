"""Story table models."""

from datetime import UTC, datetime

from sqlmodel import Field

from src.muslimhunt.entities._base import EntityTable


class StoryCategoryTable(EntityTable, table=True):
    __tablename__ = "story_categories"

    name: str
    slug: str = Field(unique=True, index=True)
    description: str | None = None
    display_order: int = 0
    is_active: bool = True


class StoryTable(EntityTable, table=True):
    __tablename__ = "stories"

    title: str
    slug: str = Field(unique=True, index=True)
    subtitle: str | None = None
    content: str
    excerpt: str | None = None
    cover_image_url: str | None = None
    author_id: str | None = None
    author_name: str
    author_avatar_url: str | None = None
    category_id: str = Field(foreign_key="story_categories.id", index=True)
    views_count: int = 0
    comments_count: int = 0
    likes_count: int = 0
    reading_time: int | None = None
    is_featured: bool = False
    is_published: bool = Field(default=False, index=True)
    published_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class StoryCommentTable(EntityTable, table=True):
    __tablename__ = "story_comments"

    story_id: str = Field(foreign_key="stories.id", index=True)
    user_id: str | None = None
    username: str
    avatar_url: str | None = None
    text: str
    parent_id: str | None = None
    likes_count: int = 0
