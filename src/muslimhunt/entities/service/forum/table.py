"""Forum table models."""

from sqlmodel import Field

from src.muslimhunt.entities._base import EntityTable


class ForumCategoryTable(EntityTable, table=True):
    __tablename__ = "forum_categories"

    name: str
    slug: str = Field(unique=True, index=True)
    description: str | None = None
    display_order: int = 0


class ThreadTable(EntityTable, table=True):
    __tablename__ = "threads"

    title: str
    slug: str = Field(unique=True, index=True)
    body: str
    category_id: str = Field(foreign_key="forum_categories.id", index=True)
    author_id: str = Field(index=True)
    is_approved: bool = Field(default=False, index=True)
    upvotes: int = 0
    comments_count: int = 0


class ThreadCommentTable(EntityTable, table=True):
    __tablename__ = "thread_comments"

    thread_id: str = Field(foreign_key="threads.id", index=True)
    author_id: str = Field(index=True)
    body: str
    parent_id: str | None = None
