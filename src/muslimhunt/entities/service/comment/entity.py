"""Entity: Comment."""

from pydantic import Field

from src.muslimhunt.entities._base import Entity


class Comment(Entity):
    """A comment on a product; ``parent_id`` makes it a reply."""

    product_id: str
    user_id: str
    username: str
    avatar_url: str | None = None
    text: str = Field(min_length=1, max_length=5000)
    is_maker: bool = False
    upvotes_count: int = Field(default=0, ge=0)
    parent_id: str | None = None
