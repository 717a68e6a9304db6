"""Comment database table model."""

from sqlmodel import Field

from src.muslimhunt.entities._base import EntityTable


class CommentTable(EntityTable, table=True):
    __tablename__ = "comments"

    product_id: str = Field(foreign_key="products.id", index=True)
    user_id: str = Field(index=True)
    username: str
    avatar_url: str | None = None
    text: str
    is_maker: bool = False
    upvotes_count: int = 0
    parent_id: str | None = Field(default=None, index=True)
