"""Product database table model."""

from sqlmodel import Field

from src.muslimhunt.entities._base import EntityTable


class ProductTable(EntityTable, table=True):
    """Database persistence model for products."""

    __tablename__ = "products"

    name: str = Field(index=True)
    tagline: str
    description: str = ""
    url: str | None = None
    website_url: str | None = None
    logo_url: str | None = None
    category: str = Field(index=True)
    halal_status: str
    sadaqah_info: str | None = None
    user_id: str | None = Field(default=None, index=True)
    upvotes_count: int = 0
    is_approved: bool = Field(default=False, index=True)
