"""Entity: Product."""

from enum import Enum

from pydantic import Field, computed_field

from src.muslimhunt.core.search import slugify
from src.muslimhunt.entities._base import Entity


class HalalStatus(str, Enum):
    CERTIFIED = "Certified"
    SELF_CERTIFIED = "Self-Certified"
    SHARIAH_COMPLIANT = "Shariah-Compliant"


class Product(Entity):
    """A launched product listed in the directory.

    ``created_at`` doubles as the launch date; products stay hidden from the
    public feed until a moderator approves them.
    """

    name: str = Field(min_length=1, max_length=120)
    tagline: str = Field(max_length=260)
    description: str = ""
    url: str | None = None
    website_url: str | None = None
    logo_url: str | None = None
    category: str = Field(min_length=1)
    halal_status: HalalStatus = HalalStatus.SELF_CERTIFIED
    sadaqah_info: str | None = None
    user_id: str | None = None
    upvotes_count: int = Field(default=0, ge=0)
    is_approved: bool = False

    @computed_field
    @property
    def slug(self) -> str:
        return slugify(self.name)
