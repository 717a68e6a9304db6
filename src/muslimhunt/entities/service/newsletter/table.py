"""Newsletter subscriber table model."""

from sqlmodel import Field

from src.muslimhunt.entities._base import EntityTable


class NewsletterSubscriberTable(EntityTable, table=True):
    __tablename__ = "newsletter_subscribers"

    email: str = Field(unique=True, index=True)
