"""Identity database table model."""

from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from src.muslimhunt.entities._base import EntityTable


class IdentityTable(EntityTable, table=True):
    __tablename__ = "identities"
    __table_args__ = (UniqueConstraint("provider", "subject"),)

    provider: str
    subject: str
    profile_id: str = Field(foreign_key="profiles.id", index=True)
