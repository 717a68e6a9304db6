"""Vote database table model."""

from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from src.muslimhunt.entities._base import EntityTable


class VoteTable(EntityTable, table=True):
    __tablename__ = "votes"
    __table_args__ = (UniqueConstraint("user_id", "target_type", "target_id"),)

    user_id: str = Field(index=True)
    target_type: str
    target_id: str = Field(index=True)
