"""Follow database table model."""

from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from src.muslimhunt.entities._base import EntityTable


class FollowTable(EntityTable, table=True):
    __tablename__ = "follows"
    __table_args__ = (UniqueConstraint("follower_id", "following_id"),)

    follower_id: str = Field(index=True)
    following_id: str = Field(index=True)
