"""Notification database table model."""

from sqlmodel import Field

from src.muslimhunt.entities._base import EntityTable


class NotificationTable(EntityTable, table=True):
    __tablename__ = "notifications"

    user_id: str = Field(index=True)
    type: str
    message: str
    is_read: bool = Field(default=False, index=True)
    avatar_url: str | None = None
    streak_days: int | None = None
