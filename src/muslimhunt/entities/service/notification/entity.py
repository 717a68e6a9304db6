"""Entity: Notification."""

from enum import Enum

from src.muslimhunt.entities._base import Entity


class NotificationType(str, Enum):
    UPVOTE = "upvote"
    COMMENT = "comment"
    APPROVAL = "approval"
    REJECTION = "rejection"
    STREAK = "streak"
    THREAD_APPROVED = "thread_approved"
    THREAD_REJECTED = "thread_rejected"


class Notification(Entity):
    user_id: str
    type: NotificationType
    message: str
    is_read: bool = False
    avatar_url: str | None = None
    streak_days: int | None = None
