"""Creating notifications and broadcasting their changes."""

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from src.muslimhunt.core.services.realtime import ChangeHub
from src.muslimhunt.entities.service.notification import (
    Notification,
    NotificationRepository,
    NotificationType,
)


class NotificationService:
    def __init__(self, db_session: Session, hub: ChangeHub | None = None):
        self._session = db_session
        self._repo = NotificationRepository(db_session)
        self._hub = hub

    def notify(
        self,
        user_id: str | None,
        notification_type: NotificationType,
        message: str,
        avatar_url: str | None = None,
    ) -> Notification | None:
        """Best-effort: a failure is logged and never aborts the caller.

        The insert runs in a savepoint so a failed flush leaves the caller's
        transaction usable.
        """
        if not user_id:
            return None
        try:
            with self._session.begin_nested():
                notification = self._repo.create(
                    Notification(
                        user_id=user_id,
                        type=notification_type,
                        message=message,
                        avatar_url=avatar_url,
                    )
                )
        except SQLAlchemyError as e:
            logger.warning("Could not notify {}: {}", user_id, e)
            return None

        self._publish("INSERT", new=notification)
        return notification

    def list_for_user(self, user_id: str) -> list[Notification]:
        return self._repo.list_for_user(user_id)

    def unread_count(self, user_id: str) -> int:
        return self._repo.unread_count(user_id)

    def mark_read(self, user_id: str, notification_id: str) -> Notification:
        """Mark one of the caller's notifications read.

        Raises:
            ValueError: If the notification does not exist or belongs to someone else
        """
        existing = self._repo.get(notification_id)
        if existing is None or existing.user_id != user_id:
            raise ValueError(f"Notification {notification_id} not found")
        before, after = self._repo.mark_read(notification_id)
        if before.is_read != after.is_read:
            self._publish("UPDATE", new=after, old=before)
        return after

    def mark_all_read(self, user_id: str) -> int:
        updated = self._repo.mark_all_read(user_id)
        for notification_id in updated:
            self._publish(
                "UPDATE",
                new={"id": notification_id, "user_id": user_id, "is_read": True},
                old={"id": notification_id, "user_id": user_id, "is_read": False},
            )
        return len(updated)

    def _publish(self, change_type, new=None, old=None) -> None:
        if self._hub is None:
            return
        try:
            self._hub.publish_change("notifications", change_type, new=new, old=old)
        except Exception as e:
            logger.warning("Realtime publish failed for notifications: {}", e)
