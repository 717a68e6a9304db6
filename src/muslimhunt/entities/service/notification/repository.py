from sqlmodel import Session, select

from .entity import Notification
from .table import NotificationTable


class NotificationRepository:
    """Data-access layer for notifications."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, notification_id: str) -> Notification | None:
        row = self._session.get(NotificationTable, notification_id)
        if row is None:
            return None
        return Notification.model_validate(row, from_attributes=True)

    def create(self, notification: Notification) -> Notification:
        row = NotificationTable(**notification.model_dump())
        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return Notification.model_validate(row, from_attributes=True)

    def list_for_user(self, user_id: str, limit: int = 100) -> list[Notification]:
        statement = (
            select(NotificationTable)
            .where(NotificationTable.user_id == user_id)
            .order_by(NotificationTable.created_at.desc())
            .limit(limit)
        )
        return [
            Notification.model_validate(row, from_attributes=True)
            for row in self._session.exec(statement)
        ]

    def unread_count(self, user_id: str) -> int:
        statement = select(NotificationTable.id).where(
            (NotificationTable.user_id == user_id)
            & (NotificationTable.is_read == False)  # noqa: E712
        )
        return len(self._session.exec(statement).all())

    def mark_read(self, notification_id: str, is_read: bool = True) -> tuple[Notification, Notification]:
        """Set the read flag. Returns the (before, after) states."""
        row = self._session.get(NotificationTable, notification_id)
        if row is None:
            raise ValueError(f"Notification {notification_id} not found")
        before = Notification.model_validate(row, from_attributes=True)
        row.is_read = is_read
        self._session.add(row)
        self._session.flush()
        return before, Notification.model_validate(row, from_attributes=True)

    def mark_all_read(self, user_id: str) -> list[str]:
        statement = select(NotificationTable).where(
            (NotificationTable.user_id == user_id)
            & (NotificationTable.is_read == False)  # noqa: E712
        )
        updated = []
        for row in self._session.exec(statement).all():
            row.is_read = True
            self._session.add(row)
            updated.append(row.id)
        self._session.flush()
        return updated
