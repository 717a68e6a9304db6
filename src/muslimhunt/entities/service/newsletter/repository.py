from sqlmodel import Session, select

from .entity import NewsletterSubscriber
from .table import NewsletterSubscriberTable


class NewsletterRepository:
    """Data-access layer for newsletter subscribers."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_email(self, email: str) -> NewsletterSubscriber | None:
        statement = select(NewsletterSubscriberTable).where(
            NewsletterSubscriberTable.email == email.lower()
        )
        row = self._session.exec(statement).first()
        if row is None:
            return None
        return NewsletterSubscriber.model_validate(row, from_attributes=True)

    def subscribe(self, email: str) -> tuple[NewsletterSubscriber, bool]:
        """Add the address unless present. Returns the subscriber and whether it was new."""
        existing = self.get_by_email(email)
        if existing is not None:
            return existing, False
        row = NewsletterSubscriberTable(
            **NewsletterSubscriber(email=email.lower()).model_dump()
        )
        self._session.add(row)
        self._session.flush()
        return NewsletterSubscriber.model_validate(row, from_attributes=True), True

    def count(self) -> int:
        return len(self._session.exec(select(NewsletterSubscriberTable.id)).all())
