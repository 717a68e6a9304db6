from sqlmodel import Session, select

from .entity import Identity
from .table import IdentityTable


class IdentityRepository:
    """Data-access layer for identities."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_provider_subject(self, provider: str, subject: str) -> Identity | None:
        statement = select(IdentityTable).where(
            (IdentityTable.provider == provider) & (IdentityTable.subject == subject)
        )
        row = self._session.exec(statement).first()
        if row is None:
            return None
        return Identity.model_validate(row, from_attributes=True)

    def create(self, identity: Identity) -> Identity:
        row = IdentityTable(**identity.model_dump())
        self._session.add(row)
        self._session.flush()
        return Identity.model_validate(row, from_attributes=True)
