from sqlmodel import Session, select

from .entity import Vote, VoteTarget
from .table import VoteTable


class VoteRepository:
    """Data-access layer for votes."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def _find(self, user_id: str, target_type: VoteTarget, target_id: str) -> VoteTable | None:
        statement = select(VoteTable).where(
            (VoteTable.user_id == user_id)
            & (VoteTable.target_type == VoteTarget(target_type).value)
            & (VoteTable.target_id == target_id)
        )
        return self._session.exec(statement).first()

    def exists(self, user_id: str, target_type: VoteTarget, target_id: str) -> bool:
        return self._find(user_id, target_type, target_id) is not None

    def add(self, user_id: str, target_type: VoteTarget, target_id: str) -> Vote:
        row = VoteTable(
            **Vote(user_id=user_id, target_type=target_type, target_id=target_id).model_dump()
        )
        self._session.add(row)
        self._session.flush()
        return Vote.model_validate(row, from_attributes=True)

    def remove(self, user_id: str, target_type: VoteTarget, target_id: str) -> bool:
        row = self._find(user_id, target_type, target_id)
        if row is None:
            return False
        self._session.delete(row)
        self._session.flush()
        return True

    def voted_target_ids(self, user_id: str, target_type: VoteTarget) -> set[str]:
        statement = select(VoteTable.target_id).where(
            (VoteTable.user_id == user_id)
            & (VoteTable.target_type == VoteTarget(target_type).value)
        )
        return set(self._session.exec(statement).all())

    def delete_for_target(self, target_type: VoteTarget, target_id: str) -> None:
        statement = select(VoteTable).where(
            (VoteTable.target_type == VoteTarget(target_type).value)
            & (VoteTable.target_id == target_id)
        )
        for row in self._session.exec(statement).all():
            self._session.delete(row)
        self._session.flush()
