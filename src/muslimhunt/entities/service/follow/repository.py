from sqlmodel import Session, select

from .entity import Follow
from .table import FollowTable


class FollowRepository:
    """Data-access layer for follows."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def _find(self, follower_id: str, following_id: str) -> FollowTable | None:
        statement = select(FollowTable).where(
            (FollowTable.follower_id == follower_id)
            & (FollowTable.following_id == following_id)
        )
        return self._session.exec(statement).first()

    def is_following(self, follower_id: str, following_id: str) -> bool:
        return self._find(follower_id, following_id) is not None

    def create(self, follower_id: str, following_id: str) -> Follow:
        row = FollowTable(
            **Follow(follower_id=follower_id, following_id=following_id).model_dump()
        )
        self._session.add(row)
        self._session.flush()
        return Follow.model_validate(row, from_attributes=True)

    def delete(self, follower_id: str, following_id: str) -> bool:
        row = self._find(follower_id, following_id)
        if row is None:
            return False
        self._session.delete(row)
        self._session.flush()
        return True

    def list_following(self, follower_id: str) -> list[str]:
        statement = select(FollowTable.following_id).where(
            FollowTable.follower_id == follower_id
        )
        return list(self._session.exec(statement).all())
