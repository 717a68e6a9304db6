from dataclasses import dataclass

from sqlmodel import Session

from src.muslimhunt.entities.core.profile import ProfileRepository
from src.muslimhunt.entities.service.follow import FollowRepository


@dataclass(frozen=True)
class FollowOutcome:
    following: bool
    followers_count: int


class FollowService:
    def __init__(self, db_session: Session):
        self._follows = FollowRepository(db_session)
        self._profiles = ProfileRepository(db_session)

    def toggle(self, follower_id: str, following_id: str) -> FollowOutcome:
        """Follow or unfollow, keeping both members' counters in step.

        Raises:
            ValueError: When a member tries to follow themselves
        """
        if follower_id == following_id:
            raise ValueError("You cannot follow yourself")

        if self._follows.is_following(follower_id, following_id):
            self._follows.delete(follower_id, following_id)
            delta = -1
        else:
            self._follows.create(follower_id, following_id)
            delta = 1

        target = self._profiles.adjust_counts(following_id, followers=delta)
        self._profiles.adjust_counts(follower_id, following=delta)
        return FollowOutcome(
            following=delta > 0,
            followers_count=target.followers_count if target else 0,
        )
