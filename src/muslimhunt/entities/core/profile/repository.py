"""Data access for profiles."""

from datetime import UTC, datetime

from sqlmodel import Session, select

from .entity import Profile
from .table import ProfileTable


class ProfileRepository:
    """Data-access layer for profiles."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, profile_id: str) -> Profile | None:
        row = self._session.get(ProfileTable, profile_id)
        if row is None:
            return None
        return Profile.model_validate(row, from_attributes=True)

    def get_by_email(self, email: str) -> Profile | None:
        statement = select(ProfileTable).where(ProfileTable.email == email.lower())
        row = self._session.exec(statement).first()
        if row is None:
            return None
        return Profile.model_validate(row, from_attributes=True)

    def get_many(self, profile_ids: set[str]) -> dict[str, Profile]:
        if not profile_ids:
            return {}
        statement = select(ProfileTable).where(ProfileTable.id.in_(profile_ids))
        return {
            row.id: Profile.model_validate(row, from_attributes=True)
            for row in self._session.exec(statement)
        }

    def create(self, profile: Profile) -> Profile:
        data = profile.model_dump()
        if data.get("email"):
            data["email"] = data["email"].lower()
        row = ProfileTable(**data)
        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return Profile.model_validate(row, from_attributes=True)

    def update(self, profile: Profile) -> Profile:
        row = self._session.get(ProfileTable, profile.id)
        if row is None:
            raise ValueError(f"Profile {profile.id} not found")
        for field, value in profile.model_dump(exclude={"id", "created_at"}).items():
            setattr(row, field, value)
        row.updated_at = datetime.now(UTC)
        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return Profile.model_validate(row, from_attributes=True)

    def upsert(self, profile: Profile) -> Profile:
        if self._session.get(ProfileTable, profile.id) is None:
            return self.create(profile)
        return self.update(profile)

    def set_admin(self, profile_id: str, is_admin: bool = True) -> Profile:
        row = self._session.get(ProfileTable, profile_id)
        if row is None:
            raise ValueError(f"Profile {profile_id} not found")
        row.is_admin = is_admin
        self._session.add(row)
        self._session.flush()
        return Profile.model_validate(row, from_attributes=True)

    def adjust_counts(
        self, profile_id: str, followers: int = 0, following: int = 0
    ) -> Profile | None:
        """Shift follower/following counters, never below zero."""
        row = self._session.get(ProfileTable, profile_id)
        if row is None:
            return None
        row.followers_count = max(0, row.followers_count + followers)
        row.following_count = max(0, row.following_count + following)
        self._session.add(row)
        self._session.flush()
        return Profile.model_validate(row, from_attributes=True)

    def list_all(self) -> list[Profile]:
        rows = self._session.exec(select(ProfileTable).order_by(ProfileTable.username))
        return [Profile.model_validate(row, from_attributes=True) for row in rows]
