"""Data access for stories."""

from sqlmodel import Session, select

from .entity import Story, StoryCategory, StoryComment
from .table import StoryCategoryTable, StoryCommentTable, StoryTable


class StoryCategoryRepository:
    """Data-access layer for story categories."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def list_active(self) -> list[StoryCategory]:
        statement = (
            select(StoryCategoryTable)
            .where(StoryCategoryTable.is_active == True)  # noqa: E712
            .order_by(StoryCategoryTable.display_order)
        )
        return [
            StoryCategory.model_validate(row, from_attributes=True)
            for row in self._session.exec(statement)
        ]

    def get(self, category_id: str) -> StoryCategory | None:
        row = self._session.get(StoryCategoryTable, category_id)
        if row is None:
            return None
        return StoryCategory.model_validate(row, from_attributes=True)

    def get_by_slug(self, slug: str) -> StoryCategory | None:
        statement = select(StoryCategoryTable).where(StoryCategoryTable.slug == slug)
        row = self._session.exec(statement).first()
        if row is None:
            return None
        return StoryCategory.model_validate(row, from_attributes=True)

    def create(self, category: StoryCategory) -> StoryCategory:
        row = StoryCategoryTable(**category.model_dump())
        self._session.add(row)
        self._session.flush()
        return StoryCategory.model_validate(row, from_attributes=True)


class StoryRepository:
    """Data-access layer for stories."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def create(self, story: Story) -> Story:
        row = StoryTable(**story.model_dump())
        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return Story.model_validate(row, from_attributes=True)

    def list_published(self, category_id: str | None = None) -> list[Story]:
        statement = select(StoryTable).where(StoryTable.is_published == True)  # noqa: E712
        if category_id is not None:
            statement = statement.where(StoryTable.category_id == category_id)
        statement = statement.order_by(StoryTable.published_at.desc())
        return [
            Story.model_validate(row, from_attributes=True)
            for row in self._session.exec(statement)
        ]

    def get_published_by_slug(self, slug: str) -> Story | None:
        statement = select(StoryTable).where(
            (StoryTable.slug == slug) & (StoryTable.is_published == True)  # noqa: E712
        )
        row = self._session.exec(statement).first()
        if row is None:
            return None
        return Story.model_validate(row, from_attributes=True)

    def increment(self, story_id: str, views: int = 0, comments: int = 0) -> Story:
        row = self._session.get(StoryTable, story_id)
        if row is None:
            raise ValueError(f"Story {story_id} not found")
        row.views_count += views
        row.comments_count = max(0, row.comments_count + comments)
        self._session.add(row)
        self._session.flush()
        return Story.model_validate(row, from_attributes=True)


class StoryCommentRepository:
    """Data-access layer for story comments."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, comment_id: str) -> StoryComment | None:
        row = self._session.get(StoryCommentTable, comment_id)
        if row is None:
            return None
        return StoryComment.model_validate(row, from_attributes=True)

    def create(self, comment: StoryComment) -> StoryComment:
        row = StoryCommentTable(**comment.model_dump())
        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return StoryComment.model_validate(row, from_attributes=True)

    def list_for_story(self, story_id: str) -> list[StoryComment]:
        statement = (
            select(StoryCommentTable)
            .where(StoryCommentTable.story_id == story_id)
            .order_by(StoryCommentTable.created_at.desc())
        )
        return [
            StoryComment.model_validate(row, from_attributes=True)
            for row in self._session.exec(statement)
        ]

    def list_recent(self, limit: int = 50) -> list[StoryComment]:
        statement = (
            select(StoryCommentTable)
            .order_by(StoryCommentTable.created_at.desc())
            .limit(limit)
        )
        return [
            StoryComment.model_validate(row, from_attributes=True)
            for row in self._session.exec(statement)
        ]
