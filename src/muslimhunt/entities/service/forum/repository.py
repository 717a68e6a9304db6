"""Data access for the forum."""

from datetime import UTC, datetime

from sqlmodel import Session, or_, select

from .entity import ForumCategory, Thread, ThreadComment
from .table import ForumCategoryTable, ThreadCommentTable, ThreadTable


class ForumCategoryRepository:
    """Data-access layer for forum categories."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def list_all(self) -> list[ForumCategory]:
        statement = select(ForumCategoryTable).order_by(
            ForumCategoryTable.display_order, ForumCategoryTable.name
        )
        return [
            ForumCategory.model_validate(row, from_attributes=True)
            for row in self._session.exec(statement)
        ]

    def get(self, category_id: str) -> ForumCategory | None:
        row = self._session.get(ForumCategoryTable, category_id)
        if row is None:
            return None
        return ForumCategory.model_validate(row, from_attributes=True)

    def get_many(self, category_ids: set[str]) -> dict[str, ForumCategory]:
        if not category_ids:
            return {}
        statement = select(ForumCategoryTable).where(
            ForumCategoryTable.id.in_(category_ids)
        )
        return {
            row.id: ForumCategory.model_validate(row, from_attributes=True)
            for row in self._session.exec(statement)
        }

    def get_by_slug(self, slug: str) -> ForumCategory | None:
        statement = select(ForumCategoryTable).where(ForumCategoryTable.slug == slug)
        row = self._session.exec(statement).first()
        if row is None:
            return None
        return ForumCategory.model_validate(row, from_attributes=True)

    def create(self, category: ForumCategory) -> ForumCategory:
        row = ForumCategoryTable(**category.model_dump())
        self._session.add(row)
        self._session.flush()
        return ForumCategory.model_validate(row, from_attributes=True)


class ThreadRepository:
    """Data-access layer for threads."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def _to_entity(self, row: ThreadTable) -> Thread:
        return Thread.model_validate(row, from_attributes=True)

    def get(self, thread_id: str) -> Thread | None:
        row = self._session.get(ThreadTable, thread_id)
        if row is None:
            return None
        return self._to_entity(row)

    def get_by_slug(self, slug: str) -> Thread | None:
        row = self._session.exec(select(ThreadTable).where(ThreadTable.slug == slug)).first()
        if row is None:
            return None
        return self._to_entity(row)

    def slug_exists(self, slug: str) -> bool:
        statement = select(ThreadTable.id).where(ThreadTable.slug == slug)
        return self._session.exec(statement).first() is not None

    def create(self, thread: Thread) -> Thread:
        row = ThreadTable(**thread.model_dump())
        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return self._to_entity(row)

    def delete(self, thread_id: str) -> bool:
        row = self._session.get(ThreadTable, thread_id)
        if row is None:
            return False
        comments = self._session.exec(
            select(ThreadCommentTable).where(ThreadCommentTable.thread_id == thread_id)
        ).all()
        for comment in comments:
            self._session.delete(comment)
        self._session.delete(row)
        self._session.flush()
        return True

    def set_approved(self, thread_id: str, approved: bool = True) -> Thread:
        row = self._session.get(ThreadTable, thread_id)
        if row is None:
            raise ValueError(f"Thread {thread_id} not found")
        row.is_approved = approved
        row.updated_at = datetime.now(UTC)
        self._session.add(row)
        self._session.flush()
        return self._to_entity(row)

    def list_for_category(self, category_id: str) -> list[Thread]:
        statement = (
            select(ThreadTable)
            .where(ThreadTable.category_id == category_id)
            .where(ThreadTable.is_approved == True)  # noqa: E712
            .order_by(ThreadTable.created_at.desc())
        )
        return [self._to_entity(row) for row in self._session.exec(statement)]

    def list_pending(self) -> list[Thread]:
        statement = (
            select(ThreadTable)
            .where(ThreadTable.is_approved == False)  # noqa: E712
            .order_by(ThreadTable.created_at.asc())
        )
        return [self._to_entity(row) for row in self._session.exec(statement)]

    def search(self, query: str, limit: int = 50) -> list[Thread]:
        pattern = f"%{query}%"
        statement = (
            select(ThreadTable)
            .where(ThreadTable.is_approved == True)  # noqa: E712
            .where(or_(ThreadTable.title.ilike(pattern), ThreadTable.body.ilike(pattern)))
            .order_by(ThreadTable.created_at.desc())
            .limit(limit)
        )
        return [self._to_entity(row) for row in self._session.exec(statement)]

    def adjust_counters(self, thread_id: str, upvotes: int = 0, comments: int = 0) -> Thread:
        row = self._session.get(ThreadTable, thread_id)
        if row is None:
            raise ValueError(f"Thread {thread_id} not found")
        row.upvotes = max(0, row.upvotes + upvotes)
        row.comments_count = max(0, row.comments_count + comments)
        self._session.add(row)
        self._session.flush()
        return self._to_entity(row)


class ThreadCommentRepository:
    """Data-access layer for thread comments."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, comment_id: str) -> ThreadComment | None:
        row = self._session.get(ThreadCommentTable, comment_id)
        if row is None:
            return None
        return ThreadComment.model_validate(row, from_attributes=True)

    def create(self, comment: ThreadComment) -> ThreadComment:
        row = ThreadCommentTable(**comment.model_dump())
        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return ThreadComment.model_validate(row, from_attributes=True)

    def list_for_thread(self, thread_id: str) -> list[ThreadComment]:
        statement = (
            select(ThreadCommentTable)
            .where(ThreadCommentTable.thread_id == thread_id)
            .order_by(ThreadCommentTable.created_at.asc())
        )
        return [
            ThreadComment.model_validate(row, from_attributes=True)
            for row in self._session.exec(statement)
        ]

    def list_recent(self, limit: int = 50) -> list[ThreadComment]:
        statement = (
            select(ThreadCommentTable)
            .order_by(ThreadCommentTable.created_at.desc())
            .limit(limit)
        )
        return [
            ThreadComment.model_validate(row, from_attributes=True)
            for row in self._session.exec(statement)
        ]
