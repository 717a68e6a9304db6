"""Data access for product comments."""

from sqlmodel import Session, select

from .entity import Comment
from .table import CommentTable


class CommentRepository:
    """Data-access layer for product comments."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, comment_id: str) -> Comment | None:
        row = self._session.get(CommentTable, comment_id)
        if row is None:
            return None
        return Comment.model_validate(row, from_attributes=True)

    def create(self, comment: Comment) -> Comment:
        row = CommentTable(**comment.model_dump())
        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return Comment.model_validate(row, from_attributes=True)

    def list_for_product(self, product_id: str) -> list[Comment]:
        statement = (
            select(CommentTable)
            .where(CommentTable.product_id == product_id)
            .order_by(CommentTable.created_at.desc())
        )
        return [
            Comment.model_validate(row, from_attributes=True)
            for row in self._session.exec(statement)
        ]

    def count_by_product(self, product_ids: list[str]) -> dict[str, int]:
        if not product_ids:
            return {}
        statement = select(CommentTable.product_id).where(
            CommentTable.product_id.in_(product_ids)
        )
        counts: dict[str, int] = {}
        for product_id in self._session.exec(statement):
            counts[product_id] = counts.get(product_id, 0) + 1
        return counts

    def list_recent(self, limit: int = 50) -> list[Comment]:
        statement = (
            select(CommentTable).order_by(CommentTable.created_at.desc()).limit(limit)
        )
        return [
            Comment.model_validate(row, from_attributes=True)
            for row in self._session.exec(statement)
        ]

    def adjust_upvotes(self, comment_id: str, delta: int) -> int:
        """Shift the upvote counter by delta, never below zero. Returns the new count."""
        row = self._session.get(CommentTable, comment_id)
        if row is None:
            raise ValueError(f"Comment {comment_id} not found")
        row.upvotes_count = max(0, row.upvotes_count + delta)
        self._session.add(row)
        self._session.flush()
        return row.upvotes_count

    def delete_for_product(self, product_id: str) -> int:
        rows = self._session.exec(
            select(CommentTable).where(CommentTable.product_id == product_id)
        ).all()
        for row in rows:
            self._session.delete(row)
        self._session.flush()
        return len(rows)
