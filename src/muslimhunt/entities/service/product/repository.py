"""Data access for products."""

from datetime import UTC, datetime

from sqlmodel import Session, select

from .entity import Product
from .table import ProductTable


class ProductRepository:
    """Data-access layer for products."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def _to_entity(self, row: ProductTable) -> Product:
        return Product.model_validate(row, from_attributes=True)

    def get(self, product_id: str) -> Product | None:
        row = self._session.get(ProductTable, product_id)
        if row is None:
            return None
        return self._to_entity(row)

    def create(self, product: Product) -> Product:
        row = ProductTable(**product.model_dump(exclude={"slug"}))
        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return self._to_entity(row)

    def update(self, product: Product) -> Product:
        row = self._session.get(ProductTable, product.id)
        if row is None:
            raise ValueError(f"Product {product.id} not found")
        for field, value in product.model_dump(exclude={"id", "created_at", "slug"}).items():
            setattr(row, field, value)
        row.updated_at = datetime.now(UTC)
        self._session.add(row)
        self._session.flush()
        return self._to_entity(row)

    def delete(self, product_id: str) -> bool:
        row = self._session.get(ProductTable, product_id)
        if row is None:
            return False
        self._session.delete(row)
        self._session.flush()
        return True

    def list_approved(self) -> list[Product]:
        statement = (
            select(ProductTable)
            .where(ProductTable.is_approved == True)  # noqa: E712
            .order_by(ProductTable.upvotes_count.desc(), ProductTable.created_at.desc())
        )
        return [self._to_entity(row) for row in self._session.exec(statement)]

    def list_pending(self) -> list[Product]:
        statement = (
            select(ProductTable)
            .where(ProductTable.is_approved == False)  # noqa: E712
            .order_by(ProductTable.created_at.asc())
        )
        return [self._to_entity(row) for row in self._session.exec(statement)]

    def list_by_user(self, user_id: str) -> list[Product]:
        statement = (
            select(ProductTable)
            .where(ProductTable.user_id == user_id)
            .order_by(ProductTable.created_at.desc())
        )
        return [self._to_entity(row) for row in self._session.exec(statement)]

    def count_by_user(self, user_id: str, approved_only: bool = True) -> int:
        statement = select(ProductTable.id).where(ProductTable.user_id == user_id)
        if approved_only:
            statement = statement.where(ProductTable.is_approved == True)  # noqa: E712
        return len(self._session.exec(statement).all())

    def list_launched_between(self, start: datetime, end: datetime) -> list[Product]:
        statement = (
            select(ProductTable)
            .where(ProductTable.is_approved == True)  # noqa: E712
            .where(ProductTable.created_at >= start)
            .where(ProductTable.created_at <= end)
            .order_by(ProductTable.upvotes_count.desc())
        )
        return [self._to_entity(row) for row in self._session.exec(statement)]

    def adjust_upvotes(self, product_id: str, delta: int) -> int:
        """Shift the upvote counter by delta, never below zero. Returns the new count."""
        row = self._session.get(ProductTable, product_id)
        if row is None:
            raise ValueError(f"Product {product_id} not found")
        row.upvotes_count = max(0, row.upvotes_count + delta)
        self._session.add(row)
        self._session.flush()
        return row.upvotes_count
