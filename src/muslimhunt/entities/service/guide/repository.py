"""Data access for the launch guide and the glossary."""

from sqlmodel import Session, select

from .entity import Definition, LaunchContent
from .table import DefinitionTable, LaunchContentTable


class LaunchContentRepository:
    """Data-access layer for launch guide pages."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def list_section(self, section: str) -> list[LaunchContent]:
        """Active pages of ``section`` in display order."""
        statement = (
            select(LaunchContentTable)
            .where(LaunchContentTable.section == section)
            .where(LaunchContentTable.is_active == True)  # noqa: E712
            .order_by(LaunchContentTable.display_order)
        )
        return [
            LaunchContent.model_validate(row, from_attributes=True)
            for row in self._session.exec(statement)
        ]

    def get_page(self, section: str, page_id: str) -> LaunchContent | None:
        statement = select(LaunchContentTable).where(
            LaunchContentTable.section == section, LaunchContentTable.page_id == page_id
        )
        row = self._session.exec(statement).first()
        if row is None:
            return None
        return LaunchContent.model_validate(row, from_attributes=True)

    def create(self, page: LaunchContent) -> LaunchContent:
        row = LaunchContentTable(**page.model_dump())
        self._session.add(row)
        self._session.flush()
        return LaunchContent.model_validate(row, from_attributes=True)


class DefinitionRepository:
    """Data-access layer for glossary terms."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def list_active(self, search: str | None = None) -> list[Definition]:
        """Active terms in display order; ``search`` matches term or definition, ignoring case."""
        statement = (
            select(DefinitionTable)
            .where(DefinitionTable.is_active == True)  # noqa: E712
            .order_by(DefinitionTable.display_order)
        )
        items = [
            Definition.model_validate(row, from_attributes=True)
            for row in self._session.exec(statement)
        ]
        if not search:
            return items
        needle = search.lower()
        return [d for d in items if needle in d.term.lower() or needle in d.definition.lower()]

    def get_by_term(self, term: str) -> Definition | None:
        row = self._session.exec(select(DefinitionTable).where(DefinitionTable.term == term)).first()
        if row is None:
            return None
        return Definition.model_validate(row, from_attributes=True)

    def create(self, definition: Definition) -> Definition:
        row = DefinitionTable(**definition.model_dump())
        self._session.add(row)
        self._session.flush()
        return Definition.model_validate(row, from_attributes=True)
