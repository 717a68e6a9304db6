"""Launch guide and glossary table models."""

from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from src.muslimhunt.entities._base import EntityTable


class LaunchContentTable(EntityTable, table=True):
    __tablename__ = "launch_content"
    __table_args__ = (UniqueConstraint("section", "page_id"),)

    page_id: str
    section: str = Field(index=True)
    title: str
    content: str
    display_order: int = 0
    is_active: bool = True


class DefinitionTable(EntityTable, table=True):
    __tablename__ = "definitions"

    term: str = Field(unique=True)
    definition: str
    display_order: int = 0
    is_active: bool = True
