"""Shared id and timestamp columns for domain models and their tables."""

import uuid
from datetime import UTC, datetime

import sqlalchemy as sa
from pydantic import BaseModel, ConfigDict
from pydantic import Field as PydanticField
from sqlmodel import Field, SQLModel


def new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(UTC)


class Entity(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    id: str = PydanticField(default_factory=new_id)
    created_at: datetime = PydanticField(default_factory=utcnow)
    updated_at: datetime = PydanticField(default_factory=utcnow)


class EntityTable(SQLModel, table=False):
    """UUID primary key. ``updated_at`` is also bumped by the database on UPDATE."""

    id: str = Field(default_factory=new_id, primary_key=True)
    created_at: datetime = Field(default_factory=utcnow, index=True)
    updated_at: datetime = Field(
        default_factory=utcnow,
        nullable=False,
        sa_column_kwargs={"server_default": sa.func.now(), "onupdate": sa.func.now()},
    )
