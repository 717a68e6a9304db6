"""Entities: LaunchContent, Definition."""

from pydantic import Field

from src.muslimhunt.entities._base import Entity

# Sections of the launch guide, in reading order.
LAUNCH_SECTIONS = (
    "before-launch",
    "preparing-for-launch",
    "launch-a-product",
    "days-after-launch",
    "sharing-your-launch",
)


class LaunchContent(Entity):
    """One page of the launch guide. ``page_id`` is the anchor within its section."""

    page_id: str
    section: str
    title: str
    content: str
    display_order: int = 0
    is_active: bool = True


class Definition(Entity):
    term: str = Field(min_length=1)
    definition: str = Field(min_length=1)
    display_order: int = 0
    is_active: bool = True
