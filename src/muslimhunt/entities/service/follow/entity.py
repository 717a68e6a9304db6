"""Entity: Follow."""

from src.muslimhunt.entities._base import Entity


class Follow(Entity):
    follower_id: str
    following_id: str
