"""Entity: Vote."""

from enum import Enum

from src.muslimhunt.entities._base import Entity


class VoteTarget(str, Enum):
    PRODUCT = "product"
    COMMENT = "comment"
    THREAD = "thread"


class Vote(Entity):
    """One member's upvote on a product, comment or thread."""

    user_id: str
    target_type: VoteTarget
    target_id: str
