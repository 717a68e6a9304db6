"""Entity package: Follow."""

from .entity import Follow
from .repository import FollowRepository
from .table import FollowTable

__all__ = ["Follow", "FollowRepository", "FollowTable"]
