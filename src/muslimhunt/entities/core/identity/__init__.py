"""Entity package: Identity (sign-in method linked to a profile)."""

from .entity import Identity
from .repository import IdentityRepository
from .table import IdentityTable

__all__ = ["Identity", "IdentityRepository", "IdentityTable"]
