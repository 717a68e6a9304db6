"""Entity package: Vote."""

from .entity import Vote, VoteTarget
from .repository import VoteRepository
from .table import VoteTable

__all__ = ["Vote", "VoteRepository", "VoteTable", "VoteTarget"]
