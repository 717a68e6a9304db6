"""Entity package: Comment (product discussion)."""

from .entity import Comment
from .repository import CommentRepository
from .table import CommentTable

__all__ = ["Comment", "CommentRepository", "CommentTable"]
