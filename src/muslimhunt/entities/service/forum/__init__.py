"""Entity package: forum categories, threads and thread comments."""

from .entity import ForumCategory, Thread, ThreadComment
from .repository import (
    ForumCategoryRepository,
    ThreadCommentRepository,
    ThreadRepository,
)
from .table import ForumCategoryTable, ThreadCommentTable, ThreadTable

__all__ = [
    "ForumCategory",
    "ForumCategoryRepository",
    "ForumCategoryTable",
    "Thread",
    "ThreadComment",
    "ThreadCommentRepository",
    "ThreadCommentTable",
    "ThreadRepository",
    "ThreadTable",
]
