"""Entity package: stories, story categories and story comments."""

from .entity import Story, StoryCategory, StoryComment
from .repository import (
    StoryCategoryRepository,
    StoryCommentRepository,
    StoryRepository,
)
from .table import StoryCategoryTable, StoryCommentTable, StoryTable

__all__ = [
    "Story",
    "StoryCategory",
    "StoryCategoryRepository",
    "StoryCategoryTable",
    "StoryComment",
    "StoryCommentRepository",
    "StoryCommentTable",
    "StoryRepository",
    "StoryTable",
]
