"""Reply trees built from flat comment lists.

Comments reference their parent through ``parent_id``. Top-level comments have
no parent. A reply whose parent is not in the list is dropped.
"""

from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Any, Protocol, TypeVar

from pydantic import BaseModel, Field

from src.muslimhunt.core.timeago import as_utc


class _Threaded(Protocol):
    id: str
    parent_id: str | None


class _Dated(Protocol):
    id: str
    created_at: datetime


D = TypeVar("D", bound=_Dated)


class CommentNode(BaseModel):
    comment: Any
    replies: list["CommentNode"] = Field(default_factory=list)


def build_comment_tree(comments: Sequence[_Threaded]) -> list[CommentNode]:
    """Nest replies under their parents, keeping the input order at every level."""
    nodes = {c.id: CommentNode(comment=c) for c in comments}
    roots: list[CommentNode] = []
    for comment in comments:
        node = nodes[comment.id]
        if not comment.parent_id:
            roots.append(node)
        elif comment.parent_id in nodes and comment.parent_id != comment.id:
            nodes[comment.parent_id].replies.append(node)
    return roots


def _descendants(node: CommentNode) -> Iterable[CommentNode]:
    for reply in node.replies:
        yield reply
        yield from _descendants(reply)


def flatten_two_levels(tree: Sequence[CommentNode]) -> list[CommentNode]:
    """Fold every reply below the second level into its top-level ancestor."""
    flattened = []
    for root in tree:
        replies = [CommentNode(comment=n.comment) for n in _descendants(root)]
        flattened.append(CommentNode(comment=root.comment, replies=replies))
    return flattened


def merge_by_id(existing: Sequence[D], incoming: Sequence[D]) -> list[D]:
    """Add incoming comments whose id is not already present, newest first."""
    seen: dict[str, D] = {}
    for comment in [*existing, *incoming]:
        seen.setdefault(comment.id, comment)
    return sorted(seen.values(), key=lambda c: as_utc(c.created_at), reverse=True)
