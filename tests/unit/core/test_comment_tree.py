"""Tests for reply tree building, flattening and merging."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from src.muslimhunt.core.comment_tree import (
    build_comment_tree,
    flatten_two_levels,
    merge_by_id,
)

T0 = datetime(2024, 1, 1, tzinfo=UTC)


@dataclass
class Note:
    id: str
    parent_id: str | None = None
    created_at: datetime = T0


class TestBuildCommentTree:
    def test_nests_replies_under_parents(self):
        comments = [Note("a"), Note("b", "a"), Note("c", "b"), Note("d")]

        tree = build_comment_tree(comments)

        assert [n.comment.id for n in tree] == ["a", "d"]
        assert [n.comment.id for n in tree[0].replies] == ["b"]
        assert [n.comment.id for n in tree[0].replies[0].replies] == ["c"]

    def test_orphan_replies_are_dropped(self):
        tree = build_comment_tree([Note("a"), Note("x", "missing")])
        assert [n.comment.id for n in tree] == ["a"]
        assert tree[0].replies == []

    def test_keeps_input_order(self):
        comments = [Note("root"), Note("r2", "root"), Note("r1", "root")]
        tree = build_comment_tree(comments)
        assert [n.comment.id for n in tree[0].replies] == ["r2", "r1"]

    def test_self_parent_is_ignored(self):
        assert build_comment_tree([Note("loop", "loop")]) == []


class TestFlattenTwoLevels:
    def test_deep_replies_fold_into_root(self):
        tree = build_comment_tree(
            [Note("a"), Note("b", "a"), Note("c", "b"), Note("d", "c")]
        )

        flat = flatten_two_levels(tree)

        assert len(flat) == 1
        assert [n.comment.id for n in flat[0].replies] == ["b", "c", "d"]
        assert all(n.replies == [] for n in flat[0].replies)


class TestMergeById:
    def test_skips_known_ids_and_sorts_newest_first(self):
        existing = [Note("a", created_at=T0), Note("b", created_at=T0 + timedelta(minutes=5))]
        incoming = [
            Note("b", created_at=T0 + timedelta(hours=9)),
            Note("c", created_at=T0 + timedelta(minutes=1)),
        ]

        merged = merge_by_id(existing, incoming)

        assert [n.id for n in merged] == ["b", "c", "a"]
        assert merged[0].created_at == T0 + timedelta(minutes=5)
