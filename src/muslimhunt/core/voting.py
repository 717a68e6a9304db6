"""Vote toggling shared by products, comments and forum threads."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ToggleResult:
    voted: bool
    count: int


def vote_key(user_id: str, target_id: str) -> str:
    return f"{user_id}_{target_id}"


def apply_toggle(count: int, had_voted: bool) -> ToggleResult:
    """Flip the voted marker and move the counter with it, never below zero."""
    if had_voted:
        return ToggleResult(voted=False, count=max(0, count - 1))
    return ToggleResult(voted=True, count=max(0, count) + 1)
