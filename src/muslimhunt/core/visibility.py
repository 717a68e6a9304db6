"""Who may see content that is still waiting for moderation."""

from src.muslimhunt.entities.core.profile import Profile


def visible_to(is_approved: bool, owner_id: str | None, viewer: Profile | None) -> bool:
    """Approved content is public. Pending content is shown only to its owner and to admins."""
    if is_approved:
        return True
    return viewer is not None and (viewer.is_admin or viewer.id == owner_id)
