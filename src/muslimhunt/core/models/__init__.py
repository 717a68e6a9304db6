"""Session and sign-in token models."""

from .session import AuthSession, MagicLinkClaims, UserSession

__all__ = ["AuthSession", "UserSession", "MagicLinkClaims"]
