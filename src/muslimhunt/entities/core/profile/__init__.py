"""Entity package: Profile.

Public member profiles. A profile id is the user id used across products,
comments, threads and notifications.
"""

from .entity import (
    DEFAULT_BIO,
    DEFAULT_HEADLINE,
    PRIVATE_FIELDS,
    Profile,
    ProfileView,
    default_avatar_url,
    placeholder_profile,
)
from .repository import ProfileRepository
from .table import ProfileTable

__all__ = [
    "DEFAULT_BIO",
    "DEFAULT_HEADLINE",
    "PRIVATE_FIELDS",
    "Profile",
    "ProfileRepository",
    "ProfileTable",
    "ProfileView",
    "default_avatar_url",
    "placeholder_profile",
]
