"""Mapping between browser paths and top-level views.

Each view with a canonical path has one route template. A template segment
written as ``{slug}`` captures that segment. Views without a route are shown
at ``/``.
"""

from enum import Enum


class View(str, Enum):
    HOME = "home"
    SUBMIT = "submit"
    DETAIL = "detail"
    DIRECTORY = "directory"
    PROFILE = "profile"
    NEW_THREAD = "new_thread"
    FORUM_HOME = "forum_home"
    RECENT_COMMENTS = "recent_comments"
    SPONSOR = "sponsor"
    NEWSLETTER = "newsletter"
    CATEGORIES = "categories"
    CATEGORY_DETAIL = "category_detail"
    WELCOME = "welcome"
    POST_SUBMIT = "post_submit"
    NOTIFICATIONS = "notifications"
    SUBMISSION = "submission"
    LAUNCH_GUIDE = "LAUNCH_GUIDE"
    HELP_CENTER = "HELP_CENTER"
    ADMIN_PANEL = "admin_panel"
    SETTINGS = "settings"
    API_DASHBOARD = "api_dashboard"
    PROFILE_EDIT = "profile_edit"
    MY_PRODUCTS = "my_products"
    FOLLOWED_PRODUCTS = "followed_products"
    VERIFICATION = "verification"
    FORUM_CATEGORY = "forum_category"
    FORUM_THREAD = "forum_thread"
    HELP_ARTICLE = "help_article"
    LAUNCH_ARCHIVE = "launch_archive"
    HOW_IT_WORKS = "how_it_works"
    BEFORE_LAUNCH = "before_launch"
    PREPARING_FOR_LAUNCH = "preparing_for_launch"
    DAYS_AFTER_LAUNCH = "days_after_launch"
    SHARING_YOUR_LAUNCH = "sharing_your_launch"
    LAUNCH_DAY_DUTIES = "launch_day_duties"
    DEFINITIONS = "definitions"
    STORIES = "stories"
    STORY_DETAIL = "story_detail"
    STORY_CATEGORY = "story_category"
    LOGIN = "login"


# Order matters: literal routes are listed before the templates that would
# also match them.
ROUTES: list[tuple[View, str]] = [
    (View.HOME, "/"),
    (View.NEW_THREAD, "/p/new"),
    (View.SUBMIT, "/submit"),
    (View.FORUM_HOME, "/forums"),
    (View.RECENT_COMMENTS, "/forums/comments"),
    (View.FORUM_THREAD, "/forums/t/{slug}"),
    (View.FORUM_CATEGORY, "/forums/{slug}"),
    (View.DIRECTORY, "/products"),
    (View.DETAIL, "/products/{slug}"),
    (View.CATEGORIES, "/categories"),
    (View.CATEGORY_DETAIL, "/categories/{slug}"),
    (View.PROFILE, "/users/{slug}"),
    (View.NOTIFICATIONS, "/notifications"),
    (View.NEWSLETTER, "/newsletter"),
    (View.SPONSOR, "/sponsor"),
    (View.ADMIN_PANEL, "/admin"),
    (View.SETTINGS, "/settings"),
    (View.PROFILE_EDIT, "/settings/profile"),
    (View.MY_PRODUCTS, "/my/products"),
    (View.LAUNCH_ARCHIVE, "/archive"),
    (View.HELP_CENTER, "/help"),
    (View.HELP_ARTICLE, "/help/{slug}"),
    (View.LAUNCH_GUIDE, "/launch"),
    (View.HOW_IT_WORKS, "/launch/how-it-works"),
    (View.BEFORE_LAUNCH, "/launch/before-launch"),
    (View.PREPARING_FOR_LAUNCH, "/launch/preparing-for-launch"),
    (View.LAUNCH_DAY_DUTIES, "/launch/launch-day-duties"),
    (View.DAYS_AFTER_LAUNCH, "/launch/days-after-launch"),
    (View.SHARING_YOUR_LAUNCH, "/launch/sharing-your-launch"),
    (View.DEFINITIONS, "/launch/definitions"),
    (View.STORIES, "/stories"),
    (View.STORY_CATEGORY, "/stories/category/{slug}"),
    (View.STORY_DETAIL, "/stories/{slug}"),
    (View.LOGIN, "/login"),
]

_PATHS = {view: template for view, template in ROUTES}


def _segments(path: str) -> list[str]:
    return [part for part in path.split("/") if part]


def _match(template: str, path: str) -> tuple[bool, str | None]:
    expected = _segments(template)
    actual = _segments(path)
    if len(expected) != len(actual):
        return False, None

    slug = None
    for want, got in zip(expected, actual):
        if want == "{slug}":
            slug = got
        elif want != got:
            return False, None
    return True, slug


def resolve_path(path: str) -> tuple[View, str | None]:
    """Return the view for ``path`` and its slug; unknown paths resolve to home."""
    path = path.split("?", 1)[0].split("#", 1)[0]
    for view, template in ROUTES:
        matched, slug = _match(template, path)
        if matched:
            return view, slug
    return View.HOME, None


def path_for(view: View | str, slug: str | None = None) -> str:
    template = _PATHS.get(View(view))
    if template is None:
        return "/"
    if "{slug}" in template:
        if not slug:
            return "/"
        return template.replace("{slug}", slug)
    return template


def next_path(current: str, view: View | str, slug: str | None = None) -> str | None:
    """Path to push when switching to ``view``, or None when already there."""
    target = path_for(view, slug)
    if target == current:
        return None
    return target
