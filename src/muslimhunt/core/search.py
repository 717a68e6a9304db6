"""Product search, highlighting and slug helpers."""

import html
import re
from collections.abc import Iterable, Sequence
from typing import Protocol, TypeVar

HIGHLIGHT_OPEN = '<mark class="bg-emerald-100 text-emerald-900">'
HIGHLIGHT_CLOSE = "</mark>"

SEARCHABLE_FIELDS = ("name", "tagline", "description", "category", "halal_status")


class _Named(Protocol):
    name: str


P = TypeVar("P", bound=_Named)


def slugify(text: str) -> str:
    """Lowercase, dash-separated form of ``text`` used in URLs.

    >>> slugify("  Halal Invest Pro!  ")
    'halal-invest-pro'
    """
    slug = text.lower().strip()
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"[^\w-]+", "", slug)
    slug = re.sub(r"--+", "-", slug)
    return slug


def search_products(products: Sequence[P], query: str | None) -> list[P]:
    """Case-insensitive substring match over the searchable product fields.

    A blank query matches everything.
    """
    if not query or not query.strip():
        return list(products)

    needle = query.strip().lower()
    matches = []
    for product in products:
        for field in SEARCHABLE_FIELDS:
            value = getattr(product, field, None)
            if value and needle in str(value).lower():
                matches.append(product)
                break
    return matches


def highlight(text: str, query: str | None) -> str:
    """Escape ``text`` for HTML and wrap every match of ``query`` in a mark tag."""
    if not text:
        return ""
    if not query or not query.strip():
        return html.escape(text)

    pattern = re.compile(f"({re.escape(query.strip())})", re.IGNORECASE)
    parts = pattern.split(text)
    out = []
    for index, part in enumerate(parts):
        # split() with one capture group puts matches at odd indexes
        if index % 2:
            out.append(f"{HIGHLIGHT_OPEN}{html.escape(part)}{HIGHLIGHT_CLOSE}")
        else:
            out.append(html.escape(part))
    return "".join(out)


def find_by_slug(products: Iterable[P], slug: str) -> P | None:
    for product in products:
        if slugify(product.name) == slug:
            return product
    return None


def unique_slug(base: str, exists) -> str:
    """Return ``base`` or ``base-2``, ``base-3``... whichever ``exists`` rejects first."""
    base = base or "thread"
    candidate = base
    suffix = 2
    while exists(candidate):
        candidate = f"{base}-{suffix}"
        suffix += 1
    return candidate
