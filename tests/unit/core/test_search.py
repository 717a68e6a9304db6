"""Tests for product search, highlighting and slugs."""

from dataclasses import dataclass

import pytest

from src.muslimhunt.core.search import (
    HIGHLIGHT_CLOSE,
    HIGHLIGHT_OPEN,
    find_by_slug,
    highlight,
    search_products,
    slugify,
    unique_slug,
)


@dataclass
class Item:
    name: str
    tagline: str = ""
    description: str = ""
    category: str = "Tools"
    halal_status: str = "Certified"


class TestSlugify:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("QuranFlow 2.0", "quranflow-20"),
            ("  Halal Invest Pro!  ", "halal-invest-pro"),
            ("a  -  b", "a-b"),
            ("Zakat & Sadaqah", "zakat-sadaqah"),
        ],
    )
    def test_slugify(self, text, expected):
        assert slugify(text) == expected


class TestSearchProducts:
    products = [
        Item("QuranFlow", tagline="Daily reading"),
        Item("SunnahSleep", description="Sleep like the Prophet"),
        Item("ZakatStream", category="Finance"),
    ]

    def test_blank_query_returns_everything(self):
        assert search_products(self.products, "  ") == self.products
        assert search_products(self.products, None) == self.products

    def test_matches_any_searchable_field_case_insensitively(self):
        assert [p.name for p in search_products(self.products, "SLEEP")] == ["SunnahSleep"]
        assert [p.name for p in search_products(self.products, "finance")] == ["ZakatStream"]
        assert [p.name for p in search_products(self.products, "reading")] == ["QuranFlow"]

    def test_no_match(self):
        assert search_products(self.products, "crypto") == []


class TestHighlight:
    def test_wraps_every_match(self):
        result = highlight("Halal halal", "halal")
        assert result == (
            f"{HIGHLIGHT_OPEN}Halal{HIGHLIGHT_CLOSE} {HIGHLIGHT_OPEN}halal{HIGHLIGHT_CLOSE}"
        )

    def test_escapes_html(self):
        assert highlight("<b>Deen</b>", None) == "&lt;b&gt;Deen&lt;/b&gt;"

    def test_query_with_regex_characters(self):
        assert HIGHLIGHT_OPEN in highlight("Price (USD)", "(usd)")

    def test_empty_text(self):
        assert highlight("", "x") == ""


def test_find_by_slug():
    items = [Item("Arabic Hero"), Item("SalahSync")]
    assert find_by_slug(items, "arabic-hero").name == "Arabic Hero"
    assert find_by_slug(items, "missing") is None


def test_unique_slug_appends_counter():
    taken = {"hello", "hello-2"}
    assert unique_slug("hello", taken.__contains__) == "hello-3"
    assert unique_slug("fresh", taken.__contains__) == "fresh"
    assert unique_slug("", taken.__contains__) == "thread"
