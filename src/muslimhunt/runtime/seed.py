"""Starter content for a fresh database."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from loguru import logger
from sqlmodel import Session

from src.muslimhunt.entities.service.forum import ForumCategory, ForumCategoryRepository
from src.muslimhunt.entities.service.guide import (
    Definition,
    DefinitionRepository,
    LaunchContent,
    LaunchContentRepository,
)
from src.muslimhunt.entities.service.product import Product, ProductRepository
from src.muslimhunt.entities.service.story import StoryCategory, StoryCategoryRepository

FORUM_CATEGORIES = [
    ("General", "general", "Anything about building in the Muslim tech space."),
    ("Introductions", "introductions", "Say salaam and tell us what you are working on."),
    ("Feedback", "feedback", "Ask the community for feedback on your product."),
    ("Launches", "launches", "Plan, share and discuss upcoming launches."),
    ("Islamic Finance", "islamic-finance", "Halal funding, zakat and Shariah-compliant business."),
]

STORY_CATEGORIES = [
    ("Maker Stories", "maker-stories", "How Muslim makers built their products."),
    ("Launch Lessons", "launch-lessons", "What worked and what did not on launch day."),
    ("Community", "community", "News from the Muslim Hunt community."),
]

# name, tagline, category, halal status, upvotes, days since launch
PRODUCTS = [
    ("QuranFlow 2.0", "Build a meaningful relationship with the Quran.", "Spirituality", "Certified", 485, 0),
    ("ArabicHero", "Master Arabic through play.", "Education", "Self-Certified", 410, 0),
    ("SunnahSleep", "Wake up for Fajr feeling refreshed.", "Health", "Shariah-Compliant", 320, 1),
    ("SalahSync", "Your prayer times, everywhere.", "Spirituality", "Certified", 275, 1),
    ("HalalHabit", "Productivity with a purpose.", "Productivity", "Self-Certified", 180, 3),
    ("ZakatStream", "Transparency in every Dirham.", "Finance", "Self-Certified", 98, 15),
]


# section, page id, title, content
LAUNCH_PAGES = [
    (
        "before-launch",
        "setting-goals",
        "Setting goals",
        "Decide what a good launch means for you before you hunt: feedback, first users or a waitlist.",
    ),
    (
        "preparing-for-launch",
        "content-checklist",
        "Content checklist",
        "Prepare a clear tagline, a short description, a thumbnail and a first comment telling your story.",
    ),
    (
        "launch-a-product",
        "launch-day-duties",
        "Launch Day duties",
        "Be present all day. Answer every comment and thank the people who support you.",
    ),
    (
        "days-after-launch",
        "days-after-launch",
        "Days after your launch",
        "Follow up with new users, collect feedback and keep your product page up to date.",
    ),
    (
        "sharing-your-launch",
        "marketing-strategies",
        "Marketing strategies",
        "Share your launch page with your community, newsletter and social channels.",
    ),
]

DEFINITIONS = [
    ("Hunter", "Anybody with a free Muslim Hunt account who posts a new product to share with the community."),
    ("Maker", "Anyone who uses technology to solve their problems and shares what they built."),
    ("Launch", "The first time a product is shared with a community en masse."),
    ("Launch Page", "The page a hunted product gets, where visitors can comment on it and upvote it."),
    ("First comment", "The first comment on a launch page, where makers tell the story behind their product."),
    ("Product of the Day", "The product at the top of the homepage leaderboard for the day."),
]


@dataclass
class SeedReport:
    forum_categories: int = 0
    story_categories: int = 0
    products: int = 0
    launch_pages: int = 0
    definitions: int = 0


def seed(session: Session, now: datetime | None = None) -> SeedReport:
    """Insert whatever starter rows are missing; running it twice adds nothing."""
    now = now or datetime.now(UTC)
    report = SeedReport()

    forum = ForumCategoryRepository(session)
    for order, (name, slug, description) in enumerate(FORUM_CATEGORIES):
        if forum.get_by_slug(slug) is None:
            forum.create(
                ForumCategory(name=name, slug=slug, description=description, display_order=order)
            )
            report.forum_categories += 1

    stories = StoryCategoryRepository(session)
    for order, (name, slug, description) in enumerate(STORY_CATEGORIES):
        if stories.get_by_slug(slug) is None:
            stories.create(
                StoryCategory(name=name, slug=slug, description=description, display_order=order)
            )
            report.story_categories += 1

    guide = LaunchContentRepository(session)
    for section, page_id, title, content in LAUNCH_PAGES:
        if guide.get_page(section, page_id) is None:
            guide.create(LaunchContent(page_id=page_id, section=section, title=title, content=content))
            report.launch_pages += 1

    glossary = DefinitionRepository(session)
    for order, (term, text) in enumerate(DEFINITIONS, start=1):
        if glossary.get_by_term(term) is None:
            glossary.create(Definition(term=term, definition=text, display_order=order))
            report.definitions += 1

    products = ProductRepository(session)
    existing = {p.name for p in products.list_approved()}
    for name, tagline, category, halal_status, upvotes, age_days in PRODUCTS:
        if name in existing:
            continue
        products.create(
            Product(
                name=name,
                tagline=tagline,
                category=category,
                halal_status=halal_status,
                upvotes_count=upvotes,
                is_approved=True,
                created_at=now - timedelta(days=age_days),
            )
        )
        report.products += 1

    session.commit()
    logger.info("Seeded {}", report)
    return report
