"""Schema management."""

from loguru import logger
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel

from src.muslimhunt.core.services.database.db_session import build_engine
from src.muslimhunt.runtime.context import get_config


def register_tables() -> None:
    """Import every table module so SQLModel.metadata knows all tables."""
    from src.muslimhunt.entities.core.identity import IdentityTable  # noqa: F401
    from src.muslimhunt.entities.core.profile import ProfileTable  # noqa: F401
    from src.muslimhunt.entities.service.comment import CommentTable  # noqa: F401
    from src.muslimhunt.entities.service.follow import FollowTable  # noqa: F401
    from src.muslimhunt.entities.service.forum import (  # noqa: F401
        ForumCategoryTable,
        ThreadCommentTable,
        ThreadTable,
    )
    from src.muslimhunt.entities.service.guide import (  # noqa: F401
        DefinitionTable,
        LaunchContentTable,
    )
    from src.muslimhunt.entities.service.newsletter import (  # noqa: F401
        NewsletterSubscriberTable,
    )
    from src.muslimhunt.entities.service.notification import (  # noqa: F401
        NotificationTable,
    )
    from src.muslimhunt.entities.service.product import ProductTable  # noqa: F401
    from src.muslimhunt.entities.service.story import (  # noqa: F401
        StoryCategoryTable,
        StoryCommentTable,
        StoryTable,
    )
    from src.muslimhunt.entities.service.vote import VoteTable  # noqa: F401


class DbManageService:
    def __init__(self, engine: Engine | None = None):
        self._engine = engine or build_engine(get_config())

    def create_all(self) -> None:
        """Create all database tables."""
        register_tables()
        SQLModel.metadata.create_all(self._engine)
        logger.info("Database initialized with tables.")
