"""Database initialization script."""

from src.muslimhunt.core.services.database.db_manage import DbManageService
from src.muslimhunt.core.services.database.db_session import DbSessionService
from src.muslimhunt.runtime.seed import SeedReport, seed


def init_db(database_service: DbSessionService | None = None) -> None:
    """Create all database tables."""
    database_service = database_service or DbSessionService()
    DbManageService(database_service.engine).create_all()


def seed_db(database_service: DbSessionService | None = None) -> SeedReport:
    database_service = database_service or DbSessionService()
    init_db(database_service)
    db = database_service.get_session()
    try:
        return seed(db)
    finally:
        db.close()


if __name__ == "__main__":
    init_db()
