"""Database engine and sessions."""

from collections.abc import Iterator
from contextlib import contextmanager

from loguru import logger
from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, create_engine

from src.muslimhunt.runtime.config.config_data import ConfigData
from src.muslimhunt.runtime.context import get_config


def _driver_options(config: ConfigData) -> dict:
    url = config.database.url
    if url.startswith("sqlite"):
        if config.app.environment == "production":
            logger.warning("Running production on SQLite; use PostgreSQL")
        return {"check_same_thread": False, "timeout": 20}
    if "postgresql" in url:
        return {"application_name": f"muslimhunt_{config.app.environment}", "connect_timeout": 30}
    return {}


def build_engine(config: ConfigData) -> Engine:
    db = config.database
    options: dict = {"pool_pre_ping": True, "connect_args": _driver_options(config)}
    if not db.url.startswith("sqlite"):
        options |= {
            "pool_size": db.pool_size,
            "max_overflow": db.max_overflow,
            "pool_timeout": db.pool_timeout,
            "pool_recycle": db.pool_recycle,
        }
    return create_engine(db.connection_string, **options)


class DbSessionService:
    """Owns the engine and hands out sessions bound to it.

    Tests pass their own engine; otherwise one is built from the current
    configuration.
    """

    def __init__(self, engine: Engine | None = None):
        if engine is None:
            config = get_config()
            logger.info("Connecting to the {} database", config.app.environment)
            engine = build_engine(config)
        self._engine = engine

    @property
    def engine(self) -> Engine:
        return self._engine

    def get_session(self) -> Session:
        return Session(self._engine, expire_on_commit=False)

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Commit when the block finishes, roll back if it raises."""
        with self.get_session() as db:
            try:
                yield db
                db.commit()
            except Exception:
                db.rollback()
                logger.exception("Transaction rolled back")
                raise

    def health_check(self) -> bool:
        try:
            with self._engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.error("Database unreachable: {}", e)
            return False
        return True
