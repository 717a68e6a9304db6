"""Logging setup: loguru sinks, with the standard library routed into them."""

import logging
import sys
from pathlib import Path

from loguru import logger

from src.muslimhunt.runtime.config.config_data import LoggingConfig
from src.muslimhunt.runtime.context import get_config

PLAIN_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "[<cyan>{extra[request_id]}</cyan>] | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)

QUIET_LOGGERS = {
    "sqlalchemy.engine": logging.WARNING,
    "sqlalchemy.pool": logging.WARNING,
    "uvicorn": logging.INFO,
    "uvicorn.error": logging.INFO,
    "uvicorn.access": logging.CRITICAL,
}


class InterceptHandler(logging.Handler):
    """Re-emit ``logging`` records (uvicorn, sqlalchemy, httpx) through loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        # access lines come from the request middleware
        if record.name == "uvicorn.access":
            return
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        logger.opt(depth=2, exception=record.exc_info).bind(logger_name=record.name).log(
            level, record.getMessage()
        )


def _default_request_id(record) -> None:
    record["extra"].setdefault("request_id", "-")


def _add_file_sink(cfg: LoggingConfig, verbose: bool) -> None:
    path = Path(cfg.file)
    path.parent.mkdir(parents=True, exist_ok=True)
    as_json = cfg.format == "json"
    logger.add(
        str(path),
        level=cfg.level,
        format="{message}" if as_json else PLAIN_FORMAT,
        serialize=as_json,
        rotation=f"{cfg.max_size_mb} MB",
        retention=cfg.backup_count,
        compression="zip",
        enqueue=True,
        backtrace=verbose,
        diagnose=verbose,
    )


def _route_stdlib_logging() -> None:
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in list(logging.root.manager.loggerDict):
        existing = logging.getLogger(name)
        existing.handlers = []
        existing.propagate = True
    for name, level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(level)


def configure_logging() -> None:
    config = get_config()
    cfg = config.logging
    # variable values in tracebacks stay out of production logs
    verbose = config.app.environment != "production"

    logger.remove()
    logger.configure(extra={"request_id": "-"}, patcher=_default_request_id)
    logger.add(sys.stderr, level=cfg.level, format=PLAIN_FORMAT, colorize=True, backtrace=verbose, diagnose=verbose)
    if cfg.file:
        _add_file_sink(cfg, verbose)
    _route_stdlib_logging()

    logger.bind(environment=config.app.environment, level=cfg.level, file=cfg.file).info("Logging configured")
