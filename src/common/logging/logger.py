# File: common/logging/logger.py

import json
import logging
import sys
from logging.handlers import TimedRotatingFileHandler
from typing import Any, Optional

from common.config.settings import settings

LOG_FILE = settings.LOG_DIR / "civic.log"

LEVEL_COLORS = {
    "DEBUG": "\033[94m",
    "INFO": "\033[92m",
    "WARNING": "\033[93m",
    "ERROR": "\033[91m",
    "CRITICAL": "\033[95m",
}
RESET = "\033[0m"

LOG_FORMAT = "[%(asctime)s] %(levelname)s | %(message)s | context=%(context_json)s"


def _render_context(context: Any) -> str:
    # default=str covers datetimes, ObjectIds and enums
    try:
        return json.dumps(context, default=str, ensure_ascii=False, sort_keys=True)
    except (TypeError, ValueError):
        return str(context)


class ContextFormatter(logging.Formatter):
    """Renders the ``context`` extra as JSON; records without one get ``{}``."""

    def format(self, record: logging.LogRecord) -> str:
        record.context_json = _render_context(getattr(record, "context", {}))
        return super().format(record)


class ColorFormatter(ContextFormatter):
    def format(self, record: logging.LogRecord) -> str:
        levelname = record.levelname
        record.levelname = f"{LEVEL_COLORS.get(levelname, '')}{levelname}{RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = levelname


def _build_logger() -> logging.Logger:
    log = logging.getLogger("civic")
    log.setLevel(settings.LOG_LEVEL.upper())
    log.propagate = False

    if log.handlers:
        return log

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(ColorFormatter(LOG_FORMAT))
    log.addHandler(console_handler)

    settings.LOG_DIR.mkdir(parents=True, exist_ok=True)
    file_handler = TimedRotatingFileHandler(LOG_FILE, when="midnight", backupCount=settings.LOG_RETENTION_DAYS, encoding="utf-8")
    file_handler.setFormatter(ContextFormatter(LOG_FORMAT))
    log.addHandler(file_handler)
    return log


logger = _build_logger()


def _context(extra: Optional[dict]) -> dict:
    return {"context": extra or {}}


def log_debug(message: str, extra: Optional[dict] = None):
    logger.debug(message, extra=_context(extra))


def log_info(message: str, extra: Optional[dict] = None):
    logger.info(message, extra=_context(extra))


def log_warning(message: str, extra: Optional[dict] = None):
    logger.warning(message, extra=_context(extra))


def log_error(message: str, extra: Optional[dict] = None, exc_info: bool = False):
    logger.error(message, extra=_context(extra), exc_info=exc_info)


def log_critical(message: str, extra: Optional[dict] = None, exc_info: bool = False):
    logger.critical(message, extra=_context(extra), exc_info=exc_info)
