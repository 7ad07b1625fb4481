from __future__ import annotations

import copy
import logging
import os
import sys
import time
import uuid
from contextvars import ContextVar
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOGGER_NAME = "portal"

# Per-request context stamped on every record: the request id (middleware) and
# the authenticated user id (identity gate). "-" when unknown.
REQUEST_ID: ContextVar[str] = ContextVar("request_id", default="-")
USER_ID: ContextVar[str] = ContextVar("user_id", default="-")

LOG_FORMAT = (
    "%(asctime)s %(levelname)-8s %(name)s "
    "request_id=%(request_id)s user=%(user_id)s src=%(filename)s:%(lineno)d "
    "%(message)s"
)
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class RequestContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003 (shadow built-in name)
        record.request_id = REQUEST_ID.get()
        record.user_id = USER_ID.get()
        return True


class ColorFormatter(logging.Formatter):
    """Level-colored console output; plain when NO_COLOR is set or stderr is not a TTY."""

    _RESET = "\x1b[0m"
    _DIM = "\x1b[2m"

    _LEVEL_COLORS: dict[int, str] = {
        logging.DEBUG: "\x1b[36m",
        logging.INFO: "\x1b[32m",
        logging.WARNING: "\x1b[33m",
        logging.ERROR: "\x1b[31m",
        logging.CRITICAL: "\x1b[35m",
    }

    def __init__(self, *args, enable_color: bool = True, **kwargs):
        super().__init__(*args, **kwargs)
        self.enable_color = enable_color

    def format(self, record: logging.LogRecord) -> str:
        if not self.enable_color:
            return super().format(record)

        r = copy.copy(record)
        r.levelname = f"{self._LEVEL_COLORS.get(r.levelno, '')}{r.levelname}{self._RESET}"
        r.name = f"{self._DIM}{r.name}{self._RESET}"
        return super().format(r)


def _color_enabled(stream) -> bool:
    if os.getenv("NO_COLOR"):
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty()) if callable(isatty) else False


def _parse_level(level: str) -> int:
    return logging.getLevelNamesMapping().get((level or "INFO").upper(), logging.INFO)


def _file_handler(path: Path, level: int) -> logging.Handler:
    handler = RotatingFileHandler(
        filename=str(path),
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=10,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def _console_handler() -> logging.Handler:
    # only problems reach the terminal; the file has the full trail
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(logging.WARNING)
    handler.setFormatter(ColorFormatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT, enable_color=_color_enabled(sys.stderr)))
    return handler


def configure_logging(
    *,
    log_dir: str | Path | None = None,
    log_file: str = "portal.log",
    level: str | None = None,
) -> logging.Logger:
    """
    Return the "portal" logger, configuring it on first use: rotating file
    under settings.log_dir plus warnings on stderr. Every module calls this at
    import time; only the first call installs handlers.
    """
    logger = logging.getLogger(LOGGER_NAME)
    if getattr(logger, "_configured", False):
        return logger

    from portal.config import settings

    numeric_level = _parse_level(level or settings.log_level)
    log_dir = Path(log_dir or settings.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    logger.setLevel(numeric_level)
    logger.propagate = False

    context = RequestContextFilter()
    for handler in (_file_handler(log_dir / log_file, numeric_level), _console_handler()):
        handler.addFilter(context)
        logger.addHandler(handler)

    logger._configured = True  # type: ignore[attr-defined]
    logger.debug("logger configured dir=%s level=%s", log_dir, logging.getLevelName(numeric_level))
    return logger


def set_request_id(request_id: Optional[str] = None) -> str:
    rid = request_id or str(uuid.uuid4())
    REQUEST_ID.set(rid)
    return rid


def set_user_id(user_id: Optional[int]) -> None:
    USER_ID.set(str(user_id) if user_id is not None else "-")


def clear_request_id() -> None:
    REQUEST_ID.set("-")
    USER_ID.set("-")


class log_request:
    """
    Time a unit of work and log its outcome:
      with log_request(logger, f"complete_chapter course={course_id}"):
          ...
    Failures are logged at warning level and re-raised.
    """

    def __init__(self, logger: logging.Logger, name: str):
        self.logger = logger
        self.name = name
        self.start = 0.0

    def __enter__(self):
        self.start = time.perf_counter()
        self.logger.debug("start %s", self.name)
        return self

    def __exit__(self, exc_type, exc, tb):
        dur_ms = int((time.perf_counter() - self.start) * 1000)
        if exc is None:
            self.logger.info("%s ok duration_ms=%s", self.name, dur_ms)
        else:
            self.logger.warning("%s failed duration_ms=%s error=%s", self.name, dur_ms, type(exc).__name__)
        return False
