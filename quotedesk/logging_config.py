"""
logging_config.py — Loguru sinks for the QuoteDesk API and dashboard client.

Every module logs through `logging.getLogger(...)`; those records are
forwarded into Loguru, which owns all output.

Business Rules:
- APP_ENV=production → one JSON object per line on stdout, plus an
  optional LOG_FILE copy rotated at 50 MB and kept for 7 days
- Any other APP_ENV → colored single-line console output
- LOG_LEVEL (default INFO) is the floor for every sink
- HTTP transport, access-log and SQL echo loggers only pass WARNING and up

Called by: quotedesk/main.py (import time, before routers load)
Depends on: LOG_LEVEL, APP_ENV, LOG_FILE environment variables
"""

import logging
import os
import sys

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> | "
    "{message}"
)
QUIET_LOGGERS = ("httpx", "httpcore", "uvicorn.access", "sqlalchemy.engine")


def _add_json_sinks(level: str) -> None:
    logger.add(sys.stdout, level=level, format="{message}", serialize=True)
    log_file = os.getenv("LOG_FILE")
    if log_file:
        logger.add(
            log_file,
            level=level,
            serialize=True,
            rotation="50 MB",
            retention="7 days",
            compression="gz",
        )


def setup_logging() -> None:
    """Replace Loguru's default sink and forward stdlib records into it."""
    logger.remove()
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    json_output = os.getenv("APP_ENV", "").lower() == "production"

    if json_output:
        _add_json_sinks(level)
    else:
        logger.add(sys.stdout, level=level, format=CONSOLE_FORMAT, colorize=True)

    logging.basicConfig(handlers=[_LoguruBridge()], level=0, force=True)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger.info("Logging ready", level=level, json=json_output)


class _LoguruBridge(logging.Handler):
    """Re-emit a stdlib LogRecord through Loguru at the caller's frame."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 0
        while frame and (depth == 0 or frame.f_code.co_filename == logging.__file__):
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())
