"""Logging setup for **docs_explorer**.

Everything logs below the ``DocsExplorer`` logger. Components take a child
logger from :func:`get_logger` (``DocsExplorer.crawler``,
``DocsExplorer.server`` ...), so a single :func:`configure` call sets level,
format and destinations for all of them::

      from docs_explorer.logger import get_logger
      logger = get_logger("crawler")
      logger.info("Scraping (%d/%d): %s", n, max_pages, url)

Console output goes to stderr; stdout carries command output such as the JSON
printed by ``docs-explorer search``.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, List, Optional, Union

DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOGGER_NAME: Final[str] = "DocsExplorer"

LOG_FILE_MAX_BYTES: Final[int] = 5 * 1024 * 1024
LOG_FILE_BACKUPS: Final[int] = 3

LevelT = Union[int, str]


def get_logger(component: Optional[str] = None) -> logging.Logger:
    """The project logger, or its child ``DocsExplorer.<component>``."""
    if not component:
        return logging.getLogger(LOGGER_NAME)
    return logging.getLogger(f"{LOGGER_NAME}.{component}")


def _build_handlers(log_file: Union[str, Path, None], log_format: str) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file is not None:
        handlers.append(
            RotatingFileHandler(
                filename=str(log_file),
                maxBytes=LOG_FILE_MAX_BYTES,
                backupCount=LOG_FILE_BACKUPS,
                encoding="utf-8",
            )
        )
    formatter = logging.Formatter(log_format)
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def configure(
    *,
    level: LevelT = "INFO",
    log_file: Union[str, Path, None] = None,
    log_format: str = DEFAULT_FORMAT,
    replace_handlers: bool = True,
) -> logging.Logger:
    """(Re)configure the project logger.

    Parameters
    ----------
    level
        Numeric or textual logging level (e.g. ``"DEBUG"``).
    log_file
        Optional log file, rotated at 5 MB with 3 backups.
    log_format
        Format string for :class:`logging.Formatter`.
    replace_handlers
        Close and drop the handlers installed by an earlier call first.
    """
    root = get_logger()
    root.setLevel(level)

    if replace_handlers:
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()

    for handler in _build_handlers(log_file, log_format):
        root.addHandler(handler)

    root.propagate = False
    return root


def init_logging(
    level: LevelT = "INFO",
    log_file: Union[str, Path, None] = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """Replace the handlers with the given options; the CLI calls this once per run."""
    return configure(level=level, log_file=log_file, log_format=log_format, replace_handlers=True)


logger: logging.Logger = init_logging()

__all__ = ["logger", "configure", "get_logger", "init_logging", "LOGGER_NAME", "DEFAULT_FORMAT"]
