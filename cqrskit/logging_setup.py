"""Logging setup for the ``cqrskit`` logger hierarchy.

Every module in the package logs through ``logging.getLogger(__name__)``, so
the pipeline behaviors (``cqrskit.pipeline.log``, ``.exception_guard``,
``.chain``) and the notification fan-out all sit under one ``cqrskit`` root.
``setup_logging()`` attaches handlers to that root only; an application that
already configures logging can skip it and let records propagate.

Handlers:
- a Rich console handler on *stderr* (markup disabled, since request reprs
  and error messages may contain square brackets);
- an optional plain-text file handler with timestamps, one line per record.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Union

from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from cqrskit.config import CqrsConfig

LOGGER_NAME = "cqrskit"
FILE_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def resolve_level(level: Union[str, int]) -> int:
    """Return the numeric level for *level*.

    Accepts a level name in any case (``"debug"``, ``"WARNING"``) or an int.
    Unknown names fall back to ``logging.INFO``.
    """
    if isinstance(level, int):
        return level
    numeric = logging.getLevelName(level.upper())
    return numeric if isinstance(numeric, int) else logging.INFO


def _reset_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def setup_logging(
    level: Union[str, int] = "INFO",
    log_file: Optional[Path] = None,
    *,
    console: Console | None = None,
) -> logging.Logger:
    """Attach console (and optionally file) handlers to the ``cqrskit`` logger.

    Calling it again replaces the handlers from the previous call rather than
    stacking new ones.

    Parameters
    ----------
    level:
        Level name or number applied to the logger and every handler.
    log_file:
        When given, records are also appended to this file.  Parent
        directories are created.
    console:
        Rich console for the console handler; defaults to one on stderr.

    Returns
    -------
    logging.Logger
        The configured ``cqrskit`` logger.
    """
    numeric_level = resolve_level(level)
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric_level)
    _reset_handlers(logger)

    handlers: list[logging.Handler] = [
        RichHandler(
            console=console or Console(stderr=True),
            show_time=True,
            show_path=False,
            markup=False,
        )
    ]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(str(log_file))
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=FILE_DATE_FORMAT))
        handlers.append(file_handler)

    for handler in handlers:
        handler.setLevel(numeric_level)
        logger.addHandler(handler)
    return logger


def setup_logging_from_config(config: "CqrsConfig", *, console: Console | None = None) -> logging.Logger:
    """Configure logging from a loaded :class:`~cqrskit.config.CqrsConfig`."""
    return setup_logging(config.log_level, config.log_file, console=console)
