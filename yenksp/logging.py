"""Logging for yenksp.

All module loggers hang off the ``"yenksp"`` logger, which gets exactly one
handler. The library is quiet at INFO: path searches only emit DEBUG traces
(one line per deviation round and per accepted candidate). The starting level
can be chosen without code changes through the ``YENKSP_LOG_LEVEL``
environment variable, e.g. ``YENKSP_LOG_LEVEL=debug``.
"""

import logging
import os
import sys
from contextlib import contextmanager
from typing import Iterator, Optional

#: Name of the package root logger; every module logger is a child of it.
ROOT_LOGGER_NAME = "yenksp"

#: Environment variable consulted for the initial level.
LOG_LEVEL_ENV = "YENKSP_LOG_LEVEL"

_DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_ROOT_LOGGER_CONFIGURED = False


def _level_from_env() -> int:
    env_level = os.getenv(LOG_LEVEL_ENV)
    if env_level:
        return getattr(logging, env_level.upper(), logging.INFO)
    return logging.INFO


def setup_root_logger(
    level: Optional[int] = None,
    format_string: Optional[str] = None,
    handler: Optional[logging.Handler] = None,
) -> None:
    """Attach the single yenksp handler, once.

    Later calls do nothing until `reset_logging()`; use
    `set_global_log_level` to change the level afterwards.

    Args:
        level: Initial level. Defaults to ``$YENKSP_LOG_LEVEL`` or INFO.
        format_string: Record format; timestamp, logger, level and message
            by default.
        handler: Destination; a stdout StreamHandler by default.
    """
    global _ROOT_LOGGER_CONFIGURED

    if _ROOT_LOGGER_CONFIGURED:
        return

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(_level_from_env() if level is None else level)
    root_logger.handlers.clear()

    if handler is None:
        handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(format_string or _DEFAULT_FORMAT))
    root_logger.addHandler(handler)

    # Propagate so pytest's caplog sees package records
    root_logger.propagate = True

    _ROOT_LOGGER_CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Logger for a yenksp module, e.g. ``get_logger(__name__)``.

    The logger has no handler or level of its own and follows the
    ``"yenksp"`` logger.
    """
    setup_root_logger()

    logger = logging.getLogger(name)
    logger.setLevel(logging.NOTSET)
    return logger


def set_global_log_level(level: int) -> None:
    """Set the level of the yenksp logger and of its handlers."""
    setup_root_logger()

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(level)
    for handler in root_logger.handlers:
        handler.setLevel(level)


def enable_debug_logging() -> None:
    """Emit per-iteration search traces."""
    set_global_log_level(logging.DEBUG)


def disable_debug_logging() -> None:
    set_global_log_level(logging.INFO)


@contextmanager
def debug_logging() -> Iterator[logging.Logger]:
    """Trace the searches run inside the block, then restore the previous level.

    Example:
        with debug_logging():
            k_shortest_paths(graph, "A", "D", 3)
    """
    setup_root_logger()
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    previous = root_logger.level
    set_global_log_level(logging.DEBUG)
    try:
        yield root_logger
    finally:
        set_global_log_level(previous)


def reset_logging() -> None:
    """Drop the handler and level so the next call configures from scratch (tests)."""
    global _ROOT_LOGGER_CONFIGURED
    _ROOT_LOGGER_CONFIGURED = False

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.handlers.clear()
    root_logger.setLevel(logging.NOTSET)


setup_root_logger()
