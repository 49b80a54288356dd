"""Logging helpers for mimepost.

Every module logs through a standard ``logging.getLogger(__name__)`` logger
under the ``mimepost`` namespace. :func:`init_logging` attaches a single
Rich console handler to that namespace and registers the ``TRACE`` level used
by transports for session-level diagnostics.

Examples:
    Enable transport diagnostics::

        from mimepost.logging import init_logging

        init_logging("TRACE")
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from collections.abc import Mapping

__all__ = ["ROOT_LOGGER_NAME", "TRACE_LEVEL", "get_logger", "init_logging", "resolve_level"]

TRACE_LEVEL = 5
ROOT_LOGGER_NAME = "mimepost"
DEFAULT_LEVEL = "WARNING"

logging.addLevelName(TRACE_LEVEL, "TRACE")

_handler: logging.Handler | None = None


def resolve_level(level: str | int) -> int:
    """Translate a level name or number into a numeric logging level.

    Args:
        level: Level name (case-insensitive, ``TRACE`` included) or number.

    Returns:
        The numeric logging level.

    Raises:
        ValueError: If the name is not a known logging level.

    Examples:
        >>> resolve_level("trace")
        5
        >>> resolve_level(20)
        20
    """
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.strip().upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return value


def init_logging(
    level: str | int | None = None,
    *,
    config: Mapping[str, Any] | None = None,
) -> logging.Logger:
    """Configure the ``mimepost`` logger with a Rich console handler.

    Calling it again replaces the handler installed by the previous call.

    Args:
        level: Explicit level. Takes precedence over *config*.
        config: Full configuration mapping; ``logging.level`` is read from it.

    Returns:
        The configured ``mimepost`` logger.
    """
    global _handler  # pylint: disable=global-statement

    if level is None:
        section = (config or {}).get("logging") or {}
        level = section.get("level") or DEFAULT_LEVEL
    numeric = resolve_level(level)

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    if _handler is not None:
        logger.removeHandler(_handler)

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    handler.setLevel(numeric)
    logger.addHandler(handler)
    logger.setLevel(numeric)
    _handler = handler
    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger under the ``mimepost`` namespace.

    Args:
        name: Child logger name. Names already prefixed with ``mimepost`` are
            used unchanged; ``None`` returns the namespace root.

    Returns:
        The requested logger.
    """
    if not name:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
