"""Logging setup for shipyard.

Library modules log through ``logging.getLogger(__name__)``. The CLI calls
:func:`init_logging` once, which attaches the ``LogManager`` handlers to the
``shipyard`` logger so every module inherits them, level icons and
``extra={"context": {...}}`` rendering included.

Examples:
    >>> from shipyard.logging import init_logging
    >>> logger = init_logging(preset="dev")  # doctest: +SKIP
"""

from __future__ import annotations

import logging
from typing import Any

from shipyard.logging.manager import (
    FALLBACK_DEFAULTS,
    FALLBACK_PRESETS,
    LOGGING_LEVEL,
    SUCCESS_LEVEL,
    TRACE_LEVEL,
    LogManager,
    ShipyardFormatter,
)

ROOT_LOGGER_NAME = "shipyard"

_root_logger: LogManager | None = None


def init_logging(preset: str | None = None, config: dict[str, Any] | None = None) -> LogManager:
    """Configure the ``shipyard`` logger hierarchy.

    Calling it again replaces the previously installed handlers.

    Args:
        preset: Logging preset (``dev``, ``prod``, ``debug``).
        config: Explicit configuration overriding the preset.

    Returns:
        The root LogManager.
    """
    global _root_logger  # noqa: PLW0603

    std_logger = logging.getLogger(ROOT_LOGGER_NAME)
    if _root_logger is not None:
        for handler in _root_logger.handlers:
            std_logger.removeHandler(handler)
            handler.close()

    _root_logger = LogManager(name=ROOT_LOGGER_NAME, config=config, preset=preset)
    std_logger.setLevel(TRACE_LEVEL)
    for handler in _root_logger.handlers:
        std_logger.addHandler(handler)
    return _root_logger


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger under the ``shipyard`` namespace.

    Args:
        name: Module name. ``None`` returns the root logger (the LogManager
            when :func:`init_logging` was called).
    """
    if name is None:
        return _root_logger if _root_logger is not None else logging.getLogger(ROOT_LOGGER_NAME)
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


__all__ = [
    "FALLBACK_DEFAULTS",
    "FALLBACK_PRESETS",
    "LOGGING_LEVEL",
    "SUCCESS_LEVEL",
    "TRACE_LEVEL",
    "LogManager",
    "ShipyardFormatter",
    "get_logger",
    "init_logging",
]
