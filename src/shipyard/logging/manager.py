"""Rich-based log manager for shipyard.

``LogManager`` configures a Rich console handler and an optional rotating
file handler from a preset and/or an explicit config mapping. Two extra
levels are registered (TRACE below DEBUG, SUCCESS between INFO and WARNING).

Every handler renders records through :class:`ShipyardFormatter`, so any
logger under the handlers gets the level icon and the ``key=value`` context
passed as ``extra={"context": {...}}``:

    >>> logger = LogManager(name="shipyard.demo", config={"output": "console"})
    >>> logger.log(SUCCESS_LEVEL, "Uploaded", extra={"context": {"target": "prod"}})  # doctest: +SKIP

The logger itself accepts every level; handlers do the filtering.
"""

from __future__ import annotations

import logging
import logging.handlers
from collections.abc import Mapping
from pathlib import Path
from types import SimpleNamespace
from typing import Any

from box import Box
from rich.console import Console
from rich.logging import RichHandler

TRACE_LEVEL = 5
SUCCESS_LEVEL = 25

LOGGING_LEVEL = SimpleNamespace(
    TRACE=TRACE_LEVEL,
    DEBUG=logging.DEBUG,
    INFO=logging.INFO,
    SUCCESS=SUCCESS_LEVEL,
    WARNING=logging.WARNING,
    ERROR=logging.ERROR,
    CRITICAL=logging.CRITICAL,
)

logging.addLevelName(TRACE_LEVEL, "TRACE")
logging.addLevelName(SUCCESS_LEVEL, "SUCCESS")

FALLBACK_DEFAULTS: dict[str, Any] = {
    "output": "console",
    "console": {
        "level": "INFO",
        "show_path": False,
        "tracebacks_show_locals": False,
    },
    "file": {
        "level": "DEBUG",
        "file_path": "",
        "log_path": ".",
        "log_dir": "logs",
        "log_name": "shipyard.log",
        "auto_create_dir": True,
        "max_bytes": 10 * 1024 * 1024,
        "backup_count": 5,
        "format": "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    },
    "icons": {
        "show": True,
        "trace": "🔬",
        "debug": "🔎",
        "info": "📄",
        "success": "✅",
        "warning": "🚨",
        "error": "❌",
        "critical": "💀",
    },
}

FALLBACK_PRESETS: dict[str, dict[str, Any]] = {
    "dev": {
        "output": "console",
        "console": {"level": "DEBUG", "show_path": True},
    },
    "prod": {
        "output": "file",
        "console": {"level": "WARNING", "tracebacks_show_locals": False},
        "file": {"level": "INFO"},
        "icons": {"show": False},
    },
    "debug": {
        "output": "both",
        "console": {"level": "TRACE", "show_path": True, "tracebacks_show_locals": True},
        "file": {"level": "TRACE"},
    },
}

_ALLOWED_LOG_EXTENSIONS = frozenset({"", ".log", ".txt", ".json"})
_FORBIDDEN_COMPONENTS = frozenset({"..", "~"})
_MAX_FILENAME_LENGTH = 255
_MAX_PATH_LENGTH = 4096


class ShipyardFormatter(logging.Formatter):
    """Formatter adding the level icon and the record's structured context.

    Args:
        fmt: %-style format string.
        icons: Mapping of lowercase level names to icons. ``None`` or an
            empty mapping disables icons.

    Examples:
        >>> formatter = ShipyardFormatter("%(levelname)s %(message)s", icons={"info": "i"})
        >>> record = logging.makeLogRecord(
        ...     {"levelname": "INFO", "msg": "Uploaded", "context": {"target": "prod"}}
        ... )
        >>> formatter.format(record)
        'INFO i Uploaded | target=prod'
    """

    def __init__(self, fmt: str | None = None, icons: Mapping[str, str] | None = None) -> None:
        super().__init__(fmt)
        self._icons = dict(icons or {})

    def formatMessage(self, record: logging.LogRecord) -> str:  # noqa: N802
        record.message = self.decorate(record.levelname, record.message, getattr(record, "context", None))
        return super().formatMessage(record)

    def decorate(self, level_name: str, message: str, context: Mapping[str, Any] | None = None) -> str:
        """Return ``message`` with its level icon and context suffix."""
        icon = self._icons.get(level_name.lower())
        if icon:
            message = f"{icon} {message}"
        if context:
            message = f"{message} | " + " ".join(f"{k}={v}" for k, v in context.items())
        return message


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _validate_log_file_path(path: Path) -> Path:
    """Reject suspicious log file locations.

    Args:
        path: Requested log file path.

    Returns:
        The resolved path.

    Raises:
        ValueError: On ``..``/``~`` components, a disallowed extension or an
            oversized name.
    """
    for part in path.parts:
        if part in _FORBIDDEN_COMPONENTS:
            raise ValueError(f"Log file path contains forbidden component {part!r}: {path}")
    if path.suffix.lower() not in _ALLOWED_LOG_EXTENSIONS:
        raise ValueError(f"Log file extension {path.suffix!r} not allowed")
    if len(path.name) > _MAX_FILENAME_LENGTH:
        raise ValueError(f"Log file name exceeds maximum length of {_MAX_FILENAME_LENGTH}")
    resolved = path.resolve()
    if len(str(resolved)) > _MAX_PATH_LENGTH:
        raise ValueError(f"Log file path exceeds maximum length of {_MAX_PATH_LENGTH}")
    return resolved


class LogManager(logging.Logger):
    """Logger configured from a preset and/or an explicit config mapping.

    Precedence: explicit ``config`` > ``preset`` > built-in defaults. An
    unknown preset is ignored.

    Args:
        name: Logger name.
        config: Partial configuration (``output``, ``console``, ``file``, ``icons``).
        preset: One of ``dev``, ``prod``, ``debug``.

    Examples:
        >>> logger = LogManager(name="shipyard.example", config={"output": "console"})
        >>> logger.level == TRACE_LEVEL
        True
    """

    def __init__(
        self,
        name: str = "shipyard",
        config: dict[str, Any] | None = None,
        preset: str | None = None,
    ) -> None:
        """Initialize LogManager and attach its handlers."""
        super().__init__(name, level=TRACE_LEVEL)
        merged = FALLBACK_DEFAULTS
        if preset:
            merged = _deep_merge(merged, FALLBACK_PRESETS.get(preset, {}))
        if config:
            merged = _deep_merge(merged, dict(config))
        self._config = Box(merged, default_box=True)
        self._setup_handlers()

    def _setup_handlers(self) -> None:
        output = self._config.output
        if output in ("console", "both"):
            self.addHandler(self._console_handler())
        if output in ("file", "both"):
            self.addHandler(self._file_handler())

    def _console_handler(self) -> logging.Handler:
        console = self._config.console
        handler = RichHandler(
            console=Console(stderr=True),
            show_path=bool(console.show_path),
            rich_tracebacks=True,
            tracebacks_show_locals=bool(console.tracebacks_show_locals),
            markup=False,
        )
        handler.setFormatter(self._formatter("%(message)s"))
        handler.setLevel(logging.getLevelName(str(console.level).upper()))
        return handler

    def _file_handler(self) -> logging.Handler:
        file_cfg = self._config.file
        if file_cfg.file_path:
            path = Path(file_cfg.file_path)
        else:
            path = Path(file_cfg.log_path) / file_cfg.log_dir / file_cfg.log_name
        path = _validate_log_file_path(path)
        if file_cfg.auto_create_dir:
            path.parent.mkdir(parents=True, exist_ok=True)

        handler = logging.handlers.RotatingFileHandler(
            path,
            maxBytes=int(file_cfg.max_bytes),
            backupCount=int(file_cfg.backup_count),
            encoding="utf-8",
        )
        handler.setFormatter(self._formatter(file_cfg.format))
        handler.setLevel(logging.getLevelName(str(file_cfg.level).upper()))
        return handler

    def _formatter(self, fmt: str) -> ShipyardFormatter:
        icons = self._config.icons
        shown = {k: v for k, v in icons.items() if k != "show"} if icons.show else None
        return ShipyardFormatter(fmt, icons=shown)


__all__ = [
    "FALLBACK_DEFAULTS",
    "FALLBACK_PRESETS",
    "LOGGING_LEVEL",
    "SUCCESS_LEVEL",
    "TRACE_LEVEL",
    "LogManager",
    "ShipyardFormatter",
]
