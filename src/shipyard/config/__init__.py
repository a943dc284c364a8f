"""Project configuration for shipyard.

Examples:
    >>> from shipyard.config import load_config
    >>> config = load_config(".shipyard.yml")  # doctest: +SKIP
"""

from shipyard.config.exceptions import (
    ConfigError,
    ConfigFileNotFoundError,
    ConfigFormatError,
    ShipyardError,
)
from shipyard.config.loader import find_config, load_config, load_raw, parse_project
from shipyard.config.models import (
    MODE_ARCHIVE,
    MODE_BINARY,
    SOURCE_FORMATS,
    UPLOAD_MODES,
    ArchiveFile,
    ArchiveFileInfo,
    ExtraFile,
    ProjectConfig,
    SourceConfig,
    UploadConfig,
)

__all__ = [
    "MODE_ARCHIVE",
    "MODE_BINARY",
    "SOURCE_FORMATS",
    "UPLOAD_MODES",
    "ArchiveFile",
    "ArchiveFileInfo",
    "ConfigError",
    "ConfigFileNotFoundError",
    "ConfigFormatError",
    "ExtraFile",
    "ProjectConfig",
    "ShipyardError",
    "SourceConfig",
    "UploadConfig",
    "find_config",
    "load_config",
    "load_raw",
    "parse_project",
]
