"""Configuration loading for shipyard.

Reads a YAML project file into a :class:`box.Box` and converts it into the
typed :class:`~shipyard.config.models.ProjectConfig` tree. Schema validation
is intentionally shallow: types are checked, semantics are left to the
stages that consume each section.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from box import Box

from shipyard.config.exceptions import ConfigFileNotFoundError, ConfigFormatError
from shipyard.config.models import (
    ArchiveFile,
    ArchiveFileInfo,
    ExtraFile,
    ProjectConfig,
    SourceConfig,
    UploadConfig,
)

log = logging.getLogger(__name__)

#: File names searched (in order) in the working directory.
DEFAULT_CONFIG_FILES = (".shipyard.yml", ".shipyard.yaml", "shipyard.yml", "shipyard.yaml")


def find_config(directory: str | Path | None = None) -> Path:
    """Locate the project configuration file.

    Args:
        directory: Directory to search (defaults to the working directory).

    Returns:
        Path of the first existing candidate.

    Raises:
        ConfigFileNotFoundError: If none of the candidates exist.
    """
    base = Path(directory) if directory is not None else Path.cwd()
    for name in DEFAULT_CONFIG_FILES:
        candidate = base / name
        if candidate.is_file():
            return candidate
    raise ConfigFileNotFoundError(", ".join(str(base / name) for name in DEFAULT_CONFIG_FILES))


def load_raw(path: str | Path) -> Box:
    """Read a YAML file into a Box.

    Args:
        path: Configuration file path.

    Returns:
        Parsed configuration (empty Box for an empty file).

    Raises:
        ConfigFileNotFoundError: If the file does not exist.
        ConfigFormatError: If the YAML is malformed or not a mapping.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise ConfigFileNotFoundError(str(file_path))

    try:
        data = yaml.safe_load(file_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigFormatError(f"invalid YAML in {file_path}: {exc}") from exc

    if data is None:
        return Box()
    if not isinstance(data, Mapping):
        raise ConfigFormatError(f"{file_path} must contain a mapping, got {type(data).__name__}")
    return Box(data)


def load_config(path: str | Path | None = None) -> ProjectConfig:
    """Load and parse the project configuration.

    Args:
        path: Explicit file path. When omitted, :func:`find_config` is used.

    Returns:
        Typed project configuration.

    Examples:
        >>> config = load_config(".shipyard.yml")  # doctest: +SKIP
        >>> config.project_name  # doctest: +SKIP
        'demo'
    """
    file_path = Path(path) if path is not None else find_config()
    log.debug("Loading configuration from %s", file_path)
    return parse_project(load_raw(file_path))


def parse_project(data: Mapping[str, Any]) -> ProjectConfig:
    """Convert a raw mapping into a :class:`ProjectConfig`.

    Args:
        data: Raw configuration (dict or Box).

    Returns:
        Typed project configuration.

    Raises:
        ConfigFormatError: If a value has the wrong type.
    """
    return ProjectConfig(
        project_name=_as_str(data.get("project_name"), "project_name"),
        dist=_as_str(data.get("dist"), "dist") or "dist",
        env=[_as_str(item, "env") for item in _as_list(data.get("env"), "env")],
        parallelism=_as_int(data.get("parallelism"), "parallelism"),
        source=_parse_source(_as_mapping(data.get("source"), "source")),
        uploads=[
            _parse_upload(_as_mapping(item, f"uploads[{i}]"), f"uploads[{i}]")
            for i, item in enumerate(_as_list(data.get("uploads"), "uploads"))
        ],
        artifactories=[
            _parse_upload(_as_mapping(item, f"artifactories[{i}]"), f"artifactories[{i}]")
            for i, item in enumerate(_as_list(data.get("artifactories"), "artifactories"))
        ],
    )


def _parse_source(data: Mapping[str, Any]) -> SourceConfig:
    files = []
    for i, item in enumerate(_as_list(data.get("files"), "source.files")):
        key = f"source.files[{i}]"
        if isinstance(item, str):
            files.append(ArchiveFile(src=item))
            continue
        entry = _as_mapping(item, key)
        info = _as_mapping(entry.get("info"), f"{key}.info")
        files.append(
            ArchiveFile(
                src=_as_str(entry.get("src"), f"{key}.src"),
                dst=_as_str(entry.get("dst"), f"{key}.dst"),
                strip_parent=_as_bool(entry.get("strip_parent"), f"{key}.strip_parent"),
                info=ArchiveFileInfo(
                    mode=_as_mode(info.get("mode"), f"{key}.info.mode"),
                    mtime=_as_str(info.get("mtime"), f"{key}.info.mtime") or None,
                ),
            )
        )
    return SourceConfig(
        enabled=_as_bool(data.get("enabled"), "source.enabled"),
        format=_as_str(data.get("format"), "source.format"),
        name_template=_as_str(data.get("name_template"), "source.name_template"),
        prefix_template=_as_str(data.get("prefix_template"), "source.prefix_template"),
        files=files,
    )


def _parse_upload(data: Mapping[str, Any], key: str) -> UploadConfig:
    extra_files = []
    for i, item in enumerate(_as_list(data.get("extra_files"), f"{key}.extra_files")):
        entry_key = f"{key}.extra_files[{i}]"
        if isinstance(item, str):
            extra_files.append(ExtraFile(glob=item))
            continue
        entry = _as_mapping(item, entry_key)
        extra_files.append(
            ExtraFile(
                glob=_as_str(entry.get("glob"), f"{entry_key}.glob"),
                name_template=_as_str(entry.get("name_template"), f"{entry_key}.name_template"),
            )
        )

    raw_skip = data.get("skip", False)
    if not isinstance(raw_skip, (bool, str)):
        raise ConfigFormatError(f"must be a bool or a template string, got {type(raw_skip).__name__}", key=f"{key}.skip")

    timeout = data.get("timeout")
    if timeout is not None:
        try:
            timeout = float(timeout)
        except (TypeError, ValueError):
            raise ConfigFormatError(f"invalid timeout {timeout!r}", key=f"{key}.timeout") from None

    headers = _as_mapping(data.get("custom_headers"), f"{key}.custom_headers")
    return UploadConfig(
        name=_as_str(data.get("name"), f"{key}.name"),
        target=_as_str(data.get("target"), f"{key}.target"),
        method=_as_str(data.get("method"), f"{key}.method"),
        username=_as_str(data.get("username"), f"{key}.username"),
        mode=_as_str(data.get("mode"), f"{key}.mode"),
        checksum=_as_bool(data.get("checksum"), f"{key}.checksum"),
        signature=_as_bool(data.get("signature"), f"{key}.signature"),
        meta=_as_bool(data.get("meta"), f"{key}.meta"),
        exts=[_as_str(v, f"{key}.exts") for v in _as_list(data.get("exts"), f"{key}.exts")],
        ids=[_as_str(v, f"{key}.ids") for v in _as_list(data.get("ids"), f"{key}.ids")],
        custom_headers={str(k): _as_str(v, f"{key}.custom_headers.{k}") for k, v in headers.items()},
        trusted_certificates=_as_str(data.get("trusted_certificates"), f"{key}.trusted_certificates"),
        client_x509_cert=_as_str(data.get("client_x509_cert"), f"{key}.client_x509_cert"),
        client_x509_key=_as_str(data.get("client_x509_key"), f"{key}.client_x509_key"),
        checksum_header=_as_str(data.get("checksum_header"), f"{key}.checksum_header"),
        extra_files_only=_as_bool(data.get("extra_files_only"), f"{key}.extra_files_only"),
        extra_files=extra_files,
        skip=raw_skip,
        timeout=timeout,
    )


# ============================================================================
# Type coercion helpers
# ============================================================================


def _as_mapping(value: Any, key: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigFormatError(f"must be a mapping, got {type(value).__name__}", key=key)
    return value


def _as_list(value: Any, key: str) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ConfigFormatError(f"must be a list, got {type(value).__name__}", key=key)
    return list(value)


def _as_str(value: Any, key: str) -> str:
    if value is None:
        return ""
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise ConfigFormatError(f"must be a string, got {type(value).__name__}", key=key)
    return str(value)


def _as_bool(value: Any, key: str) -> bool:
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ConfigFormatError(f"must be a bool, got {type(value).__name__}", key=key)
    return value


def _as_int(value: Any, key: str) -> int:
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigFormatError(f"must be an integer, got {type(value).__name__}", key=key)
    return value


def _as_mode(value: Any, key: str) -> int | None:
    """Accept ``0o644`` ints as well as ``"0644"`` strings."""
    if value is None:
        return None
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        try:
            return int(value, 8)
        except ValueError:
            pass
    raise ConfigFormatError(f"invalid file mode {value!r}", key=key)


__all__ = [
    "DEFAULT_CONFIG_FILES",
    "find_config",
    "load_config",
    "load_raw",
    "parse_project",
]
