"""Configuration loading for figconnect (.figconnect.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".figconnect.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class ConnectConfig:
    """Defaults for the ``connect`` command; CLI flags override these."""

    emit: Optional[str] = None
    recursive: Optional[bool] = None
    strict: Optional[bool] = None
    continue_on_error: Optional[bool] = None
    force: Optional[bool] = None
    base_import_path: Optional[str] = None


@dataclass
class DiscoveryConfig:
    """Component file discovery settings."""

    exclude_dirs: List[str] = field(default_factory=lambda: ["node_modules", "dist"])
    suffix: str = ".component.ts"


@dataclass
class AnalysisConfig:
    """Source analysis settings."""

    annotations: List[str] = field(default_factory=lambda: ["property"])
    platform_globals: List[str] = field(default_factory=list)


@dataclass
class FigConnectConfig:
    """Represents the settings defined in .figconnect.yml."""

    root: Path
    connect: ConnectConfig = field(default_factory=ConnectConfig)
    discovery: DiscoveryConfig = field(default_factory=DiscoveryConfig)
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    templates_dir: Optional[Path] = None


def load_config(config_path: Path) -> FigConnectConfig:
    """Load configuration from disk.

    ``config_path`` may point at the file itself or at a directory expected
    to contain ``.figconnect.yml``; a missing file yields defaults.
    """
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return FigConnectConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    connect_data = _as_dict(data.get("connect"))
    connect = ConnectConfig(
        emit=_as_emit(connect_data.get("emit")),
        recursive=_as_bool(connect_data.get("recursive")),
        strict=_as_bool(connect_data.get("strict")),
        continue_on_error=_as_bool(connect_data.get("continue_on_error")),
        force=_as_bool(connect_data.get("force")),
        base_import_path=_as_str(connect_data.get("base_import_path")),
    )

    discovery = DiscoveryConfig()
    discovery_data = _as_dict(data.get("discovery"))
    if "exclude_dirs" in discovery_data:
        discovery.exclude_dirs = _as_str_list(discovery_data.get("exclude_dirs"))
    suffix = _as_str(discovery_data.get("suffix"))
    if suffix:
        discovery.suffix = suffix

    analysis = AnalysisConfig()
    analysis_data = _as_dict(data.get("analysis"))
    annotations = _as_str_list(analysis_data.get("annotations"))
    if annotations:
        analysis.annotations = annotations
    analysis.platform_globals = _as_str_list(analysis_data.get("platform_globals"))

    templates_dir_str = _as_str(data.get("templates_dir"))
    templates_dir = root / templates_dir_str if templates_dir_str else None

    return FigConnectConfig(
        root=root,
        connect=connect,
        discovery=discovery,
        analysis=analysis,
        templates_dir=templates_dir,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.suffix not in {".yml", ".yaml"}:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


def _as_emit(value: Any) -> Optional[str]:
    # Accept both "webcomponent,react" and a YAML list.
    if isinstance(value, list):
        items = _as_str_list(value)
        return ",".join(items) if items else None
    return _as_str(value)


__all__ = [
    "AnalysisConfig",
    "CONFIG_FILENAME",
    "ConfigError",
    "ConnectConfig",
    "DiscoveryConfig",
    "FigConnectConfig",
    "load_config",
]
