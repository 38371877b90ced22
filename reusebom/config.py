"""Configuration loading for reusebom (.reusebom.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from . import __version__
from .comments import DEFAULT_MAX_LINES
from .dep5 import DEFAULT_PACKAGE_CONFIG_PATH

CONFIG_FILENAME = ".reusebom.yml"

DEFAULT_TOOL = f"reusebom-{__version__}"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class BomConfig:
    """Settings read from .reusebom.yml, with defaults for anything omitted."""

    root: Path
    name: str
    tool: str = DEFAULT_TOOL
    package_config: Optional[Path] = None
    max_lines: int = DEFAULT_MAX_LINES
    exclude_paths: List[str] = field(default_factory=list)


def load_config(config_path: Path) -> BomConfig:
    """Load configuration from disk."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()
    defaults = BomConfig(
        root=root,
        name=root.name,
        package_config=root / DEFAULT_PACKAGE_CONFIG_PATH,
    )

    if not config_file.exists():
        return defaults

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    document = _as_dict(data.get("document"))
    package_config = _as_str(data.get("package_config"))
    max_lines = _as_int(data.get("max_lines"))
    if max_lines is not None and max_lines <= 0:
        raise ConfigError("max_lines must be a positive integer")

    return BomConfig(
        root=root,
        name=_as_str(document.get("name")) or defaults.name,
        tool=_as_str(document.get("tool")) or defaults.tool,
        package_config=root / package_config if package_config else defaults.package_config,
        max_lines=max_lines if max_lines is not None else defaults.max_lines,
        exclude_paths=_as_str_list(data.get("exclude_paths")),
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
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


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []
