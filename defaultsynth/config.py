"""Configuration loading for defaultsynth (.defaultsynth.yml)."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

CONFIG_FILENAME = ".defaultsynth.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class SynthConfig:
    """Settings that shape discovery and the emitted units."""

    root: Path
    marker: str = "UseDefaultFrom"
    implicit_default: str = "default"
    field_prefix: str = "__"
    hint_suffix: str = "Defaults.g.cs"
    nullable: bool = True
    auto_generated_header: bool = True
    global_qualifier: bool = False
    incremental: bool = False
    cache_path: Optional[Path] = None
    max_workers: int = 1
    output_dir: Optional[Path] = None

    def render_signature(self) -> str:
        """Return a stable string of every setting that changes emitted text."""
        return "|".join(
            (
                self.marker,
                self.implicit_default,
                self.field_prefix,
                self.hint_suffix,
                str(self.nullable),
                str(self.auto_generated_header),
                str(self.global_qualifier),
            )
        )


def load_config(config_path: Path) -> SynthConfig:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return SynthConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    config = SynthConfig(root=root)
    marker = _as_str(data.get("marker"))
    if marker:
        config.marker = marker.strip()
    implicit_default = _as_str(data.get("implicit_default"))
    if implicit_default:
        config.implicit_default = implicit_default
    field_prefix = _as_str(data.get("field_prefix"))
    if field_prefix:
        config.field_prefix = field_prefix
    hint_suffix = _as_str(data.get("hint_suffix"))
    if hint_suffix:
        config.hint_suffix = hint_suffix

    for key in ("nullable", "auto_generated_header", "global_qualifier", "incremental"):
        value = _as_bool(data.get(key))
        if value is not None:
            setattr(config, key, value)

    max_workers = _as_int(data.get("max_workers"))
    if max_workers is not None:
        if max_workers < 1:
            raise ConfigError("max_workers must be at least 1")
        config.max_workers = max_workers

    cache_path = _as_str(data.get("cache_path"))
    if cache_path:
        config.cache_path = root / cache_path
    output_dir = _as_str(data.get("output_dir"))
    if output_dir:
        config.output_dir = root / output_dir

    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
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


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


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


__all__ = ["CONFIG_FILENAME", "ConfigError", "SynthConfig", "load_config"]
