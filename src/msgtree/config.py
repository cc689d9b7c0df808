"""
Configuration for msgtree.

Settings for the CLI and the default styler. Loaded from:
1. Defaults (this file)
2. Config file (~/.config/msgtree/config.toml) if exists
3. Environment variables (MSGTREE_*) override file
4. CLI flags override everything

The forest and renderer take no configuration of their own.
"""

from __future__ import annotations

import os
import tomllib  # stdlib in 3.11+
from dataclasses import dataclass, field
from pathlib import Path

from .forest import MsgTreeError
from .logging import get_logger
from .styles import COLOR_MODES

logger = get_logger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(MsgTreeError):
    """A config value is present but not usable."""


@dataclass
class OutputConfig:
    """How rendered trees are written."""
    color: str = "auto"  # auto | always | never
    indent: int = 2  # spaces per outline level when reading text input


@dataclass
class LoggingConfig:
    level: str = "WARNING"


@dataclass
class Config:
    """Root config with all settings."""
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def validate(self) -> Config:
        self.output.color = self.output.color.lower()
        if self.output.color not in COLOR_MODES:
            raise ConfigError(f"output.color must be one of {', '.join(COLOR_MODES)}, got {self.output.color!r}")
        if self.output.indent < 1:
            raise ConfigError(f"output.indent must be >= 1, got {self.output.indent}")
        if self.logging.level.upper() not in LOG_LEVELS:
            raise ConfigError(f"logging.level must be one of {', '.join(LOG_LEVELS)}, got {self.logging.level!r}")
        self.logging.level = self.logging.level.upper()
        return self


def get_config_path() -> Path:
    """Get config file path, respecting XDG."""
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "msgtree" / "config.toml"
    return Path.home() / ".config" / "msgtree" / "config.toml"


def load_config(path: Path | None = None) -> Config:
    """Load config from file if exists, apply env overrides, then validate."""
    config = Config()
    path = path or get_config_path()

    if path.exists():
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.warning("ignoring unreadable config %s: %s", path, e)
        else:
            config = _apply_toml(config, data)

    config = _apply_env(config)

    return config.validate()


def _apply_toml(config: Config, data: dict) -> Config:
    """Apply toml data to config."""
    if "output" in data:
        o = _table(data, "output")
        if "color" in o:
            config.output.color = str(o["color"])
        if "indent" in o:
            config.output.indent = _to_int("output.indent", o["indent"])

    if "logging" in data:
        lg = _table(data, "logging")
        if "level" in lg:
            config.logging.level = str(lg["level"])

    return config


def _table(data: dict, name: str) -> dict:
    section = data[name]
    if not isinstance(section, dict):
        raise ConfigError(f"[{name}] must be a table, got {type(section).__name__}")
    return section


def _apply_env(config: Config) -> Config:
    """Apply environment variable overrides."""
    env_map: dict[str, tuple[str, str, type]] = {
        "MSGTREE_COLOR": ("output", "color", str),
        "MSGTREE_INDENT": ("output", "indent", int),
        "MSGTREE_LOG_LEVEL": ("logging", "level", str),
    }

    for env_key, (section, attr, conv) in env_map.items():
        val = os.environ.get(env_key)
        if val is not None:
            converted = _to_int(env_key, val) if conv is int else val.strip()
            setattr(getattr(config, section), attr, converted)

    return config


def _to_int(name: str, value: object) -> int:
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{name} must be an integer, got {value!r}") from e


# Module-level config instance, loaded on first use
_config: Config | None = None


def get_config() -> Config:
    """Get the global config instance."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    """Forget the cached config so the next get_config() reloads it."""
    global _config
    _config = None
