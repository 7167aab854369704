"""
Application settings with YAML persistence.
"""

from __future__ import annotations
from dataclasses import dataclass, field, fields, asdict
from pathlib import Path
from typing import Optional
import logging

import yaml

from .dialog.controller import EMPTY_VALUE_MESSAGE
from .vault.backend import DEFAULT_DB_PATH
from .vault.generator import CharClass, DEFAULT_LENGTH, clamp_length
from .vault.store import STORAGE_KEY

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".passkeep" / "settings.yaml"


@dataclass
class AppSettings:
    """User-adjustable settings."""
    db_path: str = str(DEFAULT_DB_PATH)
    storage_key: str = STORAGE_KEY

    # Generator defaults
    default_length: int = DEFAULT_LENGTH
    default_classes: list[str] = field(default_factory=lambda: [c.value for c in CharClass])

    empty_value_message: str = EMPTY_VALUE_MESSAGE
    log_level: str = "WARNING"

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> AppSettings:
        """Build settings, ignoring unknown keys and fixing bad values."""
        known = {f.name for f in fields(cls)}
        settings = cls(**{k: v for k, v in (data or {}).items() if k in known})

        try:
            settings.default_length = clamp_length(int(settings.default_length))
        except (TypeError, ValueError):
            logger.warning(f"Invalid default_length {settings.default_length!r}, using {DEFAULT_LENGTH}")
            settings.default_length = DEFAULT_LENGTH

        names = settings.default_classes
        if isinstance(names, str):
            names = [names]
        elif not isinstance(names, (list, tuple)):
            logger.warning(f"Invalid default_classes {names!r}, using all classes")
            names = [c.value for c in CharClass]

        classes = []
        for name in names:
            try:
                classes.append(CharClass.parse(str(name)).value)
            except ValueError as e:
                logger.warning(f"Ignoring setting: {e}")
        settings.default_classes = classes

        settings.log_level = str(settings.log_level).upper()
        return settings

    @property
    def default_char_classes(self) -> frozenset:
        return frozenset(CharClass(name) for name in self.default_classes)


_settings: Optional[AppSettings] = None
_settings_path: Path = DEFAULT_CONFIG_PATH


def load_settings(path: Path = None) -> AppSettings:
    """
    Read settings from YAML.

    A missing or unreadable file yields defaults.
    """
    path = Path(path) if path else DEFAULT_CONFIG_PATH
    if not path.exists():
        logger.debug(f"No settings file at {path}, using defaults")
        return AppSettings()

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Failed to read settings from {path}: {e}")
        return AppSettings()

    if not isinstance(data, dict):
        logger.warning(f"Settings file {path} is not a mapping, using defaults")
        return AppSettings()

    return AppSettings.from_dict(data)


def get_settings(path: Path = None) -> AppSettings:
    """Get the shared settings, loading them on first use."""
    global _settings, _settings_path
    if _settings is None or (path is not None and Path(path) != _settings_path):
        _settings_path = Path(path) if path else DEFAULT_CONFIG_PATH
        _settings = load_settings(_settings_path)
    return _settings


def save_settings(settings: AppSettings = None, path: Path = None) -> None:
    """Write settings to YAML."""
    settings = settings or get_settings()
    path = Path(path) if path else _settings_path
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(settings.to_dict(), f, default_flow_style=False, sort_keys=False)
    logger.info(f"Settings saved to {path}")


def reset_settings() -> None:
    """Drop the cached settings so the next get_settings() reloads."""
    global _settings, _settings_path
    _settings = None
    _settings_path = DEFAULT_CONFIG_PATH
