"""Configuration management for keycast."""

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from . import log

logger = log.get_logger()

CONFIG_DIR = Path.home() / ".keycast"
CONFIG_PATH = CONFIG_DIR / "config.yml"

DEFAULT_CONFIG_TEXT = """# Overlay size in character cells
width: 40
height: 3

# Collapse a key repeated this many times or more into "key..xN"
compress_after: 3

# Extra or replacement glyphs, keyed by key name (case-insensitive)
# symbols:
#   tab: "TAB"
#   esc: "⎋"
symbols: {}

# Show a trailing "<..." that never got its closing ">" instead of dropping it
keep_partial_keys: false

# Hide keys whose name mentions Left/Right/Middle/Scroll (mouse events).
# This also hides the Left/Right arrow keys.
legacy_mouse_filter: true

# Global hotkey that shows/hides the overlay
toggle_key: "<C-S-K>"
start_active: true

# Appearance
font_family: "Monospace"
font_size: 16
font_color: "#FFFFFF"
background_color: "#202020"
"""


class ConfigError(ValueError):
    """Raised for configuration values keycast cannot work with."""


class Config:
    """Application configuration."""

    FIELDS = (
        "width",
        "height",
        "compress_after",
        "symbols",
        "keep_partial_keys",
        "legacy_mouse_filter",
        "toggle_key",
        "start_active",
        "font_family",
        "font_size",
        "font_color",
        "background_color",
    )

    def __init__(
        self,
        width: int = 40,
        height: int = 3,
        compress_after: int = 3,
        symbols: Mapping[str, str] | None = None,
        keep_partial_keys: bool = False,
        legacy_mouse_filter: bool = True,
        toggle_key: str = "<C-S-K>",
        start_active: bool = True,
        font_family: str = "Monospace",
        font_size: int = 16,
        font_color: str = "#FFFFFF",
        background_color: str = "#202020",
    ):
        self.width = width
        self.height = height
        self.compress_after = compress_after
        if symbols is not None and not isinstance(symbols, Mapping):
            raise ConfigError(f"symbols must be a mapping, got {type(symbols).__name__}")
        self.symbols = dict(symbols or {})
        self.keep_partial_keys = keep_partial_keys
        self.legacy_mouse_filter = legacy_mouse_filter
        self.toggle_key = toggle_key
        self.start_active = start_active
        self.font_family = font_family
        self.font_size = font_size
        self.font_color = font_color
        self.background_color = background_color
        self.validate()

    def validate(self) -> None:
        """Raise ConfigError unless every value is usable."""
        for name in ("width", "height", "compress_after", "font_size"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ConfigError(f"{name} must be an integer >= 1, got {value!r}")
        for name in ("keep_partial_keys", "legacy_mouse_filter", "start_active"):
            if not isinstance(getattr(self, name), bool):
                raise ConfigError(f"{name} must be true or false, got {getattr(self, name)!r}")
        for name in ("toggle_key", "font_family", "font_color", "background_color"):
            if not isinstance(getattr(self, name), str) or not getattr(self, name):
                raise ConfigError(f"{name} must be a non-empty string, got {getattr(self, name)!r}")
        for key, glyph in self.symbols.items():
            if not isinstance(key, str) or not isinstance(glyph, str):
                raise ConfigError(f"symbols must map key names to strings, got {key!r}: {glyph!r}")

    def to_dict(self) -> dict[str, Any]:
        data = {name: getattr(self, name) for name in self.FIELDS}
        data["symbols"] = dict(self.symbols)
        return data

    def override(self, overrides: Mapping[str, Any] | None) -> "Config":
        """Return a new Config with explicit values replacing the current ones.

        The symbol overrides are merged entry by entry; every other field is
        replaced as a whole. Unknown keys are logged and ignored.
        """
        data = self.to_dict()
        for key, value in (overrides or {}).items():
            if key not in self.FIELDS:
                logger.warning("unknown config key ignored", key=key)
                continue
            if key == "symbols":
                if value is None:
                    continue
                if not isinstance(value, Mapping):
                    raise ConfigError(f"symbols must be a mapping, got {type(value).__name__}")
                data["symbols"].update(value)
            else:
                data[key] = value
        return Config(**data)

    @classmethod
    def load(cls, config_path: str | None = None) -> "Config":
        """Load configuration from a YAML file.

        Args:
            config_path: Path to config file. If None, looks for keycast.yml in
                the working directory, then ~/.keycast/config.yml.

        Returns:
            Config with the file's values merged over the defaults.
        """
        if config_path is None:
            for path in (Path("keycast.yml"), CONFIG_PATH):
                if path.exists():
                    config_path = str(path)
                    break

        if config_path and os.path.exists(config_path):
            with open(config_path, "r", encoding="utf-8") as f:
                try:
                    data = yaml.safe_load(f) or {}
                except yaml.YAMLError as e:
                    raise ConfigError(f"invalid YAML in {config_path}: {e}") from e
            if not isinstance(data, Mapping):
                raise ConfigError(f"{config_path} must contain a mapping")
            logger.debug("config loaded", path=config_path)
            return cls().override(data)

        if config_path:
            raise ConfigError(f"config file not found: {config_path}")

        config = cls()
        config._create_default_config()
        return config

    def _create_default_config(self) -> None:
        """Write a commented default config to ~/.keycast/config.yml."""
        if CONFIG_PATH.exists():
            return
        try:
            CONFIG_DIR.mkdir(parents=True, exist_ok=True)
            with open(CONFIG_PATH, "w", encoding="utf-8") as f:
                f.write(DEFAULT_CONFIG_TEXT)
        except OSError as e:
            logger.warning("could not write default config", path=str(CONFIG_PATH), err=str(e))
            return
        logger.info("created default config", path=str(CONFIG_PATH))
