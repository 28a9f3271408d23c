"""
settings.py

Persistent settings management for FlowFocus.

Handles cross-platform settings storage using TOML format with platformdirs
for proper user config directory detection.

Settings file location:
    - Windows: %APPDATA%/flowfocus/settings.toml
    - macOS: ~/Library/Application Support/flowfocus/settings.toml
    - Linux: ~/.config/flowfocus/settings.toml

Default values are documented in comments throughout this file.
If settings.toml is corrupted, these defaults will be used.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional

import platformdirs

# TOML reading - use tomllib for Python 3.11+, tomli for earlier versions
if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

import tomli_w

APP_NAME = "flowfocus"

# Global settings manager instance (singleton)
_settings_manager: Optional["SettingsManager"] = None


def get_settings() -> "SettingsManager":
    """Get the global settings manager instance.

    Returns:
        The singleton SettingsManager instance.
    """
    global _settings_manager
    if _settings_manager is None:
        _settings_manager = SettingsManager()
    return _settings_manager


# =============================================================================
# Edge Settings
# =============================================================================

@dataclass
class EdgeSettings:
    """Arrow geometry and color.

    Defaults:
        line_width: 2.0
        arrow_head_length: 15.0
        arrow_head_width: 12.0
        default_tangent_distance: 50.0
        stroke_samples: 32
        color: "#000000"
    """
    line_width: float = 2.0                 # Default: 2.0 pixels
    arrow_head_length: float = 15.0         # Default: 15.0 pixels
    arrow_head_width: float = 12.0          # Default: 12.0 pixels
    default_tangent_distance: float = 50.0  # Default: 50.0 pixels
    stroke_samples: int = 32                # Default: 32 segments per boundary
    color: str = "#000000"                  # Default: black


# =============================================================================
# Node Settings
# =============================================================================

@dataclass
class NodeSettings:
    """Node text and shape settings.

    Defaults:
        font_size: 16
        line_wrap: 100.0
        padding: 20.0
        corner_radius: 10.0
        diamond_half_width: 80.0
        diamond_half_height: 50.0
        fill_color: "#CCCCCC"
    """
    font_size: int = 16                 # Default: 16 pixels
    line_wrap: float = 100.0            # Default: 100.0 pixels
    padding: float = 20.0               # Default: 20.0 pixels around the text
    corner_radius: float = 10.0         # Default: 10.0 pixels
    diamond_half_width: float = 80.0    # Default: 80.0 pixels
    diamond_half_height: float = 50.0   # Default: 50.0 pixels
    fill_color: str = "#CCCCCC"         # Default: light gray


@dataclass
class LabelSettings:
    """Edge label panel settings.

    Defaults:
        font_size: 16
        line_wrap: 100.0
        margin: 5.0
        fill_color: "#FFFFFFE6"
    """
    font_size: int = 16                 # Default: 16 pixels
    line_wrap: float = 100.0            # Default: 100.0 pixels
    margin: float = 5.0                 # Default: 5.0 pixels around the text
    fill_color: str = "#FFFFFFE6"       # Default: white at 90% opacity


@dataclass
class HighlightSettings:
    """Focus highlight appearance.

    Defaults:
        color: "#4A90E2"
        width: 3.0
    """
    color: str = "#4A90E2"  # Default: blue
    width: float = 3.0      # Default: 3.0 pixels


@dataclass
class LayoutSettings:
    """Grid placement and layout pass settings.

    Defaults:
        column_spacing: 200.0
        row_spacing: 120.0
        top: 100.0
        cache_geometry: True
    """
    column_spacing: float = 200.0   # Default: 200.0 pixels between grid columns
    row_spacing: float = 120.0      # Default: 120.0 pixels between grid rows
    top: float = 100.0              # Default: 100.0 pixels, center of row 0
    cache_geometry: bool = True     # Default: True


# =============================================================================
# Main App Settings
# =============================================================================

@dataclass
class AppSettings:
    """Application settings with default values.

    Attributes:
        background_color: Scene background color.
        default_sample: Bundled graph shown when no --graph is given.
        edges: Arrow settings.
        nodes: Node settings.
        labels: Edge label settings.
        highlight: Focus highlight settings.
        layout: Layout settings.
    """
    background_color: str = "#444444"     # Default: dark gray
    default_sample: str = "does_it_work"  # Default: "does_it_work"

    edges: EdgeSettings = field(default_factory=EdgeSettings)
    nodes: NodeSettings = field(default_factory=NodeSettings)
    labels: LabelSettings = field(default_factory=LabelSettings)
    highlight: HighlightSettings = field(default_factory=HighlightSettings)
    layout: LayoutSettings = field(default_factory=LayoutSettings)


# TOML section name -> AppSettings attribute
_SECTIONS = ("edges", "nodes", "labels", "highlight", "layout")


# =============================================================================
# Settings Manager
# =============================================================================

class SettingsManager:
    """Manages loading, saving, and accessing application settings.

    Settings are stored in a TOML file at the platform-appropriate location.
    If the settings file doesn't exist, defaults are used and the file is
    created on first save.

    Args:
        app_name: Application name used for the config directory.
        settings_dir: Override for the config directory.
    """

    def __init__(self, app_name: str = APP_NAME, settings_dir: Optional[Path] = None):
        self.settings_dir = Path(settings_dir) if settings_dir else Path(platformdirs.user_config_dir(app_name))
        self.settings_file = self.settings_dir / "settings.toml"
        self.settings = self.load()
        self._needs_save = not self.settings_file.exists()  # Save if file didn't exist

    def ensure_file_complete(self) -> None:
        """Ensure settings file exists with all sections. Call once at startup."""
        if self._needs_save or not self.settings_file.exists():
            self.save()
            self._needs_save = False

    def load(self) -> AppSettings:
        """Load settings from the TOML file.

        Returns:
            AppSettings instance with values from file or defaults if file
            doesn't exist or is invalid.
        """
        if not self.settings_file.exists():
            return AppSettings()

        try:
            with open(self.settings_file, "rb") as f:
                data = tomllib.load(f)

            return self._parse_toml(data)
        except Exception:
            # If file is corrupted or invalid, return defaults
            return AppSettings()

    def _parse_toml(self, data: Dict[str, Any]) -> AppSettings:
        """Parse TOML data into AppSettings.

        Unknown keys are ignored; values of the wrong type keep the default.

        Args:
            data: Parsed TOML dictionary.

        Returns:
            AppSettings instance populated from TOML data.
        """
        settings = AppSettings()

        general = data.get("general", {})
        settings.background_color = general.get("background_color", settings.background_color)
        settings.default_sample = general.get("default_sample", settings.default_sample)

        for name in _SECTIONS:
            section = data.get(name, {})
            if not isinstance(section, dict):
                continue
            target = getattr(settings, name)
            for f in fields(target):
                if f.name not in section:
                    continue
                current = getattr(target, f.name)
                value = section[f.name]
                if isinstance(current, bool):
                    if isinstance(value, bool):
                        setattr(target, f.name, value)
                elif isinstance(current, (int, float)):
                    if isinstance(value, (int, float)) and not isinstance(value, bool):
                        setattr(target, f.name, type(current)(value))
                elif isinstance(value, type(current)):
                    setattr(target, f.name, value)

        return settings

    def save(self) -> None:
        """Save current settings to the TOML file.

        Creates the settings directory if it doesn't exist.
        """
        self.settings_dir.mkdir(parents=True, exist_ok=True)

        data = self._to_toml_dict()

        with open(self.settings_file, "wb") as f:
            tomli_w.dump(data, f)

    def _to_toml_dict(self) -> Dict[str, Any]:
        """Convert settings to a TOML-compatible dictionary structure.

        Returns:
            Dictionary organized by TOML sections.
        """
        s = self.settings
        data: Dict[str, Any] = {
            "general": {
                "background_color": s.background_color,
                "default_sample": s.default_sample,
            },
        }
        for name in _SECTIONS:
            section = getattr(s, name)
            data[name] = {f.name: getattr(section, f.name) for f in fields(section)}
        return data

    def to_toml(self) -> str:
        """Convert current settings to a TOML-formatted string.

        Returns:
            TOML representation of the current settings.
        """
        data = self._to_toml_dict()
        return tomli_w.dumps(data)

    def get_settings_path(self) -> Path:
        """Get the path to the settings file.

        Returns:
            Path object pointing to the settings file location.
        """
        return self.settings_file
