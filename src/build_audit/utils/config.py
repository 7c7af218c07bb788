"""Settings file support for build-audit."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from build_audit.models.results import Inspection, Severity
from build_audit.utils.errors import ConfigurationError
from build_audit.utils.logging import get_logger
from build_audit.utils.text import split_words

logger = get_logger("config")

DEFAULT_VENDOR_DATA_DIR = "/usr/share/build-audit"
DEFAULT_PROFILE_DIR = "/usr/share/build-audit/profiles"
DEFAULT_LICENSEDB = "generic.json"

LICENSES_DIR = "licenses"
STAT_WHITELIST_DIR = "stat-whitelist"
CAPABILITIES_DIR = "capabilities"

# Keys only honored in the main settings file, never in a profile overlay
MAIN_ONLY_KEYS = ("profile_dir",)


class KernelSettings(BaseModel):
    """Where kernel modules live inside packages."""

    modules_dir: str = Field(default="/lib/modules/", description="Kernel module directory")
    module_extension: str = Field(default=".ko", description="Kernel module filename extension")
    debug_path: str = Field(default="/usr/src/debug/", description="Debug source path prefix")


class Settings(BaseModel):
    """Resolved configuration consumed read-only by the inspections."""

    vendor_data_dir: str = Field(
        default=DEFAULT_VENDOR_DATA_DIR,
        description="Directory holding licenses/, stat-whitelist/ and capabilities/",
    )
    licensedb: str = Field(
        default=DEFAULT_LICENSEDB,
        description="License database file name (under <vendor_data_dir>/licenses) or absolute path",
    )
    vendor: str | None = Field(default=None, description="Expected package Vendor")
    buildhost_subdomain: list[str] = Field(
        default_factory=list,
        description="Allowed build host suffixes",
    )
    badwords: list[str] = Field(default_factory=list, description="Forbidden words")
    product_release: str | None = Field(
        default=None,
        description="Product release key used to pick whitelists",
    )
    threshold: Severity = Field(
        default=Severity.VERIFY,
        description="Findings at or above this severity fail an inspection",
    )
    inspections: dict[str, bool] = Field(
        default_factory=dict,
        description="Inspection name to enabled flag; unlisted inspections run",
    )
    profile_dir: str = Field(default=DEFAULT_PROFILE_DIR, description="Profile overlay directory")
    kernel: KernelSettings = Field(default_factory=KernelSettings)

    @field_validator("buildhost_subdomain", "badwords", mode="before")
    @classmethod
    def _split_lists(cls, value: Any) -> list[str]:
        return split_words(value)

    @field_validator("threshold", mode="before")
    @classmethod
    def _parse_threshold(cls, value: Any) -> Severity:
        return Severity.parse(value if isinstance(value, Severity) else str(value))

    @field_validator("inspections", mode="before")
    @classmethod
    def _parse_inspections(cls, value: Any) -> dict[str, bool]:
        if value is None:
            return {}
        if not isinstance(value, dict):
            raise ValueError("inspections must be a mapping of name to on/off")

        known = {i.value for i in Inspection}
        flags: dict[str, bool] = {}
        for name, flag in value.items():
            name = str(name).lower()
            if name not in known:
                raise ValueError(f"Unknown inspection: '{name}'")

            if isinstance(flag, bool):
                flags[name] = flag
            elif str(flag).lower() in ("on", "off"):
                flags[name] = str(flag).lower() == "on"
            else:
                logger.warning(f"Invalid [inspections] line: {name} = {flag} (ignoring)")
        return flags

    @property
    def licensedb_path(self) -> Path:
        """Full path of the license database."""
        path = Path(self.licensedb)
        if path.is_absolute():
            return path
        return Path(self.vendor_data_dir) / LICENSES_DIR / self.licensedb

    @property
    def stat_whitelist_path(self) -> Path | None:
        """Stat whitelist for the product release, if one is set."""
        if self.product_release is None:
            return None
        return Path(self.vendor_data_dir) / STAT_WHITELIST_DIR / self.product_release

    @property
    def caps_whitelist_path(self) -> Path | None:
        """Capabilities whitelist for the product release, if one is set."""
        if self.product_release is None:
            return None
        return Path(self.vendor_data_dir) / CAPABILITIES_DIR / self.product_release

    def enabled_inspections(self) -> list[Inspection]:
        """Inspections that are switched on, in registry order."""
        return [i for i in Inspection if self.inspections.get(i.value, True)]


def get_config_paths() -> list[Path]:
    """Get possible settings file paths, most specific first."""
    paths = [
        Path.cwd() / ".build-audit.yaml",
        Path.cwd() / ".build-audit.yml",
        Path.cwd() / "build-audit.yaml",
        Path.home() / ".build-audit.yaml",
        Path.home() / ".config" / "build-audit" / "config.yaml",
    ]

    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        paths.append(Path(xdg_config) / "build-audit" / "config.yaml")

    return paths


def load_settings(config_path: Path | str | None = None, profile: str | None = None) -> Settings:
    """Load settings, optionally overlaid with a named profile.

    Args:
        config_path: Explicit settings file. If None, searches default locations.
        profile: Profile name; ``<profile_dir>/<profile>.yaml`` is merged on top.

    Returns:
        Resolved settings

    Raises:
        ConfigurationError: If the file is missing, unparseable or invalid
    """
    data: dict[str, Any] = {}

    if config_path is not None:
        path = Path(config_path)
        if not path.exists():
            raise ConfigurationError(f"Config file not found: {config_path}")
        data = _read_yaml(path)
    else:
        for path in get_config_paths():
            if path.exists():
                logger.debug(f"Using settings from {path}")
                data = _read_yaml(path)
                break

    if profile:
        profile_dir = Path(data.get("profile_dir", DEFAULT_PROFILE_DIR))
        profile_path = profile_dir / f"{profile}.yaml"
        if profile_path.exists():
            overlay = _read_yaml(profile_path)
            for key in MAIN_ONLY_KEYS:
                overlay.pop(key, None)
            data = _merge(data, overlay)
        else:
            logger.warning(f"Unable to read profile '{profile}' from {profile_path}")

    try:
        return Settings.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid settings: {e}")


def _read_yaml(path: Path) -> dict[str, Any]:
    """Read one settings file into a dictionary."""
    try:
        data = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in config file {path}: {e}")
    except OSError as e:
        raise ConfigurationError(f"Failed to read config file {path}: {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")
    return data


def _merge(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge overlay into a copy of base."""
    merged = dict(base)
    for key, value in overlay.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def save_settings(settings: Settings, config_path: Path | str | None = None) -> Path:
    """Save settings to a YAML file.

    Only values that differ from the defaults are written.

    Args:
        settings: Settings to save
        config_path: Path to save to. Defaults to ~/.config/build-audit/config.yaml

    Returns:
        Path where the settings were saved
    """
    if config_path is None:
        config_path = Path.home() / ".config" / "build-audit" / "config.yaml"
    else:
        config_path = Path(config_path)

    config_path.parent.mkdir(parents=True, exist_ok=True)

    data = settings.model_dump(mode="json", exclude_defaults=True)
    config_path.write_text(yaml.safe_dump(data, default_flow_style=False, sort_keys=False))

    return config_path


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance, loading from the default locations on first call."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def set_settings(settings: Settings | None) -> None:
    """Set (or with None, reset) the global settings instance."""
    global _settings
    _settings = settings
