"""Configuration package for runtime settings and startup validation."""

from .settings import AppSettings, SettingsLoadError, VersionSettings, config_load_settings, config_load_version

__all__ = ["AppSettings", "SettingsLoadError", "VersionSettings", "config_load_settings", "config_load_version"]
