"""Infrastructure helpers."""

from .settings import AppSettings, ConfigError, get_settings, load_scan_config, load_settings
from .constants import *  # noqa: F401,F403

__all__ = ["AppSettings", "ConfigError", "get_settings", "load_scan_config", "load_settings"]
