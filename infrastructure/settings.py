"""Centralized application settings.

Two layers are loaded once at start-up: environment-level settings
(:class:`AppSettings`, read from ``os.environ`` and an optional ``.env``) and the
scan configuration file (:class:`~automation.shared.scan_contracts.ScanConfig`)
that lists the booking links to probe.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, List, Mapping, Optional, Union

import pytz
from dotenv import load_dotenv

from automation.shared.scan_contracts import LinkTarget, ScanConfig
from . import constants as scan_constants


class ConfigError(ValueError):
    """Raised when the scan configuration is missing or invalid."""


def _to_bool(value: Optional[str], default: bool = False) -> bool:
    """Normalize environment strings such as "true"/"1" into booleans."""

    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _to_int(value: Optional[str], default: int) -> int:
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ConfigError(f"Expected an integer, got {value!r}") from exc


@dataclass(frozen=True)
class AppSettings:
    """Immutable snapshot of environment-level configuration values."""

    config_file: str
    output_file: str
    timezone_override: Optional[str]
    headless: bool
    navigation_timeout_ms: int
    post_load_delay_ms: int
    save_debug_artifacts: bool
    data_directory: str
    production_mode: bool


def load_settings(env: Optional[Mapping[str, str]] = None) -> AppSettings:
    """Load configuration from the environment and fall back to defaults."""

    if env is None:
        load_dotenv(override=False)
        env = os.environ

    timezone_override = (env.get("TZ") or "").strip() or None

    return AppSettings(
        config_file=env.get("SCAN_CONFIG_FILE", scan_constants.DEFAULT_CONFIG_FILE),
        output_file=env.get("OUTPUT_FILE", scan_constants.DEFAULT_OUTPUT_FILE),
        timezone_override=timezone_override,
        headless=_to_bool(env.get("HEADLESS"), default=True),
        navigation_timeout_ms=_to_int(
            env.get("NAVIGATION_TIMEOUT_MS"), scan_constants.NAVIGATION_TIMEOUT_MS
        ),
        post_load_delay_ms=_to_int(
            env.get("POST_LOAD_DELAY_MS"), scan_constants.POST_LOAD_DELAY_MS
        ),
        save_debug_artifacts=_to_bool(env.get("SAVE_DEBUG_ARTIFACTS"), default=False),
        data_directory=env.get("DATA_DIRECTORY", "data"),
        production_mode=_to_bool(env.get("PRODUCTION_MODE"), default=False),
    )


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Return a cached :class:`AppSettings` instance."""

    return load_settings()


def _positive_int(raw: Any, field_name: str, default: int) -> int:
    if raw is None:
        return default
    if isinstance(raw, bool):
        raise ConfigError(f"{field_name} must be an integer, got {raw!r}")
    try:
        value = int(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{field_name} must be an integer, got {raw!r}") from exc
    if value < 1:
        raise ConfigError(f"{field_name} must be at least 1, got {value}")
    return value


def _parse_links(raw_links: Any) -> List[LinkTarget]:
    if raw_links is None:
        return []
    if not isinstance(raw_links, list):
        raise ConfigError("links must be a list of {name, url} objects")

    links: List[LinkTarget] = []
    seen = set()
    for index, entry in enumerate(raw_links):
        if not isinstance(entry, dict):
            raise ConfigError(f"links[{index}] must be an object")
        name = str(entry.get("name") or "").strip()
        url = str(entry.get("url") or "").strip()
        if not name or not url:
            raise ConfigError(f"links[{index}] requires both 'name' and 'url'")
        if name in seen:
            raise ConfigError(f"Duplicate link name: {name!r}")
        seen.add(name)
        links.append(LinkTarget(name=name, url=url))
    return links


def parse_scan_config(
    data: Mapping[str, Any],
    timezone_override: Optional[str] = None,
) -> ScanConfig:
    """Validate a decoded configuration document and build a :class:`ScanConfig`."""

    if not isinstance(data, Mapping):
        raise ConfigError("Scan configuration must be a JSON object")

    timezone = timezone_override or data.get("timezone") or scan_constants.DEFAULT_TIMEZONE
    if timezone not in pytz.all_timezones_set:
        raise ConfigError(f"Unknown timezone: {timezone!r}")

    return ScanConfig(
        timezone=timezone,
        min_slots=_positive_int(data.get("minSlots"), "minSlots", scan_constants.DEFAULT_MIN_SLOTS),
        max_months_to_scan=_positive_int(
            data.get("maxMonthsToScan"),
            "maxMonthsToScan",
            scan_constants.DEFAULT_MAX_MONTHS_TO_SCAN,
        ),
        links=tuple(_parse_links(data.get("links"))),
    )


def load_scan_config(
    path: Union[str, Path],
    timezone_override: Optional[str] = None,
) -> ScanConfig:
    """Read the links file at ``path``.

    ``timezone_override`` (normally the ``TZ`` environment variable) wins over
    the file's own ``timezone`` value.
    """

    config_path = Path(path)
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ConfigError(f"Scan configuration not found: {config_path}") from exc
    except ValueError as exc:
        raise ConfigError(f"Scan configuration is not valid JSON: {exc}") from exc

    return parse_scan_config(data, timezone_override=timezone_override)
