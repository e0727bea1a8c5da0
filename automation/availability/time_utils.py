"""Time parsing helpers for slot detection and result dating."""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Iterable, Optional, Set

import pytz

# One ordered alternation: "9:00 am" must not also count as a bare "9:00".
SLOT_TIME_PATTERN = re.compile(
    r"\b(?:"
    r"(?:[1-9]|1[0-2]):[0-5]\d\s?(?:am|pm)"  # 9:00 AM
    r"|(?:[1-9]|1[0-2])\s?(?:am|pm)"  # 2 PM
    r"|(?:[01]?\d|2[0-3]):[0-5]\d"  # 14:30
    r")\b",
    re.IGNORECASE,
)

_MERIDIEM_SUFFIX = re.compile(r"\s*(am|pm)$")


def normalize_slot_time(raw: str) -> str:
    """Lowercase and put exactly one space before am/pm ("9:00AM" -> "9:00 am")."""

    lowered = " ".join(raw.split()).lower()
    return _MERIDIEM_SUFFIX.sub(r" \1", lowered)


def is_slot_text(text: Optional[str]) -> bool:
    """Return True when the trimmed text is a single time-slot label."""

    cleaned = (text or "").strip()
    if not cleaned:
        return False
    return SLOT_TIME_PATTERN.fullmatch(cleaned) is not None


def extract_slot_times(text: Optional[str]) -> Set[str]:
    """Return every normalised slot time embedded in ``text``."""

    if not text:
        return set()
    return {normalize_slot_time(match.group(0)) for match in SLOT_TIME_PATTERN.finditer(text)}


def collect_slot_times(texts: Iterable[Optional[str]]) -> Set[str]:
    """Normalised times from element texts that are nothing but a time label."""

    found: Set[str] = set()
    for text in texts:
        if is_slot_text(text):
            found.add(normalize_slot_time(text.strip()))
    return found


def today_in_timezone(timezone_str: str, now: Optional[datetime] = None) -> date:
    """Return the current calendar date in ``timezone_str``."""

    tz = pytz.timezone(timezone_str)
    if now is None:
        return datetime.now(tz).date()
    if now.tzinfo is None:
        now = pytz.utc.localize(now)
    return now.astimezone(tz).date()


def days_from_today(
    iso_date: str,
    timezone_str: str,
    now: Optional[datetime] = None,
) -> int:
    """Whole days between today (midnight in ``timezone_str``) and ``iso_date``."""

    target = date.fromisoformat(iso_date)
    return (target - today_in_timezone(timezone_str, now)).days


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a ``Z`` suffix."""

    moment = now or datetime.now(pytz.utc)
    if moment.tzinfo is None:
        moment = pytz.utc.localize(moment)
    moment = moment.astimezone(pytz.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")
