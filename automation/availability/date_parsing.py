"""Date derivation helpers for calendar day cells and month captions."""

from __future__ import annotations

import calendar
import re
from typing import Optional

from automation.shared.scan_contracts import MonthHeader
from infrastructure.constants import MONTH_NAMES

_MONTH_ALTERNATION = "|".join(name.capitalize() for name in MONTH_NAMES)

ISO_DATE_IN_TEXT = re.compile(r"\b(20\d{2}-\d{2}-\d{2})\b")
NATURAL_DATE_IN_TEXT = re.compile(
    rf"({_MONTH_ALTERNATION})\s+(\d{{1,2}}),?\s+(20\d{{2}})",
    re.IGNORECASE,
)
MONTH_CAPTION = re.compile(rf"({_MONTH_ALTERNATION})[^\d]*(20\d{{2}})", re.IGNORECASE)
ISO_DATE_PREFIX = re.compile(r"^(\d{4})-(\d{2})-(\d{2})")
BARE_DAY_NUMBER = re.compile(r"^\d{1,2}$")


def month_index_from_name(name: Optional[str]) -> Optional[int]:
    """Return the 0-based month index for a month name, or ``None``.

    Matching is case-insensitive and prefix based, so "October" and "october 2025"
    both resolve to 9.
    """

    lowered = (name or "").strip().lower()
    if not lowered:
        return None
    for index, month_name in enumerate(MONTH_NAMES):
        if lowered.startswith(month_name):
            return index
    return None


def to_iso(year: int, month_index: int, day: int) -> str:
    """Build a zero-padded ``YYYY-MM-DD`` string from a 0-based month index."""

    return f"{year:04d}-{month_index + 1:02d}-{day:02d}"


def is_valid_day(year: int, month_index: int, day: int) -> bool:
    if not 0 <= month_index <= 11 or day < 1:
        return False
    return day <= calendar.monthrange(year, month_index + 1)[1]


def normalize_date_attribute(value: Optional[str]) -> Optional[str]:
    """Return the ISO date carried by a ``data-date`` value, if it has one.

    Values such as ``2025-10-17T00:00:00`` keep their date part.
    """

    match = ISO_DATE_PREFIX.match((value or "").strip())
    if not match:
        return None
    year, month, day = (int(part) for part in match.groups())
    if not is_valid_day(year, month - 1, day):
        return None
    return to_iso(year, month - 1, day)


def parse_iso_from_label(label: Optional[str]) -> Optional[str]:
    """Derive an ISO date from an accessible label.

    >>> parse_iso_from_label("Friday, October 17, 2025")
    '2025-10-17'
    """

    if not label:
        return None

    match = ISO_DATE_IN_TEXT.search(label)
    if match:
        return match.group(1)

    match = NATURAL_DATE_IN_TEXT.search(label)
    if match:
        month_index = month_index_from_name(match.group(1))
        year = int(match.group(3))
        day = int(match.group(2))
        if month_index is not None and is_valid_day(year, month_index, day):
            return to_iso(year, month_index, day)
    return None


def parse_month_header(text: Optional[str]) -> Optional[MonthHeader]:
    """Parse a caption such as "October 2025" into a :class:`MonthHeader`."""

    match = MONTH_CAPTION.search((text or "").strip())
    if not match:
        return None
    month_index = month_index_from_name(match.group(1))
    if month_index is None:
        return None
    return MonthHeader(month_index=month_index, year=int(match.group(2)))


def iso_from_header_and_day(header: MonthHeader, text: Optional[str]) -> Optional[str]:
    """Combine a month caption with a cell whose text is a bare day number."""

    cleaned = (text or "").strip()
    if not BARE_DAY_NUMBER.match(cleaned):
        return None
    day = int(cleaned)
    if not is_valid_day(header.year, header.month_index, day):
        return None
    return to_iso(header.year, header.month_index, day)
