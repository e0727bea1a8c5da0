"""Day detection helpers: map visible calendar cells to ISO dates.

Each strategy is an async callable ``(frame) -> list[CalendarDay]``. The chain
runs them in priority order and stops at the first one that yields anything,
so the most structurally reliable signal a widget exposes is always used.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, Iterable, List, Optional, Sequence, Tuple

from playwright.async_api import Frame

from automation.availability.date_parsing import (
    iso_from_header_and_day,
    normalize_date_attribute,
    parse_iso_from_label,
    parse_month_header,
)
from automation.shared.scan_contracts import CalendarDay, MonthHeader
from infrastructure.constants import (
    ARIA_LABEL_SELECTORS,
    BARE_DAY_SELECTORS,
    DATE_ATTRIBUTE,
    DATE_ATTRIBUTE_SELECTORS,
    MONTH_HEADER_SELECTORS,
)

logger = logging.getLogger(__name__)

DayStrategy = Callable[[Frame], Awaitable[List[CalendarDay]]]


async def _query_all(frame: Frame, selector: str) -> list:
    try:
        return await frame.query_selector_all(selector)
    except Exception as exc:
        logger.debug("Selector %s failed: %s", selector, exc)
        return []


async def days_from_date_attribute(frame: Frame) -> List[CalendarDay]:
    """Cells carrying an explicit ``data-date`` ISO value."""

    days: List[CalendarDay] = []
    for element in await _query_all(frame, DATE_ATTRIBUTE_SELECTORS):
        try:
            iso = normalize_date_attribute(await element.get_attribute(DATE_ATTRIBUTE))
        except Exception:
            continue
        if iso:
            days.append(CalendarDay(iso_date=iso, locator_ref=element))
    return days


async def days_from_aria_labels(frame: Frame) -> List[CalendarDay]:
    """Cells whose accessible label spells out the date."""

    days: List[CalendarDay] = []
    for element in await _query_all(frame, ARIA_LABEL_SELECTORS):
        try:
            iso = parse_iso_from_label(await element.get_attribute("aria-label"))
        except Exception:
            continue
        if iso:
            days.append(CalendarDay(iso_date=iso, locator_ref=element))
    return days


async def read_month_header(
    frame: Frame,
    selectors: Sequence[str] = MONTH_HEADER_SELECTORS,
) -> Optional[MonthHeader]:
    """Return the first caption that parses as "<Month> <year>"."""

    for selector in selectors:
        try:
            element = await frame.query_selector(selector)
            if element is None:
                continue
            header = parse_month_header(await element.text_content())
        except Exception:
            continue
        if header is not None:
            return header
    return None


async def days_from_header_and_numbers(frame: Frame) -> List[CalendarDay]:
    """Bare 1-2 digit cells dated by the visible month caption."""

    header = await read_month_header(frame)
    if header is None:
        return []

    days: List[CalendarDay] = []
    for element in await _query_all(frame, BARE_DAY_SELECTORS):
        try:
            iso = iso_from_header_and_day(header, await element.text_content())
        except Exception:
            continue
        if iso:
            days.append(CalendarDay(iso_date=iso, locator_ref=element))
    return days


DEFAULT_DAY_STRATEGIES: Tuple[Tuple[str, DayStrategy], ...] = (
    ("date-attribute", days_from_date_attribute),
    ("aria-label", days_from_aria_labels),
    ("month-header", days_from_header_and_numbers),
)


def unique_sorted_days(days: Iterable[CalendarDay]) -> List[CalendarDay]:
    """Keep the first candidate for each ISO date, then sort ascending."""

    by_date = {}
    for day in days:
        by_date.setdefault(day.iso_date, day)
    return sorted(by_date.values(), key=lambda day: day.iso_date)


class DayLocatorChain:
    """Ordered fallback chain of day strategies."""

    def __init__(
        self,
        strategies: Optional[Sequence[Tuple[str, DayStrategy]]] = None,
    ) -> None:
        self.strategies = tuple(strategies or DEFAULT_DAY_STRATEGIES)

    async def collect(self, frame: Frame) -> List[CalendarDay]:
        """Return de-duplicated, date-ordered days for the current month view."""

        for name, strategy in self.strategies:
            days = await strategy(frame)
            if days:
                unique = unique_sorted_days(days)
                logger.debug(
                    "Day strategy %s found %s day(s) (%s raw)", name, len(unique), len(days)
                )
                return unique
        logger.debug("No day strategy matched the current view")
        return []

    async def resolve(self, frame: Frame, iso_date: str) -> Optional[CalendarDay]:
        """Find the element for ``iso_date`` in the view as it is rendered now."""

        for day in await self.collect(frame):
            if day.iso_date == iso_date:
                return day
        return None
