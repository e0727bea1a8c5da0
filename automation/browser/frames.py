"""Helpers for locating the booking-calendar frame on a page."""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from playwright.async_api import Frame, Page

from infrastructure.constants import CALENDAR_FRAME_URL_PATTERNS

logger = logging.getLogger(__name__)


def frame_matches(frame: Frame, patterns: Iterable[str] = CALENDAR_FRAME_URL_PATTERNS) -> bool:
    """Return True when the frame URL contains any pattern (case-insensitive)."""

    url = (frame.url or "").lower()
    return any(pattern.lower() in url for pattern in patterns)


def select_calendar_frame(
    page: Page,
    patterns: Sequence[str] = CALENDAR_FRAME_URL_PATTERNS,
) -> Frame:
    """Pick the frame most likely to host the calendar.

    The first frame whose URL matches ``patterns`` wins; pages that render the
    widget inline (no iframe) fall back to the main frame.
    """

    match: Optional[Frame] = next(
        (frame for frame in page.frames if frame_matches(frame, patterns)),
        None,
    )
    if match is not None:
        logger.debug("Found calendar frame at %s", match.url)
        return match

    logger.debug("No calendar iframe matched %s; using main frame", list(patterns))
    return page.main_frame


__all__ = ["frame_matches", "select_calendar_frame"]
