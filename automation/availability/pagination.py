"""Month pagination for calendar widgets."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional, Sequence

from playwright.async_api import Frame

from infrastructure.constants import (
    NEXT_MONTH_CLICK_DELAY_MS,
    NEXT_MONTH_SELECTORS,
    PAGINATION_SETTLE_SECONDS,
)

logger = logging.getLogger(__name__)


class MonthPaginator:
    """Advance the calendar to the following month."""

    def __init__(
        self,
        selectors: Optional[Sequence[str]] = None,
        settle_seconds: float = PAGINATION_SETTLE_SECONDS,
    ) -> None:
        self.selectors = tuple(selectors or NEXT_MONTH_SELECTORS)
        self.settle_seconds = settle_seconds

    async def advance(self, frame: Frame) -> bool:
        """Click the first "next month" control found.

        Returns False when no control could be found or clicked; the caller
        treats that as the end of the calendar.
        """

        for selector in self.selectors:
            try:
                button = await frame.query_selector(selector)
            except Exception as exc:
                logger.debug("Next-month selector %s failed: %s", selector, exc)
                continue
            if button is None:
                continue
            try:
                await button.click(delay=NEXT_MONTH_CLICK_DELAY_MS)
            except Exception as exc:
                logger.debug("Next-month click via %s failed: %s", selector, exc)
                continue
            await asyncio.sleep(self.settle_seconds)
            logger.debug("Advanced month via %s", selector)
            return True

        logger.debug("No next-month control found")
        return False
