"""Scan orchestrator: find the earliest calendar day with enough bookable slots."""

from __future__ import annotations

import asyncio
import logging
from contextlib import suppress
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional, Sequence

import pytz
from playwright.async_api import Frame, Page

from automation.availability.consent import dismiss_consent_everywhere
from automation.availability.day_detection import DayLocatorChain
from automation.availability.pagination import MonthPaginator
from automation.availability.slot_detection import SlotDetector
from automation.availability.time_utils import days_from_today, utc_timestamp
from automation.browser.frames import select_calendar_frame
from automation.debug.artifacts import DebugArtifactWriter
from automation.shared.scan_contracts import (
    CalendarDay,
    DayMatch,
    LinkTarget,
    ScanConfig,
    ScanOutcome,
    ScanResult,
)
from infrastructure.constants import (
    DAY_CLICK_DELAY_MS,
    DAY_CLICK_TIMEOUT_MS,
    DAY_SETTLE_SECONDS,
    NAVIGATION_TIMEOUT_MS,
    NO_QUALIFYING_DAY_NOTE,
    POST_LOAD_DELAY_MS,
)

logger = logging.getLogger(__name__)


class ScanState(Enum):
    """Stages a single link's scan moves through (used for tracing)."""

    SELECTING_FRAME = "selecting_frame"
    DISMISSING_CONSENT = "dismissing_consent"
    SCANNING_MONTH = "scanning_month"
    ACTIVATING_DAY = "activating_day"
    DETECTING_SLOTS = "detecting_slots"
    NEXT_MONTH = "next_month"
    FOUND = "found"
    EXHAUSTED = "exhausted"


def describe_error(exc: BaseException) -> str:
    message = str(exc).strip()
    return message or exc.__class__.__name__


class AvailabilityChecker:
    """Scan booking widgets link by link, sharing one browser page."""

    def __init__(
        self,
        config: ScanConfig,
        *,
        day_locator: Optional[DayLocatorChain] = None,
        paginator: Optional[MonthPaginator] = None,
        slot_detector: Optional[SlotDetector] = None,
        artifact_writer: Optional[DebugArtifactWriter] = None,
        navigation_timeout_ms: int = NAVIGATION_TIMEOUT_MS,
        post_load_delay_ms: int = POST_LOAD_DELAY_MS,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.config = config
        self.day_locator = day_locator or DayLocatorChain()
        self.paginator = paginator or MonthPaginator()
        self.slot_detector = slot_detector or SlotDetector()
        self.artifact_writer = artifact_writer
        self.navigation_timeout_ms = navigation_timeout_ms
        self.post_load_delay_ms = post_load_delay_ms
        self._clock = clock or (lambda: datetime.now(pytz.utc))

    def _trace(self, state: ScanState, **details: object) -> None:
        if details:
            logger.debug("scan state -> %s %s", state.value, details)
        else:
            logger.debug("scan state -> %s", state.value)

    async def _click_day(self, day: CalendarDay) -> None:
        element = day.locator_ref
        with suppress(Exception):
            await element.scroll_into_view_if_needed()
        await element.click(delay=DAY_CLICK_DELAY_MS, timeout=DAY_CLICK_TIMEOUT_MS)
        await asyncio.sleep(DAY_SETTLE_SECONDS)

    async def _activate_day(self, frame: Frame, day: CalendarDay) -> bool:
        """Click a day; on failure re-resolve it by date once and retry."""

        try:
            await self._click_day(day)
            return True
        except Exception as exc:
            logger.debug("Click on %s failed (%s); re-resolving", day.iso_date, exc)

        fresh = await self.day_locator.resolve(frame, day.iso_date)
        if fresh is None:
            return False
        try:
            await self._click_day(fresh)
            return True
        except Exception as exc:
            logger.debug("Retry click on %s failed: %s", day.iso_date, exc)
            return False

    async def find_earliest_day(self, page: Page) -> Optional[DayMatch]:
        """Walk forward through month views and return the first qualifying day."""

        self._trace(ScanState.SELECTING_FRAME)
        frame = select_calendar_frame(page)

        self._trace(ScanState.DISMISSING_CONSENT)
        await dismiss_consent_everywhere(page, frame)

        max_months = self.config.max_months_to_scan
        for month_number in range(1, max_months + 1):
            self._trace(ScanState.SCANNING_MONTH, month=month_number)
            days = await self.day_locator.collect(frame)

            for day in days:
                try:
                    self._trace(ScanState.ACTIVATING_DAY, date=day.iso_date)
                    if not await self._activate_day(frame, day):
                        continue

                    self._trace(ScanState.DETECTING_SLOTS, date=day.iso_date)
                    observation = await self.slot_detector.wait_for_slots(page, frame)
                except Exception as exc:
                    logger.debug("Skipping %s: %s", day.iso_date, exc)
                    continue

                if observation.count >= self.config.min_slots:
                    self._trace(ScanState.FOUND, date=day.iso_date, slots=observation.count)
                    return DayMatch(iso_date=day.iso_date, slot_count=observation.count)
                logger.debug(
                    "%s has %s slot(s), need %s",
                    day.iso_date,
                    observation.count,
                    self.config.min_slots,
                )

            if month_number == max_months:
                break
            self._trace(ScanState.NEXT_MONTH)
            if not await self.paginator.advance(frame):
                break

        self._trace(ScanState.EXHAUSTED)
        return None

    async def check_link(self, page: Page, link: LinkTarget) -> ScanResult:
        """Navigate to one link and build its result; never raises."""

        logger.info("Checking %s (%s)", link.name, link.url)
        try:
            await page.goto(link.url, wait_until="networkidle", timeout=self.navigation_timeout_ms)
            await asyncio.sleep(self.post_load_delay_ms / 1000)

            match = await self.find_earliest_day(page)
        except Exception as exc:
            logger.error("%s: scan failed: %s", link.name, exc, exc_info=True)
            result = ScanResult.failed(
                link,
                error=describe_error(exc),
                scanned_at=utc_timestamp(self._clock()),
            )
        else:
            now = self._clock()
            if match is not None:
                result = ScanResult.found(
                    link,
                    match,
                    days_from_today=days_from_today(match.iso_date, self.config.timezone, now),
                    scanned_at=utc_timestamp(now),
                )
                logger.info(
                    "%s: earliest day %s with %s slot(s)",
                    link.name,
                    match.iso_date,
                    match.slot_count,
                )
            else:
                result = ScanResult.exhausted(
                    link,
                    note=NO_QUALIFYING_DAY_NOTE.format(
                        min_slots=self.config.min_slots,
                        max_months=self.config.max_months_to_scan,
                    ),
                    scanned_at=utc_timestamp(now),
                )
                logger.info("%s: no qualifying day found", link.name)

        if self.artifact_writer is not None and result.outcome is not ScanOutcome.FOUND:
            await self.artifact_writer.capture(page, link.name)
        return result

    async def check_links(
        self,
        page: Page,
        links: Optional[Sequence[LinkTarget]] = None,
    ) -> List[ScanResult]:
        """Scan links strictly in order; one result per link, in input order."""

        targets = self.config.links if links is None else links
        results: List[ScanResult] = []
        for link in targets:
            results.append(await self.check_link(page, link))

        found = sum(1 for result in results if result.outcome is ScanOutcome.FOUND)
        logger.info("Scanned %s link(s): %s with a qualifying day", len(results), found)
        return results
