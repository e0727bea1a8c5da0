"""Bounded polling for asynchronously rendered time-slot lists."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional, Sequence

from playwright.async_api import Frame, Page

from automation.availability.dom_extraction import FrameText, extract_slot_texts
from automation.availability.time_utils import collect_slot_times, extract_slot_times
from automation.shared.scan_contracts import SlotObservation
from infrastructure.constants import SLOT_POLL_ATTEMPTS, SLOT_POLL_INTERVAL_SECONDS

logger = logging.getLogger(__name__)

Sleeper = Callable[[float], Awaitable[None]]
FrameReader = Callable[[Frame], Awaitable[FrameText]]


@dataclass(frozen=True)
class PollPolicy:
    """How often and how many times to re-scan for slots."""

    attempts: int = SLOT_POLL_ATTEMPTS
    interval: float = SLOT_POLL_INTERVAL_SECONDS

    def __post_init__(self) -> None:
        if self.attempts < 1:
            raise ValueError("attempts must be at least 1")
        if self.interval < 0:
            raise ValueError("interval must not be negative")


def observe_slots(readings: Sequence[FrameText]) -> SlotObservation:
    """Turn per-frame readings into a single observation.

    Visible element texts are authoritative; the whole-page text is only
    consulted when no element matched in any frame.
    """

    times = collect_slot_times(
        text for reading in readings for text in reading.element_texts
    )
    if not times:
        for reading in readings:
            times.update(extract_slot_times(reading.page_text))
    return SlotObservation.from_times(times)


class SlotDetector:
    """Count visible time slots after a day has been activated."""

    def __init__(
        self,
        policy: Optional[PollPolicy] = None,
        *,
        scan_all_frames: bool = True,
        sleep: Optional[Sleeper] = None,
        reader: Optional[FrameReader] = None,
    ) -> None:
        self.policy = policy or PollPolicy()
        self.scan_all_frames = scan_all_frames
        self._sleep = sleep
        self._reader = reader or extract_slot_texts

    def _frames_to_scan(self, page: Page, calendar_frame: Frame) -> List[Frame]:
        if not self.scan_all_frames:
            return [calendar_frame]
        frames = list(page.frames)
        if calendar_frame not in frames:
            frames.insert(0, calendar_frame)
        return frames

    async def scan_once(self, page: Page, calendar_frame: Frame) -> SlotObservation:
        readings = [await self._reader(frame) for frame in self._frames_to_scan(page, calendar_frame)]
        return observe_slots(readings)

    async def wait_for_slots(self, page: Page, calendar_frame: Frame) -> SlotObservation:
        """Poll until any slot appears or the attempts run out.

        Returns an empty observation on exhaustion; that is a normal result.
        """

        # Resolved per call so tests can monkeypatch asyncio.sleep.
        sleep = self._sleep or asyncio.sleep
        for attempt in range(1, self.policy.attempts + 1):
            observation = await self.scan_once(page, calendar_frame)
            if observation.count:
                logger.debug(
                    "Found %s slot(s) on attempt %s: %s",
                    observation.count,
                    attempt,
                    observation.sorted_times(),
                )
                return observation
            if attempt < self.policy.attempts:
                await sleep(self.policy.interval)

        logger.debug("No slots rendered after %s attempts", self.policy.attempts)
        return SlotObservation()
