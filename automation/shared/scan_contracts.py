"""Shared scan request/result contracts for the checker, the CLI and the results writer."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, Optional, Tuple


class ScanOutcome(Enum):
    """Indicates how a single link's scan finished."""

    FOUND = "found"
    EXHAUSTED = "exhausted"
    ERROR = "error"


@dataclass(frozen=True)
class LinkTarget:
    """A named booking page to probe."""

    name: str
    url: str


@dataclass(frozen=True)
class ScanConfig:
    """Process-wide scan parameters, immutable for the duration of a run."""

    timezone: str
    min_slots: int
    max_months_to_scan: int
    links: Tuple[LinkTarget, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class MonthHeader:
    """Month/year read from the calendar caption. ``month_index`` is 0-based."""

    month_index: int
    year: int


@dataclass(frozen=True)
class CalendarDay:
    """A calendar date bound to the element that activates it.

    ``locator_ref`` is only valid for the month view it was collected from;
    after a click or pagination the widget may replace the node, so callers
    re-resolve by ``iso_date`` instead of holding on to it.
    """

    iso_date: str
    locator_ref: Any = field(compare=False, repr=False)


@dataclass(frozen=True)
class SlotObservation:
    """Distinct normalised time strings seen after activating a day."""

    times: FrozenSet[str] = frozenset()

    @classmethod
    def from_times(cls, times: Iterable[str]) -> "SlotObservation":
        return cls(times=frozenset(times))

    @property
    def count(self) -> int:
        return len(self.times)

    def sorted_times(self) -> list:
        return sorted(self.times)


@dataclass(frozen=True)
class DayMatch:
    """The first day found with enough slots."""

    iso_date: str
    slot_count: int


@dataclass(frozen=True)
class ScanResult:
    """Per-link output record consumed by the dashboard."""

    name: str
    url: str
    scanned_at: str
    earliest_date: Optional[str] = None
    days_from_today: Optional[int] = None
    slot_count_observed: int = 0
    note: Optional[str] = None
    error: Optional[str] = None

    @property
    def outcome(self) -> ScanOutcome:
        if self.error is not None:
            return ScanOutcome.ERROR
        if self.earliest_date is not None:
            return ScanOutcome.FOUND
        return ScanOutcome.EXHAUSTED

    @classmethod
    def found(
        cls,
        link: LinkTarget,
        match: DayMatch,
        *,
        days_from_today: int,
        scanned_at: str,
    ) -> "ScanResult":
        return cls(
            name=link.name,
            url=link.url,
            scanned_at=scanned_at,
            earliest_date=match.iso_date,
            days_from_today=days_from_today,
            slot_count_observed=match.slot_count,
        )

    @classmethod
    def exhausted(cls, link: LinkTarget, *, note: str, scanned_at: str) -> "ScanResult":
        return cls(name=link.name, url=link.url, scanned_at=scanned_at, note=note)

    @classmethod
    def failed(cls, link: LinkTarget, *, error: str, scanned_at: str) -> "ScanResult":
        return cls(name=link.name, url=link.url, scanned_at=scanned_at, error=error)

    def to_dict(self) -> Dict[str, Any]:
        """Return the JSON record; ``note`` and ``error`` only appear when set."""

        payload: Dict[str, Any] = {
            "name": self.name,
            "url": self.url,
            "earliestDate": self.earliest_date,
            "daysFromToday": self.days_from_today,
            "slotCountObserved": self.slot_count_observed,
            "scannedAt": self.scanned_at,
        }
        if self.note is not None:
            payload["note"] = self.note
        if self.error is not None:
            payload["error"] = self.error
        return payload
