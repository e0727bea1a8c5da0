"""Availability scanning for embedded booking calendars."""

from .checker import AvailabilityChecker, ScanState
from .day_detection import DayLocatorChain, unique_sorted_days
from .pagination import MonthPaginator
from .slot_detection import PollPolicy, SlotDetector
from .time_utils import days_from_today, is_slot_text

__all__ = [
    "AvailabilityChecker",
    "ScanState",
    "DayLocatorChain",
    "unique_sorted_days",
    "MonthPaginator",
    "PollPolicy",
    "SlotDetector",
    "days_from_today",
    "is_slot_text",
]
