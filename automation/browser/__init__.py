"""Browser session and frame utilities for the availability scanner."""

from .frames import frame_matches, select_calendar_frame
from .session import ScanBrowser

__all__ = [
    "ScanBrowser",
    "frame_matches",
    "select_calendar_frame",
]
