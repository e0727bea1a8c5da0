"""Debug artifact capture for scans that found nothing or failed.

Enable with environment variable:
    SAVE_DEBUG_ARTIFACTS=1
"""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Union

from playwright.async_api import Page

logger = logging.getLogger(__name__)

_SLUG_UNSAFE = re.compile(r"[^a-z0-9]+")


def slugify(name: str) -> str:
    slug = _SLUG_UNSAFE.sub("-", name.lower()).strip("-")
    return slug or "link"


def frame_map(page: Page) -> List[Dict[str, Any]]:
    """Describe every frame on the page (index, name, url)."""

    entries: List[Dict[str, Any]] = []
    for index, frame in enumerate(page.frames):
        entries.append({"index": index, "name": frame.name, "url": frame.url})
    return entries


class DebugArtifactWriter:
    """Save a screenshot and frame map per link under ``<data>/debug``."""

    def __init__(self, base_dir: Union[str, Path]) -> None:
        self.base_dir = Path(base_dir)

    async def capture(self, page: Page, link_name: str) -> None:
        """Capture artifacts for ``link_name``; failures are only logged."""

        timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
        target_dir = self.base_dir / f"{slugify(link_name)}-{timestamp}"
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            (target_dir / "frames.json").write_text(
                json.dumps(frame_map(page), indent=2),
                encoding="utf-8",
            )
            await page.screenshot(path=str(target_dir / "screenshot.png"), full_page=True)
            logger.debug("Saved debug artifacts for %s at %s", link_name, target_dir)
        except Exception as exc:  # pragma: no cover - debug helper
            logger.debug("Failed to capture debug artifacts for %s: %s", link_name, exc)
