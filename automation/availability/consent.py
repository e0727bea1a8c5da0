"""Best-effort dismissal of cookie/consent overlays."""

from __future__ import annotations

import asyncio
import logging
import re
from typing import Iterable, Pattern, Sequence, Union

from playwright.async_api import Frame, Page

from infrastructure.constants import (
    CONSENT_BUTTON_SELECTOR,
    CONSENT_CLICK_TIMEOUT_MS,
    CONSENT_LABEL_PATTERNS,
    CONSENT_SETTLE_SECONDS,
)

logger = logging.getLogger(__name__)

CONSENT_LABELS: Sequence[Pattern[str]] = tuple(
    re.compile(pattern, re.IGNORECASE) for pattern in CONSENT_LABEL_PATTERNS
)


def is_consent_label(text: str, labels: Iterable[Pattern[str]] = CONSENT_LABELS) -> bool:
    cleaned = (text or "").strip()
    return bool(cleaned) and any(label.search(cleaned) for label in labels)


async def dismiss_consent(target: Union[Page, Frame]) -> int:
    """Click every visible accept/agree style button on ``target``.

    Never raises: detached or unclickable buttons are skipped. Returns the
    number of buttons clicked.
    """

    try:
        buttons = await target.query_selector_all(CONSENT_BUTTON_SELECTOR)
    except Exception as exc:
        logger.debug("Consent button lookup failed: %s", exc)
        return 0

    clicked = 0
    for button in buttons:
        try:
            text = await button.text_content()
            if not is_consent_label(text or ""):
                continue
            await button.click(timeout=CONSENT_CLICK_TIMEOUT_MS)
            clicked += 1
            await asyncio.sleep(CONSENT_SETTLE_SECONDS)
        except Exception:
            continue

    if clicked:
        logger.info("Dismissed %s consent control(s)", clicked)
    return clicked


async def dismiss_consent_everywhere(page: Page, calendar_frame: Frame) -> int:
    """Consent banners live either in the host page or inside the widget."""

    total = await dismiss_consent(page)
    if calendar_frame is not page.main_frame:
        total += await dismiss_consent(calendar_frame)
    return total
