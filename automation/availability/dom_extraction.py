"""DOM extraction helpers for time-slot detection."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

from playwright.async_api import Frame

from infrastructure.constants import TIME_SLOT_CANDIDATE_SELECTOR

logger = logging.getLogger(__name__)

# Short texts with a digit followed by ":" or am/pm; hidden and off-screen
# elements are skipped so duplicated off-canvas lists are not counted.
_SLOT_TEXT_SCRIPT = r"""(selector) => {
    const looksLikeTime = /\d\s*(?::|am|pm)/i;
    const isVisible = (el) => {
        const style = window.getComputedStyle(el);
        if (style.display === 'none' || style.visibility === 'hidden') return false;
        if (Number(style.opacity) === 0) return false;
        const rect = el.getBoundingClientRect();
        if (rect.width <= 0 || rect.height <= 0) return false;
        return rect.right >= 0 && rect.bottom >= 0;
    };

    const elements = [];
    for (const node of document.querySelectorAll(selector)) {
        const text = (node.innerText || node.textContent || '').trim();
        if (!text || text.length > 16 || !looksLikeTime.test(text)) continue;
        if (!isVisible(node)) continue;
        elements.push(text);
    }

    const pageText = (document.body && document.body.innerText) || '';
    return { elements, pageText };
}
"""


@dataclass
class FrameText:
    """Texts read from one frame for slot matching."""

    element_texts: List[str] = field(default_factory=list)
    page_text: str = ""


async def extract_slot_texts(frame: Frame) -> FrameText:
    """Return visible candidate element texts and the whole body text of ``frame``.

    Detached or cross-navigation frames yield an empty :class:`FrameText`.
    """

    try:
        payload = await frame.evaluate(_SLOT_TEXT_SCRIPT, TIME_SLOT_CANDIDATE_SELECTOR)
    except Exception as exc:
        logger.debug("Slot text extraction failed for %s: %s", _frame_url(frame), exc)
        return FrameText()

    if not isinstance(payload, dict):
        return FrameText()

    return FrameText(
        element_texts=[str(text) for text in payload.get("elements") or []],
        page_text=str(payload.get("pageText") or ""),
    )


def _frame_url(frame: Frame) -> str:
    try:
        return frame.url
    except Exception:
        return "<unknown frame>"
