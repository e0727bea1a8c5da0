"""Shared fakes and utilities for unit tests.

The fakes implement only the slice of the Playwright async API the scanner
touches: ``query_selector(_all)``, ``evaluate``, element ``click`` and friends.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence

from infrastructure.constants import (
    ARIA_LABEL_SELECTORS,
    DATE_ATTRIBUTE_SELECTORS,
    NEXT_MONTH_SELECTORS,
)


class FakeElement:
    """Stand-in for an ``ElementHandle``."""

    def __init__(
        self,
        text: str = "",
        attrs: Optional[Mapping[str, str]] = None,
        *,
        on_click: Optional[Callable[[], None]] = None,
        fail_click: bool = False,
    ) -> None:
        self.text = text
        self.attrs = dict(attrs or {})
        self.on_click = on_click
        self.fail_click = fail_click
        self.clicks: List[Dict[str, Any]] = []
        self.scrolled = False

    async def text_content(self) -> str:
        return self.text

    async def get_attribute(self, name: str) -> Optional[str]:
        return self.attrs.get(name)

    async def scroll_into_view_if_needed(self) -> None:
        self.scrolled = True

    async def click(self, **kwargs: Any) -> None:
        if self.fail_click:
            raise RuntimeError("Element is not attached to the DOM")
        self.clicks.append(kwargs)
        if self.on_click is not None:
            self.on_click()


class FakeFrame:
    """Stand-in for a Playwright ``Frame`` backed by a selector table."""

    def __init__(
        self,
        url: str = "",
        *,
        name: str = "",
        elements: Optional[Mapping[str, Sequence[FakeElement]]] = None,
        slot_texts: Iterable[str] = (),
        page_text: str = "",
    ) -> None:
        self.url = url
        self.name = name
        self.elements: Dict[str, List[FakeElement]] = {
            selector: list(items) for selector, items in (elements or {}).items()
        }
        self.slot_texts = list(slot_texts)
        self.page_text = page_text
        self.evaluate_calls = 0

    async def query_selector_all(self, selector: str) -> List[FakeElement]:
        return list(self.elements.get(selector, []))

    async def query_selector(self, selector: str) -> Optional[FakeElement]:
        matches = await self.query_selector_all(selector)
        return matches[0] if matches else None

    async def evaluate(self, script: str, *args: Any) -> Dict[str, Any]:
        self.evaluate_calls += 1
        return {"elements": list(self.slot_texts), "pageText": self.page_text}


class FakePage:
    """Stand-in for a Playwright ``Page`` holding a main frame plus iframes."""

    def __init__(
        self,
        main_frame: Optional[FakeFrame] = None,
        child_frames: Sequence[FakeFrame] = (),
        *,
        goto_errors: Optional[Mapping[str, Exception]] = None,
    ) -> None:
        self.main_frame = main_frame or FakeFrame("https://host.example.com/book")
        self.child_frames = list(child_frames)
        self.goto_errors = dict(goto_errors or {})
        self.visited: List[str] = []
        self.screenshots: List[str] = []

    @property
    def frames(self) -> List[FakeFrame]:
        return [self.main_frame, *self.child_frames]

    async def goto(self, url: str, **kwargs: Any) -> None:
        self.visited.append(url)
        error = self.goto_errors.get(url)
        if error is not None:
            raise error

    async def query_selector_all(self, selector: str) -> List[FakeElement]:
        return await self.main_frame.query_selector_all(selector)

    async def screenshot(self, path: str, **kwargs: Any) -> None:
        self.screenshots.append(path)


class FakeCalendarFrame(FakeFrame):
    """A month-by-month calendar widget.

    ``months`` is a list of ``{iso_date: [slot texts]}`` mappings, one per month
    view. Day cells are rebuilt on every query, like a re-rendered widget.
    Clicking a day shows its slots; clicking "next" moves to the next month.
    """

    def __init__(
        self,
        months: Sequence[Mapping[str, Sequence[str]]],
        *,
        url: str = "https://acme.chilipiper.com/book/demo",
        has_next: bool = True,
        label_style: str = "data-date",
    ) -> None:
        super().__init__(url)
        self.months = [dict(month) for month in months]
        self.month_index = 0
        self.has_next = has_next
        self.label_style = label_style
        self.clicked_days: List[str] = []

    def _show_day(self, iso_date: str) -> None:
        self.clicked_days.append(iso_date)
        self.slot_texts = list(self.months[self.month_index][iso_date])

    def _next_month(self) -> None:
        self.month_index += 1
        self.slot_texts = []

    def _day_cells(self) -> List[FakeElement]:
        cells = []
        for iso_date in self.months[self.month_index]:
            if self.label_style == "data-date":
                attrs = {"data-date": iso_date}
            else:
                attrs = {"aria-label": f"Available {iso_date}"}
            cells.append(
                FakeElement(
                    iso_date[-2:].lstrip("0"),
                    attrs,
                    on_click=lambda iso=iso_date: self._show_day(iso),
                )
            )
        return cells

    async def query_selector_all(self, selector: str) -> List[FakeElement]:
        if selector == DATE_ATTRIBUTE_SELECTORS and self.label_style == "data-date":
            return self._day_cells()
        if selector == ARIA_LABEL_SELECTORS and self.label_style == "aria-label":
            return self._day_cells()
        if selector == NEXT_MONTH_SELECTORS[0]:
            if self.has_next and self.month_index < len(self.months) - 1:
                return [FakeElement("›", on_click=self._next_month)]
            return []
        return await super().query_selector_all(selector)
