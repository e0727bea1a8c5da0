import pytest

from automation.availability.day_detection import (
    DayLocatorChain,
    days_from_aria_labels,
    read_month_header,
    unique_sorted_days,
)
from automation.shared.scan_contracts import CalendarDay, MonthHeader
from infrastructure.constants import (
    ARIA_LABEL_SELECTORS,
    BARE_DAY_SELECTORS,
    DATE_ATTRIBUTE_SELECTORS,
    MONTH_HEADER_SELECTORS,
)
from tests.helpers import FakeElement, FakeFrame


def test_unique_sorted_days_keeps_first_occurrence():
    a, b, c = object(), object(), object()
    days = unique_sorted_days([
        CalendarDay("2025-10-18", c),
        CalendarDay("2025-10-17", a),
        CalendarDay("2025-10-17", b),
    ])
    assert [day.iso_date for day in days] == ["2025-10-17", "2025-10-18"]
    assert days[0].locator_ref is a
    assert days[1].locator_ref is c


@pytest.mark.asyncio
async def test_chain_prefers_structured_date_attribute():
    first = FakeElement("17", {"data-date": "2025-10-17"})
    duplicate = FakeElement("17", {"data-date": "2025-10-17"})
    later = FakeElement("18", {"data-date": "2025-10-18"})
    frame = FakeFrame(elements={
        DATE_ATTRIBUTE_SELECTORS: [later, first, duplicate],
        ARIA_LABEL_SELECTORS: [FakeElement("1", {"aria-label": "Saturday, November 1, 2025"})],
    })

    days = await DayLocatorChain().collect(frame)

    assert [day.iso_date for day in days] == ["2025-10-17", "2025-10-18"]
    assert days[0].locator_ref is first


@pytest.mark.asyncio
async def test_chain_falls_back_to_aria_labels():
    frame = FakeFrame(elements={
        DATE_ATTRIBUTE_SELECTORS: [FakeElement("", {"data-date": "not-a-date"})],
        ARIA_LABEL_SELECTORS: [
            FakeElement("", {"aria-label": "Next month"}),
            FakeElement("17", {"aria-label": "Friday, October 17, 2025"}),
            FakeElement("16", {"aria-label": "2025-10-16 unavailable"}),
        ],
    })

    days = await DayLocatorChain().collect(frame)

    assert [day.iso_date for day in days] == ["2025-10-16", "2025-10-17"]


@pytest.mark.asyncio
async def test_chain_falls_back_to_month_header_and_day_numbers():
    frame = FakeFrame(elements={
        MONTH_HEADER_SELECTORS[2]: [FakeElement("October 2025")],
        BARE_DAY_SELECTORS: [
            FakeElement("Mon"),
            FakeElement("17"),
            FakeElement("3"),
            FakeElement("Book"),
            FakeElement("17"),
        ],
    })

    days = await DayLocatorChain().collect(frame)

    assert [day.iso_date for day in days] == ["2025-10-03", "2025-10-17"]


@pytest.mark.asyncio
async def test_month_header_skips_captions_without_a_month():
    frame = FakeFrame(elements={
        MONTH_HEADER_SELECTORS[0]: [FakeElement("Loading availability")],
        MONTH_HEADER_SELECTORS[4]: [FakeElement("November 2025")],
    })
    assert await read_month_header(frame) == MonthHeader(month_index=10, year=2025)


@pytest.mark.asyncio
async def test_chain_returns_empty_list_when_nothing_matches():
    frame = FakeFrame(elements={BARE_DAY_SELECTORS: [FakeElement("17")]})
    assert await DayLocatorChain().collect(frame) == []


@pytest.mark.asyncio
async def test_custom_strategies_run_in_order_and_short_circuit():
    calls = []

    async def empty(frame):
        calls.append("empty")
        return []

    async def found(frame):
        calls.append("found")
        return [CalendarDay("2025-10-20", None)]

    async def never(frame):
        calls.append("never")
        return [CalendarDay("2025-10-01", None)]

    chain = DayLocatorChain([("empty", empty), ("found", found), ("never", never)])
    days = await chain.collect(FakeFrame())

    assert [day.iso_date for day in days] == ["2025-10-20"]
    assert calls == ["empty", "found"]


@pytest.mark.asyncio
async def test_resolve_finds_current_element_for_date():
    fresh = FakeElement("17", {"data-date": "2025-10-17"})
    frame = FakeFrame(elements={DATE_ATTRIBUTE_SELECTORS: [fresh]})

    day = await DayLocatorChain().resolve(frame, "2025-10-17")

    assert day is not None and day.locator_ref is fresh
    assert await DayLocatorChain().resolve(frame, "2025-10-18") is None


@pytest.mark.asyncio
async def test_aria_strategy_skips_elements_that_fail_to_read():
    class BrokenElement(FakeElement):
        async def get_attribute(self, name):
            raise RuntimeError("detached")

    frame = FakeFrame(elements={
        ARIA_LABEL_SELECTORS: [BrokenElement(), FakeElement("", {"aria-label": "October 2, 2025"})],
    })
    days = await days_from_aria_labels(frame)
    assert [day.iso_date for day in days] == ["2025-10-02"]
