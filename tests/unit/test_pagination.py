import asyncio

import pytest

from automation.availability.pagination import MonthPaginator
from infrastructure.constants import NEXT_MONTH_SELECTORS
from tests.helpers import FakeElement, FakeFrame


@pytest.fixture(autouse=True)
def fast_sleep(monkeypatch):
    async def _no_sleep(_duration):
        return None

    monkeypatch.setattr(asyncio, "sleep", _no_sleep)


@pytest.mark.asyncio
async def test_advance_clicks_first_available_control():
    by_title = FakeElement("›")
    by_text = FakeElement("Next")
    frame = FakeFrame(elements={
        NEXT_MONTH_SELECTORS[1]: [by_title],
        NEXT_MONTH_SELECTORS[3]: [by_text],
    })

    assert await MonthPaginator().advance(frame) is True
    assert len(by_title.clicks) == 1
    assert by_text.clicks == []


@pytest.mark.asyncio
async def test_advance_tries_next_selector_when_click_fails():
    broken = FakeElement("›", fail_click=True)
    working = FakeElement("Next")
    frame = FakeFrame(elements={
        NEXT_MONTH_SELECTORS[0]: [broken],
        NEXT_MONTH_SELECTORS[3]: [working],
    })

    assert await MonthPaginator().advance(frame) is True
    assert len(working.clicks) == 1


@pytest.mark.asyncio
async def test_advance_reports_false_without_a_control():
    assert await MonthPaginator().advance(FakeFrame()) is False
