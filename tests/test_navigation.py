from __future__ import annotations

import asyncio

import pytest

from fakes import FakePage
from profile_scraper_pkg.config import ScraperConfig
from profile_scraper_pkg.errors import NavigationFailed
from profile_scraper_pkg.navigation import navigate, scroll_page

CONFIG = ScraperConfig(post_load_delay_ms=0)


def test_navigate_returns_status_and_settles() -> None:
    page = FakePage()

    assert asyncio.run(navigate(page, page.url, CONFIG)) == 200
    assert page.waits == [0]


def test_missing_response_is_a_navigation_failure() -> None:
    page = FakePage(response=None)

    with pytest.raises(NavigationFailed, match="No response"):
        asyncio.run(navigate(page, page.url, CONFIG))


def test_goto_timeout_is_a_navigation_failure() -> None:
    page = FakePage(goto_error=TimeoutError("Timeout 60000ms exceeded"))

    with pytest.raises(NavigationFailed, match="Timeout 60000ms"):
        asyncio.run(navigate(page, page.url, CONFIG))


def test_implausibly_short_page_is_a_navigation_failure() -> None:
    page = FakePage(html="<html></html>")

    with pytest.raises(NavigationFailed, match="too short"):
        asyncio.run(navigate(page, page.url, CONFIG))


def test_scroll_is_bounded_by_step_count() -> None:
    page = FakePage()

    assert asyncio.run(scroll_page(page, steps=5, settle_ms=10)) == 5
    assert page.waits == [10] * 5


def test_scroll_stops_at_document_bottom() -> None:
    page = FakePage(bottom_after=2)

    assert asyncio.run(scroll_page(page, steps=5, settle_ms=10)) == 2
    assert page.scrolls == 2
