"""Interstitial dismissal.

Strategies are tried in order; the first one whose target is present and
visible gets dismissed and the routine returns. One overlay per call: the
controller calls this again after the auth check and after scrolling.
"""
import re
from typing import Callable, Optional, Tuple

from playwright.async_api import Locator, Page

from . import scraper_logging as log
from .config import ScraperConfig


VISIBLE_TIMEOUT_MS = 2000
CLICK_TIMEOUT_MS = 5000

MODAL_SELECTOR = "[role='dialog'], .artdeco-modal, .modal"

CLOSE_BUTTON_SELECTORS = [
    "button[aria-label='Dismiss']",
    "button[aria-label='Close']",
    ".artdeco-modal__dismiss",
    ".artdeco-modal__close-btn",
    ".artdeco-dismiss",
    "[data-test-modal-close-btn]",
    "[data-control-name='close_modal']",
    ".modal-close-btn",
    ".modal .close",
    "button svg[data-test-icon='close-small']",
    "button svg[data-test-icon='close']",
    "dialog button",
    "[role='dialog'] button",
    "[role='alertdialog'] button",
]

# (name, locate targets, locate close controls; None means the target is its own close control)
Strategy = Tuple[str, Callable[[Page], Locator], Optional[Callable[[Page], Locator]]]


def _view_full_profile(page: Page) -> Locator:
    return page.get_by_text(re.compile(r"view.*full.*profile", re.I))


def _dialog_close_button(page: Page) -> Locator:
    return page.locator("[role='dialog'] button, .artdeco-modal__dismiss, .artdeco-modal button")


def _dismiss_role_button(page: Page) -> Locator:
    return page.get_by_role("button", name="Dismiss")


def _selector_strategy(selector: str) -> Strategy:
    def target(page: Page) -> Locator:
        return page.locator(selector)

    return (selector, target, None)


STRATEGIES = [
    ("view_full_profile", _view_full_profile, _dialog_close_button),
    ("dismiss_button", _dismiss_role_button, None),
] + [_selector_strategy(sel) for sel in CLOSE_BUTTON_SELECTORS]


async def _first_visible(locator: Locator) -> Optional[Locator]:
    """First visible element among everything the locator matches."""
    for element in await locator.all():
        if await element.is_visible(timeout=VISIBLE_TIMEOUT_MS):
            return element
    return None


async def _dismiss(page: Page, close: Optional[Locator]) -> str:
    if close is not None:
        await close.click(timeout=CLICK_TIMEOUT_MS)
        await page.wait_for_timeout(1000)
        return "click"
    await page.keyboard.press("Escape")
    await page.wait_for_timeout(500)
    return "escape"


async def dismiss_popup(page: Page, config: ScraperConfig, strategies=None) -> Optional[str]:
    """Dismiss at most one overlay. Returns the strategy name used, or None."""
    log.info("Checking for popups and modals...")
    for name, find_target, find_close in strategies or STRATEGIES:
        try:
            target = await _first_visible(find_target(page))
            if target is None:
                continue
            close = target if find_close is None else await _first_visible(find_close(page))
            how = await _dismiss(page, close)
            log.success(f"Popup closed via {name} ({how})")
            return name
        except Exception as e:
            log.debug(config.debug, f"Popup strategy {name} failed: {e}")
            continue

    try:
        if await page.locator(MODAL_SELECTOR).count() > 0:
            await page.keyboard.press("Escape")
            await page.wait_for_timeout(500)
            log.success("Popup closed with Escape key")
            return "escape"
    except Exception as e:
        log.debug(config.debug, f"Escape fallback failed: {e}")

    log.debug(config.debug, "No popups found to close")
    return None
