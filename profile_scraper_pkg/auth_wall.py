import re
from typing import List, Tuple

from playwright.async_api import Page


URL_MARKERS = ["/authwall", "/checkpoint", "/login", "/signup"]

DOM_MARKERS = [
    ".authwall-join-form",
    "[data-test-id='auth-wall']",
    ".join-form",
    ".sign-in-form",
    "form[action*='login']",
]

TEXT_MARKERS = [
    re.compile(r"sign in to view", re.I),
    re.compile(r"join now to view", re.I),
]

TITLE_MARKERS = ["sign in", "log in", "authwall"]


async def _safe_count(make_locator) -> int:
    try:
        return await make_locator().count()
    except Exception:
        return 0


async def detect_auth_wall(page: Page) -> Tuple[bool, List[str]]:
    """Evaluate every sign-in signal and OR them together.

    Returns (wall_present, tripped_signals). Signals are independent: one
    that errors counts as false and the others still run.
    """
    signals: List[str] = []

    url = (page.url or "").lower()
    for marker in URL_MARKERS:
        if marker in url:
            signals.append(f"URL:{marker}")

    for sel in DOM_MARKERS:
        if await _safe_count(lambda: page.locator(sel)) > 0:
            signals.append(f"DOM:{sel}")

    for pattern in TEXT_MARKERS:
        if await _safe_count(lambda: page.get_by_text(pattern)) > 0:
            signals.append(f"Text:{pattern.pattern}")

    try:
        title = (await page.title()).lower()
    except Exception:
        title = ""
    for keyword in TITLE_MARKERS:
        if keyword in title:
            signals.append(f"Title:{keyword}")

    return bool(signals), signals
