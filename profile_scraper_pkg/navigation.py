from playwright.async_api import Page

from . import scraper_logging as log
from .config import ScraperConfig
from .errors import NavigationFailed


MIN_HTML_LENGTH = 100

_AT_BOTTOM_JS = "() => (window.innerHeight + window.scrollY) >= document.body.scrollHeight - 100"
_SCROLL_STEP_JS = "() => window.scrollBy(0, window.innerHeight * 0.8)"


async def navigate(page: Page, url: str, config: ScraperConfig) -> int:
    """Load the target page and return its HTTP status.

    Raises NavigationFailed when the request errors or times out, when no
    response arrives, or when the rendered markup is implausibly short.
    """
    log.info(f"Navigating to: {url}")
    try:
        response = await page.goto(
            url,
            wait_until="networkidle",
            timeout=config.navigation_timeout_ms,
        )
    except Exception as e:
        raise NavigationFailed(f"Navigation failed: {e}") from e

    if response is None:
        raise NavigationFailed("No response received from page")

    status = response.status
    log.info(f"Page loaded with status: {status}")
    # client-side rendering settles after network idle
    await page.wait_for_timeout(config.post_load_delay_ms)

    try:
        content = await page.content()
    except Exception as e:
        raise NavigationFailed(f"Could not read page content: {e}") from e
    if len(content or "") < MIN_HTML_LENGTH:
        raise NavigationFailed(f"Page content too short ({len(content or '')} chars)")
    return status


async def scroll_page(page: Page, steps: int, settle_ms: int, debug: bool = False) -> int:
    """Scroll in viewport-sized steps to trigger lazy-loaded sections.

    Each step waits `settle_ms`; scrolling stops early at the bottom of the
    document. Returns the number of steps performed. A failed step is
    logged and skipped.
    """
    log.info(f"Scrolling page up to {steps} times to load more content...")
    done = 0
    for i in range(steps):
        try:
            await page.evaluate(_SCROLL_STEP_JS)
            await page.wait_for_timeout(settle_ms)
            done += 1
            log.debug(debug, f"Scroll {i + 1}/{steps} completed")
            if await page.evaluate(_AT_BOTTOM_JS):
                log.info("Reached bottom of page")
                break
        except Exception as e:
            log.debug(debug, f"Scroll {i + 1} failed: {e}")
    log.success("Page scrolling completed")
    return done
