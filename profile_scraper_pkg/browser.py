from contextlib import asynccontextmanager
from typing import AsyncIterator

from playwright.async_api import Browser, BrowserContext, Page
from playwright.async_api import async_playwright

from . import scraper_logging as log
from .config import ScraperConfig, random_user_agent


LAUNCH_ARGS = [
    "--disable-blink-features=AutomationControlled",
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-infobars",
    "--window-size=1920,1080",
    "--disable-dev-shm-usage",
    "--disable-web-security",
    "--disable-features=IsolateOrigins,site-per-process",
    "--disable-accelerated-2d-canvas",
    "--disable-gpu",
    "--no-first-run",
    "--disable-extensions",
]


async def launch_browser(playwright, config: ScraperConfig) -> Browser:
    """Launch Chromium with flags that hide the most common automation signals."""
    return await playwright.chromium.launch(
        headless=config.headless,
        slow_mo=config.slow_mo_ms if config.slow_mo_ms > 0 else None,
        args=LAUNCH_ARGS,
    )


async def new_context(
    browser: Browser,
    locale: str = "en-US",
    timezone_id: str = "America/New_York",
    user_agent: str | None = None,
) -> BrowserContext:
    """Create a logged-out browser context with a desktop fingerprint.

    No cookies or storage state are loaded: the scraper only reads what a
    signed-out visitor sees.
    """
    return await browser.new_context(
        user_agent=user_agent or random_user_agent(),
        viewport={"width": 1920, "height": 1080},
        locale=locale,
        timezone_id=timezone_id,
        permissions=[],
        bypass_csp=True,
        extra_http_headers={
            "Accept-Language": "en-US,en;q=0.9",
            "DNT": "1",
            "Upgrade-Insecure-Requests": "1",
        },
    )


async def apply_stealth(context: BrowserContext) -> None:
    """Patch webdriver, plugins and languages before any page script runs."""
    await context.add_init_script(
        """
        Object.defineProperty(navigator, 'webdriver', { get: () => undefined });
        Object.defineProperty(navigator, 'plugins', { get: () => [1, 2, 3, 4, 5] });
        Object.defineProperty(navigator, 'languages', { get: () => ['en-US', 'en'] });
        window.chrome = { runtime: {} };
        """
    )


async def _close_quietly(resource, label: str, debug: bool) -> None:
    if resource is None:
        return
    try:
        await resource.close()
    except Exception as e:
        log.debug(debug, f"Closing {label} failed: {e}")


@asynccontextmanager
async def attempt_session(config: ScraperConfig) -> AsyncIterator[Page]:
    """Own every automation resource for exactly one attempt.

    A new driver, browser, context and page are created on entry and torn
    down on every exit path, so a flagged session never leaks into a retry.
    """
    browser = context = page = None
    playwright = await async_playwright().start()
    try:
        log.info("Starting browser instance...")
        browser = await launch_browser(playwright, config)
        context = await new_context(browser)
        await apply_stealth(context)
        page = await context.new_page()
        page.set_default_timeout(config.page_timeout_ms)
        page.set_default_navigation_timeout(config.navigation_timeout_ms)
        yield page
    finally:
        await _close_quietly(page, "page", config.debug)
        await _close_quietly(context, "context", config.debug)
        await _close_quietly(browser, "browser", config.debug)
        try:
            await playwright.stop()
        except Exception as e:
            log.debug(config.debug, f"Stopping Playwright failed: {e}")
