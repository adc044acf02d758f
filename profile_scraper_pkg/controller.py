"""Page state controller and the bounded retry loop.

One attempt walks Loading -> PopupCheck -> AuthCheck -> Scrolling ->
Extracting -> Success inside its own browser session. Any failure ends the
attempt at its boundary; the loop waits a backoff proportional to the
attempt index and starts over with fresh resources.
"""
import asyncio
from typing import List, Optional

from playwright.async_api import Page
from pydantic import BaseModel

from . import scraper_logging as log
from .auth_wall import detect_auth_wall
from .browser import attempt_session
from .config import ScraperConfig
from .errors import AuthWallDetected, ExhaustedRetries, NavigationFailed
from .extraction import gather
from .models import AttemptOutcome, PageState, ProfileRecord, RetryAttempt
from .navigation import MIN_HTML_LENGTH, navigate, scroll_page
from .popups import dismiss_popup
from .resolver import resolve, winning_sources
from .response import build_record, build_summary


class RetryState(BaseModel):
    """Accumulator threaded through the attempts."""
    attempts: List[RetryAttempt] = []
    record: Optional[ProfileRecord] = None

    @property
    def succeeded(self) -> bool:
        return self.record is not None


def _enter(state: PageState, debug_tags: List[str], config: ScraperConfig) -> None:
    log.add_debug(debug_tags, state.value)
    log.debug(config.debug, f"State -> {state.value}")


async def _popup_check(page: Page, debug_tags: List[str], config: ScraperConfig) -> None:
    _enter(PageState.POPUP_CHECK, debug_tags, config)
    closed = await dismiss_popup(page, config)
    if closed:
        log.add_debug(debug_tags, f"Popup:{closed}")


async def run_attempt(
    page: Page,
    url: str,
    config: ScraperConfig,
    attempt_index: int,
    debug_tags: List[str],
) -> ProfileRecord:
    """Drive one page to a usable state and extract the record.

    Raises NavigationFailed or AuthWallDetected; anything else raised here
    is treated as a generic attempt error by the caller.
    """
    _enter(PageState.LOADING, debug_tags, config)
    await navigate(page, url, config)

    await _popup_check(page, debug_tags, config)

    _enter(PageState.AUTH_CHECK, debug_tags, config)
    walled, signals = await detect_auth_wall(page)
    if walled:
        debug_tags.extend(signals)
        raise AuthWallDetected(signals)
    log.debug(config.debug, "No authentication wall detected")

    # the "view full profile" prompt often shows up only after the first check
    await _popup_check(page, debug_tags, config)

    _enter(PageState.SCROLLING, debug_tags, config)
    await scroll_page(page, config.scroll_steps, config.scroll_settle_ms, config.debug)

    await _popup_check(page, debug_tags, config)

    _enter(PageState.EXTRACTING, debug_tags, config)
    log.info("Retrieving page content...")
    markup = await page.content()
    if len(markup or "") < MIN_HTML_LENGTH:
        raise NavigationFailed("Retrieved HTML content is too short or empty")
    log.info(f"Retrieved {len(markup)} characters of HTML")

    signals = await gather(page, markup, config.debug)
    resolved = resolve(signals.candidates)
    for field, source in winning_sources(signals.candidates).items():
        log.debug(config.debug, f"{field} from {source}")
    for field, value in resolved.items():
        if value is None:
            log.warn(f"Field not found: {field}")

    record = build_record(url, resolved, signals, attempt_index, len(markup))
    _enter(PageState.SUCCESS, debug_tags, config)
    log.info("Extraction summary:")
    for line in build_summary(record):
        log.info(f"  {line}")
    return record


async def _attempt(
    state: RetryState,
    attempt_index: int,
    url: str,
    config: ScraperConfig,
    session_factory,
    sleep,
) -> RetryState:
    backoff = 0.0
    if attempt_index > 0:
        backoff = config.retry_backoff_ms * attempt_index / 1000
        log.warn(f"Retry attempt {attempt_index}/{config.max_retries} after {backoff:.1f}s...")
        await sleep(backoff)

    debug_tags: List[str] = []
    record = None
    outcome = AttemptOutcome.SUCCESS
    detail = ""
    try:
        async with session_factory(config) as page:
            try:
                record = await run_attempt(page, url, config, attempt_index, debug_tags)
            except Exception:
                if config.debug:
                    files = await log.save_debug_files(page, f"attempt{attempt_index}", config.debug_dir)
                    if files:
                        log.debug(config.debug, f"Debug files: {files}")
                raise
    except AuthWallDetected as e:
        outcome, detail = AttemptOutcome.AUTH_WALL_DETECTED, str(e)
        log.warn("Authentication wall detected, closing browser and retrying...")
    except NavigationFailed as e:
        outcome, detail = AttemptOutcome.NAVIGATION_FAILED, str(e)
        log.error(str(e))
    except Exception as e:
        outcome, detail = AttemptOutcome.ERROR, f"{type(e).__name__}: {e}"
        log.error(f"Error during scraping: {detail}")

    log.add_debug(debug_tags, PageState.SUCCESS.value if record else PageState.RETRY.value)
    attempt = RetryAttempt(
        attempt_index=attempt_index,
        outcome=outcome,
        elapsed_backoff=backoff,
        detail=detail,
        debug=debug_tags,
    )
    return RetryState(attempts=state.attempts + [attempt], record=record)


async def scrape_profile(
    url: str,
    config: ScraperConfig,
    session_factory=attempt_session,
    sleep=asyncio.sleep,
) -> RetryState:
    """Run sequential attempts until one succeeds or the budget is spent.

    Raises ExhaustedRetries with the full attempt history when no attempt
    produced a record.
    """
    log.info("=" * 70)
    log.info("LinkedIn Public Profile Scraper")
    log.info(f"Target URL: {url}")
    log.info(f"Headless mode: {config.headless}")
    log.info(f"Max retries: {config.max_retries}")
    log.info("=" * 70)

    state = RetryState()
    for attempt_index in range(config.max_retries):
        state = await _attempt(state, attempt_index, url, config, session_factory, sleep)
        if state.succeeded:
            return state

    log.error(f"{PageState.FAILED.value.upper()}: scraping failed after {config.max_retries} attempt(s)")
    raise ExhaustedRetries(state.attempts)
