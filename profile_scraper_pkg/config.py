import random
from typing import Literal, Mapping

from pydantic import BaseModel, ConfigDict


DEFAULT_OUTPUT_FILE = "linkedin_public_profile.json"


def _env_bool(env: Mapping[str, str], key: str, default: bool) -> bool:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ["1", "true", "yes"]


def _env_int(env: Mapping[str, str], key: str, default: int) -> int:
    try:
        return int(env.get(key, ""))
    except ValueError:
        return default


class ScraperConfig(BaseModel):
    """Run configuration, read once at process entry and passed explicitly.

    Every component takes this object as an argument; nothing reads the
    environment after `from_env()` returns.
    """
    model_config = ConfigDict(frozen=True)

    headless: bool = False
    max_retries: int = 3
    page_timeout_ms: int = 30000
    navigation_timeout_ms: int = 60000
    output_file: str = DEFAULT_OUTPUT_FILE
    output_mode: Literal["append", "single"] = "append"
    debug: bool = False
    retry_backoff_ms: int = 2000
    post_load_delay_ms: int = 3000
    scroll_steps: int = 5
    scroll_settle_ms: int = 1500
    slow_mo_ms: int = 0
    debug_dir: str = "/tmp"

    @classmethod
    def from_env(cls, env: Mapping[str, str]) -> "ScraperConfig":
        """Build the config from environment-style variables.

        Missing or unparseable values fall back to defaults; `MAX_RETRIES`
        is clamped to at least one attempt.
        """
        defaults = cls()
        mode = env.get("OUTPUT_MODE", defaults.output_mode).strip().lower()
        return cls(
            headless=_env_bool(env, "HEADLESS", defaults.headless),
            max_retries=max(1, _env_int(env, "MAX_RETRIES", defaults.max_retries)),
            page_timeout_ms=_env_int(env, "TIMEOUT", defaults.page_timeout_ms),
            navigation_timeout_ms=_env_int(env, "NAVIGATION_TIMEOUT", defaults.navigation_timeout_ms),
            output_file=env.get("OUTPUT_FILE") or defaults.output_file,
            output_mode=mode if mode in ("append", "single") else defaults.output_mode,
            debug=_env_bool(env, "DEBUG", defaults.debug),
            retry_backoff_ms=_env_int(env, "RETRY_BACKOFF_MS", defaults.retry_backoff_ms),
            scroll_steps=_env_int(env, "SCROLL_STEPS", defaults.scroll_steps),
            scroll_settle_ms=_env_int(env, "SCROLL_SETTLE_MS", defaults.scroll_settle_ms),
            slow_mo_ms=_env_int(env, "SCRAPER_SLOW_MO_MS", defaults.slow_mo_ms),
            debug_dir=env.get("SCRAPER_DEBUG_DIR") or defaults.debug_dir,
        )


def user_agents():
    """Return a curated pool of desktop Chrome user agents.

    A fresh attempt picks a new agent so a flagged fingerprint is not carried
    into the retry.
    """
    return [
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36",
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36",
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/130.0.0.0 Safari/537.36",
        "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36",
    ]


def random_user_agent():
    """Pick a random user agent from the pool."""
    return random.choice(user_agents())
