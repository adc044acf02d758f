from typing import List


class ScraperError(Exception):
    """Base class for failures raised by the profile scraper."""


class InvalidInputUrl(ScraperError):
    """The target URL is not a profile URL; raised before any browser work."""


class NavigationFailed(ScraperError):
    """The page did not load, or loaded with implausibly short content."""


class AuthWallDetected(ScraperError):
    """The page demands sign-in; the attempt must restart with fresh resources."""

    def __init__(self, signals: List[str]):
        self.signals = signals
        super().__init__("Authentication wall detected: " + ", ".join(signals))


class MalformedStructuredDataBlock(ScraperError):
    """One embedded JSON-LD block failed to parse. Never escapes the scanner."""


class ExhaustedRetries(ScraperError):
    """Every attempt failed. Carries the attempt history for the final report."""

    def __init__(self, attempts: list):
        self.attempts = attempts
        super().__init__(f"Failed to scrape profile after {len(attempts)} attempt(s)")
