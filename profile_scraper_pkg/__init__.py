"""Scraper package providing modular components for the public profile scraper.

Each module owns one concern (page state, structured data, section heuristics,
field precedence, persistence) so the controller can recover from a bad
source without losing the rest of the record.
"""
