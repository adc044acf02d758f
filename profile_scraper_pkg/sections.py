from typing import Dict, List, Optional

from playwright.async_api import Page

from . import scraper_logging as log
from .models import RawSection
from .parsing import normalize_whitespace


SECTION_LABELS = [
    "Experience",
    "Education",
    "Skills",
    "Activity",
    "Certifications",
    "Projects",
    "Publications",
    "Honors",
    "Languages",
]

MIN_ITEM_LENGTH = 25

_COLLECT_SECTIONS_JS = """
() => Array.from(document.querySelectorAll('h2')).map(h => {
  const section = h.closest('section');
  return {
    heading: h.innerText || h.textContent || '',
    items: section
      ? Array.from(section.querySelectorAll('li')).map(li => li.innerText || li.textContent || '')
      : null,
  };
})
"""

# Logged-out top card. Each value is the first match's text, or null.
_COLLECT_TOP_CARD_JS = """
() => {
  const text = (sel) => {
    const el = document.querySelector(sel);
    return el ? (el.innerText || el.textContent || '').trim() || null : null;
  };
  const texts = (sel) => Array.from(document.querySelectorAll(sel))
    .map(e => (e.innerText || e.textContent || '').trim())
    .filter(Boolean);
  return {
    name: text('h1.top-card-layout__title') || text('.profile-card__name') || text('[data-test-id="profile-card-name"]'),
    h1: text('h1'),
    headline: text('h2.top-card-layout__headline') || text('.profile-card__headline') || text('[data-test-id="profile-card-headline"]'),
    location: text('.profile-info-subheader span') || text('.top-card-layout__first-subline') || text('[data-test-id="profile-card-location"]'),
    about: text('.core-section-container__content p') || text('[data-section="summary"]'),
    current_company: text('[data-section="currentPositionsDetails"] span'),
    education_top: text('[data-section="educationsDetails"] span'),
    followers_and_connections: texts('.not-first-middot span').slice(0, 2),
  };
}
"""


def select_section(sections: List[RawSection], label: str) -> List[str]:
    """Return the cleaned list items under the heading that matches `label`.

    Headings and the label compare after whitespace collapsing, trimming and
    case folding. No heading, or a heading outside any section, yields [].
    Items of 25 characters or fewer are dropped as navigation noise; exact
    duplicates are dropped keeping first-seen order.
    """
    wanted = normalize_whitespace(label).casefold()
    target: Optional[RawSection] = None
    for section in sections:
        if normalize_whitespace(section.heading).casefold() == wanted:
            target = section
            break
    if target is None or target.items is None:
        return []

    seen = set()
    out: List[str] = []
    for raw in target.items:
        item = normalize_whitespace(raw)
        if len(item) <= MIN_ITEM_LENGTH or item in seen:
            continue
        seen.add(item)
        out.append(item)
    return out


async def collect_sections(page: Page, debug: bool = False) -> List[RawSection]:
    """Snapshot every h2 and the list items of its enclosing section."""
    try:
        raw = await page.evaluate(_COLLECT_SECTIONS_JS)
    except Exception as e:
        log.debug(debug, f"Section snapshot failed: {e}")
        return []
    sections: List[RawSection] = []
    for entry in raw or []:
        try:
            sections.append(RawSection(**entry))
        except Exception:
            continue
    return sections


async def get_section_by_heading(page: Page, label: str, debug: bool = False) -> List[str]:
    return select_section(await collect_sections(page, debug), label)


async def collect_all_sections(page: Page, debug: bool = False) -> Dict[str, List[str]]:
    """Resolve every known section label against one DOM snapshot."""
    sections = await collect_sections(page, debug)
    return {label.lower(): select_section(sections, label) for label in SECTION_LABELS}


async def collect_top_card(page: Page, debug: bool = False) -> dict:
    """Read the logged-out top card fields in one evaluate call."""
    try:
        card = await page.evaluate(_COLLECT_TOP_CARD_JS)
    except Exception as e:
        log.debug(debug, f"Top card snapshot failed: {e}")
        return {}
    return card if isinstance(card, dict) else {}
