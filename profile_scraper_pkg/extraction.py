from typing import Dict, List, Optional

from playwright.async_api import Page
from pydantic import BaseModel

from . import scraper_logging as log
from .models import Candidate, ExperienceEntry, PageMeta
from .parsing import parse_one_line_experience
from .resolver import make_candidates
from .sections import collect_all_sections, collect_top_card
from .structured_data import (
    decode_if_encoded,
    extract_json_ld,
    extract_meta_tags,
    extract_social_links,
    json_ld_candidates,
    meta_candidates,
)


TOP_CARD_FIELDS = ["name", "headline", "location", "about", "current_company", "education_top"]


class PageSignals(BaseModel):
    """Everything one attempt gathered before field resolution."""
    candidates: List[Candidate] = []
    sections: Dict[str, List[str]] = {}
    experience: List[ExperienceEntry] = []
    followers_and_connections: List[str] = []
    title: Optional[str] = None
    meta_description: Optional[str] = None
    social_links: List[str] = []
    structured_data: List[dict] = []


def read_markup(markup: str, debug: bool = False) -> PageSignals:
    """Signals from the raw markup alone: JSON-LD first, then tag metadata and links."""
    markup = decode_if_encoded(markup)
    candidates: List[Candidate] = []
    objects: List[dict] = []
    meta = PageMeta()
    links: List[str] = []
    try:
        objects = extract_json_ld(markup, debug)
        candidates.extend(json_ld_candidates(objects))
    except Exception as e:
        log.warn(f"Structured data extraction failed: {e}")
    try:
        meta = extract_meta_tags(markup)
        candidates.extend(meta_candidates(meta))
    except Exception as e:
        log.warn(f"Meta tag extraction failed: {e}")
    try:
        links = extract_social_links(markup)
    except Exception as e:
        log.warn(f"Social link extraction failed: {e}")
    log.info(f"Found {len(links)} social links")
    return PageSignals(
        candidates=candidates,
        title=meta.title,
        meta_description=meta.description,
        social_links=links,
        structured_data=objects,
    )


def top_card_candidates(card: dict) -> List[Candidate]:
    values = {field: card.get(field) for field in TOP_CARD_FIELDS}
    candidates = make_candidates("dom_top_card", values)
    candidates.extend(make_candidates("dom_h1", {"name": card.get("h1")}))
    return candidates


async def gather(page: Page, markup: str, debug: bool = False) -> PageSignals:
    """Collect candidates and section lists from markup and the live DOM.

    A failing source contributes nothing; the others still run.
    """
    from_markup = read_markup(markup, debug)
    candidates = list(from_markup.candidates)

    card = await collect_top_card(page, debug)
    candidates.extend(top_card_candidates(card))
    followers = [f for f in card.get("followers_and_connections") or [] if isinstance(f, str)]

    sections = await collect_all_sections(page, debug)
    experience_lines = sections.pop("experience", [])
    experience = parse_one_line_experience(experience_lines)
    log.info(f"Extracted {len(experience)} experience entries")

    return from_markup.model_copy(
        update={
            "candidates": candidates,
            "sections": sections,
            "experience": experience,
            "followers_and_connections": followers[:2],
        }
    )
