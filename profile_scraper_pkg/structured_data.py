"""Embedded metadata extraction from raw page markup.

Markup is scanned with tolerant patterns instead of a parser: logged-out
profile pages are often truncated or irregular, and a bad block must cost
us that block only.
"""
import html as html_lib
import json
import re
from typing import Iterator, List, Optional

from . import scraper_logging as log
from .errors import MalformedStructuredDataBlock
from .models import Candidate, PageMeta


PROFILE_TYPES = {"Person", "ProfilePage"}

JSON_LD_RE = re.compile(
    r"<script\b[^>]*\btype\s*=\s*[\"']?application/ld\+json[\"']?[^>]*>(.*?)</script\s*>",
    re.I | re.S,
)
TITLE_RE = re.compile(r"<title[^>]*>([^<]*)</title\s*>", re.I)
META_TAG_RE = re.compile(r"<meta\b[^>]*>", re.I)
ATTR_RE = re.compile(r"([\w:.-]+)\s*=\s*(?:\"([^\"]*)\"|'([^']*)')", re.S)
TITLE_SPLIT_RE = re.compile(r"[|\-–—]")

# twitter/x, then linkedin, then github; first-seen order within the page
SOCIAL_LINK_RES = [
    re.compile(r"<a\b[^>]*\bhref\s*=\s*[\"'](https?://(?:www\.)?(?:twitter|x)\.com/[^\"']*)[\"']", re.I),
    re.compile(r"<a\b[^>]*\bhref\s*=\s*[\"'](https?://(?:[\w-]+\.)?linkedin\.com/[^\"']*)[\"']", re.I),
    re.compile(r"<a\b[^>]*\bhref\s*=\s*[\"'](https?://(?:www\.)?github\.com/[^\"']*)[\"']", re.I),
]

# meta key -> PageMeta attribute
META_KEYS = {
    "description": "description",
    "og:title": "og_title",
    "og:description": "og_description",
    "og:image": "og_image",
    "og:url": "og_url",
    "og:type": "og_type",
    "linkedin:headline": "linkedin_headline",
    "linkedin:location": "linkedin_location",
}


def clean_text(text: Optional[str]) -> str:
    """Decode entities, collapse whitespace and trim."""
    if not text:
        return ""
    return re.sub(r"\s+", " ", html_lib.unescape(text)).strip()


def decode_if_encoded(markup: str) -> str:
    """Unescape markup that arrived entity-encoded (e.g. copied from a viewer)."""
    if "&lt;" in markup and "&gt;" in markup and "<script" not in markup.lower():
        return html_lib.unescape(markup)
    return markup


def _types_of(obj: dict) -> set:
    declared = obj.get("@type")
    if isinstance(declared, str):
        return {declared}
    if isinstance(declared, list):
        return {t for t in declared if isinstance(t, str)}
    return set()


def _flatten(payload) -> Iterator[dict]:
    if isinstance(payload, list):
        for item in payload:
            yield from _flatten(item)
    elif isinstance(payload, dict):
        graph = payload.get("@graph")
        if isinstance(graph, list):
            yield from _flatten(graph)
        main_entity = payload.get("mainEntity")
        if isinstance(main_entity, dict) and "Person" in _types_of(main_entity):
            yield main_entity
        yield payload


def _parse_block(raw: str):
    try:
        return json.loads(raw.strip())
    except (ValueError, TypeError) as e:
        raise MalformedStructuredDataBlock(str(e)) from e


def extract_json_ld(markup: str, debug: bool = False) -> List[dict]:
    """Return every Person/ProfilePage object embedded as JSON-LD.

    Blocks that fail to parse are skipped and scanning continues.
    """
    found: List[dict] = []
    for match in JSON_LD_RE.finditer(markup or ""):
        try:
            payload = _parse_block(match.group(1))
        except MalformedStructuredDataBlock as e:
            log.debug(debug, f"Skipping malformed JSON-LD block: {e}")
            continue
        for obj in _flatten(payload):
            types = _types_of(obj)
            log.debug(debug, f"JSON-LD @type: {sorted(types) or 'undefined'}")
            if types & PROFILE_TYPES:
                found.append(obj)
    log.debug(debug, f"Extracted {len(found)} relevant JSON-LD objects")
    return found


def _meta_attrs(tag: str) -> dict:
    attrs = {}
    for key, dq, sq in ATTR_RE.findall(tag):
        attrs[key.lower()] = dq if dq or not sq else sq
    return attrs


def extract_meta_tags(markup: str) -> PageMeta:
    """Pull the title, description and social-preview tags.

    `name`/`property` and `content` are matched in any order; the first tag
    for a key wins.
    """
    values = {}
    title = TITLE_RE.search(markup or "")
    if title and clean_text(title.group(1)):
        values["title"] = clean_text(title.group(1))

    for tag in META_TAG_RE.findall(markup or ""):
        attrs = _meta_attrs(tag)
        key = (attrs.get("property") or attrs.get("name") or "").lower()
        field = META_KEYS.get(key)
        if not field or field in values:
            continue
        content = clean_text(attrs.get("content"))
        if content:
            values[field] = content
    return PageMeta(**values)


def extract_social_links(markup: str) -> List[str]:
    """Collect twitter/x, linkedin and github anchor targets, de-duplicated."""
    links: List[str] = []
    for pattern in SOCIAL_LINK_RES:
        for raw in pattern.findall(markup or ""):
            link = html_lib.unescape(raw).strip()
            if link and link not in links:
                links.append(link)
    return links


def _first_name_of(value) -> Optional[str]:
    if isinstance(value, list):
        value = value[0] if value else None
    if isinstance(value, dict):
        return value.get("name")
    if isinstance(value, str):
        return value
    return None


def _image_of(value) -> Optional[str]:
    if isinstance(value, list):
        value = value[0] if value else None
    if isinstance(value, dict):
        return value.get("url") or value.get("contentUrl")
    if isinstance(value, str):
        return value
    return None


def _location_of(address) -> Optional[str]:
    if isinstance(address, list):
        address = address[0] if address else None
    if isinstance(address, str):
        return address
    if not isinstance(address, dict):
        return None
    country = address.get("addressCountry")
    if isinstance(country, dict):
        country = country.get("name")
    parts = [address.get("addressLocality"), address.get("addressRegion"), country]
    parts = [clean_text(p) for p in parts if isinstance(p, str) and p.strip()]
    return ", ".join(parts) or None


def json_ld_candidates(objects: List[dict]) -> List[Candidate]:
    """Map structured-data subjects onto profile fields."""
    out: List[Candidate] = []
    for obj in objects:
        pairs = [
            ("name", obj.get("name")),
            ("headline", _first_name_of(obj.get("jobTitle"))),
            ("about", obj.get("description")),
            ("profile_image", _image_of(obj.get("image"))),
            ("location", _location_of(obj.get("address"))),
            ("current_company", _first_name_of(obj.get("worksFor"))),
            ("education_top", _first_name_of(obj.get("alumniOf"))),
        ]
        for field, value in pairs:
            if isinstance(value, str) and clean_text(value):
                out.append(Candidate(field=field, value=clean_text(value), source="json_ld"))
    return out


def title_tokens(title: Optional[str]) -> dict:
    """Derive name/headline guesses from a 'Name - Headline | Site' title."""
    if not title:
        return {}
    tokens = {}
    name = clean_text(TITLE_SPLIT_RE.split(title)[0])
    if name:
        tokens["name"] = name
    if "-" in title:
        parts = [p.strip() for p in title.split("-")]
        headline = clean_text(parts[1].split("|")[0]) if len(parts) >= 2 else ""
        if headline:
            tokens["headline"] = headline
    return tokens


def meta_candidates(meta: PageMeta) -> List[Candidate]:
    """Offer tag metadata (and title-derived guesses) as field candidates."""
    pairs = [
        ("name", "og_title", meta.og_title),
        ("headline", "linkedin_meta", meta.linkedin_headline),
        ("headline", "og_description", meta.og_description),
        ("headline", "meta_description", meta.description),
        ("about", "og_description", meta.og_description),
        ("about", "meta_description", meta.description),
        ("location", "linkedin_meta", meta.linkedin_location),
        ("profile_image", "og_image", meta.og_image),
    ]
    pairs.extend((field, "title_token", value) for field, value in title_tokens(meta.title).items())
    return [
        Candidate(field=field, value=value, source=source)
        for field, source, value in pairs
        if value
    ]
