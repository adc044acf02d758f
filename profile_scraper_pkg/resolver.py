"""Field precedence: one ordered source chain per profile field.

The rule is the same for every field: walk the chain, take the first
non-empty candidate, never let a later source overwrite it.
"""
from typing import Dict, Iterable, List, Optional

from .models import Candidate


PRECEDENCE: Dict[str, tuple] = {
    "name": ("json_ld", "og_title", "dom_top_card", "dom_h1", "title_token"),
    "headline": (
        "json_ld",
        "dom_top_card",
        "linkedin_meta",
        "og_description",
        "meta_description",
        "title_token",
    ),
    "location": ("json_ld", "dom_top_card", "linkedin_meta"),
    "about": ("json_ld", "dom_top_card", "og_description", "meta_description"),
    "current_company": ("json_ld", "dom_top_card"),
    "education_top": ("json_ld", "dom_top_card"),
    "profile_image": ("json_ld", "og_image"),
}


def source_rank(field: str, source: str) -> Optional[int]:
    """Position of `source` in the field's chain, or None if it is not eligible."""
    chain = PRECEDENCE.get(field, ())
    return chain.index(source) if source in chain else None


def make_candidates(source: str, values: Dict[str, Optional[str]]) -> List[Candidate]:
    """Wrap a source's field -> value map as ranked candidates."""
    out = []
    for field, value in values.items():
        rank = source_rank(field, source)
        if rank is None or not isinstance(value, str):
            continue
        out.append(Candidate(field=field, value=value, source=source, rank=rank))
    return out


def _ranked(candidates: Iterable[Candidate]) -> List[Candidate]:
    out = []
    for c in candidates:
        rank = source_rank(c.field, c.source)
        if rank is not None:
            out.append(c.model_copy(update={"rank": rank}))
    return out


def resolve(candidates: Iterable[Candidate]) -> Dict[str, Optional[str]]:
    """Reduce candidates to one value per field.

    Candidates from the same source keep their arrival order, so the first
    one offered by a source wins within that source.
    """
    resolved: Dict[str, Optional[str]] = {field: None for field in PRECEDENCE}
    by_field: Dict[str, List[Candidate]] = {field: [] for field in PRECEDENCE}
    for c in _ranked(candidates):
        by_field[c.field].append(c)

    for field in PRECEDENCE:
        # sorted() is stable: equal ranks stay in arrival order
        for c in sorted(by_field[field], key=lambda c: c.rank):
            value = c.value.strip()
            if value:
                resolved[field] = value
                break
    return resolved


def winning_sources(candidates: Iterable[Candidate]) -> Dict[str, str]:
    """Which source supplied each resolved field (for debug output)."""
    candidates = list(candidates)
    resolved = resolve(candidates)
    sources = {}
    for c in sorted(_ranked(candidates), key=lambda c: c.rank):
        if c.field not in sources and resolved.get(c.field) == c.value.strip():
            sources[c.field] = c.source
    return sources
