from __future__ import annotations

from profile_scraper_pkg.models import Candidate
from profile_scraper_pkg.resolver import (
    PRECEDENCE,
    make_candidates,
    resolve,
    source_rank,
    winning_sources,
)


def _c(field: str, source: str, value: str) -> Candidate:
    return Candidate(field=field, value=value, source=source)


def test_structured_name_beats_social_preview_title() -> None:
    candidates = [
        _c("name", "og_title", "Jane Doe | LinkedIn"),
        _c("name", "title_token", "Jane Doe"),
        _c("name", "json_ld", "Jane Q. Doe"),
    ]

    assert resolve(candidates)["name"] == "Jane Q. Doe"


def test_higher_priority_value_wins_regardless_of_arrival_order() -> None:
    for field, chain in PRECEDENCE.items():
        top, *rest = chain
        candidates = [_c(field, source, f"from {source}") for source in reversed(rest)]
        candidates.append(_c(field, top, "winner"))

        assert resolve(candidates)[field] == "winner"


def test_empty_values_fall_through_to_next_source() -> None:
    candidates = [
        _c("headline", "json_ld", "   "),
        _c("headline", "dom_top_card", ""),
        _c("headline", "og_description", "Staff Engineer at Acme"),
        _c("headline", "meta_description", "ignored"),
    ]

    assert resolve(candidates)["headline"] == "Staff Engineer at Acme"


def test_first_candidate_within_one_source_wins() -> None:
    candidates = [_c("name", "json_ld", "First"), _c("name", "json_ld", "Second")]

    assert resolve(candidates)["name"] == "First"


def test_unresolved_fields_are_absent_not_empty() -> None:
    resolved = resolve([_c("name", "dom_h1", "Jane")])

    assert resolved["name"] == "Jane"
    assert resolved["location"] is None
    assert set(resolved) == set(PRECEDENCE)


def test_sources_outside_a_chain_are_ignored() -> None:
    candidates = [_c("location", "og_title", "Not a location"), _c("unknown_field", "json_ld", "x")]

    resolved = resolve(candidates)

    assert resolved["location"] is None
    assert "unknown_field" not in resolved
    assert source_rank("location", "og_title") is None


def test_make_candidates_ranks_by_chain_position() -> None:
    candidates = make_candidates("dom_top_card", {"name": "Jane", "location": None, "headline": "Eng"})

    assert {(c.field, c.rank) for c in candidates} == {("name", 2), ("headline", 1)}


def test_winning_sources_reports_the_chosen_source() -> None:
    candidates = [_c("name", "dom_h1", "Jane"), _c("name", "og_title", "Jane Doe")]

    assert winning_sources(candidates) == {"name": "og_title"}
