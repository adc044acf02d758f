import re
from typing import Iterable, List, Optional

from .models import ExperienceEntry


DATE_RANGE_RE = re.compile(
    r"(Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)?\s?\d{4}\s-\s(Present|\w+\s?\d{4})"
)
TOTAL_TIME_RE = re.compile(r"\d+\s+years?\s*\d*\s*months?", re.I)


def normalize_whitespace(text: Optional[str]) -> str:
    """Collapse runs of whitespace to one space and trim. Idempotent."""
    if not text:
        return ""
    return re.sub(r"\s+", " ", text).strip()


def _first_match(pattern: re.Pattern, text: str) -> Optional[str]:
    m = pattern.search(text)
    # The optional month group lets a bare year match with its leading space.
    return m.group(0).strip() if m else None


def _split_index(tokens: List[str]) -> int:
    # Digits and punctuation are their own upper case, so they also start a company.
    for i in range(1, len(tokens)):
        head = tokens[i][0]
        if head == head.upper():
            return i
    return 1


def parse_experience_line(line: str) -> ExperienceEntry:
    """Split one free-text experience line into role, company and dates.

    Best effort: the first date range and the first cumulative duration are
    cut out, then the remainder is split before the first capitalized token
    after the first word (or after the first word when there is none).
    """
    text = normalize_whitespace(line)
    duration = _first_match(DATE_RANGE_RE, text)
    total_time = _first_match(TOTAL_TIME_RE, text)

    residual = text
    if duration:
        residual = residual.replace(duration, "", 1)
    if total_time:
        residual = residual.replace(total_time, "", 1)

    tokens = residual.split()
    split_at = _split_index(tokens)
    return ExperienceEntry(
        role=" ".join(tokens[:split_at]),
        company=" ".join(tokens[split_at:]),
        duration=duration,
        total_time=total_time,
    )


def parse_one_line_experience(raw_lines: Iterable[str]) -> List[ExperienceEntry]:
    return [parse_experience_line(line) for line in raw_lines]
