from datetime import datetime, timezone
from typing import Dict, List, Optional

from .models import ProfileRecord


SCALAR_FIELDS = [
    "name",
    "headline",
    "location",
    "about",
    "current_company",
    "education_top",
    "profile_image",
]

SECTION_FIELDS = [
    "education",
    "skills",
    "activity",
    "certifications",
    "projects",
    "publications",
    "honors",
    "languages",
]


def build_record(
    url: str,
    resolved: Dict[str, Optional[str]],
    signals,
    retry_count: int,
    html_length: int,
    scraped_at: Optional[str] = None,
) -> ProfileRecord:
    """Compose the immutable record for one successful attempt.

    `signals` is the attempt's PageSignals; resolved scalars that came back
    empty stay absent.
    """
    return ProfileRecord(
        source_url=url,
        scraped_at=scraped_at or datetime.now(timezone.utc).isoformat(),
        **{field: resolved.get(field) for field in SCALAR_FIELDS},
        title=signals.title,
        meta_description=signals.meta_description,
        followers_and_connections=signals.followers_and_connections,
        social_links=signals.social_links,
        structured_data=signals.structured_data,
        experience=signals.experience,
        retry_count=retry_count,
        html_length=html_length,
        **{label: signals.sections.get(label, []) for label in SECTION_FIELDS},
    )


def build_summary(record: ProfileRecord) -> List[str]:
    """One line per field: found value (truncated) or 'not found'."""
    lines = []
    data = record.model_dump()
    for field in SCALAR_FIELDS:
        value = data.get(field)
        if value:
            short = value[:60] + ("..." if len(value) > 60 else "")
            lines.append(f"✓ {field}: {short}")
        else:
            lines.append(f"✗ {field}: not found")
    for field in ["experience", "education", "skills", "certifications", "social_links"]:
        entries = data.get(field) or []
        if entries:
            lines.append(f"✓ {field}: {len(entries)} entries found")
        else:
            lines.append(f"✗ {field}: not found")
    return lines
