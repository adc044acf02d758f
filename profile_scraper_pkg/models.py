from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_validator


class PageState(str, Enum):
    LOADING = "loading"
    POPUP_CHECK = "popup_check"
    AUTH_CHECK = "auth_check"
    SCROLLING = "scrolling"
    EXTRACTING = "extracting"
    SUCCESS = "success"
    RETRY = "retry"
    FAILED = "failed"


class AttemptOutcome(str, Enum):
    SUCCESS = "success"
    AUTH_WALL_DETECTED = "auth_wall_detected"
    NAVIGATION_FAILED = "navigation_failed"
    ERROR = "error"


class ExperienceEntry(BaseModel):
    """One experience line split into role, company and optional dates.

    The split is heuristic; `role` and `company` together always rebuild the
    line once `duration` and `total_time` are removed.
    """
    role: str
    company: str
    duration: Optional[str] = None
    total_time: Optional[str] = None


class Candidate(BaseModel):
    """A single value offered for one field by one source."""
    model_config = ConfigDict(frozen=True)

    field: str
    value: str
    source: str
    rank: int = 0


class RetryAttempt(BaseModel):
    model_config = ConfigDict(frozen=True)

    attempt_index: int
    outcome: AttemptOutcome
    elapsed_backoff: float = 0.0
    detail: str = ""
    debug: List[str] = []


class PageMeta(BaseModel):
    """Tag-based page metadata pulled from the raw markup."""
    title: Optional[str] = None
    description: Optional[str] = None
    og_title: Optional[str] = None
    og_description: Optional[str] = None
    og_image: Optional[str] = None
    og_url: Optional[str] = None
    og_type: Optional[str] = None
    linkedin_headline: Optional[str] = None
    linkedin_location: Optional[str] = None


class RawSection(BaseModel):
    """A heading and the list-item texts of its enclosing section.

    `items` is None when the heading has no enclosing section.
    """
    heading: str
    items: Optional[List[str]] = None


class ProfileRecord(BaseModel):
    """Finalized profile for one successful attempt.

    Scalar fields are either a non-empty string or None; blank strings are
    turned into None on construction.
    """
    model_config = ConfigDict(frozen=True)

    source_url: str
    scraped_at: str
    name: Optional[str] = None
    headline: Optional[str] = None
    location: Optional[str] = None
    about: Optional[str] = None
    current_company: Optional[str] = None
    education_top: Optional[str] = None
    profile_image: Optional[str] = None
    title: Optional[str] = None
    meta_description: Optional[str] = None
    followers_and_connections: List[str] = []
    social_links: List[str] = []
    experience: List[ExperienceEntry] = []
    education: List[str] = []
    skills: List[str] = []
    activity: List[str] = []
    certifications: List[str] = []
    projects: List[str] = []
    publications: List[str] = []
    honors: List[str] = []
    languages: List[str] = []
    structured_data: List[dict] = []
    retry_count: int = 0
    html_length: int = 0

    @field_validator(
        "name",
        "headline",
        "location",
        "about",
        "current_company",
        "education_top",
        "profile_image",
        "title",
        "meta_description",
        mode="before",
    )
    @classmethod
    def _blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("followers_and_connections")
    @classmethod
    def _at_most_two(cls, value: List[str]) -> List[str]:
        return value[:2]
