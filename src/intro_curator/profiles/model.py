"""Dataclass models for the profile lifecycle.

``Enrichment`` and the ranked ``TeammateMatch`` list are the success variants
of the two AI requests; :class:`Unavailable` is the shared failure variant.
Callers branch with ``isinstance`` instead of catching exceptions::

    outcome = await enrichment.refine(text)
    if isinstance(outcome, Unavailable):
        ...
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Optional

ExperienceLevel = Literal["beginner", "intermediate", "expert"]
EXPERIENCE_LEVELS: tuple[str, ...] = ("beginner", "intermediate", "expert")


@dataclass(frozen=True, slots=True)
class Unavailable:
    """An AI request produced nothing usable."""

    reason: str


@dataclass(frozen=True, slots=True)
class Enrichment:
    refined_intro: str
    role: str
    experience_level: ExperienceLevel
    color: str = ""


@dataclass(slots=True)
class TeammateCandidate:
    """Profile details recovered from a published card."""

    username: str = ""
    name: str = ""
    role: str = ""
    institution: str = ""
    interests: str = ""
    skills: str = ""
    goal: str = ""
    user_id: Optional[int] = None

    def is_eligible(self) -> bool:
        return bool(self.name and self.skills)


@dataclass(frozen=True, slots=True)
class TeammateMatch:
    username: str
    reason_for_match: str
    compatibility_score: float


@dataclass(slots=True)
class Submission:
    """One introduction to publish, from a channel post or ``/updateintro``."""

    user_id: int
    username: str
    text: str
    avatar_url: Optional[str] = None


SubmissionStatus = Literal["published", "incomplete", "failed"]


@dataclass(slots=True)
class SubmissionResult:
    status: SubmissionStatus
    missing_fields: list[str] = field(default_factory=list)
    message_id: Optional[int] = None
    enriched: bool = False


MatchStatus = Literal["matched", "no_profiles", "unavailable", "no_matches"]


@dataclass(slots=True)
class MatchReport:
    status: MatchStatus
    candidates_scanned: int = 0
    matches: list[TeammateMatch] = field(default_factory=list)
    # user ids of matched authors, in match order, when recoverable
    matched_user_ids: list[int] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class ProfileRecord:
    """Pointer from a member to their live profile card."""

    user_id: int
    message_id: int
    updated_ts: float = 0.0
