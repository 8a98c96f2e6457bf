"""
Best-effort AI enrichment for introductions and teammate matching.

Both requests make a single attempt. Any failure (no key configured, network
error, malformed JSON, schema violation) comes back as :class:`Unavailable`
so callers can fall back without a try/except of their own.
"""
from __future__ import annotations

import json
import logging
import re
from typing import Any, Sequence

import jsonschema

from intro_curator.clients import oai, ollama
from intro_curator.config import ai, core, local_llm
from intro_curator.profiles.model import (
    EXPERIENCE_LEVELS,
    Enrichment,
    TeammateCandidate,
    TeammateMatch,
    Unavailable,
)

logger = logging.getLogger(__name__)

# ----------------------------- Schemas ----------------------------- #

REFINE_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "refined_intro": {"type": "string"},
        "role": {"type": "string"},
        "experience_level": {"type": "string", "enum": list(EXPERIENCE_LEVELS)},
        "color": {"type": "string"},
    },
    "required": ["refined_intro", "role", "experience_level", "color"],
    "additionalProperties": False,
}

RANK_SCHEMA: dict[str, Any] = {
    "type": "array",
    "items": {
        "type": "object",
        "properties": {
            "username": {"type": "string", "minLength": 1},
            "reason_for_match": {"type": "string"},
            "compatibility_score": {"type": "number", "minimum": 1, "maximum": 10},
        },
        "required": ["username", "reason_for_match", "compatibility_score"],
    },
}

# Strict structured outputs reject string length keywords, so the non-empty
# checks live only in the local validation copy.
_REFINE_VALIDATION_SCHEMA: dict[str, Any] = {
    **REFINE_SCHEMA,
    "properties": {
        **REFINE_SCHEMA["properties"],
        "refined_intro": {"type": "string", "minLength": 1},
        "role": {"type": "string", "minLength": 1},
    },
}

_FENCE_RE = re.compile(r"```(?:json)?\s*", re.IGNORECASE)

# ----------------------------- Prompts ----------------------------- #


def build_refine_messages(intro_text: str) -> list[dict]:
    prompt = (
        "Analyze this user introduction for clarity, skill level, and tone.\n"
        "Then refine it into a short, clean version for a Discord profile embed.\n"
        'Based on the content, assign a suitable "Role" title (e.g., AI Researcher, '
        "Automation Builder, Student, Developer, etc.).\n\n"
        f"User Introduction:\n{intro_text}\n\n"
        "Respond with JSON containing:\n"
        "- refined_intro: A short refined summary (2-3 sentences max)\n"
        "- role: An appropriate role title based on their skills and interests\n"
        '- experience_level: Either "beginner", "intermediate", or "expert"\n'
        '- color: A hex color code (e.g., "#3498DB") that matches their experience level'
    )
    return [{"role": "user", "content": prompt}]


def _candidate_block(idx: int, candidate: TeammateCandidate) -> str:
    return (
        f"Profile {idx}:\n"
        f"Username: {candidate.username}\n"
        f"Name: {candidate.name}\n"
        f"Role: {candidate.role}\n"
        f"Institution: {candidate.institution}\n"
        f"Interests: {candidate.interests}\n"
        f"Skills: {candidate.skills}\n"
        f"Goal: {candidate.goal}"
    )


def build_rank_messages(
    candidates: Sequence[TeammateCandidate], need: str, limit: int = 3
) -> list[dict]:
    profiles_text = "\n\n".join(
        _candidate_block(idx, c) for idx, c in enumerate(candidates, start=1)
    )
    prompt = (
        "You are an AI teammate matching assistant. Based on the following user "
        f"profiles from a community, find the top {limit} members who would be great "
        f'teammates for someone looking for "{need}".\n\n'
        "Consider:\n"
        "- Complementarity in skills (do they have skills that match the need?)\n"
        "- Shared interests and alignment with the request\n"
        "- Experience level and goals\n"
        "- Potential for collaboration\n\n"
        f"User Profiles:\n{profiles_text}\n\n"
        f"Return a JSON array with at most {limit} matches (fewer if fewer suitable "
        "candidates exist). Each match should have:\n"
        "- username: The person's username\n"
        "- reason_for_match: A brief, specific reason why they're a good match (1-2 sentences)\n"
        "- compatibility_score: A number from 1-10 indicating match quality\n\n"
        "Format: Return ONLY valid JSON array, nothing else."
    )
    return [{"role": "user", "content": prompt}]


# ----------------------------- Parsing ----------------------------- #


def extract_json_array(raw: str) -> Any:
    """
    Parse the JSON array inside ``raw``.

    Strips Markdown code fences and any chatter around the outermost
    ``[...]`` before decoding.

    :raises ValueError: if no array can be decoded.
    """
    text = _FENCE_RE.sub("", raw or "").replace("```", "").strip()
    first = text.find("[")
    last = text.rfind("]")
    if first != -1 and last > first:
        text = text[first : last + 1]
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Response is not a JSON array: {exc}") from exc


def parse_enrichment(raw: str) -> Enrichment | Unavailable:
    try:
        payload = json.loads(raw)
        jsonschema.validate(instance=payload, schema=_REFINE_VALIDATION_SCHEMA)
    except (json.JSONDecodeError, TypeError) as exc:
        return Unavailable(f"malformed JSON: {exc}")
    except jsonschema.ValidationError as exc:
        return Unavailable(f"schema violation: {exc.message}")

    return Enrichment(
        refined_intro=payload["refined_intro"].strip(),
        role=payload["role"].strip(),
        experience_level=payload["experience_level"],
        color=payload["color"].strip(),
    )


def parse_matches(raw: str, limit: int = 3) -> list[TeammateMatch] | Unavailable:
    try:
        payload = extract_json_array(raw)
        jsonschema.validate(instance=payload, schema=RANK_SCHEMA)
    except ValueError as exc:
        return Unavailable(str(exc))
    except jsonschema.ValidationError as exc:
        return Unavailable(f"schema violation: {exc.message}")

    return [
        TeammateMatch(
            username=item["username"].strip(),
            reason_for_match=item["reason_for_match"].strip(),
            compatibility_score=item["compatibility_score"],
        )
        for item in payload[: max(0, limit)]
    ]


# ----------------------------- Requests ----------------------------- #


async def _complete(
    messages: list[dict], *, model: str, schema: dict[str, Any], name: str, strict: bool
) -> str:
    if local_llm.USE_LOCAL:
        return await ollama.chat(messages, model=local_llm.LOCAL_MODEL_ID, format=schema)

    response_format = None
    if strict:
        response_format = {
            "type": "json_schema",
            "json_schema": {"name": name, "strict": True, "schema": schema},
        }
    return await oai.chat(messages, model=model, response_format=response_format)


async def refine(intro_text: str) -> Enrichment | Unavailable:
    """
    Ask the model for a refined summary, role, experience level and color.

    :param intro_text: The member's raw introduction.
    :returns: :class:`Enrichment`, or :class:`Unavailable` on any failure.
    """
    if not ai.ENABLED:
        return Unavailable("AI not configured")

    logger.info("Sending intro to %s for analysis", "local model" if local_llm.USE_LOCAL else ai.REFINE_MODEL_ID)
    try:
        raw = await _complete(
            build_refine_messages(intro_text),
            model=ai.REFINE_MODEL_ID,
            schema=REFINE_SCHEMA,
            name="intro_analysis",
            strict=True,
        )
    except Exception as e:
        logger.warning("Intro analysis request failed: %s", e)
        return Unavailable(f"request failed: {e}")

    logger.debug("Intro analysis raw response: %s", raw)
    outcome = parse_enrichment(raw)
    if isinstance(outcome, Unavailable):
        logger.warning("Discarding intro analysis: %s", outcome.reason)
    return outcome


async def rank(
    candidates: Sequence[TeammateCandidate],
    need: str,
    *,
    limit: int | None = None,
) -> list[TeammateMatch] | Unavailable:
    """
    Rank ``candidates`` against ``need``.

    :param candidates: Eligible profiles from the profile channel.
    :param need: Free-text description of the teammate wanted.
    :param limit: Max matches kept; defaults to ``core.MAX_MATCHES`` and never exceeds 3.
    :returns: Up to ``limit`` matches in model order, or :class:`Unavailable`.
    """
    cap = min(3, limit if limit is not None else core.MAX_MATCHES)
    if not candidates:
        return []
    if not ai.ENABLED:
        return Unavailable("AI not configured")

    logger.info("Ranking %d candidate(s) for %r", len(candidates), need)
    try:
        raw = await _complete(
            build_rank_messages(candidates, need, cap),
            model=ai.MATCH_MODEL_ID,
            schema=RANK_SCHEMA,
            name="teammate_matches",
            strict=False,
        )
    except Exception as e:
        logger.warning("Teammate matching request failed: %s", e)
        return Unavailable(f"request failed: {e}")

    outcome = parse_matches(raw, cap)
    if isinstance(outcome, Unavailable):
        logger.warning("Discarding teammate matches: %s", outcome.reason)
    return outcome


__all__ = [
    "REFINE_SCHEMA",
    "RANK_SCHEMA",
    "build_refine_messages",
    "build_rank_messages",
    "extract_json_array",
    "parse_enrichment",
    "parse_matches",
    "refine",
    "rank",
]
