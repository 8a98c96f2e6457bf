"""
Profile lifecycle: publish introductions and match teammates.

Submission flow (first failure ends it)::

    validate -> retire previous card -> refine (best effort) -> render
             -> publish -> save record

The store is only written after Discord accepts the new card, so a failed
publish never leaves a record pointing at nothing. No lock is held across
awaits; two rapid submissions from one member resolve as last write wins.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

import discord

from intro_curator.config import core
from intro_curator.errors import PublishError
from intro_curator.memory import ProfileStore
from intro_curator.profiles import cards, enrichment, template
from intro_curator.profiles.model import (
    MatchReport,
    Submission,
    SubmissionResult,
    TeammateCandidate,
    TeammateMatch,
    Unavailable,
)

logger = logging.getLogger(__name__)


async def profile_channel(client: discord.Client) -> discord.abc.Messageable:
    """Return the configured profile channel, hitting the API on a cache miss."""
    channel = client.get_channel(core.PROFILE_CHANNEL_ID)
    if channel is None:
        channel = await client.fetch_channel(core.PROFILE_CHANNEL_ID)
    return channel


# ----------------------------- Submission ----------------------------- #


async def _retire_card(channel, message_id: int, username: str) -> bool:
    """
    Delete a member's previous card.

    :returns: ``False`` if the card was already gone or could not be deleted.
    """
    try:
        old_message = await channel.fetch_message(message_id)
        await old_message.delete()
    except discord.HTTPException as exc:
        logger.info(
            "Could not delete old profile %s for %s (may have been removed manually): %s",
            message_id,
            username,
            exc,
        )
        return False

    logger.info("Deleted old profile %s for %s", message_id, username)
    return True


async def _publish(channel, card: discord.Embed) -> discord.Message:
    try:
        return await channel.send(embed=card)
    except discord.HTTPException as exc:
        raise PublishError(f"Discord rejected the profile card: {exc}") from exc


async def submit_introduction(
    submission: Submission,
    channel,
    *,
    store: ProfileStore,
) -> SubmissionResult:
    """
    Publish ``submission`` as the member's only profile card.

    :param submission: Author and raw introduction text.
    :param channel: Profile channel to publish into.
    :param store: Profile record store.
    :returns: ``incomplete`` with the missing field names, ``failed`` when
        publishing failed, or ``published`` with the new card id.
    """
    checked = template.validate(submission.text)
    if not checked.is_valid:
        logger.info(
            "Incomplete intro from %s; missing: %s",
            submission.username,
            ", ".join(checked.missing_fields),
        )
        return SubmissionResult("incomplete", missing_fields=list(checked.missing_fields))

    existing = await store.get(submission.user_id)
    if existing is not None:
        await _retire_card(channel, existing.message_id, submission.username)

    outcome = await enrichment.refine(submission.text)
    if isinstance(outcome, Unavailable):
        logger.info("Using standard card for %s (%s)", submission.username, outcome.reason)
        card = cards.render_basic(checked.fields, submission.username, submission.avatar_url)
    else:
        card = cards.render_enriched(checked.fields, outcome, submission.username, submission.avatar_url)

    try:
        posted = await _publish(channel, card)
    except PublishError:
        logger.exception("Failed to publish profile for %s", submission.username)
        return SubmissionResult("failed")

    try:
        await store.save(submission.user_id, posted.id)
    except Exception:
        # An unrecorded card could never be retired; take it back down.
        logger.exception("Failed to record profile %s for %s", posted.id, submission.username)
        await _retire_card(channel, posted.id, submission.username)
        return SubmissionResult("failed")

    logger.info("Posted profile %s for %s", posted.id, submission.username)
    return SubmissionResult(
        "published",
        message_id=posted.id,
        enriched=not isinstance(outcome, Unavailable),
    )


# ----------------------------- Teammate matching ----------------------------- #


async def collect_candidates(
    channel,
    *,
    store: ProfileStore,
    limit: Optional[int] = None,
) -> list[TeammateCandidate]:
    """
    Scan recent profile cards and return eligible candidates (name + skills).

    Author ids are recovered from the store's card ownership records.
    """
    scan_limit = limit if limit is not None else core.PROFILE_SCAN_LIMIT
    found: list[tuple[int, TeammateCandidate]] = []

    async for message in channel.history(limit=scan_limit):
        if not message.embeds:
            continue
        candidate = cards.candidate_from_embed(message.embeds[0])
        if candidate is not None and candidate.is_eligible():
            found.append((message.id, candidate))

    owners = await store.owners(mid for mid, _ in found)
    for mid, candidate in found:
        candidate.user_id = owners.get(mid)

    logger.info("Scanned profile channel: %d eligible profile(s)", len(found))
    return [candidate for _, candidate in found]


def resolve_candidate(
    match: TeammateMatch, candidates: Sequence[TeammateCandidate]
) -> Optional[TeammateCandidate]:
    """Find the candidate a match refers to: exact username, then substring."""
    needle = match.username.lower()
    if not needle:
        return None
    for candidate in candidates:
        if candidate.username and candidate.username.lower() == needle:
            return candidate
    for candidate in candidates:
        if needle in candidate.name.lower() or (
            candidate.username and needle in candidate.username.lower()
        ):
            return candidate
    return None


async def find_teammates(
    need: str,
    channel,
    *,
    store: ProfileStore,
) -> MatchReport:
    """Rank published profiles against ``need``."""
    candidates = await collect_candidates(channel, store=store)
    if not candidates:
        return MatchReport("no_profiles")

    outcome = await enrichment.rank(candidates, need)
    if isinstance(outcome, Unavailable):
        return MatchReport("unavailable", candidates_scanned=len(candidates))
    if not outcome:
        return MatchReport("no_matches", candidates_scanned=len(candidates))

    matched_ids: list[int] = []
    for match in outcome:
        candidate = resolve_candidate(match, candidates)
        if candidate is not None and candidate.user_id is not None and candidate.user_id not in matched_ids:
            matched_ids.append(candidate.user_id)

    return MatchReport(
        "matched",
        candidates_scanned=len(candidates),
        matches=list(outcome),
        matched_user_ids=matched_ids,
    )


def compose_match_reply(need: str, report: MatchReport) -> tuple[Optional[str], Optional[discord.Embed]]:
    """Turn ``report`` into the ``(content, embed)`` pair sent to the requester."""
    if report.status == "no_profiles":
        return "⚠️ No introductions found in the profiles channel.", None
    if report.status == "unavailable":
        return "⚠️ Sorry, there was an error analyzing teammate matches. Please try again.", None
    if report.status == "no_matches":
        return (
            f'😔 No suitable matches found for "{need}". Try broadening your search criteria.',
            None,
        )

    embed = cards.render_matches(need, report.candidates_scanned, report.matches)
    content = None
    if report.matched_user_ids:
        mentions = " ".join(f"<@{uid}>" for uid in report.matched_user_ids)
        content = f"{mentions}\n👋 You've been matched as potential teammates for **{need}**!"
    return content, embed


__all__ = [
    "profile_channel",
    "submit_introduction",
    "collect_candidates",
    "resolve_candidate",
    "find_teammates",
    "compose_match_reply",
]
