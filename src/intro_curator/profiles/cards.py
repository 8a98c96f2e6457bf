"""
Discord embeds for profile cards and teammate matches.

Everything here is pure: no network or storage access. Cards are also parsed
back into :class:`TeammateCandidate` when scanning the profile channel, so the
labels below double as the card format.
"""

from __future__ import annotations

import datetime
import random
import re
from typing import Mapping, Optional, Sequence

import discord

from intro_curator.profiles.model import Enrichment, TeammateCandidate, TeammateMatch
from intro_curator.profiles.template import REQUIRED_FIELDS

CARD_TITLE = "🎓 Member Introduction"
FOOTER_PREFIX = "👤 Added by "
MATCH_FOOTER = "🧩 Powered by the community teammate matcher 🤖"

BRAND_COLOR = 0x5865F2

# Cosmetic only; basic cards pick one at random.
PALETTE: tuple[int, ...] = (
    0x5865F2,
    0x57F287,
    0xFEE75C,
    0xEB459E,
    0xED4245,
    0x3498DB,
    0x9B59B6,
    0x1ABC9C,
)

LEVEL_COLORS: dict[str, int] = {
    "beginner": 0x57F287,
    "intermediate": 0xFEE75C,
    "expert": 0xED4245,
}

MATCH_BEST_COLOR = 0x00FF7F
MATCH_GOOD_COLOR = 0xFFD700
MATCH_BASE_COLOR = 0x1E90FF

_BLANK = "\u200b"

_HEX_RE = re.compile(r"^#?(?P<hex>[0-9a-fA-F]{6})$")

# Discord embed limits
_FIELD_VALUE_MAX = 1024
_TITLE_MAX = 256
_DESCRIPTION_MAX = 4096


def _clip(text: str, limit: int) -> str:
    text = text or _BLANK
    return text if len(text) <= limit else text[: limit - 1] + "…"


def _now() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def _finish(embed: discord.Embed, author_name: str, avatar_url: Optional[str]) -> discord.Embed:
    embed.set_footer(text=f"{FOOTER_PREFIX}{author_name}")
    if avatar_url:
        embed.set_thumbnail(url=avatar_url)
    return embed


def parse_hex_color(value: str | None) -> Optional[int]:
    """Return ``value`` as an int if it is a ``#RRGGBB`` (or bare ``RRGGBB``) string."""
    match = _HEX_RE.match((value or "").strip())
    return int(match.group("hex"), 16) if match else None


def enrichment_color(enrichment: Enrichment) -> int:
    """Explicit hex color, else the experience-level color, else brand blurple."""
    explicit = parse_hex_color(enrichment.color)
    if explicit is not None:
        return explicit
    return LEVEL_COLORS.get(enrichment.experience_level.lower(), BRAND_COLOR)


def match_color(matches: Sequence[TeammateMatch]) -> int:
    top = max((m.compatibility_score for m in matches), default=0)
    if top >= 9:
        return MATCH_BEST_COLOR
    if top >= 7:
        return MATCH_GOOD_COLOR
    return MATCH_BASE_COLOR


# ----------------------------- Profile cards ----------------------------- #


def render_basic(
    fields: Mapping[str, str],
    author_name: str,
    avatar_url: Optional[str] = None,
) -> discord.Embed:
    """Card with one line per template field and a random palette color."""
    embed = discord.Embed(title=CARD_TITLE, color=random.choice(PALETTE), timestamp=_now())
    for tf in REQUIRED_FIELDS:
        embed.add_field(name=tf.label, value=_clip(fields[tf.name], _FIELD_VALUE_MAX), inline=False)
    return _finish(embed, author_name, avatar_url)


def render_enriched(
    fields: Mapping[str, str],
    enrichment: Enrichment,
    author_name: str,
    avatar_url: Optional[str] = None,
) -> discord.Embed:
    """
    Card led by the AI summary, with role and level highlighted inline.

    ``Role / Study`` is left out because the AI role replaces it.
    """
    embed = discord.Embed(
        title=CARD_TITLE,
        description=_clip(enrichment.refined_intro, _DESCRIPTION_MAX),
        color=enrichment_color(enrichment),
        timestamp=_now(),
    )
    embed.add_field(name="💼 Role", value=_clip(enrichment.role, _FIELD_VALUE_MAX), inline=True)
    embed.add_field(name="📊 Level", value=enrichment.experience_level.capitalize(), inline=True)
    for tf in REQUIRED_FIELDS:
        if tf.name == "Role / Study":
            continue
        embed.add_field(name=tf.label, value=_clip(fields[tf.name], _FIELD_VALUE_MAX), inline=False)
    return _finish(embed, author_name, avatar_url)


# ----------------------------- Match card ----------------------------- #


def _format_score(score: float) -> str:
    return f"{score:g}"


def render_matches(
    need: str,
    candidate_count: int,
    matches: Sequence[TeammateMatch],
) -> discord.Embed:
    shown = list(matches)[:3]
    embed = discord.Embed(
        title=_clip(f'🤝 Best Teammate Matches for "{need}"', _TITLE_MAX),
        description=f"Analyzed {candidate_count} profiles and found your top teammate matches!",
        color=match_color(shown),
        timestamp=_now(),
    )
    for match in shown:
        embed.add_field(
            name=f"🧑 {match.username}",
            value=_clip(
                f"💬 {match.reason_for_match}\n"
                f"💯 Compatibility: **{_format_score(match.compatibility_score)}/10**",
                _FIELD_VALUE_MAX,
            ),
            inline=False,
        )
    embed.set_footer(text=MATCH_FOOTER)
    return embed


# ----------------------------- Card parsing ----------------------------- #

# Checked in order; first substring hit on the lower-cased field label wins.
_LABEL_KEYS: tuple[tuple[str, str], ...] = (
    ("name", "name"),
    ("role", "role"),
    ("institution", "institution"),
    ("interests", "interests"),
    ("skills", "skills"),
    ("goal", "goal"),
)


def is_profile_card(embed: discord.Embed) -> bool:
    return bool(embed.title) and "Member Introduction" in embed.title


def candidate_from_embed(embed: discord.Embed) -> Optional[TeammateCandidate]:
    """
    Rebuild the profile shown on a card.

    :returns: ``None`` for embeds that are not profile cards.
    """
    if not is_profile_card(embed):
        return None

    candidate = TeammateCandidate()
    footer_text = (embed.footer.text if embed.footer else None) or ""
    if footer_text.startswith(FOOTER_PREFIX):
        candidate.username = footer_text[len(FOOTER_PREFIX):].strip()

    for embed_field in embed.fields:
        label = (embed_field.name or "").lower()
        for needle, attr in _LABEL_KEYS:
            if needle in label:
                setattr(candidate, attr, (embed_field.value or "").replace(_BLANK, "").strip())
                break

    return candidate


__all__ = [
    "CARD_TITLE",
    "PALETTE",
    "LEVEL_COLORS",
    "BRAND_COLOR",
    "parse_hex_color",
    "enrichment_color",
    "match_color",
    "render_basic",
    "render_enriched",
    "render_matches",
    "is_profile_card",
    "candidate_from_embed",
]
