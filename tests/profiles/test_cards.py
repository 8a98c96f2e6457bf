import discord
import pytest

from intro_curator.profiles import cards
from intro_curator.profiles.model import Enrichment, TeammateMatch
from intro_curator.profiles.template import validate


@pytest.fixture
def fields(full_intro):
    return validate(full_intro).fields


def _enrichment(**overrides):
    values = dict(
        refined_intro="Ada writes numerical software.",
        role="Research Engineer",
        experience_level="expert",
        color="",
    )
    values.update(overrides)
    return Enrichment(**values)


def test_basic_card_lists_fields_in_template_order(fields):
    embed = cards.render_basic(fields, "ada", "https://cdn.example/ada.png")

    assert embed.title == cards.CARD_TITLE
    assert [f.name for f in embed.fields] == [
        "🎓 Name",
        "💼 Role / Study",
        "🤖 Interests",
        "🧠 Skills",
        "🚀 Goal",
    ]
    assert embed.fields[0].value == "Ada Lovelace"
    assert embed.footer.text == "👤 Added by ada"
    assert embed.thumbnail.url == "https://cdn.example/ada.png"
    assert embed.timestamp is not None


def test_basic_card_has_no_enrichment_content(fields):
    embed = cards.render_basic(fields, "ada")

    assert embed.description is None
    assert not {"💼 Role", "📊 Level"} & {f.name for f in embed.fields}
    assert embed.color.value in cards.PALETTE
    assert not embed.thumbnail


def test_enriched_card_highlights_role_and_level(fields):
    embed = cards.render_enriched(fields, _enrichment(), "ada")

    assert embed.description == "Ada writes numerical software."
    names = [f.name for f in embed.fields]
    assert names == ["💼 Role", "📊 Level", "🎓 Name", "🤖 Interests", "🧠 Skills", "🚀 Goal"]
    assert embed.fields[0].inline and embed.fields[1].inline
    assert embed.fields[1].value == "Expert"


def test_enriched_expert_without_color_uses_expert_color(fields):
    embed = cards.render_enriched(fields, _enrichment(color=""), "ada")

    assert embed.color.value == cards.LEVEL_COLORS["expert"] == 0xED4245


def test_enriched_explicit_hex_color_wins(fields):
    embed = cards.render_enriched(fields, _enrichment(color="#3498DB"), "ada")

    assert embed.color.value == 0x3498DB


@pytest.mark.parametrize("color", ["blue", "#12345", "#GGGGGG"])
def test_enriched_invalid_color_falls_back_to_level(fields, color):
    embed = cards.render_enriched(
        fields, _enrichment(color=color, experience_level="beginner"), "ada"
    )

    assert embed.color.value == 0x57F287


def test_unknown_level_falls_back_to_brand_color():
    assert cards.enrichment_color(_enrichment(experience_level="guru")) == cards.BRAND_COLOR


@pytest.mark.parametrize(
    "top, expected",
    [(10, cards.MATCH_BEST_COLOR), (9, cards.MATCH_BEST_COLOR), (8.5, cards.MATCH_GOOD_COLOR),
     (7, cards.MATCH_GOOD_COLOR), (6.9, cards.MATCH_BASE_COLOR)],
)
def test_match_color_tiers_on_top_score(top, expected):
    matches = [TeammateMatch("a", "r", 3), TeammateMatch("b", "r", top)]

    assert cards.match_color(matches) == expected


def test_render_matches_shows_at_most_three():
    matches = [TeammateMatch(f"user{i}", f"reason {i}", 8) for i in range(5)]

    embed = cards.render_matches("UI designer", 12, matches)

    assert embed.title == '🤝 Best Teammate Matches for "UI designer"'
    assert "12 profiles" in embed.description
    assert len(embed.fields) == 3
    assert embed.fields[0].name == "🧑 user0"
    assert embed.fields[0].value == "💬 reason 0\n💯 Compatibility: **8/10**"


def test_candidate_recovered_from_published_card(fields):
    card = cards.render_basic(fields, "ada")
    # Cards come back from Discord as dict-backed embeds
    reloaded = discord.Embed.from_dict(card.to_dict())

    candidate = cards.candidate_from_embed(reloaded)

    assert candidate.username == "ada"
    assert candidate.name == "Ada Lovelace"
    assert candidate.role == "Mathematics, University of London"
    assert candidate.skills == "Python, numerical methods"
    assert candidate.is_eligible()


def test_candidate_from_enriched_card_uses_ai_role(fields):
    card = cards.render_enriched(fields, _enrichment(), "ada")

    candidate = cards.candidate_from_embed(card)

    assert candidate.role == "Research Engineer"
    assert candidate.goal == "Build a hackathon project"


def test_non_profile_embed_is_ignored():
    assert cards.candidate_from_embed(discord.Embed(title="Server rules")) is None
    assert cards.candidate_from_embed(discord.Embed()) is None
