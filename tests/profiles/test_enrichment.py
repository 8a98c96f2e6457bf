import json

import pytest
from unittest.mock import AsyncMock

from intro_curator.profiles import enrichment
from intro_curator.profiles.model import Enrichment, TeammateCandidate, Unavailable


def _analysis(**overrides):
    payload = {
        "refined_intro": "Ada builds numerical tools in Python.",
        "role": "Data Engineer",
        "experience_level": "expert",
        "color": "#ED4245",
    }
    payload.update(overrides)
    return json.dumps(payload)


def _candidates():
    return [
        TeammateCandidate(username="ada", name="Ada", skills="Python"),
        TeammateCandidate(username="grace", name="Grace", skills="COBOL"),
    ]


@pytest.fixture
def ai_enabled(monkeypatch):
    monkeypatch.setattr(enrichment.ai, "ENABLED", True)
    monkeypatch.setattr(enrichment.local_llm, "USE_LOCAL", False)


def test_parse_enrichment_accepts_conforming_payload():
    outcome = enrichment.parse_enrichment(_analysis())

    assert outcome == Enrichment(
        refined_intro="Ada builds numerical tools in Python.",
        role="Data Engineer",
        experience_level="expert",
        color="#ED4245",
    )


@pytest.mark.parametrize(
    "raw",
    [
        "not json",
        _analysis(experience_level="wizard"),
        _analysis(refined_intro=""),
        json.dumps({"refined_intro": "x", "role": "y"}),
        json.dumps(["a list"]),
    ],
)
def test_parse_enrichment_rejects_nonconforming_payload(raw):
    assert isinstance(enrichment.parse_enrichment(raw), Unavailable)


def test_extract_json_array_strips_fences_and_chatter():
    raw = 'Sure! Here you go:\n```json\n[{"username": "ada"}]\n```\nGood luck!'

    assert enrichment.extract_json_array(raw) == [{"username": "ada"}]


def test_extract_json_array_raises_without_array():
    with pytest.raises(ValueError):
        enrichment.extract_json_array("no matches, sorry")


def test_parse_matches_truncates_to_three():
    raw = json.dumps(
        [
            {"username": f"user{i}", "reason_for_match": "good", "compatibility_score": 10 - i}
            for i in range(5)
        ]
    )

    matches = enrichment.parse_matches(raw, limit=3)

    assert [m.username for m in matches] == ["user0", "user1", "user2"]


def test_parse_matches_rejects_out_of_range_score():
    raw = json.dumps([{"username": "ada", "reason_for_match": "x", "compatibility_score": 42}])

    assert isinstance(enrichment.parse_matches(raw), Unavailable)


def test_build_rank_messages_lists_every_candidate():
    [message] = enrichment.build_rank_messages(_candidates(), "backend dev")

    assert '"backend dev"' in message["content"]
    assert "Profile 1:\nUsername: ada" in message["content"]
    assert "Profile 2:\nUsername: grace" in message["content"]
    assert "Institution:" in message["content"]


@pytest.mark.asyncio
async def test_refine_unavailable_when_not_configured(monkeypatch):
    monkeypatch.setattr(enrichment.ai, "ENABLED", False)
    chat = AsyncMock()
    monkeypatch.setattr(enrichment.oai, "chat", chat)

    outcome = await enrichment.refine("🎓 Name: Ada")

    assert outcome == Unavailable("AI not configured")
    chat.assert_not_called()


@pytest.mark.asyncio
async def test_refine_requests_strict_schema(monkeypatch, ai_enabled):
    chat = AsyncMock(return_value=_analysis())
    monkeypatch.setattr(enrichment.oai, "chat", chat)

    outcome = await enrichment.refine("🎓 Name: Ada")

    assert isinstance(outcome, Enrichment)
    response_format = chat.call_args.kwargs["response_format"]
    assert response_format["type"] == "json_schema"
    assert response_format["json_schema"]["strict"] is True
    assert response_format["json_schema"]["schema"] is enrichment.REFINE_SCHEMA


@pytest.mark.asyncio
async def test_refine_network_failure_is_unavailable(monkeypatch, ai_enabled):
    monkeypatch.setattr(enrichment.oai, "chat", AsyncMock(side_effect=ConnectionError("boom")))

    outcome = await enrichment.refine("🎓 Name: Ada")

    assert isinstance(outcome, Unavailable)
    assert "boom" in outcome.reason


@pytest.mark.asyncio
async def test_refine_uses_local_model_when_enabled(monkeypatch, ai_enabled):
    monkeypatch.setattr(enrichment.local_llm, "USE_LOCAL", True)
    local_chat = AsyncMock(return_value=_analysis())
    remote_chat = AsyncMock()
    monkeypatch.setattr(enrichment.ollama, "chat", local_chat)
    monkeypatch.setattr(enrichment.oai, "chat", remote_chat)

    outcome = await enrichment.refine("🎓 Name: Ada")

    assert isinstance(outcome, Enrichment)
    assert local_chat.call_args.kwargs["format"] is enrichment.REFINE_SCHEMA
    remote_chat.assert_not_called()


@pytest.mark.asyncio
async def test_rank_tolerates_wrapped_response(monkeypatch, ai_enabled):
    wrapped = (
        "```json\n"
        '[{"username": "ada", "reason_for_match": "Knows Python", "compatibility_score": 9}]\n'
        "```"
    )
    chat = AsyncMock(return_value=wrapped)
    monkeypatch.setattr(enrichment.oai, "chat", chat)

    outcome = await enrichment.rank(_candidates(), "python dev")

    assert [m.username for m in outcome] == ["ada"]
    assert outcome[0].compatibility_score == 9
    assert chat.call_args.kwargs["response_format"] is None


@pytest.mark.asyncio
async def test_rank_never_returns_more_than_three(monkeypatch, ai_enabled):
    many = json.dumps(
        [{"username": f"u{i}", "reason_for_match": "r", "compatibility_score": 5} for i in range(6)]
    )
    monkeypatch.setattr(enrichment.oai, "chat", AsyncMock(return_value=many))

    outcome = await enrichment.rank(_candidates(), "anyone", limit=10)

    assert len(outcome) == 3


@pytest.mark.asyncio
async def test_rank_garbage_is_unavailable(monkeypatch, ai_enabled):
    monkeypatch.setattr(enrichment.oai, "chat", AsyncMock(return_value="I cannot help with that."))

    assert isinstance(await enrichment.rank(_candidates(), "anyone"), Unavailable)


@pytest.mark.asyncio
async def test_rank_without_candidates_skips_request(monkeypatch, ai_enabled):
    chat = AsyncMock()
    monkeypatch.setattr(enrichment.oai, "chat", chat)

    assert await enrichment.rank([], "anyone") == []
    chat.assert_not_called()
