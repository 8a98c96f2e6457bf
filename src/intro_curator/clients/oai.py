"""Helpers for interacting with OpenAI API"""
from __future__ import annotations

from typing import Any

from openai import AsyncOpenAI

from intro_curator.config import core, ai

import logging
logger = logging.getLogger(__name__)

_aoai: AsyncOpenAI | None = None


def client() -> AsyncOpenAI:
    """
    Return the shared async client.

    Created on first use because ``AsyncOpenAI`` refuses to construct without
    a key, and the key is optional for this bot.
    """
    global _aoai
    if _aoai is None:
        if not core.OPENAI_API_KEY:
            raise RuntimeError("OpenAI API key not configured")
        _aoai = AsyncOpenAI(api_key=core.OPENAI_API_KEY)
    return _aoai


async def chat(
    messages: list[dict],
    model: str = ai.REFINE_MODEL_ID,
    *,
    response_format: dict[str, Any] | None = None,
    temperature: float | None = None,
) -> str:
    """
    Send a chat completion request to OpenAI and return the response text.

    ``response_format`` is passed through untouched, e.g.::

        {"type": "json_schema",
         "json_schema": {"name": "intro_analysis", "strict": True, "schema": {...}}}
    """
    kwargs: dict[str, Any] = {"model": model, "messages": messages}
    if response_format is not None:
        kwargs["response_format"] = response_format
    if temperature is not None:
        kwargs["temperature"] = temperature

    resp = await client().chat.completions.create(**kwargs)
    return (resp.choices[0].message.content or "").strip()
