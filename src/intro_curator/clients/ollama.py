"""Helpers for interacting with a local Ollama server"""
from __future__ import annotations

from typing import Any

from intro_curator.config import local_llm
from ollama import AsyncClient

client = AsyncClient(host=local_llm.LOCAL_SERVER_URL)

async def chat(
        messages: list[dict],
        model: str = local_llm.LOCAL_MODEL_ID,
        *,
        format: dict[str, Any] | str | None = None,
    ) -> str:
    """
    Send a prompt to the local Ollama server and return its reply.

    ``format`` may be ``"json"`` or a JSON schema dict to constrain output.
    """
    kwargs: dict[str, Any] = {"model": model, "messages": messages}
    if format is not None:
        kwargs["format"] = format
    resp = await client.chat(**kwargs)

    return (resp.message.content or "").strip()
