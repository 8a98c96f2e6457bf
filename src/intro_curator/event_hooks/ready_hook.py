import discord

from intro_curator.config import ai, core, local_llm

import logging

logger = logging.getLogger(__name__)

async def handle(client: discord.Client):
    """Log the active configuration once the gateway session is up."""
    logger.info(f"Logged in as {client.user.name} (ID: {client.user.id})")
    logger.info("Listening to introductions in channel: %s", core.INTRO_CHANNEL_ID)
    logger.info("Posting profiles to channel: %s", core.PROFILE_CHANNEL_ID)

    if not ai.ENABLED:
        logger.warning("AI enrichment disabled; profiles use the standard card")
    elif local_llm.USE_LOCAL:
        logger.info("AI enrichment enabled via local model %s", local_llm.LOCAL_MODEL_ID)
    else:
        logger.info(
            "AI enrichment enabled (refine=%s, match=%s)",
            ai.REFINE_MODEL_ID,
            ai.MATCH_MODEL_ID,
        )
