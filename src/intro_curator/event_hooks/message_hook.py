import logging

import discord

from intro_curator.config import core
from intro_curator.memory import get_store
from intro_curator.profiles import lifecycle, template
from intro_curator.profiles.model import Submission

logger = logging.getLogger(__name__)

POST_FAILED = "⚠️ Sorry, there was an error processing your introduction. Please try again."


async def handle(client: discord.Client, message: discord.Message):
    """Publish introductions posted in the intro channel as profile cards."""

    # 1) Only human posts in the intro channel
    if message.author.bot:
        return
    if message.channel.id != core.INTRO_CHANNEL_ID:
        return

    logger.info("New message from %s in intro channel", message.author.name)

    submission = Submission(
        user_id=message.author.id,
        username=message.author.name,
        text=message.content,
        avatar_url=message.author.display_avatar.url,
    )

    # 2) Run the lifecycle; the profile channel lookup itself can fail
    try:
        channel = await lifecycle.profile_channel(client)
        result = await lifecycle.submit_introduction(submission, channel, store=get_store())
    except Exception:
        logger.exception("Error posting profile for %s", message.author.name)
        await message.reply(POST_FAILED)
        return

    # 3) Acknowledge
    if result.status == "incomplete":
        await message.reply(template.incomplete_notice(result.missing_fields))
    elif result.status == "failed":
        await message.reply(POST_FAILED)
    else:
        try:
            await message.add_reaction("✅")
        except discord.HTTPException as exc:
            logger.warning("Could not react to intro %s: %s", message.id, exc)
