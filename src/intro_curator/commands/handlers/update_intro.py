from __future__ import annotations

import logging

import discord
from discord import app_commands
from discord.ext import commands

from .. import register_cog, send_error
from intro_curator.config import core
from intro_curator.memory import get_store
from intro_curator.profiles import lifecycle, template
from intro_curator.profiles.model import Submission

logger = logging.getLogger(__name__)

UPDATE_FAILED = "❌ Sorry, there was an error updating your profile. Please try again."


@register_cog
class UpdateIntro(commands.Cog):
    """Republish the caller's profile card from a fresh introduction."""

    def __init__(self, bot: commands.Bot):
        self.bot = bot

    @app_commands.command(name="updateintro", description="Update your introduction and profile")
    @app_commands.describe(intro="Your new introduction following the required format")
    async def updateintro(self, interaction: discord.Interaction, intro: str) -> None:
        """Validate ``intro`` and replace the caller's current profile card."""

        await interaction.response.defer(ephemeral=True, thinking=True)
        user = interaction.user
        logger.info("/updateintro from %s", user.name)

        # Slash command options are single-line; split inline labels back out.
        submission = Submission(
            user_id=user.id,
            username=user.name,
            text=template.unfold_inline(intro),
            avatar_url=user.display_avatar.url,
        )

        channel = await lifecycle.profile_channel(self.bot)
        result = await lifecycle.submit_introduction(submission, channel, store=get_store())

        if result.status == "incomplete":
            content = template.incomplete_notice(
                result.missing_fields, lead="Your introduction is incomplete."
            )
        elif result.status == "failed":
            content = UPDATE_FAILED
        else:
            content = (
                "✅ Your profile has been updated successfully! "
                f"Check <#{core.PROFILE_CHANNEL_ID}>"
            )
        await interaction.edit_original_response(content=content)

    async def cog_app_command_error(
        self, interaction: discord.Interaction, error: app_commands.AppCommandError
    ) -> None:
        logger.error("Error executing /updateintro", exc_info=error)
        await send_error(interaction, UPDATE_FAILED)
