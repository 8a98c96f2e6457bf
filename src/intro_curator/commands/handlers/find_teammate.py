from __future__ import annotations

import logging

import discord
from discord import app_commands
from discord.ext import commands

from .. import register_cog, send_error
from intro_curator.memory import get_store
from intro_curator.profiles import lifecycle

logger = logging.getLogger(__name__)

SEARCH_FAILED = "❌ Sorry, there was an error finding teammates. Please try again."


@register_cog
class FindTeammate(commands.Cog):
    """Suggest teammates from published profile cards."""

    def __init__(self, bot: commands.Bot):
        self.bot = bot

    @app_commands.command(
        name="find_teammate",
        description="Find suitable teammates based on skills and interests",
    )
    @app_commands.describe(
        role_or_interest='What kind of teammate are you looking for? (e.g., "UI designer", "data scientist")'
    )
    async def find_teammate(self, interaction: discord.Interaction, role_or_interest: str) -> None:
        """Rank recent profiles against the caller's need and post the shortlist."""

        await interaction.response.defer(thinking=True)
        logger.info("/find_teammate from %s looking for: %s", interaction.user.name, role_or_interest)

        channel = await lifecycle.profile_channel(self.bot)
        report = await lifecycle.find_teammates(role_or_interest, channel, store=get_store())
        content, embed = lifecycle.compose_match_reply(role_or_interest, report)

        # The request text is echoed back verbatim; only matched members may be pinged.
        if embed is None:
            await interaction.edit_original_response(
                content=content, allowed_mentions=discord.AllowedMentions.none()
            )
            return

        await interaction.edit_original_response(
            content=content,
            embed=embed,
            allowed_mentions=discord.AllowedMentions(
                everyone=False,
                roles=False,
                users=[discord.Object(id=uid) for uid in report.matched_user_ids],
            ),
        )
        logger.info("Teammate matches sent for %r", role_or_interest)

    async def cog_app_command_error(
        self, interaction: discord.Interaction, error: app_commands.AppCommandError
    ) -> None:
        logger.error("Error executing /find_teammate", exc_info=error)
        await send_error(interaction, SEARCH_FAILED)
