"""Event listener Cog for Arisa.

Handles bot lifecycle (on_ready) and converts command failures into
user-facing error embeds.
"""

import discord
from discord.ext import commands

from arisa.bot.app_context import AppContext
from arisa.bot.command_helpers import error
from arisa.errors import BotError
from arisa.util.logger import get_logger

logger = get_logger("events_listener_cog")

UNEXPECTED_ERROR = "A :bug: showed up while running this command."


class EventsListenerCog(commands.Cog):
    """Cog containing bot lifecycle and command error handlers."""

    def __init__(self, discord_bot_instance, app: AppContext):
        self.bot = discord_bot_instance
        self.app = app
        logger.info("Events listener cog loaded")

    @commands.Cog.listener(name="on_ready")
    async def on_ready(self):
        """Set an initial presence and start the background schedulers.

        on_ready fires again after reconnects; both schedulers ignore a
        second ``start`` while their task is alive.
        """
        if self.bot.user:
            logger.info(f"Bot connected as {self.bot.user} (ID: {self.bot.user.id})")
            await self.app.status_scheduler.update_presence(self.bot)
        else:
            logger.warning("Bot partially connected, but user information not yet available.")

        logger.info("--==--==--==--==--==--==--==--==--==--==--==--==--==--==--==--==--")
        self.app.status_scheduler.start(self.bot)
        self.app.sweep_scheduler.start()

    @commands.Cog.listener(name="on_application_command_error")
    async def on_application_command_error(self, application_context: discord.ApplicationContext, exc: Exception):
        """Reply with an ephemeral error embed.

        :class:`BotError` subclasses carry their own user message; anything
        else is logged with its traceback and reported as a generic bug.
        """
        if isinstance(exc, commands.CommandNotFound):
            return

        original = exc.original if isinstance(exc, discord.ApplicationCommandInvokeError) else exc
        command_name = getattr(application_context.command, "name", "<unknown>")

        if isinstance(original, BotError):
            logger.debug("Command '%s' rejected: %s", command_name, original)
            message = original.user_message()
        else:
            logger.error(f"Error in command '{command_name}': {original}", exc_info=original)
            message = UNEXPECTED_ERROR

        embed = error(self.app, "Command Error", message)
        try:
            await application_context.respond(embed=embed, ephemeral=True)
        except discord.InteractionResponded:
            await application_context.followup.send(embed=embed, ephemeral=True)


def setup(discord_bot_instance, app: AppContext):
    discord_bot_instance.add_cog(EventsListenerCog(discord_bot_instance, app))
