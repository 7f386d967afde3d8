"""Message listener Cog for Arisa: answers "how do i ..." questions."""

import discord
from discord.ext import commands

from arisa.util.logger import get_logger

logger = get_logger("message_listener_cog")

TRIGGER = "how do i "
REPLY = "very carefully"


class MessageListenerCog(commands.Cog):
    def __init__(self, discord_bot_instance):
        self.bot = discord_bot_instance
        logger.info("Message listener cog loaded")

    @commands.Cog.listener(name="on_message")
    async def on_message(self, message: discord.Message):
        if message.author.bot:
            return
        if TRIGGER not in (message.content or "").lower():
            return
        try:
            await message.reply(REPLY)
        except discord.HTTPException as exc:
            logger.warning("Failed to send '%s' reply: %s", REPLY, exc)


def setup(discord_bot_instance):
    discord_bot_instance.add_cog(MessageListenerCog(discord_bot_instance))
