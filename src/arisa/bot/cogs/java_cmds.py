"""
Java cog: JDK Enhancement Proposals and JVM bytecode reference.

- /jep scrapes openjdk.org and caches each proposal for the cache TTL.
- /opcode answers from the cached Wikipedia instruction table and offers
  mnemonic autocompletion.
"""

import discord
from discord.ext import commands

from arisa.bot.app_context import AppContext
from arisa.bot.command_helpers import check_cooldown, info
from arisa.services import jep_service, opcode_service
from arisa.util.logger import get_logger

logger = get_logger("java_cog")

JEP_RESPONSE_LIMIT = 4000
JEP_TRUNCATED_LENGTH = 3900


async def opcode_autocomplete(autocomplete_context: discord.AutocompleteContext):
    app: AppContext = autocomplete_context.cog.app
    partial = autocomplete_context.value or ""
    return await opcode_service.autocomplete_names(app.opcode_cache, app.http, partial)


class JavaCog(commands.Cog):
    """Cog for the OpenJDK and JVM lookup commands."""

    def __init__(self, discord_bot_instance, app: AppContext):
        self.discord_bot_instance = discord_bot_instance
        self.app = app
        logger.info("Java cog loaded")

    @commands.slash_command(name="jep", description="Look up a JDK Enhancement Proposal")
    async def jep(
        self,
        application_context: discord.ApplicationContext,
        number: discord.Option(int, "JEP number (e.g., 444)", min_value=1, max_value=65535),
        detailed: discord.Option(bool, "Show goals, motivation and review details", default=False),
    ):
        check_cooldown(self.app, application_context, "jep", self.app.config.cooldowns.github_cooldown)
        await application_context.defer()

        record = await jep_service.lookup_jep(self.app.jep_cache, self.app.http, number)
        body = jep_service.format_jep(record, detailed)
        if len(body) > JEP_RESPONSE_LIMIT:
            body = f"{body[:JEP_TRUNCATED_LENGTH]}...\n\n*Content truncated. Use `/jep {number} detailed:true` for more info.*"

        embed = info(self.app, jep_service.format_jep_title(record), body)
        await application_context.respond(embed=embed)
        logger.debug("jep %d served to %s", number, application_context.author)

    @commands.slash_command(name="opcode", description="Look up a JVM bytecode instruction")
    async def opcode(
        self,
        application_context: discord.ApplicationContext,
        instruction: discord.Option(str, "Instruction mnemonic (e.g., invokevirtual)", autocomplete=opcode_autocomplete),
        detailed: discord.Option(bool, "Show stack changes and opcode details", default=False),
    ):
        check_cooldown(self.app, application_context, "opcode", self.app.config.cooldowns.per_user_cooldown)
        await application_context.defer()

        found = await opcode_service.lookup_instruction(self.app.opcode_cache, self.app.http, instruction)
        embed = info(self.app, f"JVM Instruction: {found.mnemonic}", opcode_service.format_instruction(found, detailed))
        await application_context.respond(embed=embed)


def setup(discord_bot_instance, app: AppContext):
    discord_bot_instance.add_cog(JavaCog(discord_bot_instance, app))
