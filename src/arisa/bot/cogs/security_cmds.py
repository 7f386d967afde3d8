"""Security cog: CVE lookups against the National Vulnerability Database."""

import discord
from discord.ext import commands

from arisa.bot.app_context import AppContext
from arisa.bot.command_helpers import check_cooldown, info, validate_input_size
from arisa.services import cve_service
from arisa.util.logger import get_logger

logger = get_logger("security_cog")


class SecurityCog(commands.Cog):
    def __init__(self, discord_bot_instance, app: AppContext):
        self.discord_bot_instance = discord_bot_instance
        self.app = app
        logger.info("Security cog loaded")

    @commands.slash_command(name="cve", description="Look up a CVE in the National Vulnerability Database")
    async def cve(
        self,
        application_context: discord.ApplicationContext,
        cve_id: discord.Option(str, "CVE identifier (e.g., CVE-2019-16863 or 2019-16863)"),
        detailed: discord.Option(bool, "Show weaknesses and affected products", default=False),
    ):
        validate_input_size(self.app, cve_id)
        check_cooldown(self.app, application_context, "cve", self.app.config.cooldowns.github_cooldown)
        await application_context.defer()

        record = await cve_service.lookup_cve(self.app.cve_cache, self.app.http, cve_id)
        title, body = cve_service.format_cve(record, detailed)
        await application_context.respond(embed=info(self.app, title, body))
        logger.debug("cve %s served to %s", record.cve_id, application_context.author)


def setup(discord_bot_instance, app: AppContext):
    discord_bot_instance.add_cog(SecurityCog(discord_bot_instance, app))
