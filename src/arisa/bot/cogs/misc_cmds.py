"""
Miscellaneous cog: help, colour conversion and GitHub lookups.

/help groups every registered slash command by category; passing a command
name shows its description and parameters instead.
"""

from typing import Dict, Optional, Tuple

import discord
from discord.ext import commands

from arisa.bot.app_context import AppContext
from arisa.bot.command_helpers import check_cooldown, error, info, success, validate_input_size
from arisa.datatypes.lookup_datatypes import CommandCategory, GitHubRepo
from arisa.errors import InvalidFormat
from arisa.services import color_service, github_service
from arisa.ui.embeds import CatppuccinColors, create_info_embed
from arisa.util.logger import get_logger

logger = get_logger("misc_cog")

COMMAND_CATEGORIES: Dict[CommandCategory, Tuple[str, ...]] = {
    CommandCategory.ENCODING: ("base64", "url", "rot", "endian", "timestamp"),
    CommandCategory.CRYPTO: ("hash", "checksum", "uuid"),
    CommandCategory.LOOKUP: ("cve", "jep", "opcode", "github"),
    CommandCategory.MISC: ("help", "color"),
}

HELP_DESCRIPTION = "I go by it/she, I'm a discord bot for nerds, by nerds :3"


class MiscCog(commands.Cog):
    def __init__(self, discord_bot_instance, app: AppContext):
        self.discord_bot_instance = discord_bot_instance
        self.app = app
        logger.info("Misc cog loaded")

    def _commands_by_name(self) -> Dict[str, discord.ApplicationCommand]:
        return {cmd.name: cmd for cmd in self.discord_bot_instance.walk_application_commands()}

    def build_general_help(self) -> discord.Embed:
        registered = self._commands_by_name()
        embed = create_info_embed("Arisa - Command Help", self.app.quotes)
        embed.description = HELP_DESCRIPTION

        for category, names in COMMAND_CATEGORIES.items():
            lines = [
                f"• **{name}** - {registered[name].description or 'No description'}"
                for name in names
                if name in registered
            ]
            if lines:
                embed.add_field(name=category.value, value="\n".join(lines), inline=False)

        embed.add_field(
            name="Usage",
            value="Use `/help <command>` for detailed information about a specific command!",
            inline=False,
        )
        return embed

    def build_command_help(self, command_name: str) -> Optional[discord.Embed]:
        command = self._commands_by_name().get(command_name.strip().lstrip("/").lower())
        if command is None:
            return None

        embed = create_info_embed(f"Help: {command.name}", self.app.quotes)
        embed.color = discord.Color(CatppuccinColors.BLUE)
        embed.description = command.description or None

        options = getattr(command, "options", None) or []
        if options:
            params = "\n".join(f"• **{opt.name}**: {opt.description or 'No description'}" for opt in options)
            embed.add_field(name="Parameters", value=params, inline=False)
        embed.add_field(name="Usage", value=f"Use `/{command.name}` in Discord", inline=False)
        return embed

    @commands.slash_command(name="help", description="Show help information about commands")
    async def help(
        self,
        application_context: discord.ApplicationContext,
        command: discord.Option(str, "Specific command to show help about", required=False, default=None),
    ):
        if not command:
            await application_context.respond(embed=self.build_general_help(), ephemeral=True)
            return

        embed = self.build_command_help(command)
        if embed is None:
            embed = error(self.app, "Command Not Found", f"No command named `{command}` was found.")
        await application_context.respond(embed=embed, ephemeral=True)

    @commands.slash_command(name="color", description="Convert and display colors in multiple formats")
    async def color(
        self,
        application_context: discord.ApplicationContext,
        input: discord.Option(str, "Color in HEX (#FF0000), RGB (255,0,0), or name (red)"),
    ):
        validate_input_size(self.app, input)
        check_cooldown(self.app, application_context, "color", self.app.config.cooldowns.color_cooldown)

        try:
            parsed = color_service.parse_color(input)
        except InvalidFormat as exc:
            embed = error(self.app, "Invalid Color Format", f"{exc.message}\n\n{color_service.SUPPORTED_FORMATS}")
            await application_context.respond(embed=embed, ephemeral=True)
            return

        title, body = color_service.describe_color(parsed)
        embed = success(self.app, title, body)
        embed.color = discord.Color(parsed.as_int)
        await application_context.respond(embed=embed)

    @commands.slash_command(name="github", description="Get information about a GitHub user or repository")
    async def github(
        self,
        application_context: discord.ApplicationContext,
        query: discord.Option(str, "Username, owner/repository, or github.com URL"),
    ):
        validate_input_size(self.app, query)
        check_cooldown(self.app, application_context, "github", self.app.config.cooldowns.github_cooldown)
        await application_context.defer()

        record = await github_service.lookup_github(
            self.app.github_cache, self.app.http, query, self.app.config.github_token
        )
        if isinstance(record, GitHubRepo):
            title, body = github_service.format_repo(record)
            embed = info(self.app, title, body)
        else:
            title, body = github_service.format_user(record)
            embed = info(self.app, title, body)
            if record.avatar_url:
                embed.set_thumbnail(url=record.avatar_url)
        await application_context.respond(embed=embed)


def setup(discord_bot_instance, app: AppContext):
    discord_bot_instance.add_cog(MiscCog(discord_bot_instance, app))
