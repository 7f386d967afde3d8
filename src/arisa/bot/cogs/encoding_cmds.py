"""
Encoding cog: reversible text transforms and timestamp conversion.

Every command here shares the per-user cooldown window. Transform results are
returned in a code block and truncated to the configured output size.
"""

from typing import Optional

import discord
from discord.ext import commands

from arisa.bot.app_context import AppContext
from arisa.bot.command_helpers import check_cooldown, success, validate_input_size
from arisa.services import encoding_service
from arisa.util.logger import get_logger

logger = get_logger("encoding_cog")

OPERATIONS = ["Encode", "Decode"]


class EncodingCog(commands.Cog):
    """Base64, URL, ROT-n, endianness and timestamp commands."""

    def __init__(self, discord_bot_instance, app: AppContext):
        self.discord_bot_instance = discord_bot_instance
        self.app = app
        logger.info("Encoding cog loaded")

    def _guard(self, application_context: discord.ApplicationContext, command: str, data: str = "") -> None:
        validate_input_size(self.app, data)
        check_cooldown(self.app, application_context, command, self.app.config.cooldowns.per_user_cooldown)

    @commands.slash_command(name="base64", description="Encode or decode data using Base64")
    async def base64(
        self,
        application_context: discord.ApplicationContext,
        operation: discord.Option(str, "Choose operation", choices=OPERATIONS),
        data: discord.Option(str, "The data to encode or decode"),
    ):
        self._guard(application_context, "base64", data)
        if operation == "Decode":
            title, result = "Base64 Decoded", encoding_service.base64_decode(data)
        else:
            title, result = "Base64 Encoded", encoding_service.base64_encode(data)
        await application_context.respond(embed=success(self.app, title, result, is_code=True))

    @commands.slash_command(name="url", description="Encode or decode data using URL encoding")
    async def url(
        self,
        application_context: discord.ApplicationContext,
        operation: discord.Option(str, "Choose operation", choices=OPERATIONS),
        data: discord.Option(str, "The data to encode or decode"),
    ):
        self._guard(application_context, "url", data)
        if operation == "Decode":
            title, result = "URL Decoded", encoding_service.url_decode(data)
        else:
            title, result = "URL Encoded", encoding_service.url_encode(data)
        await application_context.respond(embed=success(self.app, title, result, is_code=True))

    @commands.slash_command(name="rot", description="Apply ROT cipher to text with custom rotation value")
    async def rot(
        self,
        application_context: discord.ApplicationContext,
        n: discord.Option(int, "Rotation value (0-25)", min_value=0, max_value=25),
        text: discord.Option(str, "The text to apply ROT cipher to"),
    ):
        self._guard(application_context, "rot", text)
        result = encoding_service.rot(text, n)
        await application_context.respond(embed=success(self.app, f"ROT{n}", result, is_code=True))

    @commands.slash_command(name="endian", description="Swap the endianness of hexadecimal data")
    async def endian(
        self,
        application_context: discord.ApplicationContext,
        hex_data: discord.Option(str, "Hexadecimal data to swap (e.g., 'DEADBEEF' or '0xDEADBEEF')"),
    ):
        self._guard(application_context, "endian", hex_data)
        result = encoding_service.swap_endian(hex_data)
        await application_context.respond(embed=success(self.app, "Endianness Swapped", result, is_code=True))

    @commands.slash_command(name="timestamp", description="Convert Unix timestamps to human-readable dates")
    async def timestamp(
        self,
        application_context: discord.ApplicationContext,
        timestamp: discord.Option(int, "Unix timestamp (leave empty to get current timestamp)", required=False, default=None),
        date: discord.Option(str, "Date string to convert to timestamp (format: YYYY-MM-DD HH:MM:SS)", required=False, default=None),
    ):
        date_text: Optional[str] = date
        self._guard(application_context, "timestamp", date_text or "")
        title, body = encoding_service.describe_timestamp(timestamp=timestamp, date=date_text)
        await application_context.respond(embed=success(self.app, title, body))


def setup(discord_bot_instance, app: AppContext):
    discord_bot_instance.add_cog(EncodingCog(discord_bot_instance, app))
