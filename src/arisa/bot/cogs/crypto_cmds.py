"""
Cryptography cog: digests, checksums and UUID generation.

Commands:
- /hash: MD5 or SHA-family hex digest of the given text
- /checksum: CRC32 or Adler32 of the given text
- /uuid: generate version 1, 4 or 7 UUIDs with an optional breakdown
"""

import discord
from discord.ext import commands

from arisa.bot.app_context import AppContext
from arisa.bot.command_helpers import check_cooldown, success, validate_input_size
from arisa.services.crypto_service import (
    ChecksumAlgorithm,
    HashAlgorithm,
    UuidVersion,
    checksum_text,
    describe_uuids,
    hash_text,
)
from arisa.util.logger import get_logger

logger = get_logger("crypto_cog")

UUID_CHOICES = [
    discord.OptionChoice("Version 1 (Timestamp + MAC)", "1"),
    discord.OptionChoice("Version 4 (Random)", "4"),
    discord.OptionChoice("Version 7 (Timestamp + Random)", "7"),
]


class CryptoCog(commands.Cog):
    """Hashing and identifier commands that run entirely locally."""

    def __init__(self, discord_bot_instance, app: AppContext):
        self.discord_bot_instance = discord_bot_instance
        self.app = app
        logger.info("Crypto cog loaded")

    @commands.slash_command(name="hash", description="Generate cryptographic hashes of data")
    async def hash(
        self,
        application_context: discord.ApplicationContext,
        algorithm: discord.Option(str, "Hash algorithm to use", choices=[a.name for a in HashAlgorithm]),
        data: discord.Option(str, "The data to hash"),
    ):
        validate_input_size(self.app, data)
        check_cooldown(self.app, application_context, "hash", self.app.config.cooldowns.hash_cooldown)

        chosen = HashAlgorithm[algorithm.upper()]
        digest = hash_text(chosen, data)
        await application_context.respond(embed=success(self.app, f"{chosen.label} Hash", digest, is_code=True))
        logger.debug("hash %s executed by %s", chosen.label, application_context.author)

    @commands.slash_command(name="checksum", description="Calculate checksums of data for integrity verification")
    async def checksum(
        self,
        application_context: discord.ApplicationContext,
        algorithm: discord.Option(str, "Checksum algorithm to use", choices=[a.value for a in ChecksumAlgorithm]),
        data: discord.Option(str, "The data to calculate checksum for"),
    ):
        validate_input_size(self.app, data)
        check_cooldown(self.app, application_context, "checksum", self.app.config.cooldowns.hash_cooldown)

        chosen = ChecksumAlgorithm(algorithm)
        value = checksum_text(chosen, data)
        await application_context.respond(embed=success(self.app, f"{chosen.value} Checksum", value, is_code=True))

    @commands.slash_command(name="uuid", description="Generate UUIDs (Universally Unique Identifiers)")
    async def uuid(
        self,
        application_context: discord.ApplicationContext,
        version: discord.Option(str, "UUID version to generate", choices=UUID_CHOICES, default="4"),
        count: discord.Option(int, "Number of UUIDs to generate (1-10)", min_value=1, max_value=10, default=1),
        analyze: discord.Option(bool, "Show UUID breakdown and information", default=False),
    ):
        check_cooldown(self.app, application_context, "uuid", self.app.config.cooldowns.per_user_cooldown)

        chosen = UuidVersion(int(version))
        body = describe_uuids(chosen, count, analyze)
        await application_context.respond(embed=success(self.app, f"UUID {chosen.title}", body))


def setup(discord_bot_instance, app: AppContext):
    discord_bot_instance.add_cog(CryptoCog(discord_bot_instance, app))
