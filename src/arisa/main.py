"""
Arisa Discord Bot
=================

A Discord utility bot offering encoding, hashing and lookup slash commands
for developers.
"""

import os
import sys
from pathlib import Path


def resolve_base_dir() -> Path:
    """Determine the base directory of the project.

    Resolution order:
    1. ARISA_HOME environment variable, if set.
    2. If running in a frozen/compiled context, use the executable's directory.
    3. Otherwise, assume running from source and use the project root.
    """
    if env_home := os.getenv("ARISA_HOME"):
        return Path(env_home).resolve()

    if getattr(sys, "frozen", False) or getattr(sys, "compiled", False):
        return Path(sys.argv[0]).resolve().parent

    return Path(__file__).resolve().parents[2]


BASE_DIR = resolve_base_dir()

import asyncio
import discord
from dotenv import load_dotenv

from arisa.bot.app_context import AppContext
from arisa.configuration.app_configuration import CONFIG_PATH, AppConfig, ensure_config_file
from arisa.errors import ConfigError
from arisa.util.logger import get_logger, handle_exception


logger = get_logger("main")


def load_environment() -> str:
    """Load environment variables and return the Discord bot token.

    Raises
    ------
    SystemExit
        If the required ``DISCORD_BOT_TOKEN`` variable is missing.
    """
    load_dotenv(dotenv_path=BASE_DIR / ".env")
    token = os.getenv("DISCORD_BOT_TOKEN")
    if not token:
        logger.critical("'DISCORD_BOT_TOKEN' environment variable not set. Bot cannot start.")
        sys.exit(1)
    return token


def build_intents() -> discord.Intents:
    """Default intents plus message content for the "how do i" listener."""
    intents = discord.Intents.default()
    intents.message_content = True
    return intents


def load_cogs(discord_bot_instance: discord.Bot, app: AppContext) -> None:
    """Register all cogs with the bot, injecting the shared application context."""
    from arisa.bot.cogs import (
        crypto_cmds,
        encoding_cmds,
        events_listener,
        java_cmds,
        message_listener,
        misc_cmds,
        security_cmds,
    )

    events_listener.setup(discord_bot_instance, app)
    message_listener.setup(discord_bot_instance)
    crypto_cmds.setup(discord_bot_instance, app)
    encoding_cmds.setup(discord_bot_instance, app)
    misc_cmds.setup(discord_bot_instance, app)
    java_cmds.setup(discord_bot_instance, app)
    security_cmds.setup(discord_bot_instance, app)

    logger.info("Registered %d cogs", len(discord_bot_instance.cogs))


def create_bot(app: AppContext) -> discord.Bot:
    """Instantiate the Discord bot and register all cogs."""
    bot = discord.Bot(intents=build_intents())
    load_cogs(bot, app)
    return bot


def load_configuration(path: Path = CONFIG_PATH) -> AppConfig:
    """Create the default config file if needed and load it."""
    ensure_config_file(path)
    return AppConfig(path)


async def start_bot(bot: discord.Bot, token: str) -> None:
    logger.info("Connecting to the Discord gateway")
    try:
        await bot.start(token)
    except asyncio.CancelledError:
        logger.info("Gateway connection cancelled")
    finally:
        logger.debug("Gateway connection closed")


async def shutdown_runtime(bot: discord.Bot | None, app: AppContext | None) -> None:
    """Gracefully stop the bot, background schedulers and HTTP session."""
    if bot is not None and not bot.is_closed():
        try:
            await bot.close()
        except Exception as exc:
            logger.exception("Error while closing Discord client: %s", exc)

    if app is not None:
        try:
            await app.close()
        except Exception as exc:
            logger.exception("Error during application context shutdown: %s", exc)

    logger.info("Shutdown complete.")


async def async_main() -> int:
    """Bootstrap configuration, context and bot, returning an exit code."""
    token = load_environment()

    try:
        config = load_configuration()
    except ConfigError as exc:
        logger.critical("Failed to load configuration: %s", exc)
        return 1

    app = AppContext.from_config(config)

    try:
        bot = create_bot(app)
    except Exception as exc:
        logger.critical("Failed to initialize Discord bot: %s", exc)
        await app.close()
        return 1

    exit_code = 0
    try:
        await start_bot(bot, token)
    except discord.LoginFailure as exc:
        logger.critical("Discord rejected the bot token: %s", exc)
        exit_code = 1
    except Exception as exc:
        logger.critical("Discord bot runtime error: %s", exc)
        exit_code = 1
    finally:
        await shutdown_runtime(bot, app)

    return exit_code


def main() -> int:
    """Entrypoint that runs the async runtime and returns the process code."""
    logger.info("Starting Arisa…")
    try:
        return asyncio.run(async_main())
    except KeyboardInterrupt:
        logger.info("Interrupted, exiting")
        return 0
    except SystemExit as exit_exc:
        code = exit_exc.code
        return code if isinstance(code, int) else 1
    except Exception as exc:
        logger.critical("Arisa stopped on an unexpected error: %s", exc)
        return 1


if __name__ == "__main__":
    sys.excepthook = handle_exception
    sys.exit(main())
