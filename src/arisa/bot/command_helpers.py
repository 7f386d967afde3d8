"""Guards and reply helpers used at the start and end of every command."""

from __future__ import annotations

import discord

from arisa.bot.app_context import AppContext
from arisa.errors import InputTooLarge
from arisa.ui import embeds


def check_cooldown(app: AppContext, ctx: discord.ApplicationContext, command: str, window_seconds: float) -> None:
    """Record a use of ``command`` by the invoking user or raise :class:`Throttled`."""
    app.cooldowns.check_and_record(command, ctx.author.id, window_seconds)


def validate_input_size(app: AppContext, data: str) -> None:
    if len(data) > app.limits.max_input_size:
        raise InputTooLarge(len(data))


def success(app: AppContext, title: str, content: str, *, is_code: bool = False) -> discord.Embed:
    return embeds.success_response(
        title,
        content,
        is_code=is_code,
        max_output_size=app.limits.max_output_size,
        quotes=app.quotes,
    )


def info(app: AppContext, title: str, content: str, *, is_code: bool = False) -> discord.Embed:
    return embeds.info_response(
        title,
        content,
        is_code=is_code,
        max_output_size=app.limits.max_output_size,
        quotes=app.quotes,
    )


def error(app: AppContext, title: str, message: str) -> discord.Embed:
    return embeds.error_response(title, message, quotes=app.quotes)
