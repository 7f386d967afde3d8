"""
Embed builders shared by every command.

All embeds use the Catppuccin Frappé palette and carry a random quote in the
footer. Response helpers wrap content in code blocks and truncate it to the
configured output limit.
"""

from typing import Optional, Sequence

import discord

from arisa.util.quotes import random_quote


class CatppuccinColors:
    LAVENDER = 0xBABBF1
    RED = 0xE78284
    GREEN = 0xA6D189
    YELLOW = 0xE5C890
    BLUE = 0x8CAAEE
    MAUVE = 0xCA9EE6


TRUNCATION_MARKER = "...\n*Output truncated*"


def truncate_output(output: str, max_size: int) -> str:
    """Cut ``output`` so that, with the truncation marker, it fits in ``max_size``."""
    if len(output) <= max_size:
        return output
    return output[: max(0, max_size - len(TRUNCATION_MARKER))] + TRUNCATION_MARKER


def format_code_block(content: str, language: Optional[str] = None) -> str:
    return f"```{language or ''}\n{content}\n```"


def create_embed(title: str, color: int, quotes: Sequence[str] = ()) -> discord.Embed:
    embed = discord.Embed(title=title, color=discord.Color(color))
    embed.set_footer(text=random_quote(quotes))
    return embed


def create_success_embed(title: str, quotes: Sequence[str] = ()) -> discord.Embed:
    return create_embed(title, CatppuccinColors.GREEN, quotes)


def create_error_embed(title: str, quotes: Sequence[str] = ()) -> discord.Embed:
    return create_embed(title, CatppuccinColors.RED, quotes)


def create_info_embed(title: str, quotes: Sequence[str] = ()) -> discord.Embed:
    return create_embed(title, CatppuccinColors.LAVENDER, quotes)


def create_warning_embed(title: str, quotes: Sequence[str] = ()) -> discord.Embed:
    return create_embed(title, CatppuccinColors.YELLOW, quotes)


def error_response(title: str, message: str, quotes: Sequence[str] = ()) -> discord.Embed:
    embed = create_error_embed(title, quotes)
    embed.description = message
    return embed


def success_response(
    title: str,
    content: str,
    *,
    is_code: bool = False,
    max_output_size: int = 4000,
    quotes: Sequence[str] = (),
) -> discord.Embed:
    """Build a green embed, optionally fencing ``content`` as code, truncated to the limit."""
    description = format_code_block(content) if is_code else content
    embed = create_success_embed(title, quotes)
    embed.description = truncate_output(description, max_output_size)
    return embed


def info_response(
    title: str,
    content: str,
    *,
    is_code: bool = False,
    max_output_size: int = 4000,
    quotes: Sequence[str] = (),
) -> discord.Embed:
    description = format_code_block(content) if is_code else content
    embed = create_info_embed(title, quotes)
    embed.description = truncate_output(description, max_output_size)
    return embed
