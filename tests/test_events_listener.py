from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from arisa.bot.cogs import events_listener
from arisa.errors import FetchError, Throttled


class FakeInteractionResponded(Exception):
    pass


@pytest.fixture
def fake_bot():
    return SimpleNamespace(
        user=SimpleNamespace(id=999, name="Arisa"),
        change_presence=AsyncMock(),
    )


@pytest.fixture
def cog(fake_bot, app):
    return events_listener.EventsListenerCog(fake_bot, app)


@pytest.mark.asyncio
async def test_on_ready_sets_presence_and_starts_schedulers(cog, fake_bot, app, monkeypatch):
    status_start = MagicMock()
    sweep_start = MagicMock()
    monkeypatch.setattr(app.status_scheduler, "start", status_start)
    monkeypatch.setattr(app.sweep_scheduler, "start", sweep_start)

    await cog.on_ready()

    fake_bot.change_presence.assert_awaited_once()
    status_start.assert_called_once_with(fake_bot)
    sweep_start.assert_called_once_with()


@pytest.mark.asyncio
async def test_on_ready_without_user_still_starts_schedulers(app, monkeypatch):
    bot = SimpleNamespace(user=None, change_presence=AsyncMock())
    cog = events_listener.EventsListenerCog(bot, app)
    monkeypatch.setattr(app.status_scheduler, "start", MagicMock())
    sweep_start = MagicMock()
    monkeypatch.setattr(app.sweep_scheduler, "start", sweep_start)

    await cog.on_ready()

    bot.change_presence.assert_not_awaited()
    sweep_start.assert_called_once()


@pytest.mark.asyncio
async def test_bot_error_replies_with_its_message(cog, ctx):
    await cog.on_application_command_error(ctx, Throttled(4))

    args, kwargs = ctx.responses[-1]
    assert kwargs["ephemeral"] is True
    assert kwargs["embed"].title == "Command Error"
    assert kwargs["embed"].description == Throttled(4).user_message()


@pytest.mark.asyncio
async def test_invoke_error_is_unwrapped(cog, ctx):
    wrapped = discord.ApplicationCommandInvokeError(FetchError("Could not find JEP 99999"))

    await cog.on_application_command_error(ctx, wrapped)

    assert "Could not find JEP 99999" in ctx.embed.description


@pytest.mark.asyncio
async def test_unexpected_error_reports_bug(cog, ctx):
    await cog.on_application_command_error(ctx, RuntimeError("boom"))

    assert ctx.embed.description == events_listener.UNEXPECTED_ERROR
    assert "boom" not in ctx.embed.description


@pytest.mark.asyncio
async def test_command_not_found_is_ignored(cog, ctx):
    from discord.ext import commands

    await cog.on_application_command_error(ctx, commands.CommandNotFound())

    assert ctx.responses == []


@pytest.mark.asyncio
async def test_falls_back_to_followup_when_already_responded(cog, ctx, monkeypatch):
    monkeypatch.setattr(events_listener.discord, "InteractionResponded", FakeInteractionResponded)
    ctx.respond = AsyncMock(side_effect=FakeInteractionResponded())
    ctx.followup = SimpleNamespace(send=AsyncMock())

    await cog.on_application_command_error(ctx, Throttled(2))

    ctx.followup.send.assert_awaited_once()
    assert ctx.followup.send.await_args.kwargs["ephemeral"] is True


def test_setup_registers_cog(app):
    added = []
    bot = SimpleNamespace(add_cog=added.append)

    events_listener.setup(bot, app)

    assert isinstance(added[0], events_listener.EventsListenerCog)
