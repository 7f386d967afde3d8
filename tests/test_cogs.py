from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from arisa.bot.cogs import crypto_cmds, encoding_cmds, java_cmds, message_listener, misc_cmds, security_cmds
from arisa.datatypes.lookup_datatypes import CveRecord, GitHubUser, JepRecord
from arisa.errors import InputTooLarge, InvalidFormat, Throttled
from arisa.services import cve_service, github_service, jep_service


@pytest.mark.parametrize(
    "module, cog_class",
    [
        (crypto_cmds, crypto_cmds.CryptoCog),
        (encoding_cmds, encoding_cmds.EncodingCog),
        (misc_cmds, misc_cmds.MiscCog),
        (java_cmds, java_cmds.JavaCog),
        (security_cmds, security_cmds.SecurityCog),
    ],
)
def test_setup_adds_cog(app, module, cog_class):
    captured = {}
    fake_bot = SimpleNamespace(add_cog=lambda cog: captured.setdefault("cog", cog))
    module.setup(fake_bot, app)
    assert isinstance(captured["cog"], cog_class)
    assert captured["cog"].app is app


# -------------------- crypto --------------------

@pytest.mark.asyncio
async def test_hash_command_replies_with_digest(app, ctx):
    cog = crypto_cmds.CryptoCog(SimpleNamespace(), app)
    await crypto_cmds.CryptoCog.hash.callback(cog, ctx, "MD5", "abc")
    assert ctx.embed.title == "MD5 Hash"
    assert "900150983cd24fb0d6963f7d28e17f72" in ctx.embed.description


@pytest.mark.asyncio
async def test_hash_command_is_throttled_per_user(app, ctx, make_ctx, clock):
    cog = crypto_cmds.CryptoCog(SimpleNamespace(), app)
    await crypto_cmds.CryptoCog.hash.callback(cog, ctx, "SHA1", "abc")

    clock.advance(2)
    with pytest.raises(Throttled) as excinfo:
        await crypto_cmds.CryptoCog.hash.callback(cog, ctx, "SHA1", "abc")
    assert excinfo.value.remaining_seconds == 3

    other = make_ctx(user_id=7)
    await crypto_cmds.CryptoCog.hash.callback(cog, other, "SHA1", "abc")
    assert other.responses


@pytest.mark.asyncio
async def test_hash_and_checksum_have_separate_cooldowns(app, ctx):
    cog = crypto_cmds.CryptoCog(SimpleNamespace(), app)
    await crypto_cmds.CryptoCog.hash.callback(cog, ctx, "SHA256", "abc")
    await crypto_cmds.CryptoCog.checksum.callback(cog, ctx, "CRC32", "hello")
    assert "3610a686" in ctx.embed.description


@pytest.mark.asyncio
async def test_oversized_input_rejected_before_cooldown(app, ctx):
    cog = crypto_cmds.CryptoCog(SimpleNamespace(), app)
    with pytest.raises(InputTooLarge) as excinfo:
        await crypto_cmds.CryptoCog.hash.callback(cog, ctx, "MD5", "x" * 5000)
    assert excinfo.value.size == 5000
    assert len(app.cooldowns) == 0
    assert ctx.responses == []


@pytest.mark.asyncio
async def test_uuid_command(app, ctx):
    cog = crypto_cmds.CryptoCog(SimpleNamespace(), app)
    await crypto_cmds.CryptoCog.uuid.callback(cog, ctx, "7", 2, True)
    assert ctx.embed.title == "UUID Version 7"
    assert "**UUID 2:**" in ctx.embed.description


# -------------------- encoding --------------------

@pytest.mark.asyncio
async def test_base64_round_trip_through_commands(app, make_ctx):
    cog = encoding_cmds.EncodingCog(SimpleNamespace(), app)
    first, second = make_ctx(1), make_ctx(2)
    await encoding_cmds.EncodingCog.base64.callback(cog, first, "Encode", "hi")
    await encoding_cmds.EncodingCog.base64.callback(cog, second, "Decode", "aGk=")
    assert first.embed.description == "```\naGk=\n```"
    assert second.embed.title == "Base64 Decoded"


@pytest.mark.asyncio
async def test_rot_and_endian_commands(app, make_ctx):
    cog = encoding_cmds.EncodingCog(SimpleNamespace(), app)
    rot_ctx, endian_ctx = make_ctx(1), make_ctx(1)
    await encoding_cmds.EncodingCog.rot.callback(cog, rot_ctx, 13, "abc")
    await encoding_cmds.EncodingCog.endian.callback(cog, endian_ctx, "0xDEADBEEF")
    assert rot_ctx.embed.title == "ROT13"
    assert "EFBEADDE" in endian_ctx.embed.description


@pytest.mark.asyncio
async def test_endian_invalid_hex_raises(app, ctx):
    cog = encoding_cmds.EncodingCog(SimpleNamespace(), app)
    with pytest.raises(InvalidFormat):
        await encoding_cmds.EncodingCog.endian.callback(cog, ctx, "ABC")


@pytest.mark.asyncio
async def test_timestamp_command(app, ctx):
    cog = encoding_cmds.EncodingCog(SimpleNamespace(), app)
    await encoding_cmds.EncodingCog.timestamp.callback(cog, ctx, 0, None)
    assert ctx.embed.title == "Timestamp Conversion"


@pytest.mark.asyncio
async def test_output_is_truncated_to_limit(app, ctx):
    cog = encoding_cmds.EncodingCog(SimpleNamespace(), app)
    await encoding_cmds.EncodingCog.url.callback(cog, ctx, "Encode", " " * 4000)
    assert len(ctx.embed.description) == app.limits.max_output_size
    assert ctx.embed.description.endswith("*Output truncated*")


# -------------------- misc --------------------

def fake_bot_with_commands():
    commands = [
        SimpleNamespace(name="hash", description="Generate cryptographic hashes of data",
                        options=[SimpleNamespace(name="algorithm", description="Hash algorithm to use")]),
        SimpleNamespace(name="rot", description="Apply ROT cipher", options=[]),
        SimpleNamespace(name="help", description="Show help information about commands", options=[]),
    ]
    return SimpleNamespace(walk_application_commands=lambda: iter(commands))


@pytest.mark.asyncio
async def test_general_help_groups_commands(app, ctx):
    cog = misc_cmds.MiscCog(fake_bot_with_commands(), app)
    await misc_cmds.MiscCog.help.callback(cog, ctx, None)

    embed = ctx.embed
    assert ctx.responses[-1][1]["ephemeral"] is True
    fields = {field.name: field.value for field in embed.fields}
    assert "• **rot** - Apply ROT cipher" in fields["🔤 Encoding & Text"]
    assert "hash" in fields["🔐 Cryptography"]
    assert "🔎 Lookups" not in fields
    assert "Usage" in fields


@pytest.mark.asyncio
async def test_command_help_and_unknown_command(app, make_ctx):
    cog = misc_cmds.MiscCog(fake_bot_with_commands(), app)
    known, unknown = make_ctx(), make_ctx()

    await misc_cmds.MiscCog.help.callback(cog, known, "/hash")
    await misc_cmds.MiscCog.help.callback(cog, unknown, "frobnicate")

    assert known.embed.title == "Help: hash"
    assert "**algorithm**: Hash algorithm to use" in known.embed.fields[0].value
    assert unknown.embed.title == "Command Not Found"


@pytest.mark.asyncio
async def test_color_command(app, ctx):
    cog = misc_cmds.MiscCog(SimpleNamespace(), app)
    await misc_cmds.MiscCog.color.callback(cog, ctx, "#00ff00")
    assert ctx.embed.title == "Color: #00FF00"
    assert ctx.embed.color.value == 0x00FF00


@pytest.mark.asyncio
async def test_color_command_invalid_input(app, ctx):
    cog = misc_cmds.MiscCog(SimpleNamespace(), app)
    await misc_cmds.MiscCog.color.callback(cog, ctx, "not-a-colour")
    assert ctx.embed.title == "Invalid Color Format"
    assert "Supported formats" in ctx.embed.description


@pytest.mark.asyncio
async def test_github_command_user(app, ctx, monkeypatch):
    user = GitHubUser(login="octocat", avatar_url="https://avatars.example/octocat.png")
    lookup = AsyncMock(return_value=user)
    monkeypatch.setattr(github_service, "lookup_github", lookup)

    cog = misc_cmds.MiscCog(SimpleNamespace(), app)
    await misc_cmds.MiscCog.github.callback(cog, ctx, "octocat")

    assert ctx.deferred
    assert ctx.embed.title == "GitHub User: octocat"
    assert ctx.embed.thumbnail.url == "https://avatars.example/octocat.png"
    assert lookup.await_args.args[0] is app.github_cache


# -------------------- java / security --------------------

@pytest.mark.asyncio
async def test_jep_command_truncates_long_body(app, ctx, monkeypatch):
    record = JepRecord(number=444, title="Virtual Threads", summary="s" * 5000)
    monkeypatch.setattr(jep_service, "lookup_jep", AsyncMock(return_value=record))

    cog = java_cmds.JavaCog(SimpleNamespace(), app)
    await java_cmds.JavaCog.jep.callback(cog, ctx, 444, False)

    assert ctx.embed.title == "JEP 444: Virtual Threads"
    assert "Use `/jep 444 detailed:true` for more info." in ctx.embed.description
    assert len(ctx.embed.description) <= app.limits.max_output_size


@pytest.mark.asyncio
async def test_opcode_autocomplete_uses_cog_app(app, monkeypatch):
    names = AsyncMock(return_value=["iadd"])
    monkeypatch.setattr(java_cmds.opcode_service, "autocomplete_names", names)
    cog = java_cmds.JavaCog(SimpleNamespace(), app)

    result = await java_cmds.opcode_autocomplete(SimpleNamespace(cog=cog, value="ia"))

    assert result == ["iadd"]
    names.assert_awaited_once_with(app.opcode_cache, app.http, "ia")


@pytest.mark.asyncio
async def test_cve_command(app, ctx, monkeypatch):
    record = CveRecord(cve_id="CVE-2024-0001", vuln_status="Received")
    monkeypatch.setattr(cve_service, "lookup_cve", AsyncMock(return_value=record))

    cog = security_cmds.SecurityCog(SimpleNamespace(), app)
    await security_cmds.SecurityCog.cve.callback(cog, ctx, "2024-0001", False)

    assert ctx.embed.title == "CVE-2024-0001"
    assert "**Status:** Received" in ctx.embed.description


# -------------------- message listener --------------------

@pytest.mark.asyncio
@pytest.mark.parametrize(
    "content, is_bot, replies",
    [
        ("How do I exit vim?", False, True),
        ("so how do i center a div", False, True),
        ("how do I", False, False),
        ("how do i exit vim", True, False),
    ],
)
async def test_message_listener_replies_very_carefully(content, is_bot, replies):
    cog = message_listener.MessageListenerCog(SimpleNamespace())
    message = SimpleNamespace(author=SimpleNamespace(bot=is_bot), content=content, reply=AsyncMock())

    await cog.on_message(message)

    if replies:
        message.reply.assert_awaited_once_with("very carefully")
    else:
        message.reply.assert_not_awaited()
