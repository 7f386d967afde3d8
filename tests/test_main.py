import sys
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from arisa import main
from arisa.errors import ConfigError


def test_resolve_base_dir_env_overrides(tmp_path, monkeypatch):
    monkeypatch.setenv("ARISA_HOME", str(tmp_path))

    assert main.resolve_base_dir() == tmp_path.resolve()


def test_resolve_base_dir_compiled(tmp_path, monkeypatch):
    monkeypatch.delenv("ARISA_HOME", raising=False)
    monkeypatch.setattr(sys, "frozen", True, raising=False)
    monkeypatch.setattr(sys, "argv", [str(tmp_path / "arisa.exe")])

    assert main.resolve_base_dir() == tmp_path.resolve()


def test_resolve_base_dir_source(monkeypatch):
    monkeypatch.delenv("ARISA_HOME", raising=False)
    monkeypatch.setattr(sys, "frozen", False, raising=False)
    monkeypatch.setattr(sys, "compiled", False, raising=False)

    assert main.resolve_base_dir() == main.Path(main.__file__).resolve().parents[2]


def test_load_environment_exits_without_token(monkeypatch):
    monkeypatch.setattr(main, "load_dotenv", lambda **kwargs: False)
    monkeypatch.delenv("DISCORD_BOT_TOKEN", raising=False)

    with pytest.raises(SystemExit) as excinfo:
        main.load_environment()
    assert excinfo.value.code == 1


def test_load_environment_returns_token(monkeypatch):
    monkeypatch.setattr(main, "load_dotenv", lambda **kwargs: False)
    monkeypatch.setenv("DISCORD_BOT_TOKEN", "abc")

    assert main.load_environment() == "abc"


def test_build_intents_enables_message_content():
    assert main.build_intents().message_content is True


def test_load_configuration_writes_defaults(tmp_path):
    path = tmp_path / "config" / "app_config.yml"

    config = main.load_configuration(path)

    assert path.exists()
    assert config.limits.max_output_size == 4000


@pytest.mark.asyncio
async def test_async_main_returns_one_on_config_error(monkeypatch):
    monkeypatch.setattr(main, "load_environment", lambda: "token")

    def broken_config():
        raise ConfigError("bad yaml")

    monkeypatch.setattr(main, "load_configuration", broken_config)

    assert await main.async_main() == 1


@pytest.mark.asyncio
async def test_shutdown_runtime_closes_bot_and_context():
    bot = SimpleNamespace(is_closed=lambda: False, close=AsyncMock())
    app = SimpleNamespace(close=AsyncMock())

    await main.shutdown_runtime(bot, app)

    bot.close.assert_awaited_once()
    app.close.assert_awaited_once()


def test_main_converts_system_exit(monkeypatch):
    def fake_run(coro):
        coro.close()
        raise SystemExit(3)

    monkeypatch.setattr(main.asyncio, "run", fake_run)

    assert main.main() == 3
