"""
Pytest configuration and fixtures for Arisa tests.
"""

import os
import sys
import tempfile
from pathlib import Path
from types import SimpleNamespace

import pytest

# Keep test runs from writing session logs into the project tree.
# Must be set before any import from src/arisa.
os.environ.setdefault("ARISA_LOGS_DIR", tempfile.mkdtemp(prefix="arisa-logs-"))

# Add src directory to path so imports work
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def config_file(tmp_path):
    """Write a YAML config and return its path. Call with the file body."""

    def write(body: str) -> Path:
        path = tmp_path / "app_config.yml"
        path.write_text(body, encoding="utf-8")
        return path

    return write


@pytest.fixture
def app(tmp_path, clock):
    """An AppContext backed by the default config and a fake clock."""
    from arisa.bot.app_context import AppContext
    from arisa.configuration.app_configuration import AppConfig

    return AppContext.from_config(AppConfig(tmp_path / "missing.yml"), clock=clock)


class FakeCtx:
    """Stand-in for ``discord.ApplicationContext`` recording every reply."""

    def __init__(self, user_id: int = 42):
        self.author = SimpleNamespace(id=user_id, name=f"user{user_id}")
        self.user = self.author
        self.command = SimpleNamespace(name="test")
        self.responses = []
        self.deferred = False

    async def respond(self, *args, **kwargs):
        self.responses.append((args, kwargs))

    async def defer(self, *args, **kwargs):
        self.deferred = True

    @property
    def embed(self):
        return self.responses[-1][1]["embed"]


@pytest.fixture
def ctx():
    return FakeCtx()


@pytest.fixture
def make_ctx():
    return FakeCtx
