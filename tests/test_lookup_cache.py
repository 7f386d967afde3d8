import asyncio

import pytest

from arisa.cache.lookup_cache import LookupCache, normalize_key
from arisa.errors import FetchError


class CountingFetch:
    """Async fetcher returning queued values and counting calls."""

    def __init__(self, *values):
        self.values = list(values)
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        value = self.values.pop(0)
        if isinstance(value, BaseException):
            raise value
        return value


@pytest.fixture
def cache(clock):
    return LookupCache("cve", ttl_seconds=3600, clock=clock)


def test_normalize_key():
    assert normalize_key("  CVE-2024-0001 ") == "cve-2024-0001"
    assert normalize_key(444) == "444"


def test_ttl_must_be_positive():
    with pytest.raises(ValueError):
        LookupCache("bad", ttl_seconds=0)


@pytest.mark.asyncio
async def test_miss_then_hit(cache):
    fetch = CountingFetch("v1")
    assert await cache.get_or_fetch("CVE-2024-0001", fetch) == "v1"
    assert await cache.get_or_fetch("cve-2024-0001", fetch) == "v1"
    assert fetch.calls == 1
    assert "CVE-2024-0001" in cache


@pytest.mark.asyncio
async def test_cve_ttl_scenario(cache, clock):
    fetch = CountingFetch("V1", "V2")

    assert await cache.get_or_fetch("CVE-2024-0001", fetch) == "V1"
    clock.advance(10)
    assert await cache.get_or_fetch("CVE-2024-0001", fetch) == "V1"
    clock.advance(3591)
    assert await cache.get_or_fetch("CVE-2024-0001", fetch) == "V2"
    assert fetch.calls == 2


@pytest.mark.asyncio
async def test_entry_expires_exactly_at_ttl(cache, clock):
    fetch = CountingFetch("old", "new")
    await cache.get_or_fetch("k", fetch)
    clock.advance(3600)
    assert cache.get("k") is None
    assert await cache.get_or_fetch("k", fetch) == "new"


@pytest.mark.asyncio
async def test_failures_are_not_cached(cache):
    fetch = CountingFetch(FetchError("boom"), "ok")
    with pytest.raises(FetchError):
        await cache.get_or_fetch("k", fetch)
    assert len(cache) == 0
    assert await cache.get_or_fetch("k", fetch) == "ok"
    assert fetch.calls == 2


@pytest.mark.asyncio
async def test_unexpected_exceptions_are_wrapped(cache):
    original = KeyError("missing field")
    fetch = CountingFetch(original)
    with pytest.raises(FetchError) as excinfo:
        await cache.get_or_fetch("k", fetch)
    assert excinfo.value.__cause__ is original
    assert len(cache) == 0


@pytest.mark.asyncio
async def test_insert_sweeps_expired_entries(cache, clock):
    await cache.get_or_fetch("a", CountingFetch(1))
    clock.advance(3000)
    await cache.get_or_fetch("b", CountingFetch(2))
    clock.advance(700)
    await cache.get_or_fetch("c", CountingFetch(3))

    assert len(cache) == 2
    assert cache.get("a") is None
    assert cache.get("b") == 2


@pytest.mark.asyncio
async def test_per_call_ttl_override(cache, clock):
    fetch = CountingFetch("a", "b")
    await cache.get_or_fetch("k", fetch)
    clock.advance(20)
    assert await cache.get_or_fetch("k", fetch, ttl=10) == "b"


@pytest.mark.asyncio
async def test_short_ttl_insert_keeps_other_fresh_entries(cache, clock):
    fetch_a = CountingFetch("A")
    await cache.get_or_fetch("a", fetch_a)
    clock.advance(20)

    await cache.get_or_fetch("b", CountingFetch("B"), ttl=10)

    assert len(cache) == 2
    assert cache.get("a") == "A"
    assert await cache.get_or_fetch("a", fetch_a) == "A"
    assert fetch_a.calls == 1


@pytest.mark.asyncio
async def test_invalidate_sweep_and_clear(cache, clock):
    await cache.get_or_fetch("a", CountingFetch(1))
    await cache.get_or_fetch("b", CountingFetch(2))
    assert cache.invalidate("A") is True
    assert cache.invalidate("A") is False
    clock.advance(3600)
    assert cache.sweep() == 1
    await cache.get_or_fetch("c", CountingFetch(3))
    cache.clear()
    assert len(cache) == 0


def test_sweep_on_empty_cache(cache):
    assert cache.sweep() == 0


@pytest.mark.asyncio
async def test_single_flight_shares_one_fetch(clock):
    cache = LookupCache("jep", single_flight=True, clock=clock)
    release = asyncio.Event()
    calls = 0

    async def slow_fetch():
        nonlocal calls
        calls += 1
        await release.wait()
        return "record"

    first = asyncio.create_task(cache.get_or_fetch(444, slow_fetch))
    second = asyncio.create_task(cache.get_or_fetch("444", slow_fetch))
    await asyncio.sleep(0)
    assert cache.in_flight(444)

    release.set()
    assert await first == "record"
    assert await second == "record"
    assert calls == 1
    assert not cache.in_flight(444)


@pytest.mark.asyncio
async def test_single_flight_failure_reaches_every_waiter(clock):
    cache = LookupCache("jep", single_flight=True, clock=clock)
    release = asyncio.Event()

    async def failing_fetch():
        await release.wait()
        raise FetchError("JEP 9999 not found")

    waiters = [asyncio.create_task(cache.get_or_fetch(9999, failing_fetch)) for _ in range(3)]
    await asyncio.sleep(0)
    release.set()
    results = await asyncio.gather(*waiters, return_exceptions=True)

    assert all(isinstance(result, FetchError) for result in results)
    assert len(cache) == 0
    assert not cache.in_flight(9999)


@pytest.mark.asyncio
async def test_cancelled_waiter_does_not_cancel_shared_fetch(clock):
    cache = LookupCache("opcode", single_flight=True, clock=clock)
    release = asyncio.Event()

    async def slow_fetch():
        await release.wait()
        return "table"

    impatient = asyncio.create_task(cache.get_or_fetch("wikipedia", slow_fetch))
    patient = asyncio.create_task(cache.get_or_fetch("wikipedia", slow_fetch))
    await asyncio.sleep(0)
    impatient.cancel()
    release.set()

    assert await patient == "table"
    assert cache.get("wikipedia") == "table"


def test_single_flight_off_unless_requested(app):
    assert LookupCache("plain").single_flight is False
    assert app.cve_cache.single_flight is True
