"""
test_client_store.py — Tests for quotedesk/client/store.py

QueryCache state transitions, subscriptions, invalidate → refetch,
cancellation, and the toast queue.

Called by: pytest
Depends on: quotedesk.client.store
"""

import asyncio

import pytest

from quotedesk.client.store import QueryCache, QueryState, ToastQueue


@pytest.mark.asyncio
async def test_fetch_success_stores_data():
    cache = QueryCache()

    async def fetcher():
        return ["a", "b"]

    cache.register("k", fetcher)
    state = await cache.fetch("k")
    assert state.status == "success"
    assert state.data == ["a", "b"]
    assert state.updated_at is not None


@pytest.mark.asyncio
async def test_fetch_error_keeps_previous_data():
    cache = QueryCache()
    calls = {"n": 0}

    async def fetcher():
        calls["n"] += 1
        if calls["n"] > 1:
            raise RuntimeError("backend down")
        return ["a"]

    cache.register("k", fetcher)
    await cache.fetch("k")
    state = await cache.invalidate("k")
    assert state.status == "error"
    assert str(state.error) == "backend down"
    assert state.data == ["a"]


@pytest.mark.asyncio
async def test_listeners_see_loading_then_success():
    cache = QueryCache()
    seen = []

    async def fetcher():
        return 1

    cache.register("k", fetcher)
    unsubscribe = cache.subscribe("k", lambda s: seen.append(s.status))
    await cache.fetch("k")
    assert seen == ["loading", "success"]

    unsubscribe()
    await cache.fetch("k")
    assert seen == ["loading", "success"]


@pytest.mark.asyncio
async def test_invalidate_unknown_key_is_noop():
    assert await QueryCache().invalidate("missing") is None


@pytest.mark.asyncio
async def test_fetch_unregistered_key_raises():
    with pytest.raises(KeyError):
        await QueryCache().fetch("missing")


@pytest.mark.asyncio
async def test_cancel_aborts_inflight_fetch():
    cache = QueryCache()
    started = asyncio.Event()

    async def slow():
        started.set()
        await asyncio.sleep(60)
        return "never"

    cache.register("k", slow)
    task = asyncio.create_task(cache.fetch("k"))
    await started.wait()
    cache.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task
    assert cache.state("k").status == "idle"
    assert cache.state("k").data is None


@pytest.mark.asyncio
async def test_older_fetch_finishing_last_does_not_overwrite_newer():
    cache = QueryCache()
    gates = [asyncio.Event(), asyncio.Event()]
    results = iter([("old", gates[0]), ("new", gates[1])])

    async def fetcher():
        value, gate = next(results)
        await gate.wait()
        return value

    cache.register("k", fetcher)
    first = asyncio.create_task(cache.fetch("k"))
    await asyncio.sleep(0)
    second = asyncio.create_task(cache.fetch("k"))
    await asyncio.sleep(0)

    gates[1].set()
    assert (await second).data == "new"
    gates[0].set()
    await first

    assert cache.state("k").status == "success"
    assert cache.state("k").data == "new"


@pytest.mark.asyncio
async def test_older_fetch_failing_last_keeps_newer_data():
    cache = QueryCache()
    gates = [asyncio.Event(), asyncio.Event()]
    calls = iter([0, 1])

    async def fetcher():
        n = next(calls)
        await gates[n].wait()
        if n == 0:
            raise RuntimeError("slow poll timed out")
        return ["fresh"]

    cache.register("k", fetcher)
    first = asyncio.create_task(cache.fetch("k"))
    await asyncio.sleep(0)
    second = asyncio.create_task(cache.fetch("k"))
    await asyncio.sleep(0)

    gates[1].set()
    await second
    gates[0].set()
    await first

    state = cache.state("k")
    assert state.status == "success"
    assert state.error is None
    assert state.data == ["fresh"]


def test_default_state_is_idle():
    state = QueryCache().state("k")
    assert state == QueryState()
    assert not state.is_loading
    assert not state.is_error


def test_toast_queue():
    toasts = ToastQueue()
    toasts.success("Quotation updated successfully")
    toasts.error("Failed to update quotation")
    assert len(toasts) == 2
    assert toasts.latest.variant == "destructive"
    drained = toasts.drain()
    assert [t.title for t in drained] == ["Success", "Error"]
    assert len(toasts) == 0
    assert toasts.latest is None
