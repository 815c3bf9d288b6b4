"""Tests for the concurrency-limited FIFO request queue."""

import asyncio

import pytest

from storefront.limiter import RequestQueue


def _blocking(started, gate, name):
    async def task():
        started.append(name)
        await gate.wait()
        return name

    return task


@pytest.mark.asyncio
async def test_never_exceeds_max_concurrent():
    queue = RequestQueue(max_concurrent=2)
    gate = asyncio.Event()
    started = []

    runs = [asyncio.ensure_future(queue.schedule(_blocking(started, gate, n))) for n in range(5)]
    await asyncio.sleep(0)

    assert started == [0, 1]
    assert queue.active == 2
    assert queue.waiting == 3

    gate.set()
    assert await asyncio.gather(*runs) == [0, 1, 2, 3, 4]
    assert queue.active == 0
    assert queue.waiting == 0


@pytest.mark.asyncio
async def test_waiters_are_admitted_in_arrival_order():
    queue = RequestQueue(max_concurrent=1)
    gates = [asyncio.Event() for _ in range(4)]
    started = []

    runs = [asyncio.ensure_future(queue.schedule(_blocking(started, gates[n], n))) for n in range(4)]
    await asyncio.sleep(0)

    for n in range(4):
        assert started == list(range(n + 1))
        gates[n].set()
        await runs[n]
        await asyncio.sleep(0)

    assert started == [0, 1, 2, 3]


@pytest.mark.asyncio
async def test_newcomer_does_not_overtake_waiters():
    queue = RequestQueue(max_concurrent=1)
    gate = asyncio.Event()
    started = []

    first = asyncio.ensure_future(queue.schedule(_blocking(started, gate, "first")))
    second = asyncio.ensure_future(queue.schedule(_blocking(started, gate, "second")))
    await asyncio.sleep(0)

    gate.set()
    await first
    late = asyncio.ensure_future(queue.schedule(_blocking(started, gate, "late")))
    await asyncio.gather(second, late)

    assert started == ["first", "second", "late"]


@pytest.mark.asyncio
async def test_failure_releases_slot_and_spares_others():
    queue = RequestQueue(max_concurrent=1)

    async def failing():
        raise ValueError("nope")

    async def fine():
        return "ok"

    results = await asyncio.gather(queue.schedule(failing), queue.schedule(fine), return_exceptions=True)

    assert isinstance(results[0], ValueError)
    assert results[1] == "ok"
    assert queue.active == 0


@pytest.mark.asyncio
async def test_cancelled_waiter_leaves_without_a_slot():
    queue = RequestQueue(max_concurrent=1)
    gate = asyncio.Event()
    started = []

    running = asyncio.ensure_future(queue.schedule(_blocking(started, gate, "running")))
    doomed = asyncio.ensure_future(queue.schedule(_blocking(started, gate, "doomed")))
    after = asyncio.ensure_future(queue.schedule(_blocking(started, gate, "after")))
    await asyncio.sleep(0)

    doomed.cancel()
    await asyncio.sleep(0)
    assert queue.waiting == 1

    gate.set()
    await asyncio.gather(running, after)

    assert doomed.cancelled()
    assert started == ["running", "after"]
    assert queue.active == 0


@pytest.mark.asyncio
async def test_cancelling_a_running_task_frees_its_slot():
    queue = RequestQueue(max_concurrent=1)
    gate = asyncio.Event()
    started = []

    running = asyncio.ensure_future(queue.schedule(_blocking(started, gate, "running")))
    waiting = asyncio.ensure_future(queue.schedule(_blocking(started, asyncio.Event(), "waiting")))
    await asyncio.sleep(0)

    running.cancel()
    await asyncio.sleep(0)
    await asyncio.sleep(0)

    assert started == ["running", "waiting"]
    assert queue.active == 1
    waiting.cancel()
    await asyncio.gather(waiting, return_exceptions=True)
    assert queue.active == 0


def test_needs_at_least_one_slot():
    with pytest.raises(ValueError):
        RequestQueue(max_concurrent=0)
