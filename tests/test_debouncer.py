"""Tests for the single-slot debouncer."""

import asyncio

import pytest

from moviescout.services.debouncer import Debouncer


@pytest.mark.asyncio
async def test_rapid_changes_emit_only_last_value():
    emitted = []
    debouncer = Debouncer(emitted.append, 50)

    for value in ["b", "ba", "bat", "batm", "batman"]:
        debouncer.observe(value)
        await asyncio.sleep(0.005)

    assert emitted == []
    await asyncio.sleep(0.15)
    assert emitted == ["batman"]
    assert not debouncer.pending


@pytest.mark.asyncio
async def test_async_callback_is_awaited():
    emitted = []

    async def callback(value):
        await asyncio.sleep(0)
        emitted.append(value)

    debouncer = Debouncer(callback, 10)
    debouncer.observe("dune")
    await asyncio.sleep(0.1)
    assert emitted == ["dune"]


@pytest.mark.asyncio
async def test_identical_value_still_reschedules():
    emitted = []
    debouncer = Debouncer(emitted.append, 100)

    debouncer.observe("x")
    await asyncio.sleep(0.06)
    debouncer.observe("x")
    await asyncio.sleep(0.06)
    # 120ms since the first call, only 60ms since the second
    assert emitted == []

    await asyncio.sleep(0.12)
    assert emitted == ["x"]


@pytest.mark.asyncio
async def test_separate_quiet_periods_emit_each_value():
    emitted = []
    debouncer = Debouncer(emitted.append, 10)

    debouncer.observe("alien")
    await asyncio.sleep(0.08)
    debouncer.observe("aliens")
    await asyncio.sleep(0.08)

    assert emitted == ["alien", "aliens"]


@pytest.mark.asyncio
async def test_close_cancels_pending_emission():
    emitted = []
    debouncer = Debouncer(emitted.append, 20)

    debouncer.observe("heat")
    assert debouncer.pending
    debouncer.close()
    await asyncio.sleep(0.08)

    assert emitted == []
    assert not debouncer.pending


@pytest.mark.asyncio
async def test_observe_after_close_is_ignored():
    emitted = []
    debouncer = Debouncer(emitted.append, 5)
    debouncer.close()

    debouncer.observe("heat")
    await asyncio.sleep(0.05)
    assert emitted == []


@pytest.mark.asyncio
async def test_new_value_does_not_cancel_running_emission():
    started = asyncio.Event()
    release = asyncio.Event()
    finished = []

    async def slow_callback(value):
        started.set()
        await release.wait()
        finished.append(value)

    debouncer = Debouncer(slow_callback, 5)
    debouncer.observe("first")
    await asyncio.wait_for(started.wait(), timeout=1)

    debouncer.observe("second")
    release.set()
    await asyncio.sleep(0.05)

    assert finished == ["first", "second"]


@pytest.mark.asyncio
async def test_failing_callback_does_not_break_debouncer():
    emitted = []

    def callback(value):
        if value == "boom":
            raise RuntimeError("boom")
        emitted.append(value)

    debouncer = Debouncer(callback, 5)
    debouncer.observe("boom")
    await asyncio.sleep(0.03)
    debouncer.observe("ok")
    await asyncio.sleep(0.03)

    assert emitted == ["ok"]


def test_negative_quiet_period_rejected():
    with pytest.raises(ValueError):
        Debouncer(lambda v: None, -1)


@pytest.mark.asyncio
async def test_running_emission_is_held_until_done():
    started = asyncio.Event()
    release = asyncio.Event()

    async def callback(value):
        started.set()
        await release.wait()

    debouncer = Debouncer(callback, 5)
    debouncer.observe("a")
    await asyncio.wait_for(started.wait(), timeout=1)

    assert not debouncer.pending
    assert debouncer.running == 1

    release.set()
    await asyncio.sleep(0.02)
    assert debouncer.running == 0
