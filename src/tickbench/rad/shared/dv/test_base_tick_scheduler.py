# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/tickbench/rad/shared/dv/test_base_tick_scheduler.py

"""Tests for the tick scheduler and double-buffered signals."""

from __future__ import annotations

import asyncio

import pytest

from .base_tick_scheduler import InactiveSchedulerError, Tick, TickScheduler, TickStream
from .utils_dv import get_signal_value_int


async def _read_until(stream: TickStream, sig, last: int, out: list) -> None:
    async with stream as ticks:
        async for tick in ticks:
            out.append((tick.seq, get_signal_value_int(sig.value)))
            if tick.seq == last:
                break


def test_reads_see_previous_tick_regardless_of_task_order() -> None:
    async def main() -> tuple[list, list, int]:
        sched = TickScheduler()
        sig = sched.signal("count", 8, 0)
        drv = sig.claim("writer")
        before: list = []
        after: list = []

        async def writer(stream: TickStream) -> None:
            async with stream as ticks:
                async for tick in ticks:
                    drv.drive(tick.seq)
                    if tick.seq == 5:
                        break

        tasks = [
            asyncio.create_task(_read_until(sched.subscribe("r0"), sig, 5, before)),
            asyncio.create_task(writer(sched.subscribe("w"))),
            asyncio.create_task(_read_until(sched.subscribe("r1"), sig, 5, after)),
        ]
        n = await sched.run(max_ticks=5)
        await asyncio.gather(*tasks)
        return before, after, n

    before, after, n = asyncio.run(main())
    expected = [(1, 0), (2, 1), (3, 2), (4, 3), (5, 4)]
    assert before == expected
    assert after == expected
    assert n == 5


def test_time_zero_writes_visible_at_first_tick() -> None:
    async def main() -> list:
        sched = TickScheduler()
        sig = sched.signal("rst", 1)
        sig.claim("drv").drive(1)
        seen: list = []
        task = asyncio.create_task(_read_until(sched.subscribe("r"), sig, 1, seen))
        await sched.run(max_ticks=1)
        await task
        return seen

    assert asyncio.run(main()) == [(1, 1)]


def test_tick_time_and_per_stream_order() -> None:
    async def main() -> list[Tick]:
        sched = TickScheduler(period_ps=2_500)
        stream = sched.subscribe("s")
        got: list[Tick] = []

        async def consume() -> None:
            async for tick in stream:
                got.append(tick)

        task = asyncio.create_task(consume())
        sched.stop_after(4)
        assert await sched.run() == 4
        await asyncio.gather(task, return_exceptions=True)
        assert stream.count == 4
        assert sched.current == Tick(4, 10_000)
        return got

    got = asyncio.run(main())
    assert [t.seq for t in got] == [1, 2, 3, 4]
    assert [t.time_ps for t in got] == [2_500, 5_000, 7_500, 10_000]
    assert got == sorted(got)


def test_stop_cancels_waiters_and_drops_partial_tick() -> None:
    async def main() -> tuple[list, int, TickScheduler, object]:
        sched = TickScheduler()
        sig = sched.signal("v", 8, 0)
        drv = sig.claim("a")
        a, b = sched.subscribe("a"), sched.subscribe("b")

        async def stopper() -> None:
            async for tick in a:
                drv.drive(tick.seq)
                if tick.seq == 3:
                    sched.stop()

        async def idle() -> None:
            async for _ in b:
                pass

        tasks = [asyncio.create_task(stopper()), asyncio.create_task(idle())]
        n = await sched.run()
        results = await asyncio.gather(*tasks, return_exceptions=True)
        return results, n, sched, sig.value

    results, n, sched, value = asyncio.run(main())
    assert n == 3
    assert all(isinstance(r, asyncio.CancelledError) for r in results)
    # Tick 3's write was never committed
    assert get_signal_value_int(value) == 2
    assert sched.stopped
    assert not sched.running


def test_scheduler_misuse_after_stop() -> None:
    sched = TickScheduler()
    sched.stop()
    sched.stop()
    with pytest.raises(InactiveSchedulerError):
        sched.subscribe("late")
    with pytest.raises(InactiveSchedulerError):
        asyncio.run(sched.run())


def test_stop_callbacks_run_once() -> None:
    sched = TickScheduler()
    calls: list[str] = []
    sched.add_stop_callback(lambda: calls.append("a"))
    sched.add_stop_callback(lambda: calls.append("b"))
    sched.stop()
    sched.stop()
    assert calls == ["a", "b"]
    # Registered after stop: runs at once
    sched.add_stop_callback(lambda: calls.append("c"))
    assert calls == ["a", "b", "c"]


def test_writes_after_stop_are_discarded() -> None:
    sched = TickScheduler()
    sig = sched.signal("v", 4, 3)
    drv = sig.claim("d")
    sched.stop()
    drv.drive(9)
    assert get_signal_value_int(sig.value) == 3


def test_closed_stream_releases_barrier() -> None:
    async def main() -> int:
        sched = TickScheduler()
        quitter, stayer = sched.subscribe("q"), sched.subscribe("s")

        async def quit_early() -> None:
            async for tick in quitter:
                if tick.seq == 2:
                    quitter.close()
                    break

        async def stay() -> None:
            async for _ in stayer:
                pass

        tasks = [asyncio.create_task(quit_early()), asyncio.create_task(stay())]
        n = await sched.run(max_ticks=6)
        await asyncio.gather(*tasks, return_exceptions=True)
        assert quitter.count == 2
        assert stayer.count == 6
        return n

    assert asyncio.run(main()) == 6


def test_invalid_period() -> None:
    with pytest.raises(ValueError):
        TickScheduler(period_ps=0)
