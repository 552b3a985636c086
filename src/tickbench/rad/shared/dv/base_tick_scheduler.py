# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/tickbench/rad/shared/dv/base_tick_scheduler.py

"""Tick scheduler with a two-phase (read, then commit) barrier per period."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from types import TracebackType
from typing import Any, Callable, Mapping

from . import utils_dv
from .base_signal import Signal, SignalBundle


class InactiveSchedulerError(RuntimeError):
    """The scheduler was used after stop()."""


@dataclass(frozen=True, order=True)
class Tick:
    """One clock-period boundary."""

    seq: int
    time_ps: int = 0


class TickStream:
    """Per-subscriber sequence of Ticks.

    A stream has its own delivery position. Taking a tick (``__anext__``
    returning) opens the subscriber's window for that tick; asking for the
    next tick, or closing the stream, closes it. The scheduler commits staged
    signal writes only after every stream has closed its window, so all reads
    made inside a window see the values committed at the end of the previous
    tick.

    A subscriber must either keep iterating or close() its stream; a stream
    that is neither holds the barrier. ``async with`` closes the stream on
    exit, which is the easy way to leave a tick loop early:

    Example:
        >>> async with sched.subscribe("drv") as ticks:
        ...     async for tick in ticks:
        ...         if done:
        ...             break
    """

    def __init__(self, scheduler: TickScheduler, name: str) -> None:
        self.name: str = name
        self.count: int = 0
        self.last: Tick | None = None
        self._scheduler = scheduler
        self._pending: Tick | None = None
        self._waiter: asyncio.Future[Tick | None] | None = None
        self._in_window: bool = False
        self._closed: bool = False

    def __repr__(self) -> str:
        return f"TickStream({self.name!r}, count={self.count}, closed={self._closed})"

    @property
    def closed(self) -> bool:
        return self._closed

    def __aiter__(self) -> TickStream:
        return self

    async def __anext__(self) -> Tick:
        self._close_window()
        if self._closed:
            raise StopAsyncIteration
        if self._scheduler.stopped:
            raise asyncio.CancelledError(f"scheduler stopped ({self.name})")
        if self._pending is not None:
            tick = self._pending
            self._pending = None
        else:
            self._waiter = asyncio.get_running_loop().create_future()
            try:
                offered = await self._waiter
            finally:
                self._waiter = None
            if offered is None:
                raise StopAsyncIteration
            tick = offered
        self._in_window = True
        self.count += 1
        self.last = tick
        return tick

    async def __aenter__(self) -> TickStream:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Leave the scheduler; later iteration ends with StopAsyncIteration."""
        if self._closed:
            return
        self._closed = True
        self._in_window = False
        self._pending = None
        if self._waiter is not None and not self._waiter.done():
            self._waiter.set_result(None)
        self._scheduler._detach(self)  # pylint: disable=protected-access

    def _offer(self, tick: Tick) -> None:
        if self._waiter is not None and not self._waiter.done():
            self._waiter.set_result(tick)
        else:
            self._pending = tick

    def _close_window(self) -> None:
        if self._in_window:
            self._in_window = False
            self._scheduler._window_closed(self)  # pylint: disable=protected-access

    def _cancel(self) -> None:
        self._pending = None
        if self._waiter is not None and not self._waiter.done():
            self._waiter.cancel()


class TickScheduler:
    """Raises a strictly periodic Tick and commits shared state between ticks.

    Per tick n:
        1. Offer Tick n to every subscribed stream (read phase opens)
        2. Wait until every stream has closed its window for n (barrier)
        3. Commit every signal write staged during the window (write phase)

    Writes staged before run() are committed at time zero, so they are
    visible from Tick 1. After stop() no tick is delivered, waiting streams
    are released with asyncio.CancelledError, staged writes of the partial
    tick are dropped, subscribe() raises InactiveSchedulerError, and every
    stop callback runs once (BaseEnv uses one to close its analysis ports,
    which releases a producer blocked on a full subscriber).

    Attributes:
        period_ps: Tick period in picoseconds (Tick.time_ps = seq * period_ps)
        name: Scheduler name, used for logging
    """

    def __init__(self, period_ps: int = 1_000, name: str = "sched") -> None:
        if period_ps <= 0:
            raise ValueError(f"period_ps must be > 0, got {period_ps}")
        self.period_ps: int = period_ps
        self.name: str = name
        self.logger: logging.Logger = logging.getLogger(f"tb.{name}")
        utils_dv.configure_non_component_logger(self.logger)
        self._streams: list[TickStream] = []
        self._open: set[TickStream] = set()
        self._dirty: list[Signal] = []
        self._settled: asyncio.Event | None = None
        self._current: Tick | None = None
        self._stopped: bool = False
        self._running: bool = False
        self._stop_after: int | None = None
        self._on_stop: list[Callable[[], None]] = []

    @property
    def current(self) -> Tick | None:
        """Most recent tick delivered (None before the first tick)."""
        return self._current

    @property
    def active(self) -> bool:
        return not self._stopped

    @property
    def stopped(self) -> bool:
        return self._stopped

    @property
    def running(self) -> bool:
        return self._running

    def subscribe(self, name: str = "") -> TickStream:
        """Return a new stream that receives every tick from the next one on."""
        if self._stopped:
            raise InactiveSchedulerError(
                f"scheduler '{self.name}' is stopped; cannot subscribe {name!r}"
            )
        stream = TickStream(self, name or f"stream{len(self._streams)}")
        self._streams.append(stream)
        self.logger.debug("subscribe %s", stream.name)
        return stream

    def signal(self, name: str, width: int | None = None, init: Any = None) -> Signal:
        """Create a double-buffered signal committed by this scheduler."""
        return Signal(name, width, init, self)

    def bundle(
        self,
        name: str,
        widths: Mapping[str, int | None],
        init: Mapping[str, Any] | None = None,
    ) -> SignalBundle:
        """Create a named group of signals from a {name: width} mapping."""
        return SignalBundle.from_widths(name, widths, self, init)

    async def run(self, max_ticks: int | None = None) -> int:
        """Generate ticks until stop() (or max_ticks); return ticks delivered."""
        if self._stopped:
            raise InactiveSchedulerError(f"scheduler '{self.name}' is stopped")
        if self._running:
            raise RuntimeError(f"scheduler '{self.name}' is already running")
        self.logger.debug("run begin")
        self._running = True
        self._settled = asyncio.Event()
        delivered = 0
        try:
            # Let already-started roles stage their time-zero values first
            await asyncio.sleep(0)
            self._commit(Tick(0, 0))
            while not self._stopped:
                if (max_ticks is not None and delivered >= max_ticks) or (
                    self._stop_after is not None and delivered >= self._stop_after
                ):
                    self.stop()
                    break
                seq = delivered + 1
                tick = Tick(seq, seq * self.period_ps)
                self._current = tick
                self._settled.clear()
                self._open = set(self._streams)
                for stream in list(self._streams):
                    stream._offer(tick)  # pylint: disable=protected-access
                delivered += 1
                if self._open:
                    await self._settled.wait()
                if self._stopped:
                    break
                self._commit(tick)
        finally:
            self._running = False
            self._dirty.clear()
        self.logger.debug("run end: %d tick(s)", delivered)
        return delivered

    def stop_after(self, seq: int) -> None:
        """Stop once Tick seq has been delivered and committed.

        If the scheduler is already past seq it stops at the end of the
        current tick. Repeated calls keep the earliest limit.
        """
        if self._stop_after is None or seq < self._stop_after:
            self._stop_after = seq
        self.logger.debug("stop_after %d", self._stop_after)

    def add_stop_callback(self, callback: Callable[[], None]) -> None:
        """Call callback once when the scheduler stops (now, if it has)."""
        if self._stopped:
            callback()
        else:
            self._on_stop.append(callback)

    def stop(self) -> None:
        """Stop generating ticks and release every waiting stream. Idempotent."""
        if self._stopped:
            return
        self.logger.debug("stop at %s", self._current)
        self._stopped = True
        for stream in list(self._streams):
            stream._cancel()  # pylint: disable=protected-access
        self._open.clear()
        if self._settled is not None:
            self._settled.set()
        callbacks, self._on_stop = self._on_stop, []
        for callback in callbacks:
            callback()

    def _mark_dirty(self, signal: Signal) -> None:
        self._dirty.append(signal)

    def _commit(self, tick: Tick) -> None:
        dirty, self._dirty = self._dirty, []
        for signal in dirty:
            signal._commit(tick.seq)  # pylint: disable=protected-access

    def _window_closed(self, stream: TickStream) -> None:
        self._open.discard(stream)
        if not self._open and self._settled is not None:
            self._settled.set()

    def _detach(self, stream: TickStream) -> None:
        if stream in self._streams:
            self._streams.remove(stream)
        self._window_closed(stream)
