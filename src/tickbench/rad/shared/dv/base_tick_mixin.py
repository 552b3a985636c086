# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/tickbench/rad/shared/dv/base_tick_mixin.py

"""Shared helpers for binding the scheduler and DUT handles and taking ticks."""

from __future__ import annotations

from typing import Any, cast

from . import utils_dv
from .base_component import BaseComponent
from .base_signal import SignalDriver
from .base_tick_scheduler import TickScheduler, TickStream


class BaseTickMixin:
    """Mixin providing tick subscription and signal-driving utilities.

    This mixin is used by drivers, monitors, predictors, comparators and unit
    proxies to standardize how a tick role finds its scheduler and DUT
    handles and how it writes signals. It provides:

    - Handle binding (scheduler, dut) from the config DB
    - A per-component TickStream named after the component
    - Claimed, single-writer SignalDrivers keyed by signal name

    Timing:
        Every tick role suspends only at "wait for next tick". Reads made in a
        tick window return values committed at the end of the previous tick;
        drives are staged and committed after every role has finished the
        window. No role ever observes another role's write of the same tick.

    Example:
        >>> class MyMonitor(BaseTickMixin, BaseComponent):
        ...     async def run_phase(self):
        ...         async with self.tick_subscribe() as ticks:
        ...             async for tick in ticks:
        ...                 self.sample(self._dut)
    """

    has_tick_role: bool = True

    def _tick_init_defaults(self) -> None:
        """Set defaults in __init__ of the consumer."""
        self._sched: TickScheduler | None = None
        self._dut: Any | None = None
        self._drivers: dict[str, SignalDriver] = {}
        self._ticks: TickStream | None = None

    def _as_comp(self) -> BaseComponent:
        """Type-narrow self (the mixin is only used on components)."""
        return cast(BaseComponent, self)

    def _tick_bind_handles(self) -> None:
        """Bind scheduler/dut once (connect phase)."""
        comp = self._as_comp()
        comp.logger.debug("_tick_bind_handles begin")
        self._sched = utils_dv.uvm_config_db_get(comp, "scheduler")
        self._dut = utils_dv.uvm_config_db_get(comp, "dut")
        comp.logger.debug("_tick_bind_handles end")

    def tick_subscribe(self) -> TickStream:
        """Open this component's tick stream (start of simulation)."""
        assert (
            self._sched is not None
        ), "tick_subscribe called before _tick_bind_handles"
        self._ticks = self._sched.subscribe(self._as_comp().get_full_name())
        return self._ticks

    def tick_stream(self) -> TickStream:
        """The stream opened by tick_subscribe()."""
        assert self._ticks is not None, "run_phase called before tick_subscribe"
        return self._ticks

    def claim_signals(self, *names: str, bundle: Any = None) -> None:
        """Become the single writer of the named DUT (or bundle) signals."""
        src = self._dut if bundle is None else bundle
        for name in names:
            sig = getattr(src, name)
            self._drivers[name] = sig.claim(self)

    def drive(self, name: str, value: Any) -> None:
        """Stage value on a claimed signal (visible after this tick commits)."""
        self._drivers[name].drive(value)
