# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/tickbench/rad/shared/dv/base_driver.py

"""Base driver: one sequence item per tick through owned signals."""

from __future__ import annotations

import asyncio
from typing import Any, Generic, Iterator, TypeVar

from .base_component import BaseComponent
from .base_item import BaseItem
from .base_sequence import BaseSequence
from .base_tick_mixin import BaseTickMixin

T = TypeVar("T", bound=BaseItem)


class BaseDriver(BaseTickMixin, BaseComponent, Generic[T]):
    """Tick-synchronized driver that applies one sequence item per tick.

    The driver owns (claims) every signal named in dut_inputs, so no other
    role can write them. Drives are staged, which means an item driven in the
    window of tick n is observed by every role at tick n+1, never mid-tick.

    The driver:
    - Applies initial DUT input values and the first item at time 0
    - Drives the next item in each tick window
    - Records every item in drive order (driven)
    - Sets done once the last item has been visible for a full tick, then
      leaves the tick stream (inputs keep their last values)

    Subclasses must implement:
        drive_item(dut, tr): Drive DUT signals for one transaction

    Attributes:
        dut_inputs: Names of the DUT signals this driver owns
        initial_dut_input_values: Dict mapping signal names to initial values
        seq: Sequence supplying the items
        driven: Items in the order they were driven (tick = drive tick)
        done: asyncio.Event set when the sequence is exhausted
        done_tick: Tick at which done was set

    Reference:
        C.E. Cummings, "Applying Stimulus & Sampling Outputs," SNUG 2016

    Example:
        >>> class MyDriver(BaseDriver[MyItem]):
        ...     dut_inputs = ("data",)
        ...
        ...     def drive_item(self, dut, tr):
        ...         self.drive("data", tr.data)
    """

    dut_inputs: tuple[str, ...] = ()

    def __init__(self, name: str, parent: BaseComponent | None) -> None:
        super().__init__(name, parent)
        self._tick_init_defaults()
        self.initial_dut_input_values: dict[str, Any] = {}
        self.seq: BaseSequence[T] | None = None
        self.driven: list[T] = []
        self.done: asyncio.Event = asyncio.Event()
        self.done_tick: int | None = None
        self._items: Iterator[T] | None = None

    def connect_phase(self) -> None:
        self.logger.debug("connect_phase begin")
        self._tick_bind_handles()
        self.claim_signals(*self.dut_inputs)
        self.logger.debug("connect_phase end")

    def start_of_simulation_phase(self) -> None:
        self.logger.debug("start_of_simulation_phase begin")
        if self.seq is None:
            raise RuntimeError(f"{self.get_full_name()}: no sequence set")
        self._items = self.seq.items()
        self.apply_initial_dut_inputs()
        self.tick_subscribe()
        self.logger.debug("start_of_simulation_phase end")

    def apply_initial_dut_inputs(self) -> None:
        """
        Reference: SNUG 2016 "Applying Stimulus & Sampling Outputs." Apply DUT
        inputs at time 0; the scheduler commits them before Tick 1, together
        with the first item, so every role sees them at Tick 1.
        """
        self.logger.debug("apply_initial_dut_inputs begin")
        for sig_name, val in self.initial_dut_input_values.items():
            self.drive(sig_name, val)
        self._drive_next(0)
        self.logger.debug("apply_initial_dut_inputs end")

    def _drive_next(self, seq: int) -> bool:
        assert self._items is not None
        tr = next(self._items, None)
        if tr is None:
            return False
        tr = tr.clone(tick=seq)
        self.drive_item(self._dut, tr)
        self.driven.append(tr)
        return True

    async def run_phase(self) -> None:
        self.logger.debug("run_phase begin")
        async with self.tick_stream() as ticks:
            async for tick in ticks:
                if not self._drive_next(tick.seq):
                    # Last item has been visible for this whole tick
                    self.done_tick = tick.seq
                    self.done.set()
                    break
        self.logger.debug("run_phase end: %d item(s) driven", len(self.driven))

    def drive_item(self, dut: Any, tr: T) -> None:
        """Drive DUT signals for one transaction."""
        raise NotImplementedError("Implement DUT signal driving here")
