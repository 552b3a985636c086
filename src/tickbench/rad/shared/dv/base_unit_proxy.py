# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/tickbench/rad/shared/dv/base_unit_proxy.py

"""Tick role wrapping an opaque clocked unit under test."""

from __future__ import annotations

from typing import Any, Mapping, Protocol, Sequence, runtime_checkable

from .base_component import BaseComponent
from .base_tick_mixin import BaseTickMixin


@runtime_checkable
class ClockedUnit(Protocol):
    """Anything that can apply inputs, advance one tick and expose outputs."""

    def apply(self, inputs: Mapping[str, Any]) -> None:
        """Present input values (taken from committed signals)."""

    def advance(self) -> None:
        """Advance one clock period."""

    @property
    def outputs(self) -> Mapping[str, Any]:
        """Current output values, keyed by DUT signal name."""


class BaseUnitProxy(BaseTickMixin, BaseComponent):
    """Connects a ClockedUnit to the DUT signals.

    Each tick the proxy reads the committed inputs, applies them to the unit,
    advances it once and stages its outputs on the output signals it owns.
    Output changes are therefore observable on the next tick, exactly like a
    register clocked at the tick boundary.

    Attributes:
        unit: The unit under test
        input_names: DUT signals read each tick
        output_names: DUT signals owned and written each tick
    """

    def __init__(
        self,
        name: str,
        parent: BaseComponent | None,
        unit: ClockedUnit,
        input_names: Sequence[str],
        output_names: Sequence[str],
    ) -> None:
        super().__init__(name, parent)
        self._tick_init_defaults()
        self.unit: ClockedUnit = unit
        self.input_names: tuple[str, ...] = tuple(input_names)
        self.output_names: tuple[str, ...] = tuple(output_names)

    def connect_phase(self) -> None:
        self.logger.debug("connect_phase begin")
        self._tick_bind_handles()
        self.claim_signals(*self.output_names)
        self.logger.debug("connect_phase end")

    def start_of_simulation_phase(self) -> None:
        self.logger.debug("start_of_simulation_phase begin")
        self._drive_outputs()
        self.tick_subscribe()
        self.logger.debug("start_of_simulation_phase end")

    def _drive_outputs(self) -> None:
        outputs = self.unit.outputs
        for name in self.output_names:
            self.drive(name, outputs[name])

    async def run_phase(self) -> None:
        self.logger.debug("run_phase begin")
        async with self.tick_stream() as ticks:
            async for _ in ticks:
                inputs = {n: getattr(self._dut, n).sample() for n in self.input_names}
                self.unit.apply(inputs)
                self.unit.advance()
                self._drive_outputs()
