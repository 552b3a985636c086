# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/tickbench/rad/shared/dv/base_monitor.py

"""Base monitor with per-tick sampling hook."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from . import utils_dv
from .base_analysis_port import AnalysisPort
from .base_component import BaseComponent
from .base_item import BaseItem
from .base_tick_mixin import BaseTickMixin
from .base_tick_scheduler import Tick

T = TypeVar("T", bound=BaseItem)


class BaseMonitor(BaseTickMixin, BaseComponent, Generic[T]):
    """Base monitor with tick synchronization and analysis port infrastructure.

    This monitor provides the foundation for observing DUT signals and
    publishing transactions. Each tick it calls sample_dut() on the values
    committed at the tick boundary; a returned item is published on ap, a
    returned None means "nothing to report this tick".

    The monitor:
    - Maintains an analysis port for publishing transactions
    - Binds DUT and scheduler handles once (connect phase)
    - Implements the standard monitor run loop pattern
    - Tracks the number of items observed

    Subclasses must implement:
        sample_dut(dut, tick): Sample DUT signals and return a transaction or None

    Attributes:
        ap: Analysis port for broadcasting observed transactions
        item_count: Number of transactions published

    Example:
        >>> class MyMonitor(BaseMonitor[MyItem]):
        ...     def sample_dut(self, dut, tick):
        ...         if not utils_dv.is_asserted(dut.valid.value):
        ...             return None
        ...         return MyItem(tick=tick.seq, data=dut.data.sample())
    """

    def __init__(self, name: str, parent: BaseComponent | None) -> None:
        super().__init__(name, parent)
        self._tick_init_defaults()
        self.ap: AnalysisPort[T]
        self.item_count: int = 0

    def build_phase(self) -> None:
        self.logger.debug("build_phase begin")
        cfg = utils_dv.uvm_config_db_get_try(self, "cfg")
        policy = cfg.subscriber_buffer_policy if cfg is not None else None
        self.ap = AnalysisPort("ap", self, policy)
        self.logger.debug("build_phase end")

    def connect_phase(self) -> None:
        self.logger.debug("connect_phase begin")
        self._tick_bind_handles()
        self.logger.debug("connect_phase end")

    def start_of_simulation_phase(self) -> None:
        self.tick_subscribe()

    async def run_phase(self) -> None:
        self.logger.debug("run_phase begin")
        tr: T | None
        async with self.tick_stream() as ticks:
            async for tick in ticks:
                tr = self.sample_dut(self._dut, tick)
                if tr is not None:
                    self.item_count += 1
                    await self.ap.publish(tr)

    def sample_dut(self, dut: Any, tick: Tick) -> T | None:
        """Return the transaction observed at this tick (or None to skip)."""
        raise NotImplementedError("Implement sample_dut here")
