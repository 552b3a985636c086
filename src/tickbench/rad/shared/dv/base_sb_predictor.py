# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/tickbench/rad/shared/dv/base_sb_predictor.py

"""Reusable predictor: the shadow half of the scoreboard."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from . import utils_dv
from .base_component import BaseComponent
from .base_item import BaseItem
from .base_ref_model import BaseRefModel
from .base_signal import Signal
from .base_tick_mixin import BaseTickMixin
from .base_tick_scheduler import Tick

T = TypeVar("T", bound=BaseItem)


@dataclass(frozen=True)
class Expectation(Generic[T]):
    """Predicted outputs for the next tick.

    Attributes:
        item: Item whose output fields hold the predicted values
        valid: False while the model's state is undefined (before reset)
        tick: Tick whose pre-tick inputs produced the prediction
    """

    item: T
    valid: bool
    tick: int


class BaseSbPredictor(BaseTickMixin, BaseComponent, Generic[T]):
    """Predictor that computes expectations with a reference model each tick.

    Each tick the predictor samples the same committed (pre-tick) inputs the
    unit acts on, clones them, passes the clone to the reference model and
    stages the resulting Expectation on its own expectation register. The
    register is a double-buffered Signal owned by this predictor, so the
    comparator sees the expectation on the following tick only.

    Flow:
        Pre-tick inputs → Clone → Reference Model → Expectation
                                                    ↓
                                               exp_sig (next tick)

    Components:
        ref_model (BaseRefModel): The reference model that computes expected
                                 DUT behavior

    Reset Handling:
        The predictor watches reset_name on the DUT and forwards every
        resolvable level change to the reference model via reset_change().

    Reference:
        C.E. Cummings, "OVM/UVM Scoreboards - Fundamental Architectures,"
        SNUG 2013 (Silicon Valley)

    Example:
        >>> class MyPredictor(BaseSbPredictor[MyItem]):
        ...     def sample_dut(self, dut, tick):
        ...         return MyItem(tick=tick.seq, d=dut.d.sample())
    """

    reset_name: str = "rst"
    reset_active_low: bool = False

    def __init__(
        self,
        name: str,
        parent: BaseComponent | None,
        ref_model: BaseRefModel[T] | None = None,
    ) -> None:
        super().__init__(name, parent)
        self._tick_init_defaults()
        self.ref_model: BaseRefModel[T] | None = ref_model
        self.exp_sig: Signal
        self.predict_cnt: int = 0
        self._reset_level: int | None = None

    def build_phase(self) -> None:
        self.logger.debug("build_phase begin")
        if self.ref_model is None:
            raise RuntimeError(f"{self.get_full_name()}: no ref_model set")
        # Expectation register: created here so the env can connect it
        sched = utils_dv.uvm_config_db_get(self, "scheduler")
        self.exp_sig = sched.signal(f"{self.get_full_name()}.exp")
        self._drivers["exp"] = self.exp_sig.claim(self)
        self.logger.debug("build_phase end")

    def connect_phase(self) -> None:
        self.logger.debug("connect_phase begin")
        self._tick_bind_handles()
        self.logger.debug("connect_phase end")

    def start_of_simulation_phase(self) -> None:
        self.tick_subscribe()

    def reset_change(self, value: int, active: bool) -> None:
        """Apply reset to reference model."""
        self.logger.debug("reset_change begin")
        assert self.ref_model is not None
        self.ref_model.reset_change(value, active)
        self.logger.debug("reset_change end: value=%d active=%s", value, active)

    def _track_reset(self, dut: Any) -> None:
        level = utils_dv.get_signal_value_int(
            utils_dv.get_signal(dut, self.reset_name).value
        )
        if level is None or level == self._reset_level:
            return
        self._reset_level = level
        self.reset_change(level, bool(level) != self.reset_active_low)

    async def run_phase(self) -> None:
        self.logger.debug("run_phase begin")
        async with self.tick_stream() as ticks:
            async for tick in ticks:
                self.predict(tick)

    def predict(self, tick: Tick) -> Expectation[T] | None:
        """
        - Samples the pre-tick inputs (type T)
        - Makes a clone so the reference model never touches the sample
        - Uses a DUT-specific BaseRefModel[T] to compute expected
        - Stages the Expectation (seen by the comparator next tick)
        """
        assert self.ref_model is not None
        self._track_reset(self._dut)
        tt = self.sample_dut(self._dut, tick)
        if tt is None:
            self.drive("exp", None)
            return None
        exp = self.ref_model.calc_exp(tt.clone())
        expectation = Expectation(exp, self.ref_model.defined, tick.seq)
        self.drive("exp", expectation)
        self.predict_cnt += 1
        return expectation

    def sample_dut(self, dut: Any, tick: Tick) -> T | None:
        """Return the pre-tick inputs as an item (or None: nothing to predict)."""
        raise NotImplementedError("Implement sample_dut here")
