# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/tickbench/rad/shared/dv/base_sb_comparator.py

"""Reusable comparator: checks committed outputs against last tick's expectation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

from . import utils_dv
from .base_component import BaseComponent
from .base_item import BaseItem, FieldDiff
from .base_sb_predictor import Expectation
from .base_signal import Signal
from .base_tick_mixin import BaseTickMixin
from .base_tick_scheduler import Tick
from .utils_dv import Verdict

T = TypeVar("T", bound=BaseItem)


@dataclass(frozen=True)
class CheckFailure:
    """One failed field comparison."""

    tick: int
    field: str
    expected: Any
    actual: Any
    verdict: Verdict
    exp_tick: int | None = None

    def __str__(self) -> str:
        return (
            f"{self.verdict.name} tick={self.tick} field={self.field} "
            f"exp={utils_dv.format_value(self.expected)} "
            f"act={utils_dv.format_value(self.actual)}"
        )


class BaseSbComparator(BaseTickMixin, BaseComponent, Generic[T]):
    """Scoreboard comparator with a mandatory one-tick expectation pipeline.

    This component compares, every tick, the unit's committed outputs (the
    post-tick state of the previous period) against the expectation the
    predictor staged one tick earlier. It never sees an expectation in the
    tick that produced it, because the expectation register is double
    buffered like every other signal.

    Architecture:
        Predictor (tick n-1) → exp_sig ──┐
                                         ├→ Compare (tick n) → Pass/Fail
        Unit outputs (tick n) → sample ──┘

    Classification:
        No expectation yet: pipeline bubble, not compared
        Expectation not valid (model undefined): INDETERMINATE
        Any field X/Z on either side: INDETERMINATE
        Any resolved field differs: MISMATCH
        INDETERMINATE counts as an error exactly like MISMATCH.

    Statistics:
        vect_cnt: Total number of comparisons performed
        pass_cnt: Number of passing comparisons
        err_cnt: Number of failing comparisons (mismatch + indeterminate)
        mismatch_cnt / indeterminate_cnt: err_cnt split by verdict
        bubble_cnt: Ticks with no expectation to compare
        failures: CheckFailure per failing field, in tick order

    Configuration (HarnessConfig, via the hierarchy):
        sb_fail_on_error (bool): Errors make the run fail (default: True)
        sb_error_quit_count (int): Stop the scheduler after this many errors
                                  (default: 0, never)
        sb_initial_flush_num (int): Number of expectations to skip before
                                   comparing (default: 0)

    Failures are recorded and logged, never raised, so one failing tick does
    not hide the ticks after it. on_failure, if set, is called live with
    each CheckFailure.

    Reference:
        C.E. Cummings, "OVM/UVM Scoreboards - Fundamental Architectures,"
        SNUG 2013 (Silicon Valley)
    """

    def __init__(self, name: str, parent: BaseComponent | None) -> None:
        super().__init__(name, parent)
        self._tick_init_defaults()

        self.exp_sig: Signal | None = None
        self.on_failure: Callable[[CheckFailure], None] | None = None
        self.failures: list[CheckFailure] = []

        self.vect_cnt: int = 0
        self.pass_cnt: int = 0
        self.err_cnt: int = 0
        self.mismatch_cnt: int = 0
        self.indeterminate_cnt: int = 0
        self.bubble_cnt: int = 0
        self.flush_cnt: int = 0

        self.fail_on_error: bool = True
        self.error_quit_count: int = 0
        self.initial_flush_num: int = 0

    def connect_phase(self) -> None:
        self.logger.debug("connect_phase begin")
        self._tick_bind_handles()
        cfg = utils_dv.uvm_config_db_get_try(self, "cfg")
        if cfg is not None:
            self.fail_on_error = bool(cfg.sb_fail_on_error)
            self.error_quit_count = max(0, int(cfg.sb_error_quit_count))
            self.initial_flush_num = max(0, int(cfg.sb_initial_flush_num))
        if self.exp_sig is None:
            raise RuntimeError(f"{self.get_full_name()}: exp_sig not connected")
        self.logger.debug("connect_phase end")

    def start_of_simulation_phase(self) -> None:
        self.tick_subscribe()

    async def run_phase(self) -> None:
        self.logger.debug("run_phase begin")
        assert self.exp_sig is not None
        async with self.tick_stream() as ticks:
            async for tick in ticks:
                exp: Expectation[T] | None = self.exp_sig.value
                if exp is None:
                    self.bubble_cnt += 1
                    continue
                act = self.sample_dut(self._dut, tick)
                if self.flush_cnt < self.initial_flush_num:
                    self.flush_cnt += 1
                    self.logger.debug(
                        "Initial flush %d: exp=%s act=%s", self.flush_cnt, exp.item, act
                    )
                    continue
                self.check(exp, act, tick)
                if self.error_quit_count and self.err_cnt >= self.error_quit_count:
                    self.logger.error(
                        "Scoreboard error_quit_count reached "
                        "(errors=%d, threshold=%d); stopping",
                        self.err_cnt,
                        self.error_quit_count,
                    )
                    assert self._sched is not None
                    self._sched.stop()
                    break

    def check(self, exp: Expectation[T], act: T, tick: Tick) -> Verdict:
        """Compare act against exp and record the outcome."""
        self.vect_cnt += 1
        diffs: list[FieldDiff]
        if exp.valid:
            diffs = act.diff_out(exp.item)
        else:
            diffs = [
                FieldDiff(
                    f, getattr(exp.item, f), getattr(act, f), Verdict.INDETERMINATE
                )
                for f in act._out_fields()  # pylint: disable=protected-access
            ]
        if not diffs:
            self.pass_cnt += 1
            self.logger.debug(
                "PASS tick=%d exp=%s act=%s vect_cnt=%s",
                tick.seq,
                exp.item.outputs_str(),
                act.outputs_str(),
                self.vect_cnt,
            )
            return Verdict.PASS

        self.err_cnt += 1
        if any(d.verdict is Verdict.INDETERMINATE for d in diffs):
            verdict = Verdict.INDETERMINATE
            self.indeterminate_cnt += 1
        else:
            verdict = Verdict.MISMATCH
            self.mismatch_cnt += 1
        for d in diffs:
            failure = CheckFailure(
                tick.seq, d.field, d.expected, d.actual, d.verdict, exp.tick
            )
            self.failures.append(failure)
            self.logger.error("%s", failure)
            if self.on_failure is not None:
                self.on_failure(failure)
        return verdict

    def sample_dut(self, dut: Any, tick: Tick) -> T:
        """Return the unit's committed outputs as an item."""
        raise NotImplementedError("Implement sample_dut here")

    def report_phase(self) -> None:
        self.logger.debug("report_phase begin")
        if self.vect_cnt and self.err_cnt == 0:
            self.logger.info(
                "*** TEST PASSED - %d ran, %d passed ***", self.vect_cnt, self.pass_cnt
            )
        else:
            self.logger.error(
                "*** TEST FAILED - %d ran, %d passed, %d failed "
                "(%d mismatch, %d indeterminate) ***",
                self.vect_cnt,
                self.pass_cnt,
                self.err_cnt,
                self.mismatch_cnt,
                self.indeterminate_cnt,
            )
        self.logger.debug("report_phase end")
