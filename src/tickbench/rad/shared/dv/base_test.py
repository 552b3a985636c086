# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/tickbench/rad/shared/dv/base_test.py

"""Base test scaffold (config + env creation + phased run)."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any

from . import utils_dv
from .base_component import BaseComponent
from .base_config import HarnessConfig
from .base_env import BaseEnv


@dataclass(frozen=True)
class RunSummary:  # pylint: disable=too-many-instance-attributes
    """End-of-run counts and verdict."""

    name: str
    ticks: int
    transfers: int
    comparisons: int
    passes: int
    mismatches: int
    indeterminate: int
    dropped: int
    fail_on_error: bool = True

    @property
    def errors(self) -> int:
        return self.mismatches + self.indeterminate

    @property
    def passed(self) -> bool:
        return not (self.fail_on_error and self.errors)

    @property
    def exit_status(self) -> int:
        return 0 if self.passed else 1

    def __str__(self) -> str:
        return (
            f"{'PASS' if self.passed else 'FAIL'} {self.name}: ticks={self.ticks} "
            f"transfers={self.transfers} comparisons={self.comparisons} "
            f"passes={self.passes} mismatches={self.mismatches} "
            f"indeterminate={self.indeterminate} dropped={self.dropped}"
        )


class BaseTest(BaseComponent):
    """Base test providing configuration, environment setup and the run loop.

    Phases (top-down over the hierarchy, like UVM):
        build_phase: Resolve HarnessConfig, create env (and its children)
        connect_phase: Bind handles, claim signals, subscribe ports
        start_of_simulation_phase: Time-zero drives, tick subscriptions
        run_phase: One task per component, plus the scheduler
        report_phase: Scoreboard summaries

    Run Control:
        The run ends drain_ticks ticks after the driver's done event. The
        scheduler then stops, releasing every tick role; analysis ports are
        closed so subscribers drain and finish. A component that raises stops
        the scheduler (so nothing hangs) and the exception is re-raised from
        run() once every task has finished.

    Configuration Sources (precedence: env > plusargs > YAML > defaults):
        See HarnessConfig.from_settings(). A cfg passed to the constructor is
        used as-is.

    Subclasses must implement:
        build_envs(): Create self.env

    Example:
        >>> class MyTest(BaseTest):
        ...     def build_envs(self):
        ...         self.env = MyEnv("env", self, self.cfg)
        ...
        >>> summary = asyncio.run(MyTest("my_test").run())
    """

    def __init__(self, name: str = "test", cfg: HarnessConfig | None = None) -> None:
        # One bench per uvm_root, as in uvm_root.run_test
        utils_dv.reset_uvm_hierarchy()
        super().__init__(name, None)
        self.cfg: HarnessConfig | None = cfg
        self.env: BaseEnv
        self.summary: RunSummary | None = None

    def build_phase(self) -> None:
        self.logger.debug("build_phase begin")
        if self.cfg is None:
            self.cfg = HarnessConfig.from_settings()
        self.logger.debug("Run seed: %s", self.cfg.seed)
        self.build_envs()
        self.logger.debug("build_phase end")

    def build_envs(self) -> None:
        raise NotImplementedError

    def _phase_top_down(self, phase: str) -> None:
        pending: list[BaseComponent] = [self]
        while pending:
            comp = pending.pop(0)
            getattr(comp, phase)()
            # Children created by this phase are visited too
            pending[0:0] = comp.phased_children()

    def _phase_bottom_up(self, phase: str) -> None:
        for comp in reversed(list(self.walk())):
            getattr(comp, phase)()

    async def _guard(self, comp: BaseComponent) -> None:
        try:
            await comp.run_phase()
        except asyncio.CancelledError:
            raise
        except Exception:
            comp.logger.exception("run_phase failed; stopping the scheduler")
            self.env.scheduler.stop()
            raise

    async def control_phase(self) -> None:
        """Stop the scheduler drain_ticks after the driver is done."""
        self.logger.debug("control_phase begin")
        assert self.cfg is not None
        drv = self.env.driver
        if drv is None:
            self.env.scheduler.stop_after(
                self.cfg.iteration_count + self.cfg.drain_ticks
            )
            return
        await drv.done.wait()
        assert drv.done_tick is not None
        self.logger.debug(
            "drain: %d tick(s) after tick %d", self.cfg.drain_ticks, drv.done_tick
        )
        self.env.scheduler.stop_after(drv.done_tick + self.cfg.drain_ticks)
        self.logger.debug("control_phase end")

    async def run(self) -> RunSummary:
        """Run every phase and return the summary."""
        self.logger.debug("run begin")
        self._phase_top_down("build_phase")
        self._phase_top_down("connect_phase")
        self._phase_top_down("start_of_simulation_phase")

        sched = self.env.scheduler
        comps = [c for c in self.walk() if c is not self]
        tick_tasks = [
            asyncio.create_task(self._guard(c), name=c.get_full_name())
            for c in comps
            if c.has_tick_role
        ]
        other_tasks = [
            asyncio.create_task(self._guard(c), name=c.get_full_name())
            for c in comps
            if not c.has_tick_role
        ]
        control = asyncio.create_task(self.control_phase(), name="control")

        try:
            ticks = await sched.run()
        finally:
            # Stopping closes the ports, so a monitor blocked on a full
            # subscriber is released before the tick roles are awaited
            sched.stop()
            self.env.close_ports()
        results: list[Any] = list(
            await asyncio.gather(*tick_tasks, return_exceptions=True)
        )
        results += await asyncio.gather(*other_tasks, return_exceptions=True)
        if not control.done():
            control.cancel()
        results += await asyncio.gather(control, return_exceptions=True)

        # CancelledError is how tick roles end; anything else is a real failure
        errors = [r for r in results if isinstance(r, Exception)]
        if errors:
            raise errors[0]

        self._phase_bottom_up("report_phase")
        self.summary = self.summarize(ticks)
        self.logger.info("%s", self.summary)
        self.logger.debug("run end")
        return self.summary

    def summarize(self, ticks: int) -> RunSummary:
        assert self.cfg is not None
        cmps = self.env.comparators
        return RunSummary(
            name=self.get_name(),
            ticks=ticks,
            transfers=sum(m.item_count for m in self.env.monitors),
            comparisons=sum(c.vect_cnt for c in cmps),
            passes=sum(c.pass_cnt for c in cmps),
            mismatches=sum(c.mismatch_cnt for c in cmps),
            indeterminate=sum(c.indeterminate_cnt for c in cmps),
            dropped=sum(p.dropped for p in self.env.ports),
            fail_on_error=self.cfg.sb_fail_on_error,
        )

