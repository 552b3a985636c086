# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/tickbench/rad/rad_reg_en/dv/rad_reg_en_env.py

"""Environment and test for reg_en verification."""

from __future__ import annotations

from typing import Any

from tickbench.rad.shared.dv import (
    BaseComponent,
    BaseEnv,
    BaseTest,
    BaseUnitProxy,
    ClockedUnit,
    HarnessConfig,
)

from .rad_reg_en_driver import RegEnDriver
from .rad_reg_en_ref_model import RegEnRefModel
from .rad_reg_en_sb import RegEnComparator, RegEnPredictor
from .rad_reg_en_sequence import RegEnSequence
from .rad_reg_en_unit import RegEnDelayedUnit, RegEnUnit


class RegEnEnv(BaseEnv):
    """Driver, unit proxy and scoreboard around one register.

    Signals: rst (1), en (1), d (data_width), q (data_width).

    Attributes:
        unit: Unit under test; built from cfg.data_width when not supplied
        buggy: Build the one-tick-late unit instead of the correct one
    """

    def __init__(
        self,
        name: str,
        parent: BaseComponent | None,
        cfg: HarnessConfig | None = None,
        unit: ClockedUnit | None = None,
        buggy: bool = False,
    ) -> None:
        super().__init__(name, parent, cfg)
        self.unit: ClockedUnit | None = unit
        self.buggy: bool = buggy
        self.seq: Any = None
        self.drv: RegEnDriver
        self.proxy: BaseUnitProxy
        self.prd: RegEnPredictor
        self.cmp: RegEnComparator

    def build_dut(self) -> Any:
        w = self.cfg.data_width
        return self.scheduler.bundle("dut", {"rst": 1, "en": 1, "d": w, "q": w})

    def build_phase(self) -> None:
        super().build_phase()
        w = self.cfg.data_width
        if self.unit is None:
            self.unit = RegEnDelayedUnit(w) if self.buggy else RegEnUnit(w)
        if self.seq is None:
            self.seq = RegEnSequence(
                num_iterations=self.cfg.iteration_count,
                reset_cycles=self.cfg.reset_cycles,
                width=w,
                seed=self.cfg.seed,
            )
        self.drv = RegEnDriver("drv", self)
        self.drv.seq = self.seq
        self.driver = self.drv
        self.proxy = BaseUnitProxy("unit", self, self.unit, ("rst", "en", "d"), ("q",))
        self.prd = RegEnPredictor("prd", self, RegEnRefModel(width=w))
        self.cmp = RegEnComparator("cmp", self)
        self.comparators.append(self.cmp)

    def connect_phase(self) -> None:
        super().connect_phase()
        self.cmp.exp_sig = self.prd.exp_sig


class RegEnTest(BaseTest):
    """Execute the reg_en test (pass buggy=True for the seeded-bug unit)."""

    def __init__(
        self,
        name: str = "reg_en_test",
        cfg: HarnessConfig | None = None,
        buggy: bool = False,
        unit: ClockedUnit | None = None,
    ) -> None:
        super().__init__(name, cfg)
        self.buggy: bool = buggy
        self.unit: ClockedUnit | None = unit
        self.seq: Any = None
        self.env: RegEnEnv

    def build_envs(self) -> None:
        self.env = RegEnEnv("env", self, self.cfg, unit=self.unit, buggy=self.buggy)
        self.env.seq = self.seq
