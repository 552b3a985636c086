# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/tickbench/rad/shared/dv/base_env.py

"""Environment scaffold (UVM-style)."""

from __future__ import annotations

from typing import Any

import pyuvm

from . import utils_dv
from .base_analysis_port import AnalysisPort
from .base_component import BaseComponent
from .base_config import HarnessConfig
from .base_driver import BaseDriver
from .base_monitor import BaseMonitor
from .base_sb_comparator import BaseSbComparator
from .base_tick_scheduler import TickScheduler


class BaseEnv(BaseComponent):
    """Top-level environment that owns the scheduler, the DUT signals and the roles.

    The environment is responsible for:
    - Creating the tick scheduler from the harness configuration
    - Creating the DUT signal bundle (build_dut)
    - Creating the tick roles and subscribers (build_phase of subclasses)
    - Publishing scheduler, dut and cfg to its children via config_db
    - Closing its analysis ports when the scheduler stops

    Config DB (set for "<env>.*"):
        scheduler: The TickScheduler
        cfg: The HarnessConfig
        dut: The DUT signal bundle (after build_dut)

    Components:
        driver: The stimulus driver whose done event ends the run
        monitors: Bus observers; their item counts are "transfers observed"
        comparators: Scoreboard comparators; their counts make the verdict
        ports: Analysis ports closed at the end of the run

    Example:
        >>> class MyEnv(BaseEnv):
        ...     def build_dut(self):
        ...         return self.scheduler.bundle("dut", {"d": 8, "q": 8})
        ...
        ...     def build_phase(self):
        ...         super().build_phase()
        ...         self.driver = MyDriver("drv", self)
    """

    def __init__(
        self,
        name: str,
        parent: pyuvm.uvm_component | None,
        cfg: HarnessConfig | None = None,
    ) -> None:
        super().__init__(name, parent)
        self.cfg: HarnessConfig = cfg if cfg is not None else HarnessConfig()
        self.scheduler: TickScheduler = TickScheduler(
            self.cfg.clock_period_ps, name=f"{self.get_full_name()}.sched"
        )
        self.dut: Any = None
        self.driver: BaseDriver[Any] | None = None
        self.monitors: list[BaseMonitor[Any]] = []
        self.comparators: list[BaseSbComparator[Any]] = []
        self.ports: list[AnalysisPort[Any]] = []
        utils_dv.uvm_config_db_set(self, "*", "scheduler", self.scheduler)
        utils_dv.uvm_config_db_set(self, "*", "cfg", self.cfg)
        self.scheduler.add_stop_callback(self.close_ports)

    def build_phase(self) -> None:
        self.logger.debug("build_phase begin")
        if self.dut is None:
            self.dut = self.build_dut()
        utils_dv.uvm_config_db_set(self, "*", "dut", self.dut)
        self.logger.debug("build_phase end")

    def build_dut(self) -> Any:
        """Return the DUT signal bundle."""
        raise NotImplementedError

    def connect_phase(self) -> None:
        self.logger.debug("connect_phase begin")
        for mon in self.monitors:
            if mon.ap not in self.ports:
                self.ports.append(mon.ap)
        self.logger.debug("connect_phase end")

    def close_ports(self) -> None:
        """Close every analysis port; idempotent."""
        for port in self.ports:
            if not port.closed:
                self.logger.debug("close %s", port.get_full_name())
                port.close()
