# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/tickbench/rad/rad_axis_stream/dv/rad_axis_stream_env.py

"""Environment and test for axis_stream verification."""

from __future__ import annotations

from typing import Any

from tickbench.rad.shared.dv import BaseComponent, BaseEnv, BaseTest, HarnessConfig

from .rad_axis_stream_driver import AxisStreamDriver
from .rad_axis_stream_item import AxisStreamWidths
from .rad_axis_stream_monitor import AxisStreamMonitor
from .rad_axis_stream_packet_collector import AxisStreamPacketCollector
from .rad_axis_stream_sequence import AxisStreamSequence


class AxisStreamEnv(BaseEnv):
    """Driver, monitor and packet collector on one bus.

    Field widths come from cfg.field_widths (see AxisStreamWidths).
    """

    def __init__(
        self,
        name: str,
        parent: BaseComponent | None,
        cfg: HarnessConfig | None = None,
    ) -> None:
        super().__init__(name, parent, cfg)
        self.widths: AxisStreamWidths = AxisStreamWidths.from_mapping(
            self.cfg.field_widths
        )
        self.seq: Any = None
        self.drv: AxisStreamDriver
        self.mon: AxisStreamMonitor
        self.coll: AxisStreamPacketCollector

    def build_dut(self) -> Any:
        return self.scheduler.bundle("axis", self.widths.signal_widths())

    def build_phase(self) -> None:
        super().build_phase()
        if self.seq is None:
            self.seq = AxisStreamSequence(
                num_beats=self.cfg.iteration_count,
                widths=self.widths,
                seed=self.cfg.seed,
            )
        self.drv = AxisStreamDriver("drv", self)
        self.drv.seq = self.seq
        self.driver = self.drv
        self.mon = AxisStreamMonitor("mon", self)
        self.monitors.append(self.mon)
        self.coll = AxisStreamPacketCollector("coll", self)

    def connect_phase(self) -> None:
        super().connect_phase()
        self.coll.subscribe_to(self.mon.ap)


class AxisStreamTest(BaseTest):
    """Execute the axis_stream observer test."""

    def __init__(
        self, name: str = "axis_stream_test", cfg: HarnessConfig | None = None
    ) -> None:
        super().__init__(name, cfg)
        self.seq: Any = None
        self.env: AxisStreamEnv

    def build_envs(self) -> None:
        self.env = AxisStreamEnv("env", self, self.cfg)
        self.env.seq = self.seq
