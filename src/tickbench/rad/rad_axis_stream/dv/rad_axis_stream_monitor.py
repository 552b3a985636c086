# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/tickbench/rad/rad_axis_stream/dv/rad_axis_stream_monitor.py

"""Bus observer: one published item per accepted transfer."""

from __future__ import annotations

from typing import Any

from tickbench.rad.shared.dv import BaseComponent, BaseMonitor, Tick, utils_dv

from .rad_axis_stream_item import PAYLOAD_FIELDS, AxisStreamItem


class AxisStreamMonitor(
    BaseMonitor[AxisStreamItem]
):  # pylint: disable=too-many-ancestors
    """Samples the bus at every tick boundary.

    An item is built only when tvalid and tready are both resolvable and 1.
    A tick with tvalid high and tready low is a stall: nothing is sampled or
    retained, the source may change the payload before the transfer.

    Attributes:
        stall_count: Ticks with tvalid=1 and tready!=1
    """

    def __init__(self, name: str, parent: BaseComponent | None) -> None:
        super().__init__(name, parent)
        self.stall_count: int = 0

    def sample_dut(self, dut: Any, tick: Tick) -> AxisStreamItem | None:
        valid = utils_dv.get_signal_value_int(dut.tvalid.value)
        ready = utils_dv.get_signal_value_int(dut.tready.value)
        if valid != 1:
            return None
        if ready != 1:
            self.stall_count += 1
            return None
        # sample() copies, so no item shares state with the bus or another item
        tr = AxisStreamItem(
            tick=tick.seq, **{f: getattr(dut, f).sample() for f in PAYLOAD_FIELDS}
        )
        self.logger.debug("transfer %s", tr)
        return tr

    def report_phase(self) -> None:
        self.logger.info(
            "%d transfer(s) observed, %d stall tick(s)",
            self.item_count,
            self.stall_count,
        )
