# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/tickbench/rad/rad_axis_stream/dv/rad_axis_stream_driver.py

"""Driver for axis_stream verification."""

from __future__ import annotations

from typing import Any

from tickbench.rad.shared.dv import BaseComponent, BaseDriver

from .rad_axis_stream_item import PAYLOAD_FIELDS, AxisStreamBeat


class AxisStreamDriver(
    BaseDriver[AxisStreamBeat]
):  # pylint: disable=too-many-ancestors
    """Drives both sides of the handshake and the payload, one beat per tick."""

    dut_inputs = ("tvalid", "tready") + PAYLOAD_FIELDS

    def __init__(self, name: str, parent: BaseComponent | None) -> None:
        super().__init__(name, parent)
        self.initial_dut_input_values = {"tvalid": 0, "tready": 0}

    def drive_item(self, dut: Any, tr: AxisStreamBeat) -> None:
        for name in self.dut_inputs:
            # Absent fields only accept None
            value = getattr(tr, name) if getattr(dut, name).width else None
            self.drive(name, value)
