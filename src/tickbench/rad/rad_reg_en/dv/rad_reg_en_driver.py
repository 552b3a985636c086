# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/tickbench/rad/rad_reg_en/dv/rad_reg_en_driver.py

"""Driver for reg_en verification."""

from __future__ import annotations

from typing import Any

from tickbench.rad.shared.dv import BaseComponent, BaseDriver

from .rad_reg_en_item import RegEnItem


class RegEnDriver(BaseDriver[RegEnItem]):  # pylint: disable=too-many-ancestors
    """Drives rst, en and d; one item per tick."""

    dut_inputs = ("rst", "en", "d")

    def __init__(self, name: str, parent: BaseComponent | None) -> None:
        super().__init__(name, parent)
        self.initial_dut_input_values = {"rst": 1, "en": 0, "d": 0}

    def drive_item(self, dut: Any, tr: RegEnItem) -> None:
        self.drive("rst", tr.rst)
        self.drive("en", tr.en)
        self.drive("d", tr.d)
