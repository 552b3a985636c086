# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/tickbench/rad/rad_reg_en/dv/rad_reg_en_sb.py

"""Scoreboard for reg_en verification."""

from __future__ import annotations

from typing import Any

from tickbench.rad.shared.dv import BaseSbComparator, BaseSbPredictor, Tick

from .rad_reg_en_item import RegEnItem


class RegEnPredictor(
    BaseSbPredictor[RegEnItem]
):  # pylint: disable=too-many-ancestors
    """Samples rst/en/d as the unit sees them this tick."""

    def sample_dut(self, dut: Any, tick: Tick) -> RegEnItem:
        return RegEnItem(
            tick=tick.seq, rst=dut.rst.sample(), en=dut.en.sample(), d=dut.d.sample()
        )


class RegEnComparator(
    BaseSbComparator[RegEnItem]
):  # pylint: disable=too-many-ancestors
    """Samples q, the output committed at the end of the previous tick."""

    def sample_dut(self, dut: Any, tick: Tick) -> RegEnItem:
        return RegEnItem(tick=tick.seq, q=dut.q.sample())
