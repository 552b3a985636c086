# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/tickbench/rad/rad_reg_en/dv/rad_reg_en_unit.py

"""Behavioral units under test for the reg_en bench."""

from __future__ import annotations

from typing import Any, Mapping

from cocotb.types import LogicArray

from tickbench.rad.shared.dv import utils_dv


class RegEnUnit:
    """Synchronous register with reset and load enable.

    Each advance():
        rst == 1 -> q = 0
        en == 1 -> q = d
        otherwise q holds
    An X/Z on rst (or on en when not in reset) makes q all X. q is X until
    the first reset.
    """

    def __init__(self, width: int = 8) -> None:
        self.width: int = width
        self._q: LogicArray = utils_dv.to_logic_array(None, width)
        self._inputs: dict[str, Any] = {}

    def apply(self, inputs: Mapping[str, Any]) -> None:
        self._inputs = dict(inputs)

    def advance(self) -> None:
        self._q = self._next_q(self._inputs.get("d"))

    def _next_q(self, load: Any) -> LogicArray:
        rst = utils_dv.get_signal_value_int(self._inputs.get("rst"))
        if rst is None:
            return utils_dv.to_logic_array(None, self.width)
        if rst:
            return utils_dv.to_logic_array(0, self.width)
        en = utils_dv.get_signal_value_int(self._inputs.get("en"))
        if en is None:
            return utils_dv.to_logic_array(None, self.width)
        if en:
            return utils_dv.to_logic_array(load, self.width)
        return self._q

    @property
    def outputs(self) -> dict[str, Any]:
        return {"q": self._q}


class RegEnDelayedUnit(RegEnUnit):
    """Seeded bug: loads the data input presented one tick earlier."""

    def __init__(self, width: int = 8) -> None:
        super().__init__(width)
        self._d_prev: Any = None

    def advance(self) -> None:
        self._q = self._next_q(self._d_prev)
        self._d_prev = self._inputs.get("d")
