# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/tickbench/rad/rad_reg_en/dv/rad_reg_en_ref_model.py

"""reg_en reference model."""

from __future__ import annotations

from tickbench.rad.shared.dv import BaseRefModel, utils_dv

from .rad_reg_en_item import RegEnItem


class RegEnRefModel(BaseRefModel[RegEnItem]):
    """Implement reset and calc_exp: reset -> 0; else enable -> d; else hold."""

    def __init__(self, name: str = "reg_en_ref_model", width: int = 8) -> None:
        super().__init__(name)
        self.width: int = width
        # Internal state: previous expected output (None = unknown)
        self._q: int | None = None

    def reset_change(self, value: int, active: bool) -> None:
        self.logger.debug("reset_change begin")
        super().reset_change(value, active)
        if active:
            self._q = 0
        self.logger.debug("reset_change end")

    def calc_exp(self, tr: RegEnItem) -> RegEnItem:
        get = utils_dv.get_signal_value_int
        rst, en = get(tr.rst), get(tr.en)
        if rst is None:
            q = None
        elif rst:
            q = 0
        elif en is None:
            q = None
        elif en:
            q = get(tr.d)
        else:
            q = self._q
        self._q = q
        return tr.clone(q=utils_dv.to_logic_array(q, self.width))
