# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/tickbench/rad/rad_reg_en/dv/rad_reg_en_item.py

"""Sequence item for reg_en verification."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from tickbench.rad.shared.dv import BaseItem


@dataclass(frozen=True)
class RegEnItem(BaseItem):
    """One tick of the register: inputs rst/en/d and output q.

    Values are ints or LogicArrays; None means not sampled (or undriven).
    """

    rst: Any = None
    en: Any = None
    d: Any = None
    q: Any = None

    def _in_fields(self) -> tuple[str, ...]:
        return ("rst", "en", "d")

    def _out_fields(self) -> tuple[str, ...]:
        return ("q",)
