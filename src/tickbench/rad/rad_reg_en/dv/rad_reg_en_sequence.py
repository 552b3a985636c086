# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/tickbench/rad/rad_reg_en/dv/rad_reg_en_sequence.py

"""Sequences for reg_en verification."""

from __future__ import annotations

from typing import Iterable

from tickbench.rad.shared.dv import BaseSequence

from .rad_reg_en_item import RegEnItem


class RegEnSequence(BaseSequence[RegEnItem]):
    """Hold reset for reset_cycles ticks, then random (en, d) every tick.

    en and d are randomized during reset too, so reset dominance is exercised.
    """

    item_type = RegEnItem

    def __init__(
        self,
        name: str = "reg_en_rand_seq",
        num_iterations: int = 10_000,
        reset_cycles: int = 5,
        width: int = 8,
        seed: int | None = None,
    ) -> None:
        super().__init__(name, reset_cycles + num_iterations, seed)
        self.reset_cycles: int = reset_cycles
        self.width: int = width

    def set_item_inputs(self, item: RegEnItem, index: int) -> RegEnItem:
        return item.clone(
            rst=int(index < self.reset_cycles),
            en=self.rng.getrandbits(1),
            d=self.rng.getrandbits(self.width),
        )


class RegEnListSequence(BaseSequence[RegEnItem]):
    """Replay a fixed list of (rst, en, d) tuples."""

    item_type = RegEnItem

    def __init__(
        self,
        vectors: Iterable[tuple[object, object, object]],
        name: str = "reg_en_list_seq",
    ) -> None:
        self.vectors = list(vectors)
        super().__init__(name, len(self.vectors))

    def set_item_inputs(self, item: RegEnItem, index: int) -> RegEnItem:
        rst, en, d = self.vectors[index]
        return item.clone(rst=rst, en=en, d=d)
