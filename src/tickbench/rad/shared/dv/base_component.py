# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/tickbench/rad/shared/dv/base_component.py

"""Component hierarchy with UVM-style phases."""

from __future__ import annotations

import logging
from typing import Iterator

import pyuvm

from . import utils_dv


class BaseComponent(pyuvm.uvm_component):
    """Named node in the bench hierarchy with UVM-style phase hooks.

    The tree, get_full_name() and config_db context come from
    pyuvm.uvm_component. Phases are driven by BaseTest on the asyncio loop
    (not by uvm_root.run_test), top-down, in this order:
        build_phase: Create children and signals
        connect_phase: Connect ports and subscriptions
        start_of_simulation_phase: Time-zero work (initial values)
        run_phase: Long-lived coroutine (one task per component)
        report_phase: End-of-run summary

    Every component gets a logger named ``tb.<full name>`` whose level comes
    from TB_LOG_LEVEL.
    """

    def __init__(
        self, name: str, parent: pyuvm.uvm_component | None = None
    ) -> None:
        super().__init__(name, parent)
        self.logger = logging.getLogger(f"tb.{self.get_full_name()}")
        utils_dv.configure_component_logger(self)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.get_full_name()!r})"

    def phased_children(self) -> list[BaseComponent]:
        """Direct children that take part in the phases.

        pyuvm ports and exports are children too; they have no phases of
        their own here and are skipped.
        """
        return [c for c in self.get_children() if isinstance(c, BaseComponent)]

    def walk(self) -> Iterator[BaseComponent]:
        """Yield self and every phased component below it, parents first."""
        yield self
        for child in self.phased_children():
            yield from child.walk()

    def build_phase(self) -> None:
        pass

    def connect_phase(self) -> None:
        pass

    def start_of_simulation_phase(self) -> None:
        pass

    async def run_phase(self) -> None:
        pass

    def report_phase(self) -> None:
        pass

    # True for components whose run_phase follows the tick scheduler. Their
    # tasks end when the scheduler stops; the others end when ports close.
    has_tick_role: bool = False
