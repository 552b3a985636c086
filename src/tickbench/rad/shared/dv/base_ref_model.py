# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/tickbench/rad/shared/dv/base_ref_model.py

"""Shadow reference model driven by the predictor."""

import logging
from typing import Generic, TypeVar

from . import utils_dv
from .base_item import BaseItem

T = TypeVar("T", bound=BaseItem)


class BaseRefModel(Generic[T]):
    """Golden model stepped once per tick by a BaseSbPredictor.

    The predictor samples the committed inputs at tick t and calls
    calc_exp() with them; the returned item carries the output values the
    unit must show at tick t+1. The model is never touched by any other
    role, so it holds plain Python state.

    State Validity:
        Until the predictor reports an active reset the model knows nothing
        about the unit's state. defined stays False and every expectation
        produced before then is checked as indeterminate, never as a zero
        that happens to match.

    Subclasses must implement:
        calc_exp(tr): Return tr with its output fields filled in

    Subclasses may override:
        reset_change(value, active): Clear state on an active reset; call
            super() first so defined and reset_count stay correct

    Example:
        >>> class CounterRefModel(BaseRefModel[CounterItem]):
        ...     def __init__(self, name="counter_ref"):
        ...         super().__init__(name)
        ...         self.count = 0
        ...
        ...     def reset_change(self, value, active):
        ...         super().reset_change(value, active)
        ...         if active:
        ...             self.count = 0
        ...
        ...     def calc_exp(self, tr):
        ...         self.count += int(tr.inc)
        ...         return tr.clone(count=self.count)
    """

    def __init__(self, name: str = "ref_model") -> None:
        self.name: str = name
        self.logger: logging.Logger = logging.getLogger(f"tb.obj.{name}")
        utils_dv.configure_non_component_logger(self.logger)
        self.reset_active: bool = False
        self.reset_count: int = 0

    @property
    def defined(self) -> bool:
        """True once an active reset has been seen."""
        return self.reset_count > 0

    def reset_change(self, value: int, active: bool) -> None:
        """Record a resolvable reset level change."""
        if active and not self.reset_active:
            self.reset_count += 1
        self.reset_active = active
        self.logger.debug(
            "reset %s (level %d, resets seen %d)",
            "asserted" if active else "released",
            value,
            self.reset_count,
        )

    def calc_exp(self, tr: T) -> T:
        raise NotImplementedError
