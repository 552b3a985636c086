# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/tickbench/rad/shared/dv/base_item.py

"""Base item: an immutable snapshot with input/output field management."""

from __future__ import annotations

import copy
import dataclasses
import json
from typing import Any, Iterable, NamedTuple, Self

from . import utils_dv
from .utils_dv import Verdict


class FieldDiff(NamedTuple):
    """One field that did not compare as PASS."""

    field: str
    expected: Any
    actual: Any
    verdict: Verdict


@dataclasses.dataclass(frozen=True)
class BaseItem:
    """Immutable transaction item: one tick's worth of field values.

    Items are frozen dataclasses: once built they never change, so an item
    handed to several subscribers cannot be altered behind their backs. Use
    clone(**changes) to derive a modified copy.

    Fields are split into inputs (driven by the sequence) and outputs
    (observed on the unit). diff_out() checks outputs with the strict 4-state
    comparison of utils_dv.compare_values, so X never passes.

    Subclasses must implement:
        _in_fields(): Names of the input fields
        _out_fields(): Names of the output fields

    Attributes:
        tick: Tick sequence number at which the item was sampled or driven

    Example:
        >>> @dataclasses.dataclass(frozen=True)
        ... class MyItem(BaseItem):
        ...     addr: int = 0
        ...     response: int = 0
        ...
        ...     def _in_fields(self):
        ...         return ("addr",)
        ...
        ...     def _out_fields(self):
        ...         return ("response",)
    """

    tick: int = 0

    def _in_fields(self) -> Iterable[str]:
        """Fields driven by the sequence."""
        return ()

    def _out_fields(self) -> Iterable[str]:
        """Fields observed on the unit and checked by the comparator."""
        return ()

    def _all_fields(self) -> tuple[str, ...]:
        # Declared order, inputs first, each name once
        return tuple(dict.fromkeys((*self._in_fields(), *self._out_fields())))

    def clone(self, **changes: Any) -> Self:
        """Deep copy (so no value is shared) with optional field overrides."""
        return dataclasses.replace(copy.deepcopy(self), **changes)

    def _json(self, fields: Iterable[str]) -> str:
        return json.dumps(
            {f: utils_dv.format_value(getattr(self, f)) for f in fields},
            sort_keys=True,
        )

    def to_dict(self) -> dict[str, object]:
        """Structured view for logging (tick, then every field)."""
        d: dict[str, object] = {"tick": self.tick}
        for f in self._all_fields():
            d[f] = utils_dv.format_value(getattr(self, f))
        return d

    def __str__(self) -> str:
        return json.dumps(self.to_dict(), sort_keys=True)

    def outputs_str(self) -> str:
        return self._json(self._out_fields())

    def diff_out(
        self, expected: Self, *, fields: Iterable[str] | None = None
    ) -> list[FieldDiff]:
        """Output fields of self (actual) that do not PASS against expected."""
        if type(self) is not type(expected):
            raise TypeError(
                f"diff_out: {type(expected).__name__} vs {type(self).__name__}"
            )
        diffs = []
        for f in self._out_fields() if fields is None else fields:
            exp, act = getattr(expected, f), getattr(self, f)
            verdict = utils_dv.compare_values(exp, act)
            if verdict is not Verdict.PASS:
                diffs.append(FieldDiff(f, exp, act, verdict))
        return diffs
