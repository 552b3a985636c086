# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/tickbench/rad/shared/dv/base_signal.py

"""Double-buffered signals with a single designated writer."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Iterator, Mapping

from . import utils_dv

if TYPE_CHECKING:
    from .base_tick_scheduler import TickScheduler

logger = logging.getLogger(__name__)

_UNSET = object()


class MultipleDriverError(RuntimeError):
    """A second owner tried to claim a signal that already has a driver."""


class Signal:
    """A named, double-buffered value shared between tick roles.

    Reads always return the value committed at the end of the previous tick.
    Writes are staged through the signal's single SignalDriver and become
    visible only when the scheduler commits, after every tick role has closed
    its window for the current tick. This is the "read old, then write new"
    discipline of a non-blocking assignment, made explicit.

    Widths:
        None: untyped register; any Python object is stored (as a copy)
        0: absent field; the value is always None and writes are rejected
        n > 0: 4-state LogicArray of exactly n bits

    Attributes:
        name: Signal name (unique within its bundle)
        width: Bit width (see above)
        version: Tick sequence number of the last commit (0 = time zero)
    """

    def __init__(
        self,
        name: str,
        width: int | None,
        init: Any,
        scheduler: TickScheduler,
    ) -> None:
        if width is not None and width < 0:
            raise ValueError(f"signal '{name}': width must be >= 0, got {width}")
        self.name: str = name
        self.width: int | None = width
        self.version: int = 0
        self._scheduler = scheduler
        self._driver: SignalDriver | None = None
        self._staged: Any = _UNSET
        self._value: Any = None if width == 0 else self._coerce(init)

    def __repr__(self) -> str:
        return (
            f"Signal({self.name!r}, width={self.width}, "
            f"value={utils_dv.format_value(self._value)!r}, version={self.version})"
        )

    def _coerce(self, value: Any) -> Any:
        if self.width is None:
            return utils_dv.copy_value(value)
        if self.width == 0:
            if value is not None:
                raise ValueError(f"signal '{self.name}' is absent (width 0)")
            return None
        return utils_dv.to_logic_array(value, self.width)

    @property
    def value(self) -> Any:
        """Committed value. Treat as read-only; use sample() to keep a copy."""
        return self._value

    def sample(self) -> Any:
        """Independently owned copy of the committed value."""
        return utils_dv.copy_value(self._value)

    @property
    def driver(self) -> SignalDriver | None:
        return self._driver

    def claim(self, owner: object) -> SignalDriver:
        """Return the write handle for owner, enforcing a single writer."""
        if self._driver is None:
            self._driver = SignalDriver(self, owner)
            logger.debug("%s claimed by %s", self.name, _owner_name(owner))
        elif self._driver.owner is not owner:
            raise MultipleDriverError(
                f"signal '{self.name}' is already driven by "
                f"{_owner_name(self._driver.owner)}; "
                f"{_owner_name(owner)} cannot drive it"
            )
        return self._driver

    def _stage(self, value: Any) -> None:
        if self._scheduler.stopped:
            logger.debug("%s: write after stop discarded", self.name)
            return
        coerced = self._coerce(value)
        if self._staged is _UNSET:
            self._scheduler._mark_dirty(self)  # pylint: disable=protected-access
        self._staged = coerced

    def _commit(self, seq: int) -> None:
        if self._staged is _UNSET:
            return
        self._value = self._staged
        self._staged = _UNSET
        self.version = seq


class SignalDriver:
    """Write handle returned by Signal.claim()."""

    def __init__(self, signal: Signal, owner: object) -> None:
        self.signal: Signal = signal
        self.owner: object = owner

    def drive(self, value: Any) -> None:
        """Stage value; it becomes visible after the current tick commits."""
        self.signal._stage(value)  # pylint: disable=protected-access


def _owner_name(owner: object) -> str:
    get_full_name = getattr(owner, "get_full_name", None)
    if callable(get_full_name):
        return str(get_full_name())
    return type(owner).__name__


class SignalBundle:
    """Named group of signals with attribute access (bus.tvalid).

    Example:
        >>> bus = sched.bundle("axis", {"tvalid": 1, "tready": 1, "tdata": 32})
        >>> bus.tdata.width
        32
    """

    def __init__(self, name: str, signals: Mapping[str, Signal]) -> None:
        self.name: str = name
        self._signals: dict[str, Signal] = dict(signals)

    @classmethod
    def from_widths(
        cls,
        name: str,
        widths: Mapping[str, int | None],
        scheduler: TickScheduler,
        init: Mapping[str, Any] | None = None,
    ) -> SignalBundle:
        init = init or {}
        return cls(
            name,
            {
                n: Signal(f"{name}.{n}", w, init.get(n), scheduler)
                for n, w in widths.items()
            },
        )

    def __getattr__(self, name: str) -> Signal:
        signals = self.__dict__.get("_signals", {})
        try:
            return signals[name]
        except KeyError:
            raise AttributeError(
                f"bundle '{self.__dict__.get('name')}' has no signal '{name}'"
            ) from None

    def __getitem__(self, name: str) -> Signal:
        return self._signals[name]

    def __contains__(self, name: object) -> bool:
        return name in self._signals

    def __iter__(self) -> Iterator[Signal]:
        return iter(self._signals.values())

    def names(self) -> tuple[str, ...]:
        return tuple(self._signals)

    def values(self) -> dict[str, Any]:
        """Copies of every committed value, keyed by signal name."""
        return {n: s.sample() for n, s in self._signals.items()}
