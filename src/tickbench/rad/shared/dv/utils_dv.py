# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/tickbench/rad/shared/dv/utils_dv.py

"""Design verification utilities for 4-state values, signals, and logging.

Helpers shared by every role of a tick-synchronized bench for 4-state values
(0/1/X/Z) held in cocotb LogicArray and for resolving signal handles by name.

Key Features:
    - Value coercion into LogicArray with explicit widths
    - Value extraction from Logic/LogicArray with X/Z handling
    - Strict, defined-value-sensitive comparison (X never equals anything)
    - Signal handle resolution with clear error messages
    - Logger configuration for components and non-components

Functions:
    Values:
        to_logic_array(): Coerce int/bool/str/Logic/LogicArray/None to LogicArray
        copy_value(): Independent copy of a sampled value
        get_signal_value_int(): Extract integer (or None if X/Z)
        is_asserted(): True only for a resolvable, non-zero value
        compare_values(): Classify expected vs actual as a Verdict
        format_value(): JSON/log friendly rendering

    Signal Access:
        get_signal(): Get signal handle from a bundle with validation

    Config DB:
        uvm_config_db(): Cached pyuvm ConfigDB
        uvm_config_db_get_try(): Get a value or None if missing
        uvm_config_db_get(): Get a value or raise ConfigKeyError
        uvm_config_db_set(): Set a value (inst_name may hold wildcards)
        reset_uvm_hierarchy(): Fresh uvm_root children and config DB

    Logging:
        desired_log_level(): Get log level from TB_LOG_LEVEL env var
        configure_component_logger(): Configure logger for a component
        configure_non_component_logger(): Configure logger for a non-component

Comparison:
    LogicArray equality compares the 4-state characters, so LogicArray("XX")
    == LogicArray("XX") is True. Checkers use compare_values(), which returns
    INDETERMINATE whenever either operand is unresolvable.

Example:
    >>> exp = to_logic_array(5, 8)
    >>> act = to_logic_array(None, 8)  # all X
    >>> compare_values(exp, act)
    <Verdict.INDETERMINATE: 'indeterminate'>
"""

from __future__ import annotations

import copy
import enum
import logging
import os
from functools import lru_cache
from typing import Any, Protocol, Union, cast

import pyuvm
from cocotb.types import Logic, LogicArray


class ConfigKeyError(KeyError):
    """A required setting was not found in the config DB."""


class Verdict(enum.Enum):
    """Outcome of one expected-vs-actual comparison."""

    PASS = "pass"
    MISMATCH = "mismatch"
    INDETERMINATE = "indeterminate"

    @property
    def failed(self) -> bool:
        """INDETERMINATE is classified like a mismatch."""
        return self is not Verdict.PASS


class HasValue(Protocol):  # pylint: disable=too-few-public-methods
    """Protocol for signals with values."""

    @property
    def value(self) -> Any:
        """The value."""


def desired_log_level(default: int = logging.INFO) -> int:
    """Return desired log level from env vars or default."""
    name = (os.getenv("TB_LOG_LEVEL") or os.getenv("LOG_LEVEL") or "INFO").upper()
    return getattr(logging, name, default)


def configure_component_logger(comp: pyuvm.uvm_component) -> None:
    """Configure logger for a component."""
    comp.set_logging_level(desired_log_level())


def configure_non_component_logger(logger: logging.Logger) -> None:
    """Configure logger for a non-component"""
    logger.setLevel(desired_log_level())
    # Bubble up to the root handlers (don't add new handlers)
    logger.propagate = True


@lru_cache(maxsize=1)
def uvm_config_db() -> pyuvm.ConfigDB:
    """Return pyuvm's config DB singleton (cached)."""
    return pyuvm.ConfigDB()


def uvm_config_db_get_try(
    comp: pyuvm.uvm_component, key: str, inst: str = ""
) -> Any | None:
    """Return value or None if missing (no logging/raise).
    Note: pyuvm allows wildcards only for set(), not get()."""
    if inst == "*":
        inst = ""
    try:
        return cast(Any, uvm_config_db().get(comp, inst, key))
    except pyuvm.UVMConfigItemNotFound:
        return None


def uvm_config_db_get(comp: pyuvm.uvm_component, key: str) -> Any:
    """Like uvm_config_db_get_try but raises if key is missing."""
    val = uvm_config_db_get_try(comp, key)
    if val is not None:
        return val
    raise ConfigKeyError(
        f"config_db[{key!r}] missing for component '{comp.get_full_name()}'. "
        "Is it below a BaseEnv?"
    )


def uvm_config_db_set(
    ctx: pyuvm.uvm_component | None, inst_name: str, key: str, value: Any
) -> None:
    """Set a key in the config DB (inst_name like '' or '*' etc.)."""
    uvm_config_db().set(ctx, inst_name, key, value)


def reset_uvm_hierarchy() -> None:
    """Drop every component below uvm_root and clear the config DB."""
    pyuvm.uvm_root().clear_children()
    uvm_config_db().clear()


def get_signal(dut: Any, signal_name: str) -> HasValue:
    """Return dut.<signal_name> or raise a clear error.

    Raises RuntimeError if signal not found, TypeError if signal has no .value.
    """
    signal = getattr(dut, signal_name, None)
    if signal is None:
        raise RuntimeError(f"Signal '{signal_name}' not found on DUT")
    if not hasattr(signal, "value"):
        raise TypeError(f"Signal '{signal_name}' has no .value property")
    return cast(HasValue, signal)


def to_logic_array(value: Any, width: int) -> LogicArray:
    """Coerce value into a fresh LogicArray of exactly width bits.

    None means "never driven" and becomes all X. A single-character string is
    replicated across the width ("X" -> "XXXX").
    """
    if width <= 0:
        raise ValueError(f"to_logic_array needs a positive width, got {width}")
    if value is None:
        return LogicArray("X" * width)
    if isinstance(value, LogicArray):
        if len(value) != width:
            raise ValueError(f"width mismatch: expected {width}, got {len(value)}")
        return copy.deepcopy(value)
    if isinstance(value, Logic):
        value = str(value)
    if isinstance(value, bool):
        value = int(value)
    if isinstance(value, int):
        if value < 0 or value >> width:
            raise ValueError(f"value {value} does not fit in {width} bit(s)")
        return LogicArray.from_unsigned(value, width)
    if isinstance(value, str):
        if len(value) == 1:
            value = value * width
        if len(value) != width:
            raise ValueError(f"width mismatch: expected {width}, got {value!r}")
        return LogicArray(value)
    raise TypeError(f"cannot convert {type(value).__name__} to LogicArray")


def copy_value(value: Any) -> Any:
    """Independent copy so a sample never aliases live signal state."""
    return copy.deepcopy(value)


def get_signal_value_int(sig: Union[Logic, LogicArray, int, None]) -> int | None:
    """Return integer value if resolvable (no X/Z), else None."""
    if sig is None:
        return None
    if isinstance(sig, bool):
        return int(sig)
    if isinstance(sig, int):
        return sig
    if isinstance(sig, Logic):
        # cocotb.Logic supports int() conversion at runtime
        return int(sig) if sig.is_resolvable else None
    # LogicArray
    return sig.to_unsigned() if sig.is_resolvable else None


def is_asserted(sig: Union[Logic, LogicArray, int, None]) -> bool:
    """True only if the value is resolvable and non-zero (X/Z is not asserted)."""
    v = get_signal_value_int(sig)
    return bool(v)


def _width_of(value: Any) -> int | None:
    if isinstance(value, (LogicArray, Logic)):
        return len(value) if isinstance(value, LogicArray) else 1
    return None


def compare_values(expected: Any, actual: Any) -> Verdict:
    """Exact, defined-value-sensitive comparison.

    - Both absent (None): PASS (field does not exist on this interface)
    - One side absent, or either side holds X/Z: INDETERMINATE
    - Otherwise the resolved integers (and widths, when both known) must match
    """
    if expected is None and actual is None:
        return Verdict.PASS
    exp_int = get_signal_value_int(expected)
    act_int = get_signal_value_int(actual)
    if exp_int is None or act_int is None:
        return Verdict.INDETERMINATE
    exp_w, act_w = _width_of(expected), _width_of(actual)
    if exp_w is not None and act_w is not None and exp_w != act_w:
        return Verdict.MISMATCH
    return Verdict.PASS if exp_int == act_int else Verdict.MISMATCH


def format_value(value: Any) -> Any:
    """Render a value for logs and JSON (4-state values as bit strings)."""
    if isinstance(value, (LogicArray, Logic)):
        v = get_signal_value_int(value)
        return f"0x{v:x}" if v is not None else str(value)
    if isinstance(value, enum.Enum):
        return value.value
    return value
