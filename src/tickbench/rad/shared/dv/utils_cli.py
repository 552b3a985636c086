# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/tickbench/rad/shared/dv/utils_cli.py

"""Resolve harness settings from the environment and plusargs.

A setting NAME is looked up, in order, in:
    1. Environment variable NAME, then TB_NAME
    2. Plusarg +NAME=value (or bare +NAME, read as "1") in the
       space-separated PLUSARGS, or TB_PLUSARGS when PLUSARGS is empty
    3. The caller's default (HarnessConfig passes its YAML value here)

The typed getters skip a source whose text does not parse and move on to the
next one, so a stray TB_ITERATION_COUNT=lots cannot hide a good plusarg.

This mirrors the uvm_cmdline_processor lookup of SystemVerilog benches, so
the same PLUSARGS string can drive both.

Example:
    >>> iterations = get_int_setting("ITERATION_COUNT", 10_000)
    >>> fail = get_bool_setting("SB_FAIL_ON_ERROR", True)
"""

from __future__ import annotations

import os
from typing import Callable, Iterable, Iterator, TypeVar

V = TypeVar("V")

_BOOLS = {
    "1": True,
    "true": True,
    "yes": True,
    "y": True,
    "on": True,
    "0": False,
    "false": False,
    "no": False,
    "n": False,
    "off": False,
}


def iter_plusargs() -> Iterable[str]:
    """Tokens of PLUSARGS (or TB_PLUSARGS)."""
    return (os.environ.get("PLUSARGS") or os.environ.get("TB_PLUSARGS", "")).split()


def _plusarg(name: str) -> str | None:
    flag = f"+{name}"
    for tok in iter_plusargs():
        key, sep, value = tok.partition("=")
        if key == flag:
            return value if sep else "1"
    return None


def _raw_values(name: str) -> Iterator[str]:
    """Candidate texts for name, highest precedence first."""
    for key in (name, f"TB_{name}"):
        value = os.environ.get(key)
        if value is not None:
            yield value
    value = _plusarg(name)
    if value is not None:
        yield value


def _resolve(name: str, parse: Callable[[str], V | None], default: V) -> V:
    for text in _raw_values(name):
        parsed = parse(text)
        if parsed is not None:
            return parsed
    return default


def _parse_bool(text: str) -> bool | None:
    return _BOOLS.get(text.strip().lower())


def _parse_int(text: str) -> int | None:
    try:
        return int(text.strip(), 0)
    except ValueError:
        return None


def get_bool_setting(name: str, default: bool) -> bool:
    """Boolean setting; a bare +NAME plusarg means True."""
    return _resolve(name, _parse_bool, default)


def get_int_setting(name: str, default: int) -> int:
    """Integer setting; accepts 0x/0o/0b prefixes."""
    return _resolve(name, _parse_int, default)


def get_str_setting(name: str, default: str) -> str:
    return _resolve(name, str, default)


def get_optional_str_setting(name: str) -> str | None:
    """String setting, or None when no source sets it."""
    return next(_raw_values(name), None)
