# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/tickbench/rad/shared/dv/base_config.py

"""Harness configuration resolved from env, plusargs, YAML and defaults.

Configuration Precedence:
    1. Environment variables (NAME or TB_NAME)
    2. Plusargs (+NAME=value in PLUSARGS or TB_PLUSARGS)
    3. YAML config file (CONFIG_FILE setting or explicit path)
    4. Dataclass defaults

Recognized Settings (env/plusarg name → field):
    ITERATION_COUNT → iteration_count
    RESET_CYCLES → reset_cycles
    DRAIN_TICKS → drain_ticks
    CLOCK_PERIOD_PS → clock_period_ps
    SEED → seed (decimal, 0x..., or random)
    FIELD_WIDTHS → field_widths ("data=32,user=4")
    DATA_WIDTH → data_width
    SUBSCRIBER_BUFFER_POLICY → subscriber_buffer_policy
    SB_INITIAL_FLUSH_NUM, SB_ERROR_QUIT_COUNT, SB_FAIL_ON_ERROR → sb_*

YAML keys may be camelCase (iterationCount, fieldWidths,
subscriberBufferPolicy) or snake_case.

Example YAML:
    iterationCount: 2000
    fieldWidths: {data: 32, user: 4}
    subscriberBufferPolicy: bounded(16, dropOldest)
"""

from __future__ import annotations

import dataclasses
import re
from os import PathLike
from pathlib import Path
from typing import Any, Mapping, Union

import yaml

from . import utils_cli
from .base_analysis_port import BufferPolicy

_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")


def _snake(key: str) -> str:
    return _CAMEL_RE.sub("_", key).lower()


def _parse_seed(value: Any) -> int | None:
    if value is None or isinstance(value, int):
        return value
    text = str(value).strip()
    if text.lower() in {"", "rand", "random", "auto", "none"}:
        return None
    try:
        return int(text, 0)
    except ValueError as exc:
        raise ValueError(
            f"invalid seed {value!r}; use decimal, 0x..., or 'random'"
        ) from exc


def _parse_widths(value: Any) -> dict[str, int]:
    """Accept a mapping or a "name=width,name=width" string."""
    if value is None:
        return {}
    if isinstance(value, str):
        out: dict[str, int] = {}
        for part in value.replace(";", ",").split(","):
            part = part.strip()
            if not part:
                continue
            name, sep, width = part.partition("=")
            if not sep:
                raise ValueError(f"invalid field width {part!r}; expected name=width")
            out[name.strip()] = int(width, 0)
        return out
    if isinstance(value, Mapping):
        return {str(k): int(v) for k, v in value.items()}
    raise ValueError(f"invalid field widths {value!r}")


@dataclasses.dataclass(frozen=True)
class HarnessConfig:  # pylint: disable=too-many-instance-attributes
    """Harness configuration."""

    iteration_count: int = 10_000
    reset_cycles: int = 5
    drain_ticks: int = 2
    clock_period_ps: int = 1_000
    seed: int | None = None
    field_widths: Mapping[str, int] = dataclasses.field(default_factory=dict)
    data_width: int = 8
    subscriber_buffer_policy: BufferPolicy = dataclasses.field(
        default_factory=BufferPolicy.unbounded
    )
    sb_initial_flush_num: int = 0
    sb_error_quit_count: int = 0
    sb_fail_on_error: bool = True

    def __post_init__(self) -> None:
        # Normalize loosely typed inputs (YAML, env strings) in place
        object.__setattr__(self, "field_widths", _parse_widths(self.field_widths))
        object.__setattr__(
            self,
            "subscriber_buffer_policy",
            BufferPolicy.parse(self.subscriber_buffer_policy),
        )
        object.__setattr__(self, "seed", _parse_seed(self.seed))
        for name in (
            "iteration_count",
            "reset_cycles",
            "drain_ticks",
            "sb_initial_flush_num",
            "sb_error_quit_count",
        ):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0, got {getattr(self, name)}")
        if self.clock_period_ps <= 0:
            raise ValueError(f"clock_period_ps must be > 0, got {self.clock_period_ps}")
        if self.data_width <= 0:
            raise ValueError(f"data_width must be > 0, got {self.data_width}")
        for fname, width in self.field_widths.items():
            if width < 0:
                raise ValueError(f"field width '{fname}' must be >= 0, got {width}")

    def replace(self, **changes: Any) -> HarnessConfig:
        return dataclasses.replace(self, **changes)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> HarnessConfig:
        """Build from a mapping with camelCase or snake_case keys."""
        names = {f.name for f in dataclasses.fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            name = _snake(str(key))
            if name not in names:
                raise ValueError(f"unknown harness config key {key!r}")
            kwargs[name] = value
        return cls(**kwargs)

    @classmethod
    def from_yaml(cls, path: Union[str, PathLike[str]]) -> HarnessConfig:
        """Load a YAML mapping (yaml.safe_load); an empty file gives defaults."""
        with Path(path).open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, Mapping):
            raise ValueError(f"{path}: top level must be a mapping")
        return cls.from_mapping(data)

    @classmethod
    def from_settings(
        cls,
        base: HarnessConfig | None = None,
        config_file: Union[str, PathLike[str], None] = None,
    ) -> HarnessConfig:
        """Resolve every field with precedence env > plusarg > YAML > base."""
        if config_file is None:
            config_file = utils_cli.get_optional_str_setting("CONFIG_FILE")
        if config_file:
            base = cls.from_yaml(config_file)
        elif base is None:
            base = cls()

        seed = utils_cli.get_optional_str_setting("SEED")
        widths = utils_cli.get_optional_str_setting("FIELD_WIDTHS")

        return cls(
            iteration_count=utils_cli.get_int_setting(
                "ITERATION_COUNT", base.iteration_count
            ),
            reset_cycles=utils_cli.get_int_setting("RESET_CYCLES", base.reset_cycles),
            drain_ticks=utils_cli.get_int_setting("DRAIN_TICKS", base.drain_ticks),
            clock_period_ps=utils_cli.get_int_setting(
                "CLOCK_PERIOD_PS", base.clock_period_ps
            ),
            seed=_parse_seed(seed) if seed is not None else base.seed,
            field_widths=(
                {**base.field_widths, **_parse_widths(widths)}
                if widths is not None
                else base.field_widths
            ),
            data_width=utils_cli.get_int_setting("DATA_WIDTH", base.data_width),
            subscriber_buffer_policy=utils_cli.get_str_setting(
                "SUBSCRIBER_BUFFER_POLICY", str(base.subscriber_buffer_policy)
            ),
            sb_initial_flush_num=utils_cli.get_int_setting(
                "SB_INITIAL_FLUSH_NUM", base.sb_initial_flush_num
            ),
            sb_error_quit_count=utils_cli.get_int_setting(
                "SB_ERROR_QUIT_COUNT", base.sb_error_quit_count
            ),
            sb_fail_on_error=utils_cli.get_bool_setting(
                "SB_FAIL_ON_ERROR", base.sb_fail_on_error
            ),
        )
