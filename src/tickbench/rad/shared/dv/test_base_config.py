# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/tickbench/rad/shared/dv/test_base_config.py

"""Tests for harness configuration sources and precedence."""

from __future__ import annotations

import pytest

from .base_analysis_port import BufferPolicy, OverflowPolicy
from .base_config import HarnessConfig

_SETTINGS = (
    "CONFIG_FILE",
    "ITERATION_COUNT",
    "RESET_CYCLES",
    "DRAIN_TICKS",
    "CLOCK_PERIOD_PS",
    "SEED",
    "FIELD_WIDTHS",
    "DATA_WIDTH",
    "SUBSCRIBER_BUFFER_POLICY",
    "SB_INITIAL_FLUSH_NUM",
    "SB_ERROR_QUIT_COUNT",
    "SB_FAIL_ON_ERROR",
    "PLUSARGS",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _SETTINGS:
        monkeypatch.delenv(name, raising=False)
        monkeypatch.delenv(f"TB_{name}", raising=False)


YAML = """\
iterationCount: 2000
seed: 0x2A
fieldWidths: {data: 32, user: 4}
subscriberBufferPolicy: "bounded(16, dropOldest)"
sb_error_quit_count: 5
"""


def test_defaults() -> None:
    cfg = HarnessConfig.from_settings()
    assert cfg == HarnessConfig()
    assert cfg.iteration_count == 10_000
    assert cfg.reset_cycles == 5
    assert cfg.subscriber_buffer_policy == BufferPolicy.unbounded()
    assert cfg.seed is None


def test_yaml_camel_and_snake_keys(tmp_path) -> None:
    path = tmp_path / "tb.yaml"
    path.write_text(YAML, encoding="utf-8")
    cfg = HarnessConfig.from_yaml(path)
    assert cfg.iteration_count == 2000
    assert cfg.seed == 42
    assert cfg.field_widths == {"data": 32, "user": 4}
    assert cfg.subscriber_buffer_policy == BufferPolicy(16, OverflowPolicy.DROP_OLDEST)
    assert cfg.sb_error_quit_count == 5


def test_precedence_env_over_plusarg_over_yaml(tmp_path, monkeypatch) -> None:
    path = tmp_path / "tb.yaml"
    path.write_text(YAML, encoding="utf-8")
    monkeypatch.setenv("CONFIG_FILE", str(path))
    monkeypatch.setenv("PLUSARGS", "+ITERATION_COUNT=300 +DRAIN_TICKS=4 +SEED=random")
    monkeypatch.setenv("TB_ITERATION_COUNT", "0x40")
    cfg = HarnessConfig.from_settings()
    assert cfg.iteration_count == 64
    assert cfg.drain_ticks == 4
    assert cfg.seed is None
    assert cfg.field_widths == {"data": 32, "user": 4}
    assert cfg.sb_error_quit_count == 5


def test_env_settings_parse(monkeypatch) -> None:
    monkeypatch.setenv("FIELD_WIDTHS", "data=8,id=2")
    monkeypatch.setenv("SUBSCRIBER_BUFFER_POLICY", "bounded(4, block)")
    monkeypatch.setenv("SB_FAIL_ON_ERROR", "no")
    monkeypatch.setenv("SEED", "17")
    cfg = HarnessConfig.from_settings(HarnessConfig(field_widths={"user": 1}))
    assert cfg.field_widths == {"user": 1, "data": 8, "id": 2}
    assert cfg.subscriber_buffer_policy == BufferPolicy(4, OverflowPolicy.BLOCK)
    assert cfg.sb_fail_on_error is False
    assert cfg.seed == 17


@pytest.mark.parametrize(
    "kwargs",
    [
        {"iteration_count": -1},
        {"clock_period_ps": 0},
        {"data_width": 0},
        {"field_widths": {"data": -8}},
        {"subscriber_buffer_policy": "bounded(x)"},
        {"seed": "soon"},
    ],
)
def test_invalid_values(kwargs) -> None:
    with pytest.raises(ValueError):
        HarnessConfig(**kwargs)


def test_unknown_or_malformed_yaml(tmp_path) -> None:
    bad_key = tmp_path / "bad_key.yaml"
    bad_key.write_text("iterationCnt: 3\n", encoding="utf-8")
    with pytest.raises(ValueError, match="iterationCnt"):
        HarnessConfig.from_yaml(bad_key)
    not_map = tmp_path / "list.yaml"
    not_map.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(ValueError):
        HarnessConfig.from_yaml(not_map)
    empty = tmp_path / "empty.yaml"
    empty.write_text("", encoding="utf-8")
    assert HarnessConfig.from_yaml(empty) == HarnessConfig()
