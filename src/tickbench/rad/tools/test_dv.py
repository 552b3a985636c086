# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/tickbench/rad/tools/test_dv.py

"""Tests for the dv command-line runner."""

from __future__ import annotations

import logging
import random
from typing import Iterator

import pytest

from tickbench import utils

from . import dv

_SETTINGS = (
    "BENCH",
    "VERBOSITY",
    "CONFIG_FILE",
    "ITERATION_COUNT",
    "RESET_CYCLES",
    "DRAIN_TICKS",
    "SEED",
    "FIELD_WIDTHS",
    "SUBSCRIBER_BUFFER_POLICY",
    "SB_INITIAL_FLUSH_NUM",
    "SB_ERROR_QUIT_COUNT",
    "SB_FAIL_ON_ERROR",
    "PLUSARGS",
)


@pytest.fixture(autouse=True)
def _isolate(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in _SETTINGS:
        monkeypatch.delenv(name, raising=False)
        monkeypatch.delenv(f"TB_{name}", raising=False)
    monkeypatch.setenv("TB_LOG_LEVEL", "WARNING")
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for h in root.handlers:
        if h not in handlers:
            h.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_reg_en_passes(capsys: pytest.CaptureFixture[str]) -> None:
    rc = dv.main(["--bench", "reg_en", "--iterations", "50", "--seed", "1"])
    out = capsys.readouterr().out
    assert rc == 0
    assert "PASS reg_en_test" in out
    assert "comparisons=56" in out


def test_buggy_failure_is_expected(capsys: pytest.CaptureFixture[str]) -> None:
    rc = dv.main(["--buggy", "--iterations", "200", "--seed", "7"])
    out = capsys.readouterr().out
    assert rc == 0
    assert "FAIL (EXPECTED) reg_en_test" in out


def test_buggy_with_expect_pass_fails(capsys: pytest.CaptureFixture[str]) -> None:
    rc = dv.main(["--buggy", "--expect", "PASS", "--iterations", "200", "--seed", "7"])
    assert rc == 1
    assert "FAIL reg_en_test" in capsys.readouterr().out


def test_unexpected_pass_is_an_error(capsys: pytest.CaptureFixture[str]) -> None:
    rc = dv.main(["--expect", "FAIL", "--iterations", "20", "--seed", "2"])
    assert rc == 1
    assert "expected FAIL" in capsys.readouterr().err


def test_axis_stream_runs(capsys: pytest.CaptureFixture[str]) -> None:
    rc = dv.main(["--bench", "axis_stream", "--iterations", "100", "--seed", "3"])
    out = capsys.readouterr().out
    assert rc == 0
    assert "PASS axis_stream_test" in out


def test_invalid_arguments() -> None:
    with pytest.raises(SystemExit):
        dv.main(["--bench", "axis_stream", "--buggy"])
    with pytest.raises(SystemExit):
        dv.main(["--iterations", "-1"])
    with pytest.raises(SystemExit):
        dv.main(["--seed", "twelve"])
    with pytest.raises(SystemExit):
        dv.main(["--bench", "fifo"])


def test_config_file_and_overrides(tmp_path) -> None:
    cfg_file = tmp_path / "run.yaml"
    cfg_file.write_text("iterationCount: 20\nseed: 9\n", encoding="utf-8")
    cfg = dv.build_cfg(dv.parse_args(["--config", str(cfg_file)]))
    assert (cfg.iteration_count, cfg.seed) == (20, 9)
    argv = ["--config", str(cfg_file), "--iterations", "5", "--seed", "0x10"]
    cfg = dv.build_cfg(dv.parse_args(argv))
    assert (cfg.iteration_count, cfg.seed) == (5, 16)


def test_seed_is_always_chosen() -> None:
    cfg = dv.build_cfg(dv.parse_args([]))
    assert cfg.seed is not None


def test_log_file_has_no_color(tmp_path) -> None:
    log_file = tmp_path / "dv.log"
    rc = dv.main(["--iterations", "10", "--seed", "5", "--log-file", str(log_file)])
    assert rc == 0
    logging.getLogger("tb.dv_log_check").info(utils.green("colored"))
    for h in logging.getLogger().handlers:
        h.flush()
    text = log_file.read_text(encoding="utf-8")
    assert "bench=reg_en seed=5" in text
    assert "colored" in text
    assert "\033[" not in text


def test_normalize_seed() -> None:
    rng = random.Random(0)
    assert utils.normalize_seed(rng, "42") == 42
    assert utils.normalize_seed(rng, "0x1_0000_0001") == 1
    assert 0 <= utils.normalize_seed(rng, "random") < 2**32
    with pytest.raises(SystemExit):
        utils.normalize_seed(rng, "nope")
