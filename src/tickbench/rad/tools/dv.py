# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/tickbench/rad/tools/dv.py

"""Run tick-synchronized benches from the command line.

Builds a HarnessConfig (env > plusargs > YAML > defaults, then the command
line on top), runs the selected bench to completion on asyncio and prints
its RunSummary. The exit code is 0 when the outcome matches the expected
result and 1 otherwise.

Command-line interface:
    dv --bench=<bench> [OPTIONS]

Typical usage:
    # Self-checking register bench, 10_000 random iterations
    dv --bench reg_en

    # Same bench against the one-tick-late unit; the failure is expected
    dv --bench reg_en --buggy

    # Stream observer with a YAML config and a fixed seed
    dv --bench axis_stream --config axis.yaml --seed 0x1234
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import random
import sys
from pathlib import Path
from typing import Callable, Final, Sequence

from tickbench import utils
from tickbench.rad.rad_axis_stream.dv.rad_axis_stream_env import AxisStreamTest
from tickbench.rad.rad_reg_en.dv.rad_reg_en_env import RegEnTest
from tickbench.rad.shared.dv import BaseTest, HarnessConfig, RunSummary

DEFAULT_BENCH = "reg_en"

BENCHES: Final[dict[str, Callable[[HarnessConfig, bool], BaseTest]]] = {
    "reg_en": lambda cfg, buggy: RegEnTest(cfg=cfg, buggy=buggy),
    "axis_stream": lambda cfg, buggy: AxisStreamTest(cfg=cfg),
}

logger = logging.getLogger(__name__)


# === CLI ===


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments for a bench run.

    Args:
        argv: Command-line arguments to parse. If None, uses sys.argv[1:].

    Returns:
        Parsed argument namespace.
    """
    ap = argparse.ArgumentParser(
        prog="dv",
        description="Run tick-synchronized verification benches",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    ap.add_argument(
        "--bench",
        choices=sorted(BENCHES),
        default=os.getenv("BENCH", DEFAULT_BENCH),
        help="bench to run",
    )
    ap.add_argument(
        "--iterations",
        type=int,
        default=None,
        help="stimulus iterations (overrides ITERATION_COUNT and the config file)",
    )
    ap.add_argument(
        "--seed",
        default=None,
        help="seed (decimal, 0x..., or 'random'); overrides SEED",
    )
    ap.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML harness config (camelCase or snake_case keys)",
    )
    ap.add_argument(
        "--buggy",
        action="store_true",
        help="swap in the one-tick-late unit; a failing run is expected",
    )
    ap.add_argument(
        "--expect",
        choices=["PASS", "FAIL"],
        default=None,
        help="expected result (default PASS, or FAIL with --buggy)",
    )
    ap.add_argument(
        "--verbosity",
        choices=["critical", "error", "warning", "info", "debug", "notset"],
        default=os.getenv("VERBOSITY", "info"),
        help="logging level",
    )
    ap.add_argument("--log-file", type=Path, default=None, help="also log here")
    return ap.parse_args(argv)


def validate_args(args: argparse.Namespace) -> None:
    """Fail fast on inconsistent arguments.

    Raises:
        SystemExit: If arguments are invalid.
    """
    if args.buggy and args.bench != "reg_en":
        raise SystemExit(f"[dv]: error: --buggy is not supported for {args.bench}")
    if args.iterations is not None and args.iterations < 0:
        raise SystemExit(f"[dv]: error: --iterations must be >= 0: {args.iterations}")


def _configure_logging(verbosity: str, log_file: Path | None) -> None:
    """Install root handlers and set the bench log level.

    Components take their level from TB_LOG_LEVEL; an explicit value in the
    environment wins over --verbosity.
    """
    utils.configure_logger(verbosity, log_file)
    os.environ.setdefault("TB_LOG_LEVEL", verbosity.upper())


def build_cfg(args: argparse.Namespace) -> HarnessConfig:
    """Resolve the harness config, then apply command-line overrides."""
    cfg = HarnessConfig.from_settings(config_file=args.config)
    changes: dict[str, object] = {}
    if args.iterations is not None:
        changes["iteration_count"] = args.iterations
    if args.seed is not None:
        changes["seed"] = utils.normalize_seed(random.Random(), str(args.seed))
    if cfg.seed is None and "seed" not in changes:
        # Pick one so the run can be replayed
        changes["seed"] = random.SystemRandom().getrandbits(32)
    return cfg.replace(**changes) if changes else cfg


def run_bench(bench: str, cfg: HarnessConfig, buggy: bool = False) -> RunSummary:
    """Build and run one bench to completion."""
    test = BENCHES[bench](cfg, buggy)
    return asyncio.run(test.run())


def _report(summary: RunSummary, expect: str) -> int:
    """Print the summary line; return 0 if the outcome is as expected."""
    outcome = "PASS" if summary.passed else "FAIL"
    if outcome == expect:
        if outcome == "PASS":
            print(utils.green(str(summary)))
        else:
            print(utils.yellow(str(summary).replace("FAIL", "FAIL (EXPECTED)", 1)))
        return 0
    print(utils.red(str(summary)))
    if outcome == "PASS":
        print(utils.red("[dv] expected FAIL but the bench passed"), file=sys.stderr)
        return 1
    return summary.exit_status


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for the dv runner.

    Args:
        argv: Command-line arguments. If None, uses sys.argv[1:].

    Returns:
        0 if the run ended as expected, non-zero otherwise.
    """
    args = parse_args(argv)
    validate_args(args)
    _configure_logging(str(args.verbosity), args.log_file)

    expect = args.expect or ("FAIL" if args.buggy else "PASS")
    try:
        cfg = build_cfg(args)
    except (OSError, ValueError) as exc:
        raise SystemExit(f"[dv]: error: {exc}") from exc

    logger.info(
        "bench=%s seed=%s iterations=%d expect=%s",
        args.bench,
        cfg.seed,
        cfg.iteration_count,
        expect,
    )
    summary = run_bench(args.bench, cfg, bool(args.buggy))
    return _report(summary, expect)


if __name__ == "__main__":
    raise SystemExit(main())
