# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/tickbench/utils.py

"""Console helpers for the dv runner: colors, logging setup and seeds."""

from __future__ import annotations

import logging
import random
import re
from pathlib import Path

RED = "\033[31m"
GREEN = "\033[32m"
YELLOW = "\033[33m"
RESET = "\033[0m"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

_ANSI = re.compile(r"\033\[[0-9;]*m")


class NoColorFormatter(logging.Formatter):
    """Formatter for log files: ANSI color codes are removed."""

    def format(self, record: logging.LogRecord) -> str:
        return _ANSI.sub("", super().format(record))


def _handler(
    handler: logging.Handler, level: str, fmt: type[logging.Formatter]
) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(fmt(LOG_FORMAT, LOG_DATEFMT))
    return handler


def configure_logger(
    verbosity: str = "info", log_file: Path | None = None
) -> logging.Logger:
    """Replace the root handlers with a console and optional file handler.

    Args:
        verbosity: Level name (critical, error, warning, info, debug, notset)
        log_file: Also log here, truncated first and without colors

    Returns:
        This module's logger
    """
    level = verbosity.upper()
    root = logging.getLogger()
    root.setLevel(level)
    for old in list(root.handlers):
        root.removeHandler(old)
    root.addHandler(_handler(logging.StreamHandler(), level, logging.Formatter))
    if log_file:
        file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        root.addHandler(_handler(file_handler, level, NoColorFormatter))
    return logging.getLogger(__name__)


def colorize(s: str, color: str) -> str:
    return f"{color}{s}{RESET}"


def green(s: str) -> str:
    return colorize(s, GREEN)


def red(s: str) -> str:
    return colorize(s, RED)


def yellow(s: str) -> str:
    return colorize(s, YELLOW)


def normalize_seed(rng: random.Random, s: str) -> int:
    """Return a 32-bit seed from decimal, 0x... or 'random' (drawn from rng).

    Raises SystemExit with a CLI-style message otherwise.
    """
    text = s.strip().lower()
    if text in {"rand", "random", "auto"}:
        return rng.getrandbits(32)
    try:
        return int(text, 0) & 0xFFFF_FFFF
    except ValueError as exc:
        raise SystemExit(
            f"[dv] Invalid seed {s!r}: use decimal, 0x..., or 'random'"
        ) from exc
