# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/tickbench/__init__.py

"""tickbench: tick-synchronized verification harness for clocked logic.

tickbench decomposes a self-checking bench into independent concurrent roles
(stimulus, shadow reference model, checker, bus observers) that share
double-buffered signals and are synchronized by a two-phase tick barrier, so
no role ever observes a partially updated state.

Main Components:

rad (Reusable Analog/Digital):
    Verification infrastructure and benches:
    - shared: scheduler, signals, analysis ports and UVM-style base roles
    - rad_axis_stream: valid/ready stream observer bench
    - rad_reg_en: register-with-enable self-checking bench
    - tools: the dv command-line runner

utils:
    Common utilities used by the command-line tools
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as pkg_version

try:
    __version__ = pkg_version("tickbench")
except PackageNotFoundError:
    __version__ = "0+local"
