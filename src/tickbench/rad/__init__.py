# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/tickbench/rad/__init__.py

"""RAD (Reusable Analog/Digital) verification library.

Modules:
- rad_axis_stream: AXI4-Stream style valid/ready observer bench
- rad_reg_en: Register with synchronous reset and enable bench

Subpackages:
- tools: DV command-line tools (dv)
- shared: Shared verification infrastructure

Each module contains:
- dv/: Design verification testbench (tick-synchronized, asyncio)
"""
