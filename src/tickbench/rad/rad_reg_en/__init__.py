# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/tickbench/rad/rad_reg_en/__init__.py

"""RAD register with synchronous reset and enable.

Subpackages:
- dv: Self-checking testbench with reference units
"""
