# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/tickbench/rad/rad_axis_stream/__init__.py

"""RAD valid/ready stream (AXI4-Stream style) module.

Subpackages:
- dv: Bus observer testbench
"""
