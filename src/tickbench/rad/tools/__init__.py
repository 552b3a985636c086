# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/tickbench/rad/tools/__init__.py

"""DV command-line tools.

Modules:
- dv: Run a bench and print its summary
"""
