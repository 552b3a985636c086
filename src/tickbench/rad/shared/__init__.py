# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/tickbench/rad/shared/__init__.py

"""Shared components and utilities for RAD modules.

Subpackages:
- dv: Shared design verification infrastructure (base classes, utilities)
"""
