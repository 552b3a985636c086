# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/tickbench/rad/rad_reg_en/dv/__init__.py

"""Design verification testbench for rad_reg_en.

This package contains a tick-synchronized, self-checking testbench for a
register with synchronous reset and load enable (rst -> 0; en -> d; else
hold).

Components:
- rad_reg_en_item: Transaction item definition
- rad_reg_en_sequence: Reset then pseudo-random (en, d) stimulus
- rad_reg_en_driver: Drives rst/en/d once per tick
- rad_reg_en_unit: Reference units under test (correct and one-tick-late)
- rad_reg_en_ref_model: Shadow reference model
- rad_reg_en_sb: Predictor and comparator
- rad_reg_en_env / rad_reg_en_test: Environment and test

To run tests:
    dv --bench reg_en
    dv --bench reg_en --buggy
"""
