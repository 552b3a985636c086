# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/tickbench/rad/rad_axis_stream/dv/__init__.py

"""Design verification testbench for rad_axis_stream.

This package observes a valid/ready (AXI4-Stream style) bus and republishes
every accepted transfer as an immutable item.

Components:
- rad_axis_stream_item: Field widths, bus beats, transfer items, packets
- rad_axis_stream_sequence: Protocol-legal random traffic and fixed beat lists
- rad_axis_stream_driver: Drives one beat per tick
- rad_axis_stream_monitor: Publishes one item per accepted transfer
- rad_axis_stream_packet_collector: Reassembles packets at tlast
- rad_axis_stream_env: Environment and test

To run tests:
    dv --bench axis_stream
"""
