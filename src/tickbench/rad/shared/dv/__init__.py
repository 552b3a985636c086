# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/tickbench/rad/shared/dv/__init__.py

"""Shared design verification infrastructure for RAD modules.

This package provides the base classes and utilities for building
tick-synchronized, UVM-style testbenches on asyncio. Every role (driver,
monitor, predictor, comparator, unit proxy) is an independent task that
suspends only at "wait for next tick"; shared state lives in double-buffered
signals committed by the scheduler after every role has finished reading.

Scheduling and Shared State:
- TickScheduler: Periodic ticks with a two-phase (read, commit) barrier
- TickStream: Per-subscriber tick sequence
- Signal / SignalDriver / SignalBundle: Double-buffered, single-writer values

Publication:
- AnalysisPort: One-to-many publisher with per-subscriber buffering
- Subscription: A subscriber's FIFO handle
- BufferPolicy / OverflowPolicy: unbounded | bounded(n, dropOldest|block)

Base Classes:
- BaseComponent: Hierarchy, logging and phase hooks
- BaseTickMixin: Scheduler binding, tick streams and signal ownership
- BaseEnv: Top-level testbench environment
- BaseTest: Test case framework and RunSummary
- BaseDriver: Drives one sequence item per tick
- BaseSequence: Seeded item generator
- BaseMonitor: Per-tick sampling and publication
- BaseSubscriber: Analysis port consumer
- BaseItem: Immutable transaction item base class
- BaseRefModel: Reference model for golden behavior
- BaseSbPredictor: Shadow model role staging next-tick expectations
- BaseSbComparator: Checker role with a one-tick expectation pipeline
- BaseUnitProxy: Wraps an opaque clocked unit under test

Configuration:
- HarnessConfig: env > plusargs > YAML > defaults

Utilities:
- utils_dv: Design verification utility functions
- utils_cli: Command-line interface utilities
"""

from __future__ import annotations

from tickbench import __version__

from . import utils_cli, utils_dv
from .base_analysis_port import (
    AnalysisPort,
    BufferPolicy,
    OverflowPolicy,
    SubscriberOverflowError,
    Subscription,
    SubscriptionClosedError,
    SubscriptionExport,
)
from .base_component import BaseComponent
from .base_config import HarnessConfig
from .base_driver import BaseDriver
from .base_env import BaseEnv
from .base_item import BaseItem, FieldDiff
from .base_monitor import BaseMonitor
from .base_ref_model import BaseRefModel
from .base_sb_comparator import BaseSbComparator, CheckFailure
from .base_sb_predictor import BaseSbPredictor, Expectation
from .base_sequence import BaseSequence
from .base_signal import MultipleDriverError, Signal, SignalBundle, SignalDriver
from .base_subscriber import BaseSubscriber
from .base_test import BaseTest, RunSummary
from .base_tick_mixin import BaseTickMixin
from .base_tick_scheduler import InactiveSchedulerError, Tick, TickScheduler, TickStream
from .base_unit_proxy import BaseUnitProxy, ClockedUnit
from .utils_dv import ConfigKeyError, Verdict

__all__ = (
    "AnalysisPort",
    "BaseComponent",
    "BaseDriver",
    "BaseEnv",
    "BaseItem",
    "BaseMonitor",
    "BaseRefModel",
    "BaseSbComparator",
    "BaseSbPredictor",
    "BaseSequence",
    "BaseSubscriber",
    "BaseTest",
    "BaseTickMixin",
    "BaseUnitProxy",
    "BufferPolicy",
    "CheckFailure",
    "ClockedUnit",
    "ConfigKeyError",
    "Expectation",
    "FieldDiff",
    "HarnessConfig",
    "InactiveSchedulerError",
    "MultipleDriverError",
    "OverflowPolicy",
    "RunSummary",
    "Signal",
    "SignalBundle",
    "SignalDriver",
    "SubscriberOverflowError",
    "Subscription",
    "SubscriptionClosedError",
    "SubscriptionExport",
    "Tick",
    "TickScheduler",
    "TickStream",
    "Verdict",
    "utils_dv",
    "utils_cli",
    "__version__",
)
