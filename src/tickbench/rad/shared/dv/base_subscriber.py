# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/tickbench/rad/shared/dv/base_subscriber.py

"""Analysis subscriber driven by its own Subscription."""

from __future__ import annotations

from typing import Generic, TypeVar

from .base_analysis_port import AnalysisPort, BufferPolicy, Subscription
from .base_component import BaseComponent

T = TypeVar("T")


class BaseSubscriber(BaseComponent, Generic[T]):
    """Consumes items published on an analysis port.

    Unlike tick roles, a subscriber is not synchronized to the scheduler. It
    drains its Subscription at its own pace and finishes when the port is
    closed and the buffer is empty.

    Subclasses must implement:
        write(item): Handle one item

    Example:
        >>> coll = MyCollector("coll", env)
        >>> coll.subscribe_to(mon.ap)
    """

    def __init__(self, name: str, parent: BaseComponent | None) -> None:
        super().__init__(name, parent)
        self.sub: Subscription[T] | None = None
        self.item_count: int = 0

    def subscribe_to(
        self, ap: AnalysisPort[T], policy: BufferPolicy | None = None
    ) -> Subscription[T]:
        self.sub = ap.subscribe(self.get_full_name(), policy)
        return self.sub

    async def run_phase(self) -> None:
        self.logger.debug("run_phase begin")
        if self.sub is None:
            self.logger.warning("not subscribed to any port")
            return
        async for item in self.sub:
            self.item_count += 1
            self.write(item)
        self.logger.debug("run_phase end: %d item(s)", self.item_count)

    def write(self, item: T) -> None:
        raise NotImplementedError
