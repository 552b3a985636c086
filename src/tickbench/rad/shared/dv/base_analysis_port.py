# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/tickbench/rad/shared/dv/base_analysis_port.py

"""Analysis port: one-to-many publication of immutable items.

AnalysisPort is a pyuvm.uvm_analysis_port. Every subscribe() connects a
SubscriptionExport to it, and each export feeds one Subscription, a FIFO
with its own buffer policy. An export holds its Subscription by weak
reference only, so dropping a Subscription handle unsubscribes it.

Each subscriber receives its own deep copy of a published item. One consumer
can never change what another consumer (or the producer) sees.

Buffer Policies:
    unbounded: Every published item is kept until consumed (default)
    bounded(n, dropOldest): Oldest buffered item is evicted and counted
    bounded(n, block): publish() waits for the subscriber to make room;
        write() raises SubscriberOverflowError instead of waiting

Concurrency:
    The connected exports form a copy-on-write list. publish() iterates a
    snapshot, so subscribe()/unsubscribe() during a publish take effect for
    the next item. close() releases a publish() waiting on a full subscriber.

Reference:
    UVM Class Reference Manual - uvm_analysis_port, uvm_tlm_analysis_fifo

Example:
    >>> ap = AnalysisPort("ap", mon)
    >>> sub = ap.subscribe("coll", BufferPolicy.parse("bounded(8, dropOldest)"))
    >>> await ap.publish(item)
    >>> got = await sub.get()
"""

from __future__ import annotations

import asyncio
import copy
import enum
import logging
import re
import weakref
from collections import deque
from dataclasses import dataclass
from typing import Any, Callable, Generic, Mapping, TypeVar

import pyuvm

from . import utils_dv

T = TypeVar("T")


class SubscriberOverflowError(RuntimeError):
    """A blocking subscriber was full and the producer could not wait."""


class SubscriptionClosedError(RuntimeError):
    """get() on a closed subscription with nothing left to deliver."""


class OverflowPolicy(enum.Enum):
    DROP_OLDEST = "dropOldest"
    BLOCK = "block"

    @classmethod
    def parse(cls, text: str | OverflowPolicy) -> OverflowPolicy:
        if isinstance(text, OverflowPolicy):
            return text
        key = text.strip().replace("_", "").replace("-", "").lower()
        for member in cls:
            if member.value.lower() == key:
                return member
        raise ValueError(f"unknown overflow policy {text!r}")


_BOUNDED_RE = re.compile(r"^bounded\s*\(\s*(\d+)\s*(?:,\s*([A-Za-z_-]+)\s*)?\)$")


@dataclass(frozen=True)
class BufferPolicy:
    """Per-subscriber buffering. bound=None means unbounded."""

    bound: int | None = None
    overflow: OverflowPolicy = OverflowPolicy.DROP_OLDEST

    def __post_init__(self) -> None:
        if self.bound is not None and self.bound < 1:
            raise ValueError(f"buffer bound must be >= 1, got {self.bound}")

    def __str__(self) -> str:
        if self.bound is None:
            return "unbounded"
        return f"bounded({self.bound}, {self.overflow.value})"

    @classmethod
    def unbounded(cls) -> BufferPolicy:
        return cls()

    @classmethod
    def bounded(
        cls, bound: int, overflow: str | OverflowPolicy = OverflowPolicy.DROP_OLDEST
    ) -> BufferPolicy:
        return cls(bound, OverflowPolicy.parse(overflow))

    @classmethod
    def parse(cls, value: Any) -> BufferPolicy:
        """Build a policy from a string, a mapping, or an existing policy.

        Accepted forms:
            "unbounded"
            "bounded(8)" (drop-oldest), "bounded(8, dropOldest)", "bounded(8, block)"
            {"bound": 8, "overflow": "block"}
        """
        if value is None:
            return cls.unbounded()
        if isinstance(value, BufferPolicy):
            return value
        if isinstance(value, Mapping):
            bound = value.get("bound")
            if bound is None:
                return cls.unbounded()
            return cls.bounded(int(bound), value.get("overflow", "dropOldest"))
        if isinstance(value, str):
            text = value.strip()
            if text.lower() == "unbounded":
                return cls.unbounded()
            m = _BOUNDED_RE.match(text)
            if m:
                return cls.bounded(int(m.group(1)), m.group(2) or "dropOldest")
        raise ValueError(f"invalid subscriber buffer policy {value!r}")


OverflowCallback = Callable[["Subscription[Any]", Any], None]


class Subscription(Generic[T]):
    """One subscriber's FIFO of published items.

    Items arrive in publish order. A closed subscription still delivers
    whatever it had buffered; after that get() raises SubscriptionClosedError
    and async iteration ends.

    Attributes:
        name: Subscriber name, used for logging
        policy: BufferPolicy in force for this subscriber
        received: Items accepted into the buffer
        dropped: Items evicted by the drop-oldest policy
    """

    def __init__(
        self, port: AnalysisPort[T], name: str, policy: BufferPolicy
    ) -> None:
        self.name: str = name
        self.policy: BufferPolicy = policy
        self.received: int = 0
        self.dropped: int = 0
        self._port: AnalysisPort[T] | None = port
        self._items: deque[T] = deque()
        self._not_empty: asyncio.Event = asyncio.Event()
        self._not_full: asyncio.Event = asyncio.Event()
        self._not_full.set()
        self._closed: bool = False

    def __repr__(self) -> str:
        return (
            f"Subscription({self.name!r}, policy={self.policy}, "
            f"buffered={len(self._items)}, dropped={self.dropped})"
        )

    def __len__(self) -> int:
        return len(self._items)

    @property
    def closed(self) -> bool:
        return self._closed

    def empty(self) -> bool:
        return not self._items

    def full(self) -> bool:
        bound = self.policy.bound
        return bound is not None and len(self._items) >= bound

    def get_nowait(self) -> T:
        """Pop the oldest buffered item; IndexError if there is none."""
        if not self._items:
            if self._closed:
                raise SubscriptionClosedError(f"subscription '{self.name}' is closed")
            raise IndexError(f"subscription '{self.name}' is empty")
        item = self._items.popleft()
        if not self._items:
            self._not_empty.clear()
        self._not_full.set()
        return item

    async def get(self) -> T:
        """Wait for and pop the oldest buffered item."""
        while not self._items:
            if self._closed:
                raise SubscriptionClosedError(f"subscription '{self.name}' is closed")
            self._not_empty.clear()
            await self._not_empty.wait()
        return self.get_nowait()

    def __aiter__(self) -> Subscription[T]:
        return self

    async def __anext__(self) -> T:
        try:
            return await self.get()
        except SubscriptionClosedError:
            raise StopAsyncIteration from None

    def close(self) -> None:
        """Stop receiving; buffered items can still be drained."""
        if self._closed:
            return
        self._closed = True
        self._not_empty.set()
        self._not_full.set()
        port, self._port = self._port, None
        if port is not None:
            port.unsubscribe(self)

    def _offer(self, item: T) -> tuple[bool, Any]:
        """Try to buffer item. Returns (accepted, evicted-or-None).

        A closed subscription accepts and discards.
        """
        if self._closed:
            return True, None
        evicted = None
        if self.full():
            if self.policy.overflow is OverflowPolicy.BLOCK:
                self._not_full.clear()
                return False, None
            evicted = self._items.popleft()
            self.dropped += 1
        self._items.append(item)
        self.received += 1
        self._not_empty.set()
        if self.full():
            self._not_full.clear()
        return True, evicted

    async def _wait_not_full(self) -> None:
        await self._not_full.wait()


class SubscriptionExport(pyuvm.uvm_analysis_export):
    """Analysis export connected to an AnalysisPort on behalf of a Subscription.

    write() is the uvm_analysis_port broadcast target: it hands the
    subscription a private copy of the item without waiting.
    """

    def __init__(
        self, name: str, parent: AnalysisPort[Any], sub: Subscription[Any]
    ) -> None:
        super().__init__(name, parent)
        self._sub_ref = weakref.ref(sub, self._reap)

    @property
    def subscription(self) -> Subscription[Any] | None:
        return self._sub_ref()

    def _reap(self, _ref: weakref.ReferenceType[Subscription[Any]]) -> None:
        port = self.get_parent()
        if isinstance(port, AnalysisPort):
            port.disconnect(self)

    def write(self, datum: Any) -> None:
        sub = self.subscription
        if sub is None:
            return
        accepted, evicted = sub._offer(  # pylint: disable=protected-access
            copy.deepcopy(datum)
        )
        if not accepted:
            raise SubscriberOverflowError(
                f"{self.get_parent().get_full_name()}: subscriber '{sub.name}' "
                f"is full ({sub.policy}); use publish() to wait"
            )
        if evicted is not None:
            self.get_parent().record_drop(sub, evicted)


class AnalysisPort(pyuvm.uvm_analysis_port, Generic[T]):
    """Fan-out publisher built on pyuvm.uvm_analysis_port.

    Attributes:
        policy: Default BufferPolicy for new subscriptions
        on_overflow: Called with (subscription, evicted item) on every drop
        published: Items published so far
        dropped: Items evicted across all subscriptions
    """

    def __init__(
        self,
        name: str,
        parent: pyuvm.uvm_component | None = None,
        policy: BufferPolicy | None = None,
        on_overflow: OverflowCallback | None = None,
    ) -> None:
        super().__init__(name, parent)
        self.policy: BufferPolicy = policy or BufferPolicy.unbounded()
        self.on_overflow: OverflowCallback | None = on_overflow
        self.published: int = 0
        self.dropped: int = 0
        self.logger = logging.getLogger(f"tb.{self.get_full_name()}")
        utils_dv.configure_component_logger(self)
        self._closed: bool = False
        self._export_seq: int = 0

    def __repr__(self) -> str:
        return (
            f"AnalysisPort({self.get_full_name()!r}, "
            f"subscribers={self.subscriber_count}, "
            f"published={self.published}, dropped={self.dropped})"
        )

    @property
    def subscriber_count(self) -> int:
        return len(self._live())

    def subscribe(
        self, name: str = "", policy: BufferPolicy | None = None
    ) -> Subscription[T]:
        """Register a new subscriber; it sees items published from now on."""
        sub: Subscription[T] = Subscription(
            self, name or f"{self.get_full_name()}.sub", policy or self.policy
        )
        if self._closed:
            sub.close()
            return sub
        export = SubscriptionExport(f"export{self._export_seq}", self, sub)
        self._export_seq += 1
        self.connect(export)
        self.logger.debug("subscribe %s policy=%s", sub.name, sub.policy)
        return sub

    def connect(self, export: Any) -> None:
        """Connect an analysis export (copy-on-write)."""
        self._check_export(export)
        self.subscribers = [*self.subscribers, export]

    def disconnect(self, export: Any) -> None:
        """Remove export from the broadcast list and from this component."""
        self.subscribers = [e for e in self.subscribers if e is not export]
        self._children.pop(export.get_name(), None)

    def unsubscribe(self, sub: Subscription[T]) -> None:
        """Remove sub; other subscriptions are unaffected. Idempotent."""
        for export in self.subscribers:
            if isinstance(export, SubscriptionExport) and export.subscription is sub:
                self.disconnect(export)
        if not sub.closed:
            sub.close()

    def _live(self) -> list[Subscription[T]]:
        subs = []
        for export in self.subscribers:
            if isinstance(export, SubscriptionExport):
                sub = export.subscription
                if sub is not None:
                    subs.append(sub)
        return subs

    def record_drop(self, sub: Subscription[T], evicted: Any) -> None:
        self.dropped += 1
        self.logger.debug("%s dropped oldest item (dropped=%d)", sub.name, sub.dropped)
        if self.on_overflow is not None:
            self.on_overflow(sub, evicted)

    async def publish(self, item: T) -> None:
        """Deliver a copy of item to every connected export, in publish order.

        Waits only for subscribers configured with the block policy, and only
        until they make room or are closed. Other pyuvm exports (a
        uvm_subscriber's analysis_export, say) get write() calls.
        """
        self.published += 1
        for export in self.subscribers:
            if not isinstance(export, SubscriptionExport):
                export.write(copy.deepcopy(item))
                continue
            sub = export.subscription
            if sub is None:
                continue
            mine = copy.deepcopy(item)
            accepted, evicted = sub._offer(mine)  # pylint: disable=protected-access
            while not accepted:
                await sub._wait_not_full()  # pylint: disable=protected-access
                accepted, evicted = sub._offer(mine)  # pylint: disable=protected-access
            if evicted is not None:
                self.record_drop(sub, evicted)

    def write(self, datum: T) -> None:
        """Non-blocking publish (SubscriberOverflowError on a full block buffer)."""
        self.published += 1
        super().write(datum)

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """End publication; subscribers drain what they hold, then stop."""
        self._closed = True
        for sub in self._live():
            sub.close()
