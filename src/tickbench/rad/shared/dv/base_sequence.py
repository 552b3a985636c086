# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/tickbench/rad/shared/dv/base_sequence.py

"""Base for seeded item-generating sequences."""

from __future__ import annotations

import logging
import random
from typing import Generic, Iterator, TypeVar

from . import utils_dv
from .base_item import BaseItem

T = TypeVar("T", bound=BaseItem)


class BaseSequence(Generic[T]):
    """Seeded, lazy source of items for a BaseDriver.

    The driver pulls one item per tick from items(), so an item is built in
    the tick that drives it and never earlier. Every random choice must come
    from self.rng; two sequences with the same seed yield the same items.

    Subclasses set item_type and implement set_item_inputs(item, index),
    returning a clone with the input fields filled in. body_pre() and
    body_post() bracket the run.

    Example:
        >>> class MySequence(BaseSequence[MyItem]):
        ...     item_type = MyItem
        ...
        ...     def set_item_inputs(self, item, index):
        ...         return item.clone(addr=index % 256)
    """

    item_type: type[T] | None = None

    def __init__(
        self, name: str = "seq", seq_len: int = 100, seed: int | None = None
    ) -> None:
        self.name: str = name
        self.logger: logging.Logger = logging.getLogger(f"tb.{name}")
        utils_dv.configure_non_component_logger(self.logger)
        self.seq_len: int = max(1, int(seq_len))
        self.seed: int | None = seed
        self.rng: random.Random = random.Random(seed)

    def __len__(self) -> int:
        return self.seq_len

    def items(self) -> Iterator[T]:
        """Lazily yield seq_len items, bracketed by body_pre() and body_post()."""
        self.logger.debug("%s: %d item(s), seed=%s", self.name, self.seq_len, self.seed)
        self.body_pre()
        for index in range(self.seq_len):
            yield self.set_item_inputs(self.make_item(index), index)
        self.body_post()
        self.logger.debug("%s: done", self.name)

    def body_pre(self) -> None:
        """Hook run once, before the first item is generated."""

    def make_item(self, index: int) -> T:
        """Create one default item."""
        if self.item_type is None:
            raise NotImplementedError(f"{type(self).__name__} must set item_type")
        return self.item_type()

    def set_item_inputs(self, item: T, index: int) -> T:
        """Return item with its input fields set (items are frozen)."""
        raise NotImplementedError

    def body_post(self) -> None:
        """Hook run once, after the last item has been pulled."""
