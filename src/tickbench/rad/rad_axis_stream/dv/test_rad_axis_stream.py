# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/tickbench/rad/rad_axis_stream/dv/test_rad_axis_stream.py

"""Tests for axis_stream verification."""

from __future__ import annotations

import asyncio
import dataclasses
import random
from typing import Any

import pytest
from cocotb.types import LogicArray

from tickbench.rad.shared.dv import (
    BufferPolicy,
    HarnessConfig,
    Subscription,
    utils_dv,
)

from .rad_axis_stream_env import AxisStreamTest
from .rad_axis_stream_item import AxisStreamBeat, AxisStreamItem, AxisStreamWidths
from .rad_axis_stream_packet_collector import AxisStreamPacketCollector
from .rad_axis_stream_sequence import AxisStreamListSequence, AxisStreamSequence

get_int = utils_dv.get_signal_value_int

WIDTHS = {"data": 16, "id": 2, "dest": 1, "user": 1}


class _TapTest(AxisStreamTest):
    """Adds a test-owned subscription on the monitor's port."""

    tap: Subscription[AxisStreamItem]

    def connect_phase(self) -> None:
        super().connect_phase()
        self.tap = self.env.mon.ap.subscribe("tap", BufferPolicy.unbounded())

    def tapped(self) -> list[AxisStreamItem]:
        items = []
        while not self.tap.empty():
            items.append(self.tap.get_nowait())
        return items


def _run(seq: Any = None, widths: Any = None, **cfg: Any) -> tuple[_TapTest, Any]:
    test = _TapTest(cfg=HarnessConfig(field_widths=widths or WIDTHS, **cfg))
    test.seq = seq
    summary = asyncio.run(test.run())
    return test, summary


def _handshake(beat: AxisStreamBeat) -> bool:
    return beat.tvalid == 1 and beat.tready == 1


def _beat(valid: Any, ready: Any, data: Any = 0, last: int = 1) -> AxisStreamBeat:
    return AxisStreamBeat(tvalid=valid, tready=ready, tdata=data, tlast=last)


@pytest.mark.parametrize("seed", [1, 2, 3])
def test_one_item_per_handshake(seed: int) -> None:
    rng = random.Random(seed)
    levels = (0, 1, 1, "X", "Z")
    beats = [_beat(rng.choice(levels), rng.choice(levels), i) for i in range(300)]
    beats.append(AxisStreamBeat())
    test, summary = _run(AxisStreamListSequence(beats))
    expected = [i for i, b in enumerate(beats) if _handshake(b)]
    items = test.tapped()
    # Beat i is driven at tick i and sampled at tick i+1
    assert [tr.tick - 1 for tr in items] == expected
    assert [get_int(tr.tdata) for tr in items] == expected
    assert summary.transfers == len(expected)
    assert test.env.mon.item_count == len(expected)


def test_stalled_beat_is_not_sampled() -> None:
    beats = [_beat(1, 0, 0xA), _beat(1, 0, 0xB), _beat(1, 1, 0xC), AxisStreamBeat()]
    test, summary = _run(AxisStreamListSequence(beats))
    items = test.tapped()
    assert [(tr.tick, get_int(tr.tdata)) for tr in items] == [(3, 0xC)]
    assert test.env.mon.stall_count == 2
    assert summary.transfers == 1


class _TwoTapTest(_TapTest):
    """Adds a second test-owned subscription beside the first."""

    tap2: Subscription[AxisStreamItem]

    def connect_phase(self) -> None:
        super().connect_phase()
        self.tap2 = self.env.mon.ap.subscribe("tap2", BufferPolicy.unbounded())


def test_items_are_independent_snapshots() -> None:
    beats = [
        _beat(1, 1, 0x1111, last=0),
        _beat(1, 1, 0x2222),
        AxisStreamBeat(tdata=0x3333),
    ]
    test = _TwoTapTest(cfg=HarnessConfig(field_widths=WIDTHS))
    test.seq = AxisStreamListSequence(beats)
    asyncio.run(test.run())
    first, second = test.tapped()
    # The bus has moved on to 0x3333; published items keep their values
    assert get_int(test.env.dut.tdata.value) == 0x3333
    assert get_int(first.tdata) == 0x1111
    assert get_int(second.tdata) == 0x2222
    assert first.tdata is not second.tdata
    assert first.tdata is not test.env.dut.tdata.value
    with pytest.raises(dataclasses.FrozenInstanceError):
        first.tdata = LogicArray("0" * 16)  # type: ignore[misc]
    # An in-place write by one subscriber is invisible to the other
    other = test.tap2.get_nowait()
    assert other == first
    assert other is not first
    assert other.tdata is not first.tdata
    first.tdata[0] = "0"
    assert get_int(first.tdata) == 0x1110
    assert get_int(other.tdata) == 0x1111


def test_stop_releases_monitor_blocked_on_stalled_subscriber() -> None:
    beats = [_beat(1, 1, i) for i in range(5)] + [AxisStreamBeat()]

    class _StalledTest(AxisStreamTest):
        def connect_phase(self) -> None:
            super().connect_phase()
            self.stalled = self.env.mon.ap.subscribe(
                "stalled", BufferPolicy.bounded(1, "block")
            )

    async def main() -> tuple[_StalledTest, Any]:
        test = _StalledTest(cfg=HarnessConfig(field_widths=WIDTHS))
        test.seq = AxisStreamListSequence(beats)
        run = asyncio.create_task(test.run())
        while not hasattr(test, "env") or test.env.mon.item_count < 2:
            await asyncio.sleep(0)
        test.env.scheduler.stop()
        return test, await asyncio.wait_for(run, 2.0)

    test, summary = asyncio.run(main())
    assert summary.transfers == 2
    assert len(test.stalled) == 1
    assert get_int(test.stalled.get_nowait().tdata) == 0
    # The stalled export is ahead of the collector, so the second item never
    # reached the collector before the port closed
    assert test.env.coll.item_count == 1


def test_absent_fields_are_none() -> None:
    beats = [_beat(1, 1, 0xAB), AxisStreamBeat()]
    test, _ = _run(AxisStreamListSequence(beats), widths={"data": 8, "keep": 0})
    (tr,) = test.tapped()
    assert tr.tkeep is None
    assert tr.tid is None
    assert tr.tuser is None
    assert tr.tstrb is not None
    assert tr.payload_bytes() == b"\xab"


def _expected_packets(
    driven: list[AxisStreamBeat],
) -> tuple[list[tuple[Any, Any, bytes]], dict[Any, int]]:
    open_: dict[Any, list[AxisStreamBeat]] = {}
    packets = []
    for b in driven:
        if not _handshake(b):
            continue
        key = (b.tid, b.tdest)
        open_.setdefault(key, []).append(b)
        if b.tlast:
            data = b"".join(
                bytes(
                    x
                    for lane, x in enumerate(p.tdata.to_bytes(2, "little"))
                    if p.tkeep >> lane & 1
                )
                for p in open_.pop(key)
            )
            packets.append((key[0], key[1], data))
    return packets, {k: len(v) for k, v in open_.items()}


def test_random_traffic_reassembles_packets() -> None:
    test, summary = _run(iteration_count=2_000, seed=17)
    driven = test.env.drv.driven
    assert len(driven) == 2_001
    assert summary.transfers == sum(1 for b in driven if _handshake(b))
    assert summary.transfers > 0
    packets, unterminated = _expected_packets(driven)
    coll = test.env.coll
    assert [(p.tid, p.tdest, p.data) for p in coll.packets] == packets
    assert coll.unterminated == unterminated
    assert coll.item_count == summary.transfers
    assert summary.passed


def test_random_traffic_holds_stalled_beats() -> None:
    seq = AxisStreamSequence(
        num_beats=1_000, widths=AxisStreamWidths.from_mapping(WIDTHS), seed=5
    )
    beats = list(seq.items())
    for prev, nxt in zip(beats[:-2], beats[1:-1]):
        if prev.tvalid == 1 and prev.tready == 0:
            assert nxt.tvalid == 1
            assert nxt.clone(tready=0) == prev
    assert beats[-1].tvalid == 0


def test_blocking_subscriber_sees_every_transfer() -> None:
    test, summary = _run(
        iteration_count=500, seed=3, subscriber_buffer_policy="bounded(1, block)"
    )
    assert summary.dropped == 0
    assert test.env.coll.item_count == summary.transfers


def test_payload_bytes_follow_keep() -> None:
    tr = AxisStreamItem(
        tdata=LogicArray.from_unsigned(0x44332211, 32),
        tkeep=LogicArray.from_unsigned(0b0101, 4),
    )
    assert tr.payload_bytes() == b"\x11\x33"
    assert AxisStreamItem().payload_bytes() == b""
    with pytest.raises(ValueError):
        AxisStreamItem(tdata=LogicArray("X" * 8)).payload_bytes()


def test_widths() -> None:
    assert AxisStreamWidths(data=64).keep == 8
    w = AxisStreamWidths.from_mapping({"tdata": 16, "tuser": 3})
    assert (w.data, w.keep, w.strb, w.user, w.id) == (16, 2, 2, 3, 0)
    assert w.signal_widths()["tid"] == 0
    with pytest.raises(ValueError):
        AxisStreamWidths(data=-1)
    with pytest.raises(ValueError):
        AxisStreamWidths.from_mapping({"tlast": 1})


def test_collector_splits_interleaved_streams() -> None:
    utils_dv.reset_uvm_hierarchy()
    coll = AxisStreamPacketCollector("coll", None)

    def tr(tick: int, tid: int, data: int, last: int) -> AxisStreamItem:
        return AxisStreamItem(
            tick=tick, tdata=LogicArray.from_unsigned(data, 8), tlast=last, tid=tid
        )

    coll.write(tr(1, 0, 0xA0, 0))
    coll.write(tr(2, 1, 0xB0, 0))
    coll.write(tr(3, 0, 0xA1, 1))
    coll.write(tr(4, 1, 0xB1, 0))
    (pkt,) = coll.packets
    assert (pkt.tid, pkt.data, pkt.first_tick, pkt.last_tick) == (0, b"\xa0\xa1", 1, 3)
    assert coll.unterminated == {(1, None): 2}
