# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/tickbench/rad/rad_axis_stream/dv/rad_axis_stream_sequence.py

"""Sequences for axis_stream verification."""

from __future__ import annotations

from typing import Iterable

from tickbench.rad.shared.dv import BaseSequence

from .rad_axis_stream_item import AxisStreamBeat, AxisStreamWidths


class AxisStreamSequence(BaseSequence[AxisStreamBeat]):
    """Protocol-legal random traffic in packets of 1..max_packet_beats beats.

    A beat that is presented (tvalid=1) but not accepted is presented again,
    unchanged, until tready is high. tid/tdest are fixed for a packet and the
    last beat of a packet may carry a partial keep mask. The sequence ends
    with one idle beat, so the held inputs transfer nothing after it.
    """

    item_type = AxisStreamBeat

    def __init__(  # pylint: disable=too-many-arguments
        self,
        name: str = "axis_rand_seq",
        num_beats: int = 1_000,
        widths: AxisStreamWidths | None = None,
        seed: int | None = None,
        valid_pct: int = 70,
        ready_pct: int = 70,
        max_packet_beats: int = 4,
    ) -> None:
        super().__init__(name, num_beats + 1, seed)
        self.widths: AxisStreamWidths = widths or AxisStreamWidths()
        self.valid_pct: int = valid_pct
        self.ready_pct: int = ready_pct
        self.max_packet_beats: int = max(1, max_packet_beats)
        self._held: AxisStreamBeat | None = None
        self._pkt_left: int = 0
        self._tid: int | None = None
        self._tdest: int | None = None

    def body_pre(self) -> None:
        super().body_pre()
        self._held = None
        self._pkt_left = 0

    def _bits(self, width: int | None) -> int | None:
        return self.rng.getrandbits(width) if width else None

    def _new_beat(self, item: AxisStreamBeat) -> AxisStreamBeat:
        w = self.widths
        if self._pkt_left == 0:
            self._pkt_left = self.rng.randint(1, self.max_packet_beats)
            self._tid, self._tdest = self._bits(w.id), self._bits(w.dest)
        self._pkt_left -= 1
        last = self._pkt_left == 0
        keep = None
        if w.keep:
            lanes = self.rng.randint(1, w.keep) if last else w.keep
            keep = (1 << lanes) - 1
        strb = None
        if w.strb:
            strb = keep if w.strb == w.keep else (1 << w.strb) - 1
        return item.clone(
            tvalid=1,
            tdata=self._bits(w.data),
            tkeep=keep,
            tstrb=strb,
            tlast=int(last),
            tid=self._tid,
            tdest=self._tdest,
            tuser=self._bits(w.user),
        )

    def set_item_inputs(self, item: AxisStreamBeat, index: int) -> AxisStreamBeat:
        if index == self.seq_len - 1:
            return item.clone(tvalid=0, tready=0)
        tready = int(self.rng.randrange(100) < self.ready_pct)
        if self._held is not None:
            beat = self._held
        elif self.rng.randrange(100) < self.valid_pct:
            beat = self._new_beat(item)
        else:
            return item.clone(tvalid=0, tready=tready)
        beat = beat.clone(tready=tready)
        self._held = None if tready else beat
        return beat


class AxisStreamListSequence(BaseSequence[AxisStreamBeat]):
    """Replay a fixed list of beats."""

    item_type = AxisStreamBeat

    def __init__(
        self, beats: Iterable[AxisStreamBeat], name: str = "axis_list_seq"
    ) -> None:
        self.beats = list(beats)
        super().__init__(name, len(self.beats))

    def set_item_inputs(self, item: AxisStreamBeat, index: int) -> AxisStreamBeat:
        return self.beats[index].clone()
