# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/tickbench/rad/rad_axis_stream/dv/rad_axis_stream_packet_collector.py

"""Analysis subscriber that reassembles packets from transfers."""

from __future__ import annotations

from tickbench.rad.shared.dv import BaseComponent, BaseSubscriber, utils_dv

from .rad_axis_stream_item import AxisStreamItem, AxisStreamPacket

StreamKey = tuple[int | None, int | None]


class AxisStreamPacketCollector(BaseSubscriber[AxisStreamItem]):
    """Groups transfers by (tid, tdest) and closes a packet at tlast.

    Interleaved streams are reassembled independently. Beats still open at
    the end of the run are reported as unterminated.

    Attributes:
        packets: Completed packets in completion order
    """

    def __init__(self, name: str, parent: BaseComponent | None) -> None:
        super().__init__(name, parent)
        self.packets: list[AxisStreamPacket] = []
        self._open: dict[StreamKey, list[AxisStreamItem]] = {}

    @property
    def unterminated(self) -> dict[StreamKey, int]:
        """Beats collected per stream with no tlast yet."""
        return {k: len(v) for k, v in self._open.items()}

    def write(self, item: AxisStreamItem) -> None:
        key = (
            utils_dv.get_signal_value_int(item.tid),
            utils_dv.get_signal_value_int(item.tdest),
        )
        beats = self._open.setdefault(key, [])
        beats.append(item)
        if item.last:
            del self._open[key]
            pkt = AxisStreamPacket(key[0], key[1], tuple(beats))
            self.packets.append(pkt)
            self.logger.debug(
                "packet tid=%s tdest=%s beats=%d", key[0], key[1], len(pkt)
            )

    def report_phase(self) -> None:
        self.logger.info("%d packet(s) collected", len(self.packets))
        for key, n in self.unterminated.items():
            self.logger.warning("unterminated packet %s: %d beat(s)", key, n)
