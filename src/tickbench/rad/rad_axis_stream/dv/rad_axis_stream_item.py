# SPDX-FileCopyrightText: 2025 Hugh Walsh
#
# SPDX-License-Identifier: MIT

# This file: src/tickbench/rad/rad_axis_stream/dv/rad_axis_stream_item.py

"""Field widths, beats, transfer items and packets for axis_stream."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from tickbench.rad.shared.dv import BaseItem, utils_dv

PAYLOAD_FIELDS = ("tdata", "tkeep", "tstrb", "tlast", "tid", "tdest", "tuser")


@dataclass(frozen=True)
class AxisStreamWidths:
    """Bit width of every bus field; 0 means the field is absent.

    keep and strb default to one bit per data byte.
    """

    data: int = 32
    keep: int | None = None
    strb: int | None = None
    id: int = 0  # pylint: disable=invalid-name
    dest: int = 0
    user: int = 0

    def __post_init__(self) -> None:
        if self.keep is None:
            object.__setattr__(self, "keep", self.data // 8)
        if self.strb is None:
            object.__setattr__(self, "strb", self.data // 8)
        for name in ("data", "keep", "strb", "id", "dest", "user"):
            width = getattr(self, name)
            if width < 0:
                raise ValueError(f"field width '{name}' must be >= 0, got {width}")

    @classmethod
    def from_mapping(cls, widths: Mapping[str, int]) -> AxisStreamWidths:
        """Accept field names with or without the t prefix (tdata or data)."""
        kwargs: dict[str, Any] = {}
        for key, width in widths.items():
            name = key[1:] if key.startswith("t") and key != "tlast" else key
            if name not in ("data", "keep", "strb", "id", "dest", "user"):
                raise ValueError(f"unknown axis_stream field {key!r}")
            kwargs[name] = int(width)
        return cls(**kwargs)

    def signal_widths(self) -> dict[str, int]:
        return {
            "tvalid": 1,
            "tready": 1,
            "tdata": self.data,
            "tkeep": self.keep or 0,
            "tstrb": self.strb or 0,
            "tlast": 1,
            "tid": self.id,
            "tdest": self.dest,
            "tuser": self.user,
        }


@dataclass(frozen=True)
class AxisStreamBeat(BaseItem):
    """What the bus presents for one tick: handshake plus payload."""

    tvalid: Any = 0
    tready: Any = 0
    tdata: Any = None
    tkeep: Any = None
    tstrb: Any = None
    tlast: Any = None
    tid: Any = None
    tdest: Any = None
    tuser: Any = None

    def _in_fields(self) -> tuple[str, ...]:
        return ("tvalid", "tready") + PAYLOAD_FIELDS


@dataclass(frozen=True)
class AxisStreamItem(BaseItem):
    """One accepted transfer. Absent (width 0) fields are None."""

    tdata: Any = None
    tkeep: Any = None
    tstrb: Any = None
    tlast: Any = None
    tid: Any = None
    tdest: Any = None
    tuser: Any = None

    def _out_fields(self) -> tuple[str, ...]:
        return PAYLOAD_FIELDS

    def payload_bytes(self) -> bytes:
        """Bytes whose keep bit is set, lane 0 (bits 7:0) first."""
        if self.tdata is None:
            return b""
        data = utils_dv.get_signal_value_int(self.tdata)
        lanes = (len(self.tdata) + 7) // 8
        keep = (
            (1 << lanes) - 1
            if self.tkeep is None
            else utils_dv.get_signal_value_int(self.tkeep)
        )
        if data is None or keep is None:
            raise ValueError(f"unresolvable payload at tick {self.tick}: {self}")
        raw = data.to_bytes(lanes, "little")
        return bytes(b for lane, b in enumerate(raw) if keep >> lane & 1)

    @property
    def last(self) -> bool:
        return utils_dv.is_asserted(self.tlast)


@dataclass(frozen=True)
class AxisStreamPacket:
    """Transfers of one stream from the first beat up to tlast."""

    tid: int | None
    tdest: int | None
    beats: tuple[AxisStreamItem, ...]

    def __len__(self) -> int:
        return len(self.beats)

    @property
    def data(self) -> bytes:
        return b"".join(b.payload_bytes() for b in self.beats)

    @property
    def first_tick(self) -> int:
        return self.beats[0].tick

    @property
    def last_tick(self) -> int:
        return self.beats[-1].tick
