from __future__ import annotations

import struct
from dataclasses import dataclass

_FIELDS = struct.Struct("<dd")


@dataclass(frozen=True)
class SavedState:
    """
    View state kept across re-creation of the surface.

    Serialized as the host's own state bytes followed by pan offset and scale
    as two little-endian doubles.
    """

    pan_offset_x: float
    scale_x: float
    super_state: bytes = b""

    def to_bytes(self) -> bytes:
        return self.super_state + _FIELDS.pack(self.pan_offset_x, self.scale_x)

    @classmethod
    def from_bytes(cls, blob: bytes) -> "SavedState":
        if len(blob) < _FIELDS.size:
            raise ValueError(f"saved state must hold at least {_FIELDS.size} bytes, got {len(blob)}")
        split = len(blob) - _FIELDS.size
        pan_offset_x, scale_x = _FIELDS.unpack(blob[split:])
        return cls(pan_offset_x=pan_offset_x, scale_x=scale_x, super_state=bytes(blob[:split]))
