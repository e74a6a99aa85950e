"""Owned byte buffer of one rendered tile."""

from __future__ import annotations

from vtiles.core.types import TileCoord


class VectorTile:
    """Encoded MVT content of a single tile.

    The renderer returns a fresh instance per call and hands ownership to
    the caller, which clears it once the bytes have been written.
    """

    def __init__(self, x: int, y: int, zoom: int, data: bytes = b"") -> None:
        self.coord = TileCoord(zoom, x, y)
        self._buffer = bytearray(data)

    @property
    def data(self) -> bytes:
        return bytes(self._buffer)

    @property
    def size(self) -> int:
        return len(self._buffer)

    @property
    def is_empty(self) -> bool:
        return not self._buffer

    def clear(self) -> None:
        """Drop the tile content."""
        self._buffer.clear()

    def __repr__(self) -> str:
        z, x, y = self.coord
        return f"<VectorTile {z}/{x}/{y}: {self.size} bytes>"
