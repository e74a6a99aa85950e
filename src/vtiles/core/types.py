"""Shared type definitions for the vtiles core module."""

from __future__ import annotations

import zlib
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import NamedTuple


class TileCoord(NamedTuple):
    """Coordinate of a tile in the pyramid.

    Attributes:
        zoom: Zoom level (0 = whole world in one tile)
        x: Column index (0-based, west to east)
        y: Row index (0-based, north to south)
    """

    zoom: int
    x: int
    y: int


@dataclass(frozen=True)
class TileRange:
    """Rectangular tile range, expressed at the minimum zoom level.

    Attributes:
        minz: Minimum (first) zoom level
        maxz: Maximum (last) zoom level
        minx: First column at ``minz``
        maxx: Last column at ``minz``
        miny: First row at ``minz``
        maxy: Last row at ``minz``
    """

    minz: int
    maxz: int
    minx: int
    maxx: int
    miny: int
    maxy: int


@dataclass(frozen=True)
class LevelRange:
    """Tile range covered at a single zoom level."""

    zoom: int
    minx: int
    maxx: int
    miny: int
    maxy: int

    @property
    def xs(self) -> range:
        return range(self.minx, self.maxx + 1)

    @property
    def ys(self) -> range:
        return range(self.miny, self.maxy + 1)

    @property
    def tile_count(self) -> int:
        return (self.maxx - self.minx + 1) * (self.maxy - self.miny + 1)


class Compression(Enum):
    """Container format of written tiles."""

    NONE = "none"
    ZLIB = "zlib"
    GZIP = "gzip"


class CompressionStrategy(Enum):
    """Deflate strategy, mapped to the matching zlib constant."""

    FILTERED = "filtered"
    HUFFMAN_ONLY = "huffman_only"
    RLE = "rle"
    FIXED = "fixed"
    DEFAULT = "default"

    @property
    def zlib_value(self) -> int:
        return _ZLIB_STRATEGIES[self]


_ZLIB_STRATEGIES = {
    CompressionStrategy.FILTERED: zlib.Z_FILTERED,
    CompressionStrategy.HUFFMAN_ONLY: zlib.Z_HUFFMAN_ONLY,
    CompressionStrategy.RLE: zlib.Z_RLE,
    CompressionStrategy.FIXED: zlib.Z_FIXED,
    CompressionStrategy.DEFAULT: zlib.Z_DEFAULT_STRATEGY,
}


@dataclass(frozen=True)
class CompressionConfig:
    """How tile bytes are compressed before being written.

    Attributes:
        algorithm: Container format (none, zlib or gzip)
        level: Deflate level, 0 (store) to 9 (best)
        strategy: Deflate strategy
    """

    algorithm: Compression = Compression.NONE
    level: int = 0
    strategy: CompressionStrategy = CompressionStrategy.DEFAULT


@dataclass(frozen=True)
class BatchOptions:
    """Validated command-line arguments of a batch run."""

    tile_range: TileRange
    output_dir: Path
    stylesheet_path: Path
    plugin_paths: tuple[str, ...] = ()
    compression: CompressionConfig = field(default_factory=CompressionConfig)
