"""Quadtree expansion of a tile range across zoom levels."""

from __future__ import annotations

from typing import Iterator

from vtiles.core.types import LevelRange, TileRange


def child_range(level: LevelRange) -> LevelRange:
    """Return the range covering every child of ``level`` at the next zoom.

    Each tile (x, y) at zoom z has the four children (2x, 2y), (2x+1, 2y),
    (2x, 2y+1) and (2x+1, 2y+1) at zoom z+1.
    """
    return LevelRange(
        zoom=level.zoom + 1,
        minx=2 * level.minx,
        maxx=2 * level.maxx + 1,
        miny=2 * level.miny,
        maxy=2 * level.maxy + 1,
    )


def expand_ranges(tile_range: TileRange) -> Iterator[LevelRange]:
    """Yield the covered range of every zoom level from minz to maxz.

    The first element is the input range as given; each following element
    is derived from the previous one with :func:`child_range`. The sequence
    is lazy and yields ``maxz - minz + 1`` items.
    """
    level = LevelRange(
        zoom=tile_range.minz,
        minx=tile_range.minx,
        maxx=tile_range.maxx,
        miny=tile_range.miny,
        maxy=tile_range.maxy,
    )
    yield level
    for _ in range(tile_range.minz, tile_range.maxz):
        level = child_range(level)
        yield level


def total_tiles(tile_range: TileRange) -> int:
    """Number of tiles a full traversal of ``tile_range`` produces."""
    return sum(level.tile_count for level in expand_ranges(tile_range))
