"""Tests for quadtree range expansion."""

from __future__ import annotations

import pytest

from vtiles.core.types import LevelRange, TileRange
from vtiles.pyramid.quadtree import child_range, expand_ranges, total_tiles


class TestChildRange:
    """Tests for a single doubling step."""

    def test_doubling_rule(self):
        child = child_range(LevelRange(zoom=3, minx=2, maxx=5, miny=1, maxy=4))
        assert child == LevelRange(zoom=4, minx=4, maxx=11, miny=2, maxy=9)

    @pytest.mark.parametrize(
        "level",
        [
            LevelRange(0, 0, 0, 0, 0),
            LevelRange(5, 3, 3, 7, 7),
            LevelRange(7, 10, 20, 4, 9),
        ],
    )
    def test_four_children_per_tile(self, level: LevelRange):
        assert child_range(level).tile_count == 4 * level.tile_count

    def test_children_cover_exactly_descendants(self):
        level = LevelRange(2, 1, 2, 0, 1)
        child = child_range(level)
        expected = {
            (cx, cy)
            for x in level.xs
            for y in level.ys
            for cx in (2 * x, 2 * x + 1)
            for cy in (2 * y, 2 * y + 1)
        }
        assert {(x, y) for x in child.xs for y in child.ys} == expected


class TestExpandRanges:
    """Tests for the per-zoom sequence."""

    def test_single_level(self):
        levels = list(expand_ranges(TileRange(4, 4, 3, 5, 6, 7)))
        assert levels == [LevelRange(zoom=4, minx=3, maxx=5, miny=6, maxy=7)]

    def test_length_and_zooms(self):
        levels = list(expand_ranges(TileRange(2, 6, 0, 1, 0, 1)))
        assert [level.zoom for level in levels] == [2, 3, 4, 5, 6]

    def test_world_pyramid(self):
        levels = list(expand_ranges(TileRange(0, 2, 0, 0, 0, 0)))
        assert levels == [
            LevelRange(0, 0, 0, 0, 0),
            LevelRange(1, 0, 1, 0, 1),
            LevelRange(2, 0, 3, 0, 3),
        ]

    def test_input_not_mutated(self):
        tile_range = TileRange(1, 3, 1, 1, 0, 1)
        list(expand_ranges(tile_range))
        assert tile_range == TileRange(1, 3, 1, 1, 0, 1)

    def test_reproducible(self):
        tile_range = TileRange(3, 6, 2, 4, 1, 5)
        assert list(expand_ranges(tile_range)) == list(expand_ranges(tile_range))

    def test_lazy(self):
        levels = expand_ranges(TileRange(0, 60, 0, 0, 0, 0))
        assert next(levels).zoom == 0
        assert next(levels).zoom == 1


class TestTotalTiles:
    """Tests for the traversal tile count."""

    @pytest.mark.parametrize(
        "tile_range, expected",
        [
            (TileRange(0, 0, 0, 0, 0, 0), 1),
            (TileRange(0, 1, 0, 0, 0, 0), 5),
            (TileRange(0, 3, 0, 0, 0, 0), 1 + 4 + 16 + 64),
            (TileRange(5, 6, 0, 1, 0, 2), 6 + 24),
        ],
    )
    def test_count(self, tile_range: TileRange, expected: int):
        assert total_tiles(tile_range) == expected
