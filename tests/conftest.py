"""Test fixtures for vtiles tests."""

from __future__ import annotations

import json
import tempfile
from pathlib import Path
from typing import Generator

import pytest

from vtiles.core.errors import RenderError


class FakeTile:
    """Tile buffer that records whether it was cleared."""

    def __init__(self, data: bytes) -> None:
        self._data = data
        self.cleared = False

    @property
    def data(self) -> bytes:
        return self._data

    def clear(self) -> None:
        self._data = b""
        self.cleared = True


class FakeRenderer:
    """Renderer returning ``z/x/y`` as tile bytes.

    Args:
        fail_at: (zoom, x, y) on which to raise instead of rendering
        error: Exception to raise at ``fail_at``
    """

    def __init__(
        self,
        fail_at: tuple[int, int, int] | None = None,
        error: Exception | None = None,
    ) -> None:
        self.fail_at = fail_at
        self.error = error or RenderError("boom")
        self.calls: list[tuple[int, int, int]] = []
        self.tiles: list[FakeTile] = []

    def create_tile(self, x: int, y: int, zoom: int) -> FakeTile:
        self.calls.append((zoom, x, y))
        if (zoom, x, y) == self.fail_at:
            raise self.error
        tile = FakeTile(f"{zoom}/{x}/{y}".encode())
        self.tiles.append(tile)
        return tile


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory that's cleaned up after tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def fake_renderer() -> FakeRenderer:
    return FakeRenderer()


@pytest.fixture
def sample_geojson(temp_dir: Path) -> Path:
    """GeoJSON with a point and a line in the north-east quadrant."""
    collection = {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "id": 1,
                "geometry": {"type": "Point", "coordinates": [10.0, 10.0]},
                "properties": {"name": "alpha", "rank": 3, "note": None},
            },
            {
                "type": "Feature",
                "id": 2,
                "geometry": {
                    "type": "LineString",
                    "coordinates": [[20.0, 20.0], [40.0, 30.0]],
                },
                "properties": {"name": "beta", "rank": 1},
            },
        ],
    }
    path = temp_dir / "data" / "places.geojson"
    path.parent.mkdir()
    path.write_text(json.dumps(collection))
    return path


@pytest.fixture
def sample_stylesheet(temp_dir: Path, sample_geojson: Path) -> Path:
    """Stylesheet with one layer reading ``data/places.geojson``."""
    stylesheet = {
        "extent": 4096,
        "buffer": 64,
        "layers": [
            {
                "name": "places",
                "minzoom": 0,
                "maxzoom": 10,
                "properties": ["name"],
                "datasource": {"type": "geojson", "file": "data/places.geojson"},
            }
        ],
    }
    path = temp_dir / "style.json"
    path.write_text(json.dumps(stylesheet))
    return path
