"""Example datasource plugin: points from a CSV file with lon/lat columns.

Usage:
    vtiles-create 0 4 0 0 0 0 ./tiles/ examples/style.json examples/csv_points.py
"""

from __future__ import annotations

import csv
from typing import Iterable

from shapely.geometry import Point

from vtiles.core.errors import RenderError
from vtiles.render.datasources import BBox, Datasource, Feature


class CSVPointsDatasource(Datasource):
    """Parameters: ``file`` (CSV path), ``lon``/``lat`` column names."""

    name = "csv_points"

    def __init__(self, params, base_dir) -> None:
        super().__init__(params, base_dir)
        path = self.resolve_path(params["file"])
        lon_field = params.get("lon", "lon")
        lat_field = params.get("lat", "lat")
        self._features: list[Feature] = []
        try:
            with open(path, newline="") as f:
                for index, row in enumerate(csv.DictReader(f)):
                    point = Point(float(row.pop(lon_field)), float(row.pop(lat_field)))
                    properties = {k: _number_or_text(v) for k, v in row.items()}
                    self._features.append(Feature(point, properties, index))
        except (OSError, KeyError, ValueError) as e:
            raise RenderError(f"Cannot read CSV points from '{path}': {e}") from e

    def features(self, bbox: BBox) -> Iterable[Feature]:
        west, south, east, north = bbox
        for feature in self._features:
            if west <= feature.geometry.x <= east and south <= feature.geometry.y <= north:
                yield feature


def _number_or_text(value: str):
    try:
        return int(value)
    except ValueError:
        return value
