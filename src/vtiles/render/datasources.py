"""Datasource base class and the built-in GeoJSON datasource.

Datasources yield features in WGS84 longitude/latitude. Plugins add new
datasource types by subclassing :class:`Datasource` and setting ``name``.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Iterable, NamedTuple

from shapely import STRtree, box
from shapely.geometry import shape
from shapely.geometry.base import BaseGeometry

from vtiles.core.errors import RenderError

logger = logging.getLogger(__name__)

BBox = tuple[float, float, float, float]


class Feature(NamedTuple):
    """A geometry with its attributes.

    Attributes:
        geometry: Shapely geometry in longitude/latitude degrees
        properties: Attribute values
        id: Optional integer feature id
    """

    geometry: BaseGeometry
    properties: dict[str, Any]
    id: int | None = None


class Datasource(ABC):
    """Abstract base class for feature sources referenced by stylesheets.

    Args:
        params: The layer's ``datasource`` object from the stylesheet
        base_dir: Directory of the stylesheet, for resolving relative paths
    """

    #: Type name used in stylesheets (``"datasource": {"type": name}``)
    name: str = ""

    def __init__(self, params: dict[str, Any], base_dir: Path) -> None:
        self.params = params
        self.base_dir = Path(base_dir)

    @abstractmethod
    def features(self, bbox: BBox) -> Iterable[Feature]:
        """Yield features intersecting ``bbox`` (west, south, east, north)."""
        ...

    def resolve_path(self, value: str) -> Path:
        """Resolve a path parameter against the stylesheet directory."""
        path = Path(value)
        if not path.is_absolute():
            path = self.base_dir / path
        return path

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}: {self.name}>"


class GeoJSONDatasource(Datasource):
    """Features from a GeoJSON FeatureCollection file.

    Parameters:
        file: Path to the GeoJSON file (relative to the stylesheet)
    """

    name = "geojson"

    def __init__(self, params: dict[str, Any], base_dir: Path) -> None:
        super().__init__(params, base_dir)
        if "file" not in params:
            raise RenderError("geojson datasource requires a 'file' parameter")
        self.path = self.resolve_path(params["file"])
        self._features = self._load(self.path)
        self._index = STRtree([f.geometry for f in self._features])
        logger.debug("Loaded %d features from %s", len(self._features), self.path)

    @staticmethod
    def _load(path: Path) -> list[Feature]:
        try:
            with open(path) as f:
                document = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise RenderError(f"Cannot read geojson file '{path}': {e}") from e

        if document.get("type") == "Feature":
            raw_features = [document]
        else:
            raw_features = document.get("features")
        if not isinstance(raw_features, list):
            raise RenderError(f"geojson file '{path}' has no features list")

        features = []
        for raw in raw_features:
            geometry = raw.get("geometry")
            if not geometry:
                continue
            try:
                geom = shape(geometry)
            except (ValueError, TypeError, AttributeError) as e:
                raise RenderError(f"Invalid geometry in '{path}': {e}") from e
            if geom.is_empty:
                continue
            feature_id = raw.get("id")
            features.append(Feature(
                geometry=geom,
                properties=dict(raw.get("properties") or {}),
                id=feature_id if isinstance(feature_id, int) else None,
            ))
        return features

    def features(self, bbox: BBox) -> Iterable[Feature]:
        for index in sorted(self._index.query(box(*bbox))):
            yield self._features[index]
