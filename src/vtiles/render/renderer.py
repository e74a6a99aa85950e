"""Mapbox Vector Tile renderer.

Clips stylesheet layers to the Web Mercator bounds of a tile and encodes
them with mapbox-vector-tile.
"""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Any, Callable, Iterable

import mapbox_vector_tile
import mercantile
import numpy as np
import shapely
from shapely import box

from vtiles.config import MAX_MERCATOR_LATITUDE
from vtiles.core.errors import RenderError, VTilesError

from .datasources import Datasource, Feature
from .registry import DatasourceRegistry
from .stylesheet import LayerStyle, Stylesheet, load_stylesheet
from .tile import VectorTile

logger = logging.getLogger(__name__)

#: Earth radius of the spherical Mercator projection (EPSG:3857)
EARTH_RADIUS: float = 6378137.0


def project_to_mercator(coords: np.ndarray) -> np.ndarray:
    """Project (N, 2) longitude/latitude degrees to EPSG:3857 meters.

    Latitudes are clamped to the Mercator limit.
    """
    lng = coords[:, 0]
    lat = np.clip(coords[:, 1], -MAX_MERCATOR_LATITUDE, MAX_MERCATOR_LATITUDE)
    x = EARTH_RADIUS * np.radians(lng)
    y = EARTH_RADIUS * np.log(np.tan(math.pi / 4.0 + np.radians(lat) / 2.0))
    return np.column_stack((x, y))


def _tile_value(value: Any) -> Any:
    """Coerce an attribute to a type MVT can store."""
    if isinstance(value, (bool, int, float, str)):
        return value
    return str(value)


class VectorTileRenderer:
    """Renders tiles from a stylesheet.

    Each layer's datasource is opened once, when the renderer is built.
    A renderer is not safe to share between threads; parallel workers each
    need their own instance.

    Args:
        stylesheet: Parsed stylesheet
        registry: Registry used to create the layers' datasources
    """

    def __init__(self, stylesheet: Stylesheet, registry: DatasourceRegistry) -> None:
        self.stylesheet = stylesheet
        self._layers: list[tuple[LayerStyle, Datasource]] = [
            (style, registry.create(style.datasource, stylesheet.base_dir))
            for style in stylesheet.layers
        ]

    @classmethod
    def from_files(
        cls,
        stylesheet_path: str | Path,
        plugin_paths: Iterable[str | Path] = (),
        registry: DatasourceRegistry | None = None,
        on_plugin: Callable[[str], None] | None = None,
    ) -> VectorTileRenderer:
        """Load plugins into a registry, then build a renderer from a stylesheet file.

        Args:
            stylesheet_path: Path to the JSON stylesheet
            plugin_paths: Datasource plugin files to load first
            registry: Registry to load plugins into (default: a new one)
            on_plugin: Called with each plugin path before it is loaded

        Raises:
            RenderError: If a plugin, the stylesheet or a datasource fails
        """
        registry = registry if registry is not None else DatasourceRegistry()
        for plugin_path in plugin_paths:
            if on_plugin:
                on_plugin(str(plugin_path))
            registry.load_plugin(plugin_path)
        return cls(load_stylesheet(stylesheet_path), registry)

    @property
    def layer_names(self) -> list[str]:
        return [style.name for style, _ in self._layers]

    def create_tile(self, x: int, y: int, zoom: int) -> VectorTile:
        """Render tile (x, y) at ``zoom``.

        Returns:
            A new VectorTile owned by the caller; empty if no layer has
            features in the tile

        Raises:
            RenderError: If a datasource or the encoder fails
        """
        try:
            return VectorTile(x, y, zoom, self._encode(x, y, zoom))
        except VTilesError:
            raise
        except Exception as e:
            raise RenderError(f"Failed to render tile {zoom}/{x}/{y}: {e}") from e

    def _encode(self, x: int, y: int, zoom: int) -> bytes:
        bounds = mercantile.xy_bounds(x, y, zoom)
        margin = (bounds.right - bounds.left) * self.stylesheet.buffer / self.stylesheet.extent
        clip = (
            bounds.left - margin,
            bounds.bottom - margin,
            bounds.right + margin,
            bounds.top + margin,
        )
        west, south = mercantile.lnglat(clip[0], clip[1])
        east, north = mercantile.lnglat(clip[2], clip[3])
        clip_box = box(*clip)

        layers = []
        for style, datasource in self._layers:
            if not style.visible_at(zoom):
                continue
            features = []
            for feature in datasource.features((west, south, east, north)):
                features.extend(self._clip_feature(feature, style, clip_box))
            if features:
                layers.append({"name": style.name, "features": features})

        if not layers:
            logger.debug("Tile %d/%d/%d is empty", zoom, x, y)
            return b""

        return mapbox_vector_tile.encode(
            layers,
            default_options={
                "quantize_bounds": (bounds.left, bounds.bottom, bounds.right, bounds.top),
                "extents": self.stylesheet.extent,
            },
        )

    @staticmethod
    def _clip_feature(
        feature: Feature, style: LayerStyle, clip_box: shapely.Polygon
    ) -> list[dict[str, Any]]:
        """Project and clip one feature; a mixed clip result is split into parts."""
        projected = shapely.transform(feature.geometry, project_to_mercator)
        clipped = projected.intersection(clip_box)
        if clipped.is_empty:
            return []

        if clipped.geom_type == "GeometryCollection":
            parts = [part for part in clipped.geoms if not part.is_empty]
        else:
            parts = [clipped]

        properties = {
            key: _tile_value(value)
            for key, value in feature.properties.items()
            if value is not None and (style.properties is None or key in style.properties)
        }
        encoded = []
        for part in parts:
            entry: dict[str, Any] = {"geometry": part, "properties": properties}
            if feature.id is not None:
                entry["id"] = feature.id
            encoded.append(entry)
        return encoded
