"""JSON stylesheets describing the layers of every tile."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from vtiles.config import (
    DEFAULT_BUFFER,
    DEFAULT_EXTENT,
    DEFAULT_LAYER_MAXZOOM,
    DEFAULT_LAYER_MINZOOM,
)
from vtiles.core.errors import RenderError


@dataclass(frozen=True)
class LayerStyle:
    """One vector tile layer.

    Attributes:
        name: Layer name in the encoded tile
        datasource: Datasource parameters, including its ``type``
        minzoom: First zoom level the layer appears at
        maxzoom: Last zoom level the layer appears at
        properties: Attribute names to keep, or None to keep all
    """

    name: str
    datasource: dict[str, Any]
    minzoom: int = DEFAULT_LAYER_MINZOOM
    maxzoom: int = DEFAULT_LAYER_MAXZOOM
    properties: tuple[str, ...] | None = None

    def visible_at(self, zoom: int) -> bool:
        return self.minzoom <= zoom <= self.maxzoom


@dataclass(frozen=True)
class Stylesheet:
    """Parsed stylesheet."""

    path: Path
    layers: tuple[LayerStyle, ...]
    extent: int = DEFAULT_EXTENT
    buffer: int = DEFAULT_BUFFER

    @property
    def base_dir(self) -> Path:
        return self.path.parent


def _require_int(value: Any, field: str, minimum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        raise RenderError(f"stylesheet field {field!r} must be an integer >= {minimum}")
    return value


def _parse_layer(raw: Any, index: int) -> LayerStyle:
    if not isinstance(raw, dict):
        raise RenderError(f"stylesheet layer #{index} must be an object")

    name = raw.get("name")
    if not isinstance(name, str) or not name:
        raise RenderError(f"stylesheet layer #{index} has no name")

    datasource = raw.get("datasource")
    if not isinstance(datasource, dict) or "type" not in datasource:
        raise RenderError(f"stylesheet layer {name!r} needs a datasource with a type")

    minzoom = _require_int(raw.get("minzoom", DEFAULT_LAYER_MINZOOM), f"{name}.minzoom", 0)
    maxzoom = _require_int(raw.get("maxzoom", DEFAULT_LAYER_MAXZOOM), f"{name}.maxzoom", 0)
    if minzoom > maxzoom:
        raise RenderError(
            f"stylesheet layer {name!r}: minzoom ({minzoom}) > maxzoom ({maxzoom})"
        )

    properties = raw.get("properties")
    if properties is not None:
        if not isinstance(properties, list) or not all(isinstance(p, str) for p in properties):
            raise RenderError(f"stylesheet layer {name!r}: properties must be a list of names")
        properties = tuple(properties)

    return LayerStyle(
        name=name,
        datasource=dict(datasource),
        minzoom=minzoom,
        maxzoom=maxzoom,
        properties=properties,
    )


def load_stylesheet(path: str | Path) -> Stylesheet:
    """Load and check a stylesheet file.

    Raises:
        RenderError: If the file cannot be read or is not a valid stylesheet
    """
    path = Path(path)
    try:
        with open(path) as f:
            document = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise RenderError(f"Cannot read stylesheet '{path}': {e}") from e

    if not isinstance(document, dict):
        raise RenderError(f"stylesheet '{path}' must be a JSON object")

    raw_layers = document.get("layers")
    if not isinstance(raw_layers, list):
        raise RenderError(f"stylesheet '{path}' has no layers list")

    layers = tuple(_parse_layer(raw, i) for i, raw in enumerate(raw_layers))
    names = [layer.name for layer in layers]
    if len(set(names)) != len(names):
        raise RenderError(f"stylesheet '{path}' has duplicate layer names")

    return Stylesheet(
        path=path,
        layers=layers,
        extent=_require_int(document.get("extent", DEFAULT_EXTENT), "extent", 1),
        buffer=_require_int(document.get("buffer", DEFAULT_BUFFER), "buffer", 0),
    )
