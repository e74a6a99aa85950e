"""Vector tile rendering: stylesheets, datasource plugins and the MVT renderer."""

from .datasources import Datasource, Feature, GeoJSONDatasource
from .registry import DatasourceRegistry
from .renderer import VectorTileRenderer
from .stylesheet import LayerStyle, Stylesheet, load_stylesheet
from .tile import VectorTile

__all__ = [
    "Datasource",
    "DatasourceRegistry",
    "Feature",
    "GeoJSONDatasource",
    "LayerStyle",
    "Stylesheet",
    "VectorTile",
    "VectorTileRenderer",
    "load_stylesheet",
]
