"""vtiles - batch generation of Mapbox Vector Tile pyramids."""

__version__ = "0.1.0"
