"""Core types, errors and argument validation for vtiles."""

from .errors import InvalidArgument, RenderError, TileIOError, VTilesError
from .types import (
    BatchOptions,
    Compression,
    CompressionConfig,
    CompressionStrategy,
    LevelRange,
    TileCoord,
    TileRange,
)

__all__ = [
    "BatchOptions",
    "Compression",
    "CompressionConfig",
    "CompressionStrategy",
    "InvalidArgument",
    "LevelRange",
    "RenderError",
    "TileCoord",
    "TileIOError",
    "TileRange",
    "VTilesError",
]
