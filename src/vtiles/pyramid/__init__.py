"""Tile pyramid traversal and the per-tile compress/write pipeline."""

from .codec import compress_tile, decompress_tile
from .paths import ensure_zoom_x_directory, tile_path, write_tile_file
from .pipeline import PipelineResult, TilePipeline, generate_pyramid
from .quadtree import child_range, expand_ranges, total_tiles

__all__ = [
    "PipelineResult",
    "TilePipeline",
    "child_range",
    "compress_tile",
    "decompress_tile",
    "ensure_zoom_x_directory",
    "expand_ranges",
    "generate_pyramid",
    "tile_path",
    "total_tiles",
    "write_tile_file",
]
