"""Tile pyramid generation: render, compress and write every tile of a range."""

from __future__ import annotations

import logging
import zlib
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Protocol

from vtiles.config import TILE_EXTENSION
from vtiles.core.errors import RenderError, VTilesError
from vtiles.core.types import CompressionConfig, TileCoord, TileRange

from .codec import compress_tile
from .paths import ensure_zoom_x_directory, tile_path, write_tile_file
from .quadtree import expand_ranges

logger = logging.getLogger(__name__)

DirectoryCallback = Callable[[Path], None]
TileCallback = Callable[[Path, TileCoord], None]


class RenderedTile(Protocol):
    """Tile buffer handed from the renderer to the pipeline."""

    @property
    def data(self) -> bytes: ...

    def clear(self) -> None: ...


class TileRenderer(Protocol):
    """Anything that can produce the encoded content of one tile.

    A renderer is not safe to share between concurrent callers.
    """

    def create_tile(self, x: int, y: int, zoom: int) -> RenderedTile: ...


@dataclass
class PipelineResult:
    """Counters of a completed batch."""

    tiles_written: int = 0
    directories_created: int = 0
    bytes_written: int = 0


class TilePipeline:
    """Writes every tile of a range, zoom by zoom, to ``output_dir``.

    Tiles are produced strictly in (zoom, x, y) ascending order. The first
    error of any kind stops the batch and propagates to the caller: there is
    no retry and no skipping, so tiles after the failing one are never
    written.

    Args:
        renderer: Produces the raw bytes of each tile
        output_dir: Root of the ``zoom/x/y.<ext>`` layout
        compression: How tile bytes are compressed before writing
        extension: File extension, fixed regardless of compression
        on_directory: Called with each directory this run created
        on_tile: Called with the path and coordinate of each written tile
    """

    def __init__(
        self,
        renderer: TileRenderer,
        output_dir: Path,
        compression: CompressionConfig | None = None,
        extension: str = TILE_EXTENSION,
        on_directory: DirectoryCallback | None = None,
        on_tile: TileCallback | None = None,
    ) -> None:
        self.renderer = renderer
        self.output_dir = Path(output_dir)
        self.compression = compression or CompressionConfig()
        self.extension = extension
        self.on_directory = on_directory
        self.on_tile = on_tile

    def run(self, tile_range: TileRange) -> PipelineResult:
        """Generate all tiles from ``tile_range.minz`` to ``tile_range.maxz``.

        Raises:
            TileIOError: If a directory or tile file cannot be written
            RenderError: If rendering or compressing a tile fails
        """
        result = PipelineResult()
        for level in expand_ranges(tile_range):
            logger.info(
                "Zoom %d: x %d-%d, y %d-%d (%d tiles)",
                level.zoom, level.minx, level.maxx, level.miny, level.maxy,
                level.tile_count,
            )
            for x in level.xs:
                directory, created = ensure_zoom_x_directory(self.output_dir, level.zoom, x)
                if created:
                    result.directories_created += 1
                    if self.on_directory:
                        self.on_directory(directory)

                for y in level.ys:
                    result.bytes_written += self._process_tile(TileCoord(level.zoom, x, y))
                    result.tiles_written += 1

        logger.info(
            "Wrote %d tiles (%d bytes) in %d new directories",
            result.tiles_written, result.bytes_written, result.directories_created,
        )
        return result

    def _process_tile(self, coord: TileCoord) -> int:
        """Render, compress and write one tile. Returns the bytes written."""
        tile = self._render(coord)
        try:
            data = self._compress(tile.data, coord)
            path = tile_path(self.output_dir, coord.zoom, coord.x, coord.y, self.extension)
            write_tile_file(path, data)
        finally:
            # The renderer's buffer must not outlive this coordinate
            tile.clear()

        logger.debug("Wrote %s (%d bytes)", path, len(data))
        if self.on_tile:
            self.on_tile(path, coord)
        return len(data)

    def _render(self, coord: TileCoord) -> RenderedTile:
        try:
            return self.renderer.create_tile(coord.x, coord.y, coord.zoom)
        except VTilesError:
            raise
        except Exception as e:
            raise RenderError(
                f"Failed to render tile {coord.zoom}/{coord.x}/{coord.y}: {e}"
            ) from e

    def _compress(self, raw: bytes, coord: TileCoord) -> bytes:
        try:
            return compress_tile(raw, self.compression)
        except zlib.error as e:
            raise RenderError(
                f"Failed to compress tile {coord.zoom}/{coord.x}/{coord.y}: {e}"
            ) from e


def generate_pyramid(
    renderer: TileRenderer,
    tile_range: TileRange,
    output_dir: Path,
    compression: CompressionConfig | None = None,
    on_directory: DirectoryCallback | None = None,
    on_tile: TileCallback | None = None,
) -> PipelineResult:
    """Generate a tile pyramid with a :class:`TilePipeline`.

    Args:
        renderer: Produces the raw bytes of each tile
        tile_range: Range at the minimum zoom level
        output_dir: Root of the output layout
        compression: Compression settings (default: none)
        on_directory: Called with each newly created directory
        on_tile: Called with each written tile path and coordinate

    Returns:
        PipelineResult with the batch counters
    """
    pipeline = TilePipeline(
        renderer,
        output_dir,
        compression=compression,
        on_directory=on_directory,
        on_tile=on_tile,
    )
    return pipeline.run(tile_range)
