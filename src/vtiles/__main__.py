"""CLI entry point: ``vtiles-create`` / ``python -m vtiles``."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from vtiles.config import LOG_LEVEL
from vtiles.core.errors import InvalidArgument, VTilesError
from vtiles.core.types import BatchOptions, TileCoord
from vtiles.core.validation import validate_arguments
from vtiles.pyramid.pipeline import PipelineResult, TilePipeline
from vtiles.render.registry import DatasourceRegistry
from vtiles.render.renderer import VectorTileRenderer

logger = logging.getLogger(__name__)

USAGE = """\
Usage:

vtiles-create
    minimum zoom level
    maximum zoom level
    minimum x (at min. zoom)
    maximum x (at min. zoom)
    minimum y (at min. zoom)
    maximum y (at min. zoom)
    output directory path
    stylesheet path (JSON)
    datasource plugin file paths (comma-separated, may be empty)
    compression (none, zlib, gzip) (default: none)
    compression level (0 no compression to 9 maximum compression) (default: 0)
    compression strategy (FILTERED, HUFFMAN_ONLY, RLE, FIXED, DEFAULT) (default: DEFAULT)"""


def _echo_directory(directory: Path) -> None:
    click.echo(str(directory))


def _echo_tile(path: Path, coord: TileCoord) -> None:
    click.echo(str(path))


def _echo_plugin(plugin_path: str) -> None:
    click.echo(f"Registering {plugin_path}")


def run_batch(options: BatchOptions) -> PipelineResult:
    """Load plugins and stylesheet, then write the whole pyramid.

    Raises:
        RenderError: If a plugin, the stylesheet or a tile fails to render
        TileIOError: If output cannot be written
    """
    registry = DatasourceRegistry()
    renderer = VectorTileRenderer.from_files(
        options.stylesheet_path,
        options.plugin_paths,
        registry=registry,
        on_plugin=_echo_plugin,
    )
    pipeline = TilePipeline(
        renderer,
        options.output_dir,
        compression=options.compression,
        on_directory=_echo_directory,
        on_tile=_echo_tile,
    )
    return pipeline.run(options.tile_range)


def _fail(error: VTilesError) -> None:
    """Print the error (and usage when relevant) and exit non-zero."""
    if isinstance(error, InvalidArgument) and error.show_usage:
        click.echo(USAGE)
    click.echo(click.style(f"Error: {error.message}", fg="red"), err=True)
    sys.exit(1)


@click.command(
    context_settings={"ignore_unknown_options": True},
    add_help_option=False,
)
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
def main(args: tuple[str, ...]) -> None:
    """Generate a vector tile pyramid from a tile range at a minimum zoom.

    All arguments are positional; see the usage text printed when one is
    missing. Each created directory and each written tile path is printed.

    Examples:

        # Whole world, zooms 0 to 3, uncompressed
        vtiles-create 0 3 0 0 0 0 ./tiles/ style.json ""

        # One zoom-5 tile and its descendants to zoom 8, gzip level 6
        vtiles-create 5 8 16 16 10 10 ./tiles/ style.json "" gzip 6 DEFAULT
    """
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(levelname)s: %(name)s: %(message)s",
    )

    try:
        options = validate_arguments(list(args))
        result = run_batch(options)
    except VTilesError as e:
        logger.debug("Batch aborted (%s): %s", e.kind, e.message)
        _fail(e)
        return

    logger.info(
        "Completed: %d tiles, %d bytes", result.tiles_written, result.bytes_written
    )


if __name__ == "__main__":
    main()
