"""Validation of the positional command-line arguments.

Arguments are checked strictly in command-line order and the first failure
raises ``InvalidArgument``; a later check is never reached once an earlier
one fails. Nothing here touches the filesystem except the stylesheet
existence check.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from vtiles.config import MAX_COMPRESSION_LEVEL, MAX_UINT, MIN_COMPRESSION_LEVEL

from .errors import InvalidArgument
from .types import (
    BatchOptions,
    Compression,
    CompressionConfig,
    CompressionStrategy,
    TileRange,
)

logger = logging.getLogger(__name__)

#: Names of the six range arguments, in command-line order
RANGE_ARGUMENTS: tuple[str, ...] = (
    "minimum zoom",
    "maximum zoom",
    "minimum x",
    "maximum x",
    "minimum y",
    "maximum y",
)

#: Tokens accepted for the compression strategy argument
STRATEGY_TOKENS: dict[str, CompressionStrategy] = {
    strategy.name: strategy for strategy in CompressionStrategy
}


#: Longest decimal token that can still fit in an unsigned 64-bit integer
MAX_UINT_DIGITS = len(str(MAX_UINT))


def _token_at(args: Sequence[str], index: int) -> str | None:
    if index < len(args):
        return args[index]
    return None


def _is_decimal(text: str) -> bool:
    return text.isascii() and text.isdigit()


def parse_uint(token: str | None, name: str) -> int:
    """Parse a non-negative integer token.

    Args:
        token: Raw argument, or None if the argument was not given
        name: Human-readable argument name for error messages

    Returns:
        The parsed integer

    Raises:
        InvalidArgument: If the token is absent, not a plain decimal
            number, or larger than an unsigned 64-bit integer
    """
    if token is None:
        raise InvalidArgument(f"missing {name} parameter", show_usage=True)
    text = token.strip()
    if not _is_decimal(text):
        raise InvalidArgument(f"{name} must be a non-negative integer, got {token!r}")
    # Length first: int() refuses very long digit strings
    digits = text.lstrip("0") or "0"
    if len(digits) > MAX_UINT_DIGITS or int(digits) > MAX_UINT:
        shown = digits if len(digits) <= MAX_UINT_DIGITS else f"{digits[:MAX_UINT_DIGITS]}..."
        raise InvalidArgument(f"{name} ({shown}) is out of range (maximum {MAX_UINT})")
    return int(digits)


def validate_tile_range(args: Sequence[str]) -> TileRange:
    """Validate the six range arguments (zoom, x and y bounds at min. zoom).

    Raises:
        InvalidArgument: If an argument is missing or unparsable, or a
            lower bound is greater than its upper bound
    """
    # Presence is checked for all six before any is parsed
    for index, name in enumerate(RANGE_ARGUMENTS):
        if _token_at(args, index) is None:
            raise InvalidArgument(f"missing {name} parameter", show_usage=True)

    minz, maxz, minx, maxx, miny, maxy = (
        parse_uint(args[index], name) for index, name in enumerate(RANGE_ARGUMENTS)
    )

    for low_name, low, high_name, high in (
        ("minz", minz, "maxz", maxz),
        ("minx", minx, "maxx", maxx),
        ("miny", miny, "maxy", maxy),
    ):
        if low > high:
            raise InvalidArgument(
                f"{low_name} ({low}) must be lower or equals to {high_name} ({high})"
            )

    return TileRange(minz=minz, maxz=maxz, minx=minx, maxx=maxx, miny=miny, maxy=maxy)


def validate_output_directory(token: str | None) -> Path:
    """Validate the output directory argument.

    Only presence is checked; the directory is created on demand.
    """
    if not token:
        raise InvalidArgument("missing output directory path parameter", show_usage=True)
    return Path(token)


def validate_stylesheet(token: str | None) -> Path:
    """Validate the stylesheet argument; the file must exist."""
    if not token:
        raise InvalidArgument("missing stylesheet parameter", show_usage=True)
    path = Path(token)
    if not path.is_file():
        raise InvalidArgument(f"stylesheet file {token} not found")
    return path


def validate_plugins(token: str | None) -> tuple[str, ...]:
    """Split the comma-separated plugin list, dropping empty segments."""
    if token is None:
        raise InvalidArgument("missing plugins parameter", show_usage=True)
    return tuple(part for part in token.split(",") if part)


def validate_compression(token: str | None) -> Compression:
    """Validate the compression algorithm (default: none)."""
    if token is None:
        return Compression.NONE
    for algorithm in Compression:
        if token == algorithm.value:
            return algorithm
    raise InvalidArgument(
        "compression must be one of the following strings: none, zlib, gzip"
    )


def validate_compression_level(token: str | None) -> int:
    """Validate the compression level (default: 0)."""
    if token is None:
        return MIN_COMPRESSION_LEVEL
    if not _is_decimal(token):
        raise InvalidArgument(f"compression level must be an integer, got {token!r}")
    digits = token.lstrip("0") or "0"
    # A long digit string is out of range whatever its value
    level = int(digits) if len(digits) <= MAX_UINT_DIGITS else MAX_UINT
    if not MIN_COMPRESSION_LEVEL <= level <= MAX_COMPRESSION_LEVEL:
        raise InvalidArgument(
            f"compression level must be between {MIN_COMPRESSION_LEVEL} "
            f"and {MAX_COMPRESSION_LEVEL}"
        )
    return level


def validate_compression_strategy(token: str | None) -> CompressionStrategy:
    """Validate the compression strategy (default: DEFAULT)."""
    if token is None:
        return CompressionStrategy.DEFAULT
    strategy = STRATEGY_TOKENS.get(token)
    if strategy is None:
        raise InvalidArgument(
            "compression strategy must be one of the following strings: "
            + ", ".join(STRATEGY_TOKENS)
        )
    return strategy


def validate_arguments(args: Sequence[str]) -> BatchOptions:
    """Validate all positional arguments in command-line order.

    Args:
        args: Positional arguments, without the program name

    Returns:
        BatchOptions for the run

    Raises:
        InvalidArgument: On the first rejected argument
    """
    tile_range = validate_tile_range(args)
    output_dir = validate_output_directory(_token_at(args, 6))
    stylesheet_path = validate_stylesheet(_token_at(args, 7))
    plugin_paths = validate_plugins(_token_at(args, 8))
    compression = CompressionConfig(
        algorithm=validate_compression(_token_at(args, 9)),
        level=validate_compression_level(_token_at(args, 10)),
        strategy=validate_compression_strategy(_token_at(args, 11)),
    )
    if len(args) > 12:
        raise InvalidArgument(
            f"unexpected extra arguments: {' '.join(args[12:])}", show_usage=True
        )

    logger.debug("Validated arguments: %s, %s", tile_range, compression)
    return BatchOptions(
        tile_range=tile_range,
        output_dir=output_dir,
        stylesheet_path=stylesheet_path,
        plugin_paths=plugin_paths,
        compression=compression,
    )
