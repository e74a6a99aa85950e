"""Centralized configuration for vtiles.

All tunable parameters are defined here with sensible defaults.
Values can be overridden via environment variables.

Environment Variables:
    VTILES_TILE_EXTENSION: File extension of written tiles (default: mvt)
    VTILES_DEFAULT_EXTENT: Vector tile extent when the stylesheet omits it (default: 4096)
    VTILES_DEFAULT_BUFFER: Clip buffer in tile units when the stylesheet omits it (default: 64)
    VTILES_LOG_LEVEL: Logging level for the CLI (default: WARNING)
"""

from __future__ import annotations

import logging
import os

logger = logging.getLogger(__name__)


def _get_env_int(name: str, default: int) -> int:
    """Get an integer from environment variable with fallback."""
    value = os.environ.get(name)
    if value is not None:
        try:
            return int(value)
        except ValueError:
            logger.warning(
                "Invalid integer for %s: %r, using default %d", name, value, default
            )
    return default


def _get_env_str(name: str, default: str) -> str:
    """Get a string from environment variable with fallback."""
    return os.environ.get(name, default)


# =============================================================================
# Output
# =============================================================================

#: Extension of every written tile, independent of compression
TILE_EXTENSION: str = _get_env_str("VTILES_TILE_EXTENSION", "mvt")


# =============================================================================
# Rendering Defaults
# =============================================================================

#: Vector tile coordinate extent
DEFAULT_EXTENT: int = _get_env_int("VTILES_DEFAULT_EXTENT", 4096)

#: Clip buffer around each tile, in tile coordinate units
DEFAULT_BUFFER: int = _get_env_int("VTILES_DEFAULT_BUFFER", 64)

#: Zoom bounds applied to layers that do not declare their own
DEFAULT_LAYER_MINZOOM: int = 0
DEFAULT_LAYER_MAXZOOM: int = 30

#: Latitude limit of the Web Mercator projection
MAX_MERCATOR_LATITUDE: float = 85.0511287798066


# =============================================================================
# Validation Limits
# =============================================================================

#: Largest accepted tile coordinate or zoom token (unsigned 64-bit)
MAX_UINT: int = 2**64 - 1

#: Accepted compression level bounds
MIN_COMPRESSION_LEVEL: int = 0
MAX_COMPRESSION_LEVEL: int = 9

#: zlib memory level used for every deflate stream
ZLIB_MEM_LEVEL: int = 8


# =============================================================================
# Logging
# =============================================================================

LOG_LEVEL: str = _get_env_str("VTILES_LOG_LEVEL", "WARNING").upper()


# =============================================================================
# Validation
# =============================================================================


def _validate_config() -> None:
    """Validate configuration values and log warnings for out-of-range settings."""
    global DEFAULT_EXTENT, DEFAULT_BUFFER, TILE_EXTENSION, LOG_LEVEL

    if DEFAULT_EXTENT < 1:
        logger.warning("DEFAULT_EXTENT=%d is too low, clamping to 1", DEFAULT_EXTENT)
        DEFAULT_EXTENT = 1

    if DEFAULT_BUFFER < 0:
        logger.warning("DEFAULT_BUFFER=%d is negative, clamping to 0", DEFAULT_BUFFER)
        DEFAULT_BUFFER = 0

    TILE_EXTENSION = TILE_EXTENSION.lstrip(".")
    if not TILE_EXTENSION:
        logger.warning("TILE_EXTENSION is empty, using 'mvt'")
        TILE_EXTENSION = "mvt"

    if not isinstance(logging.getLevelName(LOG_LEVEL), int):
        logger.warning("Unknown LOG_LEVEL %r, using WARNING", LOG_LEVEL)
        LOG_LEVEL = "WARNING"


_validate_config()
