"""Deflate compression of tile bytes in zlib or gzip framing."""

from __future__ import annotations

import zlib

from vtiles.config import ZLIB_MEM_LEVEL
from vtiles.core.types import Compression, CompressionConfig

#: Window bits selecting the container around the deflate stream
_WBITS: dict[Compression, int] = {
    Compression.ZLIB: zlib.MAX_WBITS,
    Compression.GZIP: zlib.MAX_WBITS | 16,
}


def compress_tile(raw: bytes, config: CompressionConfig) -> bytes:
    """Compress tile bytes according to ``config``.

    ``Compression.NONE`` returns the input unchanged. The zlib and gzip
    outputs share the same deflate core and differ only in framing; the
    gzip header carries no timestamp, so output is byte-identical for the
    same input and parameters on a given zlib build.
    """
    if config.algorithm is Compression.NONE:
        return raw

    compressor = zlib.compressobj(
        config.level,
        zlib.DEFLATED,
        _WBITS[config.algorithm],
        ZLIB_MEM_LEVEL,
        config.strategy.zlib_value,
    )
    return compressor.compress(raw) + compressor.flush()


def decompress_tile(data: bytes, algorithm: Compression) -> bytes:
    """Inverse of :func:`compress_tile` for the given container format."""
    if algorithm is Compression.NONE:
        return data
    return zlib.decompress(data, _WBITS[algorithm])
