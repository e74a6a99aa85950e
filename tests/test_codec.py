"""Tests for the tile compression adapter."""

from __future__ import annotations

import gzip
import zlib

import pytest

from vtiles.core.types import Compression, CompressionConfig, CompressionStrategy
from vtiles.pyramid.codec import compress_tile, decompress_tile

SAMPLE = b"\x1a\x0c\n\x06places\x28\x80\x20\x78\x02" * 64


class TestCompressTile:
    """Tests for compress_tile."""

    @pytest.mark.parametrize("raw", [b"", b"x", SAMPLE])
    def test_none_is_identity(self, raw: bytes):
        assert compress_tile(raw, CompressionConfig()) == raw

    def test_zlib_framing(self):
        config = CompressionConfig(Compression.ZLIB, 6, CompressionStrategy.DEFAULT)
        out = compress_tile(SAMPLE, config)
        assert out[0] == 0x78
        assert zlib.decompress(out) == SAMPLE

    def test_gzip_framing(self):
        config = CompressionConfig(Compression.GZIP, 6, CompressionStrategy.DEFAULT)
        out = compress_tile(SAMPLE, config)
        assert out[:2] == b"\x1f\x8b"
        assert gzip.decompress(out) == SAMPLE

    @pytest.mark.parametrize("algorithm", [Compression.ZLIB, Compression.GZIP])
    @pytest.mark.parametrize("strategy", list(CompressionStrategy))
    def test_round_trip_each_strategy(
        self, algorithm: Compression, strategy: CompressionStrategy
    ):
        config = CompressionConfig(algorithm, 9, strategy)
        assert decompress_tile(compress_tile(SAMPLE, config), algorithm) == SAMPLE

    @pytest.mark.parametrize("algorithm", [Compression.ZLIB, Compression.GZIP])
    def test_empty_input(self, algorithm: Compression):
        out = compress_tile(b"", CompressionConfig(algorithm, 0))
        assert out
        assert decompress_tile(out, algorithm) == b""

    def test_level_zero_stores(self):
        stored = compress_tile(SAMPLE, CompressionConfig(Compression.ZLIB, 0))
        best = compress_tile(SAMPLE, CompressionConfig(Compression.ZLIB, 9))
        assert len(stored) > len(SAMPLE)
        assert len(best) < len(SAMPLE)

    def test_deterministic(self):
        config = CompressionConfig(Compression.GZIP, 5, CompressionStrategy.FILTERED)
        assert compress_tile(SAMPLE, config) == compress_tile(SAMPLE, config)
