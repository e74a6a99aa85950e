"""Tests for the vtiles-create command line."""

from __future__ import annotations

import gzip
from pathlib import Path

import mapbox_vector_tile
import pytest
from click.testing import CliRunner

from vtiles.__main__ import main


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def _args(out: Path, stylesheet: Path, *extra: str) -> list[str]:
    return ["0", "1", "0", "0", "0", "0", str(out), str(stylesheet), "", *extra]


class TestCli:
    """End-to-end runs of the command."""

    def test_writes_pyramid_and_prints_paths(
        self, runner: CliRunner, temp_dir: Path, sample_stylesheet: Path
    ):
        out = temp_dir / "tiles"
        result = runner.invoke(main, _args(out, sample_stylesheet))

        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        expected_tiles = [
            out / "0" / "0" / "0.mvt",
            out / "1" / "0" / "0.mvt",
            out / "1" / "0" / "1.mvt",
            out / "1" / "1" / "0.mvt",
            out / "1" / "1" / "1.mvt",
        ]
        for path in expected_tiles:
            assert path.exists()
            assert lines.count(str(path)) == 1
        assert lines.count(str(out / "1" / "1")) == 1

        decoded = mapbox_vector_tile.decode((out / "1" / "1" / "0.mvt").read_bytes())
        assert "places" in decoded

    def test_gzip_output(self, runner: CliRunner, temp_dir: Path, sample_stylesheet: Path):
        out = temp_dir / "tiles"
        result = runner.invoke(main, _args(out, sample_stylesheet, "gzip", "9", "FILTERED"))

        assert result.exit_code == 0, result.output
        raw = gzip.decompress((out / "0" / "0" / "0.mvt").read_bytes())
        assert "places" in mapbox_vector_tile.decode(raw)

    def test_registers_plugins(
        self, runner: CliRunner, temp_dir: Path, sample_stylesheet: Path
    ):
        plugin = temp_dir / "noop_plugin.py"
        plugin.write_text(
            "from vtiles.render.datasources import Datasource\n"
            "class Noop(Datasource):\n"
            "    name = 'noop'\n"
            "    def features(self, bbox):\n"
            "        return []\n"
        )
        args = ["0", "0", "0", "0", "0", "0", str(temp_dir / "t"), str(sample_stylesheet), f",{plugin},"]
        result = runner.invoke(main, args)

        assert result.exit_code == 0, result.output
        assert result.output.splitlines()[0] == f"Registering {plugin}"


class TestCliErrors:
    """Every error exits non-zero with a message."""

    def test_no_arguments_prints_usage(self, runner: CliRunner):
        result = runner.invoke(main, [])
        assert result.exit_code == 1
        assert "Usage:" in result.output
        assert "missing minimum zoom parameter" in result.output

    def test_inverted_range(self, runner: CliRunner, temp_dir: Path, sample_stylesheet: Path):
        args = ["2", "1", "0", "0", "0", "0", str(temp_dir), str(sample_stylesheet), ""]
        result = runner.invoke(main, args)
        assert result.exit_code == 1
        assert "minz (2) must be lower or equals to maxz (1)" in result.output
        assert not any(temp_dir.rglob("*.mvt"))

    def test_negative_number(self, runner: CliRunner, temp_dir: Path, sample_stylesheet: Path):
        args = ["0", "1", "-1", "0", "0", "0", str(temp_dir), str(sample_stylesheet), ""]
        result = runner.invoke(main, args)
        assert result.exit_code == 1
        assert "minimum x must be a non-negative integer" in result.output

    def test_very_long_number(self, runner: CliRunner, temp_dir: Path, sample_stylesheet: Path):
        args = ["0", "0", "9" * 5000, "0", "0", "0", str(temp_dir), str(sample_stylesheet), ""]
        result = runner.invoke(main, args)
        assert result.exit_code == 1
        assert "Error: minimum x" in result.output
        assert "out of range" in result.output

    def test_missing_stylesheet(self, runner: CliRunner, temp_dir: Path):
        args = ["0", "0", "0", "0", "0", "0", str(temp_dir), str(temp_dir / "none.json"), ""]
        result = runner.invoke(main, args)
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_bad_compression_level(
        self, runner: CliRunner, temp_dir: Path, sample_stylesheet: Path
    ):
        result = runner.invoke(main, _args(temp_dir, sample_stylesheet, "zlib", "12"))
        assert result.exit_code == 1
        assert "compression level must be between 0 and 9" in result.output

    def test_missing_plugin_is_render_error(
        self, runner: CliRunner, temp_dir: Path, sample_stylesheet: Path
    ):
        args = ["0", "0", "0", "0", "0", "0", str(temp_dir / "t"), str(sample_stylesheet), "missing.py"]
        result = runner.invoke(main, args)
        assert result.exit_code == 1
        assert "Registering missing.py" in result.output
        assert "Datasource plugin missing.py not found" in result.output
        assert not (temp_dir / "t").exists()

    def test_malformed_stylesheet(self, runner: CliRunner, temp_dir: Path):
        style = temp_dir / "bad.json"
        style.write_text("{oops")
        result = runner.invoke(main, _args(temp_dir / "t", style))
        assert result.exit_code == 1
        assert "Cannot read stylesheet" in result.output
