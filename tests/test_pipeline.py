from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import pytest

from hgt2png.config import ConversionConfig
from hgt2png.errors import ConfigurationError, RasterIOError, ValidationError
from hgt2png.raster.models import ENCODED_MAX, MISSING_ENCODED, MISSING_SAMPLE
from hgt2png.raster.pipeline import convert_hgt, read_grid
from hgt2png.raster.png import read_png_codes, read_png_metadata
from hgt2png.raster.rescale import decode_elevations
from tests.utils import ramp, write_hgt


def test_read_grid_returns_raw_bytes(tmp_path: Path) -> None:
    source = write_hgt(tmp_path / "N47E008.hgt", np.array([[1, -2], [3, 4]]))
    buffer = read_grid(source, 2, 2)
    assert bytes(buffer) == b"\x00\x01\xff\xfe\x00\x03\x00\x04"


def test_read_grid_size_mismatch(tmp_path: Path) -> None:
    source = write_hgt(tmp_path / "N47E008.hgt", np.zeros((2, 3)))
    with pytest.raises(ValidationError, match="actual size 12 bytes, expected 8 bytes"):
        read_grid(source, 2, 2)


def test_read_grid_missing_file(tmp_path: Path) -> None:
    with pytest.raises(RasterIOError, match="Could not open") as excinfo:
        read_grid(tmp_path / "absent.hgt", 2, 2)
    assert excinfo.value.path == tmp_path / "absent.hgt"


def test_convert_tiles_and_calibrates(tmp_path: Path) -> None:
    elevations = ramp(5, 5, start=-100, step=50)
    elevations[4, 4] = MISSING_SAMPLE
    source = write_hgt(tmp_path / "N47E008.hgt", elevations)
    config = ConversionConfig(
        source=source, prefix=f"{tmp_path}/out/", width=5, height=5, rows=2, cols=2
    )

    result = convert_hgt(config)

    assert result.elevation.minimum == -100
    assert result.elevation.maximum == 1050
    assert result.elevation.missing_count == 1
    assert [tile.path.name for tile in result.tiles] == [
        "N47E008.0.0.png",
        "N47E008.0.2.png",
        "N47E008.2.0.png",
        "N47E008.2.2.png",
    ]
    assert result.total_png_bytes == sum(tile.path.stat().st_size for tile in result.tiles)
    assert result.compression > 0

    last = result.tiles[-1]
    codes = read_png_codes(last.path)
    assert codes[2, 2] == MISSING_ENCODED
    assert codes[0, 0] == round((500 + 100) * ENCODED_MAX / 1150)
    metadata = read_png_metadata(last.path)
    decoded = decode_elevations(
        codes, metadata.calibration.minimum, metadata.calibration.delta
    )
    expected = elevations[2:5, 2:5].astype(np.float64)
    mask = elevations[2:5, 2:5] != MISSING_SAMPLE
    assert np.allclose(decoded[mask], expected[mask], atol=1150 / ENCODED_MAX)
    assert np.isnan(decoded[~mask]).all()

    west, south, east, north = last.bounds
    assert (west, north) == pytest.approx((8.375, 47.625))
    assert (east, south) == pytest.approx((9.125, 46.875))


def test_convert_single_tile_flat_terrain(tmp_path: Path) -> None:
    elevations = np.full((3, 4), 250, dtype=np.int16)
    elevations[0, 0] = MISSING_SAMPLE
    source = write_hgt(tmp_path / "N00E000.hgt", elevations)
    config = ConversionConfig(source=source, prefix=f"{tmp_path}/", width=4, height=3)

    result = convert_hgt(config)

    assert len(result.tiles) == 1
    codes = read_png_codes(result.tiles[0].path)
    assert codes.shape == (3, 4)
    assert codes[0, 0] == MISSING_ENCODED
    assert set(codes.ravel().tolist()) == {0, MISSING_ENCODED}


def test_convert_validates_before_writing(tmp_path: Path) -> None:
    source = write_hgt(tmp_path / "N47E008.hgt", ramp(5, 5))
    out_dir = tmp_path / "out"
    config = ConversionConfig(
        source=source, prefix=f"{out_dir}/", width=5, height=5, rows=1, cols=3
    )
    with pytest.raises(ConfigurationError, match="width of 5"):
        convert_hgt(config)
    assert not out_dir.exists()

    config = ConversionConfig(source=source, prefix=f"{out_dir}/", width=6, height=5)
    with pytest.raises(ValidationError):
        convert_hgt(config)
    assert not out_dir.exists()


def test_convert_unknown_cell_name_is_not_fatal(tmp_path: Path, caplog) -> None:
    source = write_hgt(tmp_path / "SOURCE.hgt", ramp(3, 3))
    config = ConversionConfig(source=source, prefix=f"{tmp_path}/", width=3, height=3)

    with caplog.at_level(logging.WARNING, logger="hgt2png"):
        result = convert_hgt(config)

    assert result.tiles[0].bounds is None
    assert result.tiles[0].path.is_file()
    assert "Bounds unknown" in caplog.text


def test_convert_all_missing(tmp_path: Path) -> None:
    source = write_hgt(tmp_path / "N10E010.hgt", np.full((3, 3), MISSING_SAMPLE))
    config = ConversionConfig(source=source, prefix=f"{tmp_path}/", width=3, height=3)
    result = convert_hgt(config)
    assert result.elevation.is_empty
    codes = read_png_codes(result.tiles[0].path)
    assert (codes == MISSING_ENCODED).all()
