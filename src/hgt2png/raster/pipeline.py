"""End-to-end HGT to PNG conversion."""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
from rasterio.transform import Affine

from hgt2png.config import ConversionConfig
from hgt2png.errors import FormatError, RasterIOError, ValidationError
from hgt2png.geocell import GeoCell, parse_cell_name
from hgt2png.raster.byteorder import normalize_byte_order
from hgt2png.raster.emit import emit_tiles
from hgt2png.raster.models import ConversionResult
from hgt2png.raster.rescale import rescale_elevations
from hgt2png.raster.scan import scan_range
from hgt2png.raster.tiling import plan_tiles

LOGGER = logging.getLogger("hgt2png.raster.pipeline")

SAMPLE_BYTES = 2


def expected_size(width: int, height: int) -> int:
    return width * height * SAMPLE_BYTES


def check_source_size(path: Path, width: int, height: int) -> int:
    """Return the size of the source file after checking it fits the grid."""
    try:
        actual = path.stat().st_size
    except OSError as exc:
        raise RasterIOError(f"Could not open file {path}: {exc}", path) from exc
    expected = expected_size(width, height)
    if actual != expected:
        raise ValidationError(
            f"{path}: actual size {actual} bytes, expected {expected} bytes "
            f"for {width}x{height} samples."
        )
    return actual


def read_grid(path: Path, width: int, height: int) -> bytearray:
    """Read a raw big-endian HGT grid into a mutable buffer."""
    expected = check_source_size(path, width, height)
    buffer = bytearray(expected)
    try:
        with path.open("rb") as handle:
            read = handle.readinto(buffer)
    except OSError as exc:
        raise RasterIOError(f"Could not read file {path}: {exc}", path) from exc
    if read != expected:
        raise RasterIOError(f"Read {read} bytes from {path}, expected {expected}.", path)
    return buffer


def locate_cell(source: Path) -> GeoCell | None:
    """Return the geographic cell named by the source, if any."""
    try:
        return parse_cell_name(source)
    except FormatError as exc:
        LOGGER.warning("Bounds unknown: %s", exc)
        return None


def convert_hgt(config: ConversionConfig) -> ConversionResult:
    """Convert an HGT file into one PNG per planned tile."""
    plan = plan_tiles(config.width, config.height, config.rows, config.cols)
    buffer = read_grid(config.source, config.width, config.height)
    LOGGER.info(
        "Read %s (%s bytes), %sx%s samples",
        config.source,
        len(buffer),
        config.width,
        config.height,
    )

    cell = locate_cell(config.source)
    transform: Affine | None = None
    if cell is not None:
        try:
            transform = cell.transform(config.width, config.height)
        except FormatError as exc:
            LOGGER.warning("Bounds unknown: %s", exc)
        LOGGER.info("Cell %s bounds %s", cell.name, cell.bounds)

    normalize_byte_order(buffer)
    samples = np.frombuffer(buffer, dtype=np.int16)
    elevation = scan_range(samples)
    LOGGER.info(
        "Range [%s, %s] m, %s missing samples",
        elevation.minimum,
        elevation.maximum,
        elevation.missing_count,
    )
    if elevation.is_empty:
        LOGGER.warning("%s holds no elevations; every pixel will be missing.", config.source)
    rescale_elevations(samples, elevation)
    normalize_byte_order(buffer)

    grid = np.frombuffer(buffer, dtype=">u2").reshape(config.height, config.width)
    tiles = emit_tiles(
        grid,
        plan,
        elevation,
        config.tile_path,
        transform=transform,
        compress_level=config.compress_level,
    )
    result = ConversionResult(
        source=config.source,
        source_bytes=len(buffer),
        elevation=elevation,
        plan=plan,
        tiles=tuple(tiles),
    )
    LOGGER.info(
        "Wrote %s tile(s), %.2f%% of original size",
        len(result.tiles),
        result.compression,
    )
    return result
