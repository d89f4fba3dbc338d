"""Raster conversion stages and exports."""

from hgt2png.raster.byteorder import normalize_byte_order
from hgt2png.raster.emit import emit_tiles
from hgt2png.raster.models import (
    MISSING_ENCODED,
    MISSING_SAMPLE,
    ConversionResult,
    ElevationRange,
    TilePlan,
    TileResult,
)
from hgt2png.raster.pipeline import convert_hgt, read_grid
from hgt2png.raster.png import Calibration, PixelScale, encode_png, read_png_metadata
from hgt2png.raster.rescale import decode_elevations, rescale_elevations
from hgt2png.raster.scan import scan_range
from hgt2png.raster.tiling import plan_tiles, tile_bounds

__all__ = [
    "Calibration",
    "ConversionResult",
    "ElevationRange",
    "MISSING_ENCODED",
    "MISSING_SAMPLE",
    "PixelScale",
    "TilePlan",
    "TileResult",
    "convert_hgt",
    "decode_elevations",
    "emit_tiles",
    "encode_png",
    "normalize_byte_order",
    "plan_tiles",
    "read_grid",
    "read_png_metadata",
    "rescale_elevations",
    "scan_range",
    "tile_bounds",
]
