"""Write planned tiles of a rescaled grid as calibrated PNG files."""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Callable

import numpy as np
from rasterio.transform import Affine

from hgt2png.errors import RasterIOError
from hgt2png.raster.models import ElevationRange, TilePlan, TileResult
from hgt2png.raster.png import Calibration, PixelScale, encode_png
from hgt2png.raster.tiling import tile_bounds

LOGGER = logging.getLogger("hgt2png.raster.emit")

TilePathFn = Callable[[int, int], Path]


def pixel_scale(plan: TilePlan) -> PixelScale | None:
    """Return the angular pixel size of a tile spanning one degree."""
    if plan.subwidth < 2 or plan.subheight < 2:
        return None
    return PixelScale(
        x=math.radians(1.0 / (plan.subwidth - 1)),
        y=math.radians(1.0 / (plan.subheight - 1)),
    )


def calibration_for(elevation: ElevationRange) -> Calibration:
    """Return the decode parameters for a rescaled grid."""
    minimum = 0.0 if elevation.is_empty else float(elevation.minimum)
    return Calibration(minimum=minimum, delta=elevation.delta)


def tile_view(grid: np.ndarray, plan: TilePlan, row_offset: int, col_offset: int) -> np.ndarray:
    """Return a view of the grid rows covered by one tile."""
    return grid[row_offset : row_offset + plan.subheight, col_offset : col_offset + plan.subwidth]


def emit_tiles(
    grid: np.ndarray,
    plan: TilePlan,
    elevation: ElevationRange,
    tile_path: TilePathFn,
    *,
    transform: Affine | None = None,
    compress_level: int = 6,
) -> list[TileResult]:
    """Encode and write every tile in the plan, in row-major order.

    ``grid`` holds the rescaled codes with shape (height, width). The first
    failure stops the loop; tiles already written are left in place.
    """
    if grid.shape != (plan.height, plan.width):
        raise ValueError(
            f"Grid shape {grid.shape} does not match plan {plan.height}x{plan.width}."
        )
    scale = pixel_scale(plan)
    calibration = calibration_for(elevation)
    results: list[TileResult] = []
    for row_offset, col_offset in plan.offsets():
        path = tile_path(row_offset, col_offset)
        name = path.name
        rows = tile_view(grid, plan, row_offset, col_offset)
        try:
            payload = encode_png(
                rows,
                scale=scale,
                calibration=calibration,
                compress_level=compress_level,
            )
        except (OSError, ValueError) as exc:
            raise RasterIOError(f"Could not encode tile {name}: {exc}", path) from exc
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(payload)
        except OSError as exc:
            raise RasterIOError(f"Could not write tile {name}: {exc}", path) from exc

        bounds = None
        if transform is not None:
            bounds = tile_bounds(plan.window(row_offset, col_offset), transform)
        LOGGER.debug("Wrote %s bytes to %s", len(payload), path, extra={"tile": name})
        results.append(
            TileResult(
                name=name,
                path=path,
                row_offset=row_offset,
                col_offset=col_offset,
                width=plan.subwidth,
                height=plan.subheight,
                size_bytes=len(payload),
                bounds=bounds,
            )
        )
    return results
