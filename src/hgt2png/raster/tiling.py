"""Tile geometry for overlapping subdivisions of a grid."""

from __future__ import annotations

from rasterio.transform import Affine
from rasterio.windows import Window
from rasterio.windows import bounds as window_bounds

from hgt2png.errors import ConfigurationError
from hgt2png.raster.models import Bounds, TilePlan


def _check_divisor(name: str, size: int, parts: int) -> None:
    if parts > 1 and size - 1 < parts:
        raise ConfigurationError(f"The {name} of {size} is too small to split into {parts} tiles.")
    if parts > 1 and (size - 1) % parts:
        raise ConfigurationError(
            f"One less than the {name} of {size} is not evenly divisible by {parts}."
        )


def plan_tiles(width: int, height: int, rows: int = 1, cols: int = 1) -> TilePlan:
    """Plan a rows x cols grid of tiles sharing one pixel along each seam."""
    if rows < 1 or cols < 1:
        raise ConfigurationError(
            f"Both rows and columns must be at least 1, got rows={rows}, cols={cols}."
        )
    if width < 1 or height < 1:
        raise ConfigurationError(f"Grid must be at least 1x1, got {width}x{height}.")
    _check_divisor("width", width, cols)
    _check_divisor("height", height, rows)

    subwidth = width // cols + (1 if cols > 1 else 0)
    subheight = height // rows + (1 if rows > 1 else 0)
    return TilePlan(
        width=width,
        height=height,
        rows=rows,
        cols=cols,
        subwidth=subwidth,
        subheight=subheight,
        row_offsets=tuple(index * (subheight - 1) for index in range(rows)),
        col_offsets=tuple(index * (subwidth - 1) for index in range(cols)),
    )


def tile_bounds(window: Window, transform: Affine) -> Bounds:
    """Return (west, south, east, north) covered by a window of the grid."""
    left, bottom, right, top = window_bounds(window, transform)
    return (left, bottom, right, top)
