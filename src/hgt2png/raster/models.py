"""Data models shared by the raster conversion stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator

from rasterio.windows import Window

from hgt2png.geocell import Bounds

MISSING_SAMPLE = -32768
MISSING_ENCODED = 0xFFFF
ENCODED_MAX = 65534


@dataclass(frozen=True)
class ElevationRange:
    """Elevation extrema over non-missing samples."""

    minimum: int
    maximum: int
    missing_count: int
    sample_count: int = 0

    @property
    def is_empty(self) -> bool:
        """Return True when no sample carries an elevation."""
        return self.maximum < self.minimum

    @property
    def delta(self) -> float:
        if self.is_empty:
            return 0.0
        return float(self.maximum) - float(self.minimum)

    @property
    def valid_count(self) -> int:
        return self.sample_count - self.missing_count


@dataclass(frozen=True)
class TilePlan:
    """Uniform tile dimensions and top-left offsets over a grid."""

    width: int
    height: int
    rows: int
    cols: int
    subwidth: int
    subheight: int
    row_offsets: tuple[int, ...]
    col_offsets: tuple[int, ...]

    def offsets(self) -> Iterator[tuple[int, int]]:
        """Yield (row_offset, col_offset) pairs in row-major tile order."""
        for row_offset in self.row_offsets:
            for col_offset in self.col_offsets:
                yield row_offset, col_offset

    def window(self, row_offset: int, col_offset: int) -> Window:
        """Return the rasterio window covered by the tile at an offset."""
        return Window(col_offset, row_offset, self.subwidth, self.subheight)

    @property
    def tile_count(self) -> int:
        return self.rows * self.cols


@dataclass(frozen=True)
class TileResult:
    """Result of writing a single PNG tile."""

    name: str
    path: Path
    row_offset: int
    col_offset: int
    width: int
    height: int
    size_bytes: int
    bounds: Bounds | None = None


@dataclass(frozen=True)
class ConversionResult:
    """Summary of a complete HGT conversion."""

    source: Path
    source_bytes: int
    elevation: ElevationRange
    plan: TilePlan
    tiles: tuple[TileResult, ...] = field(default_factory=tuple)

    @property
    def total_png_bytes(self) -> int:
        return sum(tile.size_bytes for tile in self.tiles)

    @property
    def compression(self) -> float:
        """Return total PNG size as a percentage of the source size."""
        if not self.source_bytes:
            return 0.0
        return self.total_png_bytes / self.source_bytes * 100.0
