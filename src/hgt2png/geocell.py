"""Parse 1-degree cell names like N47E008.hgt into geographic bounds."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

from rasterio.transform import Affine, from_origin

from hgt2png.errors import FormatError

Bounds = Tuple[float, float, float, float]

_CELL_PATTERN = re.compile(r"^(?P<ns>[NSns])(?P<lat>\d{2})(?P<ew>[EWew])(?P<lon>\d{3})")


@dataclass(frozen=True)
class GeoCell:
    """A 1x1 degree cell identified by its south-west corner."""

    latitude: int
    longitude: int

    @property
    def name(self) -> str:
        ns = "N" if self.latitude >= 0 else "S"
        ew = "E" if self.longitude >= 0 else "W"
        return f"{ns}{abs(self.latitude):02d}{ew}{abs(self.longitude):03d}"

    @property
    def bounds(self) -> Bounds:
        """Return (west, south, east, north) in degrees."""
        return (
            float(self.longitude),
            float(self.latitude),
            float(self.longitude + 1),
            float(self.latitude + 1),
        )

    def transform(self, width: int, height: int) -> Affine:
        """Return the affine transform for a width x height sample grid.

        Samples sit on the cell's grid lines, so edge pixels extend half a
        pixel beyond the cell.
        """
        if width < 2 or height < 2:
            raise FormatError(f"Cell {self.name} needs at least 2x2 samples, got {width}x{height}.")
        res_x = 1.0 / (width - 1)
        res_y = 1.0 / (height - 1)
        west, _south, _east, north = self.bounds
        return from_origin(west - res_x / 2, north + res_y / 2, res_x, res_y)


def parse_cell_name(path: Path | str) -> GeoCell:
    """Parse the hemisphere and degree fields from a source file name."""
    name = Path(path).name
    match = _CELL_PATTERN.match(name)
    if not match:
        raise FormatError(f"Cannot read a [NS]dd[EW]ddd cell from {name!r}.")
    latitude = int(match.group("lat"))
    longitude = int(match.group("lon"))
    if match.group("ns").upper() == "S":
        latitude = -latitude
    if match.group("ew").upper() == "W":
        longitude = -longitude
    if not (-90 <= latitude < 90 and -180 <= longitude < 180):
        raise FormatError(f"Cell coordinates out of range in {name!r}.")
    return GeoCell(latitude=latitude, longitude=longitude)
