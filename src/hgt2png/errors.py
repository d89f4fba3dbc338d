"""Error types raised by the conversion pipeline."""

from __future__ import annotations

from pathlib import Path


class Hgt2PngError(Exception):
    """Base class for every conversion failure."""


class ConfigurationError(Hgt2PngError, ValueError):
    """Invalid subdivision counts or tile geometry."""


class ValidationError(Hgt2PngError, ValueError):
    """Input raster does not match the declared grid size."""


class FormatError(Hgt2PngError, ValueError):
    """Source name does not follow the geographic cell convention."""


class RasterIOError(Hgt2PngError, OSError):
    """Open, read, encode or write failure on a raster file."""

    def __init__(self, message: str, path: Path | str | None = None) -> None:
        super().__init__(message)
        self.path = Path(path) if path is not None else None
