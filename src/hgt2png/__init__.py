"""Convert HGT elevation rasters into calibrated 16-bit PNG tiles."""

__version__ = "0.1.0"
