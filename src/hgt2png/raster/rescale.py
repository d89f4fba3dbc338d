"""Affine rescaling of signed elevations into unsigned 16-bit codes."""

from __future__ import annotations

import numpy as np

from hgt2png.raster.models import ENCODED_MAX, MISSING_ENCODED, MISSING_SAMPLE, ElevationRange


def rescale_elevations(samples: np.ndarray, elevation: ElevationRange) -> np.ndarray:
    """Rescale int16 samples in place and return the uint16 view of the buffer.

    Missing samples encode to 0xFFFF. Everything else maps linearly so the
    minimum encodes to 0 and the maximum to 65534. Flat terrain, where the
    range has no extent, encodes every elevation to 0.
    """
    if samples.dtype != np.int16:
        raise TypeError(f"Expected int16 samples, got {samples.dtype}.")
    missing = samples == MISSING_SAMPLE
    delta = elevation.delta
    if delta > 0:
        scaled = (samples.astype(np.float64) - float(elevation.minimum)) * ENCODED_MAX / delta
        codes = np.floor(scaled + 0.5)
        np.clip(codes, 0, ENCODED_MAX, out=codes)
        codes = codes.astype(np.uint16)
    else:
        codes = np.zeros(samples.shape, dtype=np.uint16)
    codes[missing] = MISSING_ENCODED

    encoded = samples.view(np.uint16)
    encoded[...] = codes
    return encoded


def decode_elevations(encoded: np.ndarray, minimum: float, delta: float) -> np.ndarray:
    """Invert the rescale, returning metres with NaN where data is missing."""
    codes = np.asarray(encoded)
    elevations = float(minimum) + codes.astype(np.float64) * float(delta) / ENCODED_MAX
    elevations[codes == MISSING_ENCODED] = np.nan
    return elevations
