"""Elevation range discovery over native-order samples."""

from __future__ import annotations

import numpy as np

from hgt2png.raster.models import MISSING_SAMPLE, ElevationRange

EMPTY_MINIMUM = 32768
EMPTY_MAXIMUM = -32768


def scan_range(samples: np.ndarray) -> ElevationRange:
    """Return min/max over non-missing samples and the missing count.

    Minimum and maximum are evaluated independently for every sample, so any
    grid with at least one elevation yields ``maximum >= minimum``. A grid
    made only of missing samples keeps the empty extrema (32768, -32768).
    """
    flat = np.asarray(samples, dtype=np.int16).ravel()
    missing = flat == MISSING_SAMPLE
    missing_count = int(np.count_nonzero(missing))
    valid = flat[~missing]
    if valid.size == 0:
        return ElevationRange(
            minimum=EMPTY_MINIMUM,
            maximum=EMPTY_MAXIMUM,
            missing_count=missing_count,
            sample_count=int(flat.size),
        )
    return ElevationRange(
        minimum=int(valid.min()),
        maximum=int(valid.max()),
        missing_count=missing_count,
        sample_count=int(flat.size),
    )
