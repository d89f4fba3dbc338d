from __future__ import annotations

from pathlib import Path

import numpy as np


def write_hgt(path: Path, samples: np.ndarray) -> Path:
    """Write a 2-D array of elevations as a raw big-endian HGT file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(np.asarray(samples, dtype=">i2").tobytes())
    return path


def ramp(height: int, width: int, *, start: int = 0, step: int = 1) -> np.ndarray:
    """Return a row-major ramp of elevations."""
    values = start + step * np.arange(height * width, dtype=np.int64)
    return values.reshape(height, width).astype(np.int16)


def native_samples(values: list[int]) -> tuple[bytearray, np.ndarray]:
    """Return a native-order buffer and its int16 view."""
    buffer = bytearray(np.asarray(values, dtype=np.int16).tobytes())
    return buffer, np.frombuffer(buffer, dtype=np.int16)
