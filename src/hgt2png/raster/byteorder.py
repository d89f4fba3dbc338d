"""Byte-order conversion between HGT big-endian samples and the host."""

from __future__ import annotations

import sys

import numpy as np


def normalize_byte_order(buffer: bytearray | memoryview, *, byteorder: str = sys.byteorder) -> None:
    """Swap each 16-bit sample in place when the host is little-endian.

    The operation is its own inverse: call it once after reading big-endian
    data to get native samples, and again before handing the buffer to a
    consumer that expects big-endian rows.
    """
    if len(buffer) % 2:
        raise ValueError(f"Sample buffer length must be even, got {len(buffer)} bytes.")
    if byteorder != "little" or not buffer:
        return
    samples = np.frombuffer(buffer, dtype=np.uint16)
    samples.byteswap(inplace=True)
