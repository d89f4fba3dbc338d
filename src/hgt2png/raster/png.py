"""16-bit grayscale PNG encoding with physical scale and calibration chunks."""

from __future__ import annotations

import io
import struct
import zlib
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

import numpy as np
from PIL import Image

from hgt2png.errors import RasterIOError
from hgt2png.raster.models import ENCODED_MAX

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
SCAL_UNIT_METRE = 1
SCAL_UNIT_RADIAN = 2
PCAL_LINEAR = 0
CALIBRATION_PURPOSE = "SRTM-HGT"
CALIBRATION_UNITS = "m"


@dataclass(frozen=True)
class PixelScale:
    """Physical size of a pixel along each axis (sCAL)."""

    x: float
    y: float
    unit: int = SCAL_UNIT_RADIAN


@dataclass(frozen=True)
class Calibration:
    """Linear mapping from encoded values to elevations (pCAL)."""

    minimum: float
    delta: float
    purpose: str = CALIBRATION_PURPOSE
    units: str = CALIBRATION_UNITS
    x0: int = 0
    x1: int = ENCODED_MAX

    def decode(self, code: float) -> float:
        return self.minimum + self.delta * (code - self.x0) / (self.x1 - self.x0)


@dataclass(frozen=True)
class PngMetadata:
    """Header and calibration details recovered from a PNG stream."""

    width: int
    height: int
    bit_depth: int
    color_type: int
    scale: PixelScale | None
    calibration: Calibration | None


def _chunk(chunk_type: bytes, data: bytes) -> bytes:
    crc = zlib.crc32(chunk_type + data) & 0xFFFFFFFF
    return struct.pack(">I", len(data)) + chunk_type + data + struct.pack(">I", crc)


def _format_float(value: float) -> bytes:
    return f"{value:.12g}".encode("ascii")


def scal_chunk(scale: PixelScale) -> bytes:
    """Build an sCAL chunk for a pixel scale."""
    data = bytes([scale.unit]) + _format_float(scale.x) + b"\x00" + _format_float(scale.y)
    return _chunk(b"sCAL", data)


def pcal_chunk(calibration: Calibration) -> bytes:
    """Build a linear pCAL chunk storing minimum and delta as decimal strings."""
    params = [f"{calibration.minimum:.6f}", f"{calibration.delta:.6f}"]
    data = (
        calibration.purpose.encode("latin-1")
        + b"\x00"
        + struct.pack(">iiBB", calibration.x0, calibration.x1, PCAL_LINEAR, len(params))
        + calibration.units.encode("latin-1")
        + b"\x00"
        + b"\x00".join(param.encode("ascii") for param in params)
    )
    return _chunk(b"pCAL", data)


def iter_chunks(payload: bytes) -> Iterator[tuple[bytes, bytes, int]]:
    """Yield (type, data, offset) for every chunk in a PNG byte stream."""
    if not payload.startswith(PNG_SIGNATURE):
        raise RasterIOError("Stream is not a PNG image.")
    offset = len(PNG_SIGNATURE)
    while offset < len(payload):
        if offset + 8 > len(payload):
            raise RasterIOError(f"Truncated PNG chunk header at byte {offset}.")
        length, chunk_type = struct.unpack(">I4s", payload[offset : offset + 8])
        end = offset + 12 + length
        if end > len(payload):
            raise RasterIOError(f"Truncated {chunk_type!r} chunk at byte {offset}.")
        data = payload[offset + 8 : offset + 8 + length]
        (crc,) = struct.unpack(">I", payload[end - 4 : end])
        if zlib.crc32(chunk_type + data) & 0xFFFFFFFF != crc:
            raise RasterIOError(f"CRC mismatch in {chunk_type!r} chunk at byte {offset}.")
        yield chunk_type, data, offset
        offset = end
        if chunk_type == b"IEND":
            return


def encode_png(
    rows: np.ndarray,
    *,
    scale: PixelScale | None = None,
    calibration: Calibration | None = None,
    compress_level: int = 6,
) -> bytes:
    """Encode a 2-D array of 16-bit codes as a grayscale PNG."""
    if rows.ndim != 2:
        raise ValueError(f"Expected a 2-D raster, got shape {rows.shape}.")
    pixels = np.ascontiguousarray(rows, dtype="<u2")
    stream = io.BytesIO()
    Image.fromarray(pixels).save(stream, format="PNG", compress_level=compress_level)
    payload = stream.getvalue()

    extra = b""
    if scale is not None:
        extra += scal_chunk(scale)
    if calibration is not None:
        extra += pcal_chunk(calibration)
    if not extra:
        return payload
    chunks = iter_chunks(payload)
    chunk_type, data, offset = next(chunks)
    if chunk_type != b"IHDR":
        raise RasterIOError("PNG encoder did not emit IHDR first.")
    insert_at = offset + 12 + len(data)
    return payload[:insert_at] + extra + payload[insert_at:]


def _parse_scal(data: bytes) -> PixelScale:
    x_text, y_text = data[1:].split(b"\x00", 1)
    return PixelScale(x=float(x_text), y=float(y_text), unit=data[0])


def _parse_pcal(data: bytes) -> Calibration:
    purpose, rest = data.split(b"\x00", 1)
    x0, x1, _equation, count = struct.unpack(">iiBB", rest[:10])
    if x0 == x1:
        raise ValueError(f"pCAL range X0=X1={x0} cannot be decoded.")
    units, params_blob = rest[10:].split(b"\x00", 1)
    params = params_blob.split(b"\x00")
    if count < 2 or len(params) < 2:
        raise ValueError("pCAL chunk must carry minimum and delta parameters.")
    return Calibration(
        minimum=float(params[0]),
        delta=float(params[1]),
        purpose=purpose.decode("latin-1"),
        units=units.decode("latin-1"),
        x0=x0,
        x1=x1,
    )


def read_png_metadata(source: Path | bytes) -> PngMetadata:
    """Read dimensions, pixel scale and calibration from a PNG."""
    if isinstance(source, (bytes, bytearray)):
        payload = bytes(source)
    else:
        try:
            payload = Path(source).read_bytes()
        except OSError as exc:
            raise RasterIOError(f"Could not read {source}: {exc}", source) from exc
    header: tuple[int, int, int, int] | None = None
    scale = None
    calibration = None
    path = None if isinstance(source, (bytes, bytearray)) else source
    for chunk_type, data, _offset in iter_chunks(payload):
        if chunk_type == b"IDAT":
            break
        try:
            if chunk_type == b"IHDR":
                width, height, bit_depth, color_type = struct.unpack(">IIBB", data[:10])
                header = (width, height, bit_depth, color_type)
            elif chunk_type == b"sCAL":
                scale = _parse_scal(data)
            elif chunk_type == b"pCAL":
                calibration = _parse_pcal(data)
        except (ValueError, IndexError, struct.error) as exc:
            where = path if path is not None else "PNG stream"
            raise RasterIOError(
                f"Malformed {chunk_type.decode('latin-1')} chunk in {where}: {exc}", path
            ) from exc
    if header is None:
        raise RasterIOError("PNG stream has no IHDR chunk.")
    return PngMetadata(*header, scale=scale, calibration=calibration)


def read_png_codes(path: Path) -> np.ndarray:
    """Decode the 16-bit codes stored in a grayscale PNG."""
    try:
        with Image.open(path) as image:
            return np.asarray(image).astype(np.uint16)
    except OSError as exc:
        raise RasterIOError(f"Could not decode {path}: {exc}", path) from exc
