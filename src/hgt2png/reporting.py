"""Conversion report construction helpers."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

from hgt2png.config import ConversionConfig
from hgt2png.raster.models import ConversionResult, TileResult

REPORT_VERSION = "1"


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _tile_entry(tile: TileResult) -> dict[str, Any]:
    return {
        "name": tile.name,
        "path": str(tile.path),
        "row_offset": tile.row_offset,
        "col_offset": tile.col_offset,
        "width": tile.width,
        "height": tile.height,
        "bytes": tile.size_bytes,
        "bounds": list(tile.bounds) if tile.bounds is not None else None,
    }


def build_report(config: ConversionConfig, result: ConversionResult) -> dict[str, Any]:
    """Create a JSON-serializable summary of a conversion."""
    elevation = result.elevation
    plan = result.plan
    return {
        "report_version": REPORT_VERSION,
        "created_at": _utc_now(),
        "config": config.as_dict(),
        "source": {"path": str(result.source), "bytes": result.source_bytes},
        "range": {
            "minimum": elevation.minimum,
            "maximum": elevation.maximum,
            "delta": elevation.delta,
            "missing": elevation.missing_count,
            "empty": elevation.is_empty,
        },
        "plan": {
            "rows": plan.rows,
            "cols": plan.cols,
            "subwidth": plan.subwidth,
            "subheight": plan.subheight,
            "row_offsets": list(plan.row_offsets),
            "col_offsets": list(plan.col_offsets),
        },
        "tiles": [_tile_entry(tile) for tile in result.tiles],
        "total_png_bytes": result.total_png_bytes,
        "compression_percent": round(result.compression, 4),
    }


def write_report(path: Path, report: Mapping[str, Any]) -> None:
    """Write a report as indented JSON, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(report, indent=2), encoding="utf-8")
