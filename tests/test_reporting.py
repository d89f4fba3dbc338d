from __future__ import annotations

import json
from pathlib import Path

from hgt2png.config import ConversionConfig
from hgt2png.raster.models import ConversionResult, ElevationRange, TileResult
from hgt2png.raster.tiling import plan_tiles
from hgt2png.reporting import build_report, write_report


def _result() -> ConversionResult:
    plan = plan_tiles(5, 5, rows=1, cols=2)
    tiles = (
        TileResult("a.0.0.png", Path("a.0.0.png"), 0, 0, 3, 5, 100, (8.0, 47.0, 8.5, 48.0)),
        TileResult("a.0.2.png", Path("a.0.2.png"), 0, 2, 3, 5, 150),
    )
    return ConversionResult(
        source=Path("a.hgt"),
        source_bytes=50,
        elevation=ElevationRange(minimum=-3, maximum=7, missing_count=1, sample_count=25),
        plan=plan,
        tiles=tiles,
    )


def test_build_report_summarizes_conversion() -> None:
    config = ConversionConfig(source=Path("a.hgt"), prefix="", width=5, height=5, cols=2)
    report = build_report(config, _result())

    assert report["config"]["cols"] == 2
    assert report["range"] == {
        "minimum": -3,
        "maximum": 7,
        "delta": 10.0,
        "missing": 1,
        "empty": False,
    }
    assert report["plan"]["col_offsets"] == [0, 2]
    assert report["tiles"][0]["bounds"] == [8.0, 47.0, 8.5, 48.0]
    assert report["tiles"][1]["bounds"] is None
    assert report["total_png_bytes"] == 250
    assert report["compression_percent"] == 500.0


def test_write_report_creates_parents(tmp_path: Path) -> None:
    config = ConversionConfig(source=Path("a.hgt"), prefix="", width=5, height=5, cols=2)
    path = tmp_path / "reports" / "run.json"
    write_report(path, build_report(config, _result()))
    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload["source"] == {"path": "a.hgt", "bytes": 50}
