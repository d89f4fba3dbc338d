"""Command-line interface for hgt2png."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

import numpy as np

from hgt2png import __version__
from hgt2png.config import ConversionConfig
from hgt2png.errors import FormatError, Hgt2PngError, RasterIOError
from hgt2png.geocell import parse_cell_name
from hgt2png.logging_utils import LogOptions, configure_logging
from hgt2png.raster.models import MISSING_ENCODED, ConversionResult
from hgt2png.raster.pipeline import convert_hgt
from hgt2png.raster.png import read_png_codes, read_png_metadata
from hgt2png.reporting import build_report, write_report

LOGGER = logging.getLogger("hgt2png.cli")

EPILOG = """\
examples:
  hgt2png convert N47E008.hgt temp/ 3601 3601 3 3
      => temp/N47E008.0.0.png ... temp/N47E008.2400.2400.png
  hgt2png convert N47E008.hgt MyData. 3601 3601
      => MyData.N47E008.0.0.png
"""


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}") from exc
    if number < 1:
        raise argparse.ArgumentTypeError(f"expected a counting number, got {number}")
    return number


def _add_convert_parser(subparsers: argparse._SubParsersAction) -> None:
    """Register the convert subcommand and its arguments."""
    convert = subparsers.add_parser(
        "convert",
        help="Convert an HGT raster into 16-bit PNG tiles.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    convert.add_argument("source", help="Path to the HGT source file.")
    convert.add_argument(
        "prefix",
        help="Prefix prepended to output names, e.g. a directory like 'temp/'.",
    )
    convert.add_argument("width", type=_positive_int, help="HGT width in samples.")
    convert.add_argument("height", type=_positive_int, help="HGT height in samples.")
    convert.add_argument(
        "rows",
        nargs="?",
        type=int,
        help="Tile rows; one less than the height must divide evenly. Defaults to 1.",
    )
    convert.add_argument(
        "cols",
        nargs="?",
        type=int,
        help="Tile columns; one less than the width must divide evenly. Defaults to 1.",
    )
    convert.add_argument(
        "--compress-level",
        type=int,
        choices=range(0, 10),
        default=6,
        metavar="0-9",
        help="zlib level used by the PNG encoder.",
    )
    convert.add_argument("--report", help="Optional path for a JSON conversion report.")


def _add_inspect_parser(subparsers: argparse._SubParsersAction) -> None:
    """Register the inspect subcommand."""
    inspect = subparsers.add_parser(
        "inspect",
        help="Show scale and calibration stored in PNG tiles.",
    )
    inspect.add_argument("pngs", nargs="+", help="PNG tiles to inspect.")


def _add_version_parser(subparsers: argparse._SubParsersAction) -> None:
    """Register the version subcommand."""
    subparsers.add_parser("version", help="Print the current version.")


def _print_summary(config: ConversionConfig, result: ConversionResult) -> None:
    elevation = result.elevation
    print(f'File: "{config.source}" ({result.source_bytes} bytes)')
    print(
        f"Size: {config.width}(w) x {config.height}(h) pixels "
        f"({config.width * config.height} samples)"
    )
    try:
        cell = parse_cell_name(config.source)
    except FormatError:
        print("Bounds: unknown")
    else:
        west, south, east, north = cell.bounds
        print(f"Bounds: ({south:g}, {west:g}) to ({north:g}, {east:g})")
    if elevation.is_empty:
        print("Range: none")
    else:
        print(f"Range: [{elevation.minimum}, {elevation.maximum}] meters")
    print(f"Missing: {elevation.missing_count} pixels")
    for tile in result.tiles:
        print(f"  => {tile.path}")
    print(f"Output: Compression: {result.compression:.2f}% of original size")


def _run_convert(args: argparse.Namespace) -> int:
    config = ConversionConfig.from_args(args)
    result = convert_hgt(config)
    _print_summary(config, result)
    if args.report:
        report_path = Path(args.report)
        try:
            write_report(report_path, build_report(config, result))
        except OSError as exc:
            raise RasterIOError(f"Could not write report {report_path}: {exc}", report_path) from exc
        LOGGER.info("Report written to %s", report_path)
    return 0


def _run_inspect(args: argparse.Namespace) -> int:
    for value in args.pngs:
        path = Path(value)
        metadata = read_png_metadata(path)
        print(f"{path}: {metadata.width}x{metadata.height}, {metadata.bit_depth}-bit")
        if metadata.scale is not None:
            print(f"  Scale: {metadata.scale.x:.6e} x {metadata.scale.y:.6e} rad/pixel")
        calibration = metadata.calibration
        if calibration is None:
            print("  Calibration: none")
            continue
        print(
            f"  Calibration: {calibration.purpose} minimum={calibration.minimum:g} "
            f"delta={calibration.delta:g} {calibration.units}"
        )
        codes = read_png_codes(path)
        valid = codes[codes != MISSING_ENCODED]
        missing = int(codes.size - valid.size)
        if valid.size:
            low = calibration.decode(float(np.min(valid)))
            high = calibration.decode(float(np.max(valid)))
            print(f"  Range: [{low:.1f}, {high:.1f}] {calibration.units}")
        print(f"  Missing: {missing} pixels")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Run the CLI entrypoint and return an exit code."""
    parser = argparse.ArgumentParser(
        prog="hgt2png",
        description="Convert HGT elevation rasters to calibrated 16-bit PNG tiles.",
    )
    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (repeatable).",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Reduce log output to warnings and errors.",
    )
    parser.add_argument(
        "--log-json",
        action="store_true",
        help="Emit logs as JSON on stderr.",
    )
    parser.add_argument(
        "--log-file",
        help="Optional path for JSON log output.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_convert_parser(subparsers)
    _add_inspect_parser(subparsers)
    _add_version_parser(subparsers)

    args = parser.parse_args(argv)
    configure_logging(
        LogOptions(
            verbose=args.verbose or 0,
            quiet=bool(args.quiet),
            log_file=Path(args.log_file) if args.log_file else None,
            json_console=bool(args.log_json),
        )
    )

    if args.command == "version":
        print(__version__)
        return 0
    if args.command == "convert" and (args.rows is None) != (args.cols is None):
        parser.error("rows and cols must be given together")

    try:
        if args.command == "convert":
            return _run_convert(args)
        if args.command == "inspect":
            return _run_inspect(args)
    except Hgt2PngError as exc:
        LOGGER.error("%s", exc)
        return 1

    parser.error("Unknown command")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
