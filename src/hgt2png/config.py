"""Conversion settings threaded through the pipeline."""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class ConversionConfig:
    """Everything a single HGT conversion needs to know."""

    source: Path
    prefix: str
    width: int
    height: int
    rows: int = 1
    cols: int = 1
    compress_level: int = 6

    @property
    def stem(self) -> str:
        name = self.source.name
        return name.rsplit(".", 1)[0] if "." in name else name

    @property
    def output_base(self) -> str:
        """Return `<prefix><stem>`, the shared start of every tile name."""
        return f"{self.prefix}{self.stem}"

    def tile_path(self, row_offset: int, col_offset: int) -> Path:
        return Path(f"{self.output_base}.{row_offset}.{col_offset}.png")

    def as_dict(self) -> dict[str, Any]:
        return {
            "source": str(self.source),
            "prefix": self.prefix,
            "width": self.width,
            "height": self.height,
            "rows": self.rows,
            "cols": self.cols,
            "compress_level": self.compress_level,
        }

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> ConversionConfig:
        """Normalize parsed CLI arguments into a config."""
        rows = args.rows if args.rows is not None else 1
        cols = args.cols if args.cols is not None else 1
        return cls(
            source=Path(args.source),
            prefix=args.prefix,
            width=int(args.width),
            height=int(args.height),
            rows=int(rows),
            cols=int(cols),
            compress_level=int(getattr(args, "compress_level", 6)),
        )
