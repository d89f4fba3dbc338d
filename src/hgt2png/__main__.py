"""Module entrypoint for `python -m hgt2png`."""

from __future__ import annotations

from hgt2png.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
