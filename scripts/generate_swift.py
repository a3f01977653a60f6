#!/usr/bin/env python3
"""Generate Swift declarations for a YAML descriptor file."""

from __future__ import annotations

import argparse
from pathlib import Path

from shwifty import cli

_FORMAT_CHOICES = ("swift", "json", "yaml")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Generate Swift declarations")
    parser.add_argument("descriptors", type=Path, help="Path to the YAML descriptor file")
    parser.add_argument("--config", type=Path, help="Optional configuration file")
    parser.add_argument(
        "--set", dest="overrides", action="append", help="Configuration overrides (key=value)"
    )
    parser.add_argument(
        "--format", choices=_FORMAT_CHOICES, default="swift", help="Output format to emit"
    )
    args = parser.parse_args(argv)

    forwarded: list[str] = []
    if args.config is not None:
        forwarded.extend(["--config", str(args.config)])
    for override in args.overrides or ():
        forwarded.extend(["--set", override])
    forwarded.extend(["generate", str(args.descriptors), "--format", args.format])
    return cli.main(forwarded)


if __name__ == "__main__":
    raise SystemExit(main())
