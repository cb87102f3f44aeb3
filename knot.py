#!/usr/bin/env python3
"""
knot: publish a folder of Markdown notes as a static site with
unguessable page addresses.

Each note is rendered to <out>/<address>/index.html, where the address is
a short hash of the note's name and the secret from the configuration
directory. The raw note is copied alongside as note.md.

Usage:
  knot                      # notes in ., config in _knot, output to _public
  knot notes/ -o site -c notes/_knot
  knot -q notes/            # no progress output

The configuration directory holds knot.toml (``secret = "..."`` and an
optional ``extensions = ["md", ...]``), template.html and an optional
static/ folder.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys
from typing import List, Optional

from knot_config import ConfigError, load_config
from publish_notes import publish_notes


# -- CLI --
def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="knot",
        description="Render a directory of Markdown notes to HTML at secret-derived paths.",
    )
    parser.add_argument(
        "notedir",
        nargs="?",
        type=Path,
        default=Path("."),
        help="Directory containing the notes (default: current directory)",
    )
    parser.add_argument(
        "-o",
        "--out",
        type=Path,
        default=Path("_public"),
        metavar="PATH",
        help="output directory (default: _public)",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=Path("_knot"),
        metavar="PATH",
        help="configuration directory (default: _knot)",
    )
    parser.add_argument("-q", "--quiet", action="store_true", help="do not show progress")
    parser.add_argument("-v", "--verbose", action="store_true", help="log debugging details")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    # configuration first: nothing is written if it's broken
    try:
        config = load_config(args.config, args.notedir, args.out, quiet=args.quiet)
    except ConfigError as exc:
        raise SystemExit(f"config error: {exc}") from exc

    try:
        addresses = publish_notes(config)
    except OSError as exc:
        raise SystemExit(f"rendering failed: {exc}") from exc

    if not config.quiet:
        print(f"Published {len(addresses)} notes to: {config.outdir}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
