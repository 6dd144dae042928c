#!/usr/bin/env python3
"""Command line viewer for a pair of pre-aligned amino-acid sequences.

The two sequences are given directly or as a two-record FASTA file (first
record is the reference). The output is the wrapped pair of tracks, either
as text on stdout or as an SVG/PNG image.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence

from pairview.inputs import parse_fasta_pair
from pairview.layout import group_pairs
from pairview.params import ViewParams
from pairview.service import create_session, resize, set_chars_per_line, submit
from pairview.render import plot_display_lines

logger = logging.getLogger("pairview")

DEFAULT_CHARS_PER_LINE = 60


def parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Show two aligned amino-acid sequences as color-coded paired tracks."
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--input", type=Path, help="FASTA file holding the reference and query")
    source.add_argument("--reference", help="Reference sequence (first track)")
    parser.add_argument("--query", help="Query sequence (second track), used with --reference")
    width = parser.add_mutually_exclusive_group()
    width.add_argument("--chars-per-line", type=int, default=None, help="Symbols per display line")
    width.add_argument("--width-px", type=float, default=None, help="Available width in pixels")
    parser.add_argument("--cell-width-px", type=float, default=16.0, help="Width of one symbol cell")
    parser.add_argument("--dpi", type=int, default=150, help="Image resolution for --output")
    parser.add_argument("--output", type=Path, default=None, help="Write an image (.svg or .png)")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)
    if args.reference is not None and args.query is None:
        parser.error("--query is required with --reference")
    if args.input is not None and args.query is not None:
        parser.error("--query is only valid with --reference")
    return args


def format_text(lines, result) -> str:
    """Plain-text pairs; query positions that match the reference print as '.'."""

    blocks = []
    for reference_line, query_line in group_pairs(lines):
        query_text = "".join(
            "." if result.matches[query_line.start + offset] else cell.symbol
            for offset, cell in enumerate(query_line.cells)
        )
        blocks.append(f"{reference_line.start + 1:>6} {reference_line.text}\n{'':>6} {query_text}")
    return "\n\n".join(blocks)


def main(argv: Sequence[str]) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(levelname)s] %(message)s",
    )

    try:
        params = ViewParams.from_cli_args(args)
        if args.input is not None:
            reference, query, reference_name, query_name = parse_fasta_pair(args.input)
        else:
            reference, query = args.reference, args.query
            reference_name, query_name = "Reference", "Query"
    except Exception as exc:  # pragma: no cover - user input validation
        print(f"Error while reading input: {exc}", file=sys.stderr)
        return 1

    session = create_session(params)
    if not submit(session, reference, query, reference_name=reference_name, query_name=query_name):
        for field_name, message in session.field_errors.items():
            print(f"{field_name}: {message}", file=sys.stderr)
        if session.root_error:
            print(session.root_error, file=sys.stderr)
        return 1

    if args.width_px is not None:
        resize(session, args.width_px)
    elif args.chars_per_line is not None:
        set_chars_per_line(session, args.chars_per_line)
    else:
        set_chars_per_line(session, DEFAULT_CHARS_PER_LINE)
    if not session.lines:
        print("Nothing to show: the display width is too small", file=sys.stderr)
        return 1

    logger.debug(
        "%d positions, %d mismatches, %d display lines",
        session.result.length,
        len(session.result.mismatch_indices),
        len(session.lines),
    )

    if args.output is not None:
        try:
            plot_display_lines(session.lines, session.chars_per_line, args.output, params)
        except Exception as exc:  # pragma: no cover - runtime safety
            print(f"Error while creating image: {exc}", file=sys.stderr)
            return 1
        return 0

    print(f"{session.reference_name} / {session.query_name}")
    print(format_text(session.lines, session.result))
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main(sys.argv[1:]))
