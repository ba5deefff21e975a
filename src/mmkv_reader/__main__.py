"""
MMKV dump reader CLI entry point.

Decode an MMKV data file and print its key/value pairs.

Usage::

    python -m mmkv_reader mmkv.default
    python -m mmkv_reader mmkv.default mmkv.default.crc
    python -m mmkv_reader mmkv.default --type int64
    python -m mmkv_reader mmkv.default --format json > entries.json

Options:
    PATH           Data file and optional .crc file, in any order
    --type         Force a value type (default: auto)
    --format       Output format: table or json (default: table)
    --hex-limit    Bytes shown before truncating hex output (default: 100)
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Sequence

from mmkv_reader.config import HEX_PREVIEW_LIMIT
from mmkv_reader.decoder import decode_file
from mmkv_reader.exceptions import MMKVError
from mmkv_reader.files import format_file_size, pair_dump_files
from mmkv_reader.models import Entry, TypeHint

logger = logging.getLogger(__name__)

_TABLE_COLUMNS = ("#", "Key", "Type", "Length", "Value")


class StatusFormatter(logging.Formatter):
    """
    Short `level: message` lines for a one-shot command.

    Warnings and errors are highlighted so they stand out next to the table
    on a terminal. Verbose runs also name the module that logged the line.
    """

    ALERT = "\x1b[38;5;196m"
    MUTED = "\x1b[38;5;244m"
    RESET = "\x1b[0m"

    def __init__(self, *, color: bool, show_origin: bool = False) -> None:
        super().__init__("%(message)s")
        self.color = color
        self.show_origin = show_origin

    def format(self, record: logging.LogRecord) -> str:
        """Prefix the message with its lowercase level name."""
        message = super().format(record)
        level = record.levelname.lower()
        if self.show_origin:
            level = f"{level} {record.name}"
        if self.color:
            tint = self.ALERT if record.levelno >= logging.WARNING else self.MUTED
            level = f"{tint}{level}{self.RESET}"
        return f"{level}: {message}"


def setup_logging(verbose: bool = False, no_color: bool = False) -> None:
    """Send log lines to stderr, keeping stdout for the decoded entries."""
    level = logging.DEBUG if verbose else logging.INFO

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(
        StatusFormatter(color=not no_color and sys.stderr.isatty(), show_origin=verbose)
    )

    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(handler)


def _one_line(text: str) -> str:
    """Collapse line breaks so a value stays on its table row."""
    return text.replace("\r", "\\r").replace("\n", "\\n").replace("\t", "\\t")


def format_table(entries: Sequence[Entry]) -> str:
    """Render entries as an aligned plain-text table."""
    rows = [_TABLE_COLUMNS] + [
        (
            str(entry.index),
            _one_line(entry.key),
            entry.type_label.value,
            str(entry.raw_length),
            _one_line(entry.rendered_value),
        )
        for entry in entries
    ]

    # The value column is last and left ragged.
    widths = [max(len(row[col]) for row in rows) for col in range(len(_TABLE_COLUMNS) - 1)]
    lines = []
    for row in rows:
        cells = [cell.ljust(width) for cell, width in zip(row, widths, strict=False)]
        lines.append("  ".join([*cells, row[-1]]).rstrip())
    return "\n".join(lines)


def format_json(entries: Sequence[Entry]) -> str:
    """Render entries as a JSON array with camel-case field names."""
    payload = [entry.model_dump(mode="json", by_alias=True) for entry in entries]
    return json.dumps(payload, ensure_ascii=False, indent=2)


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog="mmkv-reader",
        description="Decode MMKV key/value dump files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "paths",
        nargs="+",
        metavar="PATH",
        help="MMKV data file, optionally followed by its .crc file",
    )
    parser.add_argument(
        "--type",
        dest="type_hint",
        type=TypeHint.parse,
        default=TypeHint.AUTO,
        help="Force a value type: auto, string, int32, int64, float, double, bool, bytes",
    )
    parser.add_argument(
        "--format",
        choices=("table", "json"),
        default="table",
        help="Output format (default: table)",
    )
    parser.add_argument(
        "--hex-limit",
        type=int,
        default=HEX_PREVIEW_LIMIT,
        help=f"Bytes shown before truncating hex output (default: {HEX_PREVIEW_LIMIT})",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored logging output",
    )
    return parser


def run(argv: Sequence[str] | None = None) -> int:
    """
    Run the CLI and return its exit status.

    Returns:
        0 on success, 1 if the dump could not be read.
    """
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose, args.no_color)

    if args.hex_limit <= 0:
        logger.error("--hex-limit must be positive, got %d", args.hex_limit)
        return 1

    try:
        files = pair_dump_files(args.paths)
        entries = decode_file(
            files.data_path,
            files.checksum_path,
            args.type_hint,
            hex_limit=args.hex_limit,
        )
    except MMKVError as e:
        logger.error("Failed to decode: %s", e)
        return 1

    if args.format == "json":
        print(format_json(entries))
    else:
        print(format_table(entries))
        size = format_file_size(files.data_path.stat().st_size)
        print(f"\n{size} | {len(entries)} entries")

    logger.info("Decoded %d entries from %s", len(entries), files.data_path)
    return 0


def main() -> None:
    """CLI entry point."""
    sys.exit(run())


if __name__ == "__main__":
    main()
