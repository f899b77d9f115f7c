"""Command-line interface for flatfile-resumable."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import NoReturn

from .context import ExecutionContext
from .exceptions import ItemStreamError
from .mapping import JsonLineMapper, PassThroughLineMapper
from .models import CheckpointKeys
from .progress import delete_context_keys, load_context, save_context
from .reader import FlatFileItemReader
from .resource import FileResource
from .separator import (
    JsonRecordSeparatorPolicy,
    LineCountRecordSeparatorPolicy,
    RecordSeparatorPolicy,
    SimpleRecordSeparatorPolicy,
)

logger = logging.getLogger("flatfile_reader")

DEFAULT_NAME = "flatfile-reader"


def configure_logging(verbose: bool = False) -> None:
    """Set up logging configuration."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def _build_policy(args: argparse.Namespace) -> RecordSeparatorPolicy:
    if args.json_records:
        return JsonRecordSeparatorPolicy()
    if args.lines_per_record > 1:
        return LineCountRecordSeparatorPolicy(args.lines_per_record)
    return SimpleRecordSeparatorPolicy()


def cmd_read(args: argparse.Namespace) -> int:
    """Handle the 'read' subcommand."""
    checkpoint_path = Path(args.checkpoint) if args.checkpoint else None
    context = (load_context(checkpoint_path) if checkpoint_path else None) or ExecutionContext()

    reader = FlatFileItemReader(
        FileResource(args.file),
        name=args.name,
        line_mapper=JsonLineMapper(skip_blank=True) if args.json else PassThroughLineMapper(),
        record_separator_policy=_build_policy(args),
        lines_to_skip=args.skip,
        current_item_count=args.start,
        max_item_count=args.max if args.max is not None else sys.maxsize,
        strict=not args.lenient,
        comments=args.comment or (),
    )

    def checkpoint() -> None:
        if checkpoint_path is None:
            return
        reader.update(context)
        save_context(checkpoint_path, context)

    try:
        reader.open(context)
        for count, item in enumerate(reader, start=1):
            print(json.dumps(item) if args.json else item)
            if count % args.commit_interval == 0:
                checkpoint()
        checkpoint()
    except ItemStreamError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except json.JSONDecodeError as e:
        print(f"Error: Invalid JSON near line {reader.line_number}: {e}", file=sys.stderr)
        return 1
    finally:
        reader.close()

    logger.info("Read %d item(s) in total", reader.read_count)
    return 0


def cmd_info(args: argparse.Namespace) -> int:
    """Handle the 'info' subcommand."""
    context = load_context(Path(args.checkpoint))
    if context is None:
        print(f"Error: No readable checkpoint at {args.checkpoint}", file=sys.stderr)
        return 1

    keys = CheckpointKeys.for_name(args.name)
    read_count = context.get_int(keys.read_count, -1)
    max_override = context.get_int(keys.read_count_max, -1)

    if args.json:
        info = {
            "name": args.name,
            "read_count": read_count if read_count >= 0 else None,
            "max_override": max_override if max_override >= 0 else None,
        }
        print(json.dumps(info, indent=2))
    else:
        print(f"Reader: {args.name}")
        print(f"Read count: {read_count:,}" if read_count >= 0 else "Read count: not saved")
        if max_override >= 0:
            print(f"Max override: {max_override:,}")

    return 0


def cmd_reset(args: argparse.Namespace) -> int:
    """Handle the 'reset' subcommand."""
    keys = CheckpointKeys.for_name(args.name)
    deleted = delete_context_keys(Path(args.checkpoint), [keys.read_count])
    if not deleted:
        print(f"Error: No saved position for reader '{args.name}'", file=sys.stderr)
        return 1
    print(f"Reset reader '{args.name}'")
    return 0


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1, got {number}")
    return number


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="flatfile-reader",
        description="Restartable record reading for line-oriented files",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose logging"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # read subcommand
    read_parser = subparsers.add_parser(
        "read",
        help="Print records, resuming from a checkpoint",
        description="Print records one per line; with --checkpoint, save progress so a rerun resumes",
    )
    read_parser.add_argument("file", help="Path to the input file")
    read_parser.add_argument(
        "--name", default=DEFAULT_NAME, help="Reader name used for checkpoint keys"
    )
    read_parser.add_argument(
        "--skip", type=int, default=0, help="Header lines to skip on every open"
    )
    read_parser.add_argument(
        "--start", type=int, default=0, help="Records to skip when no checkpoint exists"
    )
    read_parser.add_argument("--max", type=int, help="Maximum number of records to read")
    records = read_parser.add_mutually_exclusive_group()
    records.add_argument(
        "--lines-per-record", type=_positive_int, default=1, help="Raw lines per record"
    )
    records.add_argument(
        "--json-records", action="store_true", help="Records are (multi-line) JSON objects"
    )
    read_parser.add_argument("--checkpoint", help="Checkpoint file to resume from and update")
    read_parser.add_argument(
        "--commit-interval", type=_positive_int, default=1, help="Records between checkpoints"
    )
    read_parser.add_argument(
        "--lenient", action="store_true", help="Treat a missing file as empty"
    )
    read_parser.add_argument(
        "--comment", action="append", help="Prefix of comment lines to ignore (repeatable)"
    )
    read_parser.add_argument(
        "--json", action="store_true", help="Parse records as JSON and print compact JSON"
    )
    read_parser.set_defaults(func=cmd_read)

    # info subcommand
    info_parser = subparsers.add_parser(
        "info",
        help="Show saved checkpoint state",
        description="Display the saved read count and max override for a reader",
    )
    info_parser.add_argument("checkpoint", help="Path to checkpoint file")
    info_parser.add_argument("--name", default=DEFAULT_NAME, help="Reader name")
    info_parser.add_argument(
        "--json", action="store_true", help="Output as JSON for scripting"
    )
    info_parser.set_defaults(func=cmd_info)

    # reset subcommand
    reset_parser = subparsers.add_parser(
        "reset",
        help="Forget a reader's saved position",
        description="Delete the saved read count so the next run starts from the beginning",
    )
    reset_parser.add_argument("checkpoint", help="Path to checkpoint file")
    reset_parser.add_argument("--name", default=DEFAULT_NAME, help="Reader name")
    reset_parser.set_defaults(func=cmd_reset)

    return parser


def main(argv: list[str] | None = None) -> NoReturn:
    """Main entry point for CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)
    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
