#!/usr/bin/env python3
"""
Go Stack Analyzer - command line entry point

Parses a Go panic / deadlock stack dump and prints what was recovered.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from .config import ConfigError, load_settings
from .parser import GoroutineParser
from .report import format_errors, format_report, format_summary, result_to_dict

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_STRICT = 2


def _read_dump(path: str) -> bytes:
    # raw bytes; the parser decodes with replacement
    if path == "-":
        return sys.stdin.buffer.read()
    return Path(path).read_bytes()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="go-stack-analyzer",
        description="Go Stack Analyzer - recover goroutines from Go panic and deadlock dumps",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Show every goroutine with its stack
  %(prog)s analyze panic.txt

  # Count goroutines per state
  %(prog)s summary panic.txt

  # List lines that could not be parsed
  %(prog)s errors panic.txt

  # Read from stdin and save JSON
  go test ./... 2>&1 | %(prog)s analyze - -o goroutines.json
        """
    )

    parser.add_argument(
        'command',
        choices=['analyze', 'summary', 'errors'],
        help='Command to execute'
    )

    parser.add_argument(
        'dump_file',
        help="Path to the stack dump text ('-' for stdin)"
    )

    parser.add_argument(
        '--output',
        '-o',
        help='Write the parse result as JSON to this file'
    )

    parser.add_argument(
        '--strict',
        action='store_true',
        help='Fail when any line could not be parsed'
    )

    parser.add_argument(
        '--env-file',
        help='Load settings from this .env file'
    )

    parser.add_argument(
        '--verbose',
        '-v',
        action='store_true',
        help='Enable debug logging'
    )
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings(args.env_file)
    except ConfigError as e:
        parser.error(str(e))

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level_value,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        text = _read_dump(args.dump_file)
    except OSError as e:
        print(f"Error: cannot read {args.dump_file}: {e}", file=sys.stderr)
        return EXIT_INVALID

    result = GoroutineParser(max_ancestor_depth=settings.max_ancestor_depth).parse_text(text)
    goroutines, errors = result

    if not goroutines:
        if errors:
            print("Not a valid Go stack dump", file=sys.stderr)
            print(format_errors(errors), file=sys.stderr)
        else:
            print("No goroutines found", file=sys.stderr)
        return EXIT_INVALID

    if args.output:
        try:
            with open(args.output, 'w', encoding='utf-8') as f:
                json.dump(result_to_dict(goroutines, errors, settings.max_ancestor_depth), f, indent=2)
        except OSError as e:
            print(f"Error: cannot write {args.output}: {e}", file=sys.stderr)
            return EXIT_INVALID
        print(f"Results saved to: {args.output}")
    elif args.command == 'analyze':
        print(format_report(goroutines, errors, settings.max_ancestor_depth))
    elif args.command == 'summary':
        print(format_summary(goroutines, errors))
    elif args.command == 'errors':
        if errors:
            print(format_errors(errors))
        else:
            print("No parse errors")

    if errors and args.strict:
        print(f"{len(errors)} line(s) could not be parsed", file=sys.stderr)
        return EXIT_STRICT
    return EXIT_OK


if __name__ == '__main__':
    sys.exit(main())
