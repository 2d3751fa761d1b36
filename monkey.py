#!/usr/bin/env python3
"""Monkey: a small tree-walking interpreter."""

import argparse
import getpass
import logging
import sys
from pathlib import Path

from repl import Session, Shell


def run_source(session: Session, text: str) -> int:
    """Run text as a single unit and return the process exit code."""
    session.run(text)
    return 1 if session.had_error else 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the Monkey interpreter."""
    parser = argparse.ArgumentParser(
        prog="monkey",
        description="Monkey: a small tree-walking interpreter",
        epilog="Example: monkey program.monkey"
    )
    parser.add_argument(
        "program",
        type=str,
        nargs="?",
        help="Path to a source file to run (if omitted, starts the REPL)"
    )
    parser.add_argument(
        "-e",
        dest="source",
        type=str,
        help="Source text to run instead of a file"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log evaluator activity to stderr"
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Do not color error output"
    )

    args = parser.parse_args(argv)

    if args.debug:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    color = not args.no_color and sys.stdout.isatty()
    session = Session(color=color)

    if args.source is not None:
        return run_source(session, args.source)

    if args.program is not None:
        path = Path(args.program)
        if not path.exists():
            print(f"Error: File not found: {args.program}", file=sys.stderr)
            return 1
        return run_source(session, path.read_text())

    try:
        user = getpass.getuser()
    except (OSError, KeyError):
        user = "there"
    print(f"Hello, {user}! This is the Monkey programming language!")
    Shell(session).cmdloop()
    return 0


if __name__ == "__main__":
    sys.exit(main())
