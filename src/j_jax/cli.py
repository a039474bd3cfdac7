"""J language interpreter: command line entry point."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from . import __version__
from .errors import JError
from .evaluator import Session
from .markdown import diff_file, extract_transcript, update_file
from .repl import repl


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="j-jax", description=__doc__)
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "-D",
        "--diff-markdown",
        type=Path,
        metavar="PATH",
        help="read and execute J fragments in a Markdown file and show a diff",
    )
    mode.add_argument(
        "-M",
        "--update-markdown",
        type=Path,
        metavar="PATH",
        help="update a Markdown file containing J fragments",
    )
    mode.add_argument(
        "--extract-transcript",
        type=Path,
        metavar="PATH",
        help="extract and print the J transcript from a Markdown file",
    )
    mode.add_argument(
        "-e",
        "--eval",
        dest="sentences",
        action="append",
        metavar="TEXT",
        help="evaluate a J sentence and print the result (repeatable)",
    )
    parser.add_argument(
        "--allow-errors",
        action="store_true",
        help="record failing Markdown examples as error output instead of stopping",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="log debug detail to stderr")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )
    strict = not args.allow_errors

    try:
        if args.diff_markdown is not None:
            diff = diff_file(args.diff_markdown, strict=strict)
            sys.stdout.write(diff)
            return 1 if diff else 0
        if args.update_markdown is not None:
            update_file(args.update_markdown, strict=strict)
            return 0
        if args.extract_transcript is not None:
            sys.stdout.write(extract_transcript(args.extract_transcript))
            return 0
    except (OSError, ValueError, JError) as err:
        print(f"j-jax: {err}", file=sys.stderr)
        return 2

    if args.sentences:
        session = Session()
        for sentence in args.sentences:
            output = session.eval_text(sentence)
            if output:
                print(output)
        return 0

    repl()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
