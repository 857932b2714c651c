"""
flatten_xml: Combine files into a single XML document while respecting gitignore rules.

Overview
--------
Every path or glob given on the command line (or piped on stdin, one per
line) is expanded into files. Files matching an `--ignore` pattern anywhere
in their path, or ignored by the enclosing git working tree, are skipped.
The rest are written to stdout as::

    <?xml version="1.0" encoding="UTF-8"?>
    <repository>
      <file path="src/app.py">print('hi')</file>
      <file path="logo.png" binary="true"/>
    </repository>

Usage
-----
Run `flatten-xml --help` for full options. Common examples:
    - Whole project, recursively:
        flatten-xml -r .
    - Sources only, without logs:
        flatten-xml -r src -i "*.log"
    - Files listed by another tool:
        git ls-files "*.py" | flatten-xml
    - Trace decisions to a file:
        flatten-xml -r . --verbose --log-file trace.log
"""

from __future__ import annotations

import argparse
import sys
from typing import TYPE_CHECKING

from flatten_xml import __version__
from flatten_xml.exceptions import GenerationError, InitializationError
from flatten_xml.logging import setup_logging
from flatten_xml.pipeline import RepoFlattener
from flatten_xml.settings import Settings

if TYPE_CHECKING:
    from collections.abc import Sequence
    from typing import TextIO


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="flatten-xml",
        description="Combines multiple files into a single XML document while respecting gitignore rules.",
    )
    p.add_argument("-r", "-R", "--recursive", action="store_true", help="Recursively process directories.")
    p.add_argument("-v", "-V", "--verbose", action="store_true", help="Enable verbose output on stderr.")
    p.add_argument(
        "-i",
        "-I",
        "--ignore",
        dest="ignore_patterns",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Ignore files matching pattern (repeatable).",
    )
    p.add_argument("--log-file", type=str, default=None, help="Write diagnostics to this file instead of stderr.")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("paths", nargs="*", help="File paths or globs to process.")
    return p


def read_stdin_paths(stdin: TextIO | None) -> list[str]:
    """Read extra path lines from `stdin`, unless it is missing or an interactive terminal.

    Args:
        stdin (TextIO | None): the auxiliary input stream

    Returns:
        list[str]: raw lines, possibly blank
    """
    if stdin is None or stdin.isatty():
        return []
    return stdin.readlines()


def write_output(xml: str, stream: TextIO) -> None:
    """Write the document and a trailing newline as UTF-8, whatever the stream's own encoding."""
    buffer = getattr(stream, "buffer", None)
    if buffer is None:
        stream.write(xml + "\n")
        stream.flush()
        return
    stream.flush()
    buffer.write((xml + "\n").encode("utf-8"))
    buffer.flush()


def parse_args(argv: Sequence[str] | None = None, stdin: TextIO | None = None) -> Settings:
    """Parse command-line arguments into settings.

    Paths read from `stdin` are appended after the positional ones. With no
    path from either source, the current directory is used.

    Args:
        argv (Sequence[str] | None): arguments, defaults to `sys.argv[1:]`
        stdin (TextIO | None): auxiliary input stream for extra paths

    Returns:
        Settings: the frozen run settings
    """
    args = build_parser().parse_args(argv)
    flags = {
        "recursive": args.recursive,
        "verbose": args.verbose,
        "ignore_patterns": tuple(args.ignore_patterns),
    }
    if args.log_file is not None:
        flags["log_file"] = args.log_file
    return Settings.from_sources(args.paths, read_stdin_paths(stdin), **flags)


def main(argv: Sequence[str] | None = None, stdin: TextIO | None = None) -> int:
    """Run the tool; the document goes to stdout only when it was fully generated.

    Args:
        argv (Sequence[str] | None): arguments, defaults to `sys.argv[1:]`
        stdin (TextIO | None): auxiliary input stream, defaults to `sys.stdin`

    Returns:
        int: 0 on success, 1 on failure
    """
    settings = parse_args(argv, sys.stdin if stdin is None else stdin)
    try:
        logger = setup_logging(verbose=settings.verbose, filename=settings.log_file or None)
    except OSError as e:
        print(f"Error initializing: cannot open log file {settings.log_file}: {e.strerror or e}", file=sys.stderr)
        return 1
    logger.debug("settings", **settings.model_dump())

    try:
        flattener = RepoFlattener(settings, logger=logger)
    except InitializationError as e:
        logger.debug("initialization_failed", error=str(e))
        print(f"Error initializing: {e}", file=sys.stderr)
        return 1

    try:
        xml = flattener.generate()
    except GenerationError as e:
        logger.debug("generation_failed", error=str(e))
        print(f"Error generating XML: {e}", file=sys.stderr)
        return 1

    write_output(xml, sys.stdout)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
