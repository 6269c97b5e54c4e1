#!/usr/bin/env python3
"""
Main entry point for the Disk Usage Check Tool.
"""

import os
import sys
import argparse
import logging
from typing import List, Optional

from .config import ReportOptions, resolve_filesystem
from .exceptions import CommandError, DiskCheckError, InvalidFilesystemError
from .modules import get_report_modules
from .ui.report import ReportWriter

logger = logging.getLogger("diskcheck")

HELP_MSG = """Usage: diskcheck [-f <filesystem>] [-i] [-v] [-h]
-i, --inode                    Display Inode breakdown
-f, --filesystem <filesystem>  Specify a Filesystem
-v, --verbose                  Log debug information to stderr
    --version                  Show version information
-h, --help                     Print help (usage)
"""

INODE_ADVISORY = "Checking Inodes. Please note this could take a while to run..."


SHORT_FLAGS = {"h": "--help", "i": "--inode", "v": "--verbose"}
LONG_FLAGS = {"--help", "--inode", "--verbose", "--version"}


class ArgumentParsingError(Exception):
    """Raised instead of exiting when argparse rejects the command line."""

    pass


class LooseArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that never exits on malformed input."""

    def error(self, message):
        raise ArgumentParsingError(message)


def normalize_arguments(argv: List[str]):
    """
    Rewrite flags argparse would reject into a form it accepts.

    Grouped short flags are split (``-hx`` becomes ``-h`` plus an unknown ``x``)
    and boolean long flags lose an attached value (``--inode=yes`` is ``--inode``,
    ``--inode=false`` drops the flag).

    Returns:
        Tuple of the tokens to parse and the tokens that were set aside
    """
    tokens, unknown = [], []
    for position, token in enumerate(argv):
        if token == "--":
            unknown.extend(argv[position + 1:])
            break
        if token.startswith("--") and "=" in token:
            name, value = token.split("=", 1)
            if name in LONG_FLAGS:
                if value.lower() != "false":
                    tokens.append(name)
                continue
            tokens.append(token)
        elif token.startswith("-") and not token.startswith("--") and len(token) > 2:
            letters = token[1:]
            for index, letter in enumerate(letters):
                if letter == "f":
                    tokens.append("-f")
                    value = letters[index + 1:].lstrip("=")
                    if value:
                        tokens.append(value)
                    break
                if letter in SHORT_FLAGS:
                    tokens.append(SHORT_FLAGS[letter])
                else:
                    unknown.append(f"-{letter}")
        else:
            tokens.append(token)
    return tokens, unknown


def parse_arguments(argv: Optional[List[str]] = None):
    """Parse command line arguments. Unknown or malformed arguments are ignored."""
    argv = list(sys.argv[1:] if argv is None else argv)
    tokens, unknown = normalize_arguments(argv)

    parser = LooseArgumentParser(prog="diskcheck", add_help=False, allow_abbrev=False)
    parser.add_argument("-h", "--help", action="store_true")
    parser.add_argument("-i", "--inode", action="store_true")
    parser.add_argument("-f", "--filesystem", nargs="?", const="", default=None)
    parser.add_argument("-v", "--verbose", action="store_true")
    parser.add_argument("--version", action="store_true")

    try:
        args, extra = parser.parse_known_args(tokens)
    except ArgumentParsingError as e:
        logger.debug(f"Falling back to defaults: {e}")
        args, extra = parser.parse_known_args([])
        args.help = any(token in ("-h", "--help") for token in tokens)
        extra = tokens
    args.unknown = unknown + extra
    return args


def setup_logging(verbose: bool = False):
    """Send log records to stderr so they never mix with the report."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr
    )


def check_root_privileges():
    """Check if running with root privileges."""
    if os.geteuid() != 0:
        logger.warning("Not running as root: tune2fs and lsof may see only part of the system.")
        return False
    return True


def validate_filesystem(filesystem: str) -> str:
    """Make sure the target exists and is a directory."""
    if not os.path.isdir(filesystem):
        raise InvalidFilesystemError(filesystem)
    return filesystem


def show_version():
    """Show version information."""
    from . import __version__
    print(f"diskcheck version {__version__}")


def run_report(options: ReportOptions, writer: ReportWriter):
    """Run the report modules for the selected mode."""
    writer.header("Filesystem Information")
    if options.inode:
        writer.line(INODE_ADVISORY)

    for module in get_report_modules(options.filesystem, inode=options.inode):
        logger.debug(f"Running module: {module.name}")
        module.run(writer)


def main(argv: Optional[List[str]] = None):
    """Main function."""
    args = parse_arguments(argv)

    if args.help:
        print(HELP_MSG, end="")
        sys.exit(0)

    if args.version:
        show_version()
        sys.exit(0)

    setup_logging(args.verbose)
    if args.unknown:
        logger.debug(f"Ignoring unknown arguments: {' '.join(args.unknown)}")

    options = ReportOptions(
        filesystem=resolve_filesystem(args.filesystem),
        inode=args.inode,
        verbose=args.verbose
    )

    try:
        validate_filesystem(options.filesystem)
    except InvalidFilesystemError as e:
        logger.debug(str(e))
        print("Invalid Filesystem", file=sys.stderr)
        print(HELP_MSG, end="")
        sys.exit(1)

    check_root_privileges()

    try:
        run_report(options, ReportWriter())
    except CommandError as e:
        logger.debug(str(e))
        print(f"exec:{e.returncode}", file=sys.stderr)
        sys.exit(1)
    except DiskCheckError as e:
        logger.error(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Operation cancelled by user.")
        sys.exit(130)


if __name__ == "__main__":
    main()
