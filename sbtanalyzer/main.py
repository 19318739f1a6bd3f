"""Main CLI entry point for sbtanalyzer.

Provides commands: scan
"""

import argparse
import logging
import sys
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler

from sbtanalyzer import __version__
from sbtanalyzer.cli.scan import scan_command

logger = logging.getLogger("sbtanalyzer.cli")


def setup_logging(verbose: bool = False, console: Optional[Console] = None) -> None:
    """Setup logging configuration with Rich integration.

    Args:
        verbose: Enable verbose logging.
        console: Rich Console instance for coordinated output (optional).
    """
    if verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING

    handler = RichHandler(
        console=console,
        show_time=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
        tracebacks_show_locals=verbose,
        log_time_format="[%H:%M:%S]",
    )

    logging.basicConfig(
        level=level,
        format="[%(name)s] %(message)s",
        handlers=[handler],
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sbtanalyzer",
        description="sbtanalyzer - sbt dependency extraction",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    scan_parser = subparsers.add_parser(
        "scan",
        help="Extract dependencies from an sbt project",
    )
    scan_parser.add_argument(
        "source",
        help="Root directory of the sbt project",
    )
    scan_parser.add_argument(
        "-o",
        "--output",
        help="Write the result as JSON to this file",
    )
    scan_parser.add_argument(
        "-c",
        "--config",
        help=(
            "Optional configuration. Can be a path to a TOML/JSON file or an "
            "inline TOML/JSON string. When omitted, built-in defaults are used."
        ),
    )
    scan_parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Do not print the dependency table",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point.

    Returns:
        int: Exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    console = Console()
    setup_logging(args.verbose, console=Console(stderr=True))

    if args.command == "scan":
        return scan_command(args, console=console)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
