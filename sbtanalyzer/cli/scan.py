"""Scan command implementation."""

# CLI must gracefully handle unexpected failures to present user-friendly errors.


import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.table import Table

from sbtanalyzer.config.loader import load_config
from sbtanalyzer.export.json import export_json
from sbtanalyzer.parsers.base import RecoverableError
from sbtanalyzer.parsers.sbt.detector import SbtDetector
from sbtanalyzer.runtime.resolver import (
    ExtractResult,
    LocalFileReader,
    extract_all_package_files,
)

logger = logging.getLogger("sbtanalyzer.cli.scan")

RECOVERABLE_SCAN_ERRORS = (
    RecoverableError,
    json.JSONDecodeError,
    OSError,
    RuntimeError,
    ValueError,
)


def scan_command(args, console: Optional[Console] = None) -> int:
    """Execute scan command.

    Args:
        args: Parsed command-line arguments.
        console: Rich console for the result table.

    Returns:
        int: Exit code.
    """
    try:
        return _scan_command_impl(args, console or Console())
    except RECOVERABLE_SCAN_ERRORS as e:
        # Print to stderr directly to ensure it's visible even if logging is broken
        print(f"\n{'=' * 70}", file=sys.stderr)
        print("FATAL ERROR in scan_command:", file=sys.stderr)
        print(f"{'=' * 70}", file=sys.stderr)
        print(f"Exception: {e}", file=sys.stderr)
        print("\nTraceback:", file=sys.stderr)
        traceback.print_exc(file=sys.stderr)
        print(f"{'=' * 70}\n", file=sys.stderr)
        return 1


def _scan_command_impl(args, console: Console) -> int:
    root = Path(args.source).expanduser()
    if not root.is_dir():
        logger.error("Source directory does not exist: %s", root)
        return 2

    config = load_config(getattr(args, "config", None))
    logger.debug("=== sbtanalyzer scan ===")
    logger.debug("Source: %s", root)

    package_files = SbtDetector(root, config.detector).detect()
    result = extract_all_package_files(
        package_files, LocalFileReader(root), config.sbt
    )

    output = getattr(args, "output", None)
    if output:
        export_json(result, Path(output))

    if result is None:
        logger.warning("No sbt dependencies found under %s", root)
        console.print(f"No sbt dependencies found in {len(package_files)} file(s).")
        return 0

    if not getattr(args, "quiet", False):
        console.print(render_table(result))
    return 0


def render_table(result: ExtractResult) -> Table:
    """Build a rich table listing dependencies per edit-target file."""
    table = Table(title="sbt dependencies")
    table.add_column("File", style="cyan")
    table.add_column("Package")
    table.add_column("Version", style="green")
    table.add_column("Datasource")
    table.add_column("Kind")
    table.add_column("Variable")

    for package_file, deps in result.items():
        for dep in deps:
            table.add_row(
                package_file,
                dep.package_name,
                dep.current_value or "?",
                dep.datasource.value,
                dep.dep_type or "",
                dep.variable_name or "",
            )
    return table
