"""File scanner using scandir and generator pattern."""

import fnmatch
import logging
import os
from pathlib import Path
from typing import Generator, List, Optional

logger = logging.getLogger("sbtanalyzer.utils.scanner")

_ALWAYS_IGNORED = [".git", ".svn", ".hg", ".bsp", ".idea", "__pycache__"]


def load_gitignore_patterns(root_path: Path) -> List[str]:
    """Load patterns from .gitignore in the root path."""
    gitignore = root_path / ".gitignore"
    patterns = []
    if gitignore.exists():
        try:
            with open(gitignore, "r", encoding="utf-8") as f:
                for line in f:
                    line = line.strip()
                    # Negations are not supported; skipping them keeps files visible
                    if line and not line.startswith(("#", "!")):
                        patterns.append(line.lstrip("/"))
        except (OSError, UnicodeDecodeError) as exc:
            logger.debug("Failed to read .gitignore at %s: %s", gitignore, exc)
    return patterns


def _is_ignored(path: Path, root_path: Path, ignore_patterns: List[str]) -> bool:
    """Check if path matches any ignore pattern.

    This is a simplified implementation of gitignore logic.
    It checks the relative path against glob patterns.
    """
    rel_path = path.relative_to(root_path)
    str_path = str(rel_path).replace(os.sep, "/")

    for pattern in ignore_patterns:
        # Handle directory matches (ending with /)
        if pattern.endswith("/"):
            if not path.is_dir():
                continue
            p = pattern.rstrip("/")
            if fnmatch.fnmatch(str_path, p) or fnmatch.fnmatch(str_path, f"**/{p}"):
                return True
            continue

        if fnmatch.fnmatch(str_path, pattern) or fnmatch.fnmatch(
            str_path, f"**/{pattern}"
        ):
            return True

    return False


def _matches(str_path: str, name: str, patterns: List[str]) -> bool:
    for pattern in patterns:
        if "/" not in pattern:
            if fnmatch.fnmatch(name, pattern):
                return True
            continue
        # Directory-qualified patterns match the trailing segments of the path,
        # so 'project/*.scala' also selects 'sub/project/Deps.scala'.
        parts = str_path.split("/")
        depth = pattern.count("/") + 1
        if len(parts) >= depth and fnmatch.fnmatch(
            "/".join(parts[-depth:]), pattern
        ):
            return True
    return False


def scan_files(
    root_path: Path,
    patterns: List[str],
    ignore_patterns: Optional[List[str]] = None,
    recursive: bool = True,
) -> Generator[Path, None, None]:
    """Scan files matching patterns, respecting ignores.

    Files are yielded in a deterministic order: within a directory files come
    first in name order, then subdirectories are walked in name order.

    Args:
        root_path: Root directory to scan.
        patterns: Glob patterns to include (e.g. ['*.sbt', 'project/*.scala']).
        ignore_patterns: List of glob patterns to ignore.
        recursive: Whether to scan recursively.

    Yields:
        Path objects for matching files.
    """
    root_path = root_path.resolve()
    ignores = (ignore_patterns or []) + _ALWAYS_IGNORED

    stack = [root_path]

    while stack:
        current_dir = stack.pop()

        try:
            # Sort for deterministic order
            entries = sorted(os.scandir(current_dir), key=lambda e: e.name)
        except (PermissionError, FileNotFoundError):
            continue

        dirs = []
        files = []

        for entry in entries:
            path = Path(entry.path)

            if _is_ignored(path, root_path, ignores):
                continue

            if entry.is_dir():
                if recursive:
                    dirs.append(path)
            else:
                files.append(path)

        # Add dirs to stack (reversed to maintain order when popping)
        stack.extend(reversed(dirs))

        for file_path in files:
            rel_path = file_path.relative_to(root_path)
            str_path = str(rel_path).replace(os.sep, "/")
            if _matches(str_path, file_path.name, patterns):
                yield file_path
