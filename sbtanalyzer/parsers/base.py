"""Shared error types and detector base class for build-file parsers.

Parsers catch the recoverable errors below at file boundaries so that one
malformed build file never aborts a whole project scan.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, List, Optional

logger = logging.getLogger("sbtanalyzer.parsers.base")


# =============================================================================
# Custom Exception Hierarchy
# =============================================================================

class RecoverableError(Exception):
    """Base class for recoverable business errors.

    These errors indicate expected failure conditions that can be handled
    gracefully by skipping the current item and continuing processing.
    """
    pass


class ConfigurationError(RecoverableError):
    """Analyzer configuration is malformed or contains invalid values."""
    pass


class ParseError(RecoverableError):
    """Build file parsing error - can skip current file and continue.

    Raised when a build file cannot be tokenized or matched, e.g. because of
    unbalanced brackets or an unterminated string literal.
    """
    pass


class DetectionError(RecoverableError):
    """Target detection error - can skip current directory and continue."""
    pass


# =============================================================================
# Exception Categories for Graceful Handling
# =============================================================================

# Data/lookup errors - recoverable when caused by malformed input
_DATA_ERRORS = (
    KeyError,
    IndexError,
)

# I/O errors - recoverable (file not found, permission denied, etc.)
_IO_ERRORS = (
    OSError,
    IOError,
)

# Caught around a single file pass; the file is skipped and the scan goes on.
SAFE_EXCEPTIONS = (
    _DATA_ERRORS
    + _IO_ERRORS
    + (RecoverableError, RuntimeError, ValueError, TypeError, AttributeError)
)


class BaseDetector(ABC):
    """Base class for target detectors.

    Detectors perform lightweight scanning to identify parsing targets
    (e.g., build.sbt, project/build.properties).
    """

    NAME: str = "base"
    ECOSYSTEM: str = "base"

    def __init__(self, workspace_root: Path, config: Optional[Any] = None) -> None:
        """Initialize detector.

        Args:
            workspace_root: Workspace root path.
            config: Optional per-ecosystem configuration slice.
        """
        self.workspace_root = workspace_root
        self.config = config
        logger.debug("Detector %s (%s) initialized", self.NAME, self.ECOSYSTEM)

    @abstractmethod
    def detect(self) -> List[str]:
        """Detect parsing targets in workspace.

        Returns:
            List[str]: Target paths relative to the workspace root.
        """
        raise NotImplementedError

    def scan_workspace(
        self,
        patterns: List[str],
        ignore_patterns: Optional[List[str]] = None,
        recursive: bool = True,
    ) -> List[Path]:
        """Scan workspace for files matching patterns.

        This helper uses the shared scanner that respects .gitignore.

        Args:
            patterns: List of glob patterns to match.
            ignore_patterns: Optional list of extra ignore patterns.
            recursive: Whether to scan recursively.

        Returns:
            List[Path]: List of matching file paths.
        """
        from sbtanalyzer.utils.scanner import load_gitignore_patterns, scan_files

        root_ignores = load_gitignore_patterns(self.workspace_root)
        if ignore_patterns:
            root_ignores.extend(ignore_patterns)

        return list(
            scan_files(
                self.workspace_root,
                patterns,
                ignore_patterns=root_ignores,
                recursive=recursive,
            )
        )


__all__ = [
    "RecoverableError",
    "ConfigurationError",
    "ParseError",
    "DetectionError",
    "SAFE_EXCEPTIONS",
    "BaseDetector",
]
