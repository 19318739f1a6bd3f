"""Parsers package.

Build-file parsers live in per-ecosystem subpackages; only sbt ships today.
"""

from sbtanalyzer.parsers.base import (
    ConfigurationError,
    DetectionError,
    ParseError,
    RecoverableError,
)

__all__ = [
    "RecoverableError",
    "ConfigurationError",
    "ParseError",
    "DetectionError",
]
