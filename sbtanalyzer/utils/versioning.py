"""Version helpers for Scala/Maven style version strings."""

import logging
import re
from typing import Optional

from packaging.version import InvalidVersion, Version

logger = logging.getLogger("sbtanalyzer.utils.versioning")

_LEADING_NUMBER_RE = re.compile(r"^v?(\d+)")
_PLAIN_RELEASE_RE = re.compile(r"^(\d+)\.(\d+)\.\d+$")

# Scala binary versions are major.minor from 2.10 on; Scala 3 uses the major.
_BINARY_MINOR_FROM = Version("2.10.0")
_BINARY_MAJOR_FROM = Version("3.0.0")


def get_major(version: str) -> Optional[int]:
    """Return the major component of a version string.

    Maven qualifiers such as ``-M5`` or ``-RC1`` are not PEP 440, so fall back
    to the leading number when ``packaging`` rejects the string.
    """
    if not version:
        return None
    try:
        return Version(version).major
    except InvalidVersion:
        match = _LEADING_NUMBER_RE.match(version)
        return int(match.group(1)) if match else None


def normalize_scala_version(version: str) -> str:
    """Reduce a full Scala version to the binary version used in artifact names.

    ``2.13.12`` becomes ``2.13``, ``3.3.1`` becomes ``3``. Versions older
    than 2.10 and anything that is not a plain ``X.Y.Z`` release are
    returned unchanged.
    """
    if not version:
        return version
    match = _PLAIN_RELEASE_RE.match(version)
    if not match:
        return version
    parsed = Version(version)
    if parsed >= _BINARY_MAJOR_FROM:
        return match.group(1)
    if parsed >= _BINARY_MINOR_FROM:
        return f"{match.group(1)}.{match.group(2)}"
    return version


__all__ = ["get_major", "normalize_scala_version"]
