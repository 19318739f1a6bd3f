"""Helpers for loading analyzer configuration from TOML/JSON sources.

This module provides a single entry point `load_config` that accepts
various configuration sources:

* None -> default AnalyzerConfig
* dict -> AnalyzerConfig.from_dict
* Path / path-like string -> load .toml/.json from filesystem
* Inline JSON/TOML strings
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError

from sbtanalyzer.config.schema import AnalyzerConfig
from sbtanalyzer.parsers.base import ConfigurationError

logger = logging.getLogger("sbtanalyzer.config.loader")

ConfigSource = Union[str, Path, Dict[str, Any], None]


def _parse_toml(text: str) -> Dict[str, Any]:
    """Parse TOML text into a dict.

    Uses stdlib tomllib on Python 3.11+ and falls back to `tomli` on older
    interpreters.
    """
    try:
        import tomllib  # type: ignore[attr-defined]
    except ImportError:  # pragma: no cover - Python <3.11 path
        import tomli as tomllib  # type: ignore[import-not-found,no-redef]
    return tomllib.loads(text)


def _detect_format(text: str) -> str:
    stripped = text.lstrip()
    if stripped.startswith("{"):
        return "json"
    if stripped.startswith("["):
        # A TOML table header also opens with "["
        try:
            json.loads(stripped)
        except json.JSONDecodeError:
            return "toml"
        return "json"
    return "toml"


def load_config(source: ConfigSource) -> AnalyzerConfig:
    """Load AnalyzerConfig from various configuration sources.

    Args:
        source: One of:
            * None: returns AnalyzerConfig.default()
            * dict: treated as already-parsed configuration mapping
            * str/Path: either a filesystem path to a .toml/.json file,
              or an inline TOML/JSON string (auto-detected)

    Returns:
        AnalyzerConfig instance.

    Raises:
        ConfigurationError: If the source cannot be parsed or validated.
    """
    if source is None:
        logger.debug("No config source provided; using default AnalyzerConfig")
        return AnalyzerConfig.default()

    if isinstance(source, dict):
        logger.debug("Loading AnalyzerConfig from provided dict")
        return _validate(source)

    if not isinstance(source, (str, Path)):
        raise TypeError(f"Unsupported config source type: {type(source)!r}")

    path = Path(source)
    text: Optional[str] = None
    fmt: Optional[str] = None

    if isinstance(source, Path) or (len(str(source)) < 4096 and path.is_file()):
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigurationError(f"Cannot read config file {path}: {exc}") from exc
        suffix = path.suffix.lower()
        if suffix in {".toml", ".tml"}:
            fmt = "toml"
        elif suffix == ".json":
            fmt = "json"
        else:
            fmt = _detect_format(text)
        logger.info("Loading configuration from file: %s (fmt=%s)", path, fmt)
    else:
        text = str(source)
        fmt = _detect_format(text)
        logger.info("Loading configuration from inline %s string", fmt)

    try:
        if fmt == "json":
            data = json.loads(text)
        else:
            data = _parse_toml(text)
    except ValueError as exc:
        # json.JSONDecodeError and tomllib.TOMLDecodeError are ValueErrors
        raise ConfigurationError(f"Malformed {fmt} configuration: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigurationError("Top-level configuration must be a mapping/dict")

    return _validate(data)


def _validate(data: Dict[str, Any]) -> AnalyzerConfig:
    try:
        return AnalyzerConfig.from_dict(data)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration: {exc}") from exc


__all__ = ["load_config", "ConfigSource"]
