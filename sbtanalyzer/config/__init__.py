"""Analyzer configuration models and loaders."""

from sbtanalyzer.config.loader import load_config
from sbtanalyzer.config.schema import (
    MAVEN_CENTRAL_URL,
    SBT_PLUGINS_REPO,
    AnalyzerConfig,
    DetectorConfig,
    SbtExtractConfig,
)

__all__ = [
    "MAVEN_CENTRAL_URL",
    "SBT_PLUGINS_REPO",
    "AnalyzerConfig",
    "DetectorConfig",
    "SbtExtractConfig",
    "load_config",
]
