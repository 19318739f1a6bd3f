"""sbt ecosystem: tokenizer, matcher, grammar, extraction and detection."""

from sbtanalyzer.parsers.sbt.detector import SbtDetector
from sbtanalyzer.parsers.sbt.extract import extract_file, is_build_properties

__all__ = ["SbtDetector", "extract_file", "is_build_properties"]
