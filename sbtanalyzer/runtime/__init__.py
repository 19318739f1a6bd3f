"""Project-level extraction driver."""

from sbtanalyzer.runtime.resolver import (
    LocalFileReader,
    ProjectState,
    extract_all_package_files,
)

__all__ = ["LocalFileReader", "ProjectState", "extract_all_package_files"]
