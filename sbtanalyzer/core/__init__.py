"""Core data model shared by parsers, the project driver and exporters."""

from sbtanalyzer.core.dependency import (
    Datasource,
    DependencyDeclaration,
    DependencyKind,
    Variable,
    unique_urls,
)

__all__ = [
    "Datasource",
    "DependencyKind",
    "Variable",
    "DependencyDeclaration",
    "unique_urls",
]
