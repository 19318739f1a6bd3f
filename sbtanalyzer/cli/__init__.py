"""Command implementations for the sbtanalyzer CLI."""
