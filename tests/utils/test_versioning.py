"""Tests for version and URL helpers."""

from __future__ import annotations

import pytest

from sbtanalyzer.utils.validation import validate_url
from sbtanalyzer.utils.versioning import get_major, normalize_scala_version


@pytest.mark.parametrize(
    "version, expected",
    [
        ("2.13.12", 2),
        ("3.3.1", 3),
        ("3.0.0-RC1", 3),
        ("2.13.0-M5", 2),
        ("v1.9.7", 1),
        ("", None),
        ("latest", None),
    ],
)
def test_get_major(version: str, expected) -> None:
    assert get_major(version) == expected


@pytest.mark.parametrize(
    "version, expected",
    [
        ("2.13.12", "2.13"),
        ("2.12.18", "2.12"),
        ("2.10.7", "2.10"),
        ("3.3.1", "3"),
        ("2.9.3", "2.9.3"),
        ("2.13.0-M5", "2.13.0-M5"),
        ("2.13", "2.13"),
    ],
)
def test_normalize_scala_version(version: str, expected: str) -> None:
    assert normalize_scala_version(version) == expected


@pytest.mark.parametrize(
    "url",
    [
        "https://repo.example.com/maven",
        "http://localhost:8081/repository/maven-public",
        "ftp://mirror.example.org/pub",
    ],
)
def test_validate_url_accepts_registries(url: str) -> None:
    assert validate_url(url) is True


@pytest.mark.parametrize(
    "url",
    [
        "",
        "not a url",
        "file:///home/me/.ivy2/local",
        " https://repo.example.com",
        "https://repo.example.com:99999",
        "s3://bucket/path",
    ],
)
def test_validate_url_rejects_unusable(url: str) -> None:
    assert validate_url(url) is False
