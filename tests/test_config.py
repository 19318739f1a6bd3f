"""Configuration loading tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from sbtanalyzer.config import AnalyzerConfig, SbtExtractConfig
from sbtanalyzer.config.loader import load_config
from sbtanalyzer.config.schema import MAVEN_CENTRAL_URL, SBT_PLUGINS_REPO
from sbtanalyzer.parsers.base import ConfigurationError


def test_defaults() -> None:
    config = load_config(None)

    assert isinstance(config, AnalyzerConfig)
    assert config.sbt.default_registry_url == MAVEN_CENTRAL_URL
    assert config.sbt.plugin_registry_url == SBT_PLUGINS_REPO
    assert config.sbt.max_tree_depth == 32
    assert "plugin_tree_depth" not in SbtExtractConfig.model_fields
    assert "*.sbt" in config.detector.include_patterns


def test_load_from_dict() -> None:
    config = load_config({"sbt": {"default_registry_url": "https://mirror.example.com/m2/"}})
    # Trailing slashes are stripped
    assert config.sbt.default_registry_url == "https://mirror.example.com/m2"


def test_load_from_toml_file(tmp_path: Path) -> None:
    path = tmp_path / "sbtanalyzer.toml"
    path.write_text(
        '[sbt]\nmax_tree_depth = 8\n\n[detector]\ninclude_patterns = ["*.sbt"]\n',
        encoding="utf-8",
    )

    config = load_config(path)
    assert config.sbt.max_tree_depth == 8
    assert config.detector.include_patterns == ["*.sbt"]


def test_load_from_json_file_given_as_string(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"sbt": {"project_dir": "build"}}), encoding="utf-8")

    config = load_config(str(path))
    assert config.sbt.project_dir == "build"


def test_load_inline_strings() -> None:
    assert load_config('{"sbt": {"max_tree_depth": 2}}').sbt.max_tree_depth == 2
    assert load_config("[sbt]\nmax_tree_depth = 3\n").sbt.max_tree_depth == 3


def test_inline_toml_with_leading_table_header() -> None:
    config = load_config(
        '[sbt]\nproject_dir = "meta"\n\n[detector]\ninclude_patterns = ["*.sbt"]\n'
    )
    assert config.sbt.project_dir == "meta"
    assert config.detector.include_patterns == ["*.sbt"]


@pytest.mark.parametrize(
    "source",
    [
        '{"sbt": ',
        "[sbt\n",
        "[1, 2]",
        {"sbt": {"default_registry_url": "repo.example.com"}},
        {"sbt": {"max_tree_depth": 0}},
        {"sbt": {"project_dir": "a/b"}},
    ],
)
def test_invalid_configuration(source) -> None:
    with pytest.raises(ConfigurationError):
        load_config(source)


def test_unsupported_source_type() -> None:
    with pytest.raises(TypeError):
        load_config(42)  # type: ignore[arg-type]


def test_round_trip_dict() -> None:
    data = AnalyzerConfig.default().to_dict()
    assert AnalyzerConfig.from_dict(data).sbt == SbtExtractConfig()
