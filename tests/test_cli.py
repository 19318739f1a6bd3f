"""Tests for sbtanalyzer CLI entrypoints."""

from __future__ import annotations

import json
from pathlib import Path
from types import SimpleNamespace

import pytest
from rich.console import Console

import sbtanalyzer.main as main
from sbtanalyzer.cli.scan import scan_command


def _make_project(root: Path) -> None:
    (root / "project").mkdir()
    (root / "project" / "Dependencies.scala").write_text(
        'object Dependencies {\n  val catsVersion = "2.10.0"\n}\n', encoding="utf-8"
    )
    (root / "project" / "build.properties").write_text("sbt.version=1.9.7\n", encoding="utf-8")
    (root / "build.sbt").write_text(
        'scalaVersion := "2.13.12"\n'
        'libraryDependencies += "org.typelevel" %% "cats-core" % catsVersion\n',
        encoding="utf-8",
    )


def _args(source: Path, **overrides) -> SimpleNamespace:
    values = {"source": str(source), "output": None, "config": None, "quiet": False}
    values.update(overrides)
    return SimpleNamespace(**values)


def test_main_dispatches_scan_command(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Verify that `main` parses args and dispatches scan_command."""

    monkeypatch.setattr(main, "setup_logging", lambda *a, **k: None)

    captured: dict[str, object] = {}

    def fake_scan_command(args, console=None) -> int:
        captured["args"] = args
        return 0

    monkeypatch.setattr(main, "scan_command", fake_scan_command)

    exit_code = main.main(["scan", str(tmp_path), "-o", str(tmp_path / "deps.json"), "-q"])

    assert exit_code == 0
    parsed = captured["args"]
    assert parsed.source == str(tmp_path)
    assert parsed.output == str(tmp_path / "deps.json")
    assert parsed.quiet is True
    assert parsed.config is None


def test_main_requires_command(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    """Ensure missing subcommands make the CLI print help and fail."""

    monkeypatch.setattr(main, "setup_logging", lambda *a, **k: None)

    exit_code = main.main([])

    assert exit_code == 1
    assert "sbtanalyzer" in capsys.readouterr().out


def test_scan_writes_json(tmp_path: Path) -> None:
    project = tmp_path / "demo"
    project.mkdir()
    _make_project(project)
    output = tmp_path / "out" / "deps.json"

    exit_code = scan_command(_args(project, output=str(output), quiet=True), console=Console(record=True))

    assert exit_code == 0
    data = json.loads(output.read_text(encoding="utf-8"))
    assert [entry["packageFile"] for entry in data] == [
        "build.sbt",
        "project/Dependencies.scala",
        "project/build.properties",
    ]
    (cats,) = data[1]["deps"]
    assert cats == {
        "datasource": "sbt-package",
        "dep_name": "org.typelevel:cats-core",
        "package_name": "org.typelevel:cats-core_2.13",
        "current_value": "2.10.0",
        "variable_name": "catsVersion",
        "group_name": "catsVersion",
        "registry_urls": ["https://repo.maven.apache.org/maven2"],
        "edit_file": "project/Dependencies.scala",
    }


def test_scan_prints_table(tmp_path: Path) -> None:
    _make_project(tmp_path)
    console = Console(record=True, width=200)

    assert scan_command(_args(tmp_path), console=console) == 0

    text = console.export_text()
    assert "org.typelevel:cats-core_2.13" in text
    assert "sbt/sbt" in text
    assert "catsVersion" in text


def test_scan_without_dependencies(tmp_path: Path) -> None:
    (tmp_path / "build.sbt").write_text('name := "empty"\n', encoding="utf-8")
    console = Console(record=True, width=200)

    assert scan_command(_args(tmp_path), console=console) == 0
    assert "No sbt dependencies found" in console.export_text()


def test_scan_missing_source(tmp_path: Path) -> None:
    assert scan_command(_args(tmp_path / "missing"), console=Console(record=True)) == 2


def test_scan_reports_bad_config(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _make_project(tmp_path)

    exit_code = scan_command(
        _args(tmp_path, config='{"sbt": {"max_tree_depth": 0}}'),
        console=Console(record=True),
    )

    assert exit_code == 1
    assert "FATAL ERROR" in capsys.readouterr().err
