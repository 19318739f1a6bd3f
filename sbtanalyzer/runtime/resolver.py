"""Two-phase project driver for sbt dependency extraction.

Phase 1 (global pass) reads ``project/`` files and root files to collect
project-wide variables, resolvers and the Scala version. Phase 2 (group pass)
extracts every file, grouped by directory: files of one directory share a
local variable table, with the global table as a read-only fallback.
Dependencies are finally grouped by the file a version update would edit and
de-duplicated per file.
"""

# A file that cannot be read or parsed is logged and skipped.


from __future__ import annotations

import logging
import posixpath
from dataclasses import dataclass, field, replace
from pathlib import Path
from types import MappingProxyType
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from sbtanalyzer.config.schema import SbtExtractConfig
from sbtanalyzer.core.dependency import DependencyDeclaration, Variable, unique_urls
from sbtanalyzer.parsers.sbt.context import VariableTable
from sbtanalyzer.parsers.sbt.extract import extract_file

logger = logging.getLogger("sbtanalyzer.runtime.resolver")

FileReader = Callable[[str], Optional[str]]
GroupedContent = Dict[str, List[Tuple[str, str]]]
ExtractResult = Dict[str, List[DependencyDeclaration]]

ROOT_GROUP = "."


class LocalFileReader:
    """Read package files relative to a project root as UTF-8 text.

    Unreadable files yield None, which the driver treats as empty.
    """

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def __call__(self, package_file: str) -> Optional[str]:
        path = self.root / package_file
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.debug("Cannot read %s: %s", path, exc)
            return None


@dataclass
class ProjectState:
    """Result of the global pass.

    Attributes:
        global_vars: Variables from ``project/`` and root files, later files
            overriding earlier ones.
        registry_urls: Default registry followed by every resolver found, in
            file order; duplicates are kept.
        scala_version: Last Scala version seen; root overrides ``project/``.
    """

    global_vars: Dict[str, Variable] = field(default_factory=dict)
    registry_urls: List[str] = field(default_factory=list)
    scala_version: Optional[str] = None


def group_of(package_file: str) -> str:
    """Directory group of a package file; ``"."`` for root files."""
    return posixpath.dirname(package_file) or ROOT_GROUP


def read_package_files(package_files: Iterable[str], read_file: FileReader) -> GroupedContent:
    """Read files and group them by containing directory, keeping input order."""
    grouped: GroupedContent = {}
    for package_file in package_files:
        try:
            content = read_file(package_file)
        except Exception as exc:  # noqa: BLE001 - reader is an external collaborator
            logger.warning("Failed to read %s: %s", package_file, exc)
            content = None
        if not content:
            logger.debug("packageFile has no content: %s", package_file)
            continue
        grouped.setdefault(group_of(package_file), []).append((package_file, content))
    return grouped


def prepare_project_state(
    files: Iterable[Tuple[str, str]],
    config: Optional[SbtExtractConfig] = None,
) -> ProjectState:
    """Run the global pass over ``project/`` files followed by root files.

    Each file is extracted with the running global table as its local
    table, so a later definition of the same name replaces an earlier one.
    """
    config = config or SbtExtractConfig()
    state = ProjectState(registry_urls=[config.default_registry_url])

    for package_file, content in files:
        res = extract_file(
            content,
            package_file,
            local_vars=state.global_vars,
            global_vars={},
            config=config,
        )
        if res is None:
            continue
        if res.local_vars is not state.global_vars:
            state.global_vars.update(res.local_vars)
        # The context starts with the default registry; the rest was declared here
        state.registry_urls.extend(res.registry_urls[1:])
        if res.scala_version:
            state.scala_version = res.scala_version

    logger.debug(
        "Global pass: %d variable(s), %d registry url(s), scala=%s",
        len(state.global_vars),
        len(state.registry_urls),
        state.scala_version,
    )
    return state


def extract_group(
    files: Iterable[Tuple[str, str]],
    state: ProjectState,
    config: Optional[SbtExtractConfig] = None,
) -> List[Tuple[str, DependencyDeclaration]]:
    """Extract one directory group.

    The group owns a fresh local table threaded through its files in order,
    so a variable defined in one file is visible to the files after it.

    Returns:
        ``(edit_file, dependency)`` pairs in discovery order.
    """
    config = config or SbtExtractConfig()
    local_vars: VariableTable = {}
    global_vars = MappingProxyType(state.global_vars)
    collected: List[Tuple[str, DependencyDeclaration]] = []

    for package_file, content in files:
        res = extract_file(
            content,
            package_file,
            local_vars=local_vars,
            global_vars=global_vars,
            registry_urls=state.registry_urls,
            scala_version=state.scala_version,
            config=config,
        )
        if res is None:
            continue
        for dep in res.deps:
            dep = replace(dep, registry_urls=unique_urls(dep.registry_urls))
            collected.append((dep.edit_file or package_file, dep))

    return collected


def deduplicate(deps: Iterable[DependencyDeclaration]) -> List[DependencyDeclaration]:
    """Keep the first dependency per (package_name, current_value)."""
    seen = set()
    unique: List[DependencyDeclaration] = []
    for dep in deps:
        if dep.unique_key in seen:
            continue
        seen.add(dep.unique_key)
        unique.append(dep)
    return unique


def extract_all_package_files(
    package_files: Iterable[str],
    read_file: FileReader,
    config: Optional[SbtExtractConfig] = None,
) -> Optional[ExtractResult]:
    """Extract dependencies from every sbt file of one project.

    Args:
        package_files: File paths relative to the project root, in a stable
            order (detection order).
        read_file: Callable returning a file's text, or None when missing.
        config: Extractor settings.

    Returns:
        Mapping of edit-target file to its de-duplicated dependencies, or
        None when nothing was found.
    """
    config = config or SbtExtractConfig()
    grouped = read_package_files(package_files, read_file)

    state = prepare_project_state(
        [
            *grouped.get(config.project_dir, []),
            *grouped.get(ROOT_GROUP, []),
        ],
        config,
    )

    deps_by_file: Dict[str, List[DependencyDeclaration]] = {}
    for group, files in grouped.items():
        logger.debug("Extracting group %s (%d file(s))", group, len(files))
        for edit_file, dep in extract_group(files, state, config):
            deps_by_file.setdefault(edit_file, []).append(dep)

    result = {
        package_file: deduplicate(deps)
        for package_file, deps in deps_by_file.items()
    }
    if not result:
        logger.debug("No sbt dependencies found")
        return None

    logger.info(
        "Extracted %d dependency(ies) across %d file(s)",
        sum(len(deps) for deps in result.values()),
        len(result),
    )
    return result


__all__ = [
    "LocalFileReader",
    "ProjectState",
    "group_of",
    "read_package_files",
    "prepare_project_state",
    "extract_group",
    "deduplicate",
    "extract_all_package_files",
]
