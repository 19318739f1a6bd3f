"""Dependency declaration types and models.

Core types shared by the sbt extractor and the project driver. Parsers emit
``DependencyDeclaration`` objects; the driver groups them into a mapping keyed
by the file a later rewrite step would edit.
"""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Tuple


class Datasource(str, Enum):
    """Where the update pipeline looks up new versions of a dependency."""

    MAVEN = "maven"
    SBT_PACKAGE = "sbt-package"
    SBT_PLUGIN = "sbt-plugin"
    GITHUB_RELEASES = "github-releases"


class DependencyKind(str, Enum):
    """Well-known dependency kind tags."""

    PLUGIN = "plugin"


@dataclass(frozen=True)
class Variable:
    """A string value bound to a name in a build file.

    Attributes:
        value: Literal string value.
        source_file: Build file that defines the variable.
        line_index: Zero-based line of the definition.
    """

    value: str
    source_file: str
    line_index: int


@dataclass(frozen=True)
class DependencyDeclaration:
    """A dependency discovered in a build file.

    Attributes:
        datasource: Lookup source for new versions.
        dep_name: Human-facing name (``group:artifact`` for libraries).
        package_name: Package identity, Scala-suffixed for ``%%`` deps.
        current_value: Declared version; None when a symbol did not resolve.
        versioning: Versioning scheme id when it differs from the default.
        dep_type: Kind tag (``plugin`` or a trailing qualifier like ``Test``).
        variable_name: Name of the variable holding the version, if any.
        group_name: Update group; mirrors ``variable_name``.
        registry_urls: Registries to query, ordered and de-duplicated.
        edit_file: File holding the version text when it differs from the
            declaring file.
        replace_string: Literal text a rewrite should replace.
        extract_version: Regex stripping tag decoration from upstream releases.
        separate_minor_patch: Whether minor and patch updates are separated.
    """

    datasource: Datasource
    dep_name: str
    package_name: str
    current_value: Optional[str] = None
    versioning: Optional[str] = None
    dep_type: Optional[str] = None
    variable_name: Optional[str] = None
    group_name: Optional[str] = None
    registry_urls: Tuple[str, ...] = field(default_factory=tuple)
    edit_file: Optional[str] = None
    replace_string: Optional[str] = None
    extract_version: Optional[str] = None
    separate_minor_patch: bool = False

    @property
    def unique_key(self) -> Tuple[str, Optional[str]]:
        """Key used to collapse duplicates within one edit-target file."""
        return (self.package_name, self.current_value)

    @property
    def is_plugin(self) -> bool:
        return self.dep_type == DependencyKind.PLUGIN.value

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-friendly dict, dropping unset fields."""
        data = asdict(self)
        data["datasource"] = self.datasource.value
        data["registry_urls"] = list(self.registry_urls)
        return {
            key: value
            for key, value in data.items()
            if value is not None and value is not False
        }


def unique_urls(urls: Iterable[str]) -> Tuple[str, ...]:
    """Drop repeated URLs while keeping first-seen order."""
    return tuple(dict.fromkeys(urls))


__all__ = [
    "Datasource",
    "DependencyKind",
    "Variable",
    "DependencyDeclaration",
    "unique_urls",
]
