"""State threaded through one sbt file pass."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, Mapping, Optional, Tuple

from sbtanalyzer.core.dependency import DependencyDeclaration, Variable

VariableTable = Dict[str, Variable]


def last_dot_segment(name: str) -> str:
    """``Versions.akka`` -> ``akka``.

    Two qualifiers sharing a final segment resolve to the same variable; the
    matcher does not track which object a ``val`` was declared in.
    """
    return name.rsplit(".", 1)[-1]


@dataclass(frozen=True)
class Scratch:
    """Transient fields collected while one declaration is being matched."""

    group_id: Optional[str] = None
    artifact_id: Optional[str] = None
    current_value: Optional[str] = None
    current_var_name: Optional[str] = None
    dep_type: Optional[str] = None
    use_scala_version: bool = False
    variable_name: Optional[str] = None
    variable_file: Optional[str] = None


@dataclass(frozen=True, eq=False)
class ExtractionContext:
    """Accumulated result and scratch state of a single file pass.

    The context is a value: handlers return updated copies. ``local_vars`` is
    the one shared mutable table, owned by the caller for the duration of a
    directory group; ``global_vars`` is read-only.

    Attributes:
        package_file: File being extracted.
        global_vars: Project-wide variables from the global pass.
        local_vars: Variables visible within the current directory group.
        deps: Dependencies emitted so far, in source order.
        registry_urls: Inherited registries followed by resolvers found here.
        scala_version: Normalized Scala binary version, if known.
        package_file_version: Value of the build's own ``version`` setting.
        scratch: Fields of the declaration currently being matched.
    """

    package_file: str
    global_vars: Mapping[str, Variable]
    local_vars: VariableTable
    deps: Tuple[DependencyDeclaration, ...] = ()
    registry_urls: Tuple[str, ...] = ()
    scala_version: Optional[str] = None
    package_file_version: Optional[str] = None
    scratch: Scratch = field(default_factory=Scratch)

    def lookup(self, name: str) -> Optional[Variable]:
        """Resolve a symbol: last dot segment, local table, then global."""
        key = last_dot_segment(name)
        if key in self.local_vars:
            return self.local_vars[key]
        return self.global_vars.get(key)

    def with_scratch(self, **changes) -> "ExtractionContext":
        return replace(self, scratch=replace(self.scratch, **changes))

    def reset_scratch(self) -> "ExtractionContext":
        return replace(self, scratch=Scratch())

    def push_dependency(self, dep: DependencyDeclaration) -> "ExtractionContext":
        """Append a completed dependency and clear the scratch fields."""
        return replace(self, deps=self.deps + (dep,), scratch=Scratch())

    def add_registry_url(self, url: str) -> "ExtractionContext":
        return replace(self, registry_urls=self.registry_urls + (url,))


__all__ = ["VariableTable", "Scratch", "ExtractionContext", "last_dot_segment"]
