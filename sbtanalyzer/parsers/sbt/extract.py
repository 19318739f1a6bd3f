"""Single-file extraction pass for sbt build files."""

from __future__ import annotations

import logging
import re
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from sbtanalyzer.config.schema import SbtExtractConfig
from sbtanalyzer.core.dependency import Datasource, DependencyDeclaration, Variable
from sbtanalyzer.parsers.base import SAFE_EXCEPTIONS
from sbtanalyzer.parsers.sbt.context import ExtractionContext, VariableTable
from sbtanalyzer.parsers.sbt.grammar import build_query
from sbtanalyzer.parsers.sbt.tokens import tokenize

logger = logging.getLogger("sbtanalyzer.parsers.sbt.extract")

SBT_VERSION_RE = re.compile(r"sbt\.version *= *(?P<version>\d+\.\d+\.\d+)")
SBT_DEP_NAME = "sbt/sbt"
# sbt tags its GitHub releases as v1.9.7. Consumed by the update pipeline,
# hence the portable (?<name>...) group syntax.
SBT_EXTRACT_VERSION = r"^v(?<version>\S+)"
SEMVER_VERSIONING = "semver"


def is_build_properties(package_file: str, config: Optional[SbtExtractConfig] = None) -> bool:
    """Whether ``package_file`` is the meta-build's ``build.properties``."""
    config = config or SbtExtractConfig()
    name = f"{config.project_dir}/{config.build_properties_name}"
    return package_file == name or package_file.endswith(f"/{name}")


def _extract_sbt_version(
    content: str,
    package_file: str,
    config: SbtExtractConfig,
) -> Optional[ExtractionContext]:
    match = SBT_VERSION_RE.search(content)
    if not match:
        logger.debug("No sbt.version found in %s", package_file)
        return None

    dep = DependencyDeclaration(
        datasource=Datasource.GITHUB_RELEASES,
        dep_name=SBT_DEP_NAME,
        package_name=SBT_DEP_NAME,
        current_value=match.group("version"),
        versioning=SEMVER_VERSIONING,
        replace_string=match.group(0),
        extract_version=SBT_EXTRACT_VERSION,
    )
    return ExtractionContext(
        package_file=package_file,
        global_vars=MappingProxyType({}),
        local_vars={},
        deps=(dep,),
        registry_urls=(config.default_registry_url,),
    )


def extract_file(
    content: str,
    package_file: str,
    *,
    local_vars: Optional[VariableTable] = None,
    global_vars: Optional[Mapping[str, Variable]] = None,
    registry_urls: Iterable[str] = (),
    scala_version: Optional[str] = None,
    config: Optional[SbtExtractConfig] = None,
) -> Optional[ExtractionContext]:
    """Run the dependency matcher over one build file.

    Args:
        content: File text.
        package_file: Path of the file relative to the project root.
        local_vars: Group-scoped variable table; updated in place with the
            variables this file defines.
        global_vars: Project-wide variables, never modified.
        registry_urls: Registries inherited from the global pass.
        scala_version: Normalized Scala version known before this file.
        config: Extractor settings.

    Returns:
        The final context, or None when the file yields nothing usable
        (``build.properties`` without ``sbt.version``, or a parse failure).
    """
    config = config or SbtExtractConfig()

    if is_build_properties(package_file, config):
        return _extract_sbt_version(content, package_file, config)

    if global_vars is None:
        global_vars = {}
    ctx = ExtractionContext(
        package_file=package_file,
        global_vars=MappingProxyType(dict(global_vars)),
        local_vars=local_vars if local_vars is not None else {},
        registry_urls=(config.default_registry_url, *registry_urls),
        scala_version=scala_version,
    )
    query = build_query(
        config.max_tree_depth,
        config.plugin_registry_url,
    )

    try:
        return query.run(tokenize(content), ctx)
    except SAFE_EXCEPTIONS as exc:
        logger.warning("Sbt parsing error in %s: %s", package_file, exc)
        logger.debug("Parse failure details for %s", package_file, exc_info=True)
        return None


__all__ = ["extract_file", "is_build_properties", "SBT_VERSION_RE"]
