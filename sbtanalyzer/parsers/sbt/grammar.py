"""sbt dependency grammar.

Declarations recognised, in the order they are tried at each position:

1. ``scalaVersion := "2.13.12"`` (or a variable)
2. ``version := "1.0.0"`` (or a variable)
3. ``"group" % "artifact" % "version"`` with ``%%`` / ``%%%`` variants, an
   optional ``[lazy] val x =`` prefix and an optional kind qualifier
4. ``addSbtPlugin(...)`` / ``addCompilerPlugin(...)``
5. ``resolvers += "name" at "url"`` and ``resolvers ++= Seq(...)``
6. ``[lazy] val x[: String] = "value"`` and ``x := "value"``

Dependency rules are tried before plain variable definitions so that
``val circe = "io.circe" %% "circe-core" % "0.14.6"`` is read as a dependency
rather than as a variable named ``circe`` holding ``"io.circe"``.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from functools import lru_cache

from sbtanalyzer.config.schema import SBT_PLUGINS_REPO
from sbtanalyzer.core.dependency import (
    Datasource,
    DependencyDeclaration,
    DependencyKind,
    Variable,
)
from sbtanalyzer.parsers.sbt.context import ExtractionContext, last_dot_segment
from sbtanalyzer.parsers.sbt.query import (
    RootQuery,
    Rule,
    alt,
    op,
    opt,
    regex,
    seq,
    string,
    sym,
    tree,
)
from sbtanalyzer.parsers.sbt.tokens import Token
from sbtanalyzer.utils.validation import validate_url
from sbtanalyzer.utils.versioning import get_major, normalize_scala_version

logger = logging.getLogger("sbtanalyzer.parsers.sbt.grammar")

SCALA_LIBRARY = "org.scala-lang:scala-library"
SCALA3_LIBRARY = "org.scala-lang:scala3-library_3"


# -----------------------------------------------------------------------------
# Token handlers
# -----------------------------------------------------------------------------


def _capture(field_name: str):
    def handler(ctx: ExtractionContext, token: Token) -> ExtractionContext:
        return ctx.with_scratch(**{field_name: token.value})

    return handler


def _resolve(field_name: str):
    def handler(ctx: ExtractionContext, token: Token) -> ExtractionContext:
        variable = ctx.lookup(token.value)
        if variable is None:
            return ctx
        return ctx.with_scratch(**{field_name: variable.value})

    return handler


def _resolve_version(ctx: ExtractionContext, token: Token) -> ExtractionContext:
    variable = ctx.lookup(token.value)
    if variable is None:
        logger.debug(
            "Unresolved version symbol %s in %s:%d",
            token.value,
            ctx.package_file,
            token.line,
        )
        return ctx
    return ctx.with_scratch(
        current_value=variable.value,
        variable_name=last_dot_segment(token.value),
        variable_file=variable.source_file,
    )


def _use_scala_version(ctx: ExtractionContext, token: Token) -> ExtractionContext:
    return ctx.with_scratch(use_scala_version=True)


def _store_variable(ctx: ExtractionContext, token: Token) -> ExtractionContext:
    name = ctx.scratch.current_var_name
    if name:
        ctx.local_vars[name] = Variable(
            value=token.value,
            source_file=ctx.package_file,
            line_index=token.line - 1,
        )
    return ctx.reset_scratch()


def _add_registry_url(ctx: ExtractionContext, token: Token) -> ExtractionContext:
    if validate_url(token.value):
        return ctx.add_registry_url(token.value)
    return ctx


# -----------------------------------------------------------------------------
# Completion handlers
# -----------------------------------------------------------------------------


def _emit_scala_dependency(ctx: ExtractionContext) -> ExtractionContext:
    scala_version = ctx.scratch.current_value
    if not scala_version:
        return ctx.reset_scratch()

    package_name = SCALA_LIBRARY
    if get_major(scala_version) == 3:
        package_name = SCALA3_LIBRARY

    dep = DependencyDeclaration(
        datasource=Datasource.MAVEN,
        dep_name="scala",
        package_name=package_name,
        current_value=scala_version,
        separate_minor_patch=True,
    )
    ctx = replace(ctx, scala_version=normalize_scala_version(scala_version))
    return ctx.push_dependency(dep)


def _store_package_file_version(ctx: ExtractionContext) -> ExtractionContext:
    version = ctx.scratch.current_value
    if version:
        ctx = replace(ctx, package_file_version=version)
    return ctx.reset_scratch()


def _mark_plugin(ctx: ExtractionContext) -> ExtractionContext:
    return ctx.with_scratch(dep_type=DependencyKind.PLUGIN.value)


def _emit_dependency(ctx: ExtractionContext) -> ExtractionContext:
    scratch = ctx.scratch
    if not scratch.group_id or not scratch.artifact_id:
        logger.debug(
            "Skipping dependency with unresolved coordinates in %s", ctx.package_file
        )
        return ctx.reset_scratch()

    dep_name = f"{scratch.group_id}:{scratch.artifact_id}"
    package_name = dep_name
    if scratch.use_scala_version and ctx.scala_version:
        package_name = f"{dep_name}_{ctx.scala_version}"

    datasource = Datasource.SBT_PACKAGE
    if scratch.dep_type == DependencyKind.PLUGIN.value:
        datasource = Datasource.SBT_PLUGIN

    dep = DependencyDeclaration(
        datasource=datasource,
        dep_name=dep_name,
        package_name=package_name,
        current_value=scratch.current_value,
        dep_type=scratch.dep_type,
        variable_name=scratch.variable_name,
        group_name=scratch.variable_name,
        edit_file=scratch.variable_file,
    )
    return ctx.push_dependency(dep)


def _registry_url_broadcaster(plugin_registry_url: str):
    def handler(ctx: ExtractionContext) -> ExtractionContext:
        deps = []
        for dep in ctx.deps:
            urls = ctx.registry_urls
            if dep.is_plugin:
                urls = urls + (plugin_registry_url,)
            deps.append(replace(dep, registry_urls=urls))
        return replace(ctx, deps=tuple(deps))

    return handler


# -----------------------------------------------------------------------------
# Rules
# -----------------------------------------------------------------------------


def _value_rule(resolver) -> Rule:
    return alt(
        string(_capture("current_value")),
        sym(handler=resolver),
    )


scala_version_match = seq(
    sym("scalaVersion"),
    op(":="),
    _value_rule(_resolve("current_value")),
).handle(_emit_scala_dependency)

package_file_version_match = seq(
    sym("version"),
    op(":="),
    _value_rule(_resolve("current_value")),
).handle(_store_package_file_version)

variable_name_match = seq(
    sym(handler=_capture("current_var_name")),
    opt(seq(op(":"), sym("String"))),
)

assignment_match = seq(sym("val"), variable_name_match, op("="))

variable_definition_match = seq(
    alt(
        seq(sym("lazy"), assignment_match),
        assignment_match,
        seq(variable_name_match, op(":=")),
    ),
    string(_store_variable),
)

group_id_match = alt(
    sym(handler=_resolve("group_id")),
    string(_capture("group_id")),
)

artifact_id_match = alt(
    sym(handler=_resolve("artifact_id")),
    string(_capture("artifact_id")),
)

version_match = alt(
    sym(handler=_resolve_version),
    string(_capture("current_value")),
)

simple_dependency_match = seq(
    group_id_match, op("%"), artifact_id_match, op("%"), version_match
)

versioned_dependency_match = seq(
    group_id_match,
    op("%%", _use_scala_version),
    artifact_id_match,
    op("%"),
    version_match,
)

cross_dependency_match = seq(
    group_id_match,
    op("%%%", _use_scala_version),
    artifact_id_match,
    op("%"),
    version_match,
)

dep_type_match = alt(
    seq(sym("classifier"), string(_capture("dep_type"))),
    seq(op("%"), sym(handler=_capture("dep_type"))),
    seq(op("%"), string(_capture("dep_type"))),
)

sbt_package_match = seq(
    opt(seq(opt(sym("lazy")), sym("val"), sym(), op("="))),
    alt(cross_dependency_match, simple_dependency_match, versioned_dependency_match),
    opt(dep_type_match),
).handle(_emit_dependency)

resolver_match = seq(string(), sym("at"), string(_add_registry_url))


sbt_plugin_match = (
    seq(
        sym(regex(r"addSbtPlugin|addCompilerPlugin")),
        tree(
            alt(simple_dependency_match, versioned_dependency_match),
            anchored=True,
            open_bracket="(",
        ),
    )
    .handle(_mark_plugin)
    .handle(_emit_dependency)
)


add_resolver_match = seq(
    sym("resolvers"),
    alt(
        seq(op("+="), resolver_match),
        seq(op("++="), sym("Seq"), tree(resolver_match, max_depth=2)),
    ),
)


@lru_cache(maxsize=16)
def build_query(
    max_tree_depth: int = 32,
    plugin_registry_url: str = SBT_PLUGINS_REPO,
) -> RootQuery:
    """Assemble the file-level query.

    Args:
        max_tree_depth: Bracket nesting searched for declarations.
        plugin_registry_url: Registry appended to every plugin dependency.
    """
    search = alt(
        scala_version_match,
        package_file_version_match,
        sbt_package_match,
        sbt_plugin_match,
        add_resolver_match,
        variable_definition_match,
    )
    return RootQuery(
        search,
        max_depth=max_tree_depth,
        post_handler=_registry_url_broadcaster(plugin_registry_url),
    )


__all__ = ["build_query", "SCALA_LIBRARY", "SCALA3_LIBRARY"]
