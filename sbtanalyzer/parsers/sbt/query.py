"""Composable token-pattern matcher.

A small PEG-style rule library working over the nodes produced by
:func:`sbtanalyzer.parsers.sbt.tokens.tokenize`. Each rule tries to match at a
position of a node sequence and, on success, returns the position after the
consumed nodes together with a new context value produced by its handlers.

Matching contract:

* ``Alt`` is an ordered choice. Branches are tried in declaration order and
  the first success is final: when a later rule of an enclosing ``Seq``
  fails, no other branch is retried.
* Handlers run only on success and receive the context produced by the
  previous rule of the sequence. A failed attempt never yields a context,
  so partial state cannot leak out of it.
* ``TreeMatch`` descends into bracket groups no deeper than its
  ``max_depth``; ``RootQuery`` bounds its search the same way.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from typing import Callable, Generic, Optional, Pattern, Sequence, Tuple, TypeVar, Union

from sbtanalyzer.parsers.sbt.tokens import OPERATOR, STRING, SYMBOL, Node, Token, Tree

logger = logging.getLogger("sbtanalyzer.parsers.sbt.query")

Ctx = TypeVar("Ctx")

TokenHandler = Callable[[Ctx, Token], Ctx]
ContextHandler = Callable[[Ctx], Ctx]
MatchResult = Optional[Tuple[int, Ctx]]


class Rule(ABC, Generic[Ctx]):
    """Base class for all matching rules."""

    @abstractmethod
    def match(self, nodes: Sequence[Node], pos: int, ctx: Ctx) -> MatchResult:
        """Try to match at ``nodes[pos]``.

        Returns:
            ``(next_pos, new_ctx)`` on success, ``None`` otherwise.
        """
        raise NotImplementedError

    def handle(self, handler: ContextHandler) -> "Rule[Ctx]":
        """Return a rule that runs ``handler`` after this rule succeeds."""
        return Handled(self, handler)


class TokenRule(Rule[Ctx]):
    """Match a single token of a given type, optionally by value."""

    token_type: str = ""

    def __init__(
        self,
        value: Union[str, Pattern[str], None] = None,
        handler: Optional[TokenHandler] = None,
    ) -> None:
        self.value = value
        self.handler = handler

    def _accepts(self, token: Token) -> bool:
        if self.value is None:
            return True
        if isinstance(self.value, str):
            return token.value == self.value
        return self.value.fullmatch(token.value) is not None

    def match(self, nodes: Sequence[Node], pos: int, ctx: Ctx) -> MatchResult:
        if pos >= len(nodes):
            return None
        node = nodes[pos]
        if not isinstance(node, Token) or node.type != self.token_type:
            return None
        if not self._accepts(node):
            return None
        if self.handler is not None:
            ctx = self.handler(ctx, node)
        return pos + 1, ctx

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.value!r})"


class Sym(TokenRule[Ctx]):
    token_type = SYMBOL


class Op(TokenRule[Ctx]):
    token_type = OPERATOR


class Str(TokenRule[Ctx]):
    token_type = STRING


class Seq(Rule[Ctx]):
    """Match rules left to right, threading the context."""

    def __init__(self, *rules: Rule[Ctx]) -> None:
        if not rules:
            raise ValueError("Seq requires at least one rule")
        self.rules = rules

    def match(self, nodes: Sequence[Node], pos: int, ctx: Ctx) -> MatchResult:
        for rule in self.rules:
            result = rule.match(nodes, pos, ctx)
            if result is None:
                return None
            pos, ctx = result
        return pos, ctx


class Alt(Rule[Ctx]):
    """Ordered choice: the first matching branch wins."""

    def __init__(self, *rules: Rule[Ctx]) -> None:
        if not rules:
            raise ValueError("Alt requires at least one rule")
        self.rules = rules

    def match(self, nodes: Sequence[Node], pos: int, ctx: Ctx) -> MatchResult:
        for rule in self.rules:
            result = rule.match(nodes, pos, ctx)
            if result is not None:
                return result
        return None


class Opt(Rule[Ctx]):
    """Zero or one occurrence of a rule."""

    def __init__(self, rule: Rule[Ctx]) -> None:
        self.rule = rule

    def match(self, nodes: Sequence[Node], pos: int, ctx: Ctx) -> MatchResult:
        result = self.rule.match(nodes, pos, ctx)
        if result is None:
            return pos, ctx
        return result


class Handled(Rule[Ctx]):
    """Run a context handler after the wrapped rule succeeds."""

    def __init__(self, rule: Rule[Ctx], handler: ContextHandler) -> None:
        self.rule = rule
        self.handler = handler

    def match(self, nodes: Sequence[Node], pos: int, ctx: Ctx) -> MatchResult:
        result = self.rule.match(nodes, pos, ctx)
        if result is None:
            return None
        pos, ctx = result
        return pos, self.handler(ctx)


def _search(
    nodes: Sequence[Node],
    rule: Rule[Ctx],
    ctx: Ctx,
    depth: int,
    max_depth: int,
) -> Tuple[Ctx, int]:
    """Apply ``rule`` at every position, descending into unmatched groups.

    Returns:
        The final context and the number of successful matches.
    """
    matches = 0
    pos = 0
    while pos < len(nodes):
        result = rule.match(nodes, pos, ctx)
        if result is not None:
            next_pos, ctx = result
            matches += 1
            pos = next_pos if next_pos > pos else pos + 1
            continue
        node = nodes[pos]
        if isinstance(node, Tree) and depth < max_depth:
            ctx, inner = _search(node.children, rule, ctx, depth + 1, max_depth)
            matches += inner
        pos += 1
    return ctx, matches


class TreeMatch(Rule[Ctx]):
    """Match a bracket group and apply a rule to its content.

    Args:
        rule: Rule applied inside the group.
        max_depth: How many bracket levels below this group may be searched;
            1 means the group's direct children only.
        anchored: When True the rule must consume the group's whole content;
            otherwise it is searched for and must match at least once.
        open_bracket: Restrict to one bracket kind, e.g. ``"("``.
    """

    def __init__(
        self,
        rule: Rule[Ctx],
        max_depth: int = 1,
        anchored: bool = False,
        open_bracket: Optional[str] = None,
    ) -> None:
        if max_depth < 1:
            raise ValueError("max_depth must be >= 1")
        self.rule = rule
        self.max_depth = max_depth
        self.anchored = anchored
        self.open_bracket = open_bracket

    def match(self, nodes: Sequence[Node], pos: int, ctx: Ctx) -> MatchResult:
        if pos >= len(nodes):
            return None
        node = nodes[pos]
        if not isinstance(node, Tree):
            return None
        if self.open_bracket is not None and node.open != self.open_bracket:
            return None

        if self.anchored:
            result = self.rule.match(node.children, 0, ctx)
            if result is None or result[0] != len(node.children):
                return None
            return pos + 1, result[1]

        ctx, matches = _search(node.children, self.rule, ctx, 1, self.max_depth)
        if not matches:
            return None
        return pos + 1, ctx


class RootQuery(Generic[Ctx]):
    """Search a whole file for a rule, then run a post-pass hook once.

    Args:
        search: Rule attempted at every position.
        max_depth: Maximum bracket nesting searched.
        post_handler: Hook applied to the final context.
    """

    def __init__(
        self,
        search: Rule[Ctx],
        max_depth: int = 32,
        post_handler: Optional[ContextHandler] = None,
    ) -> None:
        self.search = search
        self.max_depth = max_depth
        self.post_handler = post_handler

    def run(self, nodes: Sequence[Node], ctx: Ctx) -> Ctx:
        ctx, matches = _search(nodes, self.search, ctx, 0, self.max_depth)
        logger.debug("Root query matched %d declaration(s)", matches)
        if self.post_handler is not None:
            ctx = self.post_handler(ctx)
        return ctx


# Short constructors mirroring the grammar notation


def sym(value: Union[str, Pattern[str], None] = None, handler: Optional[TokenHandler] = None) -> Sym:
    return Sym(value, handler)


def op(value: str, handler: Optional[TokenHandler] = None) -> Op:
    return Op(value, handler)


def string(handler: Optional[TokenHandler] = None) -> Str:
    return Str(None, handler)


def seq(*rules: Rule) -> Seq:
    return Seq(*rules)


def alt(*rules: Rule) -> Alt:
    return Alt(*rules)


def opt(rule: Rule) -> Opt:
    return Opt(rule)


def tree(
    rule: Rule,
    max_depth: int = 1,
    anchored: bool = False,
    open_bracket: Optional[str] = None,
) -> TreeMatch:
    return TreeMatch(rule, max_depth=max_depth, anchored=anchored, open_bracket=open_bracket)


def regex(pattern: str) -> Pattern[str]:
    return re.compile(pattern)


__all__ = [
    "Rule",
    "Sym",
    "Op",
    "Str",
    "Seq",
    "Alt",
    "Opt",
    "Handled",
    "TreeMatch",
    "RootQuery",
    "sym",
    "op",
    "string",
    "seq",
    "alt",
    "opt",
    "tree",
    "regex",
]
