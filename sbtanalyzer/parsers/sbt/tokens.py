"""Token stream for the sbt Scala DSL, built from a tree-sitter-scala parse.

The dependency matcher works on leaves, not on Scala syntax: the parse tree
is flattened to its leaf tokens in source order and bracket pairs are folded
back into nested ``Tree`` nodes. No Scala expression is ever evaluated.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple, Union

import tree_sitter_scala
from tree_sitter import Language, Parser
from tree_sitter import Node as SyntaxNode

from sbtanalyzer.parsers.base import ParseError

SYMBOL = "symbol"
OPERATOR = "operator"
STRING = "string"
TEMPLATE = "template"
NUMBER = "number"
CHAR = "char"
UNKNOWN = "unknown"

BRACKETS = {"(": ")", "[": "]", "{": "}"}
_CLOSERS = {close: open_ for open_, close in BRACKETS.items()}

# Syntax nodes turned into a single token without looking at their children
_COMMENT_TYPES = {"comment", "block_comment"}
_STRING_TYPES = {"string"}
_TEMPLATE_TYPES = {"interpolated_string_expression"}
_LITERAL_TYPES = {
    "character_literal": CHAR,
    "integer_literal": NUMBER,
    "floating_point_literal": NUMBER,
}
_ATOMIC_TYPES = _COMMENT_TYPES | _STRING_TYPES | _TEMPLATE_TYPES | set(_LITERAL_TYPES)

_IDENTIFIER_RE = re.compile(r"(?:[^\W\d]|\$)[\w$]*|`[^`\n]+`")
_OPERATOR_RE = re.compile(r"[,;.]|[!#%&*+\-/:<=>?@\\^|~]+")

_ESCAPE_RE = re.compile(r"\\(u[0-9a-fA-F]{4}|.)")
_SIMPLE_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f"}


@dataclass(frozen=True)
class Token:
    """A leaf token.

    Attributes:
        type: One of the token type constants in this module.
        value: Token text; string literals carry their unescaped content.
        line: One-based line of the token start.
    """

    type: str
    value: str
    line: int

    def __repr__(self) -> str:
        return f"Token({self.type}, {self.value!r}, line={self.line})"


@dataclass(frozen=True)
class Tree:
    """A bracketed group: ``open`` + ``children`` + matching close bracket."""

    open: str
    children: Tuple["Node", ...]
    line: int

    @property
    def close(self) -> str:
        return BRACKETS[self.open]

    def __repr__(self) -> str:
        return f"Tree({self.open}{len(self.children)}{self.close}, line={self.line})"


Node = Union[Token, Tree]


@dataclass(frozen=True)
class _Leaf:
    token: Token
    start_byte: int
    end_byte: int


def _unescape(body: str) -> str:
    def replace(match: re.Match) -> str:
        esc = match.group(1)
        if esc.startswith("u") and len(esc) == 5:
            return chr(int(esc[1:], 16))
        return _SIMPLE_ESCAPES.get(esc, esc)

    return _ESCAPE_RE.sub(replace, body)


def _string_body(text: str) -> str:
    """Content of a string literal, with or without an interpolator prefix."""
    quoted = text[text.index('"'):]
    if quoted.startswith('"""') and len(quoted) >= 6:
        return quoted[3:-3]
    return _unescape(quoted[1:-1])


class ScalaTokenizer:
    """Tree-sitter based tokenizer for sbt build files.

    The parse is error tolerant: leaves of ``ERROR`` nodes are kept and
    zero-width ``MISSING`` nodes inserted by error recovery are ignored, so
    an unclosed bracket still surfaces as a ``ParseError`` when the leaves
    are folded.
    """

    def __init__(self) -> None:
        self.parser = Parser(Language(tree_sitter_scala.language()))

    def tokenize(self, text: str) -> Tuple[Node, ...]:
        source_bytes = text.encode("utf8")
        tree = self.parser.parse(source_bytes)
        leaves = _merge_qualified_names(list(self._leaves(tree.root_node, source_bytes)))
        return _fold_brackets(leaves)

    def _leaves(self, root: SyntaxNode, source_bytes: bytes) -> Iterator[_Leaf]:
        stack = [root]
        while stack:
            node = stack.pop()
            if node.is_missing or node.start_byte == node.end_byte:
                continue
            if node.child_count and node.type not in _ATOMIC_TYPES:
                stack.extend(reversed(node.children))
                continue
            token = self._to_token(node, source_bytes)
            if token is not None:
                yield _Leaf(token, node.start_byte, node.end_byte)

    @staticmethod
    def _to_token(node: SyntaxNode, source_bytes: bytes) -> Optional[Token]:
        if node.type in _COMMENT_TYPES:
            return None

        text = source_bytes[node.start_byte:node.end_byte].decode("utf8", errors="replace")
        line = node.start_point[0] + 1

        if node.type in _STRING_TYPES:
            return Token(STRING, _string_body(text), line)
        if node.type in _TEMPLATE_TYPES:
            body = _string_body(text)
            return Token(TEMPLATE if "$" in body else STRING, body, line)
        if node.type in _LITERAL_TYPES:
            return Token(_LITERAL_TYPES[node.type], text, line)
        if text in BRACKETS or text in _CLOSERS:
            return Token(OPERATOR, text, line)
        if _IDENTIFIER_RE.fullmatch(text):
            return Token(SYMBOL, text, line)
        if node.type == "operator_identifier" or _OPERATOR_RE.fullmatch(text):
            return Token(OPERATOR, text, line)
        return Token(UNKNOWN, text, line)


def _merge_qualified_names(leaves: List[_Leaf]) -> List[_Leaf]:
    """Join ``a`` ``.`` ``b`` written without spaces into one symbol ``a.b``."""
    merged: List[_Leaf] = []
    for leaf in leaves:
        if (
            leaf.token.type == SYMBOL
            and len(merged) >= 2
            and merged[-1].token.type == OPERATOR
            and merged[-1].token.value == "."
            and merged[-2].token.type == SYMBOL
            and merged[-2].end_byte == merged[-1].start_byte
            and merged[-1].end_byte == leaf.start_byte
        ):
            merged.pop()
            head = merged.pop()
            token = Token(SYMBOL, f"{head.token.value}.{leaf.token.value}", head.token.line)
            merged.append(_Leaf(token, head.start_byte, leaf.end_byte))
            continue
        merged.append(leaf)
    return merged


def _fold_brackets(leaves: List[_Leaf]) -> Tuple[Node, ...]:
    # Each frame: (open bracket, start line, collected children)
    stack: List[Tuple[str, int, List[Node]]] = [("", 1, [])]

    for leaf in leaves:
        token = leaf.token
        if token.type == OPERATOR and token.value in BRACKETS:
            stack.append((token.value, token.line, []))
        elif token.type == OPERATOR and token.value in _CLOSERS:
            open_, open_line, inner = stack.pop() if len(stack) > 1 else ("", 0, [])
            if open_ != _CLOSERS[token.value]:
                raise ParseError(
                    f"Unbalanced '{token.value}' at line {token.line}"
                    + (f" (opened '{open_}' at line {open_line})" if open_ else "")
                )
            stack[-1][2].append(Tree(open_, tuple(inner), open_line))
        else:
            stack[-1][2].append(token)

    if len(stack) > 1:
        open_, open_line, _ = stack[-1]
        raise ParseError(f"Unclosed '{open_}' opened at line {open_line}")

    return tuple(stack[0][2])


# Expose a single shared tokenizer instance
SCALA_TOKENIZER = ScalaTokenizer()


def tokenize(text: str) -> Tuple[Node, ...]:
    """Tokenize build file text into a tree of nodes.

    Comments are dropped. Interpolated strings (``s"...$x"``) become
    ``template`` tokens so they never match as plain string literals.

    Args:
        text: Build file content.

    Returns:
        Top-level nodes of the file.

    Raises:
        ParseError: On unbalanced brackets.
    """
    return SCALA_TOKENIZER.tokenize(text)


__all__ = [
    "SYMBOL",
    "OPERATOR",
    "STRING",
    "TEMPLATE",
    "NUMBER",
    "Token",
    "Tree",
    "Node",
    "ScalaTokenizer",
    "tokenize",
]
