"""Tokenizer tests for the sbt DSL."""

from __future__ import annotations

import pytest

from sbtanalyzer.parsers.base import ParseError
from sbtanalyzer.parsers.sbt.tokens import (
    OPERATOR,
    STRING,
    SYMBOL,
    TEMPLATE,
    Token,
    Tree,
    tokenize,
)


def test_dependency_line_tokens() -> None:
    nodes = tokenize('libraryDependencies += "org" %% "name" % "1.0" // trailing')

    assert [(n.type, n.value) for n in nodes] == [
        (SYMBOL, "libraryDependencies"),
        (OPERATOR, "+="),
        (STRING, "org"),
        (OPERATOR, "%%"),
        (STRING, "name"),
        (OPERATOR, "%"),
        (STRING, "1.0"),
    ]


def test_operators_use_longest_match() -> None:
    nodes = tokenize('a %%% b ++= c := d')
    assert [n.value for n in nodes if n.type == OPERATOR] == ["%%%", "++=", ":="]


def test_dotted_identifier_is_one_symbol() -> None:
    nodes = tokenize("Versions.akka")
    assert nodes == (Token(SYMBOL, "Versions.akka", 1),)


def test_brackets_fold_into_trees() -> None:
    nodes = tokenize('Seq("a", ("b"))')

    assert nodes[0] == Token(SYMBOL, "Seq", 1)
    outer = nodes[1]
    assert isinstance(outer, Tree)
    assert outer.open == "(" and outer.close == ")"
    assert outer.children[0] == Token(STRING, "a", 1)
    assert outer.children[1] == Token(OPERATOR, ",", 1)
    inner = outer.children[2]
    assert isinstance(inner, Tree)
    assert inner.children == (Token(STRING, "b", 1),)


def test_interpolated_strings_are_templates() -> None:
    nodes = tokenize('s"akka-$module"\ns"plain"')
    assert nodes[0].type == TEMPLATE
    assert nodes[1] == Token(STRING, "plain", 2)


def test_string_escapes_are_decoded() -> None:
    nodes = tokenize(r'"a\"b\\c"')
    assert nodes == (Token(STRING, 'a"b\\c', 1),)


def test_line_numbers_skip_comments_and_blank_lines() -> None:
    nodes = tokenize('a\n/* x\n y */\nb\n\n"""one\ntwo"""\nc')

    assert [(n.value, n.line) for n in nodes] == [
        ("a", 1),
        ("b", 4),
        ("one\ntwo", 6),
        ("c", 8),
    ]


@pytest.mark.parametrize("text", ["foo(", "foo)", "(]", "{ ( }"])
def test_unbalanced_brackets_raise(text: str) -> None:
    with pytest.raises(ParseError):
        tokenize(text)


def test_nested_block_comments_are_skipped() -> None:
    nodes = tokenize('/* outer /* inner */ still comment ( */\n"g" % "a" % "1.0"')

    assert [(n.type, n.value, n.line) for n in nodes] == [
        (STRING, "g", 2),
        (OPERATOR, "%", 2),
        (STRING, "a", 2),
        (OPERATOR, "%", 2),
        (STRING, "1.0", 2),
    ]
