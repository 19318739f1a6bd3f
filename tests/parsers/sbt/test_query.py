"""Matcher contract tests: ordered choice, handler threading, tree depth."""

from __future__ import annotations

from sbtanalyzer.parsers.sbt.query import (
    RootQuery,
    alt,
    op,
    opt,
    regex,
    seq,
    string,
    sym,
    tree,
)
from sbtanalyzer.parsers.sbt.tokens import tokenize


def collect(ctx: tuple, token) -> tuple:
    return ctx + (token.value,)


def test_seq_threads_context_through_handlers() -> None:
    rule = seq(sym("a", collect), op("%", collect), string(collect))
    assert rule.match(tokenize('a % "x"'), 0, ()) == (3, ("a", "%", "x"))


def test_alt_is_committed_ordered_choice() -> None:
    nodes = tokenize("a b c")

    # The short branch wins and is not revisited when 'c' fails to match 'b'
    short_first = seq(alt(sym("a"), seq(sym("a"), sym("b"))), sym("c"))
    assert short_first.match(nodes, 0, ()) is None

    long_first = seq(alt(seq(sym("a"), sym("b")), sym("a")), sym("c"))
    assert long_first.match(nodes, 0, ()) == (3, ())


def test_failed_branch_does_not_leak_handler_state() -> None:
    rule = alt(seq(sym("a", collect), sym("x")), sym("a"))
    assert rule.match(tokenize("a b"), 0, ()) == (1, ())


def test_opt_matches_zero_or_one() -> None:
    rule = seq(opt(sym("lazy", collect)), sym("val", collect))
    assert rule.match(tokenize("val"), 0, ()) == (1, ("val",))
    assert rule.match(tokenize("lazy val"), 0, ()) == (2, ("lazy", "val"))


def test_regex_symbol_must_match_whole_token() -> None:
    rule = sym(regex(r"addSbtPlugin|addCompilerPlugin"))
    assert rule.match(tokenize("addCompilerPlugin"), 0, ()) is not None
    assert rule.match(tokenize("addSbtPluginX"), 0, ()) is None


def test_handle_runs_after_success_only() -> None:
    rule = seq(sym("a"), sym("b")).handle(lambda ctx: ctx + ("done",))
    assert rule.match(tokenize("a b"), 0, ()) == (2, ("done",))
    assert rule.match(tokenize("a c"), 0, ()) is None


def test_anchored_tree_requires_full_content() -> None:
    rule = tree(string(collect), anchored=True, open_bracket="(")
    assert rule.match(tokenize('("x")'), 0, ()) == (1, ("x",))
    assert rule.match(tokenize('("x", "y")'), 0, ()) is None
    assert rule.match(tokenize('["x"]'), 0, ()) is None


def test_search_tree_respects_max_depth() -> None:
    assert tree(string(collect)).match(tokenize('("x", "y")'), 0, ()) == (1, ("x", "y"))
    assert tree(string(collect)).match(tokenize('(("x"))'), 0, ()) is None
    assert tree(string(collect), max_depth=2).match(tokenize('(("x"))'), 0, ()) == (
        1,
        ("x",),
    )


def test_root_query_descends_into_groups_up_to_depth() -> None:
    nodes = tokenize('"a" ("b" ("c"))')
    assert RootQuery(string(collect), max_depth=1).run(nodes, ()) == ("a", "b")
    assert RootQuery(string(collect), max_depth=2).run(nodes, ()) == ("a", "b", "c")


def test_root_query_skips_consumed_tokens_and_runs_post_handler_once() -> None:
    pair = seq(sym("a"), sym("a")).handle(lambda ctx: ctx + ("pair",))
    query = RootQuery(pair, post_handler=lambda ctx: ctx + ("post",))

    assert query.run(tokenize("a a a"), ()) == ("pair", "post")
