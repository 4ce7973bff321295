"""Tokenizer tests."""

import pytest

from garnet.frontend.tokens import (
    TK_COMMENT,
    TK_CONST,
    TK_CVAR,
    TK_EOF,
    TK_FLOAT,
    TK_GVAR,
    TK_IDENT,
    TK_INT,
    TK_IVAR,
    TK_KEYWORD,
    TK_LABEL,
    TK_NEWLINE,
    TK_OP,
    TK_REGEXP,
    TK_STRING,
    TK_SYMBOL,
    TokenizeError,
    tokenize,
)


def _kinds(source: str) -> list[tuple[str, str]]:
    return [(t.type, t.value) for t in tokenize(source)]


def test_assignment() -> None:
    assert _kinds("a = 1") == [
        (TK_IDENT, "a"),
        (TK_OP, "="),
        (TK_INT, "1"),
        (TK_EOF, ""),
    ]


def test_spacing_is_recorded() -> None:
    tokens = tokenize("foo [1]")
    assert tokens[1].spaced
    tokens = tokenize("foo[1]")
    assert not tokens[1].spaced


def test_positions() -> None:
    tokens = tokenize("a\n  b")
    assert (tokens[2].line, tokens[2].col) == (2, 3)


def test_numbers() -> None:
    assert _kinds("1_000 1.5 2e3 5.times")[:5] == [
        (TK_INT, "1_000"),
        (TK_FLOAT, "1.5"),
        (TK_FLOAT, "2e3"),
        (TK_INT, "5"),
        (TK_OP, "."),
    ]


def test_variables() -> None:
    assert _kinds("@a @@b $c Const")[:4] == [
        (TK_IVAR, "@a"),
        (TK_CVAR, "@@b"),
        (TK_GVAR, "$c"),
        (TK_CONST, "Const"),
    ]


def test_labels() -> None:
    assert _kinds("foo(if: 1)")[:4] == [
        (TK_IDENT, "foo"),
        (TK_OP, "("),
        (TK_LABEL, "if:"),
        (TK_INT, "1"),
    ]


def test_double_colon_is_not_a_label() -> None:
    assert _kinds("a::B")[:3] == [(TK_IDENT, "a"), (TK_OP, "::"), (TK_CONST, "B")]


def test_symbols() -> None:
    assert _kinds(":to_s :empty?")[:2] == [(TK_SYMBOL, "to_s"), (TK_SYMBOL, "empty?")]


def test_operator_symbol_only_in_value_position() -> None:
    assert _kinds("x = :+")[2] == (TK_SYMBOL, "+")
    assert _kinds("a ? b :-1")[3] == (TK_OP, ":")


def test_symbol_before_rocket() -> None:
    assert _kinds(":a=>1")[:2] == [(TK_SYMBOL, "a"), (TK_OP, "=>")]


def test_predicate_and_bang_names() -> None:
    assert _kinds("empty? save!")[:2] == [(TK_IDENT, "empty?"), (TK_IDENT, "save!")]


def test_bang_before_equals_is_an_operator() -> None:
    assert _kinds("foo!= bar")[:3] == [(TK_IDENT, "foo"), (TK_OP, "!="), (TK_IDENT, "bar")]


def test_safe_navigation() -> None:
    assert _kinds("x&.y")[:3] == [(TK_IDENT, "x"), (TK_OP, "&."), (TK_IDENT, "y")]


def test_keyword_after_dot_is_identifier() -> None:
    assert _kinds("x.class")[2] == (TK_IDENT, "class")
    assert _kinds("class")[0] == (TK_KEYWORD, "class")


def test_regexp_or_division() -> None:
    assert _kinds("x = /ab/i")[2] == (TK_REGEXP, "/ab/i")
    assert _kinds("a / b")[1] == (TK_OP, "/")


def test_strings_keep_quotes() -> None:
    assert _kinds("'a' \"b #{c}\"")[:2] == [(TK_STRING, "'a'"), (TK_STRING, '"b #{c}"')]


def test_comment_and_newline() -> None:
    assert _kinds("x # note  \ny")[:4] == [
        (TK_IDENT, "x"),
        (TK_COMMENT, "# note"),
        (TK_NEWLINE, "\n"),
        (TK_IDENT, "y"),
    ]


def test_line_continuation() -> None:
    assert _kinds("a \\\n+ b")[:3] == [(TK_IDENT, "a"), (TK_OP, "+"), (TK_IDENT, "b")]


def test_end_marker_stops_input() -> None:
    assert _kinds("x\n__END__\nnot ruby `")[-1] == (TK_EOF, "")
    assert len(tokenize("x\n__END__\nnot ruby `")) == 3


def test_multi_char_operators() -> None:
    values = [t.value for t in tokenize("a ||= b <=> c ** d -> e")]
    assert "||=" in values
    assert "<=>" in values
    assert "**" in values
    assert "->" in values


def test_unterminated_string() -> None:
    with pytest.raises(TokenizeError) as exc:
        tokenize('x = "abc')
    assert (exc.value.line, exc.value.col) == (1, 5)


def test_multiline_string_rejected() -> None:
    with pytest.raises(TokenizeError, match="multi-line string"):
        tokenize('x = "a\nb"')


def test_unexpected_character() -> None:
    with pytest.raises(TokenizeError, match="unexpected character"):
        tokenize("`ls`")
