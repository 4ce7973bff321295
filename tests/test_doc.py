"""Document layer tests."""

import pytest

from garnet.doc import (
    Concat,
    Line,
    Text,
    concat,
    group,
    hardline,
    has_hardline,
    indent,
    join,
    line,
    to_debug,
    to_text,
)

ASSIGN = group(concat(["a", " =", indent(concat([line, "1"]))]))


def test_builders_coerce_strings() -> None:
    assert concat(["a", line]) == Concat((Text("a"), Line()))


def test_join() -> None:
    assert to_debug(join(", ", ["a", "b"])) == 'concat(["a", ", ", "b"])'


def test_join_single_part() -> None:
    assert join(", ", ["a"]) == concat(["a"])


def test_debug() -> None:
    assert to_debug(ASSIGN) == 'group(concat(["a", " =", indent(concat([line, "1"]))]))'


def test_debug_hardline_and_quoting() -> None:
    assert to_debug(hardline) == "hardline"
    assert to_debug('say "hi"') == '"say \\"hi\\""'


def test_debug_rejects_unknown() -> None:
    with pytest.raises(TypeError, match="unhandled doc type"):
        to_debug(42)


def test_flat_group() -> None:
    assert to_text(ASSIGN) == "a = 1"


def test_group_with_hardline_breaks() -> None:
    doc = group(concat(["{", indent(concat([line, "x", hardline, "y"])), line, "}"]))
    assert to_text(doc) == "{\n  x\n  y\n}"


def test_nested_group_stays_flat() -> None:
    inner = group(concat(["a", line, "b"]))
    doc = group(concat(["[", indent(concat([hardline, inner])), hardline, "]"]))
    assert to_text(doc) == "[\n  a b\n]"


def test_line_outside_group_breaks() -> None:
    assert to_text(concat(["a", line, "b"])) == "a\nb"


def test_trailing_space_dropped_before_break() -> None:
    assert to_text(concat(["a", " ", hardline, "b"])) == "a\nb"


def test_indent_width() -> None:
    doc = concat(["do", indent(concat([hardline, "x"])), hardline, "end"])
    assert to_text(doc, indent_width=4) == "do\n    x\nend"


def test_blank_lines_lose_indentation() -> None:
    doc = indent(concat([hardline, "", hardline, "x"]))
    assert to_text(doc) == "\n\n  x"


def test_has_hardline() -> None:
    assert has_hardline(group(indent(concat(["a", hardline]))))
    assert not has_hardline(ASSIGN)
