"""Parser tests.

Data-driven cases live in parse/*.tests files: the expected section is
either `ok` or `error: <substring of the message>`.
"""

import pytest

from conftest import discover_tests
from garnet.ast import (
    Pos,
    RAref,
    RArefField,
    RArgParen,
    RArgs,
    RArray,
    RAssign,
    RAssoc,
    RBareAssocHash,
    RBlockVar,
    RBraceBlock,
    RCall,
    RCallShorthand,
    RComment,
    RCommand,
    RCommented,
    RConst,
    RConstPathRef,
    RDoBlock,
    RExcessedComma,
    RFCall,
    RField,
    RIdent,
    RInt,
    RIVar,
    RLabel,
    RMethodAddBlock,
    ROpAssign,
    RParams,
    RProgram,
    RSplat,
    RSplatValueList,
    RSymbolLit,
    RValueList,
    RVarField,
    RVarRef,
    RVCall,
)
from garnet.frontend import ParseError, TokenizeError, parse

P = Pos(0, 0)


def pytest_generate_tests(metafunc):
    """Parametrize test_parse_case over all parse/*.tests files."""
    if "parse_case" in metafunc.fixturenames:
        params = [
            pytest.param((test_input, expected), id=test_id)
            for test_id, test_input, expected in discover_tests("parse")
        ]
        metafunc.parametrize("parse_case", params)


def test_parse_case(parse_case: tuple[str, str]) -> None:
    test_input, expected = parse_case
    expected = expected.strip()
    if expected == "ok":
        parse(test_input + "\n")
        return
    assert expected.startswith("error: ")
    with pytest.raises((ParseError, TokenizeError)) as exc:
        parse(test_input + "\n")
    assert expected[len("error: ") :] in exc.value.msg


def _stmt(source: str):
    program = parse(source)
    assert len(program.stmts) == 1
    return program.stmts[0]


def _ident(name: str) -> RIdent:
    return RIdent(P, name)


def test_program_of_statements() -> None:
    program = parse("a = 1\nb = 2\n")
    assert isinstance(program, RProgram)
    assert len(program.stmts) == 2


def test_simple_assignment() -> None:
    assert _stmt("a = 1") == RAssign(P, RVarField(P, _ident("a")), RInt(P, "1"))


def test_assigned_local_reads_as_var_ref() -> None:
    program = parse("x = 1\nx\n")
    assert program.stmts[1] == RVarRef(P, _ident("x"))


def test_unknown_identifier_is_vcall() -> None:
    assert _stmt("x") == RVCall(P, _ident("x"))


def test_block_parameter_is_var_ref() -> None:
    expected = RMethodAddBlock(
        P,
        RCall(P, RVCall(P, _ident("list")), ".", _ident("map")),
        RBraceBlock(
            P,
            RBlockVar(P, RParams(P, required=(_ident("i"),))),
            (RCall(P, RVarRef(P, _ident("i")), ".", _ident("to_s")),),
        ),
    )
    assert _stmt("list.map { |i| i.to_s }") == expected


def test_block_parameter_does_not_leak() -> None:
    program = parse("list.each { |i| i }\ni\n")
    assert program.stmts[1] == RVCall(P, _ident("i"))


def test_block_sees_enclosing_locals() -> None:
    program = parse("x = 1\nlist.each { |i| x }\n")
    block = program.stmts[1].block
    assert block.body == (RVarRef(P, _ident("x")),)


def test_receiverless_call_with_parens() -> None:
    expected = RFCall(P, _ident("foo"), RArgParen(P, RArgs(P, (RInt(P, "1"),))))
    assert _stmt("foo(1)") == expected


def test_command_with_options() -> None:
    stmt = _stmt("validates :name, if: proc { |r| r.ok? }")
    assert isinstance(stmt, RCommand)
    assert stmt.message == _ident("validates")
    symbol, options = stmt.args.parts
    assert symbol == RSymbolLit(P, _ident("name"))
    assert isinstance(options, RBareAssocHash)
    assoc = options.assocs[0]
    assert isinstance(assoc, RAssoc)
    assert assoc.key == RLabel(P, "if:")
    assert isinstance(assoc.value, RMethodAddBlock)
    assert assoc.value.call == RFCall(P, _ident("proc"), None)


def test_do_block_binds_to_command() -> None:
    stmt = _stmt("describe thing do\n  run\nend")
    assert isinstance(stmt, RMethodAddBlock)
    assert isinstance(stmt.call, RCommand)
    assert isinstance(stmt.block, RDoBlock)


def test_attribute_target() -> None:
    stmt = _stmt("a.b = 1")
    assert stmt.target == RField(P, RVCall(P, _ident("a")), ".", _ident("b"))


def test_index_target() -> None:
    stmt = _stmt("a[0] = 1")
    assert stmt.target == RArefField(P, RVCall(P, _ident("a")), RArgs(P, (RInt(P, "0"),)))


def test_index_read() -> None:
    assert _stmt("a[0]") == RAref(P, RVCall(P, _ident("a")), RArgs(P, (RInt(P, "0"),)))


def test_op_assign() -> None:
    assert _stmt("a += 1") == ROpAssign(P, RVarField(P, _ident("a")), "+=", RInt(P, "1"))


def test_op_assign_ivar() -> None:
    stmt = _stmt("@x ||= []")
    assert stmt == ROpAssign(P, RVarField(P, RIVar(P, "@x")), "||=", RArray(P, ()))


def test_value_list() -> None:
    stmt = _stmt("a = 1, 2")
    assert stmt.value == RValueList(P, (RInt(P, "1"), RInt(P, "2")))


def test_splat_value_list() -> None:
    stmt = _stmt("a = *b, 1")
    assert stmt.value == RSplatValueList(P, (RSplat(P, RVCall(P, _ident("b"))), RInt(P, "1")))


def test_lone_splat_is_splat_value_list() -> None:
    stmt = _stmt("a = *b")
    assert isinstance(stmt.value, RSplatValueList)


def test_chained_assignment() -> None:
    stmt = _stmt("a = b = 1")
    assert stmt.value == RAssign(P, RVarField(P, _ident("b")), RInt(P, "1"))


def test_chained_assignment_leaves_list_to_outer_target() -> None:
    stmt = _stmt("a = b = 1, 2")
    inner = RAssign(P, RVarField(P, _ident("b")), RInt(P, "1"))
    assert stmt.value == RValueList(P, (inner, RInt(P, "2")))


def test_value_list_of_calls() -> None:
    stmt = _stmt("a = foo, bar.baz")
    assert isinstance(stmt.value, RValueList)
    assert len(stmt.value.values) == 2


def test_const_path() -> None:
    stmt = _stmt("Foo::Bar")
    assert stmt == RConstPathRef(P, RVarRef(P, RConst(P, "Foo")), RConst(P, "Bar"))


def test_call_operators_are_normalized() -> None:
    assert _stmt("x&.y").operator == "&."
    assert _stmt("x::y").operator == "::"
    assert _stmt("x.y").operator == "."


def test_call_shorthand() -> None:
    stmt = _stmt("x.()")
    assert stmt == RCall(P, RVCall(P, _ident("x")), ".", RCallShorthand(P), RArgParen(P, None))


def test_trailing_comment_attaches_to_call() -> None:
    stmt = _stmt("foo.bar # note")
    assert stmt.comments == (RComment(P, "# note"),)


def test_trailing_comment_wraps_other_statements() -> None:
    program = parse("x = 1 # note\n")
    assert len(program.stmts) == 1
    stmt = program.stmts[0]
    assert isinstance(stmt, RCommented)
    assert stmt.stmt == RAssign(P, RVarField(P, _ident("x")), RInt(P, "1"))
    assert stmt.comments == (RComment(P, "# note"),)


def test_comment_on_its_own_line_is_a_statement() -> None:
    program = parse("x = 1\n# note\n")
    assert program.stmts[1] == RComment(P, "# note")


def test_excessed_comma_in_block_params() -> None:
    stmt = _stmt("pairs.map { |a,| a }")
    params = stmt.block.params.params
    assert params.required == (_ident("a"),)
    assert params.rest == RExcessedComma(P)
    assert params.others() == [RExcessedComma(P)]


def test_excessed_comma_after_several_params() -> None:
    stmt = _stmt("pairs.map { |a, b,| a }")
    params = stmt.block.params.params
    assert params.required == (_ident("a"), _ident("b"))
    assert isinstance(params.rest, RExcessedComma)


def test_empty_block_var() -> None:
    stmt = _stmt("list.each { || x }")
    assert stmt.block.params == RBlockVar(P, None)


def test_positions() -> None:
    stmt = _stmt("  a = 1")
    assert stmt.pos == Pos(1, 3)
    assert stmt.value.pos == Pos(1, 7)


def test_error_location() -> None:
    with pytest.raises(ParseError) as exc:
        parse("x = 1\ny = )\n")
    assert (exc.value.line, exc.value.col) == (2, 5)
