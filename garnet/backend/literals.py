"""Printers for tokens, literals, collections, and operators."""

from __future__ import annotations

from ..ast import (
    RArray,
    RAssoc,
    RBinary,
    RBlockArg,
    RCall,
    RCommented,
    RHash,
    RLabel,
    RLambda,
    RNode,
    RProgram,
    RUnary,
)
from ..doc import Doc, concat, group, hardline, indent, join, line, text
from .path import Path

# Binary operators printed without surrounding spaces.
TIGHT_OPS: set[str] = {"**", "..", "..."}


def print_token(node: RNode) -> Doc:
    """Identifiers, constants, variables, keywords, labels, operators."""
    return text(getattr(node, "name"))


def print_raw(node: RNode) -> Doc:
    """Numbers, strings, and regexps keep their source text."""
    return text(getattr(node, "raw"))


def print_stmts(path: Path, field: str) -> Doc:
    """Statements of a body, one per line."""
    return join(hardline, path.map_print_children(field))


def body_line(stmts: tuple[RNode, ...]) -> Doc:
    """Line around a braced body; a trailing comment must end its line."""
    for stmt in stmts:
        if isinstance(stmt, RCommented):
            return hardline
        if isinstance(stmt, RCall) and len(stmt.comments) > 0:
            return hardline
    return line


def print_commented(path: Path) -> Doc:
    """stmt # comment"""
    node = path.current()
    assert isinstance(node, RCommented)
    parts: list[Doc | str] = [path.print_child("stmt")]
    for i in range(len(node.comments)):
        parts.append(" ")
        parts.append(path.print_child("comments", i))
    return concat(parts)


def print_program(path: Path) -> Doc:
    node = path.current()
    assert isinstance(node, RProgram)
    if len(node.stmts) == 0:
        return text("")
    return concat([print_stmts(path, "stmts"), hardline])


def print_symbol(path: Path) -> Doc:
    return concat([":", path.print_child("value")])


def print_array(path: Path) -> Doc:
    node = path.current()
    assert isinstance(node, RArray)
    if len(node.elements) == 0:
        return text("[]")
    elements = join(concat([",", line]), path.map_print_children("elements"))
    return group(concat(["[", elements, "]"]))


def print_hash(path: Path) -> Doc:
    node = path.current()
    assert isinstance(node, RHash)
    if len(node.assocs) == 0:
        return text("{}")
    assocs = join(concat([",", line]), path.map_print_children("assocs"))
    return group(concat(["{", indent(concat([line, assocs])), line, "}"]))


def print_bare_assoc_hash(path: Path) -> Doc:
    return group(join(concat([",", line]), path.map_print_children("assocs")))


def print_assoc(path: Path) -> Doc:
    """label: value, or key => value for every other key."""
    node = path.current()
    assert isinstance(node, RAssoc)
    key = path.print_child("key")
    value = path.print_child("value")
    if isinstance(node.key, RLabel):
        return group(concat([key, indent(concat([line, value]))]))
    return group(concat([key, " =>", indent(concat([line, value]))]))


def print_lambda(path: Path) -> Doc:
    node = path.current()
    assert isinstance(node, RLambda)
    head: list[Doc | str] = ["->"]
    if node.params is not None:
        head.append(concat(["(", path.print_child("params"), ")"]))
    if len(node.body) == 0:
        head.append(" {}")
        return concat(head)
    body = print_stmts(path, "body")
    sep = body_line(node.body)
    head.append(" ")
    return group(concat([concat(head), "{", indent(concat([sep, body])), sep, "}"]))


def print_splat(path: Path, prefix: str) -> Doc:
    return concat([prefix, path.print_child("value")])


def print_block_arg(path: Path) -> Doc:
    node = path.current()
    assert isinstance(node, RBlockArg)
    if node.value is None:
        return text("&")
    return concat(["&", path.print_child("value")])


def print_binary(path: Path) -> Doc:
    node = path.current()
    assert isinstance(node, RBinary)
    left = path.print_child("left")
    right = path.print_child("right")
    if node.op in TIGHT_OPS:
        return concat([left, node.op, right])
    return group(concat([left, " ", node.op, indent(concat([line, right]))]))


def print_unary(path: Path) -> Doc:
    node = path.current()
    assert isinstance(node, RUnary)
    operand = path.print_child("operand")
    if node.op == "not":
        return concat(["not ", operand])
    return concat([node.op, operand])


def print_paren(path: Path) -> Doc:
    return concat(["(", path.print_child("expr"), ")"])


def print_const_path(path: Path) -> Doc:
    return concat([path.print_child("parent"), "::", path.print_child("name")])
