"""Printers for method calls, arguments, blocks, and parameters."""

from __future__ import annotations

from ..ast import (
    RArgParen,
    RAref,
    RArefField,
    RBlockVar,
    RBodyStmt,
    RBraceBlock,
    RCall,
    RCallShorthand,
    RCommand,
    RDoBlock,
    RExcessedComma,
    RFCall,
    RKeywordParam,
    RKeywordRestParam,
    RMethodAddBlock,
    RParams,
    RRescue,
    RRestParam,
)
from ..doc import Doc, concat, group, hardline, indent, join, line, text
from ..middleend.to_proc import to_proc
from .literals import body_line, print_stmts
from .path import Path


# ── Calls ────────────────────────────────────────────────────


def _print_message(path: Path) -> Doc:
    node = path.current()
    assert isinstance(node, RCall)
    if isinstance(node.message, RCallShorthand):
        return text("")
    return path.print_child("message")


def print_call(path: Path) -> Doc:
    """receiver.message(args) # comment"""
    node = path.current()
    assert isinstance(node, RCall)
    parts: list[Doc | str] = [path.print_child("receiver"), node.operator, _print_message(path)]
    if node.args is not None:
        parts.append(path.print_child("args"))
    for i in range(len(node.comments)):
        parts.append(" ")
        parts.append(path.print_child("comments", i))
    return concat(parts)


def print_arg_paren(path: Path) -> Doc:
    node = path.current()
    assert isinstance(node, RArgParen)
    if node.args is None:
        return text("()")
    return concat(["(", path.print_child("args"), ")"])


def print_args(path: Path) -> Doc:
    return group(join(concat([",", line]), path.map_print_children("parts")))


def print_fcall(path: Path) -> Doc:
    node = path.current()
    assert isinstance(node, RFCall)
    if node.args is None:
        return path.print_child("message")
    return concat([path.print_child("message"), path.print_child("args")])


def print_command(path: Path) -> Doc:
    return concat([path.print_child("message"), " ", path.print_child("args")])


def print_aref(path: Path) -> Doc:
    node = path.current()
    assert isinstance(node, (RAref, RArefField))
    if node.args is None:
        return concat([path.print_child("receiver"), "[]"])
    return concat([path.print_child("receiver"), "[", path.print_child("args"), "]"])


def print_field(path: Path) -> Doc:
    node = path.current()
    return concat([path.print_child("receiver"), getattr(node, "operator"), path.print_child("name")])


# ── Blocks ───────────────────────────────────────────────────


def _print_args_with(path: Path, extra: str) -> Doc:
    """Argument list of an RArgParen with extra appended as a last argument."""
    node = path.current()
    assert isinstance(node, RArgParen)
    if node.args is None:
        return concat(["(", extra, ")"])
    return concat(["(", path.print_child("args"), ", ", extra, ")"])


def _print_call_with(path: Path, extra: str) -> Doc:
    """Print the call under the cursor with extra as its last argument."""
    node = path.current()
    if isinstance(node, RCall):
        head: list[Doc | str] = [path.print_child("receiver"), node.operator, _print_message(path)]
        if node.args is None:
            head.append(concat(["(", extra, ")"]))
        else:
            head.append(path.call(lambda p: _print_args_with(p, extra), "args"))
        return concat(head)
    if isinstance(node, RFCall):
        if node.args is None:
            return concat([path.print_child("message"), "(", extra, ")"])
        return concat([path.print_child("message"), path.call(lambda p: _print_args_with(p, extra), "args")])
    if isinstance(node, RCommand):
        return concat([path.print_child("message"), " ", path.print_child("args"), ", ", extra])
    raise TypeError("cannot pass a block argument to " + type(node).__name__)


def print_method_add_block(path: Path) -> Doc:
    """call { block }, or call(&:name) when the block collapses."""
    node = path.current()
    assert isinstance(node, RMethodAddBlock)
    if path.options.to_proc and isinstance(node.call, (RCall, RFCall, RCommand)):
        proc = to_proc(path, node.block)
        if proc is not None:
            return path.call(lambda p: _print_call_with(p, proc), "call")
    return concat([path.print_child("call"), " ", path.print_child("block")])


def _print_block_var(path: Path) -> Doc:
    node = path.current()
    assert isinstance(node, (RBraceBlock, RDoBlock))
    if node.params is None:
        return text("")
    return concat([" ", path.print_child("params")])


def print_brace_block(path: Path) -> Doc:
    node = path.current()
    assert isinstance(node, RBraceBlock)
    params = _print_block_var(path)
    if len(node.body) == 0:
        if node.params is None:
            return text("{}")
        return concat(["{", params, " }"])
    body = print_stmts(path, "body")
    sep = body_line(node.body)
    return group(concat(["{", params, indent(concat([sep, body])), sep, "}"]))


def print_do_block(path: Path) -> Doc:
    return concat(["do", _print_block_var(path), path.print_child("body"), hardline, "end"])


def print_body_stmt(path: Path) -> Doc:
    """Indented statements followed by rescue, else, and ensure clauses."""
    node = path.current()
    assert isinstance(node, RBodyStmt)
    parts: list[Doc | str] = []
    if len(node.stmts) > 0:
        parts.append(indent(concat([hardline, print_stmts(path, "stmts")])))
    if node.rescue is not None:
        parts.append(path.print_child("rescue"))
    if node.else_body is not None:
        parts.append(concat([hardline, "else", _indented_stmts(path, "else_body")]))
    if node.ensure is not None:
        parts.append(concat([hardline, "ensure", _indented_stmts(path, "ensure")]))
    return concat(parts)


def _indented_stmts(path: Path, field: str) -> Doc:
    if len(getattr(path.current(), field)) == 0:
        return text("")
    return indent(concat([hardline, print_stmts(path, field)]))


def print_rescue(path: Path) -> Doc:
    node = path.current()
    assert isinstance(node, RRescue)
    parts: list[Doc | str] = [hardline, "rescue"]
    if len(node.exceptions) > 0:
        parts.append(" ")
        parts.append(join(", ", path.map_print_children("exceptions")))
    if node.variable is not None:
        parts.append(" => ")
        parts.append(path.print_child("variable"))
    parts.append(_indented_stmts(path, "stmts"))
    if node.next is not None:
        parts.append(path.print_child("next"))
    return concat(parts)


# ── Parameters ───────────────────────────────────────────────


def print_block_var(path: Path) -> Doc:
    node = path.current()
    assert isinstance(node, RBlockVar)
    if node.params is None:
        return text("||")
    return concat(["|", path.print_child("params"), "|"])


def print_params(path: Path) -> Doc:
    """a, b = 1, *rest, c, k:, k2: 1, **opts, &blk"""
    node = path.current()
    assert isinstance(node, RParams)
    parts: list[Doc] = []
    parts.extend(path.map_print_children("required"))
    parts.extend(path.map_print_children("optional"))
    if isinstance(node.rest, RRestParam):
        parts.append(path.print_child("rest"))
    parts.extend(path.map_print_children("post"))
    parts.extend(path.map_print_children("keywords"))
    if node.keyword_rest is not None:
        parts.append(path.print_child("keyword_rest"))
    if node.block is not None:
        parts.append(path.print_child("block"))
    if isinstance(node.rest, RExcessedComma):
        return concat([join(", ", parts), path.print_child("rest")])
    return join(", ", parts)


def print_optional_param(path: Path) -> Doc:
    return concat([path.print_child("name"), " = ", path.print_child("default")])


def print_rest_param(path: Path, prefix: str) -> Doc:
    node = path.current()
    assert isinstance(node, (RRestParam, RKeywordRestParam))
    if node.name is None:
        return text(prefix)
    return concat([prefix, path.print_child("name")])


def print_keyword_param(path: Path) -> Doc:
    node = path.current()
    assert isinstance(node, RKeywordParam)
    if node.default is None:
        return path.print_child("label")
    return concat([path.print_child("label"), " ", path.print_child("default")])


def print_block_param(path: Path) -> Doc:
    return concat(["&", path.print_child("name")])
