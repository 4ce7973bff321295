"""Decide whether a block can collapse into Symbol#to_proc shorthand.

    list.map { |item| item.to_s }   ->   list.map(&:to_s)

The block must take exactly one plain parameter and contain nothing but a
single argument-free call on that parameter. Blocks passed as the value of
an `if:` or `unless:` option are left alone: Rails-style callbacks treat a
symbol there as a method name on the record, so `&:name` would change what
gets called.
"""

from __future__ import annotations

from ..ast import (
    RAssoc,
    RBraceBlock,
    RCall,
    RDoBlock,
    RIdent,
    RKeyword,
    RLabel,
    RMethodAddBlock,
    RNode,
    RSymbolLit,
    RVarRef,
)
from ..backend.path import Path

CONDITIONAL_LABELS: set[str] = {"if:", "unless:"}
CONDITIONAL_SYMBOLS: set[str] = {"if", "unless"}


def to_proc(path: Path, block: RBraceBlock | RDoBlock) -> str | None:
    """Return `&:name` when block can be replaced by it, otherwise None.

    path is positioned on the node that carries the block: the method call
    with the block attached, or the argument list the block is passed in.
    """
    if block.params is None or block.params.params is None:
        return None
    params = block.params.params
    if len(params.required) != 1 or len(params.others()) > 0:
        return None
    param_name = params.required[0].name

    if isinstance(block, RDoBlock):
        body = block.body
        if body.rescue is not None or body.else_body is not None or body.ensure is not None:
            return None
        stmts = body.stmts
    else:
        stmts = block.body
    if len(stmts) != 1:
        return None

    stmt = stmts[0]
    if not isinstance(stmt, RCall) or len(stmt.comments) > 0:
        return None
    receiver = stmt.receiver
    if not isinstance(receiver, RVarRef):
        return None
    if not isinstance(receiver.inner, RIdent) or receiver.inner.name != param_name:
        return None
    if stmt.operator != "." and stmt.operator != "::":
        return None
    message = stmt.message
    if not isinstance(message, RIdent) or message.name == "call":
        return None
    if stmt.args is not None:
        return None

    if isinstance(path.current(), RMethodAddBlock):
        parent = path.ancestor(1)
    else:
        parent = path.ancestor(2)
    if parent is not None and _is_conditional_option(parent):
        return None

    return "&:" + message.name


def _is_conditional_option(node: RNode) -> bool:
    if not isinstance(node, RAssoc):
        return False
    key = node.key
    if isinstance(key, RLabel):
        return key.name in CONDITIONAL_LABELS
    if isinstance(key, RSymbolLit):
        return isinstance(key.value, (RIdent, RKeyword)) and key.value.name in CONDITIONAL_SYMBOLS
    return False
