"""Shared helpers for the printers."""

from __future__ import annotations

from ..ast import RArray, RCall, RHash, RLambda, RNode, RRegexp

# Values that open with their own delimiter and read naturally on the same
# line as the `=` even when their contents break.
SKIP_ASSIGN_INDENT: tuple[type, ...] = (RArray, RHash, RLambda, RRegexp)


def skip_assign_indent(node: RNode) -> bool:
    """Whether an assignment value stays on the line of its `=`."""
    if isinstance(node, SKIP_ASSIGN_INDENT):
        return True
    if isinstance(node, RCall):
        return skip_assign_indent(node.receiver)
    return False
