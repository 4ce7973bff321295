"""Printers for assignment, compound assignment, and variable references."""

from __future__ import annotations

from ..ast import RAssign, ROpAssign, RSplatValueList, RValueList, RVarField
from ..doc import Doc, concat, group, indent, join, line, text
from .path import Path
from .util import skip_assign_indent


def _print_value_list(path: Path) -> Doc:
    return group(join(concat([",", line]), path.map_print_children("values")))


def print_assign(path: Path) -> Doc:
    """target = value

    A multi-value right side prints as a comma-separated group. Values that
    carry their own delimiters stay on the `=` line; anything else is
    indented under the target when the group breaks.
    """
    node = path.current()
    assert isinstance(node, RAssign)
    target = path.print_child("target")
    if isinstance(node.value, (RValueList, RSplatValueList)):
        value = path.call(_print_value_list, "value")
    else:
        value = path.print_child("value")
    if skip_assign_indent(node.value):
        return group(concat([target, " = ", value]))
    return group(concat([target, " =", indent(concat([line, value]))]))


def print_op_assign(path: Path) -> Doc:
    node = path.current()
    assert isinstance(node, ROpAssign)
    target = path.print_child("target")
    value = path.print_child("value")
    return group(concat([target, " ", node.operator, indent(concat([line, value]))]))


def print_var_ref(path: Path) -> Doc:
    return path.print_child("inner")


def print_var_field(path: Path) -> Doc:
    node = path.current()
    assert isinstance(node, RVarField)
    if node.inner is None:
        return text("")
    return path.print_child("inner")
