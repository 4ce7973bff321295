"""Serialization of syntax trees to JSON-compatible dicts and JSON text."""

from __future__ import annotations

from dataclasses import fields

from .ast import Pos, RNode, node_type


def serialize(obj: object) -> object:
    """Plain data for obj: nodes become dicts tagged with `_type`, positions [line, col]."""
    if obj is None:
        return None
    if isinstance(obj, bool):
        return obj
    if isinstance(obj, (int, float)):
        return obj
    if isinstance(obj, str):
        return obj
    if isinstance(obj, (list, tuple)):
        return [serialize(x) for x in obj]
    if isinstance(obj, dict):
        return {str(k): serialize(v) for k, v in obj.items()}
    if isinstance(obj, Pos):
        return [obj.line, obj.col]
    if isinstance(obj, RNode):
        return _serialize_node(obj)
    raise TypeError("cannot serialize " + type(obj).__name__)


def _serialize_node(node: RNode) -> dict[str, object]:
    d: dict[str, object] = {"_type": node_type(node)}
    for f in fields(node):
        d[f.name] = serialize(getattr(node, f.name))
    return d


# ── AST dump text ───────────────────────────────────────────

_ESCAPES: dict[str, str] = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def _quote(s: str) -> str:
    out: list[str] = ['"']
    for c in s:
        if c in _ESCAPES:
            out.append(_ESCAPES[c])
        elif ord(c) < 0x20:
            out.append("\\u" + format(ord(c), "04x"))
        else:
            out.append(c)
    out.append('"')
    return "".join(out)


def _dump(value: object, level: int) -> str:
    """One serialized value at the given nesting depth, two spaces per level."""
    if value is None:
        return "null"
    if value is True:
        return "true"
    if value is False:
        return "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return _quote(value)
    inner = "  " * (level + 1)
    outer = "  " * level
    if isinstance(value, list):
        if len(value) == 0:
            return "[]"
        # [line, col] and other flat lists
        if not any(isinstance(x, (list, dict)) for x in value):
            return "[" + ", ".join(_dump(x, level) for x in value) + "]"
        items = [inner + _dump(x, level + 1) for x in value]
        return "[\n" + ",\n".join(items) + "\n" + outer + "]"
    if isinstance(value, dict):
        if len(value) == 0:
            return "{}"
        entries = [inner + _quote(str(k)) + ": " + _dump(v, level + 1) for k, v in value.items()]
        return "{\n" + ",\n".join(entries) + "\n" + outer + "}"
    raise TypeError("cannot encode " + type(value).__name__ + " as JSON")


def to_json(obj: object) -> str:
    """Pretty JSON text for a node tree, as printed by `--stop-at parse`."""
    return _dump(serialize(obj), 0)
