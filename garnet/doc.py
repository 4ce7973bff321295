"""Layout documents: the output of every printer.

A document is a tree of five primitives: literal text, concatenation, group
(a unit the renderer may break), indent (one extra level inside a break) and
line (a space when its group stays flat, a newline otherwise). Hard lines
always break and force every enclosing group to break.

Line-width fitting belongs to the renderer that consumes these documents.
`to_text` is the width-agnostic rendering used by the CLI and tests: a group
is flat unless it contains a hard line. Lines outside any group break.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Doc:
    """Base for all document nodes."""


@dataclass(frozen=True)
class Text(Doc):
    value: str


@dataclass(frozen=True)
class Concat(Doc):
    parts: tuple[Doc, ...]


@dataclass(frozen=True)
class Group(Doc):
    contents: Doc


@dataclass(frozen=True)
class Indent(Doc):
    contents: Doc


@dataclass(frozen=True)
class Line(Doc):
    hard: bool = False


DocLike = Doc | str


# ── Builders ────────────────────────────────────────────────


def _coerce(d: DocLike) -> Doc:
    if isinstance(d, str):
        return Text(d)
    return d


def text(value: str) -> Text:
    return Text(value)


def concat(parts: list[DocLike]) -> Concat:
    return Concat(tuple(_coerce(p) for p in parts))


def group(contents: DocLike) -> Group:
    return Group(_coerce(contents))


def indent(contents: DocLike) -> Indent:
    return Indent(_coerce(contents))


line: Line = Line()
hardline: Line = Line(hard=True)


def join(separator: DocLike, parts: list[DocLike]) -> Concat:
    """Interleave separator between parts."""
    out: list[DocLike] = []
    for i, part in enumerate(parts):
        if i > 0:
            out.append(separator)
        out.append(part)
    return concat(out)


# ── Debug serialization ─────────────────────────────────────


def _quote(s: str) -> str:
    return '"' + s.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n") + '"'


def to_debug(doc: DocLike) -> str:
    """Render the builder expression that produces doc."""
    doc = _coerce(doc)
    if isinstance(doc, Text):
        return _quote(doc.value)
    if isinstance(doc, Concat):
        return "concat([" + ", ".join(to_debug(p) for p in doc.parts) + "])"
    if isinstance(doc, Group):
        return "group(" + to_debug(doc.contents) + ")"
    if isinstance(doc, Indent):
        return "indent(" + to_debug(doc.contents) + ")"
    if isinstance(doc, Line):
        if doc.hard:
            return "hardline"
        return "line"
    raise TypeError("unhandled doc type: " + type(doc).__name__)


# ── Rendering ───────────────────────────────────────────────


def has_hardline(doc: Doc) -> bool:
    """Whether doc contains a hard line at any depth."""
    if isinstance(doc, Line):
        return doc.hard
    if isinstance(doc, Concat):
        for p in doc.parts:
            if has_hardline(p):
                return True
        return False
    if isinstance(doc, (Group, Indent)):
        return has_hardline(doc.contents)
    return False


class _Renderer:
    def __init__(self, indent_width: int) -> None:
        self.indent_width: int = indent_width
        self.out: list[str] = []

    def render(self, doc: Doc, level: int, broken: bool) -> None:
        if isinstance(doc, Text):
            self.out.append(doc.value)
        elif isinstance(doc, Concat):
            for p in doc.parts:
                self.render(p, level, broken)
        elif isinstance(doc, Group):
            self.render(doc.contents, level, has_hardline(doc.contents))
        elif isinstance(doc, Indent):
            self.render(doc.contents, level + 1, broken)
        elif isinstance(doc, Line):
            if doc.hard or broken:
                self._newline(level)
            else:
                self.out.append(" ")
        else:
            raise TypeError("unhandled doc type: " + type(doc).__name__)

    def _newline(self, level: int) -> None:
        # Trailing spaces from a soft line that broke are dropped.
        while self.out and self.out[-1] == " ":
            self.out.pop()
        self.out.append("\n" + " " * (self.indent_width * level))


def to_text(doc: DocLike, indent_width: int = 2) -> str:
    """Render doc without a width limit; blank lines lose their indentation."""
    doc = _coerce(doc)
    renderer = _Renderer(indent_width)
    renderer.render(doc, 0, True)
    lines = "".join(renderer.out).split("\n")
    return "\n".join(ln if ln.strip() != "" else "" for ln in lines)
