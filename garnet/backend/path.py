"""Cursor over the syntax tree used by printers and analysis passes."""

from __future__ import annotations

from typing import Callable

from ..ast import RNode
from ..doc import Doc
from ..options import Options

PrintFn = Callable[["Path"], Doc]


class Path:
    """The node being printed plus every enclosing node back to the root.

    Printers never hold parent references. They step into a child with
    `call`, which pushes it for the duration of the callback, and look
    upward with `ancestor`.
    """

    def __init__(self, root: RNode, printer: PrintFn, options: Options | None = None) -> None:
        self.stack: list[RNode] = [root]
        self.printer: PrintFn = printer
        self.options: Options = options if options is not None else Options()

    def current(self) -> RNode:
        return self.stack[-1]

    def ancestor(self, n: int) -> RNode | None:
        """The nth enclosing node: 1 is the parent, 2 the grandparent."""
        idx = len(self.stack) - 1 - n
        if n < 0 or idx < 0:
            return None
        return self.stack[idx]

    def _child(self, node: object, name: str | int) -> object:
        if isinstance(name, int):
            if not isinstance(node, tuple):
                raise TypeError("cannot index " + type(node).__name__)
            return node[name]
        return getattr(node, name)

    def call(self, fn: Callable[[Path], object], *names: str | int) -> object:
        """Descend through field names and tuple indexes, run fn, then come back.

        Every node passed through on the way is pushed so that it counts as
        an ancestor of the target.
        """
        pushed = 0
        try:
            value: object = self.current()
            for name in names:
                value = self._child(value, name)
                if isinstance(value, RNode):
                    self.stack.append(value)
                    pushed += 1
            if not isinstance(value, RNode):
                raise TypeError("path does not lead to a node: " + repr(names))
            return fn(self)
        finally:
            while pushed > 0:
                self.stack.pop()
                pushed -= 1

    def print_child(self, field: str, index: int | None = None) -> Doc:
        if index is None:
            return self.call(self.printer, field)
        return self.call(self.printer, field, index)

    def map(self, fn: Callable[[Path], object], field: str) -> list[object]:
        """Run fn once per element of a tuple-valued field."""
        items = getattr(self.current(), field)
        results: list[object] = []
        for i in range(len(items)):
            results.append(self.call(fn, field, i))
        return results

    def map_print_children(self, field: str) -> list[Doc]:
        return self.map(self.printer, field)
