"""Garnet - Ruby formatting core.

    >>> format_source("x   =  1\\n")
    'x = 1\\n'
"""

from __future__ import annotations

from .backend import print_doc
from .doc import to_text
from .frontend import ParseError, TokenizeError, parse
from .options import Options, merge_pragmas

__version__ = "0.1.0"


def format_source(source: str, options: Options | None = None) -> str:
    """Parse and reprint source. A `# garnet: skip` pragma returns it untouched."""
    if options is None:
        options = Options()
    options, skip = merge_pragmas(options, source)
    if skip:
        return source
    program = parse(source)
    return to_text(print_doc(program, options), options.indent_width)


__all__ = [
    "Options",
    "ParseError",
    "TokenizeError",
    "format_source",
    "parse",
    "print_doc",
]
