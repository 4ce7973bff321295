"""Formatting options and source pragmas."""

from __future__ import annotations

from dataclasses import dataclass

PRAGMA_PREFIX: str = "garnet:"

# Only the first few lines are searched, as with other file-level directives.
PRAGMA_LINES: int = 5


@dataclass
class Options:
    """Printer configuration.

    to_proc enables collapsing `{ |x| x.name }` into `&:name`.
    """

    to_proc: bool = False
    indent_width: int = 2


def extract_pragmas(source: str) -> tuple[bool, bool]:
    """Scan leading comment lines for `# garnet: ...`. Returns (to_proc, skip)."""
    to_proc = False
    skip = False
    lines = source.split("\n", PRAGMA_LINES)
    i = 0
    while i < len(lines) and i < PRAGMA_LINES:
        stripped = lines[i].strip()
        if stripped == "":
            i += 1
            continue
        if not stripped.startswith("#"):
            break
        body = stripped[1:].strip()
        if body.startswith(PRAGMA_PREFIX):
            for word in body[len(PRAGMA_PREFIX) :].replace(",", " ").split():
                if word == "to-proc":
                    to_proc = True
                elif word == "skip":
                    skip = True
        i += 1
    return (to_proc, skip)


def merge_pragmas(options: Options, source: str) -> tuple[Options, bool]:
    """Apply pragmas on top of options. Returns (options, skip)."""
    to_proc, skip = extract_pragmas(source)
    if to_proc and not options.to_proc:
        options = Options(to_proc=True, indent_width=options.indent_width)
    return (options, skip)
