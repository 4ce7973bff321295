"""Command-line entry point."""

from __future__ import annotations

import sys

from .backend import print_doc
from .doc import to_debug, to_text
from .frontend import ParseError, TokenizeError, parse
from .options import Options, merge_pragmas
from .serialize import to_json

PHASES: list[str] = ["parse", "doc"]

USAGE: str = """\
garnet [OPTIONS] [INPUT] [-o OUTPUT]

Options:
  --to-proc           Rewrite simple blocks into &:method shorthand
  --stop-at PHASE     Stop after phase: parse (AST JSON), doc (debug doc)
  --check             Exit 1 if formatting would change INPUT
  --indent N          Indent width (default 2)
  -o, --output FILE   Write output to FILE instead of stdout
  --help              Show this help message
"""


def read_source(input_file: str | None) -> tuple[str, int]:
    """Read source from file or stdin. Returns (source, exit_code) where exit_code 0 means OK."""
    if input_file is not None:
        try:
            with open(input_file, "rb") as f:
                raw = f.read()
        except OSError:
            print("error: cannot open '" + input_file + "'", file=sys.stderr)
            return ("", 1)
    else:
        raw = sys.stdin.buffer.read()
    if len(raw) > 0:
        try:
            source = raw.decode("utf-8")
        except ValueError:
            print("error: invalid utf-8 in input", file=sys.stderr)
            return ("", 1)
        return (source, 0)
    return ("", 0)


def write_output(output: str, output_file: str | None) -> int:
    """Write output to file or stdout. Returns 0 on success, 1 on error."""
    if output_file is not None:
        try:
            with open(output_file, "w") as f:
                f.write(output)
        except OSError:
            print("error: cannot write '" + output_file + "'", file=sys.stderr)
            return 1
        return 0
    sys.stdout.write(output)
    return 0


# --- Pipeline ---


def run_pipeline(
    source: str, options: Options, stop_at: str | None, check: bool
) -> tuple[int, str]:
    """Run the formatting pipeline. Returns (exit_code, output)."""
    options, skip = merge_pragmas(options, source)
    if skip and stop_at is None:
        if check:
            return (0, "")
        return (0, source)
    try:
        program = parse(source)
    except (TokenizeError, ParseError) as e:
        print("error:" + str(e.line) + ":" + str(e.col) + ": " + e.msg, file=sys.stderr)
        return (1, "")
    if stop_at == "parse":
        return (0, to_json(program) + "\n")
    doc = print_doc(program, options)
    if stop_at == "doc":
        return (0, to_debug(doc) + "\n")
    formatted = to_text(doc, options.indent_width)
    if check:
        if formatted != source:
            print("error: input is not formatted", file=sys.stderr)
            return (1, "")
        return (0, "")
    return (0, formatted)


def parse_args() -> tuple[Options, str | None, bool, str | None, str | None]:
    """Parse command-line arguments. Returns (options, stop_at, check, input_file, output_file)."""
    args = sys.argv[1:]
    to_proc = False
    indent_width = 2
    stop_at: str | None = None
    check = False
    input_file: str | None = None
    output_file: str | None = None
    i = 0
    while i < len(args):
        arg = args[i]
        if arg == "--help" or arg == "-h":
            print(USAGE, end="")
            sys.exit(0)
        elif arg == "--to-proc":
            to_proc = True
            i += 1
        elif arg == "--check":
            check = True
            i += 1
        elif arg == "--stop-at":
            if i + 1 >= len(args):
                print("error: --stop-at requires an argument", file=sys.stderr)
                sys.exit(2)
            stop_at = args[i + 1]
            i += 2
        elif arg == "--indent":
            if i + 1 >= len(args):
                print("error: --indent requires an argument", file=sys.stderr)
                sys.exit(2)
            value = args[i + 1]
            if not value.isdigit() or int(value) == 0:
                print("error: invalid indent width '" + value + "'", file=sys.stderr)
                sys.exit(2)
            indent_width = int(value)
            i += 2
        elif arg == "-o" or arg == "--output":
            if i + 1 >= len(args):
                print("error: " + arg + " requires an argument", file=sys.stderr)
                sys.exit(2)
            output_file = args[i + 1]
            i += 2
        elif arg.startswith("-"):
            print("error: unknown flag '" + arg + "'", file=sys.stderr)
            sys.exit(2)
        else:
            if input_file is not None:
                print("error: unexpected argument '" + arg + "'", file=sys.stderr)
                sys.exit(2)
            input_file = arg
            i += 1
    if stop_at is not None and stop_at not in PHASES:
        print("error: unknown phase '" + stop_at + "'", file=sys.stderr)
        sys.exit(2)
    if check and stop_at is not None:
        print("error: --check cannot be combined with --stop-at", file=sys.stderr)
        sys.exit(2)
    options = Options(to_proc=to_proc, indent_width=indent_width)
    return (options, stop_at, check, input_file, output_file)


def main() -> int:
    """Main entry point."""
    options, stop_at, check, input_file, output_file = parse_args()
    source, err = read_source(input_file)
    if err != 0:
        return err
    if len(source) == 0:
        print("error: no input provided", file=sys.stderr)
        return 2
    exit_code, output = run_pipeline(source, options, stop_at, check)
    if exit_code != 0:
        return exit_code
    if len(output) > 0:
        return write_output(output, output_file)
    return 0


if __name__ == "__main__":
    sys.exit(main())
