"""Frontend package - converts Ruby source to the syntax tree."""

from __future__ import annotations

from ..ast import RProgram
from .parse import ParseError, Parser
from .tokens import Token, TokenizeError, tokenize


def parse(source: str) -> RProgram:
    """Tokenize and parse source. Raises TokenizeError or ParseError."""
    return Parser(tokenize(source)).parse_program()


__all__ = [
    "ParseError",
    "Parser",
    "Token",
    "TokenizeError",
    "parse",
    "tokenize",
]
