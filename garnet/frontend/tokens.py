"""Ruby tokenizer. Lexes the supported subset into a flat token list.

Newlines are significant in Ruby, so they are kept as TK_NEWLINE tokens and
the parser decides where a line continues. Comments are kept as TK_COMMENT
tokens so the parser can attach them to statements.
"""

from __future__ import annotations


# Token type constants
TK_INT = "INT"
TK_FLOAT = "FLOAT"
TK_STRING = "STRING"
TK_SYMBOL = "SYMBOL"
TK_REGEXP = "REGEXP"
TK_IDENT = "IDENT"
TK_CONST = "CONST"
TK_IVAR = "IVAR"
TK_CVAR = "CVAR"
TK_GVAR = "GVAR"
TK_LABEL = "LABEL"
TK_KEYWORD = "KEYWORD"
TK_OP = "OP"
TK_NEWLINE = "NEWLINE"
TK_COMMENT = "COMMENT"
TK_EOF = "EOF"

KEYWORDS: set[str] = {
    "BEGIN",
    "END",
    "alias",
    "and",
    "begin",
    "break",
    "case",
    "class",
    "def",
    "defined?",
    "do",
    "else",
    "elsif",
    "end",
    "ensure",
    "false",
    "for",
    "if",
    "in",
    "module",
    "next",
    "nil",
    "not",
    "or",
    "redo",
    "rescue",
    "retry",
    "return",
    "self",
    "super",
    "then",
    "true",
    "undef",
    "unless",
    "until",
    "when",
    "while",
    "yield",
}

# Multi-character operators, sorted by length descending for greedy matching
MULTI_OPS: list[str] = [
    "**=",
    "<=>",
    "===",
    "<<=",
    ">>=",
    "&&=",
    "||=",
    "...",
    "**",
    "==",
    "!=",
    ">=",
    "<=",
    "&&",
    "||",
    "<<",
    ">>",
    "+=",
    "-=",
    "*=",
    "/=",
    "%=",
    "|=",
    "&=",
    "^=",
    "=>",
    "->",
    "::",
    "&.",
    "..",
    "=~",
    "!~",
]

SINGLE_OPS: set[str] = {
    "+",
    "-",
    "*",
    "/",
    "%",
    "=",
    "<",
    ">",
    "!",
    "&",
    "|",
    "^",
    "~",
    "(",
    ")",
    "[",
    "]",
    "{",
    "}",
    ",",
    ".",
    ";",
    ":",
    "?",
}

# Operator method names that may follow a colon in a symbol literal.
SYMBOL_OPS: list[str] = [
    "[]=",
    "<=>",
    "===",
    "**",
    "==",
    "!=",
    ">=",
    "<=",
    "<<",
    ">>",
    "[]",
    "=~",
    "+",
    "-",
    "*",
    "/",
    "%",
    "<",
    ">",
    "!",
    "&",
    "|",
    "^",
    "~",
]

# Keywords after which a value, not an operator, is expected.
_VALUE_KEYWORDS: set[str] = {"end", "self", "nil", "true", "false"}


class TokenizeError(Exception):
    """Error during tokenization."""

    def __init__(self, msg: str, line: int, col: int):
        self.msg: str = msg
        self.line: int = line
        self.col: int = col
        super().__init__(msg + " at line " + str(line) + " col " + str(col))


class Token:
    """A token with type, value, position, and whether whitespace preceded it."""

    def __init__(self, type_: str, value: str, line: int, col: int, spaced: bool = False):
        self.type: str = type_
        self.value: str = value
        self.line: int = line
        self.col: int = col
        self.spaced: bool = spaced

    def __repr__(self) -> str:
        return (
            "Token("
            + self.type
            + ", "
            + repr(self.value)
            + ", "
            + str(self.line)
            + ", "
            + str(self.col)
            + ")"
        )


def _is_digit(c: str) -> bool:
    return c >= "0" and c <= "9"


def _is_alpha(c: str) -> bool:
    return (c >= "a" and c <= "z") or (c >= "A" and c <= "Z") or c == "_"


def _is_alnum(c: str) -> bool:
    return _is_alpha(c) or _is_digit(c)


def _is_upper(c: str) -> bool:
    return c >= "A" and c <= "Z"


def _ends_value(tokens: list[Token]) -> bool:
    """Whether the previous token ends an operand, making / a division."""
    if not tokens:
        return False
    prev = tokens[-1]
    if prev.type in (TK_NEWLINE, TK_COMMENT, TK_LABEL):
        return False
    if prev.type == TK_OP:
        return prev.value in (")", "]", "}")
    if prev.type == TK_KEYWORD:
        return prev.value in _VALUE_KEYWORDS
    return True


def _scan_quoted(source: str, pos: int, quote: str, line: int, col: int) -> int:
    """Return the position just past the closing quote starting at pos (on the quote)."""
    length = len(source)
    i = pos + 1
    depth = 0
    while i < length:
        c = source[i]
        if c == "\\":
            i += 2
            continue
        if quote == '"' and c == "#" and i + 1 < length and source[i + 1] == "{":
            depth += 1
            i += 2
            continue
        if depth > 0 and c == "}":
            depth -= 1
            i += 1
            continue
        if depth == 0 and c == quote:
            return i + 1
        i += 1
    raise TokenizeError("unterminated string literal", line, col)


def tokenize(source: str) -> list[Token]:
    """Tokenize Ruby source into a flat list ending with TK_EOF."""
    tokens: list[Token] = []
    pos = 0
    line = 1
    col = 1
    length = len(source)
    spaced = False

    while pos < length:
        c = source[pos]

        # Newlines
        if c == "\n":
            tokens.append(Token(TK_NEWLINE, "\n", line, col, spaced))
            pos += 1
            line += 1
            col = 1
            spaced = False
            continue

        # Whitespace
        if c == " " or c == "\t" or c == "\r":
            pos += 1
            col += 1
            spaced = True
            continue

        # Line continuation
        if c == "\\" and pos + 1 < length and source[pos + 1] == "\n":
            pos += 2
            line += 1
            col = 1
            spaced = True
            continue

        # Comment
        if c == "#":
            end = source.find("\n", pos)
            if end == -1:
                end = length
            text = source[pos:end].rstrip()
            tokens.append(Token(TK_COMMENT, text, line, col, spaced))
            col += end - pos
            pos = end
            continue

        # __END__ stops the program
        if col == 1 and source.startswith("__END__", pos):
            rest = source[pos + 7 : pos + 8]
            if rest == "" or rest == "\n":
                break

        start_pos = pos
        start_line = line
        start_col = col

        # Number
        if _is_digit(c):
            while pos < length and (_is_digit(source[pos]) or source[pos] == "_"):
                pos += 1
            is_float = False
            if pos + 1 < length and source[pos] == "." and _is_digit(source[pos + 1]):
                is_float = True
                pos += 1
                while pos < length and (_is_digit(source[pos]) or source[pos] == "_"):
                    pos += 1
            if pos < length and (source[pos] == "e" or source[pos] == "E"):
                is_float = True
                pos += 1
                if pos < length and (source[pos] == "+" or source[pos] == "-"):
                    pos += 1
                if pos >= length or not _is_digit(source[pos]):
                    raise TokenizeError("invalid float exponent", start_line, start_col)
                while pos < length and _is_digit(source[pos]):
                    pos += 1
            raw = source[start_pos:pos]
            col += pos - start_pos
            if is_float:
                tokens.append(Token(TK_FLOAT, raw, start_line, start_col, spaced))
            else:
                tokens.append(Token(TK_INT, raw, start_line, start_col, spaced))
            spaced = False
            continue

        # String literal
        if c == '"' or c == "'":
            end = _scan_quoted(source, pos, c, start_line, start_col)
            raw = source[pos:end]
            if "\n" in raw:
                raise TokenizeError("multi-line string literal", start_line, start_col)
            col += end - pos
            pos = end
            tokens.append(Token(TK_STRING, raw, start_line, start_col, spaced))
            spaced = False
            continue

        # Instance, class, and global variables
        if c == "@" or c == "$":
            pos += 1
            if c == "@" and pos < length and source[pos] == "@":
                pos += 1
            if pos >= length or not _is_alpha(source[pos]):
                raise TokenizeError("invalid variable name", start_line, start_col)
            while pos < length and _is_alnum(source[pos]):
                pos += 1
            word = source[start_pos:pos]
            col += pos - start_pos
            if word.startswith("@@"):
                type_ = TK_CVAR
            elif c == "@":
                type_ = TK_IVAR
            else:
                type_ = TK_GVAR
            tokens.append(Token(type_, word, start_line, start_col, spaced))
            spaced = False
            continue

        # Symbol: :name, :name?, :+
        if c == ":" and pos + 1 < length and source[pos + 1] != ":":
            nxt = source[pos + 1]
            if _is_alpha(nxt):
                pos += 1
                while pos < length and _is_alnum(source[pos]):
                    pos += 1
                if pos < length and source[pos] in "?!=":
                    after = source[pos + 1 : pos + 2]
                    if after != "=" and not (source[pos] == "=" and after in (">", "~")):
                        pos += 1
                raw = source[start_pos:pos]
                col += pos - start_pos
                tokens.append(Token(TK_SYMBOL, raw[1:], start_line, start_col, spaced))
                spaced = False
                continue
            matched_op = ""
            for op in SYMBOL_OPS:
                if source.startswith(op, pos + 1):
                    matched_op = op
                    break
            if matched_op != "" and not _ends_value(tokens):
                pos += 1 + len(matched_op)
                col += 1 + len(matched_op)
                tokens.append(Token(TK_SYMBOL, matched_op, start_line, start_col, spaced))
                spaced = False
                continue

        # Regexp literal in value position
        if c == "/" and not _ends_value(tokens):
            i = pos + 1
            while i < length and source[i] != "/":
                if source[i] == "\n":
                    raise TokenizeError("unterminated regexp literal", start_line, start_col)
                if source[i] == "\\":
                    i += 1
                i += 1
            if i >= length:
                raise TokenizeError("unterminated regexp literal", start_line, start_col)
            i += 1
            while i < length and source[i] in "imxo":
                i += 1
            raw = source[pos:i]
            col += i - pos
            pos = i
            tokens.append(Token(TK_REGEXP, raw, start_line, start_col, spaced))
            spaced = False
            continue

        # Identifier, constant, keyword, or label
        if _is_alpha(c):
            while pos < length and _is_alnum(source[pos]):
                pos += 1
            if pos < length and (source[pos] == "?" or source[pos] == "!"):
                after = source[pos + 1 : pos + 2]
                if after != "=" or source[pos + 1 : pos + 3] == "==":
                    pos += 1
            word = source[start_pos:pos]
            is_label = (
                pos < length
                and source[pos] == ":"
                and source[pos + 1 : pos + 2] != ":"
                and not (tokens and tokens[-1].type == TK_OP and tokens[-1].value in (".", "&.", "::"))
            )
            if is_label:
                pos += 1
                col += pos - start_pos
                tokens.append(Token(TK_LABEL, word + ":", start_line, start_col, spaced))
            else:
                col += pos - start_pos
                after_dot = tokens and tokens[-1].type == TK_OP and tokens[-1].value in (".", "&.", "::")
                if word in KEYWORDS and not after_dot:
                    tokens.append(Token(TK_KEYWORD, word, start_line, start_col, spaced))
                elif _is_upper(c):
                    tokens.append(Token(TK_CONST, word, start_line, start_col, spaced))
                else:
                    tokens.append(Token(TK_IDENT, word, start_line, start_col, spaced))
            spaced = False
            continue

        # Multi-character operators
        matched = False
        for op in MULTI_OPS:
            op_len = len(op)
            if pos + op_len <= length and source[pos : pos + op_len] == op:
                tokens.append(Token(TK_OP, op, start_line, start_col, spaced))
                pos += op_len
                col += op_len
                matched = True
                break
        if matched:
            spaced = False
            continue

        # Single-character operators
        if c in SINGLE_OPS:
            tokens.append(Token(TK_OP, c, start_line, start_col, spaced))
            pos += 1
            col += 1
            spaced = False
            continue

        raise TokenizeError("unexpected character: " + repr(c), line, col)

    tokens.append(Token(TK_EOF, "", line, col, spaced))
    return tokens
