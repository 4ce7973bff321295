"""Ruby parser: recursive descent over the supported subset.

The parser tracks local variable scopes the way Ruby does: an identifier that
has been assigned, or bound as a block or lambda parameter, reads as a local
variable (`var_ref`); any other bare identifier is a method call (`vcall`).
Blocks see the locals of their enclosing scope; their own parameters do not
leak out.
"""

from __future__ import annotations

from dataclasses import replace

from ..ast import (
    CallOperator,
    Pos,
    RAref,
    RArefField,
    RArgParen,
    RArgs,
    RArray,
    RAssign,
    RAssoc,
    RBareAssocHash,
    RBinary,
    RBlockArg,
    RBlockParam,
    RBlockVar,
    RBodyStmt,
    RBraceBlock,
    RCall,
    RCallShorthand,
    RComment,
    RCommand,
    RCommented,
    RConst,
    RConstPathRef,
    RCVar,
    RDoBlock,
    RDoubleSplat,
    RExcessedComma,
    RFCall,
    RField,
    RFloat,
    RGVar,
    RHash,
    RIdent,
    RInt,
    RIVar,
    RKeyword,
    RKeywordParam,
    RKeywordRestParam,
    RLabel,
    RLambda,
    RMethodAddBlock,
    RNode,
    ROp,
    ROpAssign,
    ROptionalParam,
    RParams,
    RParen,
    RProgram,
    RRegexp,
    RRescue,
    RRestParam,
    RSplat,
    RSplatValueList,
    RString,
    RSymbolLit,
    RUnary,
    RValueList,
    RVarField,
    RVarRef,
    RVCall,
)
from .tokens import (
    KEYWORDS,
    TK_COMMENT,
    TK_CONST,
    TK_CVAR,
    TK_EOF,
    TK_FLOAT,
    TK_GVAR,
    TK_IDENT,
    TK_INT,
    TK_IVAR,
    TK_KEYWORD,
    TK_LABEL,
    TK_NEWLINE,
    TK_OP,
    TK_REGEXP,
    TK_STRING,
    TK_SYMBOL,
    Token,
)

OP_ASSIGN_OPS: set[str] = {
    "+=",
    "-=",
    "*=",
    "/=",
    "%=",
    "**=",
    "||=",
    "&&=",
    "|=",
    "&=",
    "^=",
    "<<=",
    ">>=",
}

EQUALITY_OPS: set[str] = {"==", "!=", "===", "=~", "!~", "<=>"}

COMPARE_OPS: set[str] = {"<", "<=", ">", ">="}

CALL_OPS: set[str] = {".", "&.", "::"}

# Operators that may be called as methods: recv.+(1), recv.==(other).
METHOD_OPS: set[str] = {
    "+",
    "-",
    "*",
    "/",
    "%",
    "**",
    "==",
    "!=",
    "<",
    "<=",
    ">",
    ">=",
    "<=>",
    "===",
    "<<",
    ">>",
    "&",
    "|",
    "^",
    "!",
    "~",
    "=~",
}


_LITERAL_KEYWORDS: set[str] = {"nil", "true", "false", "self"}


class ParseError(Exception):
    """Parse error with location info."""

    def __init__(self, msg: str, line: int, col: int):
        self.msg: str = msg
        self.line: int = line
        self.col: int = col
        super().__init__(msg + " at line " + str(line) + " col " + str(col))


class Parser:
    """Recursive descent parser for the supported Ruby subset."""

    def __init__(self, tokens: list[Token]):
        self.tokens: list[Token] = tokens
        self.pos: int = 0
        self.scopes: list[set[str]] = [set()]
        # Depth of argument lists in which `do` belongs to the outer command.
        self.no_do: int = 0

    # ── Helpers ──────────────────────────────────────────────

    def current(self) -> Token:
        return self.tokens[self.pos]

    def peek(self, offset: int) -> Token:
        idx = self.pos + offset
        if idx >= len(self.tokens):
            return self.tokens[len(self.tokens) - 1]
        return self.tokens[idx]

    def advance(self) -> Token:
        tok = self.tokens[self.pos]
        self.pos += 1
        return tok

    def at(self, value: str) -> bool:
        tok = self.current()
        return tok.value == value and tok.type in (TK_OP, TK_KEYWORD)

    def at_type(self, type_: str) -> bool:
        return self.current().type == type_

    def expect(self, value: str) -> Token:
        tok = self.current()
        if not self.at(value):
            raise self.error("expected '" + value + "', got " + _describe(tok))
        return self.advance()

    def error(self, msg: str) -> ParseError:
        tok = self.current()
        return ParseError(msg, tok.line, tok.col)

    def _pos(self) -> Pos:
        tok = self.current()
        return Pos(tok.line, tok.col)

    def _tok_pos(self, tok: Token) -> Pos:
        return Pos(tok.line, tok.col)

    def skip_newlines(self) -> None:
        """Skip line breaks where the expression continues on the next line."""
        while self.at_type(TK_NEWLINE) or self.at_type(TK_COMMENT):
            if self.at_type(TK_COMMENT):
                raise self.error("comments inside an expression are not supported")
            self.advance()

    def _at_terminator(self) -> bool:
        tok = self.current()
        return tok.type in (TK_NEWLINE, TK_EOF, TK_COMMENT) or (
            tok.type == TK_OP and tok.value == ";"
        )

    # ── Scopes ───────────────────────────────────────────────

    def push_scope(self) -> None:
        self.scopes.append(set())

    def pop_scope(self) -> None:
        self.scopes.pop()

    def declare(self, name: str) -> None:
        self.scopes[-1].add(name)

    def is_local(self, name: str) -> bool:
        for scope in self.scopes:
            if name in scope:
                return True
        return False

    # ── Statements ───────────────────────────────────────────

    def parse_program(self) -> RProgram:
        pos = self._pos()
        stmts = self.parse_stmts(set())
        if not self.at_type(TK_EOF):
            raise self.error("unexpected " + _describe(self.current()))
        return RProgram(pos, stmts)

    def parse_stmts(self, terminators: set[str]) -> tuple[RNode, ...]:
        """Parse statements until EOF or a keyword/operator in terminators."""
        stmts: list[RNode] = []
        while True:
            tok = self.current()
            if tok.type == TK_EOF:
                break
            if tok.type in (TK_OP, TK_KEYWORD) and tok.value in terminators:
                break
            if tok.type == TK_NEWLINE or (tok.type == TK_OP and tok.value == ";"):
                self.advance()
                continue
            if tok.type == TK_COMMENT:
                self.advance()
                stmts.append(RComment(self._tok_pos(tok), tok.value))
                continue
            stmt = self.parse_stmt()
            if self.at_type(TK_COMMENT):
                comment_tok = self.advance()
                comment = RComment(self._tok_pos(comment_tok), comment_tok.value)
                if isinstance(stmt, RCall):
                    stmts.append(replace(stmt, comments=stmt.comments + (comment,)))
                else:
                    stmts.append(RCommented(stmt.pos, stmt, (comment,)))
                continue
            stmts.append(stmt)
            tok = self.current()
            if tok.type in (TK_OP, TK_KEYWORD) and tok.value in terminators:
                break
            if not self._at_terminator():
                raise self.error("expected end of statement, got " + _describe(tok))
        return tuple(stmts)

    def parse_stmt(self) -> RNode:
        tok = self.current()
        if tok.type == TK_KEYWORD and tok.value not in _LITERAL_KEYWORDS and tok.value != "not":
            raise self.error("unsupported syntax: '" + tok.value + "'")
        stmt = self.parse_expr_stmt()
        if self.at(","):
            raise self.error("multiple assignment is not supported")
        return stmt

    def parse_expr_stmt(self, rhs_list: bool = True) -> RNode:
        """ExprStmt = Expr ( '=' Rhs | OpAssign Expr )?

        A chained assignment on the right of another one takes a single
        value: in `a = b = 1, 2` the list belongs to `a`.
        """
        pos = self._pos()
        expr = self.parse_expr()
        tok = self.current()
        if tok.type == TK_OP and tok.value == "=":
            target = self._to_target(expr)
            self.advance()
            self.skip_newlines()
            value = self.parse_rhs() if rhs_list else self.parse_rhs_single()
            return RAssign(pos, target, value)
        if tok.type == TK_OP and tok.value in OP_ASSIGN_OPS:
            target = self._to_target(expr)
            self.advance()
            self.skip_newlines()
            value = self.parse_rhs_single()
            return ROpAssign(pos, target, tok.value, value)
        return expr

    def _to_target(self, expr: RNode) -> RNode:
        """Convert a parsed expression on the left of = into an assignment target."""
        if isinstance(expr, RVCall):
            self.declare(expr.message.name)
            return RVarField(expr.pos, expr.message)
        if isinstance(expr, RVarRef):
            if isinstance(expr.inner, RKeyword):
                raise ParseError(
                    "cannot assign to " + expr.inner.name, expr.pos.line, expr.pos.col
                )
            return RVarField(expr.pos, expr.inner)
        if isinstance(expr, RCall) and expr.args is None and isinstance(expr.message, RIdent):
            return RField(expr.pos, expr.receiver, expr.operator, expr.message)
        if isinstance(expr, RAref):
            return RArefField(expr.pos, expr.receiver, expr.args)
        if isinstance(expr, RConstPathRef):
            return expr
        raise ParseError("invalid assignment target", expr.pos.line, expr.pos.col)

    def parse_rhs(self) -> RNode:
        """Rhs = Value ( ',' Value )* where Value may be a splat."""
        pos = self._pos()
        first = self.parse_rhs_value()
        if not (self.at(",")):
            if isinstance(first, RSplat):
                return RSplatValueList(pos, (first,))
            return first
        values: list[RNode] = [first]
        while self.at(","):
            self.advance()
            self.skip_newlines()
            values.append(self.parse_rhs_value())
        for v in values:
            if isinstance(v, RSplat):
                return RSplatValueList(pos, tuple(values))
        return RValueList(pos, tuple(values))

    def parse_rhs_value(self) -> RNode:
        if self.at("*"):
            pos = self._pos()
            self.advance()
            return RSplat(pos, self.parse_range())
        return self.parse_rhs_single()

    def parse_rhs_single(self) -> RNode:
        """A single value, allowing chained assignment: a = b = 1."""
        return self.parse_expr_stmt(rhs_list=False)

    # ── Expressions ──────────────────────────────────────────

    def parse_expr(self) -> RNode:
        """Expr = Not ( ( 'and' | 'or' ) Not )*"""
        left = self.parse_not()
        while self.at("and") or self.at("or"):
            op = self.advance().value
            self.skip_newlines()
            right = self.parse_not()
            left = RBinary(left.pos, left, op, right)
        return left

    def parse_not(self) -> RNode:
        if self.at("not"):
            pos = self._pos()
            self.advance()
            return RUnary(pos, "not", self.parse_not())
        return self.parse_range()

    def parse_range(self) -> RNode:
        """Range = Or ( ( '..' | '...' ) Or )?"""
        left = self.parse_or()
        if self.at("..") or self.at("..."):
            op = self.advance().value
            right = self.parse_or()
            return RBinary(left.pos, left, op, right)
        return left

    def _binary_level(self, ops: set[str], operand) -> RNode:
        left = operand()
        while self.current().type == TK_OP and self.current().value in ops:
            op = self.advance().value
            self.skip_newlines()
            right = operand()
            left = RBinary(left.pos, left, op, right)
        return left

    def parse_or(self) -> RNode:
        return self._binary_level({"||"}, self.parse_and)

    def parse_and(self) -> RNode:
        return self._binary_level({"&&"}, self.parse_equality)

    def parse_equality(self) -> RNode:
        """Equality is non-associative."""
        left = self.parse_compare()
        tok = self.current()
        if tok.type == TK_OP and tok.value in EQUALITY_OPS:
            op = self.advance().value
            self.skip_newlines()
            right = self.parse_compare()
            return RBinary(left.pos, left, op, right)
        return left

    def parse_compare(self) -> RNode:
        return self._binary_level(COMPARE_OPS, self.parse_bit_or)

    def parse_bit_or(self) -> RNode:
        return self._binary_level({"|", "^"}, self.parse_bit_and)

    def parse_bit_and(self) -> RNode:
        return self._binary_level({"&"}, self.parse_shift)

    def parse_shift(self) -> RNode:
        return self._binary_level({"<<", ">>"}, self.parse_sum)

    def parse_sum(self) -> RNode:
        return self._binary_level({"+", "-"}, self.parse_product)

    def parse_product(self) -> RNode:
        return self._binary_level({"*", "/", "%"}, self.parse_negate)

    def parse_negate(self) -> RNode:
        """Negate = '-' Negate | Power"""
        if self.at("-"):
            pos = self._pos()
            self.advance()
            return RUnary(pos, "-", self.parse_negate())
        return self.parse_power()

    def parse_power(self) -> RNode:
        """Power = Unary ( '**' Negate )?  (right-associative)"""
        left = self.parse_unary()
        if self.at("**"):
            self.advance()
            self.skip_newlines()
            right = self.parse_negate()
            return RBinary(left.pos, left, "**", right)
        return left

    def parse_unary(self) -> RNode:
        """Unary = ( '!' | '~' | '+' ) Unary | Postfix"""
        if self.at("!") or self.at("~") or self.at("+"):
            pos = self._pos()
            op = self.advance().value
            return RUnary(pos, op, self.parse_unary())
        return self.parse_postfix()

    def parse_postfix(self) -> RNode:
        """Postfix = Primary ( CallSuffix | Index )*"""
        expr = self.parse_primary()
        while True:
            if self.at_type(TK_NEWLINE) and self._continues_on_next_line():
                self.skip_newlines()
            tok = self.current()
            if tok.type == TK_OP and tok.value in CALL_OPS:
                expr = self.parse_call_suffix(expr)
            elif tok.type == TK_OP and tok.value == "[" and not tok.spaced:
                pos = expr.pos
                self.advance()
                self.skip_newlines()
                args: RArgs | None = None
                if not self.at("]"):
                    args = self.parse_call_args("]")
                self.skip_newlines()
                self.expect("]")
                expr = RAref(pos, expr, args)
            else:
                break
        return expr

    def _continues_on_next_line(self) -> bool:
        """Whether the next non-blank line starts with a leading-dot call."""
        i = self.pos
        while i < len(self.tokens) and self.tokens[i].type == TK_NEWLINE:
            i += 1
        tok = self.tokens[i] if i < len(self.tokens) else self.tokens[-1]
        return tok.type == TK_OP and tok.value in (".", "&.")

    def parse_call_suffix(self, receiver: RNode) -> RNode:
        """CallSuffix = CallOp ( '(' Args ')' | Name ArgParen? ) Block?"""
        pos = receiver.pos
        op_tok = self.advance()
        operator: CallOperator = _call_operator(op_tok.value)
        self.skip_newlines()
        tok = self.current()
        if tok.type == TK_OP and tok.value == "(":
            args = self.parse_arg_paren()
            call: RNode = RCall(pos, receiver, operator, RCallShorthand(self._tok_pos(tok)), args)
            return self.parse_block_suffix(call)
        message: RIdent | RConst | ROp
        if tok.type == TK_IDENT:
            self.advance()
            message = RIdent(self._tok_pos(tok), tok.value)
        elif tok.type == TK_CONST:
            self.advance()
            next_tok = self.current()
            if operator == "::" and not (next_tok.type == TK_OP and next_tok.value == "(" and not next_tok.spaced):
                return RConstPathRef(pos, receiver, RConst(self._tok_pos(tok), tok.value))
            message = RConst(self._tok_pos(tok), tok.value)
        elif tok.type == TK_KEYWORD:
            self.advance()
            message = RIdent(self._tok_pos(tok), tok.value)
        elif tok.type == TK_OP and tok.value in METHOD_OPS:
            self.advance()
            message = ROp(self._tok_pos(tok), tok.value)
        else:
            raise self.error("expected method name after '" + op_tok.value + "'")
        args_paren: RArgParen | None = None
        next_tok = self.current()
        if next_tok.type == TK_OP and next_tok.value == "(" and not next_tok.spaced:
            args_paren = self.parse_arg_paren()
        call = RCall(pos, receiver, operator, message, args_paren)
        return self.parse_block_suffix(call)

    def parse_block_suffix(self, call: RNode) -> RNode:
        """Attach a brace block, or a do block unless inside command arguments."""
        if self.at("{"):
            return RMethodAddBlock(call.pos, call, self.parse_brace_block())
        if self.at("do") and self.no_do == 0:
            return RMethodAddBlock(call.pos, call, self.parse_do_block())
        return call

    # ── Primary ──────────────────────────────────────────────

    def parse_primary(self) -> RNode:
        tok = self.current()
        pos = self._pos()

        if tok.type == TK_INT:
            self.advance()
            return RInt(pos, tok.value)
        if tok.type == TK_FLOAT:
            self.advance()
            return RFloat(pos, tok.value)
        if tok.type == TK_STRING:
            self.advance()
            return RString(pos, tok.value)
        if tok.type == TK_REGEXP:
            self.advance()
            return RRegexp(pos, tok.value)
        if tok.type == TK_SYMBOL:
            self.advance()
            return RSymbolLit(pos, _symbol_value(tok, pos))

        if tok.type == TK_KEYWORD and tok.value in _LITERAL_KEYWORDS:
            self.advance()
            return RVarRef(pos, RKeyword(pos, tok.value))
        if tok.type == TK_IVAR:
            self.advance()
            return RVarRef(pos, RIVar(pos, tok.value))
        if tok.type == TK_CVAR:
            self.advance()
            return RVarRef(pos, RCVar(pos, tok.value))
        if tok.type == TK_GVAR:
            self.advance()
            return RVarRef(pos, RGVar(pos, tok.value))

        if tok.type == TK_CONST:
            self.advance()
            const = RConst(pos, tok.value)
            nxt = self.current()
            if nxt.type == TK_OP and nxt.value == "(" and not nxt.spaced:
                return self.parse_block_suffix(RFCall(pos, const, self.parse_arg_paren()))
            return RVarRef(pos, const)

        if tok.type == TK_IDENT:
            return self.parse_identifier()

        if tok.type == TK_OP:
            if tok.value == "(":
                self.advance()
                self.skip_newlines()
                inner = self.parse_stmt()
                self.skip_newlines()
                self.expect(")")
                return RParen(pos, inner)
            if tok.value == "[":
                return self.parse_array()
            if tok.value == "{":
                return self.parse_hash()
            if tok.value == "->":
                return self.parse_lambda()

        raise self.error("unexpected " + _describe(tok))

    def parse_identifier(self) -> RNode:
        tok = self.advance()
        pos = self._tok_pos(tok)
        ident = RIdent(pos, tok.value)
        nxt = self.current()
        if nxt.type == TK_OP and nxt.value == "(" and not nxt.spaced:
            return self.parse_block_suffix(RFCall(pos, ident, self.parse_arg_paren()))
        if self.is_local(tok.value):
            return RVarRef(pos, ident)
        if self._at_command_arg():
            self.no_do += 1
            try:
                args = self.parse_call_args(None)
            finally:
                self.no_do -= 1
            command = RCommand(pos, ident, args)
            if self.at("do") and self.no_do == 0:
                return RMethodAddBlock(pos, command, self.parse_do_block())
            return command
        if self.at("{") or (self.at("do") and self.no_do == 0):
            return self.parse_block_suffix(RFCall(pos, ident, None))
        return RVCall(pos, ident)

    def _at_command_arg(self) -> bool:
        """Whether the current token starts the first argument of a paren-less call."""
        tok = self.current()
        if not tok.spaced:
            return False
        if tok.type in (
            TK_INT,
            TK_FLOAT,
            TK_STRING,
            TK_SYMBOL,
            TK_REGEXP,
            TK_IDENT,
            TK_CONST,
            TK_IVAR,
            TK_CVAR,
            TK_GVAR,
            TK_LABEL,
        ):
            return True
        if tok.type == TK_KEYWORD:
            return tok.value in _LITERAL_KEYWORDS or tok.value == "not"
        if tok.type == TK_OP:
            if tok.value in ("[", "->", "("):
                return True
            if tok.value in ("*", "**", "&", "-", "!"):
                # `foo *args` is a splat argument; `foo * args` is multiplication.
                return not self.peek(1).spaced
        return False

    # ── Arguments ────────────────────────────────────────────

    def parse_arg_paren(self) -> RArgParen:
        pos = self._pos()
        self.expect("(")
        saved = self.no_do
        self.no_do = 0
        try:
            self.skip_newlines()
            if self.at(")"):
                self.advance()
                return RArgParen(pos, None)
            args = self.parse_call_args(")")
            self.skip_newlines()
            self.expect(")")
        finally:
            self.no_do = saved
        return RArgParen(pos, args)

    def parse_call_args(self, closer: str | None) -> RArgs:
        """Args = Arg ( ',' Arg )*; trailing key/value pairs form one bare hash."""
        pos = self._pos()
        parts: list[RNode] = []
        assocs: list[RNode] = []
        assoc_pos: Pos | None = None
        while True:
            arg = self.parse_arg()
            if isinstance(arg, (RAssoc, RDoubleSplat)):
                if assoc_pos is None:
                    assoc_pos = arg.pos
                assocs.append(arg)
            else:
                if assoc_pos is not None:
                    parts.append(RBareAssocHash(assoc_pos, tuple(assocs)))
                    assocs = []
                    assoc_pos = None
                parts.append(arg)
            if not self.at(","):
                break
            self.advance()
            self.skip_newlines()
            if closer is not None and self.at(closer):
                break
        if assoc_pos is not None:
            parts.append(RBareAssocHash(assoc_pos, tuple(assocs)))
        return RArgs(pos, tuple(parts))

    def parse_arg(self) -> RNode:
        """Arg = '*' Expr | '**' Expr | '&' Expr? | Label Expr | Expr ( '=>' Expr )?"""
        tok = self.current()
        pos = self._pos()
        if self.at("*"):
            self.advance()
            return RSplat(pos, self.parse_range())
        if self.at("**"):
            self.advance()
            return RDoubleSplat(pos, self.parse_range())
        if self.at("&"):
            self.advance()
            if self.at(")") or self._at_terminator():
                return RBlockArg(pos, None)
            return RBlockArg(pos, self.parse_range())
        if tok.type == TK_LABEL:
            self.advance()
            self.skip_newlines()
            label = RLabel(pos, tok.value)
            return RAssoc(pos, label, self.parse_arg_value())
        value = self.parse_arg_value()
        if self.at("=>"):
            self.advance()
            self.skip_newlines()
            return RAssoc(pos, value, self.parse_arg_value())
        return value

    def parse_arg_value(self) -> RNode:
        return self.parse_not()

    # ── Literals ─────────────────────────────────────────────

    def parse_array(self) -> RArray:
        pos = self._pos()
        self.expect("[")
        saved = self.no_do
        self.no_do = 0
        elements: list[RNode] = []
        try:
            self.skip_newlines()
            while not self.at("]"):
                if self.at("*"):
                    splat_pos = self._pos()
                    self.advance()
                    elements.append(RSplat(splat_pos, self.parse_range()))
                else:
                    elements.append(self.parse_not())
                self.skip_newlines()
                if not self.at(","):
                    break
                self.advance()
                self.skip_newlines()
            self.expect("]")
        finally:
            self.no_do = saved
        return RArray(pos, tuple(elements))

    def parse_hash(self) -> RHash:
        pos = self._pos()
        self.expect("{")
        saved = self.no_do
        self.no_do = 0
        assocs: list[RNode] = []
        try:
            self.skip_newlines()
            while not self.at("}"):
                assocs.append(self.parse_assoc())
                self.skip_newlines()
                if not self.at(","):
                    break
                self.advance()
                self.skip_newlines()
            self.expect("}")
        finally:
            self.no_do = saved
        return RHash(pos, tuple(assocs))

    def parse_assoc(self) -> RNode:
        tok = self.current()
        pos = self._pos()
        if self.at("**"):
            self.advance()
            return RDoubleSplat(pos, self.parse_range())
        if tok.type == TK_LABEL:
            self.advance()
            self.skip_newlines()
            return RAssoc(pos, RLabel(pos, tok.value), self.parse_not())
        key = self.parse_not()
        self.skip_newlines()
        self.expect("=>")
        self.skip_newlines()
        return RAssoc(pos, key, self.parse_not())

    def parse_lambda(self) -> RLambda:
        """Lambda = '->' ( '(' Params ')' | Params )? ( '{' Stmts '}' | 'do' Stmts 'end' )"""
        pos = self._pos()
        self.expect("->")
        self.push_scope()
        try:
            params: RParams | None = None
            if self.at("("):
                self.advance()
                params = self.parse_param_list(")")
                self.expect(")")
            elif not self.at("{") and not self.at("do"):
                params = self.parse_param_list("{")
            if self.at("{"):
                self.advance()
                body = self.parse_stmts({"}"})
                self.expect("}")
            else:
                self.expect("do")
                body = self.parse_stmts({"end"})
                self.expect("end")
        finally:
            self.pop_scope()
        return RLambda(pos, params, body)

    # ── Blocks ───────────────────────────────────────────────

    def parse_brace_block(self) -> RBraceBlock:
        pos = self._pos()
        self.expect("{")
        saved = self.no_do
        self.no_do = 0
        self.push_scope()
        try:
            self.skip_newlines()
            params = self.parse_block_var()
            body = self.parse_stmts({"}"})
            self.expect("}")
        finally:
            self.pop_scope()
            self.no_do = saved
        return RBraceBlock(pos, params, body)

    def parse_do_block(self) -> RDoBlock:
        pos = self._pos()
        self.expect("do")
        saved = self.no_do
        self.no_do = 0
        self.push_scope()
        try:
            params = self.parse_block_var()
            body = self.parse_body_stmt()
            self.expect("end")
        finally:
            self.pop_scope()
            self.no_do = saved
        return RDoBlock(pos, params, body)

    def parse_body_stmt(self) -> RBodyStmt:
        """BodyStmt = Stmts Rescue* ( 'else' Stmts )? ( 'ensure' Stmts )?"""
        pos = self._pos()
        stmts = self.parse_stmts({"rescue", "else", "ensure", "end"})
        rescue: RRescue | None = None
        if self.at("rescue"):
            rescue = self.parse_rescue()
        else_body: tuple[RNode, ...] | None = None
        if self.at("else"):
            self.advance()
            else_body = self.parse_stmts({"ensure", "end"})
        ensure: tuple[RNode, ...] | None = None
        if self.at("ensure"):
            self.advance()
            ensure = self.parse_stmts({"end"})
        return RBodyStmt(pos, stmts, rescue, else_body, ensure)

    def parse_rescue(self) -> RRescue:
        """Rescue = 'rescue' ( Expr ( ',' Expr )* )? ( '=>' Ident )? Stmts"""
        pos = self._pos()
        self.expect("rescue")
        exceptions: list[RNode] = []
        variable: RNode | None = None
        if not self._at_terminator() and not self.at("=>") and not self.at("then"):
            exceptions.append(self.parse_range())
            while self.at(","):
                self.advance()
                self.skip_newlines()
                exceptions.append(self.parse_range())
        if self.at("=>"):
            self.advance()
            target = self.parse_primary()
            variable = self._to_target(target)
        if self.at("then"):
            self.advance()
        stmts = self.parse_stmts({"rescue", "else", "ensure", "end"})
        next_rescue: RRescue | None = None
        if self.at("rescue"):
            next_rescue = self.parse_rescue()
        return RRescue(pos, tuple(exceptions), variable, stmts, next_rescue)

    def parse_block_var(self) -> RBlockVar | None:
        """BlockVar = '|' Params '|' | '||'"""
        pos = self._pos()
        if self.at("||"):
            self.advance()
            return RBlockVar(pos, None)
        if not self.at("|"):
            return None
        self.advance()
        params = self.parse_param_list("|")
        self.expect("|")
        return RBlockVar(pos, params)

    def parse_param_list(self, closer: str) -> RParams:
        """Params = Param ( ',' Param )*, grouped by kind."""
        pos = self._pos()
        required: list[RIdent] = []
        optional: list[ROptionalParam] = []
        rest: RRestParam | RExcessedComma | None = None
        post: list[RIdent] = []
        keywords: list[RKeywordParam] = []
        keyword_rest: RKeywordRestParam | None = None
        block: RBlockParam | None = None
        self.skip_newlines()
        while not self.at(closer):
            tok = self.current()
            ppos = self._pos()
            if self.at("*"):
                self.advance()
                rest = RRestParam(ppos, self._param_name_opt())
            elif self.at("**"):
                self.advance()
                keyword_rest = RKeywordRestParam(ppos, self._param_name_opt())
            elif self.at("&"):
                self.advance()
                name = self._param_name()
                block = RBlockParam(ppos, name)
            elif tok.type == TK_LABEL:
                self.advance()
                self.declare(tok.value[:-1])
                default: RNode | None = None
                if not self.at(",") and not self.at(closer):
                    default = self.parse_bit_and()
                keywords.append(RKeywordParam(ppos, RLabel(ppos, tok.value), default))
            elif tok.type == TK_IDENT:
                name = self._param_name()
                if self.at("="):
                    self.advance()
                    optional.append(ROptionalParam(ppos, name, self.parse_bit_and()))
                elif rest is not None or optional:
                    post.append(name)
                else:
                    required.append(name)
            else:
                raise self.error("unexpected " + _describe(tok) + " in parameter list")
            self.skip_newlines()
            if not self.at(","):
                break
            comma_pos = self._pos()
            self.advance()
            self.skip_newlines()
            if self.at(closer):
                positional_only = rest is None and not keywords and keyword_rest is None
                if closer != "|" or not positional_only or block is not None:
                    raise self.error("unexpected " + _describe(self.current()) + " after ','")
                rest = RExcessedComma(comma_pos)
        return RParams(
            pos,
            tuple(required),
            tuple(optional),
            rest,
            tuple(post),
            tuple(keywords),
            keyword_rest,
            block,
        )

    def _param_name(self) -> RIdent:
        tok = self.current()
        if tok.type != TK_IDENT:
            raise self.error("expected parameter name, got " + _describe(tok))
        self.advance()
        self.declare(tok.value)
        return RIdent(self._tok_pos(tok), tok.value)

    def _param_name_opt(self) -> RIdent | None:
        if self.at_type(TK_IDENT):
            return self._param_name()
        return None


# ── Module helpers ───────────────────────────────────────────


def _describe(tok: Token) -> str:
    if tok.type == TK_EOF:
        return "end of input"
    if tok.type == TK_NEWLINE:
        return "newline"
    return "'" + tok.value + "'"


def _call_operator(value: str) -> CallOperator:
    if value == "::":
        return "::"
    if value == "&.":
        return "&."
    return "."


def _symbol_value(tok: Token, pos: Pos) -> RIdent | RConst | RKeyword | ROp:
    name = tok.value
    if name in KEYWORDS:
        return RKeyword(pos, name)
    if name[0] >= "A" and name[0] <= "Z":
        return RConst(pos, name)
    if name[0] == "_" or (name[0] >= "a" and name[0] <= "z"):
        return RIdent(pos, name)
    return ROp(pos, name)
