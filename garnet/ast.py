"""Garnet AST: parse-time node definitions for the supported Ruby subset.

Nodes are immutable. Sequences are tuples so that a parsed tree can be shared
between printers and analysis passes without copying. Parent links are never
stored on nodes; printers navigate upward through `backend.path.Path`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal


# ============================================================
# POSITION
# ============================================================


@dataclass(frozen=True)
class Pos:
    """Source position, 1-indexed."""

    line: int
    col: int


@dataclass(frozen=True)
class RNode:
    """Base for all nodes."""

    pos: Pos = field(compare=False)


# ============================================================
# TOKENS
#
# Leaf nodes that wrap a single lexeme. `var_ref` and `var_field` wrap
# one of these.
# ============================================================


@dataclass(frozen=True)
class RIdent(RNode):
    """Local variable or method name: foo, empty?, save!."""

    name: str


@dataclass(frozen=True)
class RConst(RNode):
    """Constant: Foo."""

    name: str


@dataclass(frozen=True)
class RIVar(RNode):
    """Instance variable: @foo, sigil kept in name."""

    name: str


@dataclass(frozen=True)
class RCVar(RNode):
    """Class variable: @@foo."""

    name: str


@dataclass(frozen=True)
class RGVar(RNode):
    """Global variable: $foo."""

    name: str


@dataclass(frozen=True)
class RKeyword(RNode):
    """nil, true, false, self."""

    name: str


@dataclass(frozen=True)
class RLabel(RNode):
    """Hash label, colon included: if:."""

    name: str


@dataclass(frozen=True)
class ROp(RNode):
    """Operator used as a method name: recv.+(1)."""

    name: str


@dataclass(frozen=True)
class RCallShorthand(RNode):
    """Message of recv.(), sugar for recv.call()."""


@dataclass(frozen=True)
class RComment(RNode):
    """# comment, text includes the leading #."""

    text: str


# ============================================================
# PROGRAM
# ============================================================


@dataclass(frozen=True)
class RProgram(RNode):
    """Top-level statement list."""

    stmts: tuple[RNode, ...]


@dataclass(frozen=True)
class RCommented(RNode):
    """A statement followed by a comment on the same line.

    Calls keep their comment in RCall.comments instead.
    """

    stmt: RNode
    comments: tuple[RComment, ...]


# ============================================================
# LITERALS
# ============================================================


@dataclass(frozen=True)
class RInt(RNode):
    """Integer literal, raw source text kept: 1_000."""

    raw: str


@dataclass(frozen=True)
class RFloat(RNode):
    """Float literal, raw source text kept."""

    raw: str


@dataclass(frozen=True)
class RString(RNode):
    """Single- or double-quoted string, quotes included in raw."""

    raw: str


@dataclass(frozen=True)
class RSymbolLit(RNode):
    """:name; value is the token after the colon."""

    value: RIdent | RConst | RKeyword | ROp


@dataclass(frozen=True)
class RRegexp(RNode):
    """/pattern/flags, raw source text kept."""

    raw: str


@dataclass(frozen=True)
class RArray(RNode):
    """[a, b, c]."""

    elements: tuple[RNode, ...]


@dataclass(frozen=True)
class RAssoc(RNode):
    """key => value, or label: value."""

    key: RNode
    value: RNode


@dataclass(frozen=True)
class RHash(RNode):
    """{ assocs }."""

    assocs: tuple[RNode, ...]


@dataclass(frozen=True)
class RBareAssocHash(RNode):
    """Trailing hash argument without braces: foo(a, if: b)."""

    assocs: tuple[RNode, ...]


@dataclass(frozen=True)
class RLambda(RNode):
    """->(params) { body }; params is None when there is no parameter list."""

    params: RParams | None
    body: tuple[RNode, ...]


# ============================================================
# VARIABLES
# ============================================================


@dataclass(frozen=True)
class RVarRef(RNode):
    """Read of a variable or constant; always wraps exactly one token."""

    inner: RNode


@dataclass(frozen=True)
class RVarField(RNode):
    """Assignment target naming a variable; inner is None when anonymous."""

    inner: RNode | None


@dataclass(frozen=True)
class RConstPathRef(RNode):
    """Foo::Bar."""

    parent: RNode
    name: RConst


@dataclass(frozen=True)
class RField(RNode):
    """Attribute assignment target: recv.name = value."""

    receiver: RNode
    operator: CallOperator
    name: RIdent


@dataclass(frozen=True)
class RAref(RNode):
    """recv[args]."""

    receiver: RNode
    args: RArgs | None


@dataclass(frozen=True)
class RArefField(RNode):
    """Index assignment target: recv[args] = value."""

    receiver: RNode
    args: RArgs | None


# ============================================================
# ASSIGNMENT
# ============================================================


@dataclass(frozen=True)
class RAssign(RNode):
    """target = value."""

    target: RNode
    value: RNode


@dataclass(frozen=True)
class ROpAssign(RNode):
    """target op= value, operator text includes the =: +=, ||=."""

    target: RNode
    operator: str
    value: RNode


@dataclass(frozen=True)
class RValueList(RNode):
    """Bare list on the right of =: a = 1, 2."""

    values: tuple[RNode, ...]


@dataclass(frozen=True)
class RSplatValueList(RNode):
    """Right of = combining values with a splat: a = *b, c."""

    values: tuple[RNode, ...]


@dataclass(frozen=True)
class RSplat(RNode):
    """*value."""

    value: RNode


@dataclass(frozen=True)
class RDoubleSplat(RNode):
    """**value."""

    value: RNode


# ============================================================
# CALLS
# ============================================================

CallOperator = Literal[".", "::", "&."]
"""Call operator, normalized at parse time.

Safe navigation (&.) is kept distinct from the period because it changes
how a nil receiver is handled.
"""


@dataclass(frozen=True)
class RArgs(RNode):
    """Comma-separated argument list."""

    parts: tuple[RNode, ...]


@dataclass(frozen=True)
class RArgParen(RNode):
    """(args); args is None for an empty pair of parens."""

    args: RArgs | None


@dataclass(frozen=True)
class RBlockArg(RNode):
    """&value as the last argument; value is None for a bare &."""

    value: RNode | None


@dataclass(frozen=True)
class RCall(RNode):
    """receiver.message(args) with an explicit receiver."""

    receiver: RNode
    operator: CallOperator
    message: RIdent | RConst | ROp | RCallShorthand
    args: RArgParen | None = None
    comments: tuple[RComment, ...] = ()


@dataclass(frozen=True)
class RVCall(RNode):
    """Identifier that is not a visible local variable: foo."""

    message: RIdent


@dataclass(frozen=True)
class RFCall(RNode):
    """Receiverless call with parens: foo(args); args is None for a bare
    identifier carrying a block: proc { }."""

    message: RIdent | RConst
    args: RArgParen | None


@dataclass(frozen=True)
class RCommand(RNode):
    """Receiverless call without parens: validates :name, presence: true."""

    message: RIdent
    args: RArgs


@dataclass(frozen=True)
class RMethodAddBlock(RNode):
    """Call with an attached brace or do block."""

    call: RNode
    block: RBraceBlock | RDoBlock


# ============================================================
# BLOCKS AND PARAMETERS
# ============================================================


@dataclass(frozen=True)
class ROptionalParam(RNode):
    """name = default."""

    name: RIdent
    default: RNode


@dataclass(frozen=True)
class RRestParam(RNode):
    """*name; name is None for a bare *."""

    name: RIdent | None


@dataclass(frozen=True)
class RExcessedComma(RNode):
    """Trailing comma in block parameters: |a,| destructures its argument."""


@dataclass(frozen=True)
class RKeywordParam(RNode):
    """name: or name: default."""

    label: RLabel
    default: RNode | None


@dataclass(frozen=True)
class RKeywordRestParam(RNode):
    """**name; name is None for a bare **."""

    name: RIdent | None


@dataclass(frozen=True)
class RBlockParam(RNode):
    """&name."""

    name: RIdent


@dataclass(frozen=True)
class RParams(RNode):
    """Parameter list, grouped by kind in declaration order."""

    required: tuple[RIdent, ...] = ()
    optional: tuple[ROptionalParam, ...] = ()
    rest: RRestParam | RExcessedComma | None = None
    post: tuple[RIdent, ...] = ()
    keywords: tuple[RKeywordParam, ...] = ()
    keyword_rest: RKeywordRestParam | None = None
    block: RBlockParam | None = None

    def others(self) -> list[RNode]:
        """Every present parameter that is not a leading required one."""
        result: list[RNode] = list(self.optional)
        if self.rest is not None:
            result.append(self.rest)
        result.extend(self.post)
        result.extend(self.keywords)
        if self.keyword_rest is not None:
            result.append(self.keyword_rest)
        if self.block is not None:
            result.append(self.block)
        return result


@dataclass(frozen=True)
class RBlockVar(RNode):
    """|params| at the head of a block."""

    params: RParams | None


@dataclass(frozen=True)
class RRescue(RNode):
    """rescue Foo, Bar => e; next is the following rescue clause, if any."""

    exceptions: tuple[RNode, ...]
    variable: RNode | None
    stmts: tuple[RNode, ...]
    next: RRescue | None = None


@dataclass(frozen=True)
class RBodyStmt(RNode):
    """Body of a do block with its optional rescue, else and ensure clauses."""

    stmts: tuple[RNode, ...]
    rescue: RRescue | None = None
    else_body: tuple[RNode, ...] | None = None
    ensure: tuple[RNode, ...] | None = None


@dataclass(frozen=True)
class RBraceBlock(RNode):
    """{ |params| body }."""

    params: RBlockVar | None
    body: tuple[RNode, ...]


@dataclass(frozen=True)
class RDoBlock(RNode):
    """do |params| body end."""

    params: RBlockVar | None
    body: RBodyStmt


# ============================================================
# OPERATORS
# ============================================================


@dataclass(frozen=True)
class RBinary(RNode):
    """left op right."""

    left: RNode
    op: str
    right: RNode


@dataclass(frozen=True)
class RUnary(RNode):
    """op operand: !x, -x, not x."""

    op: str
    operand: RNode


@dataclass(frozen=True)
class RParen(RNode):
    """( expr )."""

    expr: RNode


# ============================================================
# HELPERS
# ============================================================


def node_type(node: RNode) -> str:
    """Snake-cased tag for a node class: RMethodAddBlock -> method_add_block."""
    name = type(node).__name__[1:]
    out: list[str] = []
    for i, c in enumerate(name):
        if c.isupper() and i > 0 and not name[i - 1].isupper():
            out.append("_")
        out.append(c.lower())
    return "".join(out)
