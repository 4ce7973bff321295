"""Dispatcher: node type -> printer."""

from __future__ import annotations

from ..ast import (
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
from ..doc import Doc, concat, join, line, text
from ..options import Options
from .assign import print_assign, print_op_assign, print_var_field, print_var_ref
from .calls import (
    print_aref,
    print_arg_paren,
    print_args,
    print_block_param,
    print_block_var,
    print_body_stmt,
    print_brace_block,
    print_call,
    print_command,
    print_do_block,
    print_fcall,
    print_field,
    print_keyword_param,
    print_method_add_block,
    print_optional_param,
    print_params,
    print_rescue,
    print_rest_param,
)
from .literals import (
    print_array,
    print_assoc,
    print_bare_assoc_hash,
    print_commented,
    print_binary,
    print_block_arg,
    print_const_path,
    print_hash,
    print_lambda,
    print_paren,
    print_program,
    print_raw,
    print_splat,
    print_symbol,
    print_token,
    print_unary,
)
from .path import Path

_TOKENS = (RIdent, RConst, RIVar, RCVar, RGVar, RKeyword, RLabel, ROp)
_RAW = (RInt, RFloat, RString, RRegexp)


def print_node(path: Path) -> Doc:
    """Print the node under the cursor."""
    node = path.current()
    # Core
    if isinstance(node, RAssign):
        return print_assign(path)
    if isinstance(node, ROpAssign):
        return print_op_assign(path)
    if isinstance(node, RVarRef):
        return print_var_ref(path)
    if isinstance(node, RVarField):
        return print_var_field(path)
    # Leaves
    if isinstance(node, _TOKENS):
        return print_token(node)
    if isinstance(node, _RAW):
        return print_raw(node)
    if isinstance(node, RComment):
        return text(node.text)
    if isinstance(node, RCallShorthand):
        return text("")
    # Statements and literals
    if isinstance(node, RProgram):
        return print_program(path)
    if isinstance(node, RCommented):
        return print_commented(path)
    if isinstance(node, RSymbolLit):
        return print_symbol(path)
    if isinstance(node, RArray):
        return print_array(path)
    if isinstance(node, RHash):
        return print_hash(path)
    if isinstance(node, RBareAssocHash):
        return print_bare_assoc_hash(path)
    if isinstance(node, RAssoc):
        return print_assoc(path)
    if isinstance(node, RLambda):
        return print_lambda(path)
    if isinstance(node, (RValueList, RSplatValueList)):
        return join(concat([",", line]), path.map_print_children("values"))
    if isinstance(node, RSplat):
        return print_splat(path, "*")
    if isinstance(node, RDoubleSplat):
        return print_splat(path, "**")
    if isinstance(node, RBlockArg):
        return print_block_arg(path)
    if isinstance(node, RBinary):
        return print_binary(path)
    if isinstance(node, RUnary):
        return print_unary(path)
    if isinstance(node, RParen):
        return print_paren(path)
    if isinstance(node, RConstPathRef):
        return print_const_path(path)
    # Calls
    if isinstance(node, RCall):
        return print_call(path)
    if isinstance(node, RVCall):
        return path.print_child("message")
    if isinstance(node, RFCall):
        return print_fcall(path)
    if isinstance(node, RCommand):
        return print_command(path)
    if isinstance(node, RArgParen):
        return print_arg_paren(path)
    if isinstance(node, RArgs):
        return print_args(path)
    if isinstance(node, (RAref, RArefField)):
        return print_aref(path)
    if isinstance(node, RField):
        return print_field(path)
    if isinstance(node, RMethodAddBlock):
        return print_method_add_block(path)
    # Blocks
    if isinstance(node, RBraceBlock):
        return print_brace_block(path)
    if isinstance(node, RDoBlock):
        return print_do_block(path)
    if isinstance(node, RBodyStmt):
        return print_body_stmt(path)
    if isinstance(node, RRescue):
        return print_rescue(path)
    if isinstance(node, RBlockVar):
        return print_block_var(path)
    if isinstance(node, RParams):
        return print_params(path)
    if isinstance(node, ROptionalParam):
        return print_optional_param(path)
    if isinstance(node, RRestParam):
        return print_rest_param(path, "*")
    if isinstance(node, RExcessedComma):
        return text(",")
    if isinstance(node, RKeywordParam):
        return print_keyword_param(path)
    if isinstance(node, RKeywordRestParam):
        return print_rest_param(path, "**")
    if isinstance(node, RBlockParam):
        return print_block_param(path)
    raise TypeError("unhandled node type: " + type(node).__name__)


def print_doc(node: RNode, options: Options | None = None) -> Doc:
    """Print a whole tree into a document."""
    return print_node(Path(node, print_node, options))
