from typing import List, Optional

from rprune.parser.classes import *


def get_span(s_line: int = 1, s_col: int = 1, e_line: int = 1, e_col: int = 1):
    return Span(s_line=s_line, s_col=s_col, e_line=e_line, e_col=e_col)


def get_identifier(name: str):
    return Identifier(span=get_span(), name=name)


def get_number_literal(value: int | float):
    return NumberLiteral(span=get_span(), value=value)


def get_string_literal(value: str):
    return StringLiteral(span=get_span(), value=value)


def get_boolean_literal(value: bool):
    return BooleanLiteral(span=get_span(), value=value)


def get_null_literal():
    return NullLiteral(span=get_span())


def get_binary_op(op: str, left, right):
    return BinaryOp(span=get_span(), op=op, left=left, right=right)


def get_unary_op(op: str, operand):
    return UnaryOp(span=get_span(), op=op, operand=operand)


def get_argument(value, name: Optional[str] = None):
    return Argument(span=get_span(), name=name, value=value)


def get_function_call(function: str, args: Optional[list] = None):
    """Builds a call; plain nodes in `args` become positional arguments."""
    arguments = [a if isinstance(a, Argument) else get_argument(a) for a in (args or [])]
    return FunctionCall(span=get_span(), function=get_identifier(function), args=arguments)


def get_block(statements: Optional[list] = None):
    return Block(span=get_span(), statements=list(statements or []))


def get_assignment(target: str, value, op: str = "<-"):
    return Assignment(span=get_span(), op=op, target=get_identifier(target), value=value)


def get_if(condition, then_statements: list, else_statements: Optional[list] = None):
    else_block = get_block(else_statements) if else_statements is not None else None
    return IfStatement(span=get_span(), condition=condition, then_block=get_block(then_statements), else_block=else_block)


def get_while(condition, body: list):
    return WhileLoop(span=get_span(), condition=condition, body=get_block(body))


def get_repeat(body: list):
    return RepeatLoop(span=get_span(), body=get_block(body))


def get_for(variable: str, iterable, body: list):
    return ForLoop(span=get_span(), variable=get_identifier(variable), iterable=iterable, body=get_block(body))


def get_param(name: str, default=None):
    return Parameter(span=get_span(), name=name, default=default)


def get_function_def(params: Optional[List[str]] = None, body: Optional[list] = None):
    """
    A flexible factory to build FunctionDef nodes for tests.

    Args:
        params: Parameter names. Defaults to no parameters.
        body: The statements of the function body. Defaults to `return(1)`.
    """
    param_objects = [get_param(p) for p in (params or [])]
    body_nodes = body if body is not None else [get_return(get_number_literal(1))]
    return FunctionDef(span=get_span(), params=param_objects, body=get_block(body_nodes))


def get_return(payload=None):
    return Terminator(span=get_span(), kind=TerminatorKind.RETURN, payload=payload)


def get_break():
    return Terminator(span=get_span(), kind=TerminatorKind.BREAK)


def get_next():
    return Terminator(span=get_span(), kind=TerminatorKind.NEXT)


def get_program(body: list):
    return Program(span=get_span(), body=list(body))
