import logging
import os

from lark import Lark, LarkError, Token, Transformer, v_args

from ..config import INTEGER_MAX, TERMINATOR_CALLS
from .classes import *
from .helpers import pre_parsing_checks, _translate_lark_error

logger = logging.getLogger("rprune.parser")

LARK_PARSER = None

try:
    # Use importlib.resources for robust package data access
    from importlib.resources import files as pkg_files

    rlang_grammar = (pkg_files("rprune.parser") / "rlang.lark").read_text()
    LARK_PARSER = Lark(rlang_grammar, start="start", parser="earley", propagate_positions=True)
except Exception:
    # Fallback for development environments where the package data is not installed
    grammar_path = os.path.join(os.path.dirname(__file__), "rlang.lark")
    with open(grammar_path, "r") as f:
        rlang_grammar = f.read()
    LARK_PARSER = Lark(rlang_grammar, start="start", parser="earley", propagate_positions=True)


@v_args(meta=True)
class RLangTransformer(Transformer):
    """
    Transforms the Lark parse tree into the pydantic AST defined in `classes.py`.
    Each method is called when the parser completes a rule (or alias) of the same
    name; transformation runs bottom-up, so children are already AST nodes.
    Bodies of `if`, `while`, `repeat`, `for` and `function` are always wrapped
    into a `Block`, so the passes never need to tell braced and bare bodies apart.
    """

    def __init__(self, file_path: str):
        self.file_path = file_path
        super().__init__()

    # --- Helper methods for creating spans ---
    def _span(self, meta) -> Span:
        """Creates a Span from the positions Lark propagated onto a rule."""
        if getattr(meta, "empty", True):
            return Span(s_line=1, s_col=1, e_line=1, e_col=1, file_path=self.file_path)
        return Span(s_line=meta.line, s_col=meta.column, e_line=meta.end_line, e_col=meta.end_column, file_path=self.file_path)

    def _token_span(self, token: Token) -> Span:
        return Span(s_line=token.line, s_col=token.column, e_line=token.end_line, e_col=token.end_column, file_path=self.file_path)

    def _as_block(self, node) -> Block:
        if isinstance(node, Block):
            return node
        return Block(statements=[node], span=node.span)

    # --- Literals ---
    def number(self, meta, items):
        text = items[0].value
        if text.endswith("L"):
            text = text[:-1]
            # R only honours the suffix for whole numbers in integer range.
            as_float = float(text)
            if as_float.is_integer() and abs(as_float) <= INTEGER_MAX:
                return NumberLiteral(value=int(as_float), is_integer=True, span=self._span(meta))
        num = float(text) if "." in text or "e" in text.lower() else int(text)
        return NumberLiteral(value=num, span=self._span(meta))

    def string(self, meta, items):
        raw = items[0].value[1:-1]
        value = raw.encode("latin-1", "backslashreplace").decode("unicode_escape")
        return StringLiteral(value=value, span=self._span(meta))

    def true_literal(self, meta, items):
        return BooleanLiteral(value=True, span=self._span(meta))

    def false_literal(self, meta, items):
        return BooleanLiteral(value=False, span=self._span(meta))

    def null_literal(self, meta, items):
        return NullLiteral(span=self._span(meta))

    def identifier(self, meta, items):
        return Identifier(name=items[0].value, span=self._span(meta))

    # --- Expressions ---
    def binary_op(self, meta, items):
        left, op, right = items
        return BinaryOp(op=op.value, left=left, right=right, span=self._span(meta))

    def unary_op(self, meta, items):
        op, operand = items
        return UnaryOp(op=op.value, operand=operand, span=self._span(meta))

    def positional_arg(self, meta, items):
        return Argument(value=items[0], span=self._span(meta))

    def named_arg(self, meta, items):
        name_token, value = items
        name = name_token.value
        if name_token.type == "STRING":
            name = name[1:-1]
        return Argument(name=name, value=value, span=self._span(meta))

    def args(self, meta, items):
        return items

    def index_args(self, meta, items):
        return items

    def function_call(self, meta, items):
        callee = items[0]
        args = items[1] if len(items) > 1 else []
        span = self._span(meta)

        # `return(...)` is a control-flow operator, not a call.
        if isinstance(callee, Identifier) and callee.name in TERMINATOR_CALLS:
            if not args:
                return Terminator(kind=TerminatorKind.RETURN, payload=None, span=span)
            if len(args) == 1 and args[0].name is None:
                return Terminator(kind=TerminatorKind.RETURN, payload=args[0].value, span=span)

        return FunctionCall(function=callee, args=args, span=span)

    def index_access(self, meta, items):
        target, index = items
        return IndexAccess(target=target, index=index, span=self._span(meta))

    def double_index_access(self, meta, items):
        target, index = items
        return IndexAccess(target=target, index=index, double=True, span=self._span(meta))

    def member_access(self, meta, items):
        target, name_token = items
        return MemberAccess(target=target, member=name_token.value, span=self._span(meta))

    # --- Statements ---
    def assignment(self, meta, items):
        target, op, value = items
        return Assignment(op=op.value, target=target, value=value, span=self._span(meta))

    def equals_assignment(self, meta, items):
        target, value = items
        return Assignment(op="=", target=target, value=value, span=self._span(meta))

    def block(self, meta, items):
        return Block(statements=list(items), span=self._span(meta))

    def if_expr(self, meta, items):
        condition, then_body = items[0], items[1]
        else_block = self._as_block(items[2]) if len(items) > 2 else None
        return IfStatement(condition=condition, then_block=self._as_block(then_body), else_block=else_block, span=self._span(meta))

    def while_loop(self, meta, items):
        condition, body = items
        return WhileLoop(condition=condition, body=self._as_block(body), span=self._span(meta))

    def repeat_loop(self, meta, items):
        return RepeatLoop(body=self._as_block(items[0]), span=self._span(meta))

    def for_loop(self, meta, items):
        name_token, iterable, body = items
        variable = Identifier(name=name_token.value, span=self._token_span(name_token))
        return ForLoop(variable=variable, iterable=iterable, body=self._as_block(body), span=self._span(meta))

    def params(self, meta, items):
        return items

    def param(self, meta, items):
        name_token = items[0]
        default = items[1] if len(items) > 1 else None
        return Parameter(name=name_token.value, default=default, span=self._span(meta))

    def function_def(self, meta, items):
        params = items[0] if len(items) > 1 else []
        body = items[-1]
        return FunctionDef(params=params, body=self._as_block(body), span=self._span(meta))

    def break_stmt(self, meta, items):
        return Terminator(kind=TerminatorKind.BREAK, span=self._span(meta))

    def next_stmt(self, meta, items):
        return Terminator(kind=TerminatorKind.NEXT, span=self._span(meta))

    def start(self, meta, items):
        return Program(file_path=self.file_path, body=list(items), span=self._span(meta))


def parse_rlang(script_content: str, file_path: str = "<stdin>") -> Program:
    """Parses the script content and transforms it into a high-level AST."""

    pre_parsing_checks(script_content, file_path)

    try:
        parse_tree = LARK_PARSER.parse(script_content)
    except LarkError as e:
        raise _translate_lark_error(e, file_path) from e

    program = RLangTransformer(file_path=file_path).transform(parse_tree)
    logger.debug(f"Parsed '{file_path}' into {len(program.body)} top-level statement(s)")
    return program
