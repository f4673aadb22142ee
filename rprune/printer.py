"""
Serializes the AST back into source text.

The output is canonical rather than a copy of the input layout: every body is
braced, one statement per line, and parentheses are inserted only where operator
precedence requires them, so that parsing the printed text yields the same tree.
"""

import re
from typing import Any

from .config import BINARY_PRECEDENCE, RIGHT_ASSOCIATIVE, SPECIAL_OPERATOR_PRECEDENCE, UNARY_PRECEDENCE
from .parser.classes import *

VALID_NAME_REGEX = re.compile(r"^(?:[A-Za-z]|\.(?![0-9]))[\w.]*$")

# Binding strength of anything that is not an operator.
ATOM_PRECEDENCE = 100
CONTROL_PRECEDENCE = 0


def binary_precedence(op: str) -> int:
    if op in BINARY_PRECEDENCE:
        return BINARY_PRECEDENCE[op]
    if op.startswith("%") and op.endswith("%"):
        return SPECIAL_OPERATOR_PRECEDENCE
    raise KeyError(f"Unknown binary operator '{op}'")


class CodePrinter:
    def __init__(self, indent: str = "  "):
        self.indent = indent

    def print_program(self, program: Program) -> str:
        lines = [self.emit(statement, 0) for statement in program.body]
        return "\n".join(lines) + "\n" if lines else ""

    def emit(self, node: Any, level: int = 0) -> str:
        """Renders a node whose first line starts at the current position and whose
        continuation lines are indented for nesting depth `level`."""
        if isinstance(node, Program):
            return self.print_program(node)
        if isinstance(node, Block):
            return self._emit_block(node, level)
        if isinstance(node, IfStatement):
            return self._emit_if(node, level)
        if isinstance(node, WhileLoop):
            return f"while ({self.emit(node.condition, level)}) {self._emit_block(node.body, level)}"
        if isinstance(node, RepeatLoop):
            return f"repeat {self._emit_block(node.body, level)}"
        if isinstance(node, ForLoop):
            return f"for ({node.variable.name} in {self.emit(node.iterable, level)}) {self._emit_block(node.body, level)}"
        if isinstance(node, FunctionDef):
            params = ", ".join(self._emit_param(p, level) for p in node.params)
            return f"function({params}) {self._emit_block(node.body, level)}"
        if isinstance(node, Terminator):
            if node.kind is TerminatorKind.RETURN:
                payload = self.emit(node.payload, level) if node.payload is not None else ""
                return f"return({payload})"
            return node.kind.value
        if isinstance(node, Assignment):
            return f"{self.emit(node.target, level)} {node.op} {self.emit(node.value, level)}"
        if isinstance(node, BinaryOp):
            return self._emit_binary(node, level)
        if isinstance(node, UnaryOp):
            operand = self._wrap(node.operand, UNARY_PRECEDENCE[node.op], level, strict=False)
            return f"{node.op}{operand}"
        if isinstance(node, FunctionCall):
            callee = self._wrap(node.function, ATOM_PRECEDENCE, level, strict=False)
            args = ", ".join(self._emit_argument(arg, level) for arg in node.args)
            return f"{callee}({args})"
        if isinstance(node, IndexAccess):
            target = self._wrap(node.target, ATOM_PRECEDENCE, level, strict=False)
            index = ", ".join(self.emit(i, level) for i in node.index)
            return f"{target}[[{index}]]" if node.double else f"{target}[{index}]"
        if isinstance(node, MemberAccess):
            return f"{self._wrap(node.target, ATOM_PRECEDENCE, level, strict=False)}${node.member}"
        if isinstance(node, Identifier):
            return node.name
        if isinstance(node, NumberLiteral):
            return self._emit_number(node)
        if isinstance(node, StringLiteral):
            return self._emit_string(node.value)
        if isinstance(node, BooleanLiteral):
            return "TRUE" if node.value else "FALSE"
        if isinstance(node, NullLiteral):
            return "NULL"
        raise TypeError(f"Cannot print node of type '{type(node).__name__}'")

    # --- Statements ---
    def _emit_block(self, block: Block, level: int) -> str:
        if not block.statements:
            return "{}"
        inner = self.indent * (level + 1)
        lines = [inner + self.emit(statement, level + 1) for statement in block.statements]
        return "{\n" + "\n".join(lines) + "\n" + self.indent * level + "}"

    def _emit_if(self, node: IfStatement, level: int) -> str:
        text = f"if ({self.emit(node.condition, level)}) {self._emit_block(node.then_block, level)}"
        if node.else_block is None:
            return text

        else_statements = node.else_block.statements
        if len(else_statements) == 1 and isinstance(else_statements[0], IfStatement):
            return f"{text} else {self._emit_if(else_statements[0], level)}"
        return f"{text} else {self._emit_block(node.else_block, level)}"

    def _emit_param(self, param: Parameter, level: int) -> str:
        if param.default is None:
            return param.name
        return f"{param.name} = {self.emit(param.default, level)}"

    def _emit_argument(self, arg: Argument, level: int) -> str:
        value = self.emit(arg.value, level)
        if arg.name is None:
            return value
        name = arg.name if VALID_NAME_REGEX.match(arg.name) else self._emit_string(arg.name)
        return f"{name} = {value}"

    # --- Expressions ---
    def _emit_binary(self, node: BinaryOp, level: int) -> str:
        precedence = binary_precedence(node.op)
        right_assoc = node.op in RIGHT_ASSOCIATIVE
        non_assoc = precedence == BINARY_PRECEDENCE["=="]
        left = self._wrap(node.left, precedence, level, strict=right_assoc or non_assoc)
        right = self._wrap(node.right, precedence, level, strict=not right_assoc or non_assoc)
        # `:` is conventionally written without spaces.
        if node.op == ":":
            return f"{left}:{right}"
        return f"{left} {node.op} {right}"

    def _wrap(self, node: Any, parent_precedence: int, level: int, strict: bool) -> str:
        """Parenthesizes `node` if it binds looser than its parent (or equally, when `strict`)."""
        text = self.emit(node, level)
        precedence = self._precedence(node)
        if precedence < parent_precedence or (strict and precedence == parent_precedence):
            return f"({text})"
        return text

    def _precedence(self, node: Any) -> int:
        if isinstance(node, BinaryOp):
            return binary_precedence(node.op)
        if isinstance(node, UnaryOp):
            return UNARY_PRECEDENCE[node.op]
        if isinstance(node, NumberLiteral) and node.value < 0:
            return UNARY_PRECEDENCE["-"]
        if isinstance(node, (Assignment, IfStatement, WhileLoop, RepeatLoop, ForLoop, FunctionDef)):
            return CONTROL_PRECEDENCE
        return ATOM_PRECEDENCE

    @staticmethod
    def _emit_number(node: NumberLiteral) -> str:
        value = node.value
        if node.is_integer:
            return f"{int(value)}L"
        if isinstance(value, float):
            if value.is_integer() and abs(value) < 1e15:
                return str(int(value))
            return repr(value)
        return str(value)

    @staticmethod
    def _emit_string(value: str) -> str:
        escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n").replace("\t", "\\t")
        return f'"{escaped}"'


def print_rlang(node: Any, indent: str = "  ") -> str:
    """High-level entry point: renders a Program (or any node) as source text."""
    return CodePrinter(indent=indent).emit(node)
