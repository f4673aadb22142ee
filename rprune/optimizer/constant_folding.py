import logging
import math
from typing import Any, Optional

from ..config import ARITHMETIC_OPERATORS, COMPARISON_OPERATORS, INTEGER_MAX
from ..parser.classes import ASTNode, BinaryOp, BooleanLiteral, NumberLiteral, Program, StringLiteral, UnaryOp
from ..utils import iter_node_fields

logger = logging.getLogger("rprune.optimizer.constant_folding")


class ConstantFolder:
    """
    Performs the Constant Folding optimization phase on the AST.

    Unary and binary operations whose operands are (after folding) numeric or
    boolean literals are replaced by their value. The pass never looks through
    identifiers and leaves alone anything whose evaluation could fail or differ
    from the interpreter's: division by zero, mixed number/boolean arithmetic,
    non-finite results and vectorised `&` / `|`, which always evaluate both sides.
    """

    def __init__(self):
        self.folded_count = 0

    def optimize(self, program: Program) -> Program:
        """Main entry point for the optimization pass."""
        optimized = self._fold_node(program)
        logger.debug(f"Folded {self.folded_count} constant expression(s)")
        return optimized

    def _fold_node(self, node: Any) -> Any:
        if isinstance(node, list):
            new_items = [self._fold_node(item) for item in node]
            if any(new is not old for new, old in zip(new_items, node)):
                return new_items
            return node
        if not isinstance(node, ASTNode):
            return node

        updates = {}
        for field_name, value in iter_node_fields(node):
            new_value = self._fold_node(value)
            if new_value is not value:
                updates[field_name] = new_value
        if updates:
            node = node.model_copy(update=updates)

        folded = None
        if isinstance(node, UnaryOp):
            folded = self._fold_unary(node)
        elif isinstance(node, BinaryOp):
            folded = self._fold_binary(node)

        if folded is None:
            return node

        self.folded_count += 1
        return folded

    def _fold_unary(self, node: UnaryOp) -> Optional[ASTNode]:
        operand = node.operand
        if node.op == "!" and isinstance(operand, BooleanLiteral):
            return BooleanLiteral(value=not operand.value, span=node.span)
        if node.op in ("-", "+") and isinstance(operand, NumberLiteral):
            value = -operand.value if node.op == "-" else operand.value
            return NumberLiteral(value=value, is_integer=operand.is_integer, span=node.span)
        return None

    def _fold_binary(self, node: BinaryOp) -> Optional[ASTNode]:
        left, right, op = node.left, node.right, node.op

        # Short-circuit operators never evaluate their right side once the left decides.
        if op == "&&" and isinstance(left, BooleanLiteral):
            if not left.value:
                return BooleanLiteral(value=False, span=node.span)
            if isinstance(right, BooleanLiteral):
                return BooleanLiteral(value=right.value, span=node.span)
            return None
        if op == "||" and isinstance(left, BooleanLiteral):
            if left.value:
                return BooleanLiteral(value=True, span=node.span)
            if isinstance(right, BooleanLiteral):
                return BooleanLiteral(value=right.value, span=node.span)
            return None

        if isinstance(left, NumberLiteral) and isinstance(right, NumberLiteral):
            if op in ARITHMETIC_OPERATORS:
                value = self._evaluate_arithmetic(op, left.value, right.value)
                if value is None:
                    return None
                # Integer operands stay integer except under `/` and `^`.
                is_integer = left.is_integer and right.is_integer and op not in ("/", "^")
                if is_integer and abs(value) > INTEGER_MAX:
                    return None
                return NumberLiteral(value=value, is_integer=is_integer, span=node.span)
            if op in COMPARISON_OPERATORS:
                return BooleanLiteral(value=self._compare(op, left.value, right.value), span=node.span)
            return None

        same_kind = (isinstance(left, StringLiteral) and isinstance(right, StringLiteral)) or (isinstance(left, BooleanLiteral) and isinstance(right, BooleanLiteral))
        if same_kind and op in ("==", "!="):
            return BooleanLiteral(value=self._compare(op, left.value, right.value), span=node.span)

        return None

    def _evaluate_arithmetic(self, op: str, a, b):
        try:
            if op == "+":
                result = a + b
            elif op == "-":
                result = a - b
            elif op == "*":
                result = a * b
            elif op == "/":
                if b == 0:
                    return None
                result = a / b
            elif op == "^":
                if a < 0 and not float(b).is_integer():
                    return None
                if a == 0 and b < 0:
                    return None
                result = float(a) ** b
            elif op == "%%":
                if b == 0:
                    return None
                result = a % b
            elif op == "%/%":
                if b == 0:
                    return None
                result = a // b
            else:
                return None
        except (OverflowError, ValueError, ZeroDivisionError):
            return None

        if isinstance(result, float) and not math.isfinite(result):
            return None
        if isinstance(result, int) and abs(result) > 2**53:
            # Past this point the interpreter's doubles would lose precision.
            return None
        return result

    @staticmethod
    def _compare(op: str, a, b) -> bool:
        if op == "==":
            return a == b
        if op == "!=":
            return a != b
        if op == "<":
            return a < b
        if op == ">":
            return a > b
        if op == "<=":
            return a <= b
        return a >= b


def run_constant_folding(program: Program) -> Program:
    """High-level entry point for the constant folding optimization phase."""
    optimizer = ConstantFolder()
    return optimizer.optimize(program)
