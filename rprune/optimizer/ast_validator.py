from typing import Any, List

from ..parser.classes import ASTNode, Block, IfStatement, Program, Terminator, WhileLoop
from ..utils import iter_node_fields
from .literal_evaluator import LiteralValue, evaluate_literal


class ASTValidationError(Exception):
    """Custom exception for AST integrity failures after dead code elimination."""

    def __init__(self, message: str, node: Any, path: List[str]):
        location = " > ".join(path) or "<program>"
        line = node.span.s_line if isinstance(node, ASTNode) else -1
        full_message = f"\n\nAST VALIDATION FAILED at {location} (line {line}):\n--> {message}\n--> Offending Node: {type(node).__name__}\n"
        super().__init__(full_message)
        self.node = node
        self.path = path


class ASTValidator:
    """
    Verifies the structural guarantees of a program produced by dead code elimination:
    no block directly contains another block, nothing follows a terminator in the
    same block, and no statement-level `if` / `while` is left with a literal condition
    that the pass should have resolved.
    """

    def __init__(self, program: Program):
        self.program = program

    def validate(self):
        """Walks the whole program and raises on the first violated invariant."""
        self._validate_sequence(self.program.body, ["body"])

    def _validate_sequence(self, statements: List[Any], path: List[str]):
        for index, statement in enumerate(statements):
            statement_path = path + [f"[{index}]"]

            if isinstance(statement, Block):
                raise ASTValidationError("A block directly contains a nested block.", statement, statement_path)

            if isinstance(statement, IfStatement) and evaluate_literal(statement.condition) is not LiteralValue.NOT_LITERAL:
                raise ASTValidationError("An 'if' with a literal condition was not collapsed.", statement, statement_path)

            if isinstance(statement, WhileLoop) and evaluate_literal(statement.condition) is LiteralValue.LITERAL_FALSE:
                raise ASTValidationError("A 'while (FALSE)' loop was not removed.", statement, statement_path)

            if isinstance(statement, Terminator) and index != len(statements) - 1:
                raise ASTValidationError(f"Unreachable statement after '{statement.kind.value}'.", statements[index + 1], statement_path)

            self._validate_children(statement, statement_path)

    def _validate_children(self, node: Any, path: List[str]):
        # Terminator payloads and loop/branch conditions are not rewritten by the pass.
        if not isinstance(node, ASTNode) or isinstance(node, Terminator):
            return
        for field_name, value in iter_node_fields(node):
            if field_name == "condition" and isinstance(node, (IfStatement, WhileLoop)):
                continue
            field_path = path + [field_name]
            if isinstance(value, Block):
                self._validate_sequence(value.statements, field_path)
            elif isinstance(value, ASTNode):
                self._validate_children(value, field_path)
            elif isinstance(value, list):
                for index, item in enumerate(value):
                    self._validate_children(item, field_path + [f"[{index}]"])
