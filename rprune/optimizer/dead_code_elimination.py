import logging
from typing import Any, List, Tuple

from ..parser.classes import ASTNode, Block, FunctionDef, IfStatement, Program, Terminator, WhileLoop
from ..utils import count_nodes, iter_node_fields
from .literal_evaluator import LiteralValue, evaluate_literal

logger = logging.getLogger("rprune.optimizer.dead_code_elimination")


class Rewrite:
    """
    The outcome of rewriting one statement: either a single node that takes the
    statement's place, or a block whose statements must be spliced into the
    enclosing sequence.
    """

    __slots__ = ("node", "is_splice")

    def __init__(self, node: Any, is_splice: bool):
        self.node = node
        self.is_splice = is_splice

    @classmethod
    def single(cls, node: Any) -> "Rewrite":
        return cls(node, False)

    @classmethod
    def splice(cls, block: Block) -> "Rewrite":
        return cls(block, True)

    def statements(self) -> List[Any]:
        """The elements this rewrite contributes to an enclosing statement sequence."""
        if self.is_splice:
            return list(self.node.statements)
        return [self.node]


class DeadCodeEliminator:
    """
    Performs the Dead Code Elimination (DCE) optimization phase on the AST.

    Two kinds of code are removed in a single post-order traversal:
    statements that follow a `return`, `break` or `next` in the same block, and
    branches of `if` / `while` whose condition is the literal `TRUE` or `FALSE`.
    A collapsed conditional is spliced into the enclosing block rather than nested,
    so a terminator it carries truncates the rest of that block in the same pass.
    """

    def __init__(self, program: Program):
        self.program = program
        self.dropped_statements = 0
        self.collapsed_nodes = 0

    def optimize(self) -> Program:
        """Main entry point for the DCE optimization."""
        logger.debug(f"Running dead code elimination on '{self.program.file_path}'")

        # The top level is rewritten with the same rules as any other block.
        top_level = self.rewrite_block(Block(statements=self.program.body, span=self.program.span))

        logger.debug(f"Dropped {self.dropped_statements} unreachable statement(s), " f"collapsed {self.collapsed_nodes} literal-conditioned construct(s)")
        return self.program.model_copy(update={"body": top_level.statements})

    def rewrite_block(self, block: Block) -> Block:
        """
        Rewrites every statement of a block in order, flattening splices and
        stopping right after the first terminator that lands in the output.
        """
        output: List[Any] = []
        for index, statement in enumerate(block.statements):
            for element in self.rewrite_statement(statement).statements():
                output.append(element)
                if isinstance(element, Terminator):
                    dead = len(block.statements) - index - 1
                    if dead:
                        self.dropped_statements += dead
                        logger.debug(f"Dropping {dead} statement(s) after '{element.kind.value}' at line {element.span.s_line}")
                    return block.model_copy(update={"statements": output})

        return block.model_copy(update={"statements": output})

    def rewrite_statement(self, node: Any) -> Rewrite:
        """Routes a node to the rewrite rule for its kind."""
        if isinstance(node, Block):
            return Rewrite.splice(self.rewrite_block(node))
        if isinstance(node, IfStatement):
            return self._rewrite_if(node)
        if isinstance(node, WhileLoop):
            return self._rewrite_while(node)
        if isinstance(node, FunctionDef):
            return Rewrite.single(node.model_copy(update={"body": self.rewrite_block(node.body)}))
        if isinstance(node, Terminator):
            return Rewrite.single(node)
        return Rewrite.single(self._rewrite_other(node))

    def _rewrite_if(self, node: IfStatement) -> Rewrite:
        then_block = self.rewrite_block(node.then_block)
        else_block = self.rewrite_block(node.else_block) if node.else_block is not None else None

        verdict = evaluate_literal(node.condition)
        if verdict is LiteralValue.LITERAL_FALSE:
            self.collapsed_nodes += 1
            logger.debug(f"Collapsing 'if (FALSE)' at line {node.span.s_line}")
            return Rewrite.splice(else_block if else_block is not None else self._empty_block(node))
        if verdict is LiteralValue.LITERAL_TRUE:
            self.collapsed_nodes += 1
            logger.debug(f"Collapsing 'if (TRUE)' at line {node.span.s_line}")
            return Rewrite.splice(then_block)

        return Rewrite.single(node.model_copy(update={"then_block": then_block, "else_block": else_block}))

    def _rewrite_while(self, node: WhileLoop) -> Rewrite:
        body = self.rewrite_block(node.body)

        # `while (TRUE)` is deliberately kept: whether it terminates depends on the
        # breaks inside it.
        if evaluate_literal(node.condition) is LiteralValue.LITERAL_FALSE:
            self.collapsed_nodes += 1
            logger.debug(f"Removing 'while (FALSE)' at line {node.span.s_line}")
            return Rewrite.splice(self._empty_block(node))

        return Rewrite.single(node.model_copy(update={"body": body}))

    def _rewrite_other(self, node: Any) -> Any:
        """
        Rebuilds any other node with its nested blocks rewritten, e.g. the body of a
        `repeat` or `for` loop, or a function literal passed as an argument.
        Leaves with nothing to rewrite are returned as the same object.
        """
        if not isinstance(node, ASTNode):
            return node

        updates = {}
        for field_name, value in iter_node_fields(node):
            new_value = self._rewrite_field(value)
            if new_value is not value:
                updates[field_name] = new_value

        return node.model_copy(update=updates) if updates else node

    def _rewrite_field(self, value: Any) -> Any:
        if isinstance(value, Block):
            return self.rewrite_block(value)
        if isinstance(value, ASTNode):
            # A splice in expression position stays a braced block: `{ ... }`
            # evaluates to its last statement, as the collapsed `if` did.
            return self.rewrite_statement(value).node
        if isinstance(value, list):
            new_items = [self._rewrite_field(item) for item in value]
            if any(new is not old for new, old in zip(new_items, value)):
                return new_items
        return value

    @staticmethod
    def _empty_block(node: ASTNode) -> Block:
        return Block(statements=[], span=node.span)


def apply_dead_code_elimination(program: Program) -> Tuple[Program, bool]:
    """
    Applies dead code elimination to a whole program.

    Returns the rewritten program and whether the node count decreased, which a
    pipeline driver can use to decide when to stop iterating.
    """
    optimized = DeadCodeEliminator(program).optimize()
    changed = count_nodes(optimized) < count_nodes(program)
    return optimized, changed


def run_dce(program: Program) -> Program:
    """High-level entry point for the Dead Code Elimination optimization phase."""
    optimized, _ = apply_dead_code_elimination(program)
    return optimized
