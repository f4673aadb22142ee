from enum import Enum

from ..parser.classes import BooleanLiteral


class LiteralValue(Enum):
    LITERAL_TRUE = "literal_true"
    LITERAL_FALSE = "literal_false"
    NOT_LITERAL = "not_literal"


def evaluate_literal(node) -> LiteralValue:
    """
    Classifies a condition by its syntax alone. Only the `TRUE` and `FALSE` tokens
    count; compound expressions such as `a && TRUE` or `!FALSE` are left to the
    constant folding pass.
    """
    if isinstance(node, BooleanLiteral):
        return LiteralValue.LITERAL_TRUE if node.value else LiteralValue.LITERAL_FALSE
    return LiteralValue.NOT_LITERAL
