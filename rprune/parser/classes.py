"""
Defines the formal data structures (contracts) for the Abstract Syntax Tree (AST)
produced by the parser stage and consumed by the optimization passes.

Each node is a pydantic model and includes a `Span` object to track its
location in the source code, enabling precise error reporting and letting
rewritten nodes keep the location of the code they replace.
"""

from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, computed_field

# --- Core Data Structures ---


class Span(BaseModel):
    """Represents a location in the source code for precise error reporting."""

    s_line: int
    s_col: int
    e_line: int
    e_col: int
    file_path: Optional[str] = None


class ASTNode(BaseModel):
    """A base class for all AST nodes, ensuring they have a span."""

    span: Span

    @computed_field
    @property
    def node_type(self) -> str:
        return type(self).__name__


# --- Literals and Identifiers ---


class NumberLiteral(ASTNode):
    """`is_integer` marks an R integer literal such as `5L`; plain numbers are doubles."""

    value: Union[int, float]
    is_integer: bool = False


class StringLiteral(ASTNode):
    value: str


class BooleanLiteral(ASTNode):
    """The `TRUE` / `FALSE` tokens. `T` and `F` are plain identifiers."""

    value: bool


class NullLiteral(ASTNode):
    pass


class Identifier(ASTNode):
    name: str


# --- Expressions ---


class UnaryOp(ASTNode):
    op: str
    operand: "Node"


class BinaryOp(ASTNode):
    op: str
    left: "Node"
    right: "Node"


class Argument(ASTNode):
    name: Optional[str] = None
    value: "Node"


class FunctionCall(ASTNode):
    function: "Node"
    args: List[Argument]


class IndexAccess(ASTNode):
    target: "Node"
    index: List["Node"]
    double: bool = False


class MemberAccess(ASTNode):
    target: "Node"
    member: str


class Parameter(ASTNode):
    name: str
    default: Optional["Node"] = None


# --- Statements ---


class Block(ASTNode):
    """An ordered statement sequence; `{ ... }` in the source."""

    statements: List["Node"]


class Assignment(ASTNode):
    op: str
    target: "Node"
    value: "Node"


class IfStatement(ASTNode):
    condition: "Node"
    then_block: Block
    else_block: Optional[Block] = None


class WhileLoop(ASTNode):
    condition: "Node"
    body: Block


class RepeatLoop(ASTNode):
    body: Block


class ForLoop(ASTNode):
    variable: Identifier
    iterable: "Node"
    body: Block


class FunctionDef(ASTNode):
    params: List[Parameter]
    body: Block


class TerminatorKind(str, Enum):
    RETURN = "return"
    BREAK = "break"
    NEXT = "next"


class Terminator(ASTNode):
    """`return(...)`, `break` or `next`: unconditionally leaves the enclosing block."""

    kind: TerminatorKind
    payload: Optional["Node"] = None


# --- Top-level Structures ---


class Program(ASTNode):
    """The root of the entire AST, representing a single script."""

    file_path: str = "<stdin>"
    body: List["Node"]


# A generic type hint for any node in the AST. Statements and expressions share
# it because the language treats every statement as an expression.
Node = Union[
    NumberLiteral,
    StringLiteral,
    BooleanLiteral,
    NullLiteral,
    Identifier,
    UnaryOp,
    BinaryOp,
    FunctionCall,
    IndexAccess,
    MemberAccess,
    Block,
    Assignment,
    IfStatement,
    WhileLoop,
    RepeatLoop,
    ForLoop,
    FunctionDef,
    Terminator,
]

for _model in (UnaryOp, BinaryOp, Argument, FunctionCall, IndexAccess, MemberAccess, Parameter, Block, Assignment, IfStatement, WhileLoop, RepeatLoop, ForLoop, FunctionDef, Terminator, Program):
    _model.model_rebuild()
