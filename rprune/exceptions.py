"""
Error types raised by rprune.

User-facing problems (bad syntax, bad options) are `RPruneError`s carrying an
`ErrorCode`, whose value is a message template filled from keyword arguments.
"""

from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from rprune.parser.classes import Span


class ErrorCode(Enum):

    # --- Raised by the checks that run before Lark ---
    SYNTAX_UNMATCHED_BRACKET = "Syntax Error: Unmatched bracket '{char}'."
    SYNTAX_UNCLOSED_STRING = "Syntax Error: Unclosed string literal."
    SYNTAX_RESERVED_KEYWORD_AS_IDENTIFIER = "Syntax Error: Cannot assign to reserved keyword '{ident}'."

    # --- Translated from Lark errors ---
    # `details` describes what was expected and what was found instead.
    SYNTAX_UNEXPECTED_TOKEN = "Syntax Error: Invalid syntax. {details}"
    SYNTAX_INVALID_CHARACTER = "Syntax Error: Invalid character '{char}' found."
    SYNTAX_PARSING_ERROR = "Syntax Error: Could not parse the script. Details: {details}"

    # --- Optimizer options ---
    UNKNOWN_PASS = "Unknown optimization pass '{name}'. Available passes: {available}."
    INVALID_MAX_ROUNDS = "The maximum number of optimization rounds must be at least 1, got {value}."
    UNKNOWN_STAGE = "Unknown pipeline stage '{name}'."


def _location(span: Optional["Span"], file_path: Optional[str], line: Optional[int]) -> str:
    if span is not None:
        where = span.file_path or file_path or "<stdin>"
        return f"Error in '{where}' (Line: {span.s_line}, Column: {span.s_col}):\n"
    if line is not None and line > 0:
        return f"Error in '{file_path or '<stdin>'}' (Line: {line}):\n"
    if file_path:
        return f"Error in '{file_path}': "
    return ""


class RPruneError(Exception):
    """A problem with the user's script or options, reported without a traceback."""

    def __init__(self, code: ErrorCode, span: Optional["Span"] = None, file_path: Optional[str] = None, line: Optional[int] = None, **kwargs):
        self.code = code
        self.span = span
        self.line = span.s_line if span is not None else line
        self.details = kwargs
        self.message = _location(span, file_path, line) + code.value.format(**kwargs)
        super().__init__(self.message)


class InternalOptimizerError(Exception):
    """An unexpected failure inside rprune itself."""
