import re

from lark.exceptions import LarkError, UnexpectedCharacters, UnexpectedEOF, UnexpectedToken

from rprune.config import RESERVED_KEYWORDS, TOKEN_FRIENDLY_NAMES
from rprune.exceptions import ErrorCode, RPruneError

# --- Constants for the checks ---
BRACKET_PAIRS = {"(": ")", "[": "]", "{": "}"}
OPENING_BRACKETS = set(BRACKET_PAIRS.keys())
CLOSING_BRACKETS = set(BRACKET_PAIRS.values())
QUOTES = {'"', "'"}
KEYWORD_ASSIGNMENT_REGEX = re.compile(r"^\s*([A-Za-z.][\w.]*)\s*(<<-|<-|=(?!=))")


def pre_parsing_checks(script_content: str, file_path: str = "<stdin>"):
    """
    Performs simple checks for common errors before Lark runs, so that the user gets
    a precise message instead of a generic parse failure.
    This function checks for:
    1. Mismatched or unclosed brackets across the entire file.
    2. String literals left open at the end of a line.
    3. Assignment to a reserved keyword (e.g. `if <- 3`).
    """

    # --- Check #1 and #2: brackets and strings ---
    # Comments and string contents are skipped so that `"("` or `# )` do not count.
    bracket_stack = []  # A stack of (char, line_num)
    for i, line in enumerate(script_content.splitlines()):
        line_num = i + 1
        quote = None
        escaped = False
        for char in line:
            if quote:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == quote:
                    quote = None
                continue

            if char == "#":
                break
            if char in QUOTES:
                quote = char
            elif char in OPENING_BRACKETS:
                bracket_stack.append((char, line_num))
            elif char in CLOSING_BRACKETS:
                if not bracket_stack:
                    raise RPruneError(ErrorCode.SYNTAX_UNMATCHED_BRACKET, file_path=file_path, line=line_num, char=char)

                opening_char, _ = bracket_stack.pop()
                if BRACKET_PAIRS[opening_char] != char:
                    raise RPruneError(ErrorCode.SYNTAX_UNMATCHED_BRACKET, file_path=file_path, line=line_num, char=char)

        if quote:
            raise RPruneError(ErrorCode.SYNTAX_UNCLOSED_STRING, file_path=file_path, line=line_num)

    if bracket_stack:
        opening_char, line_num = bracket_stack[-1]
        raise RPruneError(ErrorCode.SYNTAX_UNMATCHED_BRACKET, file_path=file_path, line=line_num, char=opening_char)

    # --- Check #3: reserved keywords on the left of an assignment ---
    for i, line in enumerate(script_content.splitlines()):
        for statement in line.split("#", 1)[0].split(";"):
            match = KEYWORD_ASSIGNMENT_REGEX.match(statement)
            if match and match.group(1) in RESERVED_KEYWORDS:
                raise RPruneError(ErrorCode.SYNTAX_RESERVED_KEYWORD_AS_IDENTIFIER, file_path=file_path, line=i + 1, ident=match.group(1))


def _describe_expected(expected) -> str:
    friendly_expected = sorted({TOKEN_FRIENDLY_NAMES.get(e, e) for e in expected})
    if len(friendly_expected) > 1:
        return f"Expected one of: {', '.join(friendly_expected[:-1])} or {friendly_expected[-1]}"
    if friendly_expected:
        return f"Expected {friendly_expected[0]}"
    return ""


def _translate_lark_error(err: LarkError, file_path: str = "<stdin>") -> RPruneError:
    """Translates a generic LarkError into a user-friendly RPruneError."""

    if isinstance(err, UnexpectedEOF):
        expected_str = _describe_expected(err.expected)
        details = f"{expected_str}, but reached the end of the file instead." if expected_str else "Unexpected end of file."
        return RPruneError(code=ErrorCode.SYNTAX_UNEXPECTED_TOKEN, file_path=file_path, details=details)

    if isinstance(err, UnexpectedToken):
        expected_str = _describe_expected(err.expected)

        found_token = err.token
        found_str = f"but found '{found_token.value}' instead."
        if found_token.type == "$END":
            found_str = "but reached the end of the file instead."

        details = f"{expected_str}, {found_str}" if expected_str else f"Found unexpected token '{found_token.value}'."

        return RPruneError(code=ErrorCode.SYNTAX_UNEXPECTED_TOKEN, file_path=file_path, line=err.line, details=details)

    if isinstance(err, UnexpectedCharacters):
        return RPruneError(code=ErrorCode.SYNTAX_INVALID_CHARACTER, file_path=file_path, line=err.line, char=err.char)

    # Fallback for any other Lark error
    return RPruneError(code=ErrorCode.SYNTAX_PARSING_ERROR, file_path=file_path, line=getattr(err, "line", -1), details=str(err))
