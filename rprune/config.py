"""
Static configuration data for the rprune optimizer.
This includes operator tables, reserved keywords, pass ordering and token names.
"""

# Identifiers that the parser turns into Terminator nodes. These are assumed
# never to be rebound by user code.
TERMINATOR_CALLS = {"return"}

RESERVED_KEYWORDS = {"if", "else", "repeat", "while", "function", "for", "in", "next", "break", "TRUE", "FALSE", "NULL"}

# Binary operators and their binding strength, loosest first. Used by the printer
# to decide where parentheses are required and by the constant folder to know
# which operators it may evaluate.
BINARY_PRECEDENCE = {
    "||": 1,
    "|": 1,
    "&&": 2,
    "&": 2,
    "==": 4,
    "!=": 4,
    "<": 4,
    ">": 4,
    "<=": 4,
    ">=": 4,
    "+": 5,
    "-": 5,
    "*": 6,
    "/": 6,
    "%%": 7,
    "%/%": 7,
    ":": 8,
    "^": 10,
}
# Any other `%op%` operator binds like `%%`.
SPECIAL_OPERATOR_PRECEDENCE = 7
UNARY_PRECEDENCE = {"!": 3, "-": 9, "+": 9}
RIGHT_ASSOCIATIVE = {"^"}

ARITHMETIC_OPERATORS = {"+", "-", "*", "/", "^", "%%", "%/%"}
COMPARISON_OPERATORS = {"==", "!=", "<", ">", "<=", ">="}

# Canonical order of the AST passes. Folding runs first so that the dead code
# pass sees the literal conditions it produces within the same round.
PASS_SEQUENCE = ["constant_folding", "dead_code_elimination"]
DEFAULT_MAX_ROUNDS = 10

# Largest value of an R integer; results beyond it become NA.
INTEGER_MAX = 2**31 - 1

TOKEN_FRIENDLY_NAMES = {
    "NUMBER": "a number",
    "STRING": "a string literal",
    "NAME": "a variable or function name",
    "LPAR": "an opening parenthesis '('",
    "RPAR": "a closing parenthesis ')'",
    "LBRACE": "an opening brace '{'",
    "RBRACE": "a closing brace '}'",
    "LSQB": "an opening bracket '['",
    "RSQB": "a closing bracket ']'",
    "COMMA": "a comma ','",
    "SEMICOLON": "a semicolon ';'",
    "ASSIGN_OP": "an assignment operator '<-'",
    "EQUAL": "an equals sign '='",
    "_NL": "a new line",
    "_IF": "the 'if' keyword",
    "_ELSE": "the 'else' keyword",
    "_WHILE": "the 'while' keyword",
    "_FUNCTION": "the 'function' keyword",
    "$END": "the end of the file",
}
