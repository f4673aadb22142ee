import pytest
from textwrap import dedent

from rprune.parser import parse_rlang
from rprune.printer import CodePrinter, print_rlang
from tests.utils.assertion_helper import assert_asts_equal
from tests.utils.factory_helpers import *

num = get_number_literal
ident = get_identifier


# --- Expressions ---


@pytest.mark.parametrize(
    "node, expected",
    [
        pytest.param(get_binary_op("*", get_binary_op("+", num(1), num(2)), num(3)), "(1 + 2) * 3", id="looser_left_operand"),
        pytest.param(get_binary_op("+", num(1), get_binary_op("*", num(2), num(3))), "1 + 2 * 3", id="tighter_right_operand"),
        pytest.param(get_binary_op("-", num(1), get_binary_op("-", num(2), num(3))), "1 - (2 - 3)", id="right_nested_left_associative"),
        pytest.param(get_binary_op("-", get_binary_op("-", num(1), num(2)), num(3)), "1 - 2 - 3", id="left_nested_left_associative"),
        pytest.param(get_binary_op("^", num(2), get_binary_op("^", num(3), num(2))), "2 ^ 3 ^ 2", id="right_nested_power"),
        pytest.param(get_binary_op("^", get_binary_op("^", num(2), num(3)), num(2)), "(2 ^ 3) ^ 2", id="left_nested_power"),
        pytest.param(get_binary_op("^", num(-2), num(2)), "(-2) ^ 2", id="negative_base"),
        pytest.param(get_binary_op("==", get_binary_op("<", ident("a"), ident("b")), get_boolean_literal(True)), "(a < b) == TRUE", id="chained_comparison"),
        pytest.param(get_unary_op("-", get_binary_op("+", ident("a"), ident("b"))), "-(a + b)", id="negated_sum"),
        pytest.param(get_unary_op("-", get_binary_op("^", num(2), num(2))), "-2 ^ 2", id="negated_power"),
        pytest.param(get_unary_op("!", get_binary_op("&&", ident("a"), ident("b"))), "!(a && b)", id="not_of_and"),
        pytest.param(get_binary_op("&&", get_unary_op("!", ident("a")), ident("b")), "!a && b", id="and_of_not"),
        pytest.param(get_binary_op("%in%", ident("x"), ident("y")), "x %in% y", id="special_operator"),
        pytest.param(get_binary_op("%o%", ident("x"), get_binary_op("+", ident("a"), ident("b"))), "x %o% (a + b)", id="user_special_operator"),
        pytest.param(get_binary_op("+", get_binary_op("%in%", ident("a"), ident("b")), num(1)), "a %in% b + 1", id="special_binds_tighter_than_plus"),
        pytest.param(get_binary_op(":", num(1), get_binary_op("-", ident("n"), num(1))), "1:(n - 1)", id="range_without_spaces"),
        pytest.param(get_unary_op("+", ident("x")), "+x", id="unary_plus"),
        pytest.param(get_binary_op("*", get_unary_op("+", ident("x")), num(2)), "+x * 2", id="unary_plus_operand"),
    ],
)
def test_parenthesizes_only_where_precedence_requires(node, expected):
    assert print_rlang(node) == expected


@pytest.mark.parametrize(
    "value, expected",
    [
        pytest.param(42, "42", id="int"),
        pytest.param(-5, "-5", id="negative"),
        pytest.param(8.0, "8", id="integral_float"),
        pytest.param(3.5, "3.5", id="fraction"),
        pytest.param(1e20, "1e+20", id="large_float"),
    ],
)
def test_numbers(value, expected):
    assert print_rlang(num(value)) == expected


@pytest.mark.parametrize("value, expected", [(5, "5L"), (-3, "-3L"), (0, "0L")])
def test_integer_literals_keep_their_suffix(value, expected):
    assert print_rlang(NumberLiteral(span=get_span(), value=value, is_integer=True)) == expected


def test_strings_are_double_quoted_and_escaped():
    assert print_rlang(get_string_literal('say "hi"\n')) == '"say \\"hi\\"\\n"'


def test_keyword_literals():
    assert print_rlang(get_boolean_literal(True)) == "TRUE"
    assert print_rlang(get_boolean_literal(False)) == "FALSE"
    assert print_rlang(get_null_literal()) == "NULL"


def test_calls_and_accessors():
    call = get_function_call("paste", [ident("a"), get_argument(get_string_literal("-"), name="sep"), get_argument(num(1), name="my arg")])
    assert print_rlang(call) == 'paste(a, sep = "-", "my arg" = 1)'

    member = MemberAccess(span=get_span(), target=get_function_call("f"), member="value")
    assert print_rlang(member) == "f()$value"

    index = IndexAccess(span=get_span(), target=ident("x"), index=[num(1), ident("j")])
    assert print_rlang(index) == "x[1, j]"
    assert print_rlang(index.model_copy(update={"double": True})) == "x[[1, j]]"


# --- Statements & layout ---


def test_empty_program_prints_nothing():
    assert print_rlang(get_program([])) == ""


def test_terminators():
    assert print_rlang(get_return(ident("x"))) == "return(x)"
    assert print_rlang(get_return()) == "return()"
    assert print_rlang(get_break()) == "break"
    assert print_rlang(get_next()) == "next"


def test_nested_layout_uses_indent_per_level():
    program = get_program(
        [
            get_assignment(
                "f",
                FunctionDef(
                    span=get_span(),
                    params=[get_param("a"), get_param("b", num(2))],
                    body=get_block(
                        [
                            get_for("i", get_binary_op(":", num(1), ident("a")), [get_if(ident("done"), [get_break()])]),
                            get_return(get_binary_op("+", ident("a"), ident("b"))),
                        ]
                    ),
                ),
            ),
            get_while(ident("x"), []),
        ]
    )
    expected = """\
    f <- function(a, b = 2) {
      for (i in 1:a) {
        if (done) {
          break
        }
      }
      return(a + b)
    }
    while (x) {}
    """
    assert print_rlang(program) == dedent(expected)


def test_else_if_chains_stay_flat():
    node = get_if(ident("a"), [num(1)], [get_if(ident("b"), [num(2)], [num(3)])])
    expected = """\
    if (a) {
      1
    } else if (b) {
      2
    } else {
      3
    }"""
    assert print_rlang(node) == dedent(expected)


def test_custom_indent():
    printer = CodePrinter(indent="\t")
    assert printer.emit(get_repeat([get_break()])) == "repeat {\n\tbreak\n}"


def test_braced_block_in_expression_position():
    node = get_assignment("x", get_block([num(1)]))
    assert print_rlang(node) == "x <- {\n  1\n}"


def test_unknown_node_raises():
    with pytest.raises(TypeError):
        print_rlang(object())


# --- Printed code parses back to the same tree ---


@pytest.mark.parametrize(
    "script",
    [
        "x <- (1 + 2) * -3 ^ 2",
        "f <- function(a, b = c(1, 2)) {\n  if (a > b[[1]]) return(a) else if (!b$ok) next\n  a %% 2\n}",
        "repeat {\n  y <<- y - 1\n  if (y <= 0 || done) break\n}",
        "out <- lapply(xs, function(v) v * 2); total = sum(unlist(out))",
        "z <- if (flag) { 'yes' } else { \"no\" }",
        "for (k in 1:(n - 1)) print(k)",
        "y <- +x",
        "z <- a %in% b | c %o% d",
        "n <- 5L + length(xs) %/% 2L",
        "s <- seq_len(3L)[-1L]",
    ],
)
def test_printed_source_reparses_to_same_ast(script):
    original = parse_rlang(script)
    reparsed = parse_rlang(print_rlang(original))
    assert_asts_equal(reparsed, original)
