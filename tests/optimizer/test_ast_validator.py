import pytest

from rprune.optimizer.ast_validator import ASTValidationError, ASTValidator
from rprune.optimizer.dead_code_elimination import run_dce
from rprune.parser import parse_rlang
from tests.utils.factory_helpers import *


def validate(statements: list):
    ASTValidator(get_program(statements)).validate()


def test_accepts_output_of_dead_code_elimination():
    script = """
f <- function(x) {
  if (TRUE) {
    { y <- x; return(y) }
  }
  while (FALSE) next
  x
}
repeat { break; 1 }
"""
    ASTValidator(run_dce(parse_rlang(script))).validate()


def test_accepts_literals_outside_statement_conditions():
    validate(
        [
            get_assignment("flag", get_boolean_literal(True)),
            get_while(get_boolean_literal(True), [get_break()]),
            get_if(get_identifier("x"), [get_return(get_if(get_boolean_literal(True), [get_number_literal(1)]))]),
        ]
    )


@pytest.mark.parametrize(
    "statements, message",
    [
        pytest.param([get_block([get_identifier("x")])], "nested block", id="nested_block"),
        pytest.param([get_if(get_boolean_literal(True), [get_identifier("x")])], "literal condition", id="literal_if"),
        pytest.param([get_while(get_boolean_literal(False), [get_identifier("x")])], "while (FALSE)", id="while_false"),
        pytest.param([get_return(), get_identifier("x")], "Unreachable statement after 'return'", id="after_return"),
        pytest.param(
            [get_function_def(body=[get_next(), get_identifier("x")])],
            "Unreachable statement after 'next'",
            id="inside_function_body",
        ),
        pytest.param(
            [get_function_call("lapply", [get_identifier("xs"), get_function_def(body=[get_block([])])])],
            "nested block",
            id="inside_call_argument",
        ),
    ],
)
def test_rejects_violations(statements, message):
    with pytest.raises(ASTValidationError) as e:
        validate(statements)
    assert message in str(e.value)


def test_error_reports_path_to_offending_node():
    with pytest.raises(ASTValidationError) as e:
        validate([get_identifier("a"), get_repeat([get_break(), get_identifier("b")])])

    assert e.value.path == ["body", "[1]", "body", "[0]"]
    assert "body > [1] > body > [0]" in str(e.value)
