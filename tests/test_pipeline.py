import json

import pytest

from rprune import optimize_batch, optimize_source
from rprune.exceptions import ErrorCode, InternalOptimizerError, RPruneError
from rprune.parser.classes import Program
from rprune.pipeline import OptimizationPipeline


def test_optimize_source_returns_printed_program():
    script = "f <- function(a) {\n  return(a)\n  b <- 24\n  return(b)\n}\n"
    assert optimize_source(script) == "f <- function(a) {\n  return(a)\n}\n"


def test_optimize_source_with_nothing_to_remove_is_canonical_print():
    assert optimize_source("x<-1;y<-x+2") == "x <- 1\ny <- x + 2\n"


def test_optimize_source_respects_pass_selection():
    assert optimize_source("if (!TRUE) a else b", passes=["dead_code_elimination"]) == "if (!TRUE) {\n  a\n} else {\n  b\n}\n"
    assert optimize_source("if (!TRUE) a else b") == "b\n"


def test_syntax_errors_propagate_unchanged():
    with pytest.raises(RPruneError) as e:
        optimize_source("x <- (1")
    assert e.value.code == ErrorCode.SYNTAX_UNMATCHED_BRACKET


def test_unexpected_failures_are_wrapped(monkeypatch):
    def explode(node):
        raise ValueError("boom")

    monkeypatch.setattr("rprune.pipeline.print_rlang", explode)

    with pytest.raises(InternalOptimizerError, match="boom"):
        optimize_source("x")


def test_stop_after_ast_returns_parsed_program():
    result = OptimizationPipeline("return(1); 2", stop_after_stage="ast").run()

    assert isinstance(result, Program)
    assert len(result.body) == 2


def test_stop_after_optimized_ast_returns_optimized_program():
    pipeline = OptimizationPipeline("return(1); 2", stop_after_stage="optimized_ast")
    result = pipeline.run()

    assert len(result.body) == 1
    assert set(pipeline.artifacts) == {"ast", "optimized_ast"}


def test_unknown_stage_is_rejected():
    with pytest.raises(RPruneError) as e:
        OptimizationPipeline("x", stop_after_stage="bytecode")
    assert e.value.code == ErrorCode.UNKNOWN_STAGE


def test_dumped_artifact_is_json_next_to_input(tmp_path):
    script_path = tmp_path / "script.R"
    script_path.write_text("while (FALSE) x\ny")

    pipeline = OptimizationPipeline(script_path.read_text(), file_path=str(script_path), dump_stages=["ast", "optimized_ast"])
    assert pipeline.run() == "y\n"

    ast_dump = json.loads((tmp_path / "script.ast.json").read_text())
    optimized_dump = json.loads((tmp_path / "script.optimized_ast.json").read_text())

    assert ast_dump["node_type"] == "Program"
    assert [s["node_type"] for s in ast_dump["body"]] == ["WhileLoop", "Identifier"]
    assert optimized_dump["body"] == [ast_dump["body"][1]]


# --- Batch ---

BATCH = [
    "return(1); 2",
    "if (FALSE) a",
    "repeat { break; x }",
    "x <- if (TRUE) 1 else 2",
    "y",
]
BATCH_EXPECTED = ["return(1)\n", "", "repeat {\n  break\n}\n", "x <- {\n  1\n}\n", "y\n"]


@pytest.mark.parametrize("workers", [None, 1, 4])
def test_batch_preserves_input_order(workers):
    assert optimize_batch(BATCH, workers=workers) == BATCH_EXPECTED


def test_batch_matches_one_by_one_results():
    sources = [f"f{i} <- function() {{ return({i}); {i} + 1 }}" for i in range(20)]
    assert optimize_batch(sources, workers=8) == [optimize_source(s) for s in sources]


def test_empty_batch():
    assert optimize_batch([], workers=4) == []


def test_batch_raises_first_error():
    with pytest.raises(RPruneError):
        optimize_batch(["x", "y <- (", "z"], workers=2)


def test_operators_and_integer_literals_survive_optimization():
    script = "x <- 5L\ny <- 7 %/% 2L\nz <- 7L %/% 2L\nw <- a %in% b\nv <- +x\nr <- 1:n"
    assert optimize_source(script) == "x <- 5L\ny <- 3\nz <- 3L\nw <- a %in% b\nv <- +x\nr <- 1:n\n"
