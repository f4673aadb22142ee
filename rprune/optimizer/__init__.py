from .constant_folding import run_constant_folding
from .dead_code_elimination import apply_dead_code_elimination, run_dce
from .literal_evaluator import LiteralValue, evaluate_literal

__all__ = ["LiteralValue", "apply_dead_code_elimination", "evaluate_literal", "run_constant_folding", "run_dce"]
