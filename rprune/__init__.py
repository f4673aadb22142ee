from .ast_optimizer import optimize_ast
from .optimizer.dead_code_elimination import apply_dead_code_elimination
from .parser import parse_rlang
from .pipeline import optimize_batch, optimize_source
from .printer import print_rlang

__all__ = ["apply_dead_code_elimination", "optimize_ast", "optimize_batch", "optimize_source", "parse_rlang", "print_rlang"]
