import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from .config import DEFAULT_MAX_ROUNDS, PASS_SEQUENCE
from .exceptions import ErrorCode, RPruneError
from .optimizer.ast_validator import ASTValidator
from .optimizer.constant_folding import run_constant_folding
from .optimizer.dead_code_elimination import apply_dead_code_elimination
from .parser.classes import Program

logger = logging.getLogger("rprune.ast_optimizer")


def _constant_folding_pass(program: Program) -> Tuple[Program, bool]:
    optimized = run_constant_folding(program)
    return optimized, optimized != program


PASS_REGISTRY: Dict[str, Callable[[Program], Tuple[Program, bool]]] = {
    "constant_folding": _constant_folding_pass,
    "dead_code_elimination": apply_dead_code_elimination,
}


class ASTOptimizer:
    """
    Orchestrates the optimization passes over the AST.

    Passes run in their canonical order, and the whole sequence is repeated until a
    round in which no pass reports a change, or until `max_rounds` is reached. Each
    pass is single-shot; iterating to a fixpoint is this driver's job alone.
    """

    def __init__(self, program: Program, passes_to_run: List[str], max_rounds: int = DEFAULT_MAX_ROUNDS, validate: bool = False):
        unknown = [p for p in passes_to_run if p not in PASS_REGISTRY]
        if unknown:
            raise RPruneError(ErrorCode.UNKNOWN_PASS, name=unknown[0], available=", ".join(PASS_SEQUENCE))
        if max_rounds < 1:
            raise RPruneError(ErrorCode.INVALID_MAX_ROUNDS, value=max_rounds)

        self.program = program
        self.phase_sequence = PASS_SEQUENCE
        self.passes_to_run = [p for p in self.phase_sequence if p in passes_to_run]
        self.max_rounds = max_rounds
        self.validate = validate
        self.artifacts: Dict[str, Any] = {}

    def optimize(self) -> Dict[str, Any]:
        """
        Runs the selected passes to a fixpoint and returns a dictionary of artifacts:
        the program after the last run of each pass, the final program under
        "optimized_ast" and the number of rounds under "rounds".
        """
        current = self.program
        rounds = 0

        while rounds < self.max_rounds:
            rounds += 1
            round_changed = False

            for pass_name in self.passes_to_run:
                current, changed = PASS_REGISTRY[pass_name](current)
                self.artifacts[pass_name] = current
                round_changed = round_changed or changed
                logger.debug(f"Round {rounds}: pass '{pass_name}' {'changed' if changed else 'did not change'} the program")

            if not round_changed:
                break
        else:
            logger.debug(f"Stopped after the maximum of {self.max_rounds} round(s)")

        if self.validate and "dead_code_elimination" in self.passes_to_run:
            ASTValidator(current).validate()

        self.artifacts["optimized_ast"] = current
        self.artifacts["rounds"] = rounds
        return self.artifacts


def optimize_ast(program: Program, passes: Optional[List[str]] = None, max_rounds: int = DEFAULT_MAX_ROUNDS, validate: bool = False) -> Dict[str, Any]:
    """
    High-level entry point for the AST optimization stage.
    """
    passes_to_run = list(PASS_SEQUENCE) if passes is None else passes
    optimizer = ASTOptimizer(program, passes_to_run, max_rounds=max_rounds, validate=validate)
    return optimizer.optimize()
