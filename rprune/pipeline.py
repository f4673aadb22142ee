import json
import logging
import os
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional

from .ast_optimizer import optimize_ast
from .config import DEFAULT_MAX_ROUNDS
from .exceptions import ErrorCode, InternalOptimizerError, RPruneError
from .parser import parse_rlang
from .printer import print_rlang
from .utils import OptimizerArtifactEncoder

logger = logging.getLogger("rprune.pipeline")

STAGES = ["ast", "optimized_ast", "source"]


class OptimizationPipeline:
    """
    Turns one script into its optimized source text in three stages:
    parsing ("ast"), the optimization passes ("optimized_ast") and printing ("source").

    Any stage listed in `dump_stages` is written as JSON next to the input, and
    `stop_after_stage` ends the run early, returning that stage's product.
    """

    def __init__(
        self,
        source_content: str,
        file_path: Optional[str] = None,
        dump_stages: Optional[List[str]] = None,
        stop_after_stage: Optional[str] = None,
        passes: Optional[List[str]] = None,
        max_rounds: int = DEFAULT_MAX_ROUNDS,
        validate: bool = False,
    ):
        self.dump_stages = list(dump_stages or [])
        for stage in self.dump_stages + ([stop_after_stage] if stop_after_stage else []):
            if stage not in STAGES:
                raise RPruneError(ErrorCode.UNKNOWN_STAGE, name=stage)

        self.source_content = source_content
        self.file_path = os.path.abspath(file_path) if file_path else "<stdin>"
        self.stop_after_stage = stop_after_stage
        self.passes = passes
        self.max_rounds = max_rounds
        self.validate = validate
        self.artifacts: Dict[str, Any] = {}

    def run(self) -> Any:
        """Runs the stages in order, feeding each product to the next one."""
        try:
            program = self._stage("ast", parse_rlang, self.source_content, self.file_path)
            if self.stop_after_stage == "ast":
                return program

            optimizer_artifacts = optimize_ast(program, passes=self.passes, max_rounds=self.max_rounds, validate=self.validate)
            logger.debug(f"'{self.file_path}' reached a fixpoint after {optimizer_artifacts['rounds']} round(s)")
            optimized = self._stage("optimized_ast", lambda: optimizer_artifacts["optimized_ast"])
            if self.stop_after_stage == "optimized_ast":
                return optimized

            return self._stage("source", print_rlang, optimized)

        except RPruneError:
            raise
        except Exception as e:
            raise InternalOptimizerError(f"An unexpected internal error occurred: {e}") from e

    def _stage(self, name: str, func, *args) -> Any:
        product = func(*args)
        self.artifacts[name] = product
        if name in self.dump_stages:
            self.save_artifact(name, product)
        return product

    def save_artifact(self, name: str, data: Any):
        """Writes `data` to `<input base name>.<stage>.json`."""
        base_name = "stdin_output" if self.file_path == "<stdin>" else os.path.splitext(self.file_path)[0]
        output_path = f"{base_name}.{name}.json"

        print(f"--- Saving artifact '{name}' to {output_path} ---")
        try:
            with open(output_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, cls=OptimizerArtifactEncoder)
        except OSError as e:
            print(f"Error: Could not save artifact '{name}': {e}")


def optimize_source(
    script_content: str,
    file_path: Optional[str] = None,
    passes: Optional[List[str]] = None,
    max_rounds: int = DEFAULT_MAX_ROUNDS,
    validate: bool = False,
) -> str:
    """Optimizes one script and returns the printed result."""
    return OptimizationPipeline(script_content, file_path, passes=passes, max_rounds=max_rounds, validate=validate).run()


def optimize_batch(
    sources: List[str],
    workers: Optional[int] = None,
    passes: Optional[List[str]] = None,
    max_rounds: int = DEFAULT_MAX_ROUNDS,
    validate: bool = False,
) -> List[str]:
    """
    Optimizes independent scripts and returns the results in input order, one per input.
    Scripts share no state, so with `workers > 1` they are processed concurrently.
    The first failing script's error is raised.
    """

    def _optimize(source: str) -> str:
        return optimize_source(source, passes=passes, max_rounds=max_rounds, validate=validate)

    if not workers or workers <= 1 or len(sources) <= 1:
        return [_optimize(source) for source in sources]

    logger.debug(f"Optimizing {len(sources)} script(s) with {workers} worker(s)")
    with ThreadPoolExecutor(max_workers=workers) as executor:
        return list(executor.map(_optimize, sources))
