import argparse
import logging
import os
import sys
import time

from .config import DEFAULT_MAX_ROUNDS, PASS_SEQUENCE
from .exceptions import RPruneError
from .pipeline import OptimizationPipeline
from .utils import TerminalColors

# Stages that can be dumped with `-c`, in pipeline order.
STAGE_MAP = {
    "1": ("ast", "Abstract Syntax Tree"),
    "2": ("optimized_ast", "Optimized Abstract Syntax Tree"),
}


def _pass_list(value: str):
    return [name.strip() for name in value.split(",") if name.strip()]


def build_arg_parser() -> argparse.ArgumentParser:
    stage_help = " ".join(f"'{key}' for the {desc}." for key, (_, desc) in STAGE_MAP.items())

    parser = argparse.ArgumentParser(prog="rprune", description="Remove dead code from an R script.")
    parser.add_argument("input_file", nargs="?", default=None, help="Script to optimize. Reads stdin when omitted.")
    parser.add_argument(
        "-o",
        "--output",
        dest="output_file",
        help="Where to write the optimized script (default: '<input>.opt.R'). Use '-' for stdout.",
    )
    parser.add_argument(
        "-c",
        "--compile",
        dest="stage",
        choices=STAGE_MAP.keys(),
        help=f"Stop after a stage and save it as JSON next to the input. {stage_help}",
    )
    parser.add_argument(
        "--passes",
        type=_pass_list,
        default=list(PASS_SEQUENCE),
        help=f"Comma separated passes to run (default: {','.join(PASS_SEQUENCE)}).",
    )
    parser.add_argument("--max-rounds", type=int, default=DEFAULT_MAX_ROUNDS, help="Upper bound on optimization rounds.")
    parser.add_argument("--validate", action="store_true", help="Check the optimized tree for leftover dead code.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug logging from the passes.")
    return parser


def _read_script(input_file):
    if not input_file:
        return sys.stdin.read(), None
    path = os.path.abspath(input_file)
    with open(path, "r", encoding="utf-8") as f:
        return f.read(), path


def _default_output_path(input_file) -> str:
    if input_file:
        return os.path.splitext(input_file)[0] + ".opt.R"
    return "stdin.opt.R"


def main(argv=None):
    start_time = time.perf_counter()
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    if not args.input_file and sys.stdin.isatty():
        parser.error("input_file is required when not reading from a pipe.")

    # With '-o -' stdout carries the script, so status lines move to stderr.
    to_stdout = args.output_file == "-"
    status = sys.stderr if to_stdout else sys.stdout
    display_name = args.input_file or "stdin"
    print(f"--- Optimizing {display_name} ---", file=status)

    try:
        script_content, script_path = _read_script(args.input_file)
        stop_after_stage, stage_desc = STAGE_MAP[args.stage] if args.stage else (None, None)

        pipeline = OptimizationPipeline(
            script_content,
            file_path=script_path,
            dump_stages=[stop_after_stage] if stop_after_stage else [],
            stop_after_stage=stop_after_stage,
            passes=args.passes,
            max_rounds=args.max_rounds,
            validate=args.validate,
        )
        result = pipeline.run()

        if stop_after_stage:
            print(f"\n{TerminalColors.GREEN}--- Stopped after stage '{args.stage} ({stage_desc})' ---{TerminalColors.RESET}", file=status)
        elif to_stdout:
            sys.stdout.write(result)
        else:
            output_path = os.path.abspath(args.output_file or _default_output_path(args.input_file))
            os.makedirs(os.path.dirname(output_path), exist_ok=True)
            with open(output_path, "w", encoding="utf-8") as f:
                f.write(result)

            print(f"\n{TerminalColors.GREEN}--- Optimization Successful ---{TerminalColors.RESET}", file=status)
            print(f"Optimized code written to {output_path}", file=status)

    except RPruneError as e:
        print(f"\n{TerminalColors.RED}--- OPTIMIZATION ERROR ---\n{e}{TerminalColors.RESET}", file=sys.stderr)
        sys.exit(1)
    except FileNotFoundError:
        print(f"{TerminalColors.RED}ERROR: Script file '{display_name}' not found.{TerminalColors.RESET}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"\n{TerminalColors.RED}--- UNEXPECTED OPTIMIZER ERROR ---{TerminalColors.RESET}", file=sys.stderr)
        print("This may be a bug in rprune. Please report it.", file=sys.stderr)
        print(f"{type(e).__name__}: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        duration = time.perf_counter() - start_time
        print(f"\n{TerminalColors.CYAN}--- Total Execution Time: {duration:.4f} seconds ---{TerminalColors.RESET}", file=status)


if __name__ == "__main__":
    main()
