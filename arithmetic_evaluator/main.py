"""
Command-line entrypoint.

This script:
- Evaluates the expressions given as arguments, or every line of a file
- Prints one "<expression> = <result>" line per expression, or writes them
  to an output file when reading from a file
- Reports failed expressions as "<expression> -> ERROR: <message>" and keeps going

Exit status is 0 when every expression evaluated, 1 when at least one failed
and 2 when the input itself could not be read.
"""

import argparse
from pathlib import Path
import sys
from typing import Iterable, List, Optional, Sequence, Tuple

from pydantic import BaseModel, Field, FilePath, ValidationError, model_validator

from arithmetic_evaluator.common.errors import EvaluationError
from arithmetic_evaluator.common.logger import configure_logging, logger
from arithmetic_evaluator.common.models import CalculationResult
from arithmetic_evaluator.common.sources import load_expressions
from arithmetic_evaluator.core.evaluator import Evaluator

LOG_LEVELS: Tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR")


class CliArgs(BaseModel):
    """
    Pydantic model used to validate CLI arguments.

    Attributes
    ----------
    expressions : List[str]
        Expressions given directly on the command line.
    file_path : FilePath, optional
        Text file or archive holding one expression per line.
    output_path : Path, optional
        Where to write results when reading from a file.
    """

    expressions: List[str] = Field(default_factory=list)
    file_path: Optional[FilePath] = None
    output_path: Optional[Path] = None
    log_level: str = Field(default="WARNING", pattern="^(DEBUG|INFO|WARNING|ERROR)$")

    @model_validator(mode="after")
    def exactly_one_source(self) -> "CliArgs":
        """Ensure expressions come either from the command line or from a file."""
        if not self.expressions and self.file_path is None:
            raise ValueError("Provide expressions to evaluate or --file")
        if self.expressions and self.file_path is not None:
            raise ValueError("Provide either expressions or --file, not both")
        if self.output_path is not None and self.file_path is None:
            raise ValueError("--output requires --file")
        return self


def parse_args(argv: Optional[Sequence[str]] = None) -> Tuple[CliArgs, Evaluator]:
    """
    Parse and validate command-line arguments.

    :param argv: Arguments to parse, defaults to sys.argv[1:]

    :return: Validated CLI arguments and the evaluator they configure
    :rtype: Tuple[CliArgs, Evaluator]
    """
    parser = argparse.ArgumentParser(
        prog="arithmetic-evaluator",
        description="Evaluate arithmetic expressions (+ - * / ^ % and parentheses)",
    )

    parser.add_argument("expressions", nargs="*", help="Expressions to evaluate")
    parser.add_argument("-f", "--file", dest="file_path", help="Text file or .zip/.tar.xz/.7z archive of expressions")
    parser.add_argument("-o", "--output", dest="output_path", help="Output file for results (with --file)")
    parser.add_argument("-p", "--precision", type=int, default=6, help="Fractional digits in results")
    parser.add_argument("--strip-zeros", action="store_true", help="Trim trailing zeros from results")
    parser.add_argument("--right-assoc-power", action="store_true", help="Evaluate '^' right to left")
    parser.add_argument("--log-level", default="WARNING", choices=LOG_LEVELS, help="Logging level")

    args = parser.parse_args(argv)

    try:
        cli_args = CliArgs(
            expressions=args.expressions,
            file_path=args.file_path,
            output_path=args.output_path,
            log_level=args.log_level,
        )
        evaluator = Evaluator(
            precision=args.precision,
            strip_trailing_zeros=args.strip_zeros,
            right_associative_power=args.right_assoc_power,
        )
    except ValidationError as exc:
        parser.error(str(exc))

    return cli_args, evaluator


def build_output_path(input_path: Path) -> Path:
    """
    Construct a safe output file path based on the input file.

    - Preserves the original folder
    - Replaces dots in extensions with underscores
    - Appends '_results.txt' at the end

    Examples
    --------
    input: resources/operations_short.7z
    output: resources/operations_short_7z_results.txt

    :param input_path: Path to the input file
    :return: Path to the output file
    """
    stem = input_path.name
    for suffix in input_path.suffixes:
        stem = stem[: -len(suffix)]
    suffix_safe = "".join(input_path.suffixes).replace(".", "_")
    return input_path.with_name(f"{stem}{suffix_safe}_results.txt")


def evaluate_lines(expressions: Iterable[str], evaluator: Evaluator) -> List[CalculationResult]:
    """
    Evaluate each expression, recording failures instead of stopping.

    :param expressions: Expressions to evaluate, in order
    :param Evaluator evaluator: Configured evaluator

    :return: One result per expression, numbered from 1
    :rtype: List[CalculationResult]
    """
    results: List[CalculationResult] = []

    for line_number, expr in enumerate(expressions, start=1):
        try:
            value = evaluator.calculate(expr)
        except EvaluationError as exc:
            logger.error(
                f"🧮❌ Line {line_number} failed ({exc.kind}): {exc}\n"
                f"Invalid arithmetic expression, could not evaluate: {expr!r}"
            )
            results.append(
                CalculationResult(line=line_number, expression=expr, error=str(exc), kind=exc.kind)
            )
        else:
            results.append(CalculationResult(line=line_number, expression=expr, result=value))

    return results


def write_results(results: Iterable[CalculationResult], output_path: Path) -> None:
    """
    Write one line per result to the output file.

    :param results: Results to write
    :param Path output_path: Destination file, overwritten
    """
    with output_path.open("w", encoding="utf-8") as f_out:
        for result in results:
            f_out.write(f"{result.to_line()}\n")
            f_out.flush()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Main function of the arithmetic-evaluator command.

    :param argv: Arguments to parse, defaults to sys.argv[1:]

    :return: Process exit status
    :rtype: int
    """
    cli_args, evaluator = parse_args(argv)
    configure_logging(cli_args.log_level)

    if cli_args.file_path is not None:
        try:
            expressions = load_expressions(cli_args.file_path)
        except ValueError as exc:
            logger.error(f"📄❌ Could not read {cli_args.file_path}: {exc}")
            return 2
    else:
        expressions = cli_args.expressions

    logger.info(f"🧮 Evaluating {len(expressions)} expressions")
    results = evaluate_lines(expressions, evaluator)

    if cli_args.file_path is not None:
        output_path = cli_args.output_path or build_output_path(Path(cli_args.file_path))
        write_results(results, output_path)
        logger.info(f"✉️ Results written to {output_path}")
    else:
        for result in results:
            print(result.to_line())

    failures = sum(1 for result in results if not result.ok)
    logger.info(f"🧮✅ Done: {len(results) - failures} evaluated, {failures} failed")
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
