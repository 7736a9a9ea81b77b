"""Test the command-line front end."""
from pathlib import Path
import zipfile

import pytest

from arithmetic_evaluator.core.evaluator import Evaluator
from arithmetic_evaluator.main import build_output_path, evaluate_lines, main, parse_args


@pytest.mark.parametrize(
    "expr,expected",
    [
        ("2 + 3", "5.000000"),
        ("10 - 4", "6.000000"),
        ("3 * 4", "12.000000"),
        ("8 / 2", "4.000000"),
    ],
)
def test_evaluate_lines_valid_expression(expr: str, expected: str) -> None:
    """Valid expressions produce a rendered result."""
    [res] = evaluate_lines([expr], Evaluator())
    assert res.line == 1
    assert res.expression == expr
    assert res.result == expected
    assert res.error is None


@pytest.mark.parametrize(
    "expr,kind",
    [
        ("2 +", "MissingOperand"),
        ("3 4 + (5", "UnbalancedParen"),
        ("7 / 0", "DivisionByZero"),
        ("x + 1", "InvalidCharacter"),
    ],
)
def test_evaluate_lines_invalid_expression(expr: str, kind: str) -> None:
    """Malformed expressions are recorded as errors with their kind."""
    [res] = evaluate_lines([expr], Evaluator())
    assert res.expression == expr
    assert res.result is None
    assert res.kind == kind
    assert isinstance(res.error, str)


def test_evaluate_lines_continues_after_failure(caplog) -> None:
    """A failing line is logged and the following lines are still evaluated."""
    with caplog.at_level("ERROR", logger="arithmetic_evaluator"):
        results = evaluate_lines(["1 + 1", "1 / 0", "2 * 2"], Evaluator())

    assert [r.line for r in results] == [1, 2, 3]
    assert [r.ok for r in results] == [True, False, True]
    assert any("Line 2" in record.getMessage() for record in caplog.records)


@pytest.mark.parametrize("name,expected", [
    ("operations_short.7z", "operations_short_7z_results.txt"),
    ("ops.tar.xz", "ops_tar_xz_results.txt"),
    ("ops.txt", "ops_txt_results.txt"),
])
def test_build_output_path(name: str, expected: str) -> None:
    """The output file sits next to the input and encodes its extensions."""
    assert build_output_path(Path("resources") / name) == Path("resources") / expected


def test_parse_args_configures_evaluator() -> None:
    cli_args, evaluator = parse_args(["--precision", "2", "--strip-zeros", "--right-assoc-power", "1+1"])
    assert cli_args.expressions == ["1+1"]
    assert evaluator.precision == 2
    assert evaluator.strip_trailing_zeros
    assert evaluator.right_associative_power


@pytest.mark.parametrize("argv", [
    [],
    ["--precision", "-1", "1+1"],
    ["--output", "out.txt", "1+1"],
    ["--file", "does_not_exist.txt"],
])
def test_parse_args_rejects_invalid(argv: list[str]) -> None:
    """Invalid arguments exit with status 2."""
    with pytest.raises(SystemExit) as exc_info:
        parse_args(argv)
    assert exc_info.value.code == 2


def test_main_prints_results(capsys) -> None:
    status = main(["3 + 4 * 2", "5 / 0"])

    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "3 + 4 * 2 = 11.000000"
    assert lines[1].startswith("5 / 0 -> ERROR: ")
    assert status == 1


def test_main_success_status(capsys) -> None:
    assert main(["--strip-zeros", "7 / 2"]) == 0
    assert capsys.readouterr().out == "7 / 2 = 3.5\n"


def test_main_file_writes_output(tmp_path) -> None:
    """Reading from a file writes one line per expression to the output file."""
    input_file = tmp_path / "ops.txt"
    input_file.write_text("1+1\n\n(1 + 2) * (3 + 4)\n2 ^ 3 ^ 2\n")

    assert main(["--file", str(input_file)]) == 0

    output_file = tmp_path / "ops_txt_results.txt"
    assert output_file.read_text().splitlines() == [
        "1+1 = 2.000000",
        "(1 + 2) * (3 + 4) = 21.000000",
        "2 ^ 3 ^ 2 = 64.000000",
    ]


def test_main_archive_with_explicit_output(tmp_path) -> None:
    """Archives are read and errors are written next to results."""
    zip_path = tmp_path / "ops.zip"
    with zipfile.ZipFile(zip_path, "w") as zf:
        zf.writestr("ops.txt", "10 % 3\n(1 + 2\n")
    output_file = tmp_path / "out.txt"

    assert main(["--file", str(zip_path), "--output", str(output_file)]) == 1

    lines = output_file.read_text().splitlines()
    assert lines[0] == "10 % 3 = 1.000000"
    assert lines[1].startswith("(1 + 2 -> ERROR: Unmatched '('")


def test_main_unreadable_archive(tmp_path) -> None:
    """An unsupported input format exits with status 2."""
    file_path = tmp_path / "ops.rar"
    file_path.write_text("1+1")

    assert main(["--file", str(file_path)]) == 2


@pytest.mark.parametrize("name", ["ops.zip", "ops.tar.xz"])
def test_main_corrupt_archive(tmp_path, name: str) -> None:
    """A corrupt archive exits with status 2 instead of a traceback."""
    archive_path = tmp_path / name
    archive_path.write_bytes(b"this is not an archive")

    assert main(["--file", str(archive_path)]) == 2


@pytest.mark.parametrize("argv,message", [
    ([], "Provide expressions to evaluate or --file"),
    (["--file", "ops.txt", "1+1"], "not both"),
])
def test_parse_args_source_messages(tmp_path, monkeypatch, capsys, argv: list[str], message: str) -> None:
    """Missing and conflicting sources get distinct error messages."""
    monkeypatch.chdir(tmp_path)
    (tmp_path / "ops.txt").write_text("1+1\n")

    with pytest.raises(SystemExit):
        parse_args(argv)
    assert message in capsys.readouterr().err
