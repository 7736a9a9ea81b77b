"""Test classes Token and CalculationResult."""
from pydantic import ValidationError
import pytest

from arithmetic_evaluator.common.models import CalculationResult, Token, TokenKind


@pytest.mark.parametrize("char,kind", [
    ("+", TokenKind.OPERATOR),
    ("%", TokenKind.OPERATOR),
    ("^", TokenKind.OPERATOR),
    ("(", TokenKind.LPAREN),
    (")", TokenKind.RPAREN),
])
def test_token_symbol(char: str, kind: TokenKind) -> None:
    """Token.symbol picks the kind from the character."""
    token = Token.symbol(char)
    assert token.kind is kind
    assert token.lexeme == char


@pytest.mark.parametrize("lexeme", ["0", "42", "3.14", "007"])
def test_token_number_valid(lexeme: str) -> None:
    """Well-formed number lexemes are accepted."""
    assert Token.number(lexeme).lexeme == lexeme


@pytest.mark.parametrize("lexeme", ["", ".5", "5.", "1.2.3", "-1", "1e5"])
def test_token_number_invalid(lexeme: str) -> None:
    """Malformed number lexemes raise a validation error."""
    with pytest.raises(ValidationError):
        Token.number(lexeme)


@pytest.mark.parametrize("kind,lexeme", [
    (TokenKind.OPERATOR, "&"),
    (TokenKind.OPERATOR, "**"),
    (TokenKind.LPAREN, ")"),
    (TokenKind.RPAREN, "("),
])
def test_token_kind_mismatch(kind: TokenKind, lexeme: str) -> None:
    """A lexeme that does not fit its kind is rejected."""
    with pytest.raises(ValidationError):
        Token(kind=kind, lexeme=lexeme)


def test_token_is_frozen() -> None:
    token = Token.number("1")
    with pytest.raises(ValidationError):
        token.lexeme = "2"


def test_calculation_result_success() -> None:
    """A successful result renders as '<expression> = <result>'."""
    res = CalculationResult(line=1, expression="2 + 2 * 3", result="8.000000")
    assert res.ok
    assert res.to_line() == "2 + 2 * 3 = 8.000000"


def test_calculation_result_error() -> None:
    """A failed result renders as '<expression> -> ERROR: <message>'."""
    res = CalculationResult(line=2, expression="5 / 0", error="Division by zero in '/'", kind="DivisionByZero")
    assert not res.ok
    assert res.to_line() == "5 / 0 -> ERROR: Division by zero in '/'"


@pytest.mark.parametrize("fields", [
    {},
    {"result": "1.000000", "error": "boom"},
])
def test_calculation_result_requires_one_outcome(fields: dict) -> None:
    """Exactly one of result and error must be set."""
    with pytest.raises(ValidationError):
        CalculationResult(line=1, expression="1", **fields)


def test_calculation_result_invalid_line() -> None:
    """Line numbers start at 1."""
    with pytest.raises(ValidationError):
        CalculationResult(line=0, expression="1", result="1.000000")


def test_calculation_result_invalid_expression_type() -> None:
    with pytest.raises(ValidationError):
        CalculationResult(line=1, expression=42, result="42.000000")
