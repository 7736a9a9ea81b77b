"""Pydantic models for tokens and evaluation results."""
from enum import Enum
import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Operator symbols accepted by the tokenizer, in no particular order
OPERATOR_SYMBOLS: frozenset = frozenset("+-*/^%")

# Shape of a numeric literal: digits with an optional fractional part
NUMBER_PATTERN: re.Pattern = re.compile(r"[0-9]+(?:\.[0-9]+)?")


class TokenKind(str, Enum):
    """Kinds of lexical units produced by the tokenizer."""

    NUMBER = "number"
    OPERATOR = "operator"
    LPAREN = "lparen"
    RPAREN = "rparen"


class Token(BaseModel):
    """A single lexical unit: a number literal, an operator or a parenthesis."""

    model_config = ConfigDict(frozen=True)

    kind: TokenKind = Field(..., description="Token kind")
    lexeme: str = Field(..., description="Source text of the token")

    @model_validator(mode="after")
    def lexeme_must_match_kind(self) -> "Token":
        """Ensure the lexeme is consistent with the token kind."""
        if self.kind is TokenKind.NUMBER and not NUMBER_PATTERN.fullmatch(self.lexeme):
            raise ValueError(f"Invalid number lexeme: {self.lexeme!r}")
        if self.kind is TokenKind.OPERATOR and self.lexeme not in OPERATOR_SYMBOLS:
            raise ValueError(f"Invalid operator lexeme: {self.lexeme!r}")
        if self.kind is TokenKind.LPAREN and self.lexeme != "(":
            raise ValueError(f"Invalid opening parenthesis lexeme: {self.lexeme!r}")
        if self.kind is TokenKind.RPAREN and self.lexeme != ")":
            raise ValueError(f"Invalid closing parenthesis lexeme: {self.lexeme!r}")
        return self

    @classmethod
    def number(cls, lexeme: str) -> "Token":
        return cls(kind=TokenKind.NUMBER, lexeme=lexeme)

    @classmethod
    def symbol(cls, char: str) -> "Token":
        """Build an operator or parenthesis token from its character."""
        if char == "(":
            return cls(kind=TokenKind.LPAREN, lexeme=char)
        if char == ")":
            return cls(kind=TokenKind.RPAREN, lexeme=char)
        return cls(kind=TokenKind.OPERATOR, lexeme=char)


class CalculationResult(BaseModel):
    """Outcome of evaluating one expression from a batch."""

    model_config = ConfigDict(frozen=True)

    line: int = Field(..., ge=1, description="Line number of the expression in its batch")
    expression: str = Field(..., description="Original arithmetic expression")
    result: Optional[str] = Field(default=None, description="Rendered numeric result")
    error: Optional[str] = Field(default=None, description="Error message when evaluation failed")
    kind: Optional[str] = Field(default=None, description="Error kind identifier when evaluation failed")

    @model_validator(mode="after")
    def exactly_one_outcome(self) -> "CalculationResult":
        """Ensure that either a result or an error is present, never both."""
        if (self.result is None) == (self.error is None):
            raise ValueError("Exactly one of 'result' or 'error' must be set")
        return self

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_line(self) -> str:
        """Render the outcome as a single output line."""
        if self.ok:
            return f"{self.expression} = {self.result}"
        return f"{self.expression} -> ERROR: {self.error}"
