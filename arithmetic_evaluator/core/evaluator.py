"""Evaluate arithmetic expressions with the Shunting-yard algorithm."""
from collections.abc import Callable as ABCCallable
import math
import operator
from typing import Callable, List, Sequence, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from arithmetic_evaluator.common.errors import (
    DivisionByZeroError,
    EmptyExpressionError,
    ExtraOperandError,
    MissingOperandError,
    UnbalancedParenError,
    UnknownOperatorError,
)
from arithmetic_evaluator.common.logger import logger
from arithmetic_evaluator.common.models import Token, TokenKind
from arithmetic_evaluator.core.tokenizer import Tokenizer


def _signed_infinity(base: float, exponent: float) -> float:
    """Infinity with the sign C's pow() gives: negative for a negative base and an odd integer exponent."""
    odd_exponent = float(exponent).is_integer() and int(exponent) % 2 == 1
    if math.copysign(1.0, base) < 0 and odd_exponent:
        return -math.inf
    return math.inf


def power(a: float, b: float) -> float:
    """
    Raise a to the power b with IEEE special values instead of exceptions.

    math.pow raises where C's pow() returns a special value, so:
        - overflow gives a signed infinity
        - zero raised to a negative power gives a signed infinity
        - a negative base with a fractional exponent gives NaN
    """
    try:
        return math.pow(a, b)
    except OverflowError:
        return _signed_infinity(a, b)
    except ValueError:
        if a == 0:
            return _signed_infinity(a, b)
        return math.nan


def remainder(a: float, b: float) -> float:
    """Floating-point remainder whose sign follows a (C fmod), NaN for an infinite dividend."""
    try:
        return math.fmod(a, b)
    except ValueError:
        return math.nan


# Type alias for operator functions (taking two floats, returning a float)
OperatorFn: ABCCallable[[float, float], float] = Callable[[float, float], float]

# Mapping of operator symbols to (precedence, function)
OPERATORS: dict[str, Tuple[int, OperatorFn]] = {
    "+": (1, operator.add),
    "-": (1, operator.sub),
    "*": (2, operator.mul),
    "/": (2, operator.truediv),
    "%": (2, remainder),
    "^": (3, power),
}

# Parentheses rank below every operator
PAREN_PRECEDENCE: int = 0

# Operators whose right operand must not be zero
ZERO_DIVISORS: frozenset = frozenset("/%")


class Evaluator(BaseModel):
    """
    Evaluate arithmetic expressions safely.

    Design constraints:
        - No eval(), no dynamic code execution
        - Operand and operator stacks are local to each call, so one
          instance can be shared and reused freely

    Algorithm:
        1. Tokenize (see Tokenizer)
        2. Walk the tokens with an operand stack and an operator stack,
           reducing as soon as precedence allows (Shunting-yard)
        3. Render the single remaining operand as fixed-point text

    All operators are left-associative by default, so 2 ^ 3 ^ 2 is
    (2 ^ 3) ^ 2 = 64. Set right_associative_power to get 2 ^ (3 ^ 2).

    Examples:
        - 3 + 4 * 2 -> 11.000000
        - (1 + 2) * (3 + 4) -> 21.000000
    """

    model_config = ConfigDict(frozen=True)

    precision: int = Field(default=6, ge=0, le=17, description="Number of fractional digits in results")
    strip_trailing_zeros: bool = Field(
        default=False, description="Trim trailing zeros and a dangling decimal point from results"
    )
    right_associative_power: bool = Field(default=False, description="Evaluate '^' right to left")

    @staticmethod
    def precedence(symbol: str) -> int:
        """
        Return the precedence rank of an operator or parenthesis.

        :param str symbol: Operator or parenthesis

        :return: 3 for '^', 2 for '*' '/' '%', 1 for '+' '-', 0 for parentheses
        :rtype: int
        :raises UnknownOperatorError: If the symbol is not recognised
        """
        if symbol in ("(", ")"):
            return PAREN_PRECEDENCE
        try:
            return OPERATORS[symbol][0]
        except KeyError:
            raise UnknownOperatorError(symbol, stage="precedence") from None

    @staticmethod
    def apply_operator(a: float, op: str, b: float) -> float:
        """
        Apply a binary operator to two operands.

        :param float a: Left operand
        :param str op: Operator symbol
        :param float b: Right operand

        :return: Result of a op b
        :rtype: float
        :raises DivisionByZeroError: If op is '/' or '%' and b is zero
        :raises UnknownOperatorError: If op is not recognised
        """
        if op not in OPERATORS:
            raise UnknownOperatorError(op, stage="reduce")
        if op in ZERO_DIVISORS and b == 0:
            raise DivisionByZeroError(op)
        return OPERATORS[op][1](a, b)

    def _discharges(self, top: str, incoming: str) -> bool:
        """Return True if the stacked operator must be applied before pushing the incoming one."""
        top_rank: int = self.precedence(top)
        incoming_rank: int = self.precedence(incoming)
        if self.right_associative_power and incoming == "^":
            return top_rank > incoming_rank
        return top_rank >= incoming_rank

    def _reduce(self, operands: List[float], operators: List[Token]) -> None:
        """
        Pop one operator and its two operands, then push the result.

        :param List[float] operands: Operand stack
        :param List[Token] operators: Operator stack, top is an operator

        :raises MissingOperandError: If fewer than two operands are available
        """
        op: str = operators.pop().lexeme
        if len(operands) < 2:
            raise MissingOperandError(op, available=len(operands))
        b: float = operands.pop()
        a: float = operands.pop()
        operands.append(self.apply_operator(a, op, b))

    def evaluate_tokens(self, tokens: Sequence[Token]) -> float:
        """
        Reduce a token sequence to a single number.

        :param Sequence[Token] tokens: Tokens produced by Tokenizer.tokenize

        :return: Value of the expression
        :rtype: float
        :raises EvaluationError: If the token sequence is malformed or an operation fails
        """
        if not tokens:
            raise EmptyExpressionError()

        operands: List[float] = []
        operators: List[Token] = []

        for token in tokens:
            if token.kind is TokenKind.NUMBER:
                operands.append(float(token.lexeme))

            elif token.kind is TokenKind.LPAREN:
                operators.append(token)

            elif token.kind is TokenKind.RPAREN:
                # Apply everything back to the matching '('
                while operators and operators[-1].kind is not TokenKind.LPAREN:
                    self._reduce(operands, operators)
                if not operators:
                    raise UnbalancedParenError("Unmatched ')'")
                operators.pop()

            else:
                # Rank the incoming operator first so an unknown one fails even on an empty stack
                self.precedence(token.lexeme)
                while (
                    operators
                    and operators[-1].kind is TokenKind.OPERATOR
                    and self._discharges(operators[-1].lexeme, token.lexeme)
                ):
                    self._reduce(operands, operators)
                operators.append(token)

        while operators:
            if operators[-1].kind is TokenKind.LPAREN:
                raise UnbalancedParenError("Unmatched '('")
            self._reduce(operands, operators)

        if not operands:
            # Only empty groups such as "()"
            raise EmptyExpressionError()
        if len(operands) > 1:
            raise ExtraOperandError(len(operands))

        return operands[0]

    def render(self, value: float) -> str:
        """
        Render a value as fixed-point decimal text.

        :param float value: Value to render

        :return: Text such as '4.000000', or '4' when trailing zeros are stripped
        :rtype: str
        """
        text: str = f"{value:.{self.precision}f}"
        if self.strip_trailing_zeros and "." in text:
            text = text.rstrip("0").rstrip(".")
        return text

    def calculate(self, expression: Union[str, bytes]) -> str:
        """
        Evaluate an arithmetic expression and render the result.

        :param expression: Arithmetic expression, as text or UTF-8 bytes

        :return: Rendered numeric result
        :rtype: str
        :raises EvaluationError: If the expression is malformed or an operation fails
        """
        tokens: List[Token] = Tokenizer.tokenize(expression)
        result: str = self.render(self.evaluate_tokens(tokens))
        logger.debug(f"Evaluated {expression!r} = {result}")
        return result


_default_evaluator: Evaluator = Evaluator()


def calculate(expression: Union[str, bytes]) -> str:
    """
    Evaluate an arithmetic expression with the default settings.

    :param expression: Arithmetic expression

    :return: Result with six fractional digits, e.g. '11.000000'
    :rtype: str
    :raises EvaluationError: If the expression is malformed or an operation fails
    """
    return _default_evaluator.calculate(expression)
