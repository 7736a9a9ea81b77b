"""Classified errors raised while tokenizing or evaluating an expression."""
from typing import Optional


class EvaluationError(ValueError):
    """
    Base class for every failure of the evaluator.

    Subclasses set ``kind``, a stable identifier that front ends can report
    without parsing the message.
    """

    kind: str = "EvaluationError"


class UnbalancedParenError(EvaluationError):
    """An opening parenthesis has no match, or a closing one has no opener."""

    kind = "UnbalancedParen"

    def __init__(self, message: str = "Unbalanced parenthesis", position: Optional[int] = None):
        if position is not None:
            message = f"{message} at position {position}"
        super().__init__(message)
        self.position = position


class MissingOperandError(EvaluationError):
    """
    A binary operator was reduced without two operands.

    ``available`` is the number of operands that were on the operand
    container at the time: 1 or 0.
    """

    kind = "MissingOperand"

    def __init__(self, operator: str, available: int):
        if available == 0:
            message = f"Operator {operator!r} has no operands"
        else:
            message = f"Operator {operator!r} expects two operands but only {available} is available"
        super().__init__(message)
        self.operator = operator
        self.available = available


class DivisionByZeroError(EvaluationError):
    kind = "DivisionByZero"

    def __init__(self, operator: str):
        super().__init__(f"Division by zero in {operator!r}")
        self.operator = operator


class InvalidCharacterError(EvaluationError):
    kind = "InvalidCharacter"

    def __init__(self, character: str, position: int):
        super().__init__(f"Invalid character {character!r} at position {position}")
        self.character = character
        self.position = position


class InvalidNumberError(EvaluationError):
    """A numeric literal such as ``1.2.3`` or ``.5`` is malformed."""

    kind = "InvalidNumber"

    def __init__(self, literal: str):
        super().__init__(f"Invalid number literal {literal!r}")
        self.literal = literal


class UnknownOperatorError(EvaluationError):
    """
    Internal error: an operator symbol outside the supported set reached the evaluator.

    ``stage`` is ``"reduce"`` when applying the operator failed and
    ``"precedence"`` when ranking it failed.
    """

    kind = "UnknownOperator"

    def __init__(self, operator: str, stage: str):
        super().__init__(f"Unknown operator {operator!r} ({stage})")
        self.operator = operator
        self.stage = stage


class EmptyExpressionError(EvaluationError):
    kind = "EmptyExpression"

    def __init__(self):
        super().__init__("Empty expression")


class ExtraOperandError(EvaluationError):
    """Operands were left over once every operator was applied, e.g. ``2(3+1)``."""

    kind = "ExtraOperand"

    def __init__(self, remaining: int):
        super().__init__(f"Invalid expression ({remaining} operands remaining)")
        self.remaining = remaining
