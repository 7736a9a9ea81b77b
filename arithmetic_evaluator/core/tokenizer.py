"""Split an arithmetic expression into tokens."""
from typing import List, Union

from arithmetic_evaluator.common.errors import (
    InvalidCharacterError,
    InvalidNumberError,
    UnbalancedParenError,
)
from arithmetic_evaluator.common.logger import logger
from arithmetic_evaluator.common.models import NUMBER_PATTERN, OPERATOR_SYMBOLS, Token, TokenKind

DIGITS: str = "0123456789"
UNARY_SIGNS: str = "+-"


class Tokenizer:
    """
    Turn an expression string into an ordered list of tokens.

    Algorithm:
        1. Prescan the string and match parentheses
        2. Scan left to right, accumulating digits and '.' into a pending number
        3. Emit operators and parentheses, flushing the pending number first

    A '+' or '-' at the very start of the expression, or right after '(',
    is preceded by a synthetic "0" so that unary signs become binary forms:

        - Expression: -3 + (+2)
        - Tokens: 0 - 3 + ( 0 + 2 )

    Whitespace is skipped without ending the pending number, so "1 2" reads
    as the literal 12.
    """

    @staticmethod
    def check_parentheses(expr: str) -> None:
        """
        Ensure every parenthesis in the expression is matched.

        :param str expr: Arithmetic expression

        :raises UnbalancedParenError: If a ')' has no opener or a '(' is never closed
        """
        open_positions: List[int] = []
        for position, char in enumerate(expr):
            if char == "(":
                open_positions.append(position)
            elif char == ")":
                if not open_positions:
                    raise UnbalancedParenError("Unmatched ')'", position)
                open_positions.pop()

        if open_positions:
            raise UnbalancedParenError("Unmatched '('", open_positions[-1])

    @staticmethod
    def _flush(pending: str, tokens: List[Token]) -> None:
        """
        Validate a pending number literal and append it to the token list.

        :param str pending: Accumulated digits and decimal points
        :param List[Token] tokens: Token list being built

        :raises InvalidNumberError: If the literal is malformed
        """
        if not NUMBER_PATTERN.fullmatch(pending):
            raise InvalidNumberError(pending)
        tokens.append(Token.number(pending))

    @staticmethod
    def tokenize(expr: Union[str, bytes]) -> List[Token]:
        """
        Split an arithmetic expression into tokens.

        :param expr: Arithmetic expression, as text or UTF-8 bytes

        :return: List of tokens in source order
        :rtype: List[Token]
        :raises UnbalancedParenError: If parentheses do not match
        :raises InvalidCharacterError: If a character is not part of the grammar
        :raises InvalidNumberError: If a number literal is malformed
        """
        if isinstance(expr, bytes):
            expr = expr.decode("utf-8", errors="replace")

        Tokenizer.check_parentheses(expr)

        tokens: List[Token] = []
        pending: str = ""

        for position, char in enumerate(expr):
            if char in OPERATOR_SYMBOLS or char in "()":
                if char in UNARY_SIGNS and not pending:
                    # Leading sign, or sign directly after '(': rewrite as 0+x / 0-x
                    if not tokens or tokens[-1].kind is TokenKind.LPAREN:
                        tokens.append(Token.number("0"))

                if pending:
                    Tokenizer._flush(pending, tokens)
                    pending = ""

                tokens.append(Token.symbol(char))

            elif char in DIGITS or char == ".":
                pending += char

            elif char.isspace():
                continue

            else:
                raise InvalidCharacterError(char, position)

        if pending:
            Tokenizer._flush(pending, tokens)

        logger.debug(f"Tokenized {expr!r} into {len(tokens)} tokens")
        return tokens
