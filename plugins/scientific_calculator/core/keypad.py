"""Editing rules for the expression buffer.

Keypad input is filtered so the user cannot type obviously broken input: a
factorial straight after an operator, or a second decimal point inside one
number, is dropped silently instead of being reported. Whether the finished
expression is valid is only decided when it is evaluated.
"""

from __future__ import annotations

import re

DEFAULT_EXPRESSION = "0"
DECIMAL_POINT = "."
FACTORIAL = "!"
UNARY_MINUS = "-"
CONSTANT_TOKENS = frozenset({"pi", "E", "Ans"})

_FRESH_START = re.compile(r"[0-9.]")
_TRAILING_OPERATOR = re.compile(r"[+\-*/^%]$")
_OPERAND_BOUNDARY = re.compile(r"[+\-*/^()%]")
_OPEN_DECIMAL = re.compile(r"\.\d*$")


def _starts_fresh(token: str) -> bool:
    if _FRESH_START.fullmatch(token) or token in CONSTANT_TOKENS:
        return True
    return token == UNARY_MINUS or token.endswith("(")


def current_operand(expression: str) -> str:
    """Return the text after the last operator, parenthesis or percent sign."""

    return _OPERAND_BOUNDARY.split(expression)[-1]


def append_token(expression: str, token: str) -> str:
    if expression == DEFAULT_EXPRESSION:
        return token if _starts_fresh(token) else expression + token

    if token == FACTORIAL and _TRAILING_OPERATOR.search(expression):
        return expression

    if token == DECIMAL_POINT and _OPEN_DECIMAL.search(current_operand(expression)):
        return expression

    return expression + token


def delete_last(expression: str) -> str:
    if len(expression) <= 1:
        return DEFAULT_EXPRESSION
    return expression[:-1]


__all__ = [
    "CONSTANT_TOKENS",
    "DECIMAL_POINT",
    "DEFAULT_EXPRESSION",
    "FACTORIAL",
    "append_token",
    "current_operand",
    "delete_last",
]
