"""Rewrite keypad syntax into something the expression engine can parse."""

from __future__ import annotations

PERCENT = "%"
PERCENT_FACTOR = "*(1/100)"
ANSWER_TOKEN = "Ans"


def sanitize_expression(expression: str, last_answer: str) -> str:
    # Percent first so a substituted answer never introduces a new "%".
    return expression.replace(PERCENT, PERCENT_FACTOR).replace(ANSWER_TOKEN, f"({last_answer})")


__all__ = ["sanitize_expression", "ANSWER_TOKEN", "PERCENT", "PERCENT_FACTOR"]
