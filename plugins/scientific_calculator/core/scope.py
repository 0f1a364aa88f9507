"""Named bindings handed to the expression engine."""

from __future__ import annotations

import math
from typing import Callable

from .angles import AngleMode, from_radians, to_radians


def _wrap_trig(fn: Callable[[float], float], *, use_degrees: bool) -> Callable[[float], float]:
    def wrapped(value: float) -> float:
        rad = to_radians(value) if use_degrees else float(value)
        return fn(rad)

    return wrapped


def _wrap_inverse_trig(fn: Callable[[float], float], *, use_degrees: bool) -> Callable[[float], float]:
    def wrapped(value: float) -> float:
        angle = fn(float(value))
        return from_radians(angle) if use_degrees else angle

    return wrapped


def _log(value: float, base: float | None = None) -> float:
    if base is None:
        return math.log10(value)
    return math.log(value) / math.log(base)


def answer_value(last_answer: str) -> float:
    """Numeric value of a formatted answer; ``nan`` when it is not a number."""

    try:
        return float(last_answer)
    except (TypeError, ValueError):
        return math.nan


def build_scope(angle_mode: AngleMode, last_answer: str) -> dict[str, object]:
    use_degrees = AngleMode.parse(angle_mode) is AngleMode.DEGREES
    return {
        "sin": _wrap_trig(math.sin, use_degrees=use_degrees),
        "cos": _wrap_trig(math.cos, use_degrees=use_degrees),
        "tan": _wrap_trig(math.tan, use_degrees=use_degrees),
        "asin": _wrap_inverse_trig(math.asin, use_degrees=use_degrees),
        "acos": _wrap_inverse_trig(math.acos, use_degrees=use_degrees),
        "atan": _wrap_inverse_trig(math.atan, use_degrees=use_degrees),
        "ln": lambda x: math.log(x),
        "log": _log,
        "sqrt": lambda x: math.sqrt(x),
        "Ans": answer_value(last_answer),
    }


__all__ = ["build_scope", "answer_value"]
