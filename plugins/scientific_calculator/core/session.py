"""Calculator session state and the operations that drive it.

A :class:`CalculatorSession` is an immutable snapshot of one calculator: the
expression being typed, the displayed result, the last answer, the angle mode,
the history and the error indicator. Every operation takes a session and
returns the next one, so the state machine can be exercised without any UI.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

from common.logging import get_logger

from . import keypad
from .angles import AngleMode
from .engine import DEFAULT_PRECISION, ExpressionEngine, ExpressionError, SympyEngine
from .history import History, HistoryEntry
from .sanitizer import sanitize_expression
from .scope import build_scope

INVALID_EXPRESSION = "Invalid expression"
_UNREPRESENTABLE = {"Error", "NaN"}

logger = get_logger(__name__)

_DEFAULT_ENGINE = SympyEngine()


@dataclass(frozen=True, slots=True)
class Success:
    value: str

    ok = True

    def to_dict(self) -> dict[str, Any]:
        return {"ok": True, "value": self.value, "reason": None}


@dataclass(frozen=True, slots=True)
class Failure:
    reason: str

    ok = False

    def to_dict(self) -> dict[str, Any]:
        return {"ok": False, "value": None, "reason": self.reason}


EvaluationOutcome = Success | Failure


@dataclass(frozen=True, slots=True)
class CalculatorSession:
    expression: str = keypad.DEFAULT_EXPRESSION
    result: str = "0"
    last_answer: str = "0"
    angle_mode: AngleMode = AngleMode.RADIANS
    history: History = field(default_factory=History)
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "expression": self.expression,
            "result": self.result,
            "error": self.error,
            "angle_mode": self.angle_mode.value,
            "angle_label": self.angle_mode.label,
            "last_answer": self.last_answer,
            "history": self.history.to_list(),
        }


def new_session(
    *,
    angle_mode: AngleMode | str = AngleMode.RADIANS,
    history_limit: int | None = None,
) -> CalculatorSession:
    history = History() if history_limit is None else History(limit=history_limit)
    return CalculatorSession(angle_mode=AngleMode.parse(angle_mode), history=history)


def append_token(session: CalculatorSession, token: str) -> CalculatorSession:
    return replace(session, expression=keypad.append_token(session.expression, token), error=None)


def insert_answer(session: CalculatorSession) -> CalculatorSession:
    """Append the literal value of the last answer."""

    return append_token(session, session.last_answer)


def delete_last(session: CalculatorSession) -> CalculatorSession:
    return replace(session, expression=keypad.delete_last(session.expression), error=None)


def reset(session: CalculatorSession) -> CalculatorSession:
    return replace(session, expression=keypad.DEFAULT_EXPRESSION, result="0", error=None)


def toggle_angle_mode(session: CalculatorSession) -> CalculatorSession:
    return replace(session, angle_mode=session.angle_mode.toggled())


def select_history_entry(session: CalculatorSession, index: int) -> CalculatorSession:
    entry = session.history.select(index)
    return replace(session, expression=entry.value, result=entry.value)


def _fail(session: CalculatorSession, exc: Exception | None = None) -> tuple[CalculatorSession, Failure]:
    logger.info("evaluation failed for %r: %s", session.expression, exc or "unrepresentable result")
    return replace(session, error=INVALID_EXPRESSION), Failure(INVALID_EXPRESSION)


def evaluate(
    session: CalculatorSession,
    *,
    engine: ExpressionEngine | None = None,
    precision: int = DEFAULT_PRECISION,
) -> tuple[CalculatorSession, EvaluationOutcome]:
    """Evaluate the current expression.

    On success the formatted value becomes the new expression, result and last
    answer, and the evaluated expression is recorded in the history. On failure
    only the error indicator changes.
    """

    engine = engine or _DEFAULT_ENGINE
    try:
        sanitized = sanitize_expression(session.expression, session.last_answer)
        scope = build_scope(session.angle_mode, session.last_answer)
        value = engine.evaluate(sanitized, scope)
        formatted = engine.format(value, precision)
    except ExpressionError as exc:
        return _fail(session, exc)
    if formatted in _UNREPRESENTABLE:
        return _fail(session)

    updated = replace(
        session,
        expression=formatted,
        result=formatted,
        last_answer=formatted,
        history=session.history.record(HistoryEntry(expression=session.expression, value=formatted)),
        error=None,
    )
    return updated, Success(formatted)


def evaluate_expression(
    expression: str,
    *,
    angle_unit: AngleMode | str = AngleMode.RADIANS,
    last_answer: str = "0",
    precision: int = DEFAULT_PRECISION,
    engine: ExpressionEngine | None = None,
) -> dict[str, object]:
    """Evaluate a single expression outside of any session."""

    if not expression or not expression.strip():
        raise ExpressionError("Expression is required")
    try:
        angle_mode = AngleMode.parse(angle_unit)
    except ValueError as exc:
        raise ExpressionError(str(exc)) from exc
    session = CalculatorSession(expression=expression.strip(), last_answer=last_answer, angle_mode=angle_mode)
    _, outcome = evaluate(session, engine=engine, precision=precision)
    if isinstance(outcome, Failure):
        raise ExpressionError(outcome.reason)
    return {
        "result": outcome.value,
        "expression": session.expression,
        "sanitized": sanitize_expression(session.expression, last_answer),
        "angle_unit": angle_mode.value,
    }


__all__ = [
    "INVALID_EXPRESSION",
    "CalculatorSession",
    "EvaluationOutcome",
    "Failure",
    "Success",
    "append_token",
    "delete_last",
    "evaluate",
    "evaluate_expression",
    "insert_answer",
    "new_session",
    "reset",
    "select_history_entry",
    "toggle_angle_mode",
]
