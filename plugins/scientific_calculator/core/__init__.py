"""Exports for scientific calculator core."""

from .angles import AngleMode, from_radians, to_radians
from .buttons import BUTTON_LAYOUT, BUTTONS, Button, UnknownButtonError, layout, press_button
from .engine import DEFAULT_PRECISION, ExpressionEngine, ExpressionError, SympyEngine, format_number
from .history import History, HistoryEntry, HistoryIndexError
from .keypad import DEFAULT_EXPRESSION
from .sanitizer import sanitize_expression
from .scope import build_scope
from .session import (
    INVALID_EXPRESSION,
    CalculatorSession,
    EvaluationOutcome,
    Failure,
    Success,
    append_token,
    delete_last,
    evaluate,
    evaluate_expression,
    insert_answer,
    new_session,
    reset,
    select_history_entry,
    toggle_angle_mode,
)
from .settings import CalculatorSettings
from .store import SessionNotFoundError, SessionStore

__all__ = [
    "AngleMode",
    "from_radians",
    "to_radians",
    "BUTTON_LAYOUT",
    "BUTTONS",
    "Button",
    "UnknownButtonError",
    "layout",
    "press_button",
    "DEFAULT_PRECISION",
    "ExpressionEngine",
    "ExpressionError",
    "SympyEngine",
    "format_number",
    "History",
    "HistoryEntry",
    "HistoryIndexError",
    "DEFAULT_EXPRESSION",
    "sanitize_expression",
    "build_scope",
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
    "CalculatorSettings",
    "SessionNotFoundError",
    "SessionStore",
]
