"""Keypad layout and the dispatcher that maps button presses to operations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from .engine import DEFAULT_PRECISION, ExpressionEngine
from .session import (
    CalculatorSession,
    append_token,
    delete_last,
    evaluate,
    insert_answer,
    reset,
    toggle_angle_mode,
)

ButtonKind = Literal["append", "command", "eval"]


@dataclass(frozen=True, slots=True)
class Button:
    label: str
    value: str | None = None
    kind: ButtonKind = "append"

    def to_dict(self) -> dict[str, str | None]:
        return {"label": self.label, "value": self.value, "kind": self.kind}


def _append(label: str, value: str | None = None) -> Button:
    return Button(label=label, value=value if value is not None else label)


BUTTON_LAYOUT: tuple[tuple[Button, ...], ...] = (
    (Button("AC", kind="command"), Button("DEL", kind="command"), _append("("), _append(")")),
    (_append("sin", "sin("), _append("cos", "cos("), _append("tan", "tan("), _append("x!", "!")),
    (_append("ln", "ln("), _append("log", "log("), _append("√", "sqrt("), _append("x^y", "^")),
    (_append("7"), _append("8"), _append("9"), _append("÷", "/")),
    (_append("4"), _append("5"), _append("6"), _append("×", "*")),
    (_append("1"), _append("2"), _append("3"), _append("-")),
    (_append("0"), _append("."), _append("π", "pi"), _append("+")),
    (Button("Ans", kind="command"), _append("EXP", "E"), _append("%"), Button("=", kind="eval")),
    (Button("DRG", kind="command"),),
)

BUTTONS: dict[str, Button] = {button.label: button for row in BUTTON_LAYOUT for button in row}


class UnknownButtonError(KeyError):
    """Raised when a label does not name a keypad button."""


def layout() -> list[list[dict[str, str | None]]]:
    return [[button.to_dict() for button in row] for row in BUTTON_LAYOUT]


def press_button(
    session: CalculatorSession,
    label: str,
    *,
    engine: ExpressionEngine | None = None,
    precision: int = DEFAULT_PRECISION,
) -> CalculatorSession:
    try:
        button = BUTTONS[label]
    except KeyError as exc:
        raise UnknownButtonError(label) from exc

    if button.kind == "eval":
        session, _ = evaluate(session, engine=engine, precision=precision)
        return session
    if button.kind == "command":
        if label == "AC":
            return reset(session)
        if label == "DEL":
            return delete_last(session)
        if label == "Ans":
            return insert_answer(session)
        return toggle_angle_mode(session)
    return append_token(session, button.value or "")


__all__ = ["BUTTONS", "BUTTON_LAYOUT", "Button", "UnknownButtonError", "layout", "press_button"]
