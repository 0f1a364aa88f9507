"""API routes for the Scientific Calculator plugin."""

from __future__ import annotations

from datetime import timedelta
from typing import Callable, Literal

from flask import Blueprint, Response, current_app, request
from pydantic import Field

from common.errors import NotFoundAppError, ValidationAppError
from common.responses import fail, ok
from common.validation import SchemaModel, ValidationError, parse_model

from ..core import (
    CalculatorSession,
    CalculatorSettings,
    ExpressionError,
    HistoryIndexError,
    SessionNotFoundError,
    SessionStore,
    SympyEngine,
    UnknownButtonError,
    append_token,
    delete_last,
    evaluate_expression,
    insert_answer,
    layout,
    new_session,
    press_button,
    reset,
    select_history_entry,
    toggle_angle_mode,
)
from ..core import evaluate as evaluate_session

_EXTENSION = "scientific_calculator"

AngleUnit = Literal["radian", "degree"]


class EvaluatePayload(SchemaModel):
    expression: str
    angle_unit: AngleUnit = "radian"
    last_answer: str = "0"


class SessionPayload(SchemaModel):
    angle_unit: AngleUnit | None = None


class TokenPayload(SchemaModel):
    token: str = Field(min_length=1, max_length=32)


class PressPayload(SchemaModel):
    label: str


api_bp = Blueprint("scientific_calculator_api", __name__, url_prefix="/api/scientific_calculator")


@api_bp.record_once
def _init_state(state) -> None:
    settings = CalculatorSettings.from_settings(state.app.config.get("PLUGIN_SETTINGS", {}).get(_EXTENSION))
    state.app.extensions[_EXTENSION] = {
        "settings": settings,
        "engine": SympyEngine(max_length=settings.max_expression_length),
        "store": SessionStore(
            max_sessions=settings.max_sessions,
            ttl=timedelta(minutes=settings.session_ttl_minutes),
        ),
    }


def _state() -> dict:
    return current_app.extensions[_EXTENSION]


def _invalid_request(exc: ValidationError) -> Response:
    return fail(
        ValidationAppError(
            message=str(exc),
            code="sci_calc.invalid_request",
            details=getattr(exc, "details", None),
        )
    )


def _session_not_found() -> Response:
    return fail(NotFoundAppError(message="Session expired or not found", code="sci_calc.session_not_found"))


def _snapshot(session_id: str, session: CalculatorSession, **extra: object) -> dict:
    return {"session_id": session_id, **session.to_dict(), **extra}


def _apply(session_id: str, operation: Callable[[CalculatorSession], CalculatorSession]) -> Response:
    try:
        session = _state()["store"].apply(session_id, operation)
    except SessionNotFoundError:
        return _session_not_found()
    return ok(_snapshot(session_id, session))


@api_bp.post("/evaluate")
def evaluate() -> Response:
    raw_payload = request.get_json(silent=True) or {}
    try:
        payload = parse_model(EvaluatePayload, raw_payload)
    except ValidationError as exc:
        return _invalid_request(exc)
    state = _state()
    try:
        result = evaluate_expression(
            payload.expression,
            angle_unit=payload.angle_unit,
            last_answer=payload.last_answer,
            precision=state["settings"].precision,
            engine=state["engine"],
        )
    except ExpressionError as exc:
        return fail(ValidationAppError(message=str(exc), code="sci_calc.invalid_expression"))
    return ok(result)


@api_bp.get("/keypad")
def keypad() -> Response:
    return ok({"rows": layout()})


@api_bp.post("/sessions")
def create_session() -> Response:
    raw_payload = request.get_json(silent=True) or {}
    try:
        payload = parse_model(SessionPayload, raw_payload)
    except ValidationError as exc:
        return _invalid_request(exc)
    state = _state()
    settings = state["settings"]
    session = new_session(
        angle_mode=payload.angle_unit or settings.default_angle_unit,
        history_limit=settings.history_limit,
    )
    session_id, session = state["store"].create(session)
    return ok(_snapshot(session_id, session), status=201)


@api_bp.get("/sessions/<session_id>")
def get_session(session_id: str) -> Response:
    try:
        session = _state()["store"].get(session_id)
    except SessionNotFoundError:
        return _session_not_found()
    return ok(_snapshot(session_id, session))


@api_bp.delete("/sessions/<session_id>")
def delete_session(session_id: str) -> Response:
    try:
        _state()["store"].delete(session_id)
    except SessionNotFoundError:
        return _session_not_found()
    return ok({"session_id": session_id, "deleted": True})


@api_bp.post("/sessions/<session_id>/tokens")
def session_append(session_id: str) -> Response:
    raw_payload = request.get_json(silent=True) or {}
    try:
        payload = parse_model(TokenPayload, raw_payload)
    except ValidationError as exc:
        return _invalid_request(exc)
    return _apply(session_id, lambda session: append_token(session, payload.token))


@api_bp.post("/sessions/<session_id>/delete")
def session_delete_last(session_id: str) -> Response:
    return _apply(session_id, delete_last)


@api_bp.post("/sessions/<session_id>/reset")
def session_reset(session_id: str) -> Response:
    return _apply(session_id, reset)


@api_bp.post("/sessions/<session_id>/angle-mode")
def session_toggle_angle_mode(session_id: str) -> Response:
    return _apply(session_id, toggle_angle_mode)


@api_bp.post("/sessions/<session_id>/answer")
def session_insert_answer(session_id: str) -> Response:
    return _apply(session_id, insert_answer)


@api_bp.post("/sessions/<session_id>/evaluate")
def session_evaluate(session_id: str) -> Response:
    state = _state()
    outcomes = []

    def _evaluate(session: CalculatorSession) -> CalculatorSession:
        session, outcome = evaluate_session(
            session,
            engine=state["engine"],
            precision=state["settings"].precision,
        )
        outcomes.append(outcome)
        return session

    try:
        session = state["store"].apply(session_id, _evaluate)
    except SessionNotFoundError:
        return _session_not_found()
    outcome = outcomes[-1]
    return ok(_snapshot(session_id, session, outcome=outcome.to_dict()))


@api_bp.post("/sessions/<session_id>/press")
def session_press(session_id: str) -> Response:
    raw_payload = request.get_json(silent=True) or {}
    try:
        payload = parse_model(PressPayload, raw_payload)
    except ValidationError as exc:
        return _invalid_request(exc)
    state = _state()

    def _press(session: CalculatorSession) -> CalculatorSession:
        return press_button(
            session,
            payload.label,
            engine=state["engine"],
            precision=state["settings"].precision,
        )

    try:
        return _apply(session_id, _press)
    except UnknownButtonError:
        return fail(ValidationAppError(message=f"Unknown keypad button '{payload.label}'", code="sci_calc.unknown_button"))


@api_bp.post("/sessions/<session_id>/history/<int:index>/select")
def session_select_history(session_id: str, index: int) -> Response:
    try:
        return _apply(session_id, lambda session: select_history_entry(session, index))
    except HistoryIndexError:
        return fail(NotFoundAppError(message=f"No history entry at index {index}", code="sci_calc.history_not_found"))


blueprints = [api_bp]


__all__ = [
    "blueprints",
    "evaluate",
    "keypad",
    "create_session",
    "get_session",
    "delete_session",
    "session_append",
    "session_delete_last",
    "session_reset",
    "session_toggle_angle_mode",
    "session_insert_answer",
    "session_evaluate",
    "session_press",
    "session_select_history",
]
