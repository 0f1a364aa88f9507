import pytest

from plugins.scientific_calculator.core import (
    BUTTON_LAYOUT,
    BUTTONS,
    AngleMode,
    UnknownButtonError,
    layout,
    new_session,
    press_button,
)


def _press(*labels, session=None):
    session = session or new_session()
    for label in labels:
        session = press_button(session, label)
    return session


def test_layout_rows():
    rows = layout()
    assert len(rows) == len(BUTTON_LAYOUT) == 9
    assert [button["label"] for button in rows[0]] == ["AC", "DEL", "(", ")"]
    assert rows[7][-1] == {"label": "=", "value": None, "kind": "eval"}
    assert BUTTONS["√"].value == "sqrt("
    assert BUTTONS["÷"].value == "/"


def test_simple_sum():
    session = _press("2", "+", "2", "=")
    assert session.result == "4"
    assert session.history.to_list() == [{"expression": "2+2", "value": "4"}]


def test_function_buttons():
    assert _press("√", "9", ")", "=").result == "3"
    assert _press("5", "x!", "=").result == "120"
    assert _press("2", "x^y", "8", "=").result == "256"
    assert _press("3", "×", "4", "÷", "2", "=").result == "6"
    assert _press("π", "=").result == "3.1415926535898"


def test_degree_toggle_affects_trig():
    session = _press("DRG")
    assert session.angle_mode is AngleMode.DEGREES
    assert _press("sin", "3", "0", ")", "=", session=session).result == "0.5"


def test_clear_delete_and_answer():
    session = _press("1", "2", "DEL")
    assert session.expression == "1"
    session = _press("+", "4", "=", session=session)
    assert session.result == "5"
    session = _press("AC", session=session)
    assert (session.expression, session.result) == ("0", "0")
    session = _press("Ans", "×", "2", "=", session=session)
    assert session.result == "10"


def test_invalid_sequence_sets_error():
    session = _press("(", "2", "+", "=")
    assert session.error == "Invalid expression"
    assert session.expression == "(2+"


def test_unknown_label_raises():
    with pytest.raises(UnknownButtonError):
        press_button(new_session(), "sinh")
