import pytest

from plugins.scientific_calculator.core.keypad import (
    DEFAULT_EXPRESSION,
    append_token,
    current_operand,
    delete_last,
)


@pytest.mark.parametrize("token", ["5", "0", ".", "pi", "E", "Ans", "-", "sin(", "sqrt(", "("])
def test_default_buffer_is_replaced(token):
    assert append_token(DEFAULT_EXPRESSION, token) == token


@pytest.mark.parametrize("token", ["+", "*", "/", "^", "%", "!", ")"])
def test_operators_after_default_are_appended(token):
    assert append_token("0", token) == "0" + token


def test_tokens_accumulate():
    expression = DEFAULT_EXPRESSION
    for token in ["1", "2", "+", "sin(", "3", "0", ")"]:
        expression = append_token(expression, token)
    assert expression == "12+sin(30)"


def test_second_decimal_point_is_rejected():
    assert append_token("3.", ".") == "3."
    assert append_token("3.14", ".") == "3.14"
    assert append_token("3+4.", ".") == "3+4."


def test_decimal_point_allowed_in_new_operand():
    assert append_token("3+4", ".") == "3+4."
    assert append_token("3.5*2", ".") == "3.5*2."
    assert append_token("(1.5+", ".") == "(1.5+."


def test_factorial_after_operator_is_rejected():
    for expression in ["5+", "5-", "5*", "5/", "2^", "50%"]:
        assert append_token(expression, "!") == expression


def test_factorial_after_operand_is_accepted():
    assert append_token("5", "!") == "5!"
    assert append_token("(2+3)", "!") == "(2+3)!"


def test_current_operand_tracks_last_number():
    assert current_operand("3+4.5") == "4.5"
    assert current_operand("sin(30") == "30"
    assert current_operand("12") == "12"


def test_delete_last_floors_at_default():
    assert delete_last("0") == "0"
    assert delete_last("7") == "0"
    assert delete_last("12") == "1"
    assert delete_last("sin(") == "sin"
