import time
from decimal import Decimal

import pytest
import sympy

from plugins.scientific_calculator.core.engine import ExpressionError, SympyEngine, format_number


def _run(expression: str, bindings=None, precision: int = 14) -> str:
    engine = SympyEngine()
    return engine.format(engine.evaluate(expression, bindings or {}), precision)


def test_basic_arithmetic():
    assert _run("2+2") == "4"
    assert _run("3*4+5") == "17"
    assert _run("1/3") == "0.33333333333333"
    assert _run("0.1+0.2") == "0.3"


def test_power_factorial_and_constants():
    assert _run("2^10") == "1024"
    assert _run("5!") == "120"
    assert _run("(2+1)!") == "6"
    assert _run("pi") == "3.1415926535898"
    assert _run("2pi") == "6.2831853071796"
    assert _run("2E3") == "2000"


def test_leading_zeros_are_ignored():
    assert _run("012+1") == "13"
    assert _run("0.5+00.5") == "1"


def test_bindings_are_used():
    bindings = {"double": lambda x: 2 * x, "Ans": 21.0}
    assert _run("double(Ans)", bindings) == "42"


def test_large_and_small_values_use_exponent():
    assert _run("10^6") == "1e+6"
    assert _run("123456") == "1.23456e+5"
    assert _run("1/10000") == "1e-4"
    assert _run("1/1000") == "0.001"


@pytest.mark.parametrize(
    "expression",
    ["(2+3", "2+", "foo(1)", "__import__('os')", "2;3", "x"],
)
def test_invalid_expressions_raise(expression):
    engine = SympyEngine()
    with pytest.raises(ExpressionError):
        engine.format(engine.evaluate(expression, {}), 14)


def test_division_by_zero_is_not_representable():
    engine = SympyEngine()
    with pytest.raises(ExpressionError):
        engine.format(engine.evaluate("1/0", {}), 14)


def test_empty_and_long_expressions_rejected():
    with pytest.raises(ExpressionError):
        SympyEngine().evaluate("   ", {})
    with pytest.raises(ExpressionError):
        SympyEngine(max_length=5).evaluate("1+1+1+1", {})


def test_format_rejects_non_numbers():
    engine = SympyEngine()
    with pytest.raises(ExpressionError):
        engine.format(sympy.Symbol("x"), 14)
    with pytest.raises(ExpressionError):
        engine.format(sympy.I, 14)
    with pytest.raises(ExpressionError):
        engine.format(float("nan"), 14)


def test_format_number_rounds_to_significant_digits():
    assert format_number(Decimal("0.30000000000000004")) == "0.3"
    assert format_number(Decimal("-2.5")) == "-2.5"
    assert format_number(Decimal("1234.5678")) == "1234.5678"
    assert format_number(Decimal("2.71828"), 3) == "2.72"
    assert format_number(Decimal("0")) == "0"
    with pytest.raises(ExpressionError):
        format_number(Decimal("1"), 0)


def test_each_factorial_applies_to_the_previous_result():
    assert _run("3!!") == "720"
    assert _run("(2+1)!!") == "720"
    assert _run("2!!!") == "2"
    assert _run("0!!!") == "1"
    assert _run("5!!") == "6.6895029134491e+198"
    assert _run("3!+1") == "7"


def test_factorial_needs_an_operand():
    engine = SympyEngine()
    for expression in ["!", "2+!", "(!)"]:
        with pytest.raises(ExpressionError):
            engine.evaluate(expression, {})


@pytest.mark.parametrize("expression", ["9^9^9", "10^10^10", "99999999!", "3!!!", "1e400", "2^1024"])
def test_oversized_results_fail_quickly(expression):
    engine = SympyEngine()
    started = time.perf_counter()
    with pytest.raises(ExpressionError):
        engine.format(engine.evaluate(expression, {}), 14)
    assert time.perf_counter() - started < 2


def test_large_finite_results_use_exponent_form():
    assert _run("10^300") == "1e+300"
    assert _run("170!") == "7.257415615308e+306"
    assert _run("2^-1100") == "0"


def test_complex_results_are_rejected():
    engine = SympyEngine()
    with pytest.raises(ExpressionError):
        engine.evaluate("(-8)^(1/3)", {})
