"""Expression engine boundary and its sympy-backed implementation.

The calculator core only needs two capabilities from an engine: evaluate a
string against a table of named bindings, and render the result to a fixed
number of significant digits. Anything that satisfies :class:`ExpressionEngine`
can be plugged in; :class:`SympyEngine` is the default.

:class:`SympyEngine` uses sympy's token transformations to turn keypad syntax
(``^``, postfix ``!``, ``2pi``) into a Python expression, then walks that
expression numerically with a private mpmath context. Nothing is evaluated
symbolically, and every intermediate value is checked against the range of a
double so oversized powers and factorials fail immediately.
"""

from __future__ import annotations

import ast
import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from tokenize import ERRORTOKEN, NAME, OP, TokenError
from typing import Callable, Mapping, Protocol

import mpmath
from sympy.parsing.sympy_parser import (
    auto_number,
    auto_symbol,
    convert_xor,
    implicit_multiplication_application,
    stringify_expr,
)


class ExpressionError(ValueError):
    """Raised when an expression cannot be parsed, evaluated or formatted."""


class ExpressionEngine(Protocol):
    def evaluate(self, expression: str, bindings: Mapping[str, object]) -> object:
        ...

    def format(self, value: object, precision: int) -> str:
        ...


DEFAULT_PRECISION = 14
_MAX_EXPR_LENGTH = 1024
# Fixed notation between 1e-3 (inclusive) and 1e5 (exclusive), exponent otherwise.
_LOWER_EXP = -3
_UPPER_EXP = 5
_GUARD_DIGITS = 5
_WORKING_DPS = 80
# Results are limited to the range of an IEEE double; 171! already exceeds it.
_MAX_MAGNITUDE = "1.7976931348623157e308"
_MIN_MAGNITUDE = "4.9406564584124654e-324"
_MAX_FACTORIAL = 170

_ALLOWED_CHARS = re.compile(r"[0-9A-Za-z.+\-*/^()!,\s]*")
_NUMBER_LITERAL = re.compile(r"(?<![A-Za-z])(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_IDENTIFIER = re.compile(r"[A-Za-z]\w*")
_LEADING_ZEROS = re.compile(r"(?<![\w.])0+(?=\d)")
# A number directly followed by a name or "(" ("2pi", "3sin(", "2(") is not
# valid Python; the tokenizer needs an explicit "*" there.
_NUMBER_BEFORE_OPERAND = re.compile(
    r"((?<![A-Za-z\d.])(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)(?![eE][+-]?\d)(?=[A-Za-z(])"
)

CONSTANT_NAMES = ("pi", "E", "e")
_LITERALS = ("Integer", "Float")
_FACTORIAL = "factorial"


def _wrap_operand(tokens: list, name: str) -> list:
    """Wrap the operand ending at ``tokens[-1]`` in a call to ``name``."""

    if not tokens or tokens[-1][1] == "(" or (tokens[-1][0] == OP and tokens[-1][1] != ")"):
        raise TokenError("factorial needs an operand")
    depth = 0
    for index in range(len(tokens) - 1, -1, -1):
        value = tokens[index][1]
        if value == ")":
            depth += 1
        elif value == "(":
            depth -= 1
        if depth == 0:
            if index > 0 and tokens[index - 1][0] == NAME:
                index -= 1
            return tokens[:index] + [(NAME, name), (OP, "(")] + tokens[index:] + [(OP, ")")]
    raise TokenError("unbalanced parentheses before factorial")


def postfix_factorial(tokens, local_dict, global_dict):
    """Apply every ``!`` to the operand before it, so ``3!!`` is ``(3!)!``."""

    result: list = []
    for kind, value in tokens:
        # Python 3.12+ emits "!" as OP, older versions as ERRORTOKEN.
        if value == "!" and kind in (OP, ERRORTOKEN):
            result = _wrap_operand(result, _FACTORIAL)
        else:
            result.append((kind, value))
    return result


_TRANSFORMATIONS = (
    auto_symbol,
    auto_number,
    postfix_factorial,
    implicit_multiplication_application,
    convert_xor,
)


def format_number(value: Decimal, precision: int = DEFAULT_PRECISION) -> str:
    """Render ``value`` with at most ``precision`` significant digits."""

    if precision <= 0:
        raise ExpressionError("Precision must be positive")
    if not value.is_finite():
        raise ExpressionError("Result is not finite")
    if value.is_zero():
        return "0"
    with localcontext() as ctx:
        ctx.prec = precision
        ctx.rounding = ROUND_HALF_UP
        rounded = +value
    rounded = rounded.normalize()
    if _LOWER_EXP <= rounded.adjusted() < _UPPER_EXP:
        return format(rounded, "f")
    return format(rounded, "e")


class SympyEngine:
    """Evaluate calculator expressions parsed with sympy's transformations."""

    def __init__(self, *, max_length: int = _MAX_EXPR_LENGTH) -> None:
        self.max_length = max_length
        self._ctx = mpmath.MPContext()
        self._ctx.dps = _WORKING_DPS
        self._max = self._ctx.mpf(_MAX_MAGNITUDE)
        self._min = self._ctx.mpf(_MIN_MAGNITUDE)
        self._constants = {"pi": +self._ctx.pi, "E": +self._ctx.e, "e": +self._ctx.e}
        self._calls: dict[str, Callable[..., object]] = {
            "Integer": self._literal,
            "Float": self._literal,
            _FACTORIAL: self._factorial,
        }

    def _normalize(self, expression: str, allowed_names: set[str]) -> str:
        if not expression or not isinstance(expression, str):
            raise ExpressionError("Expression is required")
        expression = expression.strip()
        if not expression:
            raise ExpressionError("Expression is required")
        if len(expression) > self.max_length:
            raise ExpressionError("Expression is too long")
        if not _ALLOWED_CHARS.fullmatch(expression):
            raise ExpressionError("Expression contains unsupported characters")
        for name in _IDENTIFIER.findall(_NUMBER_LITERAL.sub(" ", expression)):
            if name not in allowed_names:
                raise ExpressionError(f"Unknown name '{name}'")
        expression = _LEADING_ZEROS.sub("", expression)
        return _NUMBER_BEFORE_OPERAND.sub(r"\1*", expression)

    def _checked(self, value):
        ctx = self._ctx
        if isinstance(value, ctx.mpc):
            if value.imag:
                raise ExpressionError("Result is not a real number")
            value = value.real
        if not ctx.isfinite(value) or abs(value) > self._max:
            raise ExpressionError("Result is too large")
        if value and abs(value) < self._min:
            return ctx.zero
        return value

    def _literal(self, text) -> object:
        return self._checked(self._ctx.convert(text))

    def _factorial(self, value) -> object:
        if value > _MAX_FACTORIAL:
            raise ExpressionError("Result is too large")
        return self._checked(self._ctx.factorial(value))

    def _power(self, base, exponent) -> object:
        return self._checked(self._ctx.power(base, exponent))

    def _eval_node(self, node: ast.AST, bindings: Mapping[str, object]):
        ctx = self._ctx
        if isinstance(node, ast.Expression):
            return self._eval_node(node.body, bindings)
        if isinstance(node, ast.Constant):
            if isinstance(node.value, bool) or not isinstance(node.value, (int, float, str)):
                raise ExpressionError("Only numeric literals are allowed")
            return node.value
        if isinstance(node, ast.Name):
            if node.id in self._constants:
                return self._constants[node.id]
            value = bindings.get(node.id)
            if value is None or callable(value):
                raise ExpressionError(f"'{node.id}' is not a value")
            return self._checked(ctx.convert(value))
        if isinstance(node, ast.UnaryOp):
            operand = self._eval_node(node.operand, bindings)
            if isinstance(node.op, ast.USub):
                return -operand
            if isinstance(node.op, ast.UAdd):
                return operand
            raise ExpressionError("Unary operator not permitted")
        if isinstance(node, ast.BinOp):
            left = self._eval_node(node.left, bindings)
            right = self._eval_node(node.right, bindings)
            op = node.op
            if isinstance(op, ast.Add):
                return self._checked(left + right)
            if isinstance(op, ast.Sub):
                return self._checked(left - right)
            if isinstance(op, ast.Mult):
                return self._checked(left * right)
            if isinstance(op, ast.Div):
                return self._checked(left / right)
            if isinstance(op, ast.Pow):
                return self._power(left, right)
            raise ExpressionError("Operator not permitted")
        if isinstance(node, ast.Call):
            if not isinstance(node.func, ast.Name) or node.keywords:
                raise ExpressionError("Only simple function calls are allowed")
            args = [self._eval_node(arg, bindings) for arg in node.args]
            name = node.func.id
            if name in self._calls:
                return self._calls[name](*args)
            func = bindings.get(name)
            if not callable(func):
                raise ExpressionError(f"Function '{name}' is not allowed")
            return self._checked(ctx.convert(func(*[float(arg) for arg in args])))
        raise ExpressionError("Unsupported syntax")

    def evaluate(self, expression: str, bindings: Mapping[str, object]) -> object:
        names = {**self._constants, **bindings}
        text = self._normalize(expression, set(names))
        try:
            code = stringify_expr(text, dict(names), dict(self._calls), _TRANSFORMATIONS)
            tree = ast.parse(code, mode="eval")
            return self._eval_node(tree, bindings)
        except (
            SyntaxError,
            TokenError,
            TypeError,
            ValueError,
            ArithmeticError,
            RecursionError,
        ) as exc:
            if isinstance(exc, ExpressionError):
                raise
            raise ExpressionError(f"Could not evaluate expression: {exc}") from exc

    def format(self, value: object, precision: int = DEFAULT_PRECISION) -> str:
        try:
            number = self._ctx.convert(value)
        except (TypeError, ValueError) as exc:
            raise ExpressionError("Result is not a number") from exc
        if isinstance(number, self._ctx.mpc):
            if number.imag:
                raise ExpressionError("Result is not a finite real number")
            number = number.real
        if not self._ctx.isfinite(number):
            raise ExpressionError("Result is not a finite real number")
        try:
            decimal_value = Decimal(self._ctx.nstr(number, precision + _GUARD_DIGITS))
        except InvalidOperation as exc:
            raise ExpressionError("Result is not a finite real number") from exc
        return format_number(decimal_value, precision)


__all__ = [
    "CONSTANT_NAMES",
    "DEFAULT_PRECISION",
    "ExpressionEngine",
    "ExpressionError",
    "SympyEngine",
    "format_number",
    "postfix_factorial",
]
