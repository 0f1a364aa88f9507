"""Command line interface for the Scientific Calculator plugin."""

from __future__ import annotations

import argparse
import json
from typing import Any

from .core import (
    BUTTONS,
    ExpressionError,
    UnknownButtonError,
    evaluate_expression,
    new_session,
    press_button,
)


def _print(payload: dict[str, Any]) -> None:
    print(json.dumps(payload, indent=2, sort_keys=True))


def command_evaluate(args: argparse.Namespace) -> int:
    try:
        result = evaluate_expression(
            args.expression,
            angle_unit=args.angle_unit,
            last_answer=args.last_answer,
        )
    except ExpressionError as exc:
        _print({"error": str(exc), "expression": args.expression})
        return 1
    _print(result)
    return 0


def command_keys(args: argparse.Namespace) -> int:
    session = new_session(angle_mode=args.angle_unit)
    for label in args.labels:
        try:
            session = press_button(session, label)
        except UnknownButtonError:
            raise SystemExit(f"Unknown keypad button: {label}. Choose from: {' '.join(BUTTONS)}") from None
    _print(session.to_dict())
    return 1 if session.error else 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Scientific Calculator CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    evaluate_parser = subparsers.add_parser("evaluate", help="Evaluate a single expression")
    evaluate_parser.add_argument("expression", help="Expression, e.g. 'sin(30)+2^3'")
    evaluate_parser.add_argument(
        "--angle-unit", dest="angle_unit", default="radian", choices=["radian", "degree"], help="Angle unit"
    )
    evaluate_parser.add_argument("--last-answer", dest="last_answer", default="0", help="Value bound to Ans")
    evaluate_parser.set_defaults(func=command_evaluate)

    keys_parser = subparsers.add_parser("keys", help="Press keypad buttons on a fresh calculator")
    keys_parser.add_argument("labels", nargs="+", help="Button labels in order, e.g. 2 + 2 =")
    keys_parser.add_argument(
        "--angle-unit", dest="angle_unit", default="radian", choices=["radian", "degree"], help="Angle unit"
    )
    keys_parser.set_defaults(func=command_keys)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
