"""Typed lookups for plugin settings pulled from config.yml."""

from __future__ import annotations

from typing import Any, Mapping

from .validation import ValidationError


def _lookup(data: Mapping[str, Any] | None, key: str) -> Any:
    if not data:
        return None
    return data.get(key)


def get_float(
    data: Mapping[str, Any] | None,
    key: str,
    default: float,
    *,
    minimum: float | None = None,
    maximum: float | None = None,
) -> float:
    """Extract a float setting.

    Missing or blank values fall back to ``default``. ``minimum`` and
    ``maximum`` bounds are optional and inclusive.
    """

    raw = _lookup(data, key)
    if raw is None or (isinstance(raw, str) and raw.strip() == ""):
        value = float(default)
    elif isinstance(raw, bool):
        raise ValidationError(f"Invalid value for {key}")
    else:
        try:
            value = float(raw)
        except (TypeError, ValueError) as exc:
            raise ValidationError(f"Invalid value for {key}") from exc

    if minimum is not None and value < minimum:
        raise ValidationError(f"{key} must be ≥ {minimum}")
    if maximum is not None and value > maximum:
        raise ValidationError(f"{key} must be ≤ {maximum}")
    return value


def get_int(
    data: Mapping[str, Any] | None,
    key: str,
    default: int,
    *,
    minimum: int | None = None,
    maximum: int | None = None,
) -> int:
    """Extract an integer setting, rounding fractional values."""

    value = int(round(get_float(data, key, float(default))))
    if minimum is not None and value < minimum:
        raise ValidationError(f"{key} must be ≥ {minimum}")
    if maximum is not None and value > maximum:
        raise ValidationError(f"{key} must be ≤ {maximum}")
    return value


__all__ = ["get_float", "get_int"]
