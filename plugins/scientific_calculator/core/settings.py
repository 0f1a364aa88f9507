"""Plugin settings read from the ``plugins.scientific_calculator`` block of config.yml."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from common.settings import get_int
from common.validation import ValidationError

from .angles import AngleMode
from .engine import DEFAULT_PRECISION
from .history import DEFAULT_HISTORY_LIMIT


@dataclass(frozen=True, slots=True)
class CalculatorSettings:
    history_limit: int = DEFAULT_HISTORY_LIMIT
    precision: int = DEFAULT_PRECISION
    default_angle_unit: AngleMode = AngleMode.RADIANS
    max_sessions: int = 256
    session_ttl_minutes: int = 30
    max_expression_length: int = 1024

    @classmethod
    def from_settings(cls, settings: Mapping[str, Any] | None) -> "CalculatorSettings":
        """Build settings from user configuration.

        Missing keys fall back to the defaults; values that are present but
        malformed raise :class:`ValidationError` so a broken ``config.yml`` is
        caught when the app starts.
        """

        settings = settings or {}
        defaults = cls()
        try:
            angle_unit = AngleMode.parse(settings.get("default_angle_unit", defaults.default_angle_unit))
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc
        return cls(
            history_limit=get_int(settings, "history_limit", defaults.history_limit, minimum=1),
            precision=get_int(settings, "precision", defaults.precision, minimum=1, maximum=64),
            default_angle_unit=angle_unit,
            max_sessions=get_int(settings, "max_sessions", defaults.max_sessions, minimum=1),
            session_ttl_minutes=get_int(settings, "session_ttl_minutes", defaults.session_ttl_minutes, minimum=1),
            max_expression_length=get_int(
                settings, "max_expression_length", defaults.max_expression_length, minimum=1
            ),
        )


__all__ = ["CalculatorSettings"]
