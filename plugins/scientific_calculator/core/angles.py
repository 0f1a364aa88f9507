"""Angle units and the conversions between them."""

from __future__ import annotations

import math
from enum import Enum


class AngleMode(str, Enum):
    RADIANS = "radian"
    DEGREES = "degree"

    @property
    def label(self) -> str:
        return "DEG" if self is AngleMode.DEGREES else "RAD"

    def toggled(self) -> "AngleMode":
        return AngleMode.RADIANS if self is AngleMode.DEGREES else AngleMode.DEGREES

    @classmethod
    def parse(cls, value: "AngleMode | str") -> "AngleMode":
        """Accept ``radian``/``degree`` as well as the keypad labels ``RAD``/``DEG``."""

        if isinstance(value, AngleMode):
            return value
        text = str(value).strip().lower()
        aliases = {"rad": cls.RADIANS, "deg": cls.DEGREES}
        if text in aliases:
            return aliases[text]
        try:
            return cls(text)
        except ValueError as exc:
            raise ValueError("angle_unit must be 'radian' or 'degree'") from exc


def to_radians(value: float) -> float:
    return float(value) * math.pi / 180


def from_radians(value: float) -> float:
    return float(value) * 180 / math.pi


__all__ = ["AngleMode", "to_radians", "from_radians"]
