"""Bounded, most-recent-first log of evaluated expressions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

DEFAULT_HISTORY_LIMIT = 10


class HistoryIndexError(IndexError):
    """Raised when a history entry is requested that does not exist."""


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    expression: str
    value: str

    def to_dict(self) -> dict[str, str]:
        return {"expression": self.expression, "value": self.value}


@dataclass(frozen=True, slots=True)
class History:
    """Immutable history; :meth:`record` returns a new instance."""

    entries: tuple[HistoryEntry, ...] = ()
    limit: int = DEFAULT_HISTORY_LIMIT

    def __post_init__(self) -> None:
        if self.limit < 1:
            raise ValueError("History limit must be at least 1")

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[HistoryEntry]:
        return iter(self.entries)

    def record(self, entry: HistoryEntry) -> "History":
        return History(entries=((entry,) + self.entries)[: self.limit], limit=self.limit)

    def select(self, index: int) -> HistoryEntry:
        if not 0 <= index < len(self.entries):
            raise HistoryIndexError(f"No history entry at index {index}")
        return self.entries[index]

    def to_list(self) -> list[dict[str, str]]:
        return [entry.to_dict() for entry in self.entries]


__all__ = ["DEFAULT_HISTORY_LIMIT", "History", "HistoryEntry", "HistoryIndexError"]
