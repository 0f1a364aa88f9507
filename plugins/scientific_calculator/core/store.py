"""In-memory registry of calculator sessions for the HTTP layer."""

from __future__ import annotations

import threading
import uuid
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable

from common.logging import get_logger

from .session import CalculatorSession

logger = get_logger(__name__)


class SessionNotFoundError(KeyError):
    """Raised when a session id is unknown or has expired."""


@dataclass(slots=True)
class _Slot:
    session: CalculatorSession
    last_accessed: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    lock: threading.Lock = field(default_factory=threading.Lock)

    def touch(self) -> None:
        self.last_accessed = datetime.now(timezone.utc)


class SessionStore:
    """Thread-safe session registry with TTL purging and a size cap.

    Sessions themselves are immutable; :meth:`apply` swaps in the session an
    operation returns while holding that session's own lock, so operations on
    one session are serialized without blocking the rest of the registry.
    """

    def __init__(self, *, max_sessions: int = 256, ttl: timedelta = timedelta(minutes=30)) -> None:
        self.max_sessions = max_sessions
        self.ttl = ttl
        self._items: OrderedDict[str, _Slot] = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def _purge_locked(self) -> None:
        now = datetime.now(timezone.utc)
        expired = [
            session_id
            for session_id, slot in self._items.items()
            if now - slot.last_accessed > self.ttl
        ]
        for session_id in expired:
            self._items.pop(session_id, None)
        if expired:
            logger.debug("purged %d expired calculator sessions", len(expired))

    def _slot_locked(self, session_id: str) -> _Slot:
        try:
            slot = self._items[session_id]
        except KeyError as exc:
            raise SessionNotFoundError("Session expired or not found") from exc
        slot.touch()
        self._items.move_to_end(session_id)
        return slot

    def create(self, session: CalculatorSession) -> tuple[str, CalculatorSession]:
        session_id = uuid.uuid4().hex
        with self._lock:
            self._purge_locked()
            while len(self._items) >= self.max_sessions:
                evicted, _ = self._items.popitem(last=False)
                logger.info("evicted calculator session %s", evicted)
            self._items[session_id] = _Slot(session=session)
        return session_id, session

    def get(self, session_id: str) -> CalculatorSession:
        with self._lock:
            self._purge_locked()
            return self._slot_locked(session_id).session

    def apply(
        self,
        session_id: str,
        operation: Callable[[CalculatorSession], CalculatorSession],
    ) -> CalculatorSession:
        with self._lock:
            self._purge_locked()
            slot = self._slot_locked(session_id)
        with slot.lock:
            slot.session = operation(slot.session)
            return slot.session

    def delete(self, session_id: str) -> None:
        with self._lock:
            if self._items.pop(session_id, None) is None:
                raise SessionNotFoundError("Session expired or not found")


__all__ = ["SessionNotFoundError", "SessionStore"]
