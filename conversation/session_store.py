"""Bounded in-process storage for live voice sessions."""
from __future__ import annotations

import threading
import time
from collections import OrderedDict
from contextlib import contextmanager
from typing import Callable, Dict, Iterator, Optional, Protocol, Tuple

from .models import VoiceInterviewSession


class SessionStore(Protocol):
    def get(self, session_id: str) -> Optional[VoiceInterviewSession]: ...

    def put(self, session: VoiceInterviewSession) -> None: ...

    def delete(self, session_id: str) -> bool: ...

    def lock(self, session_id: str): ...


class InMemorySessionStore:
    """LRU + idle-TTL map of voice sessions with one mutation lock per session.

    A session idle for longer than ``ttl_seconds`` is dropped on the next
    access, and inserting beyond ``max_sessions`` drops the least recently used
    session.
    """

    def __init__(
        self,
        *,
        max_sessions: int = 1000,
        ttl_seconds: float = 4 * 60 * 60,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        if max_sessions < 1:
            raise ValueError("max_sessions must be at least 1")
        self._max = max_sessions
        self._ttl = ttl_seconds
        self._clock = clock or time.monotonic
        self._items: "OrderedDict[str, Tuple[VoiceInterviewSession, float]]" = OrderedDict()
        self._locks: Dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    def __len__(self) -> int:
        with self._guard:
            self._purge_expired(self._clock())
            return len(self._items)

    def _drop(self, session_id: str) -> None:
        self._items.pop(session_id, None)
        self._locks.pop(session_id, None)

    def _purge_expired(self, now: float) -> None:
        # Entries are kept in access order, so expired ones sit at the front.
        while self._items:
            session_id, (_, touched) = next(iter(self._items.items()))
            if now - touched <= self._ttl:
                break
            self._drop(session_id)

    def get(self, session_id: str) -> Optional[VoiceInterviewSession]:
        with self._guard:
            now = self._clock()
            self._purge_expired(now)
            entry = self._items.get(session_id)
            if entry is None:
                return None
            self._items[session_id] = (entry[0], now)
            self._items.move_to_end(session_id)
            return entry[0]

    def put(self, session: VoiceInterviewSession) -> None:
        with self._guard:
            now = self._clock()
            self._purge_expired(now)
            self._items[session.session_id] = (session, now)
            self._items.move_to_end(session.session_id)
            while len(self._items) > self._max:
                oldest = next(iter(self._items))
                self._drop(oldest)

    def delete(self, session_id: str) -> bool:
        with self._guard:
            existed = session_id in self._items
            self._drop(session_id)
            return existed

    @contextmanager
    def lock(self, session_id: str) -> Iterator[None]:
        """Serialise mutations of one session; other sessions are unaffected."""

        with self._guard:
            if session_id in self._items:
                session_lock = self._locks.setdefault(session_id, threading.Lock())
            else:
                # Unknown or evicted ids get a throwaway lock that is never registered.
                session_lock = threading.Lock()
        with session_lock:
            yield


__all__ = ["InMemorySessionStore", "SessionStore"]
