"""Mini README: In-memory session store with periodic expiry sweeps.

Structure:
    * MemorySessionStore - maps session ids to payload dictionaries.

Each session carries an expiry timestamp refreshed on every write. Expired
sessions are invisible to ``get`` immediately, and are physically removed
by a sweep that runs at most once per ``check_period``. The sweep is
triggered from inside the store's own calls, so no timer thread is needed.
"""

from __future__ import annotations

import secrets
import threading
from datetime import datetime, timedelta
from typing import Callable, Dict, Optional, Tuple

from ..logging_utils import get_logger

LOGGER = get_logger(__name__)

ONE_DAY = timedelta(days=1)


class MemorySessionStore:
    """Keep session payloads in memory until they expire."""

    def __init__(
        self,
        *,
        ttl: timedelta = ONE_DAY,
        check_period: timedelta = ONE_DAY,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._ttl = ttl
        self._check_period = check_period
        self._clock = clock
        self._sessions: Dict[str, Tuple[Dict[str, object], datetime]] = {}
        self._lock = threading.Lock()
        self._last_pruned = clock()
        LOGGER.debug("Session store ready ttl=%s check_period=%s", ttl, check_period)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def create(self, data: Optional[Dict[str, object]] = None) -> str:
        """Store a new session and return its identifier."""

        session_id = secrets.token_urlsafe(32)
        self.set(session_id, data or {})
        return session_id

    def get(self, session_id: str) -> Optional[Dict[str, object]]:
        """Return a copy of the session payload, or ``None`` if absent or expired."""

        with self._lock:
            now = self._clock()
            self._prune_if_due(now)
            entry = self._sessions.get(session_id)
            if entry is None:
                return None
            data, expires_at = entry
            if expires_at <= now:
                return None
            return dict(data)

    def set(self, session_id: str, data: Dict[str, object]) -> None:
        """Store the payload and push the expiry out by one ttl."""

        with self._lock:
            now = self._clock()
            self._prune_if_due(now)
            self._sessions[session_id] = (dict(data), now + self._ttl)

    def destroy(self, session_id: str) -> bool:
        """Drop a session; report whether one was stored."""

        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    def prune(self) -> int:
        """Remove every expired session and return how many were dropped."""

        with self._lock:
            return self._prune(self._clock())

    def _prune_if_due(self, now: datetime) -> None:
        if now - self._last_pruned >= self._check_period:
            self._prune(now)

    def _prune(self, now: datetime) -> int:
        expired = [sid for sid, (_, expires_at) in self._sessions.items() if expires_at <= now]
        for session_id in expired:
            del self._sessions[session_id]
        self._last_pruned = now
        if expired:
            LOGGER.info("Pruned %s expired sessions", len(expired))
        return len(expired)
