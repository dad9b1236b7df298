import logging
import threading
import time
from typing import Any, Callable, Dict, Optional

from .interfaces import MISSING

logger = logging.getLogger(__name__)


class MemorySession:
    """Session values held in process memory."""

    def __init__(self, session_id: str, clock: Callable[[], float] = time.time):
        self._session_id = session_id
        self._clock = clock
        self._values: Dict[str, Any] = {}
        self._lock = threading.Lock()
        self.created_at = clock()
        self.last_access = self.created_at

    async def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._values[key] = value
            self.last_access = self._clock()

    async def get(self, key: str) -> Any:
        with self._lock:
            self.last_access = self._clock()
            return self._values.get(key, MISSING)

    async def delete(self, key: str) -> None:
        with self._lock:
            self._values.pop(key, None)
            self.last_access = self._clock()

    def identifier(self) -> str:
        return self._session_id

    def touch(self) -> None:
        with self._lock:
            self.last_access = self._clock()

    def is_expired(self, max_lifetime: int, now: float) -> bool:
        with self._lock:
            return self.last_access + max_lifetime < now

    def __repr__(self) -> str:
        return f"MemorySession({self._session_id[:8]}..., keys={len(self._values)})"


class MemoryProvider:
    """
    Reference provider keeping every session in a dict.

    Safe to call from several threads or tasks at once; the map is guarded
    by its own lock independently of the manager's lock.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        """
        Initialize memory provider.

        Args:
            clock: Returns the current time in seconds (time.time by default)
        """
        self._clock = clock
        self._sessions: Dict[str, MemorySession] = {}
        self._lock = threading.Lock()

    async def session_init(self, session_id: str) -> MemorySession:
        session = MemorySession(session_id, clock=self._clock)
        with self._lock:
            self._sessions[session_id] = session
        logger.debug(f"Initialized memory session {session_id[:8]}...")
        return session

    async def session_read(
        self, session_id: str, max_lifetime: Optional[int] = None
    ) -> MemorySession:
        """
        Return the session for an id, creating it when absent or expired.

        An entry idle past max_lifetime is replaced by an empty session under
        the same id, so values never outlive the lifetime between GC ticks.
        """
        now = self._clock()
        with self._lock:
            session = self._sessions.get(session_id)
            stale = (
                session is not None
                and max_lifetime is not None
                and session.is_expired(max_lifetime, now)
            )
            if session is None or stale:
                session = MemorySession(session_id, clock=self._clock)
                self._sessions[session_id] = session
                logger.debug(
                    f"{'Replaced expired' if stale else 'Recreated'} "
                    f"memory session {session_id[:8]}..."
                )
                return session
        session.touch()
        return session

    async def session_destroy(self, session_id: str) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)

    async def session_gc(self, max_lifetime: int) -> int:
        """
        Evict sessions idle for longer than max_lifetime.

        Logic:
        1. Read the clock once for the whole sweep
        2. Collect ids where last_access + max_lifetime < now
        3. Remove them from the map
        """
        now = self._clock()
        with self._lock:
            expired = [
                sid for sid, session in self._sessions.items()
                if session.is_expired(max_lifetime, now)
            ]
            for sid in expired:
                del self._sessions[sid]
        return len(expired)

    def count(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __len__(self) -> int:
        return self.count()

    def __contains__(self, session_id: object) -> bool:
        with self._lock:
            return session_id in self._sessions
